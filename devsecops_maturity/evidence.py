"""
Evidence codec — converts uploaded files to the inline base64 form stored
on an answer, and back.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .models import Evidence

logger = logging.getLogger("devsecops_maturity.evidence")

DEFAULT_MIME_TYPE = "application/octet-stream"


class EvidenceReadError(Exception):
    """Raised when evidence content cannot be read, decoded or written."""
    pass


def guess_mime_type(file_name: str) -> str:
    mime, _ = mimetypes.guess_type(file_name)
    return mime or DEFAULT_MIME_TYPE


def encode_evidence(
    data: bytes,
    file_name: str,
    mime_type: Optional[str] = None,
    uploaded_at: Optional[str] = None,
) -> Evidence:
    """Wrap raw file bytes as an Evidence record with a base64 payload."""
    return Evidence(
        file_name=file_name,
        file_size=len(data),
        mime_type=mime_type or guess_mime_type(file_name),
        uploaded_at=uploaded_at or datetime.now(timezone.utc).isoformat(),
        file_data=base64.b64encode(data).decode("ascii"),
    )


def decode_evidence(evidence: Evidence) -> bytes:
    """Return the original file bytes of an Evidence record."""
    try:
        return base64.b64decode(evidence.file_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EvidenceReadError(f"Evidence payload for {evidence.file_name} is not valid base64: {e}") from e


async def read_evidence(path: str | Path, mime_type: Optional[str] = None) -> Evidence:
    """
    Read a file and encode it as Evidence.
    The read runs in a worker thread; failures raise EvidenceReadError.
    """
    file_path = Path(path)
    try:
        data = await asyncio.to_thread(file_path.read_bytes)
    except OSError as e:
        raise EvidenceReadError(f"Cannot read evidence file {file_path}: {e}") from e

    logger.debug(f"Read {len(data)} bytes of evidence from {file_path}")
    return encode_evidence(data, file_path.name, mime_type=mime_type)


def write_evidence(evidence: Evidence, dest: str | Path) -> Path:
    """
    Restore an attached file to disk. A directory destination receives the
    file under its original name.
    """
    target = Path(dest)
    if target.is_dir():
        name = Path(evidence.file_name).name
        target = target / (name if name not in ("", "..") else "evidence")
    try:
        target.write_bytes(decode_evidence(evidence))
    except OSError as e:
        raise EvidenceReadError(f"Cannot write evidence to {target}: {e}") from e
    return target

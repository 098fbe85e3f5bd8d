"""Tests for the evidence codec."""

import asyncio

import pytest

from devsecops_maturity.evidence import (
    DEFAULT_MIME_TYPE,
    EvidenceReadError,
    decode_evidence,
    encode_evidence,
    read_evidence,
    write_evidence,
)
from devsecops_maturity.models import Evidence


def test_encode_decode_is_byte_identical():
    data = bytes(range(256)) * 4
    evidence = encode_evidence(data, "dump.bin", mime_type="application/x-custom")
    assert evidence.file_size == len(data)
    assert evidence.file_name == "dump.bin"
    assert evidence.mime_type == "application/x-custom"
    assert decode_evidence(evidence) == data


def test_encode_guesses_mime_type():
    assert encode_evidence(b"# notes", "README.txt").mime_type == "text/plain"
    assert encode_evidence(b"\x00", "blob.unknownext").mime_type == DEFAULT_MIME_TYPE


def test_encode_keeps_supplied_timestamp():
    evidence = encode_evidence(b"x", "a.txt", uploaded_at="2024-05-01T00:00:00+00:00")
    assert evidence.uploaded_at == "2024-05-01T00:00:00+00:00"


def test_decode_rejects_corrupt_payload():
    evidence = Evidence("a.txt", 1, "text/plain", "t", "***not base64***")
    with pytest.raises(EvidenceReadError):
        decode_evidence(evidence)


def test_read_evidence_from_file(tmp_path):
    path = tmp_path / "coverage.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n")
    evidence = asyncio.run(read_evidence(path))
    assert evidence.file_name == "coverage.png"
    assert evidence.mime_type == "image/png"
    assert decode_evidence(evidence) == b"\x89PNG\r\n\x1a\n"


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(EvidenceReadError):
        asyncio.run(read_evidence(tmp_path / "absent.pdf"))


def test_write_evidence_to_directory_and_file(tmp_path):
    evidence = encode_evidence(b"report body", "report.txt")
    into_dir = write_evidence(evidence, tmp_path)
    assert into_dir == tmp_path / "report.txt"
    assert into_dir.read_bytes() == b"report body"

    explicit = write_evidence(evidence, tmp_path / "copy.txt")
    assert explicit.read_bytes() == b"report body"


def test_write_evidence_keeps_stored_name_inside_directory(tmp_path):
    evidence = encode_evidence(b"payload", "../../escape.txt")
    target = tmp_path / "restore"
    target.mkdir()
    written = write_evidence(evidence, target)
    assert written == target / "escape.txt"
    assert not (tmp_path / "escape.txt").exists()


def test_write_evidence_into_missing_directory_raises(tmp_path):
    evidence = encode_evidence(b"payload", "a.txt")
    with pytest.raises(EvidenceReadError):
        write_evidence(evidence, tmp_path / "no" / "such" / "dir" / "a.txt")

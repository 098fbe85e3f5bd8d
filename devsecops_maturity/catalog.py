"""
Pillar catalog: the eight DevSecOps pillars and their assessment questions.

Question ids follow ``<prefix>-<3-digit-seq>``. The prefix is the lowercase
pillar key, except Code Quality whose key is ``codeQuality`` and whose
questions use the ``quality`` prefix. Scoring resolves ids through
QUESTION_INDEX rather than by prefix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import QUESTIONS_PER_PILLAR


@dataclass(frozen=True)
class Question:
    """A single yes/no assessment question."""
    id: str                        # e.g. "quality-003"
    pillar_key: str                # Canonical pillar key, e.g. "codeQuality"
    question: str
    description: str
    tools: tuple[str, ...] = ()


@dataclass(frozen=True)
class Pillar:
    """A maturity category with a fixed, ordered set of questions."""
    key: str
    name: str
    description: str
    tools: tuple[str, ...]
    questions: tuple[Question, ...]


# ---------------------------------------------------------------------------
# Pillar order is part of the export contract
# ---------------------------------------------------------------------------
PILLAR_ORDER = (
    "code",
    "build",
    "codeQuality",
    "security",
    "testing",
    "package",
    "deploy",
    "monitoring",
)

# Id prefixes that differ from the lowercased pillar key
_PREFIX_OVERRIDES = {
    "codeQuality": "quality",
}


def pillar_prefix(pillar_key: str) -> str:
    """Return the question-id prefix used by a pillar."""
    return _PREFIX_OVERRIDES.get(pillar_key, pillar_key.lower())


def _pillar(key: str, name: str, description: str, tools: list[str],
            questions: list[tuple[str, str, list[str]]]) -> Pillar:
    prefix = pillar_prefix(key)
    return Pillar(
        key=key,
        name=name,
        description=description,
        tools=tuple(tools),
        questions=tuple(
            Question(
                id=f"{prefix}-{seq:03d}",
                pillar_key=key,
                question=text,
                description=detail,
                tools=tuple(q_tools),
            )
            for seq, (text, detail, q_tools) in enumerate(questions, start=1)
        ),
    )


# ---------------------------------------------------------------------------
# Catalog data
# ---------------------------------------------------------------------------
_PILLARS = (
    _pillar(
        "code", "Code",
        "Source code management, version control, and branching strategies",
        ["Bitbucket", "Git"],
        [
            ("Is source code stored in Bitbucket with proper version control?",
             "Verify that all source code is properly versioned and stored in Bitbucket "
             "repositories with appropriate access controls.",
             ["Bitbucket"]),
            ("Are branching strategies implemented (GitFlow, GitHub Flow, etc.)?",
             "Check if the team follows established branching strategies for feature "
             "development, releases, and hotfixes.",
             ["Bitbucket", "Git"]),
            ("Are pull requests mandatory for code integration?",
             "Ensure that all code changes go through pull request review process before "
             "merging to main branches.",
             ["Bitbucket"]),
            ("Are code review policies enforced with minimum reviewer requirements?",
             "Verify that code review policies require minimum number of reviewers and "
             "approval before merge.",
             ["Bitbucket"]),
            ("Is automated merge conflict detection and resolution in place?",
             "Check if the system can detect and handle merge conflicts automatically "
             "where possible.",
             ["Bitbucket", "Git"]),
            ("Are commit messages following standardized conventions?",
             "Verify that commit messages follow a consistent format and include relevant "
             "information for tracking.",
             ["Git"]),
        ],
    ),
    _pillar(
        "build", "Build",
        "Automated build processes, compilation, and artifact generation",
        ["CloudBees Jenkins", "Artifactory"],
        [
            ("Is automated build triggered on code commits?",
             "Verify that builds are automatically initiated when code is pushed to the "
             "repository.",
             ["CloudBees Jenkins", "Bitbucket"]),
            ("Are build artifacts stored in Artifactory?",
             "Check if build artifacts are properly stored and versioned in Artifactory "
             "for distribution.",
             ["Artifactory"]),
            ("Is build process consistent across all environments (dev, preprod, prod)?",
             "Ensure that the same build process is used across development, "
             "pre-production, and production environments.",
             ["CloudBees Jenkins"]),
            ("Are build failures immediately notified to development teams?",
             "Verify that build failure notifications are sent promptly to relevant team "
             "members.",
             ["CloudBees Jenkins"]),
            ("Is build history and logs retained for troubleshooting?",
             "Check if build history and detailed logs are maintained for debugging and "
             "audit purposes.",
             ["CloudBees Jenkins"]),
            ("Are parallel builds implemented to optimize build time?",
             "Verify if builds can run in parallel to reduce overall build duration.",
             ["CloudBees Jenkins"]),
        ],
    ),
    _pillar(
        "codeQuality", "Code Quality",
        "Static code analysis, quality metrics, and technical debt management",
        ["SonarQube"],
        [
            ("Is SonarQube integrated into the build pipeline?",
             "Verify that SonarQube analysis is part of the automated build process for "
             "continuous code quality monitoring.",
             ["SonarQube", "CloudBees Jenkins"]),
            ("Are quality gates configured to prevent poor quality code deployment?",
             "Check if quality gates are set up to block deployments when code quality "
             "metrics fall below thresholds.",
             ["SonarQube"]),
            ("Are code coverage thresholds enforced (minimum 80%)?",
             "Verify that code coverage requirements are enforced and maintained at "
             "acceptable levels.",
             ["SonarQube"]),
            ("Is technical debt tracked and managed regularly?",
             "Check if technical debt is monitored, tracked, and regularly addressed by "
             "development teams.",
             ["SonarQube"]),
            ("Are code smells and bugs automatically identified and reported?",
             "Verify that code smells, bugs, and vulnerabilities are automatically "
             "detected and reported.",
             ["SonarQube"]),
            ("Are coding standards and best practices enforced?",
             "Check if coding standards are defined, documented, and automatically "
             "enforced through tooling.",
             ["SonarQube"]),
        ],
    ),
    _pillar(
        "security", "Security",
        "Security scanning, vulnerability management, and compliance",
        ["Fortify", "NexusIQ", "CyberArk"],
        [
            ("Is Fortify SAST scanning integrated into the build pipeline?",
             "Verify that Fortify Static Application Security Testing is part of the "
             "continuous integration process.",
             ["Fortify", "CloudBees Jenkins"]),
            ("Is NexusIQ scanning dependencies for vulnerabilities?",
             "Check if third-party dependencies are scanned for known security "
             "vulnerabilities using NexusIQ.",
             ["NexusIQ"]),
            ("Are secrets managed through CyberArk instead of hardcoded values?",
             "Verify that application secrets and credentials are managed through "
             "CyberArk, not hardcoded in source code.",
             ["CyberArk"]),
            ("Are security vulnerabilities tracked and remediated promptly?",
             "Check if security vulnerabilities are properly tracked, prioritized, and "
             "remediated within defined SLAs.",
             ["Fortify", "NexusIQ"]),
            ("Is security scanning performed across all environments?",
             "Verify that security scanning is performed consistently across development, "
             "pre-production, and production environments.",
             ["Fortify", "NexusIQ"]),
            ("Are security policies enforced to block deployments with critical vulnerabilities?",
             "Check if security gates prevent deployment of applications with critical "
             "security vulnerabilities.",
             ["Fortify", "NexusIQ"]),
        ],
    ),
    _pillar(
        "testing", "Testing",
        "Automated testing strategies, test coverage, and quality assurance",
        ["CloudBees Jenkins", "JUnit", "Selenium"],
        [
            ("Are unit tests automated and integrated into the build pipeline?",
             "Verify that unit tests run automatically as part of the build process with "
             "appropriate coverage.",
             ["CloudBees Jenkins", "JUnit"]),
            ("Are integration tests performed automatically between components?",
             "Check if integration testing is automated to validate interactions between "
             "different system components.",
             ["CloudBees Jenkins"]),
            ("Is automated UI testing implemented using tools like Selenium?",
             "Verify that user interface testing is automated using appropriate testing "
             "frameworks.",
             ["Selenium", "CloudBees Jenkins"]),
            ("Are performance tests automated for critical application paths?",
             "Check if performance testing is automated for key user journeys and system "
             "bottlenecks.",
             ["CloudBees Jenkins"]),
            ("Is test data management automated and environment-specific?",
             "Verify that test data is properly managed, anonymized, and appropriate for "
             "each testing environment.",
             ["CloudBees Jenkins"]),
            ("Are test results reported and tracked for trend analysis?",
             "Check if test results are properly reported, tracked, and analyzed for "
             "quality trends.",
             ["CloudBees Jenkins"]),
        ],
    ),
    _pillar(
        "package", "Package",
        "Package management, dependency management, and artifact versioning",
        ["Artifactory", "Docker"],
        [
            ("Are application packages stored in Artifactory with proper versioning?",
             "Verify that all application packages are stored in Artifactory with "
             "semantic versioning.",
             ["Artifactory"]),
            ("Is Docker containerization implemented for applications?",
             "Check if applications are containerized using Docker for consistent "
             "deployment across environments.",
             ["Docker", "Artifactory"]),
            ("Are base images scanned for vulnerabilities before use?",
             "Verify that Docker base images are scanned for security vulnerabilities "
             "before being used.",
             ["Docker", "NexusIQ"]),
            ("Is package promotion automated between environments?",
             "Check if packages are automatically promoted from development through to "
             "production environments.",
             ["Artifactory", "CloudBees Jenkins"]),
            ("Are dependency updates managed and tested automatically?",
             "Verify that dependency updates are managed systematically with automated "
             "testing.",
             ["Artifactory", "NexusIQ"]),
            ("Is package integrity verified through checksums and signatures?",
             "Check if package integrity is maintained through cryptographic checksums "
             "and digital signatures.",
             ["Artifactory"]),
        ],
    ),
    _pillar(
        "deploy", "Deploy",
        "Deployment automation, infrastructure as code, and release management",
        ["Ansible", "CloudBees Jenkins"],
        [
            ("Is deployment automated using Ansible across all environments?",
             "Verify that deployments are fully automated using Ansible playbooks for all "
             "environments.",
             ["Ansible", "CloudBees Jenkins"]),
            ("Are infrastructure changes managed as code (Infrastructure as Code)?",
             "Check if infrastructure changes are version controlled and managed through "
             "code.",
             ["Ansible", "Bitbucket"]),
            ("Is blue-green or canary deployment strategy implemented?",
             "Verify that deployment strategies minimize downtime and risk through "
             "blue-green or canary approaches.",
             ["Ansible"]),
            ("Are rollback procedures automated and tested?",
             "Check if rollback procedures are automated and regularly tested for quick "
             "recovery.",
             ["Ansible", "CloudBees Jenkins"]),
            ("Is deployment approval workflow implemented for production?",
             "Verify that production deployments require appropriate approvals before "
             "execution.",
             ["CloudBees Jenkins"]),
            ("Are deployment configurations environment-specific and externalized?",
             "Check if deployment configurations are externalized and specific to each "
             "environment.",
             ["Ansible", "CyberArk"]),
        ],
    ),
    _pillar(
        "monitoring", "Monitoring",
        "Application monitoring, logging, observability, and alerting",
        ["Dynatrace", "Opensearch"],
        [
            ("Is Dynatrace monitoring configured for application performance?",
             "Verify that Dynatrace is configured to monitor application performance, "
             "user experience, and infrastructure.",
             ["Dynatrace"]),
            ("Are application logs centralized in Opensearch?",
             "Check if application logs are centrally collected, indexed, and searchable "
             "through Opensearch.",
             ["Opensearch"]),
            ("Are alerting rules configured for critical system metrics?",
             "Verify that appropriate alerts are configured for critical system metrics "
             "and thresholds.",
             ["Dynatrace"]),
            ("Is distributed tracing implemented for microservices?",
             "Check if distributed tracing is implemented to track requests across "
             "microservice architectures.",
             ["Dynatrace"]),
            ("Are dashboards created for real-time system visibility?",
             "Verify that real-time dashboards provide visibility into system health and "
             "performance.",
             ["Dynatrace", "Opensearch"]),
            ("Is log retention policy implemented for compliance and troubleshooting?",
             "Check if log retention policies are defined and implemented for compliance "
             "and operational needs.",
             ["Opensearch"]),
        ],
    ),
)

_PILLARS_BY_KEY = {p.key: p for p in _PILLARS}


def _build_question_index() -> dict[str, str]:
    """Map every question id to its pillar key, validating the catalog shape."""
    if tuple(p.key for p in _PILLARS) != PILLAR_ORDER:
        raise ValueError("Catalog pillars are out of export order")

    index: dict[str, str] = {}
    for pillar in _PILLARS:
        if len(pillar.questions) != QUESTIONS_PER_PILLAR:
            raise ValueError(
                f"Pillar {pillar.key} has {len(pillar.questions)} questions, "
                f"expected {QUESTIONS_PER_PILLAR}"
            )
        prefix = pillar_prefix(pillar.key)
        for q in pillar.questions:
            if not q.id.startswith(f"{prefix}-"):
                raise ValueError(f"Question {q.id} does not carry prefix '{prefix}'")
            if q.id in index:
                raise ValueError(f"Duplicate question id {q.id}")
            index[q.id] = pillar.key
    return index


# Question id → pillar key, built once at import
QUESTION_INDEX: dict[str, str] = _build_question_index()
_QUESTIONS_BY_ID = {q.id: q for p in _PILLARS for q in p.questions}


# ---------------------------------------------------------------------------
# Read-only accessors
# ---------------------------------------------------------------------------

def all_pillars() -> tuple[Pillar, ...]:
    return _PILLARS


def get_pillar(pillar_key: str) -> Pillar:
    """Return a pillar by key. Raises KeyError for unknown keys."""
    return _PILLARS_BY_KEY[pillar_key]


def question_count(pillar_key: str) -> int:
    return len(get_pillar(pillar_key).questions)


def total_question_count() -> int:
    return len(QUESTION_INDEX)


def pillar_for_question(question_id: str) -> Optional[str]:
    return QUESTION_INDEX.get(question_id)


def get_question(question_id: str) -> Optional[Question]:
    return _QUESTIONS_BY_ID.get(question_id)

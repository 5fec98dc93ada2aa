"""Canonical report status/priority vocabulary and boundary mappings.

Three status vocabularies exist around the report store:

* mock store labels: ``Open``, ``In Progress``, ``Resolved``
* geo/admin reports: ``draft``, ``submitted``, ``approved``, ``rejected``
  (plus ``pending``, ``in-progress``, ``resolved`` on the admin type)
* relational schema: ``pending``, ``in_progress``, ``assigned``,
  ``resolved``, ``closed``, ``rejected``

Nothing crosses a boundary without going through one of the mapping
tables below. Unknown labels raise instead of falling back.
"""

from __future__ import annotations

import enum


class ReportStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class ReportPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class UnknownStatusError(ValueError):
    """Raised when a label has no mapping in the requested vocabulary."""


class IllegalTransitionError(ValueError):
    """Raised when transition enforcement rejects a status change."""


# Chart columns the canonical statuses fold into
BUCKET_OPEN = "open"
BUCKET_IN_PROGRESS = "in_progress"
BUCKET_CLOSED = "closed"

_BUCKETS = {
    ReportStatus.OPEN: BUCKET_OPEN,
    ReportStatus.IN_PROGRESS: BUCKET_IN_PROGRESS,
    ReportStatus.RESOLVED: BUCKET_CLOSED,
    ReportStatus.REJECTED: BUCKET_CLOSED,
}

STATUS_LABELS = {
    ReportStatus.OPEN: "Open",
    ReportStatus.IN_PROGRESS: "In Progress",
    ReportStatus.RESOLVED: "Resolved",
    ReportStatus.REJECTED: "Rejected",
}

MOCK_TO_STATUS = {
    "Open": ReportStatus.OPEN,
    "In Progress": ReportStatus.IN_PROGRESS,
    "Resolved": ReportStatus.RESOLVED,
}

STATUS_TO_MOCK = {
    ReportStatus.OPEN: "Open",
    ReportStatus.IN_PROGRESS: "In Progress",
    ReportStatus.RESOLVED: "Resolved",
    ReportStatus.REJECTED: "Resolved",
}

GEO_TO_STATUS = {
    "draft": ReportStatus.OPEN,
    "submitted": ReportStatus.OPEN,
    "pending": ReportStatus.OPEN,
    "approved": ReportStatus.IN_PROGRESS,
    "in-progress": ReportStatus.IN_PROGRESS,
    "resolved": ReportStatus.RESOLVED,
    "rejected": ReportStatus.REJECTED,
}

RELATIONAL_TO_STATUS = {
    "pending": ReportStatus.OPEN,
    "in_progress": ReportStatus.IN_PROGRESS,
    "assigned": ReportStatus.IN_PROGRESS,
    "resolved": ReportStatus.RESOLVED,
    "closed": ReportStatus.RESOLVED,
    "rejected": ReportStatus.REJECTED,
}

STATUS_TO_RELATIONAL = {
    ReportStatus.OPEN: "pending",
    ReportStatus.IN_PROGRESS: "in_progress",
    ReportStatus.RESOLVED: "resolved",
    ReportStatus.REJECTED: "rejected",
}

VOCABULARIES = {
    "mock": MOCK_TO_STATUS,
    "geo": GEO_TO_STATUS,
    "relational": RELATIONAL_TO_STATUS,
}

# Used only when enforce_status_transitions is on
ALLOWED_TRANSITIONS = {
    ReportStatus.OPEN: {ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED, ReportStatus.REJECTED},
    ReportStatus.IN_PROGRESS: {ReportStatus.OPEN, ReportStatus.RESOLVED, ReportStatus.REJECTED},
    ReportStatus.RESOLVED: {ReportStatus.IN_PROGRESS},
    ReportStatus.REJECTED: {ReportStatus.OPEN},
}


def status_from(vocabulary: str, label: str) -> ReportStatus:
    """Map a label from a named vocabulary onto the canonical status."""
    try:
        table = VOCABULARIES[vocabulary]
    except KeyError:
        raise UnknownStatusError(f"Unknown status vocabulary: {vocabulary}") from None
    try:
        return table[label]
    except KeyError:
        raise UnknownStatusError(f"'{label}' is not a {vocabulary} status") from None


def status_from_mock(label: str) -> ReportStatus:
    return status_from("mock", label)


def status_from_geo(label: str) -> ReportStatus:
    return status_from("geo", label)


def status_from_relational(label: str) -> ReportStatus:
    return status_from("relational", label)


def status_to_mock(status: ReportStatus) -> str:
    return STATUS_TO_MOCK[status]


def status_to_relational(status: ReportStatus) -> str:
    return STATUS_TO_RELATIONAL[status]


def bucket_key(status: ReportStatus) -> str:
    """Fold a canonical status into the open / in_progress / closed split."""
    return _BUCKETS[status]


def parse_priority(label: str | None) -> ReportPriority:
    """Accept both ``Low/Medium/High`` and ``low/medium/high/critical``."""
    if label is None or not label.strip():
        return ReportPriority.MEDIUM
    try:
        return ReportPriority(label.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown priority: {label}") from None


def check_transition(current: ReportStatus, new: ReportStatus) -> None:
    """Raise if ``new`` may not follow ``current``."""
    if current == new:
        return
    if new not in ALLOWED_TRANSITIONS[current]:
        raise IllegalTransitionError(
            f"Cannot move report from {current.value} to {new.value}"
        )

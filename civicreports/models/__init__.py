"""SQLAlchemy models."""

from __future__ import annotations

from civicreports.models.report import ReportRow

__all__ = [
    "ReportRow",
]

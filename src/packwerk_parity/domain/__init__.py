"""Domain models - report entries and run state."""

from .report import (
    ComparisonStatus,
    DiffEntry,
    Report,
    ReportEntry,
    RunState,
)

__all__ = ["ComparisonStatus", "DiffEntry", "Report", "ReportEntry", "RunState"]

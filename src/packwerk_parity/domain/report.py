"""
Report domain model.

A run produces one ReportEntry per evaluated input unit. Entries are frozen
once built and collected in a Report, an ordered, write-once mapping from
unit path to entry.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

REFERENCE_MISSING_MARKER = "no cache"
EXPERIMENTAL_MISSING_MARKER = "no experimental_cache"
NO_DIFFERENCE_LINE = "No difference!"


class ComparisonStatus(Enum):
    """Classification of one unit's comparison."""

    MATCH = "match"
    MISMATCH = "mismatch"


class RunState(Enum):
    """Run controller states."""

    RUNNING = "running"
    HALTED = "halted"
    COMPLETED = "completed"


def render_value(value: Any) -> str:
    """Render a JSON-compatible value as compact, deterministic text."""
    return json.dumps(value, ensure_ascii=False, default=str)


@dataclass(frozen=True)
class DiffEntry:
    """
    One structural difference between two record sets.

    Attributes:
        op: "+" (only in experimental), "-" (only in reference) or "~" (changed)
        path: Location inside the record set, e.g. "[0].value" or "[2]"
        old: Reference value (None for "+")
        new: Experimental value (None for "-")
    """

    op: str
    path: str
    old: Any = None
    new: Any = None

    def as_list(self) -> List[Any]:
        """Hashdiff-style list form: [op, path, value] or [op, path, old, new]."""
        if self.op == "~":
            return [self.op, self.path, self.old, self.new]
        if self.op == "-":
            return [self.op, self.path, self.old]
        return [self.op, self.path, self.new]

    def describe(self) -> str:
        if self.op == "~":
            return f"~ {self.path}: {render_value(self.old)} -> {render_value(self.new)}"
        value = self.old if self.op == "-" else self.new
        return f"{self.op} {self.path}: {render_value(value)}"


@dataclass(frozen=True)
class ReportEntry:
    """
    Outcome of comparing one input unit.

    Attributes:
        unit: Project-relative path of the input file
        reference_location: Reference artifact path, None when absent
        experimental_location: Experimental artifact path, None when absent
        status: MATCH or MISMATCH
        reference_count: Number of reference records (None if not read)
        experimental_count: Number of experimental records (None if not read)
        diff: Structural differences, empty for MATCH
        reference_records: Normalized reference records (kept for MISMATCH)
        experimental_records: Normalized experimental records (kept for MISMATCH)
        reason: Failure description when the comparison itself failed
    """

    unit: str
    reference_location: Optional[Path]
    experimental_location: Optional[Path]
    status: ComparisonStatus
    reference_count: Optional[int] = None
    experimental_count: Optional[int] = None
    diff: List[DiffEntry] = field(default_factory=list)
    reference_records: Optional[List[Dict[str, Any]]] = None
    experimental_records: Optional[List[Dict[str, Any]]] = None
    reason: Optional[str] = None

    @property
    def is_mismatch(self) -> bool:
        return self.status is ComparisonStatus.MISMATCH

    def location_lines(self) -> List[str]:
        reference = (
            str(self.reference_location)
            if self.reference_location is not None
            else REFERENCE_MISSING_MARKER
        )
        experimental = (
            str(self.experimental_location)
            if self.experimental_location is not None
            else EXPERIMENTAL_MISSING_MARKER
        )
        return [reference, experimental]

    def to_lines(self) -> List[str]:
        """
        Render the entry as the ordered list of strings stored in the report.

        MATCH entries only carry the locations and a "No difference!" line.
        MISMATCH entries carry counts, both record sets and the diff so the
        disagreement can be inspected without rerunning.
        """
        lines = self.location_lines()

        if not self.is_mismatch:
            lines.append(NO_DIFFERENCE_LINE)
            return lines

        if self.reason:
            lines.append(f"comparison failed: {self.reason}")
        if self.reference_count is not None:
            lines.append(f"cache has {self.reference_count} unresolved references")
        if self.experimental_count is not None:
            lines.append(
                f"experimental cache has {self.experimental_count} unresolved references"
            )
        if self.reason is None:
            lines.append(f"diff count is {len(self.diff)}")
        if self.reference_records is not None:
            lines.append(f"cache content: {render_value(self.reference_records)}")
        if self.experimental_records is not None:
            lines.append(
                f"experimental_cache content: {render_value(self.experimental_records)}"
            )
        if self.diff:
            lines.append(f"diff is {render_value([entry.as_list() for entry in self.diff])}")

        return lines

    def summary(self) -> str:
        """One-line summary for logs and the completion message."""
        if not self.is_mismatch:
            return f"{self.unit}: MATCH"
        if self.reason:
            return f"{self.unit}: MISMATCH ({self.reason})"
        return (
            f"{self.unit}: MISMATCH ({len(self.diff)} differences, "
            f"{self.reference_count} vs {self.experimental_count} records)"
        )


class Report:
    """
    Ordered, write-once mapping from input unit to ReportEntry.

    Owned by the run controller while the run is in progress. The state
    attribute records where the run ended.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, ReportEntry] = {}
        self.state = RunState.RUNNING

    def add(self, entry: ReportEntry) -> None:
        if entry.unit in self._entries:
            raise ValueError(f"Report already has an entry for {entry.unit}")
        self._entries[entry.unit] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, unit: object) -> bool:
        return unit in self._entries

    def __getitem__(self, unit: str) -> ReportEntry:
        return self._entries[unit]

    @property
    def halted_on(self) -> Optional[ReportEntry]:
        """Entry that halted the run, None unless the run is HALTED."""
        if self.state is not RunState.HALTED or not self._entries:
            return None
        return next(reversed(self._entries.values()))

    def to_dict(self) -> Dict[str, List[str]]:
        """Serializable form: unit path -> descriptive lines."""
        return {unit: entry.to_lines() for unit, entry in self._entries.items()}

"""
Custom exception hierarchy for parity comparisons.

Per-unit failures (MissingArtifact, ParseError, MalformedOutput) are caught
at the evaluator/controller boundary and recorded in the report. Only
WriteError reaches the caller.
"""

from pathlib import Path
from typing import Optional, Sequence


class ParityCheckError(Exception):
    """
    Base exception for all comparison errors.

    The class name is used as the failure kind in report entries.
    """

    @property
    def kind(self) -> str:
        return type(self).__name__


class MissingArtifact(ParityCheckError):
    """
    Raised when one or both cache artifacts for a unit do not exist.

    Attributes:
        unit: Input unit being compared
        missing: Paths of the absent artifacts
    """

    def __init__(self, unit: str, missing: Sequence[Path]):
        self.unit = unit
        self.missing = [Path(path) for path in missing]
        names = ", ".join(str(path) for path in self.missing)
        super().__init__(f"Cache artifact missing for {unit}: {names}")


class ParseError(ParityCheckError):
    """Raised when an artifact's content cannot be decoded as JSON."""

    def __init__(self, location: Path, message: str):
        self.location = Path(location)
        super().__init__(f"Could not parse {location}: {message}")


class MalformedOutput(ParityCheckError):
    """
    Raised when decoded content lacks the expected record list.

    The location is unknown when the normalizer is called on an in-memory
    object; the evaluator fills it in.
    """

    def __init__(self, message: str, location: Optional[Path] = None):
        self.location = Path(location) if location is not None else None
        self.detail = message
        prefix = f"{location}: " if location is not None else ""
        super().__init__(f"{prefix}{message}")


class WriteError(ParityCheckError):
    """
    Raised when the report destination cannot be created or written.

    Fatal for the run: without the report all comparison work is lost.
    """

    def __init__(self, destination: Path, message: str):
        self.destination = Path(destination)
        super().__init__(f"Could not write report to {destination}: {message}")

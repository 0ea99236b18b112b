"""
Parity Evaluator - Compare both cache artifacts for one input unit

Loads the reference and experimental artifacts, normalizes each, diffs them
and classifies the unit as MATCH or MISMATCH.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from packwerk_parity.cache.layout import ArtifactLocations, CacheLayout
from packwerk_parity.comparison.differ import StructuralDiffer
from packwerk_parity.comparison.exceptions import (
    MalformedOutput,
    MissingArtifact,
    ParityCheckError,
    ParseError,
)
from packwerk_parity.comparison.normalizer import RecordNormalizer
from packwerk_parity.domain.report import ComparisonStatus, ReportEntry
from packwerk_parity.utils.logger import get_logger, short_digest

logger = get_logger(__name__)


def describe_error(error: BaseException) -> str:
    """Failure reason stored in report entries: "<Kind>: <message>"."""
    kind = error.kind if isinstance(error, ParityCheckError) else type(error).__name__
    return f"{kind}: {error}"


class ParityEvaluator:
    """
    Evaluate one input unit.

    Responsibilities:
    - Resolve both artifact locations through the cache layout
    - Read and decode each artifact (file handle closed right after parsing)
    - Normalize and diff the record sets
    - Build the ReportEntry
    """

    def __init__(
        self,
        layout: CacheLayout,
        normalizer: Optional[RecordNormalizer] = None,
        differ: Optional[StructuralDiffer] = None,
    ):
        self.layout = layout
        self.normalizer = normalizer or RecordNormalizer()
        self.differ = differ or StructuralDiffer(key_field=self.normalizer.key_field)

    def load(self, location: Path) -> List[Dict[str, Any]]:
        """
        Read, decode and normalize one artifact.

        Raises:
            ParseError: If the file is not valid UTF-8 JSON
            MalformedOutput: If the decoded object lacks the record list
        """
        with open(self.layout.open_path(location), "r", encoding="utf-8") as f:
            try:
                raw_output = json.load(f)
            except ValueError as e:
                raise ParseError(location, str(e)) from e

        try:
            return self.normalizer.normalize(raw_output)
        except MalformedOutput as e:
            raise MalformedOutput(e.detail, location=location) from e

    def compare(self, locations: ArtifactLocations) -> ReportEntry:
        """
        Compare both artifacts of a resolved unit.

        Raises:
            MissingArtifact: If either artifact is absent
            ParseError: If an artifact is not valid JSON
            MalformedOutput: If an artifact lacks the record list
        """
        if not locations.complete:
            raise MissingArtifact(locations.unit, locations.missing)

        reference = self.load(locations.reference_path)
        experimental = self.load(locations.experimental_path)
        differences = self.differ.diff(reference, experimental)

        if not differences:
            return ReportEntry(
                unit=locations.unit,
                reference_location=locations.reference,
                experimental_location=locations.experimental,
                status=ComparisonStatus.MATCH,
                reference_count=len(reference),
                experimental_count=len(experimental),
            )

        return ReportEntry(
            unit=locations.unit,
            reference_location=locations.reference,
            experimental_location=locations.experimental,
            status=ComparisonStatus.MISMATCH,
            reference_count=len(reference),
            experimental_count=len(experimental),
            diff=differences,
            reference_records=reference,
            experimental_records=experimental,
        )

    def evaluate(self, unit: str) -> ReportEntry:
        """
        Evaluate one unit.

        A missing artifact is not an error for the run: the entry keeps the
        "no cache" / "no experimental_cache" marker and is a MISMATCH with
        reason MissingArtifact. ParseError and MalformedOutput propagate to
        the caller.

        Args:
            unit: Project-relative path of the input file

        Returns:
            ReportEntry for the unit
        """
        locations = self.layout.resolve(unit)
        context = {"unit": unit, "digest": short_digest(locations.digest)}

        try:
            entry = self.compare(locations)
        except MissingArtifact as e:
            logger.warning(
                "Cache artifact missing",
                operation="evaluate_unit",
                context={**context, "missing": [str(path) for path in e.missing]},
            )
            return self.failure_entry(unit, e, locations)

        logger.debug(entry.summary(), operation="evaluate_unit", context=context)
        return entry

    def failure_entry(
        self,
        unit: str,
        error: BaseException,
        locations: Optional[ArtifactLocations] = None,
    ) -> ReportEntry:
        """
        Build the MISMATCH entry for a unit whose comparison failed.

        Args:
            unit: Unit being evaluated
            error: The failure raised while evaluating it
            locations: Already resolved locations, resolved again if omitted

        Returns:
            MISMATCH ReportEntry carrying the failure description. Both
            locations are None when the unit cannot be resolved.
        """
        if locations is None:
            try:
                locations = self.layout.resolve(unit)
            except Exception as e:
                logger.warning(
                    "Cannot resolve unit for failure entry",
                    operation="evaluate_unit",
                    context={"unit": unit},
                    error=describe_error(e),
                )

        return ReportEntry(
            unit=unit,
            reference_location=locations.reference if locations else None,
            experimental_location=locations.experimental if locations else None,
            status=ComparisonStatus.MISMATCH,
            reason=describe_error(error),
        )

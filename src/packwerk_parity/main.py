"""
Parity check entry point

Regenerates the packwerk and experimental caches, compares them file by file
and stops at the first file whose unresolved references differ, like
`rspec --next-failure`. The report is written as YAML so the failing file
can be inspected without rerunning.

Usage:
    packwerk-parity
    python -m packwerk_parity

Environment:
    PARITY_* variables override settings (see config/settings.py)
    PARITY_LOG_LEVEL=DEBUG  (per-unit log lines)
"""

import sys
from pathlib import Path
from typing import List, Optional

from packwerk_parity.cache.layout import CacheLayout
from packwerk_parity.cache.producer import CacheGenerationError, CacheProducer
from packwerk_parity.cache.units import discover_units
from packwerk_parity.comparison.controller import RunController
from packwerk_parity.comparison.differ import StructuralDiffer
from packwerk_parity.comparison.evaluator import ParityEvaluator
from packwerk_parity.comparison.exceptions import WriteError
from packwerk_parity.comparison.normalizer import RecordNormalizer
from packwerk_parity.comparison.report_writer import ReportWriter
from packwerk_parity.config.settings import ConfigurationError, Settings
from packwerk_parity.domain.report import Report
from packwerk_parity.utils.logger import get_logger

logger = get_logger(__name__)


def build_controller(settings: Settings) -> RunController:
    """Wire layout, normalizer, differ and evaluator from settings."""
    layout = CacheLayout(
        project_root=settings.project_root,
        cache_dir=settings.cache_dir,
        experimental_suffix=settings.experimental_suffix,
    )
    normalizer = RecordNormalizer(
        record_field=settings.record_field,
        key_field=settings.key_field,
    )
    evaluator = ParityEvaluator(
        layout,
        normalizer=normalizer,
        differ=StructuralDiffer(key_field=settings.key_field),
    )
    return RunController(evaluator)


def completion_message(report: Report, report_path: Path) -> List[str]:
    lines = [f"Wrote content to: {report_path}"]
    halted = report.halted_on
    if halted is not None:
        lines.append(f"First mismatch: {halted.summary()}")
        lines.extend(f"  {entry.describe()}" for entry in halted.diff)
    else:
        lines.append(f"No difference in {len(report)} files")
    return lines


def run(settings: Settings) -> Report:
    """
    Perform one parity run and write its report.

    Raises:
        CacheGenerationError: If the packs binary cannot be built or run
        WriteError: If the report cannot be written
    """
    if settings.generate_caches:
        CacheProducer(settings.project_root, settings.packs_dir).produce()
    else:
        logger.info("Skipping cache generation", operation="run")

    units = discover_units(settings.project_root, settings.unit_pattern)
    logger.info(
        f"Comparing caches for {len(units)} files",
        operation="run",
        context={"pattern": settings.unit_pattern},
    )

    report = build_controller(settings).run(units)
    ReportWriter().write(report, settings.resolved_report_path)
    return report


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point. Takes no flags.

    Returns:
        0 when every step succeeded (whatever the parity outcome), 1 otherwise
    """
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        print(
            "packwerk-parity takes no arguments; configure it with PARITY_* variables",
            file=sys.stderr,
        )
        return 2

    try:
        settings = Settings.load()
        report = run(settings)
    except (ConfigurationError, CacheGenerationError, WriteError) as e:
        logger.error("Parity run failed", operation="main", error=str(e))
        print(f"Parity run failed: {e}", file=sys.stderr)
        return 1

    for line in completion_message(report, settings.resolved_report_path):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

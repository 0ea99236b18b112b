"""
Run Controller - Evaluate units in order until the first mismatch

States:
    RUNNING   -> evaluating units one at a time, in the given order
    HALTED    -> a MISMATCH entry was produced; later units are not evaluated
    COMPLETED -> every unit evaluated without a MISMATCH

Like `rspec --next-failure`, the run stops on the first problem so it can be
fixed before moving on.
"""

from typing import Iterable

from packwerk_parity.comparison.evaluator import ParityEvaluator
from packwerk_parity.domain.report import Report, ReportEntry, RunState
from packwerk_parity.utils.logger import get_logger

logger = get_logger(__name__)


def should_halt(entry: ReportEntry) -> bool:
    """Halt predicate: any MISMATCH stops the run."""
    return entry.is_mismatch


class RunController:
    """
    Drive a parity run over an ordered sequence of units.

    The Report is created per run and handed back to the caller; nothing is
    kept between runs.
    """

    def __init__(self, evaluator: ParityEvaluator):
        self.evaluator = evaluator
        self.state = RunState.COMPLETED

    def evaluate_unit(self, unit: str) -> ReportEntry:
        """
        Evaluate one unit, turning any failure into a MISMATCH entry.
        """
        try:
            return self.evaluator.evaluate(unit)
        except Exception as e:
            logger.error(
                "Comparison failed",
                operation="evaluate_unit",
                context={"unit": unit},
                error=str(e),
            )
            return self.evaluator.failure_entry(unit, e)

    def run(self, units: Iterable[str]) -> Report:
        """
        Evaluate units in order, stopping after the first MISMATCH.

        Args:
            units: Input units in their natural enumeration order

        Returns:
            Report with one entry per evaluated unit; its state is HALTED
            when a mismatch was found, COMPLETED otherwise
        """
        report = Report()
        self.state = RunState.RUNNING

        for unit in units:
            entry = self.evaluate_unit(unit)
            report.add(entry)

            if should_halt(entry):
                self.state = RunState.HALTED
                logger.info(
                    "Halting at first mismatch",
                    operation="run",
                    context={"unit": unit, "evaluated": len(report)},
                )
                break

        if self.state is RunState.RUNNING:
            self.state = RunState.COMPLETED
            logger.info(
                "All units match",
                operation="run",
                context={"evaluated": len(report)},
            )

        report.state = self.state
        return report

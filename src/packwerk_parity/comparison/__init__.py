"""Comparison engine - normalize, diff, evaluate and report parity."""

from packwerk_parity.comparison.controller import RunController, should_halt
from packwerk_parity.comparison.differ import StructuralDiffer, diff
from packwerk_parity.comparison.evaluator import ParityEvaluator
from packwerk_parity.comparison.exceptions import (
    MalformedOutput,
    MissingArtifact,
    ParityCheckError,
    ParseError,
    WriteError,
)
from packwerk_parity.comparison.normalizer import RecordNormalizer, normalize
from packwerk_parity.comparison.report_writer import ReportWriter

__all__ = [
    "RunController",
    "should_halt",
    "StructuralDiffer",
    "diff",
    "ParityEvaluator",
    "MalformedOutput",
    "MissingArtifact",
    "ParityCheckError",
    "ParseError",
    "WriteError",
    "RecordNormalizer",
    "normalize",
    "ReportWriter",
]

"""Report Writer - Serialize a Report to YAML."""

from pathlib import Path
from typing import Union

import yaml

from packwerk_parity.comparison.exceptions import WriteError
from packwerk_parity.domain.report import Report
from packwerk_parity.utils.logger import get_logger, log_operation

logger = get_logger(__name__)

DEFAULT_REPORT_PATH = "tmp/filename_to_digest_map.yml"


class ReportWriter:
    """Write the unit -> descriptive lines mapping as human-readable YAML."""

    def render(self, report: Report) -> str:
        return yaml.safe_dump(
            report.to_dict(),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=float("inf"),
        )

    @log_operation("write_report")
    def write(self, report: Report, destination: Union[str, Path]) -> Path:
        """
        Write the report, replacing any previous content.

        Args:
            report: Report produced by the run controller
            destination: Output file path; parent directories are created

        Returns:
            The destination path

        Raises:
            WriteError: If the destination cannot be created or written
        """
        destination = Path(destination)
        content = self.render(report)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with destination.open("w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise WriteError(destination, str(e)) from e

        logger.info(
            "Wrote parity report",
            operation="write_report",
            context={"path": str(destination), "entries": len(report)},
        )
        return destination

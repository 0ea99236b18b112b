"""
Cache Producer - Rebuild the packs binary and regenerate both caches

Runs, in order:
1. `cargo build --release` inside the packs checkout
2. `<packs>/target/release/packs generate-cache` inside the project root

The second step writes the reference and experimental artifacts for every
known file. A non-zero exit status is logged and the run carries on;
missing artifacts then show up per unit in the report.
"""

import subprocess  # nosec B404
from pathlib import Path
from typing import List, Sequence, Union

from packwerk_parity.utils.logger import get_logger, log_operation

logger = get_logger(__name__)

DEFAULT_PACKS_DIR = "../packs"
PACKS_BINARY = Path("target") / "release" / "packs"


class CacheGenerationError(Exception):
    """Raised when a cache generation command cannot be started."""

    pass


class CacheProducer:
    """
    Trigger cache (re)generation through the packs binary.

    Attributes:
        project_root: Directory the caches are generated for
        packs_dir: Checkout of the packs crate (relative to project_root)
    """

    def __init__(
        self,
        project_root: Union[str, Path] = ".",
        packs_dir: Union[str, Path] = DEFAULT_PACKS_DIR,
    ):
        self.project_root = Path(project_root)
        packs_dir = Path(packs_dir)
        self.packs_dir = packs_dir if packs_dir.is_absolute() else self.project_root / packs_dir

    @property
    def binary(self) -> Path:
        return self.packs_dir / PACKS_BINARY

    def build_command(self) -> List[str]:
        return ["cargo", "build", "--release"]

    def generate_command(self) -> List[str]:
        return [str(self.binary), "generate-cache"]

    def _run(self, command: Sequence[str], cwd: Path) -> int:
        logger.info(
            f"Running: {' '.join(command)}",
            operation="run_command",
            context={"cwd": str(cwd)},
        )
        try:
            completed = subprocess.run(list(command), cwd=str(cwd), check=False)  # nosec B603
        except OSError as e:
            raise CacheGenerationError(f"Could not run {' '.join(command)}: {e}") from e

        if completed.returncode != 0:
            logger.warning(
                f"Command exited with status {completed.returncode}",
                operation="run_command",
                context={"command": list(command), "cwd": str(cwd)},
            )
        return completed.returncode

    @log_operation("build_packs")
    def build(self) -> int:
        """Build the packs binary in release mode."""
        return self._run(self.build_command(), self.packs_dir)

    @log_operation("generate_caches")
    def generate(self) -> int:
        """Regenerate reference and experimental caches for every file."""
        return self._run(self.generate_command(), self.project_root)

    def produce(self) -> None:
        """
        Build, then generate caches.

        Raises:
            CacheGenerationError: If either command cannot be started
        """
        self.build()
        self.generate()

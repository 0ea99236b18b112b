"""
Cache layout - where the packs binary writes its per-file caches.

Each input unit maps to two artifacts named after the MD5 digest of its
project-relative path:

    <cache_dir>/<md5(unit)>                 reference (packwerk) parser
    <cache_dir>/<md5(unit)>-experimental    experimental parser
"""

import hashlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

DEFAULT_CACHE_DIR = "tmp/cache/packwerk"
DEFAULT_EXPERIMENTAL_SUFFIX = "-experimental"


@dataclass(frozen=True)
class ArtifactLocations:
    """Resolved artifact paths for one unit and whether each exists."""

    unit: str
    digest: str
    reference_path: Path
    experimental_path: Path
    reference_exists: bool
    experimental_exists: bool

    @property
    def reference(self) -> Optional[Path]:
        """Reference path, or None when the artifact is absent."""
        return self.reference_path if self.reference_exists else None

    @property
    def experimental(self) -> Optional[Path]:
        """Experimental path, or None when the artifact is absent."""
        return self.experimental_path if self.experimental_exists else None

    @property
    def missing(self) -> List[Path]:
        absent = []
        if not self.reference_exists:
            absent.append(self.reference_path)
        if not self.experimental_exists:
            absent.append(self.experimental_path)
        return absent

    @property
    def complete(self) -> bool:
        return self.reference_exists and self.experimental_exists


class CacheLayout:
    """
    Naming scheme shared with the cache producer.

    Paths in resolved locations are relative to the project root when the
    cache directory is given relative, which keeps the report readable.
    """

    def __init__(
        self,
        project_root: Union[str, Path] = ".",
        cache_dir: Union[str, Path] = DEFAULT_CACHE_DIR,
        experimental_suffix: str = DEFAULT_EXPERIMENTAL_SUFFIX,
    ):
        self.project_root = Path(project_root)
        self.cache_dir = Path(cache_dir)
        self.experimental_suffix = experimental_suffix

    @staticmethod
    def digest(unit: str) -> str:
        """MD5 hex digest of the unit's path as filesystem bytes."""
        return hashlib.md5(os.fsencode(unit)).hexdigest()  # nosec B324 - naming only

    def reference_path(self, unit: str) -> Path:
        return self.cache_dir / self.digest(unit)

    def experimental_path(self, unit: str) -> Path:
        return self.cache_dir / f"{self.digest(unit)}{self.experimental_suffix}"

    def _on_disk(self, path: Path) -> Path:
        return path if path.is_absolute() else self.project_root / path

    def resolve(self, unit: str) -> ArtifactLocations:
        """
        Resolve both artifact locations for a unit and check they exist.

        Args:
            unit: Project-relative path of the input file

        Returns:
            ArtifactLocations with both paths and existence flags
        """
        reference = self.reference_path(unit)
        experimental = self.experimental_path(unit)
        return ArtifactLocations(
            unit=unit,
            digest=self.digest(unit),
            reference_path=reference,
            experimental_path=experimental,
            reference_exists=self._on_disk(reference).is_file(),
            experimental_exists=self._on_disk(experimental).is_file(),
        )

    def open_path(self, path: Path) -> Path:
        """Filesystem path to read for a (possibly relative) artifact path."""
        return self._on_disk(path)

"""Input unit discovery."""

from pathlib import Path
from typing import List, Union

DEFAULT_UNIT_PATTERN = "app/**/*.rb"


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def discover_units(project_root: Union[str, Path], pattern: str = DEFAULT_UNIT_PATTERN) -> List[str]:
    """
    Enumerate input units under project_root.

    Files and directories whose names start with "." are skipped, as a shell
    glob skips them.

    Args:
        project_root: Directory the pattern is relative to
        pattern: Glob pattern, "**" matches any depth

    Returns:
        Sorted project-relative POSIX paths of matching files
    """
    root = Path(project_root)
    units = []
    for path in root.glob(pattern):
        relative = path.relative_to(root)
        if path.is_file() and not _is_hidden(relative):
            units.append(relative.as_posix())
    return sorted(units)

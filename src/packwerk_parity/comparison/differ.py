"""
Structural Differ - Deterministic recursive diff of two normalized record sets

Paths use the hashdiff notation: "[0]" for array items, ".name" for object
fields, e.g. "[1].location.start_row".

Walk rules:
- Objects: keys of both sides in sorted order. A key only on the reference
  side yields "-", only on the experimental side "+", on both sides recurses.
- Arrays: items are aligned with a longest common subsequence over their
  identity (the key field for records, the item itself otherwise). Aligned
  pairs recurse using the reference index; unaligned reference items yield
  "-" at their reference index, unaligned experimental items "+" at their
  experimental index. When both directions are equally good, the removal
  is emitted first.
- Scalars: values of different JSON types (1 vs true, 1 vs "1") or unequal
  values yield "~". A container against any other kind of value is a single
  "~" at that path.

Entries come out in walk order, so equal inputs always give equal output.
"""

from typing import Any, List

from packwerk_parity.comparison.normalizer import DEFAULT_KEY_FIELD
from packwerk_parity.domain.report import DiffEntry

ROOT_PATH = ""

_MISSING = object()


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _same(old: Any, new: Any) -> bool:
    """Equality that does not conflate booleans with numbers."""
    if _json_type(old) != _json_type(new):
        return False
    if isinstance(old, dict):
        return old.keys() == new.keys() and all(_same(old[k], new[k]) for k in old)
    if isinstance(old, (list, tuple)):
        return len(old) == len(new) and all(_same(x, y) for x, y in zip(old, new))
    return old == new


def _field_path(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def _index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


class StructuralDiffer:
    """
    Compute the ordered list of DiffEntry between two values.

    Attributes:
        key_field: Field used as the identity of records when aligning arrays
    """

    def __init__(self, key_field: str = DEFAULT_KEY_FIELD):
        self.key_field = key_field

    def diff(self, old: Any, new: Any) -> List[DiffEntry]:
        """
        Diff two normalized record sets (or any JSON-compatible values).

        Args:
            old: Reference value
            new: Experimental value

        Returns:
            Differences in walk order; empty when the values are equivalent
        """
        entries: List[DiffEntry] = []
        self._diff_value(old, new, ROOT_PATH, entries)
        return entries

    def _diff_value(self, old: Any, new: Any, path: str, entries: List[DiffEntry]) -> None:
        if isinstance(old, dict) and isinstance(new, dict):
            self._diff_objects(old, new, path, entries)
        elif isinstance(old, (list, tuple)) and isinstance(new, (list, tuple)):
            self._diff_arrays(old, new, path, entries)
        elif not _same(old, new):
            entries.append(DiffEntry("~", path, old, new))

    def _diff_objects(self, old: dict, new: dict, path: str, entries: List[DiffEntry]) -> None:
        for key in sorted(set(old) | set(new), key=str):
            old_value = old.get(key, _MISSING)
            new_value = new.get(key, _MISSING)
            child = _field_path(path, key)

            if new_value is _MISSING:
                entries.append(DiffEntry("-", child, old=old_value))
            elif old_value is _MISSING:
                entries.append(DiffEntry("+", child, new=new_value))
            else:
                self._diff_value(old_value, new_value, child, entries)

    def _identity(self, item: Any) -> Any:
        if isinstance(item, dict) and self.key_field in item:
            return (self.key_field, item[self.key_field])
        return item

    def _aligned(self, old_item: Any, new_item: Any) -> bool:
        return _same(self._identity(old_item), self._identity(new_item))

    def _diff_arrays(self, old, new, path: str, entries: List[DiffEntry]) -> None:
        n, m = len(old), len(new)

        # lcs[i][j]: length of the common subsequence of old[i:] and new[j:]
        lcs = [[0] * (m + 1) for _ in range(n + 1)]
        for i in range(n - 1, -1, -1):
            for j in range(m - 1, -1, -1):
                if self._aligned(old[i], new[j]):
                    lcs[i][j] = lcs[i + 1][j + 1] + 1
                else:
                    lcs[i][j] = max(lcs[i + 1][j], lcs[i][j + 1])

        i = j = 0
        while i < n and j < m:
            if self._aligned(old[i], new[j]):
                self._diff_value(old[i], new[j], _index_path(path, i), entries)
                i += 1
                j += 1
            elif lcs[i + 1][j] >= lcs[i][j + 1]:
                entries.append(DiffEntry("-", _index_path(path, i), old=old[i]))
                i += 1
            else:
                entries.append(DiffEntry("+", _index_path(path, j), new=new[j]))
                j += 1

        for index in range(i, n):
            entries.append(DiffEntry("-", _index_path(path, index), old=old[index]))
        for index in range(j, m):
            entries.append(DiffEntry("+", _index_path(path, index), new=new[index]))


def diff(old: Any, new: Any) -> List[DiffEntry]:
    """Diff with the default key field."""
    return StructuralDiffer().diff(old, new)

"""
Unit tests for the record normalizer (packwerk_parity/comparison/normalizer.py)

Tests covering:
- Sorting by constant_name
- Stability for records sharing a key
- Idempotence and order-insensitivity
- MalformedOutput for every shape violation
"""

import copy

import pytest

from packwerk_parity.comparison.exceptions import MalformedOutput
from packwerk_parity.comparison.normalizer import RecordNormalizer, normalize


def _artifact(*names, **extra):
    return {"unresolved_references": [{"constant_name": n, **extra} for n in names]}


class TestNormalize:
    """Tests for normalize()."""

    def test_sorts_by_constant_name(self):
        """Test records come out in ascending key order."""
        result = normalize(_artifact("Zebra", "Apple", "Mango"))
        assert [r["constant_name"] for r in result] == ["Apple", "Mango", "Zebra"]

    def test_empty_record_list(self):
        """Test empty record list normalizes to an empty list."""
        assert normalize({"unresolved_references": []}) == []

    def test_equal_keys_keep_original_order(self):
        """Test stable ordering when several records share a key."""
        raw = {
            "unresolved_references": [
                {"constant_name": "Foo", "line": 3},
                {"constant_name": "Bar", "line": 1},
                {"constant_name": "Foo", "line": 1},
            ]
        }
        result = normalize(raw)
        assert result == [
            {"constant_name": "Bar", "line": 1},
            {"constant_name": "Foo", "line": 3},
            {"constant_name": "Foo", "line": 1},
        ]

    def test_idempotent(self):
        """Test normalizing a normalized set changes nothing."""
        once = normalize(_artifact("B", "C", "A"))
        twice = normalize({"unresolved_references": once})
        assert once == twice

    def test_order_insensitive(self):
        """Test shuffled inputs normalize to the same set."""
        forward = normalize(_artifact("A", "B", "C", "D"))
        backward = normalize(_artifact("D", "C", "B", "A"))
        shuffled = normalize(_artifact("C", "A", "D", "B"))
        assert forward == backward == shuffled

    def test_does_not_mutate_input(self):
        """Test the raw output is left untouched."""
        raw = _artifact("B", "A")
        before = copy.deepcopy(raw)
        normalize(raw)
        assert raw == before

    def test_ignores_other_top_level_fields(self):
        """Test extra top-level fields are not part of the record set."""
        raw = _artifact("A")
        raw["definitions"] = [{"fully_qualified_name": "::A"}]
        assert normalize(raw) == [{"constant_name": "A"}]


class TestMalformedOutput:
    """Tests for shape validation."""

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            {"definitions": []},
            {"unresolved_references": None},
            {"unresolved_references": {"constant_name": "Foo"}},
            {"unresolved_references": "Foo"},
            {"unresolved_references": ["Foo"]},
            {"unresolved_references": [{"name": "Foo"}]},
            {"unresolved_references": [{"constant_name": 1}]},
            [],
            "unresolved_references",
            None,
        ],
    )
    def test_rejects_bad_shapes(self, raw):
        """Test each shape violation raises MalformedOutput."""
        with pytest.raises(MalformedOutput):
            normalize(raw)

    def test_message_names_missing_field(self):
        """Test the error message mentions the missing record field."""
        with pytest.raises(MalformedOutput) as exc_info:
            normalize({"definitions": []})
        assert "unresolved_references" in str(exc_info.value)

    def test_location_is_unset(self):
        """Test in-memory normalization leaves the location empty."""
        with pytest.raises(MalformedOutput) as exc_info:
            normalize({})
        assert exc_info.value.location is None
        assert exc_info.value.kind == "MalformedOutput"


class TestCustomFields:
    """Tests for non-default record and key fields."""

    def test_custom_record_and_key_field(self):
        """Test a normalizer configured for definitions sorted by name."""
        normalizer = RecordNormalizer(record_field="definitions", key_field="fully_qualified_name")
        raw = {
            "definitions": [
                {"fully_qualified_name": "::B"},
                {"fully_qualified_name": "::A"},
            ]
        }
        result = normalizer.normalize(raw)
        assert [r["fully_qualified_name"] for r in result] == ["::A", "::B"]

    def test_custom_key_field_required(self):
        """Test records lacking the custom key are rejected."""
        normalizer = RecordNormalizer(key_field="name")
        with pytest.raises(MalformedOutput):
            normalizer.normalize({"unresolved_references": [{"constant_name": "Foo"}]})

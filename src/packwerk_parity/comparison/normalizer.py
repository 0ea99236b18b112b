"""
Record Normalizer - Extract and canonically order an artifact's records

Records inside a cache artifact have no required order, so both sides are
sorted by their key field before diffing. Sorting is stable: records that
share a key keep their original relative order.
"""

from typing import Any, Dict, List

import jsonschema
from jsonschema.exceptions import best_match

from packwerk_parity.comparison.exceptions import MalformedOutput

DEFAULT_RECORD_FIELD = "unresolved_references"
DEFAULT_KEY_FIELD = "constant_name"


def build_artifact_schema(record_field: str, key_field: str) -> Dict[str, Any]:
    """JSON schema an artifact must satisfy to be normalized."""
    return {
        "type": "object",
        "required": [record_field],
        "properties": {
            record_field: {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": [key_field],
                    "properties": {key_field: {"type": "string"}},
                },
            }
        },
    }


class RecordNormalizer:
    """
    Turn a decoded artifact into a NormalizedRecordSet.

    Responsibilities:
    - Validate the artifact shape (record list present, string keys)
    - Extract the record list
    - Sort it by key, stable for equal keys
    """

    def __init__(
        self,
        record_field: str = DEFAULT_RECORD_FIELD,
        key_field: str = DEFAULT_KEY_FIELD,
    ):
        self.record_field = record_field
        self.key_field = key_field
        self.schema = build_artifact_schema(record_field, key_field)
        self._validator = jsonschema.Draft7Validator(self.schema)

    def validate(self, raw_output: Any) -> None:
        """
        Check that raw_output has the expected record list.

        Raises:
            MalformedOutput: With the first schema violation found
        """
        error = best_match(self._validator.iter_errors(raw_output))
        if error is None:
            return

        where = "/".join(str(part) for part in error.absolute_path)
        if where:
            raise MalformedOutput(f"{where}: {error.message}")
        raise MalformedOutput(error.message)

    def normalize(self, raw_output: Any) -> List[Dict[str, Any]]:
        """
        Extract the record list and sort it by key.

        The input is not modified; the returned list is new.

        Args:
            raw_output: Decoded artifact (expected to be a JSON object)

        Returns:
            Records sorted ascending by the key field

        Raises:
            MalformedOutput: If the record field is absent or not a list of
                records with string keys
        """
        self.validate(raw_output)
        records = raw_output[self.record_field]
        return sorted(records, key=self.sort_key)

    def sort_key(self, record: Dict[str, Any]) -> str:
        return record[self.key_field]


def normalize(raw_output: Any) -> List[Dict[str, Any]]:
    """Normalize with the default record and key fields."""
    return RecordNormalizer().normalize(raw_output)

"""Dataset loader for food and person records stored as JSON."""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from surplus_match.data_layer.exceptions import InvalidDatasetError, MissingFieldError

REQUIRED_FOOD_FIELDS = ("name", "restaurant_name", "type", "preparation_time", "temperature")
REQUIRED_PERSON_FIELDS = ("name", "location")


def _as_float(record_kind: str, record: Dict[str, Any], name: str, index: int = None) -> float:
    try:
        return float(record[name])
    except (TypeError, ValueError) as e:
        where = f" (record #{index})" if index is not None else ""
        raise InvalidDatasetError(
            f"{record_kind.capitalize()} record{where} has a non-numeric '{name}': {record[name]!r}"
        ) from e


@dataclass
class Dataset:
    """Validated food and person records, ready for the registries."""
    food: List[Dict[str, Any]] = field(default_factory=list)
    people: List[Dict[str, Any]] = field(default_factory=list)


def validate_food_record(record: Dict[str, Any], index: int = None) -> Dict[str, Any]:
    """Check required food fields are present and coerce numeric ones.

    Args:
        record: Raw food record
        index: Optional position of the record, used in error messages

    Returns:
        A copy of the record with preparation_time and temperature as floats

    Raises:
        MissingFieldError: If a required field is absent or null
        InvalidDatasetError: If a numeric field cannot be read as a number
    """
    for name in REQUIRED_FOOD_FIELDS:
        if record.get(name) is None:
            raise MissingFieldError("food", name, index)

    cleaned = dict(record)
    cleaned["preparation_time"] = _as_float("food", record, "preparation_time", index)
    cleaned["temperature"] = _as_float("food", record, "temperature", index)
    return cleaned


def validate_person_record(record: Dict[str, Any], index: int = None) -> Dict[str, Any]:
    """Check required person fields are present.

    Raises:
        MissingFieldError: If a required field is absent or null
    """
    for name in REQUIRED_PERSON_FIELDS:
        if record.get(name) is None:
            raise MissingFieldError("person", name, index)

    cleaned = dict(record)
    if cleaned.get("max_distance") is not None:
        cleaned["max_distance"] = _as_float("person", cleaned, "max_distance", index)
    cleaned["dietary_restrictions"] = [str(r) for r in record.get("dietary_restrictions") or []]
    return cleaned


class DatasetLoader:
    """Loads food and person records from a JSON file."""

    def __init__(self, json_path: str):
        """Initialize loader.

        Args:
            json_path: Path to JSON file shaped like {"food": [...], "people": [...]}
        """
        self.json_path = Path(json_path)

    def load(self) -> Dataset:
        """Read and validate every record.

        Returns:
            Dataset with validated records

        Raises:
            FileNotFoundError: If the JSON file doesn't exist
            MissingFieldError: If any record lacks a required field
            InvalidDatasetError: If the file is not valid JSON or a value has the wrong type
        """
        with open(self.json_path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidDatasetError(f"Dataset file is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise InvalidDatasetError("Dataset file must contain a JSON object")

        food = [
            validate_food_record(record, index)
            for index, record in enumerate(data.get("food", []))
        ]
        people = [
            validate_person_record(record, index)
            for index, record in enumerate(data.get("people", []))
        ]
        return Dataset(food=food, people=people)

    def load_into(self, food_registry, person_registry) -> Tuple[int, int]:
        """Load the file and add every record to the given registries.

        Returns:
            (number of food items added, number of people added)
        """
        dataset = self.load()
        for record in dataset.food:
            food_registry.add(record)
        for record in dataset.people:
            person_registry.add(record)
        return len(dataset.food), len(dataset.people)

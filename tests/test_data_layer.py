"""Tests for data layer components."""
import pytest
import json
import yaml
from pathlib import Path
from tempfile import NamedTemporaryFile

from surplus_match.data_layer.dataset_loader import (
    DatasetLoader,
    validate_food_record,
    validate_person_record,
)
from surplus_match.data_layer.exceptions import (
    InvalidDatasetError,
    InvalidSettingsError,
    MissingFieldError,
)
from surplus_match.data_layer.food_registry import FoodRegistry
from surplus_match.data_layer.models import generate_id, match_id_for
from surplus_match.data_layer.person_registry import PersonRegistry
from surplus_match.data_layer.settings import AppSettings, SettingsLoader, settings_from_dict


def _write_json(data):
    with NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        json.dump(data, f)
        return f.name


def _write_yaml(data):
    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        if data is not None:
            yaml.dump(data, f)
        return f.name


class TestIds:
    """Tests for id helpers."""

    def test_generate_id_format(self):
        prefix, millis, suffix = generate_id("food").split("_")
        assert prefix == "food"
        assert millis.isdigit()
        assert len(suffix) == 9

    def test_match_id(self):
        assert match_id_for("food_1", "person_2") == "match_food_1_person_2"


class TestRecordValidation:
    """Tests for required-field checks."""

    def test_food_record_coerces_numbers(self):
        record = validate_food_record({
            "name": "Caesar Salad",
            "restaurant_name": "Green Garden Cafe",
            "type": "cold",
            "preparation_time": "0.5",
            "temperature": 38,
        })
        assert record["preparation_time"] == 0.5
        assert record["temperature"] == 38.0
        assert isinstance(record["temperature"], float)

    def test_food_record_missing_field(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate_food_record({"name": "Soup", "restaurant_name": "R", "type": "hot",
                                  "preparation_time": 1}, index=3)
        assert exc_info.value.field_name == "temperature"
        assert exc_info.value.index == 3
        assert "record #3" in str(exc_info.value)

    def test_null_counts_as_missing(self):
        with pytest.raises(MissingFieldError):
            validate_person_record({"name": "A", "location": None})

    def test_person_record_without_restrictions(self):
        record = validate_person_record({"name": "A", "location": "X"})
        assert record["dietary_restrictions"] == []

    def test_person_record_with_null_restrictions(self):
        record = validate_person_record({"name": "A", "location": "X", "dietary_restrictions": None})
        assert record["dietary_restrictions"] == []

    def test_non_numeric_value_rejected(self):
        with pytest.raises(InvalidDatasetError, match="non-numeric 'preparation_time'"):
            validate_food_record({"name": "Soup", "restaurant_name": "R", "type": "hot",
                                  "preparation_time": "an hour", "temperature": 150})

    def test_non_numeric_max_distance_rejected(self):
        with pytest.raises(InvalidDatasetError, match="Person record \\(record #2\\)"):
            validate_person_record({"name": "A", "location": "X", "max_distance": "far"}, index=2)


class TestDatasetLoader:
    """Tests for DatasetLoader."""

    def test_load_dataset_from_json(self):
        """Test loading food and people from a JSON file."""
        temp_path = _write_json({
            "food": [
                {
                    "id": "food_001",
                    "name": "Chicken Alfredo Pasta",
                    "restaurant_name": "Mama Mia Restaurant",
                    "type": "hot",
                    "preparation_time": 1.5,
                    "temperature": 145,
                    "location": "Downtown",
                }
            ],
            "people": [
                {"name": "John Smith", "location": "Downtown", "preferred_food_type": "hot"},
                {"name": "Mike Chen", "location": "Uptown", "dietary_restrictions": ["nuts"]},
            ],
        })

        try:
            dataset = DatasetLoader(temp_path).load()
            assert len(dataset.food) == 1
            assert len(dataset.people) == 2
            assert dataset.food[0]["temperature"] == 145.0
        finally:
            Path(temp_path).unlink()

    def test_load_into_registries(self):
        temp_path = _write_json({
            "food": [
                {"id": "food_001", "name": "Caesar Salad", "restaurant_name": "Cafe",
                 "type": "cold", "preparation_time": 0.5, "temperature": 38},
            ],
            "people": [{"name": "Sarah Johnson", "location": "Midtown"}],
        })

        try:
            food_registry = FoodRegistry()
            person_registry = PersonRegistry()
            counts = DatasetLoader(temp_path).load_into(food_registry, person_registry)

            assert counts == (1, 1)
            assert food_registry.get("food_001").name == "Caesar Salad"
            assert person_registry.list_active()[0].preferred_food_type == "any"
        finally:
            Path(temp_path).unlink()

    def test_missing_sections_load_empty(self):
        temp_path = _write_json({})
        try:
            dataset = DatasetLoader(temp_path).load()
            assert dataset.food == []
            assert dataset.people == []
        finally:
            Path(temp_path).unlink()

    def test_missing_field_raises(self):
        temp_path = _write_json({
            "food": [],
            "people": [{"name": "No Location"}],
        })
        try:
            with pytest.raises(MissingFieldError, match="Person record \\(record #0\\)"):
                DatasetLoader(temp_path).load()
        finally:
            Path(temp_path).unlink()

    def test_malformed_json_raises(self):
        with NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            f.write("{not json")
            temp_path = f.name
        try:
            with pytest.raises(InvalidDatasetError, match="not valid JSON"):
                DatasetLoader(temp_path).load()
        finally:
            Path(temp_path).unlink()

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            DatasetLoader("does/not/exist.json").load()


class TestSettingsLoader:
    """Tests for SettingsLoader."""

    def test_load_settings_from_yaml(self):
        temp_path = _write_yaml({
            "matching": {"threshold": 0.5, "normalize_by_factor_count": False},
            "handling": {"gloves_used": False},
            "storage": {"humidity": 70, "contamination_risk": "medium"},
        })

        try:
            settings = SettingsLoader(temp_path).load()
            assert settings.matcher.threshold == 0.5
            assert settings.matcher.normalize_by_factor_count is False
            assert settings.matcher.type_weight == 0.4
            assert settings.handling.gloves_used is False
            assert settings.handling.staff_trained is True
            assert settings.storage.humidity == 70
            assert settings.storage.contamination_risk == "medium"
        finally:
            Path(temp_path).unlink()

    def test_empty_file_gives_defaults(self):
        temp_path = _write_yaml(None)
        try:
            assert SettingsLoader(temp_path).load() == AppSettings()
        finally:
            Path(temp_path).unlink()

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidSettingsError, match="Unknown keys in section 'matching'"):
            settings_from_dict({"matching": {"treshold": 0.2}})

    def test_section_must_be_mapping(self):
        with pytest.raises(InvalidSettingsError, match="must be a mapping"):
            settings_from_dict({"storage": [1, 2]})

    def test_invalid_weight_rejected(self):
        with pytest.raises(InvalidSettingsError, match="non-negative"):
            settings_from_dict({"matching": {"urgency_weight": -1}})

    def test_malformed_yaml_rejected(self):
        with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("matching: [unclosed")
            temp_path = f.name
        try:
            with pytest.raises(InvalidSettingsError, match="not valid YAML"):
                SettingsLoader(temp_path).load()
        finally:
            Path(temp_path).unlink()

    def test_wrongly_typed_weight_rejected(self):
        with pytest.raises(InvalidSettingsError, match="Invalid section 'matching'"):
            settings_from_dict({"matching": {"safety_weight": "high"}})

    def test_top_level_must_be_mapping(self):
        temp_path = _write_yaml(["not", "a", "mapping"])
        try:
            with pytest.raises(InvalidSettingsError):
                SettingsLoader(temp_path).load()
        finally:
            Path(temp_path).unlink()

    def test_example_settings_file_loads(self):
        example = Path(__file__).parent.parent / "config" / "settings.yaml.example"
        settings = SettingsLoader(str(example)).load()
        assert settings.matcher.threshold == 0.3
        assert settings.storage.contamination_risk == "low"

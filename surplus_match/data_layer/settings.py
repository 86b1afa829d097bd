"""Settings loader for matcher and safety defaults stored as YAML."""
import yaml
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Type

from surplus_match.data_layer.exceptions import InvalidSettingsError
from surplus_match.data_layer.models import HandlingConditions, StorageConditions
from surplus_match.matching.matcher import MatcherConfig


@dataclass
class AppSettings:
    """Everything a matching session can be configured with."""
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    handling: HandlingConditions = field(default_factory=HandlingConditions)
    storage: StorageConditions = field(default_factory=StorageConditions)


def _build_section(section_name: str, data: Any, cls: Type):
    """Build a dataclass from one YAML mapping, rejecting unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise InvalidSettingsError(f"Section '{section_name}' must be a mapping")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidSettingsError(
            f"Unknown keys in section '{section_name}': {', '.join(unknown)}"
        )
    try:
        return cls(**data)
    except (TypeError, ValueError) as e:
        raise InvalidSettingsError(f"Invalid section '{section_name}': {e}") from e


class SettingsLoader:
    """Loader for session settings from YAML."""

    def __init__(self, yaml_path: str):
        """Initialize settings loader.

        Args:
            yaml_path: Path to YAML file with optional matching, handling
                and storage sections
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> AppSettings:
        """Load settings, filling missing sections with defaults.

        Returns:
            AppSettings object

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            InvalidSettingsError: If the file is not valid YAML, or a section has
                the wrong shape, unknown keys or badly typed values
        """
        with open(self.yaml_path, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise InvalidSettingsError(f"Settings file is not valid YAML: {e}") from e

        if not isinstance(data, dict):
            raise InvalidSettingsError("Settings file must contain a mapping")

        return settings_from_dict(data)


def settings_from_dict(data: Dict[str, Any]) -> AppSettings:
    return AppSettings(
        matcher=_build_section("matching", data.get("matching"), MatcherConfig),
        handling=_build_section("handling", data.get("handling"), HandlingConditions),
        storage=_build_section("storage", data.get("storage"), StorageConditions),
    )

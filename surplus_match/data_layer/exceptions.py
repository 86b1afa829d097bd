"""Custom exceptions for the surplus food matching engine."""


class MissingFieldError(Exception):
    """Raised when an input record lacks a required field."""

    def __init__(self, record_kind: str, field_name: str, index: int = None):
        """Initialize exception with the record kind and missing field.

        Args:
            record_kind: "food" or "person"
            field_name: Name of the field that was not present
            index: Optional position of the record in its source list
        """
        self.record_kind = record_kind
        self.field_name = field_name
        self.index = index
        where = f" (record #{index})" if index is not None else ""
        super().__init__(f"{record_kind.capitalize()} record{where} is missing required field '{field_name}'")


class InvalidSettingsError(Exception):
    """Raised when a settings file has the wrong shape."""


class InvalidDatasetError(Exception):
    """Raised when a dataset file cannot be parsed or holds a badly typed value."""

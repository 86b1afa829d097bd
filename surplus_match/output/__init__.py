"""Output formatting for matching results."""

from surplus_match.output.formatters import (
    format_result_json,
    format_result_json_string,
    format_result_markdown,
    format_safety_score
)

__all__ = [
    "format_result_json",
    "format_result_json_string",
    "format_result_markdown",
    "format_safety_score"
]

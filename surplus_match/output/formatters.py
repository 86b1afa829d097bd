"""Formatters for matching results (JSON and Markdown)."""

import json
from dataclasses import asdict
from typing import Any, Dict, List

from surplus_match.data_layer.models import Match, MatchRef, SafetyScore
from surplus_match.matching.session import MatchingResult


def format_safety_score(score: SafetyScore) -> str:
    """Format a safety score as a short string (e.g., "A (95.50)").

    Args:
        score: SafetyScore object

    Returns:
        Grade followed by the numeric score
    """
    return f"{score.letter_grade} ({score.score:.2f})"


def format_match_line(match: Match) -> str:
    """One-line summary like "Caesar Salad (Green Garden Cafe) -> Mike Chen"."""
    food = match.food
    person = match.person
    return f"{food['name']} ({food['restaurant_name']}) -> {person['name']}"


def format_result_markdown(result: MatchingResult) -> str:
    """Format a MatchingResult as Markdown.

    Args:
        result: MatchingResult from a matching session

    Returns:
        Formatted Markdown string
    """
    lines = []

    lines.append("# Food Matching Report\n")

    if result.success:
        lines.append(f"✅ **{len(result.matches)} matches found**\n")
    else:
        lines.append("⚠️ **No matches found**\n")

    if result.warnings:
        lines.append("## Warnings\n")
        for warning in result.warnings:
            lines.append(f"- {warning}")
        lines.append("")

    for idx, match in enumerate(result.matches, 1):
        food = match.food
        person = match.person
        lines.append(f"## Match {idx}: {format_match_line(match)}")
        lines.append(f"**Food Type:** {food['type'].capitalize()}")
        lines.append(f"**Pickup Location:** {food['location']}")
        lines.append(f"**Person Location:** {person['location']}")
        safety = food.get("safety_score")
        if safety:
            lines.append(f"**Safety Grade:** {safety['letter_grade']} ({safety['score']:.2f})")
            lines.append("")
            lines.append("### Safety Notes")
            for detail in safety["details"]:
                lines.append(f"- {detail}")
        lines.append("")
        lines.append(f"**Match Score:** {match.match_score:.3f}")
        lines.append("")

    stats = result.stats
    lines.append("## Statistics")
    lines.append(f"**Food Offered:** {stats.total_food}")
    lines.append(f"**People Looking:** {stats.total_people}")
    lines.append(f"**Matched:** {stats.matched_food}")
    lines.append(f"**Unmatched Food:** {stats.unmatched_food}")
    lines.append(f"**Unmatched People:** {stats.unmatched_people}")
    lines.append(f"**Match Rate:** {stats.match_rate:.1f}%")
    lines.append("")

    if result.suggestions:
        lines.append("## Suggestions")
        for suggestion in result.suggestions:
            lines.append(f"- {suggestion}")
        lines.append("")

    return "\n".join(lines)


def format_match_json(match: Match) -> Dict[str, Any]:
    return {
        "id": match.id,
        "food_id": match.food_id,
        "person_id": match.person_id,
        "food": match.food,
        "person": match.person,
        "match_score": round(match.match_score, 4),
        "created_at": match.created_at.isoformat(),
        "status": match.status,
    }


def format_result_json(result: MatchingResult) -> Dict[str, Any]:
    """Format a MatchingResult as JSON (for API usage).

    Args:
        result: MatchingResult from a matching session

    Returns:
        Dictionary ready for JSON serialization
    """
    stats = asdict(result.stats)
    stats["match_rate"] = round(stats["match_rate"], 1)

    return {
        "success": result.success,
        "matches": [format_match_json(m) for m in result.matches],
        "stats": stats,
        "suggestions": list(result.suggestions),
        "warnings": list(result.warnings),
    }


def format_result_json_string(result: MatchingResult, indent: int = 2) -> str:
    """Format a MatchingResult as a JSON string.

    Args:
        result: MatchingResult from a matching session
        indent: JSON indentation (default: 2)

    Returns:
        JSON string
    """
    return json.dumps(format_result_json(result), indent=indent)


def format_match_refs(refs: List[MatchRef]) -> List[Dict[str, str]]:
    """Format match refs as plain dicts (food_id, person_id, match_id)."""
    return [asdict(ref) for ref in refs]

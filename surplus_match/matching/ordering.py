"""Food priority ordering for the greedy matcher.

Decides which food items are eligible for matching and in what order the
matcher visits them. No scoring of people, no state mutation.
"""

from functools import cmp_to_key
from typing import Iterable, List

from surplus_match.data_layer.food_registry import get_time_until_expiration
from surplus_match.data_layer.models import FoodItem

# Safety scores closer than this are treated as equivalent and ordered by urgency
SAFETY_SCORE_BAND = 10.0


def eligible_for_matching(food_items: Iterable[FoodItem]) -> List[FoodItem]:
    """Keep items that have a safety score and are not graded F."""
    return [
        item for item in food_items
        if item.safety_score is not None and item.safety_score.letter_grade != "F"
    ]


def compare_food_priority(a: FoodItem, b: FoodItem) -> float:
    """Comparator: negative when ``a`` should be matched before ``b``.

    If the safety scores differ by more than SAFETY_SCORE_BAND the higher
    score goes first. Otherwise the item with less time left goes first,
    whatever the score difference inside the band.
    """
    safety_diff = b.safety_score.score - a.safety_score.score
    if abs(safety_diff) > SAFETY_SCORE_BAND:
        return safety_diff
    return get_time_until_expiration(a) - get_time_until_expiration(b)


def order_food_for_matching(food_items: Iterable[FoodItem]) -> List[FoodItem]:
    """Return scored items sorted by :func:`compare_food_priority`.

    The comparator is not a lexicographic key, so this goes through
    ``cmp_to_key`` rather than a tuple key. The sort is stable.
    """
    return sorted(food_items, key=cmp_to_key(compare_food_priority))

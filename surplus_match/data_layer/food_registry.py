"""In-memory registry of surplus food items."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from surplus_match.data_layer.models import (
    DEFAULT_LOCATION,
    EXPIRING_SOON_HOURS,
    FoodItem,
    HandlingConditions,
    SafetyScore,
    StorageConditions,
    generate_id,
    max_safe_hours,
)

logger = logging.getLogger(__name__)


@dataclass
class FoodStats:
    """Summary counts over the registry."""
    total: int
    available: int
    claimed: int
    expiring_soon: int
    type_counts: Dict[str, int] = field(default_factory=dict)  # Available items only
    safety_grades: Dict[str, int] = field(default_factory=dict)  # Available, scored items only


def get_time_until_expiration(food_item: FoodItem) -> float:
    """Hours of safe life left for an item, never negative."""
    return max(0.0, max_safe_hours(food_item.type) - food_item.preparation_time)


class FoodRegistry:
    """Owns every FoodItem, keyed by id, in insertion order."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """Initialize an empty registry.

        Args:
            clock: Callable returning the current time, used for created_at
        """
        self._clock = clock or datetime.now
        self._items: Dict[str, FoodItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def add(self, data: Dict[str, Any]) -> FoodItem:
        """Create a food item from a plain record and register it.

        Args:
            data: Record with name, restaurant_name, type, preparation_time,
                temperature and optionally id, location, image, description

        Returns:
            The created FoodItem (available, unscored)
        """
        item = FoodItem(
            id=data.get("id") or generate_id("food"),
            name=data.get("name"),
            restaurant_name=data.get("restaurant_name"),
            type=data.get("type"),
            preparation_time=data.get("preparation_time"),
            temperature=data.get("temperature"),
            location=data.get("location") or DEFAULT_LOCATION,
            image=data.get("image"),
            description=data.get("description"),
            created_at=self._clock(),
        )
        self._items[item.id] = item
        logger.debug("Added food item %s (%s, %s)", item.id, item.name, item.type)
        return item

    def get(self, food_id: str) -> Optional[FoodItem]:
        return self._items.get(food_id)

    def remove(self, food_id: str) -> bool:
        """Remove an item. Returns False if the id is unknown."""
        if food_id not in self._items:
            return False
        del self._items[food_id]
        return True

    def claim(self, food_id: str) -> bool:
        """Mark an available item as claimed. Returns False if unknown or already claimed."""
        item = self._items.get(food_id)
        if item is None or not item.is_available:
            return False
        item.claim()
        logger.info("Food item %s claimed", food_id)
        return True

    def clear(self) -> None:
        self._items.clear()

    def list_all(self) -> List[FoodItem]:
        return list(self._items.values())

    def list_available(self) -> List[FoodItem]:
        return [item for item in self._items.values() if item.is_available]

    def list_by_type(self, food_type: str) -> List[FoodItem]:
        return [item for item in self.list_available() if item.type == food_type]

    def list_by_safety_score(self) -> List[FoodItem]:
        """Available, scored items, highest safety score first."""
        scored = [item for item in self.list_available() if item.safety_score is not None]
        return sorted(scored, key=lambda item: item.safety_score.score, reverse=True)

    def list_expiring_soon(self) -> List[FoodItem]:
        """Available items with at most one hour of safe life left."""
        return [
            item for item in self.list_available()
            if get_time_until_expiration(item) <= EXPIRING_SOON_HOURS
        ]

    def get_time_until_expiration(self, food_item: FoodItem) -> float:
        return get_time_until_expiration(food_item)

    def update_safety_score(self,
                            food_id: str,
                            calculator,
                            handling: Optional[HandlingConditions] = None,
                            storage: Optional[StorageConditions] = None) -> Optional[SafetyScore]:
        """Compute and attach the score for one item.

        Args:
            food_id: Item to score
            calculator: SafetyScoreCalculator instance
            handling: Optional handling conditions (ideal when omitted)
            storage: Optional storage conditions (ideal when omitted)

        Returns:
            The new SafetyScore, or None if the id is unknown
        """
        item = self._items.get(food_id)
        if item is None:
            return None
        item.safety_score = calculator.calculate_safety_score(item, handling, storage)
        return item.safety_score

    def refresh_all_safety_scores(self,
                                  calculator,
                                  handling: Optional[HandlingConditions] = None,
                                  storage: Optional[StorageConditions] = None) -> int:
        """Recompute the score of every available item, overwriting old values.

        Returns:
            Number of items scored
        """
        refreshed = 0
        for item in self._items.values():
            if item.is_available:
                item.safety_score = calculator.calculate_safety_score(item, handling, storage)
                refreshed += 1
        logger.debug("Refreshed safety scores for %d food items", refreshed)
        return refreshed

    def get_stats(self) -> FoodStats:
        all_items = self.list_all()
        available = self.list_available()

        type_counts: Dict[str, int] = {}
        safety_grades: Dict[str, int] = {}
        for item in available:
            type_counts[item.type] = type_counts.get(item.type, 0) + 1
            if item.safety_score is not None:
                grade = item.safety_score.letter_grade
                safety_grades[grade] = safety_grades.get(grade, 0) + 1

        return FoodStats(
            total=len(all_items),
            available=len(available),
            claimed=len(all_items) - len(available),
            expiring_soon=len(self.list_expiring_soon()),
            type_counts=type_counts,
            safety_grades=safety_grades,
        )

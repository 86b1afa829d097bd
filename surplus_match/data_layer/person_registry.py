"""In-memory registry of people looking for food."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from surplus_match.data_layer.models import (
    DEFAULT_MAX_DISTANCE_MILES,
    FOOD_TYPE_ANY,
    FoodItem,
    Person,
    generate_id,
)

logger = logging.getLogger(__name__)


@dataclass
class PersonStats:
    """Summary counts over the registry."""
    total: int
    active: int
    inactive: int
    matched: int
    unmatched: int
    food_type_counts: Dict[str, int] = field(default_factory=dict)  # Active people only
    dietary_restriction_counts: Dict[str, int] = field(default_factory=dict)  # Active people only


def can_accept_food_type(person: Person, food_type: str) -> bool:
    """True if the person's preference allows this food type."""
    return person.preferred_food_type == FOOD_TYPE_ANY or person.preferred_food_type == food_type


def has_dietary_conflict(person: Person, food: FoodItem) -> bool:
    """Check if any dietary restriction appears in the food's name.

    A coarse allergen check: each restriction is matched case-insensitively
    as a substring of the food name.
    """
    if not person.dietary_restrictions:
        return False

    food_name = (food.name or "").lower()
    for restriction in person.dietary_restrictions:
        if restriction.lower() in food_name:
            return True

    return False


class PersonRegistry:
    """Owns every Person, keyed by id, in insertion order."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """Initialize an empty registry.

        Args:
            clock: Callable returning the current time, used for created_at
        """
        self._clock = clock or datetime.now
        self._people: Dict[str, Person] = {}

    def __len__(self) -> int:
        return len(self._people)

    def add(self, data: Dict[str, Any]) -> Person:
        """Create a person from a plain record and register them.

        Args:
            data: Record with name, location and optionally id,
                preferred_food_type, max_distance, dietary_restrictions

        Returns:
            The created Person (active, unmatched)
        """
        max_distance = data.get("max_distance")
        person = Person(
            id=data.get("id") or generate_id("person"),
            name=data.get("name"),
            location=data.get("location"),
            preferred_food_type=data.get("preferred_food_type") or FOOD_TYPE_ANY,
            max_distance=max_distance if max_distance is not None else DEFAULT_MAX_DISTANCE_MILES,
            dietary_restrictions=[str(r) for r in data.get("dietary_restrictions") or []],
            created_at=self._clock(),
        )
        self._people[person.id] = person
        logger.debug("Added person %s (prefers %s)", person.id, person.preferred_food_type)
        return person

    def get(self, person_id: str) -> Optional[Person]:
        return self._people.get(person_id)

    def remove(self, person_id: str) -> bool:
        if person_id not in self._people:
            return False
        del self._people[person_id]
        return True

    def deactivate(self, person_id: str) -> bool:
        """Stop looking for food. Returns False if the id is unknown."""
        person = self._people.get(person_id)
        if person is None:
            return False
        person.deactivate()
        return True

    def reactivate(self, person_id: str) -> bool:
        person = self._people.get(person_id)
        if person is None:
            return False
        person.reactivate()
        return True

    def clear(self) -> None:
        self._people.clear()

    def list_all(self) -> List[Person]:
        return list(self._people.values())

    def list_active(self) -> List[Person]:
        return [p for p in self._people.values() if p.is_active]

    def list_unmatched(self) -> List[Person]:
        """Active people with no matched food."""
        return [p for p in self.list_active() if p.matched_food_id is None]

    def list_by_food_type(self, food_type: str) -> List[Person]:
        """Active people who would accept this food type."""
        return [p for p in self.list_active() if can_accept_food_type(p, food_type)]

    def can_accept_food_type(self, person: Person, food_type: str) -> bool:
        return can_accept_food_type(person, food_type)

    def has_dietary_conflict(self, person: Person, food: FoodItem) -> bool:
        return has_dietary_conflict(person, food)

    def get_stats(self) -> PersonStats:
        all_people = self.list_all()
        active = self.list_active()
        unmatched = self.list_unmatched()

        food_type_counts: Dict[str, int] = {}
        restriction_counts: Dict[str, int] = {}
        for person in active:
            preference = person.preferred_food_type
            food_type_counts[preference] = food_type_counts.get(preference, 0) + 1
            for restriction in person.dietary_restrictions:
                restriction_counts[restriction] = restriction_counts.get(restriction, 0) + 1

        return PersonStats(
            total=len(all_people),
            active=len(active),
            inactive=len(all_people) - len(active),
            matched=len(active) - len(unmatched),
            unmatched=len(unmatched),
            food_type_counts=food_type_counts,
            dietary_restriction_counts=restriction_counts,
        )

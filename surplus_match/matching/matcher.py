"""Greedy matcher pairing surplus food items with people."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from surplus_match.data_layer.food_registry import FoodRegistry, get_time_until_expiration
from surplus_match.data_layer.models import FoodItem, Match, MatchRef, Person, match_id_for
from surplus_match.data_layer.person_registry import (
    PersonRegistry,
    can_accept_food_type,
    has_dietary_conflict,
)
from surplus_match.matching.ordering import eligible_for_matching, order_food_for_matching

logger = logging.getLogger(__name__)

# Number of factors in the match score; the raw sum is divided by this
MATCH_FACTOR_COUNT = 4


@dataclass
class MatcherConfig:
    """Weights and threshold for the food/person match score."""
    threshold: float = 0.3           # A candidate must score strictly above this
    type_weight: float = 0.4         # Awarded for accepting the food type
    safety_weight: float = 0.3       # Scaled by safety score / 100
    dietary_weight: float = 0.2      # Awarded for having no dietary conflict
    urgency_weight: float = 0.1      # Scaled by how close the food is to expiring
    urgency_horizon_hours: float = 4.0
    # Divide the summed score by the factor count. With the default weights
    # this caps the score at 0.25, below the default threshold.
    normalize_by_factor_count: bool = True

    def __post_init__(self):
        weights = [self.type_weight, self.safety_weight,
                   self.dietary_weight, self.urgency_weight]
        if any(w < 0 for w in weights):
            raise ValueError("All match weights must be non-negative")
        if self.urgency_horizon_hours <= 0:
            raise ValueError(
                f"urgency_horizon_hours must be positive, got {self.urgency_horizon_hours}"
            )


class MatcherState(Enum):
    IDLE = "idle"
    MATCHING = "matching"
    COMPLETE = "complete"


@dataclass
class MatchingStats:
    """Counts describing the current match set."""
    total_food: int
    total_people: int
    matched_food: int
    matched_people: int
    unmatched_food: int
    unmatched_people: int
    match_rate: float  # Percent of food matched


class FoodMatcher:
    """Pairs each food item with at most one person, greedily.

    Keeps two id maps (food -> person and person -> food) so that a food
    item and a person each appear in at most one match.
    """

    def __init__(self,
                 config: Optional[MatcherConfig] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """Initialize matcher.

        Args:
            config: Optional match score weights and threshold
            clock: Callable returning the current time, used for match timestamps
        """
        self.config = config or MatcherConfig()
        self._clock = clock or datetime.now
        self.state = MatcherState.IDLE
        self._food_to_person: Dict[str, str] = {}
        self._person_to_food: Dict[str, str] = {}
        self._records: Dict[str, Match] = {}  # food_id -> Match from the current run

    def find_matches(self,
                     food_registry: FoodRegistry,
                     person_registry: PersonRegistry) -> List[Match]:
        """Run one greedy matching pass and replace the current match set.

        Food is visited in priority order (see ``order_food_for_matching``);
        each item goes to the best-scoring remaining person if that score
        clears the threshold. A person is consumed by their first match.

        Unscored and F-graded food is skipped without error.

        Args:
            food_registry: Source of available food
            person_registry: Source of active people; matched people get
                ``matched_food_id`` set

        Returns:
            Matches created in this run, in visiting order
        """
        self.clear_matches(person_registry)
        self.state = MatcherState.MATCHING

        available_food = eligible_for_matching(food_registry.list_available())
        unmatched_people = list(person_registry.list_active())

        matches: List[Match] = []
        for food in order_food_for_matching(available_food):
            best = self._find_best_person_for_food(food, unmatched_people)
            if best is None:
                logger.debug("No eligible person for food item %s", food.id)
                continue

            person, score = best
            match = self._create_match(food, person, score)
            matches.append(match)

            self._food_to_person[food.id] = person.id
            self._person_to_food[person.id] = food.id
            self._records[food.id] = match

            unmatched_people = [p for p in unmatched_people if p.id != person.id]
            person.matched_food_id = food.id

        self.state = MatcherState.COMPLETE
        logger.info(
            "Matching run complete: %d matches from %d eligible food items",
            len(matches), len(available_food),
        )
        return matches

    def _find_best_person_for_food(self,
                                   food: FoodItem,
                                   candidates: List[Person]) -> Optional[Tuple[Person, float]]:
        """Highest-scoring candidate, first one winning ties, or None below threshold."""
        best_person = None
        best_score = -1.0

        for person in candidates:
            score = self.calculate_match_score(food, person)
            if score > best_score:
                best_score = score
                best_person = person

        if best_person is None or best_score <= self.config.threshold:
            return None
        return best_person, best_score

    def calculate_match_score(self, food: FoodItem, person: Person) -> float:
        """Score a food/person pairing (0-1).

        Type preference and dietary conflicts are hard filters that return
        0 outright. Otherwise the fixed type and dietary weights are added
        to the safety and urgency contributions.
        """
        cfg = self.config

        if not can_accept_food_type(person, food.type):
            return 0.0
        if has_dietary_conflict(person, food):
            return 0.0

        score = cfg.type_weight
        if food.safety_score is not None:
            score += cfg.safety_weight * (food.safety_score.score / 100.0)
        score += cfg.dietary_weight

        time_remaining = get_time_until_expiration(food)
        urgency = max(0.0, 1.0 - time_remaining / cfg.urgency_horizon_hours)
        score += cfg.urgency_weight * urgency

        if cfg.normalize_by_factor_count:
            score /= MATCH_FACTOR_COUNT
        return score

    def _create_match(self, food: FoodItem, person: Person, score: float) -> Match:
        return Match(
            id=match_id_for(food.id, person.id),
            food_id=food.id,
            person_id=person.id,
            food=food.to_display_dict(),
            person=person.to_display_dict(),
            match_score=score,
            created_at=self._clock(),
        )

    def get_matches(self) -> List[MatchRef]:
        return [
            MatchRef(food_id=food_id, person_id=person_id, match_id=match_id_for(food_id, person_id))
            for food_id, person_id in self._food_to_person.items()
        ]

    def get_match(self, food_id: str) -> Optional[Match]:
        """Full match record for a food item, if it is currently matched."""
        return self._records.get(food_id)

    def get_match_for_food(self, food_id: str) -> Optional[str]:
        """Person id matched to this food, or None."""
        return self._food_to_person.get(food_id)

    def get_match_for_person(self, person_id: str) -> Optional[str]:
        """Food id matched to this person, or None."""
        return self._person_to_food.get(person_id)

    def remove_match(self,
                     food_id: str,
                     person_id: str,
                     person_registry: Optional[PersonRegistry] = None) -> bool:
        """Remove a pairing only if both maps agree on it.

        Args:
            food_id: Matched food id
            person_id: Matched person id
            person_registry: If given, the person's matched_food_id is cleared too

        Returns:
            True if the match was removed
        """
        if (self._food_to_person.get(food_id) != person_id
                or self._person_to_food.get(person_id) != food_id):
            return False

        del self._food_to_person[food_id]
        del self._person_to_food[person_id]
        self._records.pop(food_id, None)

        if person_registry is not None:
            person = person_registry.get(person_id)
            if person is not None and person.matched_food_id == food_id:
                person.matched_food_id = None
        return True

    def clear_matches(self, person_registry: Optional[PersonRegistry] = None) -> None:
        """Drop every match. With a registry, also clear the people's matched_food_id."""
        if person_registry is not None:
            for person_id, food_id in self._person_to_food.items():
                person = person_registry.get(person_id)
                if person is not None and person.matched_food_id == food_id:
                    person.matched_food_id = None

        self._food_to_person.clear()
        self._person_to_food.clear()
        self._records.clear()
        self.state = MatcherState.IDLE

    def claim_matched_food(self, food_registry: FoodRegistry) -> int:
        """Mark every matched food item as claimed.

        Returns:
            Number of items that changed from available to claimed
        """
        claimed = 0
        for food_id in self._food_to_person:
            if food_registry.claim(food_id):
                claimed += 1
        return claimed

    def get_stats(self,
                  food_registry: FoodRegistry,
                  person_registry: PersonRegistry) -> MatchingStats:
        available = food_registry.list_available()
        # Matched items that were claimed after the run still count as offered food
        claimed_matched = 0
        for food_id in self._food_to_person:
            item = food_registry.get(food_id)
            if item is not None and not item.is_available:
                claimed_matched += 1
        total_food = len(available) + claimed_matched
        total_people = len(person_registry.list_active())
        matched_food = len(self._food_to_person)
        matched_people = len(self._person_to_food)

        return MatchingStats(
            total_food=total_food,
            total_people=total_people,
            matched_food=matched_food,
            matched_people=matched_people,
            unmatched_food=total_food - matched_food,
            unmatched_people=total_people - matched_people,
            match_rate=(matched_food / total_food) * 100 if total_food > 0 else 0.0,
        )

    def get_improvement_suggestions(self,
                                    food_registry: FoodRegistry,
                                    person_registry: PersonRegistry) -> List[str]:
        suggestions = []
        stats = self.get_stats(food_registry, person_registry)

        if stats.match_rate < 50:
            suggestions.append("Consider adding more people or food items to improve match rate")
        if stats.unmatched_food > stats.unmatched_people:
            suggestions.append("More people needed - consider promoting the app")
        if stats.unmatched_people > stats.unmatched_food:
            suggestions.append("More food donations needed - reach out to restaurants")

        expiring = food_registry.list_expiring_soon()
        if expiring:
            suggestions.append(f"{len(expiring)} food items expiring soon - prioritize these matches")

        return suggestions

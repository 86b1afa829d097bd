"""Matching session: refresh safety scores, run the matcher, summarize."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from surplus_match.data_layer.food_registry import FoodRegistry
from surplus_match.data_layer.models import HandlingConditions, Match, StorageConditions
from surplus_match.data_layer.person_registry import PersonRegistry
from surplus_match.matching.matcher import FoodMatcher, MatchingStats
from surplus_match.scoring.safety_scorer import SafetyScoreCalculator

logger = logging.getLogger(__name__)


@dataclass
class MatchingResult:
    """Outcome of one session run."""
    matches: List[Match]
    stats: MatchingStats
    suggestions: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)  # Food excluded from matching

    @property
    def success(self) -> bool:
        return bool(self.matches)


class MatchingSession:
    """Holds the registries, calculator and matcher for one in-memory dataset."""

    def __init__(self,
                 food_registry: Optional[FoodRegistry] = None,
                 person_registry: Optional[PersonRegistry] = None,
                 calculator: Optional[SafetyScoreCalculator] = None,
                 matcher: Optional[FoodMatcher] = None,
                 handling: Optional[HandlingConditions] = None,
                 storage: Optional[StorageConditions] = None):
        """Initialize session.

        Args:
            food_registry: FoodRegistry instance (empty one if None)
            person_registry: PersonRegistry instance (empty one if None)
            calculator: SafetyScoreCalculator instance
            matcher: FoodMatcher instance
            handling: Handling conditions applied when refreshing scores
            storage: Storage conditions applied when refreshing scores
        """
        self.food_registry = food_registry if food_registry is not None else FoodRegistry()
        self.person_registry = person_registry if person_registry is not None else PersonRegistry()
        self.calculator = calculator or SafetyScoreCalculator()
        self.matcher = matcher or FoodMatcher()
        self.handling = handling
        self.storage = storage

    def refresh_scores(self) -> int:
        return self.food_registry.refresh_all_safety_scores(
            self.calculator, self.handling, self.storage
        )

    def run(self, claim: bool = False) -> MatchingResult:
        """Refresh every score, then run a full matching pass.

        Args:
            claim: Mark matched food as claimed after matching

        Returns:
            MatchingResult with matches, stats, suggestions and warnings
        """
        self.refresh_scores()
        warnings = self._exclusion_warnings()

        matches = self.matcher.find_matches(self.food_registry, self.person_registry)
        stats = self.matcher.get_stats(self.food_registry, self.person_registry)
        suggestions = self.matcher.get_improvement_suggestions(
            self.food_registry, self.person_registry
        )

        if claim:
            claimed = self.matcher.claim_matched_food(self.food_registry)
            logger.info("Claimed %d matched food items", claimed)

        return MatchingResult(
            matches=matches,
            stats=stats,
            suggestions=suggestions,
            warnings=warnings,
        )

    def _exclusion_warnings(self) -> List[str]:
        warnings = []
        for item in self.food_registry.list_available():
            if item.safety_score is None:
                warnings.append(f"{item.name} ({item.id}) has no safety score and was not matched")
            elif item.safety_score.letter_grade == "F":
                warnings.append(
                    f"{item.name} ({item.id}) failed safety grading "
                    f"({item.safety_score.score:.2f}) and was not matched"
                )
        return warnings

"""Food safety scoring: weighted temperature, time, handling and storage rating."""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from surplus_match.data_layer.models import (
    SAFE_TEMPERATURE_RANGES,
    FoodItem,
    HandlingConditions,
    SafetyScore,
    StorageConditions,
    max_safe_hours,
)


# Score returned for a food type with no known temperature band
UNKNOWN_TYPE_TEMPERATURE_SCORE = 50.0

# Sub-scores below this are reported as concerns
CONCERN_THRESHOLD = 70.0

# (minimum score, grade), checked top-down
GRADE_THRESHOLDS = [
    (90.0, "A"),
    (80.0, "B"),
    (70.0, "C"),
    (60.0, "D"),
]

CONTAMINATION_RISK_POINTS = {"low": 30, "medium": 20, "high": 0}

ALL_CLEAR_MESSAGE = "All safety factors within acceptable ranges"


@dataclass
class SafetyWeights:
    """Weights for combining the four safety sub-scores."""
    temperature_weight: float = 0.4  # 40% - holding temperature
    time_weight: float = 0.3         # 30% - time since preparation
    handling_weight: float = 0.2     # 20% - staff handling compliance
    storage_weight: float = 0.1      # 10% - storage environment

    def __post_init__(self):
        """Validate weights sum to 1.0 and are non-negative."""
        weights = [self.temperature_weight, self.time_weight,
                   self.handling_weight, self.storage_weight]
        if any(w < 0 for w in weights):
            raise ValueError("All safety weights must be non-negative")

        total = sum(weights)
        if abs(total - 1.0) > 0.001:
            raise ValueError(f"Safety weights must sum to 1.0, got {total}")


def score_to_letter_grade(score: float) -> str:
    """Map a 0-100 score to its letter grade."""
    for minimum, grade in GRADE_THRESHOLDS:
        if score >= minimum:
            return grade
    return "F"


def _round_half_up(value: float, places: int = 2) -> float:
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


class SafetyScoreCalculator:
    """Rates food items A-F from temperature, age, handling and storage."""

    def __init__(self, weights: Optional[SafetyWeights] = None):
        """Initialize calculator.

        Args:
            weights: Optional custom sub-score weights
        """
        self.weights = weights or SafetyWeights()

    def calculate_safety_score(self,
                               food_item: FoodItem,
                               handling: Optional[HandlingConditions] = None,
                               storage: Optional[StorageConditions] = None) -> SafetyScore:
        """Calculate the safety score for a food item.

        Omitted handling and storage inputs are treated as ideal, so the
        default call gives an optimistic upper bound.

        Args:
            food_item: Item with type, temperature and preparation_time
            handling: Handling compliance flags
            storage: Storage environment

        Returns:
            SafetyScore with the grade, the rounded 0-100 score, the four
            sub-scores and a list of concerns
        """
        handling = handling or HandlingConditions()
        storage = storage or StorageConditions()

        factors = {
            "temperature": self._score_temperature(food_item),
            "time": self._score_time(food_item),
            "handling": self._score_handling(handling),
            "storage": self._score_storage(storage),
        }

        total_score = (
            factors["temperature"] * self.weights.temperature_weight +
            factors["time"] * self.weights.time_weight +
            factors["handling"] * self.weights.handling_weight +
            factors["storage"] * self.weights.storage_weight
        )
        score = _round_half_up(total_score)

        return SafetyScore(
            letter_grade=score_to_letter_grade(score),
            score=score,
            factors=factors,
            details=self._describe_concerns(food_item, factors),
        )

    def _score_temperature(self, food_item: FoodItem) -> float:
        """Score holding temperature against the type's safe band (0-100).

        Each degree outside the band costs 2 points, capped at 50.
        """
        band = SAFE_TEMPERATURE_RANGES.get(food_item.type)
        if band is None:
            return UNKNOWN_TYPE_TEMPERATURE_SCORE

        low, high = band
        temperature = food_item.temperature
        if low <= temperature <= high:
            return 100.0

        deviation = low - temperature if temperature < low else temperature - high
        penalty = min(50.0, deviation * 2)
        return max(0.0, 100.0 - penalty)

    def _score_time(self, food_item: FoodItem) -> float:
        """Score elapsed time since preparation (0-100), linear to zero at max age."""
        max_hours = max_safe_hours(food_item.type)
        elapsed = food_item.preparation_time

        if elapsed <= 0:
            return 100.0
        if elapsed >= max_hours:
            return 0.0
        return max(0.0, 100.0 - (elapsed / max_hours) * 100.0)

    def _score_handling(self, handling: HandlingConditions) -> float:
        score = 0.0
        if handling.staff_trained:
            score += 25
        if handling.protocols_followed:
            score += 25
        if handling.gloves_used:
            score += 25
        if handling.clean_surfaces:
            score += 25
        return score

    def _score_storage(self, storage: StorageConditions) -> float:
        """Score the storage environment (0-100)."""
        score = 0.0

        # Optimal humidity is 40-60%, tolerable 30-70%
        humidity = storage.humidity
        if 40 <= humidity <= 60:
            score += 30
        elif 30 <= humidity <= 70:
            score += 20
        else:
            score += 10

        score += CONTAMINATION_RISK_POINTS.get(storage.contamination_risk, 0)

        if storage.proper_containers:
            score += 20
        if storage.clean_environment:
            score += 20

        return score

    def _describe_concerns(self, food_item: FoodItem, factors: Dict[str, float]) -> List[str]:
        details = []

        if factors["temperature"] < CONCERN_THRESHOLD:
            details.append(f"Temperature concern: {food_item.temperature:g}°F")
        if factors["time"] < CONCERN_THRESHOLD:
            details.append(f"Time concern: {food_item.preparation_time:g} hours old")
        if factors["handling"] < CONCERN_THRESHOLD:
            details.append("Handling compliance issues detected")
        if factors["storage"] < CONCERN_THRESHOLD:
            details.append("Storage conditions suboptimal")

        return details or [ALL_CLEAR_MESSAGE]

"""Scoring module for food safety evaluation."""

from .safety_scorer import SafetyScoreCalculator, SafetyWeights, score_to_letter_grade

__all__ = [
    "SafetyScoreCalculator",
    "SafetyWeights",
    "score_to_letter_grade"
]

"""Matching module pairing surplus food with people."""

from .matcher import FoodMatcher, MatcherConfig, MatcherState, MatchingStats
from .session import MatchingSession, MatchingResult

__all__ = [
    "FoodMatcher",
    "MatcherConfig",
    "MatcherState",
    "MatchingStats",
    "MatchingSession",
    "MatchingResult"
]

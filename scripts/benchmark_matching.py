#!/usr/bin/env python3
"""Benchmark FoodMatcher.find_matches: run time and output summary.

Run from repo root:
  python scripts/benchmark_matching.py

Sizes via env: MATCH_FOOD_COUNT, MATCH_PEOPLE_COUNT.
"""
from __future__ import annotations

import os
import random
import sys
import time

# Allow importing the package when run from repo root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from surplus_match.data_layer.food_registry import FoodRegistry
from surplus_match.data_layer.models import FOOD_TYPES, SAFE_TEMPERATURE_RANGES
from surplus_match.data_layer.person_registry import PersonRegistry
from surplus_match.matching.matcher import FoodMatcher, MatcherConfig
from surplus_match.scoring.safety_scorer import SafetyScoreCalculator

RESTRICTIONS = ["nut", "pork", "shrimp", "dairy", "gluten"]


def populate(food_count: int, people_count: int, seed: int = 42):
    rng = random.Random(seed)
    food_registry = FoodRegistry()
    person_registry = PersonRegistry()

    for i in range(food_count):
        food_type = rng.choice(FOOD_TYPES)
        low, high = SAFE_TEMPERATURE_RANGES[food_type]
        food_registry.add({
            "id": f"f{i}",
            "name": f"{rng.choice(RESTRICTIONS)} dish {i}",
            "restaurant_name": f"Restaurant {i % 17}",
            "type": food_type,
            "preparation_time": round(rng.uniform(0, 5), 1),
            "temperature": round(rng.uniform(low - 15, high + 15), 1),
        })
    for i in range(people_count):
        person_registry.add({
            "id": f"p{i}",
            "name": f"Person {i}",
            "location": "Downtown",
            "preferred_food_type": rng.choice(("any",) + FOOD_TYPES),
            "dietary_restrictions": rng.sample(RESTRICTIONS, k=rng.randint(0, 2)),
        })
    return food_registry, person_registry


def main() -> None:
    food_count = int(os.environ.get("MATCH_FOOD_COUNT", "2000"))
    people_count = int(os.environ.get("MATCH_PEOPLE_COUNT", "2000"))

    food_registry, person_registry = populate(food_count, people_count)
    matcher = FoodMatcher(MatcherConfig(normalize_by_factor_count=False))

    t0 = time.perf_counter()
    food_registry.refresh_all_safety_scores(SafetyScoreCalculator())
    t1 = time.perf_counter()
    matches = matcher.find_matches(food_registry, person_registry)
    t2 = time.perf_counter()

    stats = matcher.get_stats(food_registry, person_registry)
    print("--- Matching benchmark ---")
    print(f"Food items: {food_count}, people: {people_count}")
    print(f"Score refresh: {t1 - t0:.3f}s")
    print(f"Matching: {t2 - t1:.3f}s")
    print(f"Matches: {len(matches)}")
    print(f"Match rate: {stats.match_rate:.1f}%")


if __name__ == "__main__":
    main()

"""Data models for the surplus food matching engine."""
import random
import string
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


# Food types a restaurant can report
FOOD_TYPE_HOT = "hot"
FOOD_TYPE_COLD = "cold"
FOOD_TYPE_FROZEN = "frozen"
FOOD_TYPES = (FOOD_TYPE_HOT, FOOD_TYPE_COLD, FOOD_TYPE_FROZEN)

# Person preference that accepts every food type
FOOD_TYPE_ANY = "any"

# Safe holding band per food type, in degrees F (min, max)
SAFE_TEMPERATURE_RANGES: Dict[str, tuple] = {
    FOOD_TYPE_HOT: (140.0, 165.0),
    FOOD_TYPE_COLD: (32.0, 40.0),
    FOOD_TYPE_FROZEN: (-10.0, 32.0),
}

# Max safe age per food type, in hours. Used by both the time sub-score and
# the expiration countdown.
MAX_SAFE_HOURS: Dict[str, float] = {
    FOOD_TYPE_HOT: 4.0,
    FOOD_TYPE_COLD: 4.0,
    FOOD_TYPE_FROZEN: 24.0,
}
DEFAULT_MAX_SAFE_HOURS = 4.0

# Items with this many hours (or fewer) left count as expiring soon
EXPIRING_SOON_HOURS = 1.0

DEFAULT_LOCATION = "Unknown"
DEFAULT_MAX_DISTANCE_MILES = 10


def max_safe_hours(food_type: str) -> float:
    """Max safe age in hours for a food type (4h default for unknown types)."""
    return MAX_SAFE_HOURS.get(food_type, DEFAULT_MAX_SAFE_HOURS)


def generate_id(prefix: str) -> str:
    """Build an id like ``food_1700000000000_k3j9x0a1b``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


@dataclass
class HandlingConditions:
    """Handling compliance flags. Every field defaults to the ideal value."""

    staff_trained: bool = True
    protocols_followed: bool = True
    gloves_used: bool = True
    clean_surfaces: bool = True


@dataclass
class StorageConditions:
    """Storage environment. Every field defaults to the ideal value."""

    humidity: float = 50.0  # percent
    contamination_risk: str = "low"  # "low", "medium", "high"
    proper_containers: bool = True
    clean_environment: bool = True


@dataclass
class SafetyScore:
    """Result of a safety score computation."""

    letter_grade: str  # "A" through "F"
    score: float  # 0-100, rounded to 2 decimals
    factors: Dict[str, float]  # temperature/time/handling/storage sub-scores
    details: List[str]  # Human-readable concerns

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FoodItem:
    """A unit of surplus food offered by a restaurant."""

    id: str
    name: str
    restaurant_name: str
    type: str  # "hot", "cold", "frozen"
    preparation_time: float  # Hours since preparation
    temperature: float  # Current temperature in degrees F
    location: str = DEFAULT_LOCATION
    image: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    is_available: bool = True
    safety_score: Optional[SafetyScore] = None

    def claim(self) -> None:
        """Mark the food as claimed; it no longer shows up as available."""
        self.is_available = False

    def is_safe(self) -> bool:
        """True when a safety score exists and is not a failing grade."""
        if self.safety_score is None:
            return False
        return self.safety_score.letter_grade != "F"

    def to_display_dict(self) -> Dict[str, Any]:
        """Snapshot for presentation code."""
        return {
            "id": self.id,
            "name": self.name,
            "restaurant_name": self.restaurant_name,
            "type": self.type,
            "preparation_time": self.preparation_time,
            "temperature": self.temperature,
            "location": self.location,
            "image": self.image,
            "description": self.description,
            "safety_score": self.safety_score.to_dict() if self.safety_score else None,
            "is_available": self.is_available,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class Person:
    """Someone looking for food."""

    id: str
    name: str
    location: str
    preferred_food_type: str = FOOD_TYPE_ANY  # "any", "hot", "cold", "frozen"
    max_distance: float = DEFAULT_MAX_DISTANCE_MILES  # miles
    dietary_restrictions: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    is_active: bool = True
    matched_food_id: Optional[str] = None  # Weak reference into the food registry

    def deactivate(self) -> None:
        self.is_active = False

    def reactivate(self) -> None:
        self.is_active = True

    def to_display_dict(self) -> Dict[str, Any]:
        """Snapshot for presentation code."""
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "preferred_food_type": self.preferred_food_type,
            "max_distance": self.max_distance,
            "dietary_restrictions": list(self.dietary_restrictions),
            "is_active": self.is_active,
            "matched_food_id": self.matched_food_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class Match:
    """A committed pairing of one food item with one person."""

    id: str
    food_id: str
    person_id: str
    food: Dict[str, Any]  # Display snapshot at match time
    person: Dict[str, Any]  # Display snapshot at match time
    match_score: float
    created_at: datetime
    status: str = "active"


@dataclass(frozen=True)
class MatchRef:
    """Id-only view of a current match."""

    food_id: str
    person_id: str
    match_id: str


def match_id_for(food_id: str, person_id: str) -> str:
    return f"match_{food_id}_{person_id}"

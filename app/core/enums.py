"""Enum definitions for the application."""
from enum import Enum


class RecommendationType(str, Enum):
    """Classification of a room against the utilization threshold."""
    UNDERUTILIZED = "underutilized"
    OVERUTILIZED = "overutilized"
    OPTIMAL = "optimal"


class Priority(str, Enum):
    """Recommendation priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class RoomType(str, Enum):
    """Well-known room categories; the column itself is free-form."""
    GENERAL = "general"
    CONFERENCE = "conference"
    OFFICE = "office"
    COLLABORATION = "collaboration"
    FOCUS = "focus"

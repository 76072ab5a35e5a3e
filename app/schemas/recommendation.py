"""Recommendation schemas."""
from typing import List, Optional
from pydantic import BaseModel

from app.core.enums import Priority, RecommendationType


class Recommendation(BaseModel):
    """Guidance for a single room."""
    room_id: str
    room_name: str
    current_utilization: float
    recommendation_type: RecommendationType
    recommendation: str
    potential_savings: Optional[float] = None
    priority: Priority


class RecommendationSummary(BaseModel):
    """Aggregate counts over a recommendation list."""
    total_rooms_analyzed: int
    underutilized: int
    overutilized: int
    optimal: int
    total_potential_savings: float


class RecommendationReport(BaseModel):
    """Recommendations for an office plus their summary."""
    office_id: str
    analysis_period_days: int
    utilization_threshold: float
    recommendations: List[Recommendation]
    summary: RecommendationSummary

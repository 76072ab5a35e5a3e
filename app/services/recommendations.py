"""Rule-based space optimization recommendations."""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from pydantic import TypeAdapter

from app.core.cache import ResultCache, recommendations_key
from app.core.config import settings
from app.core.enums import Priority, RecommendationType, RoomType
from app.core.logging import get_logger
from app.models.room import Room
from app.schemas.recommendation import Recommendation, RecommendationSummary
from app.services.occupancy_store import OccupancyStore


logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_THRESHOLD = 0.5

# Simplified cost model: $50 per seat per month
COST_PER_PERSON_PER_MONTH = 50
MONTHS_PER_YEAR = 12

_recommendation_list = TypeAdapter(List[Recommendation])


def classify(rate: float, threshold: float) -> Tuple[RecommendationType, Priority]:
    """
    Classify a utilization rate against a threshold.

    Bounds are exclusive: below half the threshold is underutilized (high
    priority under a quarter), above one and a half times the threshold is
    overutilized (high priority above double), everything else is optimal.
    """
    if rate < threshold * 0.5:
        priority = Priority.HIGH if rate < threshold * 0.25 else Priority.MEDIUM
        return RecommendationType.UNDERUTILIZED, priority
    if rate > threshold * 1.5:
        priority = Priority.HIGH if rate > threshold * 2 else Priority.MEDIUM
        return RecommendationType.OVERUTILIZED, priority
    return RecommendationType.OPTIMAL, Priority.LOW


def estimate_savings(capacity: int, rate: float) -> float:
    """Annual cost of the unused share of a room's capacity."""
    unused_capacity = capacity * (1 - rate)
    return unused_capacity * COST_PER_PERSON_PER_MONTH * MONTHS_PER_YEAR


def build_recommendation(
    room: Room,
    rate: float,
    total_events: int,
    threshold: float,
) -> Optional[Recommendation]:
    """Recommendation for one room, or None for an optimal room with no data."""
    recommendation_type, priority = classify(rate, threshold)
    percent = f"{rate * 100:.1f}%"
    potential_savings = None

    if recommendation_type == RecommendationType.UNDERUTILIZED:
        if room.type == RoomType.CONFERENCE.value:
            text = (
                f"Conference room is severely underutilized ({percent}). "
                "Consider converting to collaboration space or reducing room size."
            )
            potential_savings = estimate_savings(room.capacity, rate)
        else:
            text = (
                "Space is underutilized. Consider flexible desk arrangements "
                "or consolidating with adjacent areas."
            )
    elif recommendation_type == RecommendationType.OVERUTILIZED:
        text = (
            f"Space is overutilized ({percent} of capacity). "
            "Consider expanding capacity or improving booking efficiency."
        )
    else:
        if total_events == 0:
            return None
        text = f"Space utilization is optimal ({percent} of capacity)."

    return Recommendation(
        room_id=room.room_id,
        room_name=room.name,
        current_utilization=rate,
        recommendation_type=recommendation_type,
        recommendation=text,
        potential_savings=potential_savings,
        priority=priority,
    )


def rank(recommendations: List[Recommendation], threshold: float) -> List[Recommendation]:
    """Order by priority (high first), then by distance from the threshold."""
    return sorted(
        recommendations,
        key=lambda r: (-r.priority.rank, -abs(r.current_utilization - threshold)),
    )


def summarize(recommendations: List[Recommendation]) -> RecommendationSummary:
    def count(kind: RecommendationType) -> int:
        return sum(1 for r in recommendations if r.recommendation_type == kind)

    return RecommendationSummary(
        total_rooms_analyzed=len(recommendations),
        underutilized=count(RecommendationType.UNDERUTILIZED),
        overutilized=count(RecommendationType.OVERUTILIZED),
        optimal=count(RecommendationType.OPTIMAL),
        total_potential_savings=sum(r.potential_savings or 0 for r in recommendations),
    )


class RecommendationService:
    """Computes and caches ranked recommendations for an office."""

    def __init__(self, store: OccupancyStore, cache: ResultCache):
        self.store = store
        self.cache = cache

    async def get_recommendations(
        self,
        tenant_id: str,
        office_id: str,
        days: int = DEFAULT_WINDOW_DAYS,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> List[Recommendation]:
        cache_key = recommendations_key(tenant_id, office_id, days, threshold)

        cached = await self.cache.get_json(cache_key)
        if cached is not None:
            logger.debug(
                "Returning cached recommendations",
                extra={"tenant_id": tenant_id, "office_id": office_id},
            )
            return _recommendation_list.validate_json(cached)

        rooms = await self.store.list_active_rooms(tenant_id, office_id)
        if not rooms:
            return []

        since = datetime.now(timezone.utc) - timedelta(days=days)
        recommendations = []
        for room in rooms:
            stats = await self.store.aggregate_room_stats(tenant_id, room.room_id, since)
            rate = stats.average / room.capacity if room.capacity > 0 else 0.0
            recommendation = build_recommendation(room, rate, stats.count, threshold)
            if recommendation is not None:
                recommendations.append(recommendation)

        recommendations = rank(recommendations, threshold)

        await self.cache.set_json(
            cache_key,
            _recommendation_list.dump_json(recommendations).decode(),
            settings.RECOMMENDATION_CACHE_TTL,
        )

        logger.info(
            f"Recommendations generated: {len(recommendations)}",
            extra={"tenant_id": tenant_id, "office_id": office_id},
        )
        return recommendations

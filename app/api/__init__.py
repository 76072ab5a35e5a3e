"""API router mounted under ``/api``."""
from fastapi import APIRouter

from app.api.health import router as health_router
from app.api.events import router as events_router
from app.api.analytics import router as analytics_router


router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(events_router, prefix="/events", tags=["Occupancy Events"])
router.include_router(analytics_router, tags=["Analytics"])

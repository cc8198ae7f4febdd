"""Dashboard statistics for the trainer overview."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.app.dependencies.repository import get_repository
from backend.app.schemas.dashboard import DashboardStats
from backend.app.services.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(repo: Repository = Depends(get_repository)):
    try:
        return repo.get_dashboard_stats()
    except Exception:
        logger.exception("Error computing dashboard stats")
        raise HTTPException(status_code=500, detail="Could not load dashboard statistics")

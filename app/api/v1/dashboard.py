"""Admin dashboard route."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.dashboard import DashboardStats
from app.services.dashboard import get_dashboard_stats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Annotated[Session, Depends(get_db)]) -> DashboardStats:
    return get_dashboard_stats(db)

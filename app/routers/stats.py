# app/routers/stats.py
"""Dashboard counters and traffic reports."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ValidationError
from app.schemas.stats import MyStatsOut, ReportOut, StatsOut
from app.services.stats_service import get_dashboard_stats, get_traffic_report, get_user_stats

router = APIRouter()


@router.get("/stats", response_model=StatsOut, summary="Admin dashboard counters")
def dashboard_stats(db: Session = Depends(get_db)):
    return get_dashboard_stats(db)


@router.get("/my-stats", response_model=MyStatsOut, summary="Access counters for one user")
def user_stats(user_id: Optional[str] = Query(None, alias="userId"), db: Session = Depends(get_db)):
    if not user_id:
        raise ValidationError("User ID required")
    return get_user_stats(db, user_id)


@router.get("/reports", response_model=ReportOut, summary="Traffic report for a day, week or month")
def traffic_report(period: str = "week", db: Session = Depends(get_db)):
    """Aggregated from the access log. Unknown periods fall back to week."""
    return get_traffic_report(db, period)

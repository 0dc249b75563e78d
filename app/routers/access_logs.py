# app/routers/access_logs.py
"""Read-only views over the access log. There is no write or delete endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.dependencies import get_repository
from app.exceptions import ValidationError
from app.schemas.access_log import AccessLogDetailOut
from app.services.repository import EntityRepository

router = APIRouter()


@router.get("/access-logs", response_model=list[AccessLogDetailOut], summary="Full access log, newest first")
def list_access_logs(repo: EntityRepository = Depends(get_repository)):
    return repo.access_logs_with_details()


@router.get("/access-logs/recent", response_model=list[AccessLogDetailOut], summary="Most recent access events")
def recent_access_logs(limit: int = Query(settings.RECENT_LOGS_LIMIT, ge=1, le=500),
                       repo: EntityRepository = Depends(get_repository)):
    return repo.access_logs_with_details(limit=limit)


@router.get("/my-access-history", response_model=list[AccessLogDetailOut], summary="Access history for one user")
def user_access_history(user_id: Optional[str] = Query(None, alias="userId"),
                        repo: EntityRepository = Depends(get_repository)):
    if not user_id:
        raise ValidationError("User ID required")
    return repo.access_logs_with_details(user_id=user_id)

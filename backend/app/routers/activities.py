"""
Read-only listing of stored git activity.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import utils.logging
from app.models.activity import ActivityType
from app.schemas.activity import Activity, ActivityPage, Pagination
from services.activity_store import ActivityFilter, ActivityStore
from utils.database import get_session

logger = utils.logging.get_logger(__name__)

router = APIRouter(prefix="/api/git-activities", tags=["git-activities"])


@router.get("")
def list_git_activities(
    type_: Optional[ActivityType] = Query(None, alias="type"),
    user_id: Optional[int] = Query(None, alias="userId"),
    repository: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: int = Query(100, ge=0),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session),
):
    """
    List activities newest first with total-count pagination.

    ``repository`` matches case-insensitively on a substring and ``limit``
    is capped at 500.
    """
    filters = ActivityFilter(
        type=type_,
        user_id=user_id,
        repository=repository,
        start=start_date,
        end=end_date,
    )
    try:
        rows, total = ActivityStore(session).page(filters, limit=limit, offset=offset)
    except SQLAlchemyError:
        logger.exception("GET /api/git-activities failed")
        return JSONResponse({"error": "Failed to fetch git activities"}, status_code=500)

    page = ActivityPage(
        data=[Activity.model_validate(row) for row in rows],
        pagination=Pagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(rows) < total,
        ),
    )
    return page.model_dump(mode="json", by_alias=True)

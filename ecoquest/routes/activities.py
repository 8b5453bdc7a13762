from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ..models.activity_schema import (
    ActivityCategory,
    DailySummary,
    LogActivityRequest,
    LoggedActivity,
)
from ..services.activity_log import ActivityLogService
from ..services.supabase_client import SupabaseClient, get_supabase
from ..session import SessionContext, get_session

router = APIRouter(prefix="/activities", tags=["activities"])


def get_activity_service(supabase: SupabaseClient = Depends(get_supabase)) -> ActivityLogService:
    return ActivityLogService(supabase)


@router.get("/categories", response_model=List[ActivityCategory])
async def list_categories(
    session: SessionContext = Depends(get_session),
    service: ActivityLogService = Depends(get_activity_service),
) -> List[ActivityCategory]:
    return await service.list_categories(session)


@router.get("", response_model=List[Dict[str, Any]])
async def list_activities(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    session: SessionContext = Depends(get_session),
    service: ActivityLogService = Depends(get_activity_service),
) -> List[Dict[str, Any]]:
    return await service.list_activities(session, start_date, end_date)


@router.post("", response_model=LoggedActivity, status_code=201)
async def log_activity(
    payload: LogActivityRequest,
    session: SessionContext = Depends(get_session),
    service: ActivityLogService = Depends(get_activity_service),
) -> LoggedActivity:
    return await service.log_activity(session, payload)


@router.delete("/{activity_id}", response_model=DailySummary)
async def delete_activity(
    activity_id: int,
    session: SessionContext = Depends(get_session),
    service: ActivityLogService = Depends(get_activity_service),
) -> DailySummary:
    return await service.delete_activity(session, activity_id)

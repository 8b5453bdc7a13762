from fastapi import APIRouter, Depends, Query

from ..models.insights_schema import DashboardResponse, InsightsResponse, TimeRange
from ..services.insights import InsightsService
from ..services.supabase_client import SupabaseClient, get_supabase
from ..session import SessionContext, get_session

router = APIRouter(tags=["insights"])


def get_insights_service(supabase: SupabaseClient = Depends(get_supabase)) -> InsightsService:
    return InsightsService(supabase)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    session: SessionContext = Depends(get_session),
    service: InsightsService = Depends(get_insights_service),
) -> DashboardResponse:
    return await service.get_dashboard(session)


@router.get("/insights", response_model=InsightsResponse)
async def insights(
    time_range: TimeRange = Query(default="month", alias="range"),
    session: SessionContext = Depends(get_session),
    service: InsightsService = Depends(get_insights_service),
) -> InsightsResponse:
    return await service.get_insights(session, time_range)

from fastapi import APIRouter, Depends, Query

from ..models.leaderboard_schema import LeaderboardResponse, SortBy
from ..services.leaderboard import LeaderboardService
from ..services.supabase_client import SupabaseClient, get_supabase
from ..session import SessionContext, get_session

router = APIRouter(tags=["leaderboard"])


def get_leaderboard_service(supabase: SupabaseClient = Depends(get_supabase)) -> LeaderboardService:
    return LeaderboardService(supabase)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    sort_by: SortBy = "points",
    limit: int = Query(default=50, ge=1, le=500),
    session: SessionContext = Depends(get_session),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    return await service.get_leaderboard(session, sort_by, limit)

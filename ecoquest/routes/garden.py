from fastapi import APIRouter, Depends, Query

from ..models.garden_schema import GardenResponse
from ..models.insights_schema import TimeRange
from ..services.garden import GardenService
from ..services.supabase_client import SupabaseClient, get_supabase
from ..session import SessionContext, get_session

router = APIRouter(tags=["garden"])


def get_garden_service(supabase: SupabaseClient = Depends(get_supabase)) -> GardenService:
    return GardenService(supabase)


@router.get("/garden", response_model=GardenResponse)
async def garden(
    time_range: TimeRange = Query(default="month", alias="range"),
    session: SessionContext = Depends(get_session),
    service: GardenService = Depends(get_garden_service),
) -> GardenResponse:
    return await service.get_garden(session, time_range)

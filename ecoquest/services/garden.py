from datetime import date

from ..models.garden_schema import GardenResponse, PlantLevel, PlantProgress
from ..session import SessionContext
from .insights import fetch_profile, fetch_trends, period_params
from .supabase_client import SupabaseClient

PLANT_LEVELS = (
    PlantLevel(level=1, points_required=0, name="Seedling"),
    PlantLevel(level=2, points_required=100, name="Sprout"),
    PlantLevel(level=3, points_required=200, name="Sapling"),
    PlantLevel(level=4, points_required=500, name="Young Tree"),
    PlantLevel(level=5, points_required=1000, name="Mature Tree"),
    PlantLevel(level=6, points_required=2000, name="Ancient Tree"),
)


def plant_progress(total_points: int) -> PlantProgress:
    """Growth stage of the user's plant for a running points total."""
    index = 0
    for i in range(len(PLANT_LEVELS) - 1, -1, -1):
        if total_points >= PLANT_LEVELS[i].points_required:
            index = i
            break

    current = PLANT_LEVELS[index]
    if index == len(PLANT_LEVELS) - 1:
        return PlantProgress(total_points=total_points, current=current, next=current, progress=100.0)

    upcoming = PLANT_LEVELS[index + 1]
    span = upcoming.points_required - current.points_required
    gained = max(0, total_points - current.points_required)
    progress = min(100.0, gained / span * 100)
    return PlantProgress(
        total_points=total_points,
        current=current,
        next=upcoming,
        progress=round(progress, 2),
    )


class GardenService:
    def __init__(self, supabase: SupabaseClient) -> None:
        self.supabase = supabase

    async def get_garden(
        self, session: SessionContext, time_range: str = "month", today: date | None = None
    ) -> GardenResponse:
        db = self.supabase.for_session(session)
        profile = await fetch_profile(db, session)
        trends = await fetch_trends(db, session, period_params(time_range, today))
        return GardenResponse(plant=plant_progress(profile.total_points), trends=trends)

from typing import Iterable

from ..models.leaderboard_schema import LeaderboardEntry, LeaderboardResponse, SortBy
from ..session import SessionContext
from .supabase_client import SupabaseClient

LEADERBOARD_COLUMNS = "id,username,full_name,avatar_url,total_carbon_saved,total_points"

_SORT_KEYS = {
    "points": "total_points",
    "carbon": "total_carbon_saved",
}


def rank_profiles(profiles: Iterable[dict], sort_by: SortBy = "points") -> list[LeaderboardEntry]:
    key = _SORT_KEYS[sort_by]
    ordered = sorted(profiles, key=lambda p: p.get(key) or 0, reverse=True)
    return [
        LeaderboardEntry(
            rank=rank,
            id=str(p["id"]),
            username=p.get("username"),
            full_name=p.get("full_name"),
            avatar_url=p.get("avatar_url"),
            total_carbon_saved=p.get("total_carbon_saved") or 0.0,
            total_points=p.get("total_points") or 0,
        )
        for rank, p in enumerate(ordered, start=1)
    ]


class LeaderboardService:
    def __init__(self, supabase: SupabaseClient) -> None:
        self.supabase = supabase

    async def get_leaderboard(
        self, session: SessionContext, sort_by: SortBy = "points", limit: int = 50
    ) -> LeaderboardResponse:
        db = self.supabase.for_session(session)
        rows = await db.select(
            "profiles",
            LEADERBOARD_COLUMNS,
            order=f"{_SORT_KEYS[sort_by]}.desc",
            limit=limit,
        )
        return LeaderboardResponse(sort_by=sort_by, entries=rank_profiles(rows, sort_by))

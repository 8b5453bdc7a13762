from typing import List, Literal, Optional

from pydantic import BaseModel

SortBy = Literal["points", "carbon"]


class LeaderboardEntry(BaseModel):
    rank: int
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    total_carbon_saved: float = 0.0
    total_points: int = 0


class LeaderboardResponse(BaseModel):
    sort_by: SortBy
    entries: List[LeaderboardEntry]

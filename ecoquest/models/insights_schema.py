from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

TimeRange = Literal["week", "month", "year"]


class Profile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    total_carbon_saved: float = 0.0
    total_points: int = 0


class TrendPoint(BaseModel):
    date: str
    carbon: float


class CategoryFootprint(BaseModel):
    category_id: Optional[int] = None
    category_name: str
    total_carbon: float


class CarbonTip(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    points_potential: int = 0


class InsightsResponse(BaseModel):
    range: TimeRange
    start_date: str
    end_date: str
    profile: Profile
    trends: List[TrendPoint]
    footprint_by_category: List[CategoryFootprint]
    recommendations: List[CarbonTip]


class DashboardResponse(BaseModel):
    profile: Profile
    recent_activities: List[Dict[str, Any]]
    carbon_by_category: List[CategoryFootprint]

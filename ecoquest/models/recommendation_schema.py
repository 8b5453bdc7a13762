from typing import List, Optional

from pydantic import BaseModel, Field

from .insights_schema import CategoryFootprint


class RecentActivity(BaseModel):
    category: str
    activity_type: str = ""
    carbon_amount: float = 0.0


class RecommendationRequest(BaseModel):
    footprint_by_category: List[CategoryFootprint] = Field(default_factory=list)
    recent_activities: List[RecentActivity] = Field(
        default_factory=list, description="Recent logged activities, newest first"
    )
    max_tips: int = Field(default=5, ge=1, le=5)


class Recommendation(BaseModel):
    title: str
    description: str
    category: Optional[str] = None
    estimated_co2_saving: float = Field(default=0.0, description="kg CO₂e saved per week")
    points_potential: int = 0


class RecommendationResponse(BaseModel):
    recommendations: List[Recommendation]
    sourceModel: Optional[str] = None

from typing import List

from pydantic import BaseModel, Field

from .insights_schema import TrendPoint


class PlantLevel(BaseModel):
    level: int
    points_required: int
    name: str


class PlantProgress(BaseModel):
    total_points: int
    current: PlantLevel
    next: PlantLevel
    progress: float = Field(..., ge=0, le=100, description="Percent towards the next level")


class GardenResponse(BaseModel):
    plant: PlantProgress
    trends: List[TrendPoint]

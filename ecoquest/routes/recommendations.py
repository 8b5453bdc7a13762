from fastapi import APIRouter

from ..models.recommendation_schema import RecommendationRequest, RecommendationResponse
from ..services.recommendations import RecommendationService

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/recommendations", response_model=RecommendationResponse)
async def recommendations(payload: RecommendationRequest) -> RecommendationResponse:
    return await RecommendationService.recommend(payload)

from typing import List

from fastapi import APIRouter

from ..models.activity_schema import CalcActivityRequest, CalcActivityResponse, FormField
from ..services.carbon import calculate_activity
from ..services.form_fields import form_fields

router = APIRouter(prefix="/calc", tags=["calc"])


@router.post("/activity", response_model=CalcActivityResponse)
async def calc_activity(payload: CalcActivityRequest) -> CalcActivityResponse:
    result = calculate_activity(payload.category, payload.activityType, payload.details)
    return CalcActivityResponse(
        category=result.category.value,
        activityType=result.activity_type,
        details=result.details,
        carbonAmount=result.carbon_amount,
        pointsEarned=result.points_earned,
        defaultedFields=list(result.defaulted_fields),
    )


@router.get("/form_fields/{category}", response_model=List[FormField])
async def get_form_fields(category: str) -> List[FormField]:
    return form_fields(category)

import json
import logging
from typing import Any

from fastapi import HTTPException
from pydantic import ValidationError

from ..models.recommendation_schema import (
    Recommendation,
    RecommendationRequest,
    RecommendationResponse,
)
from ..settings import settings
from . import gemini

logger = logging.getLogger(__name__)

PROMPT = """
You are a sustainability coach inside a gamified carbon tracking app.

The user will provide their carbon footprint per activity category (kg CO₂e)
and a few recently logged activities. Categories are Transportation, Food,
Home Energy and Shopping; other names are custom categories.

Your tasks:
1. Find the categories where the user emits the most.
2. Suggest concrete, achievable actions that reduce those emissions.
3. Estimate the weekly CO₂ saving of each action in kg.
4. Estimate how many reward points the action could earn (5-40).

Output strictly in JSON only, using this exact structure:

{
  "recommendations": [
    {
      "title": "<short action>",
      "description": "<one or two sentences>",
      "category": "<category name>",
      "estimated_co2_saving": <kg>,
      "points_potential": <int>
    }
  ]
}

Rules:
- CO₂ values must be numeric (float).
- Never output additional text outside JSON.
""".strip()


SCHEMA_MISMATCH = "Gemini JSON schema mismatch"


class RecommendationService:
    @staticmethod
    def _items(parsed: Any) -> list:
        if isinstance(parsed, dict):
            parsed = parsed.get("recommendations", parsed.get("tips", []))
        if not isinstance(parsed, list):
            logger.error("Gemini recommendations are not a list: %r", parsed)
            raise HTTPException(status_code=502, detail=SCHEMA_MISMATCH)
        return parsed

    @classmethod
    def _map_recommendations(cls, parsed: Any, max_tips: int) -> list[Recommendation]:
        recommendations: list[Recommendation] = []
        for item in cls._items(parsed)[:max_tips]:
            if not isinstance(item, dict):
                continue
            data = {
                "title": item.get("title") or item.get("action") or "",
                "description": item.get("description") or item.get("explanation") or "",
                "category": item.get("category"),
                "estimated_co2_saving": item.get("estimated_co2_saving") or 0.0,
                "points_potential": item.get("points_potential") or 0,
            }
            try:
                recommendations.append(Recommendation.model_validate(data))
            except ValidationError as exc:
                logger.exception("Recommendation validation failed: %s", exc)
                raise HTTPException(status_code=502, detail=SCHEMA_MISMATCH) from exc
        return recommendations

    @classmethod
    async def recommend(cls, payload: RecommendationRequest) -> RecommendationResponse:
        model = gemini.json_model()

        payload_json = json.dumps(payload.model_dump(), ensure_ascii=False, indent=2)
        user_prompt = f"User data:\n{payload_json}\n\nReturn at most {payload.max_tips} recommendations."
        parsed = await gemini.generate_json(model, [PROMPT, user_prompt])

        return RecommendationResponse(
            recommendations=cls._map_recommendations(parsed, payload.max_tips),
            sourceModel=settings.gemini_model,
        )

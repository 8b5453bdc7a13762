import asyncio
import json
import logging
import re
from typing import Any, Sequence

import google.generativeai as genai  # type: ignore[import-untyped]
from fastapi import HTTPException

from ..settings import settings

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def json_model() -> genai.GenerativeModel:
    """Gemini model configured to answer in JSON."""
    if not settings.gemini_api_key:
        raise HTTPException(status_code=500, detail="GEMINI_API_KEY is not configured")

    try:
        genai.configure(api_key=settings.gemini_api_key)
        return genai.GenerativeModel(
            model_name=settings.gemini_model,
            generation_config={"response_mime_type": "application/json"},
        )
    except Exception as exc:
        logger.exception("Gemini init failed: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to initialize Gemini client") from exc


def strip_fences(text: str) -> str:
    return _FENCE.sub("", text.strip())


async def generate_json(model: Any, prompts: Sequence[str]) -> Any:
    """Run one generation off the event loop and decode its JSON answer."""
    try:
        response = await asyncio.to_thread(model.generate_content, list(prompts))
    except Exception as exc:
        logger.exception("Gemini request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Failed to contact Gemini") from exc

    try:
        raw_text = response.text
    except Exception as exc:
        logger.exception("Gemini response has no text: %s", exc)
        raise HTTPException(status_code=502, detail="Failed to parse Gemini response") from exc

    clean = strip_fences(raw_text or "")
    try:
        return json.loads(clean)
    except json.JSONDecodeError as exc:
        logger.exception("Gemini returned invalid JSON\nRAW:\n%s", raw_text)
        raise HTTPException(status_code=502, detail="Gemini returned invalid JSON") from exc

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable

from fastapi import HTTPException
from pydantic import ValidationError

from ..models.insights_schema import (
    CarbonTip,
    CategoryFootprint,
    DashboardResponse,
    InsightsResponse,
    Profile,
    TrendPoint,
)
from ..session import SessionContext
from .supabase_client import SupabaseClient, eq, gte, lte

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5
TIP_LIMIT = 5


@dataclass(frozen=True)
class Period:
    range: str
    start_date: date
    end_date: date
    format: str  # "day" or "month"


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + day.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def period_params(time_range: str, today: date | None = None) -> Period:
    """Date window and bucket size for a dashboard time range.

    ``week`` and ``month`` are bucketed per day, ``year`` per month; anything
    unrecognized behaves like ``month``.
    """
    today = today or date.today()
    if time_range == "week":
        return Period("week", today - timedelta(days=7), today, "day")
    if time_range == "year":
        return Period("year", _months_back(today, 12), today, "month")
    return Period("month", _months_back(today, 1), today, "day")


def _date_key(value: Any, fmt: str) -> str:
    day = date.fromisoformat(str(value)[:10])
    if fmt == "month":
        return f"{day.year}-{day.month:02d}"
    return day.isoformat()


def aggregate_by_date(rows: Iterable[dict], fmt: str = "day") -> list[TrendPoint]:
    totals: dict[str, float] = {}
    for row in rows:
        key = _date_key(row["activity_date"], fmt)
        totals[key] = totals.get(key, 0.0) + float(row.get("carbon_amount") or 0)
    return [TrendPoint(date=key, carbon=round(totals[key], 2)) for key in sorted(totals)]


def aggregate_by_category(rows: Iterable[dict]) -> list[CategoryFootprint]:
    """Sum footprint per category, keeping the order categories first appear in."""
    totals: dict[Any, CategoryFootprint] = {}
    for row in rows:
        category = row.get("activity_categories") or {}
        category_id = category.get("id", row.get("category_id"))
        entry = totals.get(category_id)
        if entry is None:
            entry = CategoryFootprint(
                category_id=category_id,
                category_name=category.get("name") or "Uncategorized",
                total_carbon=0.0,
            )
            totals[category_id] = entry
        entry.total_carbon += float(row.get("carbon_amount") or 0)
    for entry in totals.values():
        entry.total_carbon = round(entry.total_carbon, 2)
    return list(totals.values())


async def fetch_profile(db: SupabaseClient, session: SessionContext) -> Profile:
    row = await db.select_one("profiles", "*", [("id", eq(session.user_id))])
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    try:
        return Profile.model_validate({k: v for k, v in row.items() if v is not None})
    except ValidationError as exc:
        logger.exception("Profile validation failed: %s", exc)
        raise HTTPException(status_code=502, detail="Unexpected profile data") from exc


async def fetch_trends(db: SupabaseClient, session: SessionContext, period: Period) -> list[TrendPoint]:
    rows = await db.select(
        "carbon_activities",
        "activity_date,carbon_amount",
        [
            ("user_id", eq(session.user_id)),
            ("activity_date", gte(period.start_date.isoformat())),
            ("activity_date", lte(period.end_date.isoformat())),
        ],
        order="activity_date.asc",
    )
    return aggregate_by_date(rows, period.format)


class InsightsService:
    def __init__(self, supabase: SupabaseClient) -> None:
        self.supabase = supabase

    async def get_insights(
        self, session: SessionContext, time_range: str = "month", today: date | None = None
    ) -> InsightsResponse:
        db = self.supabase.for_session(session)
        period = period_params(time_range, today)
        profile = await fetch_profile(db, session)
        trends = await fetch_trends(db, session, period)

        category_rows = await db.select(
            "carbon_activities",
            "carbon_amount,activity_categories(id,name)",
            [
                ("user_id", eq(session.user_id)),
                ("activity_date", gte(period.start_date.isoformat())),
                ("activity_date", lte(period.end_date.isoformat())),
            ],
        )
        tips = await db.select(
            "carbon_tips", order="points_potential.desc", limit=TIP_LIMIT
        )

        try:
            recommendations = [CarbonTip.model_validate(t) for t in tips]
        except ValidationError as exc:
            logger.exception("Carbon tip validation failed: %s", exc)
            raise HTTPException(status_code=502, detail="Unexpected carbon tip data") from exc

        return InsightsResponse(
            range=period.range,
            start_date=period.start_date.isoformat(),
            end_date=period.end_date.isoformat(),
            profile=profile,
            trends=trends,
            footprint_by_category=aggregate_by_category(category_rows),
            recommendations=recommendations,
        )

    async def get_dashboard(self, session: SessionContext) -> DashboardResponse:
        db = self.supabase.for_session(session)
        profile = await fetch_profile(db, session)
        recent = await db.select(
            "carbon_activities",
            "*,activity_categories(name,icon)",
            [("user_id", eq(session.user_id))],
            order="activity_date.desc",
            limit=RECENT_ACTIVITY_LIMIT,
        )
        return DashboardResponse(
            profile=profile,
            recent_activities=recent,
            carbon_by_category=await self._carbon_by_category(db, session),
        )

    async def _carbon_by_category(self, db: SupabaseClient, session: SessionContext) -> list[CategoryFootprint]:
        try:
            rows = await db.rpc("get_carbon_by_category", {"user_id_param": session.user_id})
            return [CategoryFootprint.model_validate(r) for r in rows or []]
        except (HTTPException, ValidationError) as exc:
            # stored procedure may not be deployed
            logger.warning("get_carbon_by_category unavailable, aggregating manually: %s", exc)

        rows = await db.select(
            "carbon_activities",
            "carbon_amount,activity_categories(id,name)",
            [("user_id", eq(session.user_id))],
        )
        return aggregate_by_category(rows)

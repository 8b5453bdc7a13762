import logging
import math
from datetime import date as Date

from fastapi import HTTPException
from pydantic import ValidationError

from ..models.activity_schema import (
    ActivityCategory,
    DailySummary,
    LogActivityRequest,
    LoggedActivity,
)
from ..session import SessionContext
from ..settings import settings
from .carbon import calculate_activity
from .supabase_client import SupabaseClient, eq, gte, lte

logger = logging.getLogger(__name__)


def summarize_day(date: str, total_co2: float, activities_count: int, target: float) -> DailySummary:
    """Daily roll-up: XP is awarded only for staying at or under the target."""
    target_achieved = total_co2 <= target
    xp_earned = 0
    if target_achieved:
        xp_earned = math.floor((target - total_co2) * 10 + 0.5)
    return DailySummary(
        date=date,
        total_co2=round(total_co2, 2),
        activities_count=activities_count,
        daily_co2_target=target,
        xp_earned=xp_earned,
        target_achieved=target_achieved,
    )


class ActivityLogService:
    def __init__(self, supabase: SupabaseClient) -> None:
        self.supabase = supabase

    async def list_categories(self, session: SessionContext) -> list[ActivityCategory]:
        db = self.supabase.for_session(session)
        rows = await db.select("activity_categories", order="name.asc")
        try:
            return [ActivityCategory.model_validate(row) for row in rows]
        except ValidationError as exc:
            logger.exception("Category row validation failed: %s", exc)
            raise HTTPException(status_code=502, detail="Unexpected category data") from exc

    async def ensure_user_exists(self, session: SessionContext) -> None:
        db = self.supabase.for_session(session)
        existing = await db.select_one("users", "id", [("id", eq(session.user_id))])
        if existing:
            return
        logger.info("Creating user record for %s", session.user_id)
        await db.insert(
            "users",
            {
                "id": session.user_id,
                "email": session.email,
                "total_carbon": 0,
                "total_points": 0,
            },
        )

    async def log_activity(self, session: SessionContext, payload: LogActivityRequest) -> LoggedActivity:
        db = self.supabase.for_session(session)
        await self.ensure_user_exists(session)

        category = await db.select_one(
            "activity_categories", "id,name", [("id", eq(payload.category_id))]
        )
        if not category:
            raise HTTPException(status_code=400, detail="Please select a category")

        calc = calculate_activity(category["name"], payload.activity_type, payload.details)
        details = calc.details.model_dump(exclude={"category"})

        rows = await db.insert(
            "carbon_activities",
            {
                "user_id": session.user_id,
                "category_id": payload.category_id,
                "activity_type": payload.activity_type,
                "activity_date": payload.activity_date.isoformat(),
                "carbon_amount": calc.carbon_amount,
                "points_earned": calc.points_earned,
                "details": details,
            },
        )

        await db.rpc(
            "update_user_totals",
            {
                "user_id_param": session.user_id,
                "carbon_amount_param": calc.carbon_amount,
                "points_param": calc.points_earned,
            },
        )
        await self.update_daily_summary(session, payload.activity_date.isoformat())

        stored = rows[0] if rows else {}
        return LoggedActivity(
            id=stored.get("id"),
            user_id=session.user_id,
            category_id=payload.category_id,
            category_name=category["name"],
            activity_type=payload.activity_type,
            activity_date=payload.activity_date,
            carbon_amount=calc.carbon_amount,
            points_earned=calc.points_earned,
            details=details,
            defaulted_fields=list(calc.defaulted_fields),
        )

    async def list_activities(
        self,
        session: SessionContext,
        start_date: Date | None = None,
        end_date: Date | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        db = self.supabase.for_session(session)
        filters = [("user_id", eq(session.user_id))]
        if start_date:
            filters.append(("activity_date", gte(start_date.isoformat())))
        if end_date:
            filters.append(("activity_date", lte(end_date.isoformat())))
        return await db.select(
            "carbon_activities",
            "*,activity_categories(name,icon)",
            filters,
            order="activity_date.desc",
            limit=limit,
        )

    async def delete_activity(self, session: SessionContext, activity_id: int) -> DailySummary:
        db = self.supabase.for_session(session)
        owned = [("id", eq(activity_id)), ("user_id", eq(session.user_id))]
        row = await db.select_one("carbon_activities", "id,activity_date", owned)
        if not row:
            raise HTTPException(status_code=404, detail="Activity not found")

        await db.delete("carbon_activities", owned)
        return await self.update_daily_summary(session, row["activity_date"])

    async def _daily_target(self, db: SupabaseClient, session: SessionContext) -> float:
        row = await db.select_one(
            "user_settings", "daily_co2_target", [("user_id", eq(session.user_id))]
        )
        if row and row.get("daily_co2_target"):
            return float(row["daily_co2_target"])
        return settings.default_daily_co2_target

    async def update_daily_summary(self, session: SessionContext, date: str) -> DailySummary:
        db = self.supabase.for_session(session)
        rows = await db.select(
            "carbon_activities",
            "carbon_amount",
            [("user_id", eq(session.user_id)), ("activity_date", eq(date))],
        )
        total = sum(float(r.get("carbon_amount") or 0) for r in rows)
        target = await self._daily_target(db, session)
        summary = summarize_day(date, total, len(rows), target)

        await db.upsert(
            "daily_summaries",
            {"user_id": session.user_id, **summary.model_dump(exclude={"daily_co2_target"})},
            on_conflict="user_id,date",
        )
        if summary.xp_earned > 0:
            await db.rpc("add_user_xp", {"user_uuid": session.user_id, "xp_amount": summary.xp_earned})
        return summary

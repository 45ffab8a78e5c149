"""MCP tools for daily coaching and weekly summaries.

The server keeps no history. Each call receives the caller's meal log,
derives daily stats and the streak from it, and runs the advisor. Callers
that keep older days only as stats snapshots can pass them as ``history``.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

from fastmcp import Context, FastMCP

from wellday.domains.nutrition.domain_logic.advisor import (
    PickOne,
    generate_daily_message,
    generate_weekly_summary,
)
from wellday.domains.nutrition.domain_logic.daily_stats import (
    build_stats_index,
    current_streak,
    group_meals_by_day,
    last_7_days_stats,
    yesterday_stats,
)
from wellday.domains.nutrition.domain_logic.meal_models import (
    DailyStats,
    Meal,
    MealRecordError,
)

logger = logging.getLogger(__name__)


def _parse_meals(records: list[dict[str, Any]]) -> list[Meal]:
    """Parse a meal log. Every record must carry its own timestamp."""
    meals = []
    for index, record in enumerate(records):
        meal = Meal.from_dict(record)
        if not record.get("timestamp"):
            raise MealRecordError(f"Meal record {index} is missing 'timestamp'")
        meals.append(meal)
    return meals


def _stats_index(
    meals: list[Meal],
    history: list[dict[str, Any]] | None,
    spending: dict[date, float] | None = None,
) -> dict[date, DailyStats]:
    """Merge precomputed stats with stats derived from the meal log.

    Days present in the meal log are always recomputed from it.
    """
    stats_by_day = {stats.date: stats for stats in map(DailyStats.from_dict, history or [])}
    stats_by_day.update(build_stats_index(meals, spending=spending))
    return stats_by_day


def _parse_day(value: str) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise MealRecordError(f"Invalid date: {value!r}") from exc


def _error(exc: MealRecordError) -> str:
    logger.warning("Rejected advisor input: %s", exc)
    return json.dumps({"status": "error", "message": str(exc)})


def register_advisor_tools(
    mcp: FastMCP,
    *,
    pick_one: PickOne,
    default_daily_budget: float | None = None,
) -> None:
    """Register daily advice and weekly summary tools on the MCP server."""

    @mcp.tool
    async def daily_advice(
        ctx: Context,
        meals: list[dict],
        today: str = "",
        daily_budget: float | None = None,
        total_spent: float = 0.0,
        history: list[dict] | None = None,
    ) -> str:
        """Get today's coaching message from your meal log.

        Streaks, yesterday's points and today's progress are all derived
        from the meals you pass in.

        Args:
            meals: Meal records (each with 'health_index', 'timestamp', optional 'tags').
            today: The day to advise on (ISO 8601 date). Defaults to today.
            daily_budget: Food budget for the day. Defaults to the server setting.
            total_spent: Amount spent on food today.
            history: Optional daily stats records ('date', 'meal_count', 'total_points',
                'tier_counts') for days not covered by ``meals``.
        """
        try:
            day = _parse_day(today)
            parsed = _parse_meals(meals)
            stats_by_day = _stats_index(parsed, history, spending={day: total_spent})
        except MealRecordError as exc:
            return _error(exc)

        budget = daily_budget if daily_budget is not None else default_daily_budget
        today_meals = group_meals_by_day(parsed).get(day, [])
        today_stats = stats_by_day.get(day)
        streak = current_streak(stats_by_day, day)

        message = generate_daily_message(
            today_meals,
            yesterday_stats(stats_by_day, day),
            today_stats,
            streak,
            budget,
            pick_one=pick_one,
        )
        return json.dumps({
            "status": "ok",
            "date": day.isoformat(),
            "current_streak": streak,
            "today": today_stats.as_dict() if today_stats else None,
            "advice": message.as_dict(),
        })

    @mcp.tool
    async def weekly_summary(
        ctx: Context,
        meals: list[dict],
        today: str = "",
        history: list[dict] | None = None,
    ) -> str:
        """Summarize the last 7 days of your meal log.

        Args:
            meals: Meal records (each with 'health_index', 'timestamp', optional 'tags').
            today: Last day of the week to summarize (ISO 8601 date). Defaults to today.
            history: Optional daily stats records for days not covered by ``meals``.
        """
        try:
            day = _parse_day(today)
            parsed = _parse_meals(meals)
            stats_by_day = _stats_index(parsed, history)
        except MealRecordError as exc:
            return _error(exc)

        week = last_7_days_stats(stats_by_day, day)
        streak = current_streak(stats_by_day, day)
        return json.dumps({
            "status": "ok",
            "week_ending": day.isoformat(),
            "current_streak": streak,
            "days": [stats.as_dict() for stats in week],
            "summary": generate_weekly_summary(week, streak),
        }, indent=2)

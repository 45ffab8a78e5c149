"""Daily stats aggregation and streak tracking.

Pure functions over caller-supplied meals and stats. Nothing here reads or
writes storage; the caller owns the history and passes it in.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from wellday.domains.nutrition.domain_logic.meal_models import (
    COMPLETION_BONUS_MEALS,
    DailyStats,
    Meal,
)
from wellday.domains.nutrition.domain_logic.scoring import MealTier

logger = logging.getLogger(__name__)

MAX_STREAK_DAYS = 365
WEEK_DAYS = 7


def calculate_daily_stats(
    meals: Iterable[Meal],
    day: date,
    *,
    total_spent: float = 0.0,
) -> DailyStats:
    """Aggregate one day's meals into a DailyStats snapshot.

    Args:
        meals: The meals logged on ``day``.
        day: Calendar day the stats describe.
        total_spent: Money spent on food that day, if tracked.
    """
    meals = list(meals)
    tier_counts: dict[MealTier, int] = defaultdict(int)
    for meal in meals:
        tier_counts[meal.tier] += 1

    return DailyStats(
        date=day,
        total_points=sum(meal.points for meal in meals),
        meal_count=len(meals),
        total_spent=total_spent,
        tier_counts=dict(tier_counts),
        meal_ids=tuple(meal.id for meal in meals),
    )


def group_meals_by_day(meals: Iterable[Meal]) -> dict[date, list[Meal]]:
    """Group meals by calendar day, oldest meal first within each day."""
    grouped: dict[date, list[Meal]] = defaultdict(list)
    for meal in meals:
        grouped[meal.timestamp.date()].append(meal)
    return {day: sorted(day_meals, key=lambda m: m.timestamp) for day, day_meals in grouped.items()}


def build_stats_index(
    meals: Iterable[Meal],
    *,
    spending: Mapping[date, float] | None = None,
) -> dict[date, DailyStats]:
    """Compute DailyStats for every day that has at least one meal."""
    spending = spending or {}
    return {
        day: calculate_daily_stats(day_meals, day, total_spent=spending.get(day, 0.0))
        for day, day_meals in group_meals_by_day(meals).items()
    }


def current_streak(stats_by_day: Mapping[date, DailyStats], today: date) -> int:
    """Count consecutive qualifying days ending at ``today``.

    A day qualifies when it has stats with at least three meals. The walk
    stops at the first missing or non-qualifying day.
    """
    streak = 0
    check_day = today
    while streak < MAX_STREAK_DAYS:
        stats = stats_by_day.get(check_day)
        if stats is None or stats.meal_count < COMPLETION_BONUS_MEALS:
            break
        streak += 1
        check_day -= timedelta(days=1)
    logger.debug("Current streak as of %s: %d", today, streak)
    return streak


def yesterday_stats(stats_by_day: Mapping[date, DailyStats], today: date) -> DailyStats | None:
    return stats_by_day.get(today - timedelta(days=1))


def last_7_days_stats(stats_by_day: Mapping[date, DailyStats], today: date) -> list[DailyStats]:
    """Stats for the seven calendar days ending today, oldest first.

    Days with no stats are skipped, so the result may be shorter than seven.
    """
    days = [today - timedelta(days=offset) for offset in range(WEEK_DAYS - 1, -1, -1)]
    return [stats_by_day[day] for day in days if day in stats_by_day]

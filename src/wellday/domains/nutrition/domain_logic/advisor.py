"""Rule-based advisor: daily coaching message, meal feedback, weekly summary.

The daily message is chosen by a prioritized decision list. Rules are
evaluated strictly in ``DAILY_RULES`` order and the first rule that returns a
message wins; when none match, a generic encouragement is returned.

Every function that picks text at random takes a ``pick_one`` callable so
callers (and tests) can supply a deterministic source.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from wellday.domains.nutrition.domain_logic.meal_models import (
    AdvisorMessage,
    DailyStats,
    Meal,
    MessageType,
)
from wellday.domains.nutrition.domain_logic.scoring import MealTier

logger = logging.getLogger(__name__)

PickOne = Callable[[Sequence[str]], str]


def seeded_picker(seed: int | None = None) -> PickOne:
    """Return a picker backed by its own ``random.Random`` instance."""
    return random.Random(seed).choice


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

LONG_STREAK_DAYS = 7
SHORT_STREAK_DAYS = 3
STRONG_DAY_POINTS = 30
LOW_BUDGET_FRACTION = 0.2
PATTERN_MIN_MEALS = 2
PATTERN_MIN_HITS = 2

# ---------------------------------------------------------------------------
# Message catalogs
# ---------------------------------------------------------------------------

GREETING_MESSAGES = (
    "Good morning! Start your day with a nutritious breakfast.",
    "Ready for a great day? Log your first meal to get started!",
    "New day, fresh start! What's on the menu today?",
)

DEFAULT_MESSAGES = (
    "You're doing great! Keep making healthy choices.",
    "Every meal is a chance to nourish your body.",
    "Consistency is key. You've got this!",
)

# tier -> (candidates, type, icon)
MEAL_FEEDBACK: dict[MealTier, tuple[tuple[str, ...], MessageType, str]] = {
    MealTier.EXCELLENT: (
        (
            "Excellent choice! This meal is perfectly balanced.",
            "Wow! This is a top-tier healthy meal. Great work!",
            "Perfect! This meal has everything your body needs.",
        ),
        MessageType.CELEBRATION,
        "🥇",
    ),
    MealTier.GOOD: (
        (
            "Nice! This is a solid, healthy choice.",
            "Good pick! You're making progress toward your goals.",
            "Well done! This meal supports your health journey.",
        ),
        MessageType.ENCOURAGEMENT,
        "✅",
    ),
    MealTier.NEUTRAL: (
        (
            "Decent choice. Consider adding more vegetables or lean protein next time.",
            "Not bad! A side of greens would take this meal up a level.",
        ),
        MessageType.SUGGESTION,
        "ℹ️",
    ),
    MealTier.NEEDS_IMPROVEMENT: (
        (
            "This meal could be better. Try swapping processed items for whole foods.",
            "Room to grow here. Swap one ingredient for a fresher option next time.",
        ),
        MessageType.SUGGESTION,
        "💡",
    ),
    MealTier.POOR: (
        (
            "Let's aim higher next time! Small swaps can make a big difference.",
            "Tomorrow is a new chance. Try adding a vegetable to your next meal.",
        ),
        MessageType.SUGGESTION,
        "🔄",
    ),
}


# ---------------------------------------------------------------------------
# Daily message
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailyContext:
    """Everything a daily rule may look at."""

    today_meals: Sequence[Meal]
    yesterday_stats: DailyStats | None
    today_stats: DailyStats | None
    current_streak: int
    daily_budget: float | None
    pick_one: PickOne


Rule = Callable[[DailyContext], AdvisorMessage | None]


def _long_streak(ctx: DailyContext) -> AdvisorMessage | None:
    if ctx.current_streak >= LONG_STREAK_DAYS:
        return AdvisorMessage(
            message=(
                f"🔥 Amazing! {ctx.current_streak} day streak! "
                "You're building incredible habits."
            ),
            type=MessageType.CELEBRATION,
            icon="🎉",
        )
    return None


def _short_streak(ctx: DailyContext) -> AdvisorMessage | None:
    if ctx.current_streak >= SHORT_STREAK_DAYS:
        return AdvisorMessage(
            message=f"Great work! You're on a {ctx.current_streak} day streak. Keep it going!",
            type=MessageType.CELEBRATION,
            icon="✨",
        )
    return None


def _strong_yesterday(ctx: DailyContext) -> AdvisorMessage | None:
    stats = ctx.yesterday_stats
    if stats is not None and stats.final_points >= STRONG_DAY_POINTS:
        return AdvisorMessage(
            message=(
                f"Great job yesterday! You earned {stats.final_points} points. "
                "You're on track for a strong day."
            ),
            type=MessageType.ENCOURAGEMENT,
            icon="👏",
        )
    return None


def _no_meals_yet(ctx: DailyContext) -> AdvisorMessage | None:
    if not ctx.today_meals:
        return AdvisorMessage(
            message=ctx.pick_one(GREETING_MESSAGES),
            type=MessageType.SUGGESTION,
            icon="☀️",
        )
    return None


def _one_meal(ctx: DailyContext) -> AdvisorMessage | None:
    if len(ctx.today_meals) == 1:
        return AdvisorMessage(
            message="Good start! Add 2 more meals today to earn your completion bonus.",
            type=MessageType.ENCOURAGEMENT,
            icon="💪",
        )
    return None


def _two_meals(ctx: DailyContext) -> AdvisorMessage | None:
    if len(ctx.today_meals) == 2:
        return AdvisorMessage(
            message="Almost there! One more meal to unlock your +2 bonus points.",
            type=MessageType.ENCOURAGEMENT,
            icon="🎯",
        )
    return None


def _nutrition_insight(ctx: DailyContext) -> AdvisorMessage | None:
    insights = analyze_nutritional_patterns(ctx.today_meals)
    return insights[0] if insights else None


def _budget(ctx: DailyContext) -> AdvisorMessage | None:
    if ctx.daily_budget is None or ctx.today_stats is None:
        return None
    remaining = ctx.daily_budget - ctx.today_stats.total_spent
    if remaining < 0:
        return AdvisorMessage(
            message=(
                f"You're ${abs(remaining):.2f} over budget today. "
                "Try a cost-effective dinner!"
            ),
            type=MessageType.INSIGHT,
            icon="💰",
        )
    if remaining < ctx.daily_budget * LOW_BUDGET_FRACTION:
        return AdvisorMessage(
            message=f"Nice! You have ${remaining:.2f} left in your budget.",
            type=MessageType.INSIGHT,
            icon="💰",
        )
    return None


def _default_encouragement(ctx: DailyContext) -> AdvisorMessage:
    return AdvisorMessage(
        message=ctx.pick_one(DEFAULT_MESSAGES),
        type=MessageType.ENCOURAGEMENT,
        icon="🌟",
    )


# Order is priority: long-term habits, yesterday, today's progress,
# nutrition quality, then budget.
DAILY_RULES: list[tuple[str, Rule]] = [
    ("long_streak", _long_streak),
    ("short_streak", _short_streak),
    ("strong_yesterday", _strong_yesterday),
    ("no_meals_yet", _no_meals_yet),
    ("one_meal", _one_meal),
    ("two_meals", _two_meals),
    ("nutrition_insight", _nutrition_insight),
    ("budget", _budget),
]


def generate_daily_message(
    today_meals: Sequence[Meal],
    yesterday_stats: DailyStats | None = None,
    today_stats: DailyStats | None = None,
    current_streak: int = 0,
    daily_budget: float | None = None,
    *,
    pick_one: PickOne = random.choice,
) -> AdvisorMessage:
    """Choose the single coaching message for today.

    Args:
        today_meals: Meals logged so far today (may be empty).
        yesterday_stats: Yesterday's stats, or None if nothing was logged.
        today_stats: Today's stats, or None if not computed yet.
        current_streak: Consecutive qualifying days ending today.
        daily_budget: Optional food budget for the day.
        pick_one: Chooses one text from a catalog.

    Returns:
        The message of the first matching rule, or a generic encouragement.
    """
    ctx = DailyContext(
        today_meals=today_meals,
        yesterday_stats=yesterday_stats,
        today_stats=today_stats,
        current_streak=current_streak,
        daily_budget=daily_budget,
        pick_one=pick_one,
    )
    for name, rule in DAILY_RULES:
        message = rule(ctx)
        if message is not None:
            logger.debug("Daily advisor rule matched: %s", name)
            return message
    logger.debug("No daily advisor rule matched; using default encouragement")
    return _default_encouragement(ctx)


# ---------------------------------------------------------------------------
# Nutritional patterns
# ---------------------------------------------------------------------------

def _count_tagged(meals: Sequence[Meal], tag: str) -> int:
    return sum(1 for meal in meals if meal.has_tag(tag))


def analyze_nutritional_patterns(meals: Sequence[Meal]) -> list[AdvisorMessage]:
    """Collect every nutrition insight that applies to today's meals.

    Checks are independent and always reported in the same order: protein,
    sodium, processed food, excellent meals, fiber.
    """
    messages: list[AdvisorMessage] = []
    if not meals:
        return messages

    enough_meals = len(meals) >= PATTERN_MIN_MEALS

    if enough_meals and _count_tagged(meals, "protein_packed") == 0:
        messages.append(AdvisorMessage(
            message="Consider adding a protein source to your next meal for better balance.",
            type=MessageType.SUGGESTION,
            icon="🥩",
        ))

    if _count_tagged(meals, "high_sodium") >= PATTERN_MIN_HITS:
        messages.append(AdvisorMessage(
            message=(
                "Sodium has been trending high today. "
                "Consider a lighter option for your next meal."
            ),
            type=MessageType.SUGGESTION,
            icon="🧂",
        ))

    if _count_tagged(meals, "processed") >= PATTERN_MIN_HITS:
        messages.append(AdvisorMessage(
            message="Try incorporating more whole foods in your next meal.",
            type=MessageType.SUGGESTION,
            icon="🥗",
        ))

    excellent = sum(1 for meal in meals if meal.tier is MealTier.EXCELLENT)
    if excellent >= PATTERN_MIN_HITS:
        messages.append(AdvisorMessage(
            message="You're crushing it today! Two excellent meals already. 🎉",
            type=MessageType.CELEBRATION,
            icon="🥇",
        ))

    if enough_meals and _count_tagged(meals, "fiber_rich") == 0:
        messages.append(AdvisorMessage(
            message="Add some fiber-rich foods like vegetables or whole grains to your next meal.",
            type=MessageType.SUGGESTION,
            icon="🥦",
        ))

    return messages


# ---------------------------------------------------------------------------
# Meal feedback
# ---------------------------------------------------------------------------

def generate_meal_feedback(meal: Meal, *, pick_one: PickOne = random.choice) -> AdvisorMessage:
    """Feedback for a single meal, based only on its tier."""
    candidates, message_type, icon = MEAL_FEEDBACK[meal.tier]
    return AdvisorMessage(message=pick_one(candidates), type=message_type, icon=icon)


# ---------------------------------------------------------------------------
# Weekly summary
# ---------------------------------------------------------------------------

def generate_weekly_summary(week_stats: Sequence[DailyStats], current_streak: int) -> list[str]:
    """Summary lines for the week, in display order."""
    lines: list[str] = []

    total_points = sum(stats.final_points for stats in week_stats)
    avg_points = total_points / len(week_stats) if week_stats else 0.0
    lines.append(f"You earned {total_points} points this week (avg: {avg_points:.1f}/day)")

    if current_streak >= LONG_STREAK_DAYS:
        lines.append("🔥 Maintained a full week streak! Incredible consistency.")

    total_meals = sum(stats.meal_count for stats in week_stats)
    lines.append(f"Logged {total_meals} meals this week")

    excellent_meals = sum(stats.tier_count(MealTier.EXCELLENT) for stats in week_stats)
    if excellent_meals > 0:
        lines.append(f"{excellent_meals} excellent meals this week! 🥇")

    return lines

"""Meal scoring: health index -> tier and points.

Tier and points are both read from the same band table, so a meal's tier
and its point value can never disagree at a threshold.
"""

from __future__ import annotations

from enum import Enum


class MealTier(str, Enum):
    """Discrete quality classification of a meal, best to worst."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEUTRAL = "neutral"
    NEEDS_IMPROVEMENT = "needsImprovement"
    POOR = "poor"

    @property
    def emoji(self) -> str:
        return _TIER_EMOJI[self]

    @property
    def label(self) -> str:
        return _TIER_LABEL[self]

    @property
    def color(self) -> str:
        return _TIER_COLOR[self]


_TIER_EMOJI = {
    MealTier.EXCELLENT: "🥇",
    MealTier.GOOD: "🥈",
    MealTier.NEUTRAL: "⚪",
    MealTier.NEEDS_IMPROVEMENT: "🟠",
    MealTier.POOR: "🔴",
}

_TIER_LABEL = {
    MealTier.EXCELLENT: "Excellent",
    MealTier.GOOD: "Good",
    MealTier.NEUTRAL: "Neutral",
    MealTier.NEEDS_IMPROVEMENT: "Needs Improvement",
    MealTier.POOR: "Poor",
}

_TIER_COLOR = {
    MealTier.EXCELLENT: "green",
    MealTier.GOOD: "blue",
    MealTier.NEUTRAL: "gray",
    MealTier.NEEDS_IMPROVEMENT: "orange",
    MealTier.POOR: "red",
}


# ---------------------------------------------------------------------------
# Band table: (inclusive lower bound, tier, points), highest band first.
# Anything below the last lower bound falls into the floor band.
# ---------------------------------------------------------------------------

SCORE_BANDS: list[tuple[float, MealTier, int]] = [
    (80.0, MealTier.EXCELLENT, 10),
    (65.0, MealTier.GOOD, 6),
    (50.0, MealTier.NEUTRAL, 3),
    (35.0, MealTier.NEEDS_IMPROVEMENT, 0),
]

FLOOR_TIER = MealTier.POOR
FLOOR_POINTS = -3

_DESCRIPTIONS = {
    MealTier.EXCELLENT: "Excellent nutritional balance with quality ingredients",
    MealTier.GOOD: "Good meal choice with some healthy elements",
    MealTier.NEUTRAL: "Balanced meal with room for improvement",
    MealTier.NEEDS_IMPROVEMENT: "Consider adding more whole foods",
    MealTier.POOR: "Try to incorporate more nutritious options",
}


def _band(health_index: float) -> tuple[MealTier, int]:
    for lower, tier, points in SCORE_BANDS:
        if health_index >= lower:
            return tier, points
    return FLOOR_TIER, FLOOR_POINTS


def tier_for(health_index: float) -> MealTier:
    """Classify a health index into a tier. Defined for every real number."""
    return _band(health_index)[0]


def points_for(health_index: float) -> int:
    """Points earned for a meal with this health index."""
    return _band(health_index)[1]


def describe_health_index(health_index: float) -> str:
    """One-sentence description of the band a health index falls into."""
    return _DESCRIPTIONS[tier_for(health_index)]

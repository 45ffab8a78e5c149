"""Keyword-based nutrition analysis: free-text meal description -> health index.

Scoring starts from a neutral 50 and each keyword group nudges it up or down
and attaches a tag. Some nudges and the nutrition estimates are randomized;
pass a seeded ``random.Random`` for reproducible results.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from wellday.domains.nutrition.domain_logic.scoring import describe_health_index

logger = logging.getLogger(__name__)

BASE_HEALTH_INDEX = 50.0
MIN_HEALTH_INDEX = 20.0
MAX_HEALTH_INDEX = 95.0


# ---------------------------------------------------------------------------
# Keyword groups
# ---------------------------------------------------------------------------

NUTRIENT_DENSE_KEYWORDS = (
    "salad", "vegetables", "fruit", "quinoa", "brown rice",
    "grilled", "steamed", "baked", "chicken breast", "salmon",
    "avocado", "leafy greens",
)
PROTEIN_KEYWORDS = ("protein", "chicken", "fish", "tofu", "eggs", "beans", "lentils")
FIBER_KEYWORDS = ("fiber", "whole grain", "oats", "beans", "vegetables")
PROCESSED_KEYWORDS = ("fried", "deep fried", "fast food", "burger", "fries", "pizza")
SUGAR_KEYWORDS = ("soda", "candy", "dessert", "cake", "cookies", "ice cream")
SODIUM_KEYWORDS = ("salty", "chips", "bacon", "soy sauce", "canned")
CARB_KEYWORDS = ("pasta", "bread", "rice", "potatoes", "cereal")

# nutrient -> (low, high) estimate range
NUTRITION_RANGES: dict[str, tuple[int, int]] = {
    "calories": (200, 600),
    "protein": (10, 40),
    "carbs": (20, 70),
    "fat": (5, 25),
    "fiber": (2, 12),
    "sodium": (200, 1000),
}


@dataclass(frozen=True)
class NutritionAnalysis:
    """Result of analyzing one meal description."""

    health_index: float
    tags: tuple[str, ...]
    description: str
    nutrition_data: dict[str, float] = field(default_factory=dict)


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def _clamp(value: float, lo: float = MIN_HEALTH_INDEX, hi: float = MAX_HEALTH_INDEX) -> float:
    return max(lo, min(hi, value))


def _estimate_nutrition(rng: random.Random) -> dict[str, float]:
    return {name: float(rng.randint(lo, hi)) for name, (lo, hi) in NUTRITION_RANGES.items()}


def analyze_text(text: str, *, rng: random.Random | None = None) -> NutritionAnalysis:
    """Analyze a free-text (or transcribed voice) meal description.

    Args:
        text: What the user ate, in their own words.
        rng: Random source for the randomized nudges and estimates.

    Returns:
        NutritionAnalysis with the health index clamped to [20, 95].
    """
    rng = rng or random.Random()
    lowered = text.lower()
    health_index = BASE_HEALTH_INDEX
    tags: list[str] = []

    # Positive indicators
    if _contains_any(lowered, NUTRIENT_DENSE_KEYWORDS):
        health_index += rng.uniform(10, 30)
        tags.append("nutrient_dense")
    if _contains_any(lowered, PROTEIN_KEYWORDS):
        health_index += 10
        tags.append("protein_packed")
    if _contains_any(lowered, FIBER_KEYWORDS):
        health_index += 8
        tags.append("fiber_rich")

    # Negative indicators
    if _contains_any(lowered, PROCESSED_KEYWORDS):
        health_index -= rng.uniform(15, 25)
        tags.append("processed")
    if _contains_any(lowered, SUGAR_KEYWORDS):
        health_index -= 15
        tags.append("high_sugar")
    if _contains_any(lowered, SODIUM_KEYWORDS):
        health_index -= 8
        tags.append("high_sodium")

    if _contains_any(lowered, CARB_KEYWORDS) and "nutrient_dense" not in tags:
        tags.append("carb_dense")

    health_index = _clamp(health_index)
    logger.debug("Analyzed meal text: health_index=%.1f tags=%s", health_index, tags)

    return NutritionAnalysis(
        health_index=health_index,
        tags=tuple(tags),
        description=describe_health_index(health_index),
        nutrition_data=_estimate_nutrition(rng),
    )


def analyze_recipe(
    ingredients: Sequence[str],
    instructions: str | None = None,
    *,
    rng: random.Random | None = None,
) -> NutritionAnalysis:
    """Analyze a recipe from its ingredient lines and instructions."""
    combined = " ".join(ingredients) + " " + (instructions or "")
    return analyze_text(combined, rng=rng)

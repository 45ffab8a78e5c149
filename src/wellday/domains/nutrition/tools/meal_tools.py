"""MCP tools for scoring and analyzing individual meals.

These tools are stateless: the caller passes the meal (or its description)
and gets back the derived tier, points and per-meal feedback. Recipes are
scored the same way from their ingredients and instructions.
"""

from __future__ import annotations

import json
import logging
import random
from typing import Any

from fastmcp import Context, FastMCP

from wellday.domains.nutrition.domain_logic.advisor import PickOne, generate_meal_feedback
from wellday.domains.nutrition.domain_logic.meal_models import (
    Meal,
    MealInputType,
    MealRecordError,
    Recipe,
)
from wellday.domains.nutrition.domain_logic.nutrition_analysis import (
    analyze_recipe as score_recipe,
    analyze_text,
)
from wellday.domains.nutrition.domain_logic.scoring import (
    describe_health_index,
    points_for,
    tier_for,
)

logger = logging.getLogger(__name__)

# Photo analysis needs an image pipeline; text and voice transcripts share one path.
_ANALYZABLE_INPUTS = {MealInputType.TEXT, MealInputType.VOICE}


def register_meal_tools(
    mcp: FastMCP,
    *,
    pick_one: PickOne,
    rng: random.Random,
) -> None:
    """Register meal scoring and analysis tools on the MCP server."""

    @mcp.tool
    async def score_health_index(ctx: Context, health_index: float) -> str:
        """Classify a health index (0-100) into a meal tier and point value.

        Args:
            health_index: Nutritional quality score of a meal or recipe.
        """
        tier = tier_for(health_index)
        return json.dumps({
            "health_index": health_index,
            "tier": tier.value,
            "tier_label": tier.label,
            "tier_emoji": tier.emoji,
            "points": points_for(health_index),
            "description": describe_health_index(health_index),
        })

    @mcp.tool
    async def analyze_meal(
        ctx: Context,
        name: str,
        description: str,
        input_type: str = "text",
    ) -> str:
        """Estimate a meal's health index from a plain-language description.

        Args:
            name: Short meal name (e.g., 'Lunch bowl').
            description: What was eaten, e.g. 'grilled salmon with steamed vegetables'.
            input_type: 'text' or 'voice' (a transcription).
        """
        try:
            kind = MealInputType(input_type)
        except ValueError:
            kind = None
        if kind not in _ANALYZABLE_INPUTS:
            return json.dumps({
                "status": "error",
                "message": f"input_type must be 'text' or 'voice', got {input_type!r}",
            })

        analysis = analyze_text(description, rng=rng)
        meal = Meal(
            name=name,
            health_index=analysis.health_index,
            tags=analysis.tags,
            input_type=kind,
            description=analysis.description,
            nutrition_data=analysis.nutrition_data,
        )
        feedback = generate_meal_feedback(meal, pick_one=pick_one)
        logger.info("Analyzed meal %r: %s (%d points)", name, meal.tier.value, meal.points)

        result: dict[str, Any] = {"status": "ok", "meal": meal.as_dict()}
        result["meal"]["nutrition_data"] = analysis.nutrition_data
        result["feedback"] = feedback.as_dict()
        return json.dumps(result)

    @mcp.tool
    async def meal_feedback(ctx: Context, meal: dict) -> str:
        """Get coaching feedback for a single logged meal.

        Args:
            meal: Meal record with at least 'health_index'; optional 'name', 'tags', 'timestamp'.
        """
        try:
            parsed = Meal.from_dict(meal)
        except MealRecordError as exc:
            logger.warning("Rejected meal record: %s", exc)
            return json.dumps({"status": "error", "message": str(exc)})

        feedback = generate_meal_feedback(parsed, pick_one=pick_one)
        return json.dumps({
            "status": "ok",
            "tier": parsed.tier.value,
            "points": parsed.points,
            "feedback": feedback.as_dict(),
        })

    @mcp.tool
    async def analyze_recipe(
        ctx: Context,
        title: str,
        ingredients: list[str],
        instructions: str = "",
        prep_time_minutes: int | None = None,
        estimated_cost: float | None = None,
        diet_tags: list[str] | None = None,
        log_as_meal: bool = False,
    ) -> str:
        """Score a recipe from its ingredients and optionally log it as a meal.

        Args:
            title: Recipe name.
            ingredients: One ingredient per entry, e.g. '200g salmon'.
            instructions: Preparation steps; cooking methods count toward the score.
            prep_time_minutes: Optional preparation time.
            estimated_cost: Optional cost of one serving.
            diet_tags: Extra labels such as 'vegetarian' or 'high_protein'.
            log_as_meal: Also return the recipe as a logged meal with feedback.
        """
        ingredient_lines = [line.strip() for line in ingredients if line.strip()]
        if not ingredient_lines:
            return json.dumps({"status": "error", "message": "A recipe needs at least one ingredient"})
        if estimated_cost is not None and estimated_cost < 0:
            return json.dumps({"status": "error", "message": "estimated_cost cannot be negative"})

        analysis = score_recipe(ingredient_lines, instructions or None, rng=rng)
        tags = list(analysis.tags)
        for tag in diet_tags or []:
            if tag not in tags:
                tags.append(tag)
        recipe = Recipe(
            title=title,
            ingredients=tuple(ingredient_lines),
            health_index=analysis.health_index,
            tags=tuple(tags),
            instructions=instructions or None,
            prep_time_minutes=prep_time_minutes,
            estimated_cost=estimated_cost,
        )
        logger.info("Analyzed recipe %r: %s (%d points)", title, recipe.tier.value, recipe.points)

        result: dict[str, Any] = {
            "status": "ok",
            "recipe": recipe.as_dict(),
            "description": analysis.description,
        }
        if log_as_meal:
            meal = recipe.to_meal()
            result["meal"] = meal.as_dict()
            result["meal"]["recipe_id"] = meal.recipe_id
            result["feedback"] = generate_meal_feedback(meal, pick_one=pick_one).as_dict()
        return json.dumps(result)

"""Wellday Advisor MCP Server: application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
import random

from fastmcp import FastMCP

from wellday.core.config.settings import get_settings
from wellday.domains.nutrition.domain_logic.advisor import PickOne, seeded_picker
from wellday.domains.nutrition.prompts.nutrition_prompts import register_nutrition_prompts
from wellday.domains.nutrition.tools.advisor_tools import register_advisor_tools
from wellday.domains.nutrition.tools.meal_tools import register_meal_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "Wellday Advisor"
SERVER_VERSION = "0.1.0"


def create_app(
    *,
    pick_one_override: PickOne | None = None,
    rng_override: random.Random | None = None,
) -> FastMCP:
    """Create and configure the Wellday advisor MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Sets up the random sources used for message selection and meal analysis
    3. Registers all tools and prompts
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Wellday meal advisor. Scores meals and recipes by health index, tracks daily "
            "points and streaks from the meal log you provide, and returns "
            "short coaching messages. The server stores no data."
        ),
    )

    # --- Random sources ---
    if settings.advisor_seed is not None:
        logger.info("Advisor running with fixed seed %d", settings.advisor_seed)
    pick_one = pick_one_override or seeded_picker(settings.advisor_seed)
    rng = rng_override or random.Random(settings.advisor_seed)

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "default_daily_budget": settings.default_daily_budget,
            "seeded": settings.advisor_seed is not None,
        }

    register_meal_tools(server, pick_one=pick_one, rng=rng)
    logger.info("Meal scoring tools registered")

    register_advisor_tools(
        server,
        pick_one=pick_one,
        default_daily_budget=settings.default_daily_budget,
    )
    logger.info("Advisor tools registered")

    # --- Register prompts ---
    register_nutrition_prompts(server)

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

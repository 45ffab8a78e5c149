"""MCP Prompts: pre-built interaction templates for meal logging journeys."""

from __future__ import annotations

from fastmcp import FastMCP


def register_nutrition_prompts(mcp: FastMCP) -> None:
    """Register nutrition domain MCP prompts."""

    @mcp.prompt()
    def daily_checkin_prompt() -> str:
        """Prompt template for a daily meal check-in."""
        return """Let's check in on today's eating. Please:

1. Score each meal I describe and tell me its tier and points
2. Tell me how close I am to my 3-meal completion bonus
3. Give me today's advisor message based on my meal log
4. Suggest one concrete improvement for my next meal

Keep it short and encouraging."""

    @mcp.prompt()
    def weekly_review_prompt(week_ending: str = "today") -> str:
        """Prompt template for reviewing a week of meals."""
        return f"""Let's review my meals for the week ending {week_ending}. I'd like to:

1. See my total and average daily points
2. Check whether I kept my logging streak going
3. Count my excellent meals
4. Pick one habit to focus on next week

Please use my meal log to build the weekly summary."""

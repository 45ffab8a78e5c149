"""Integration tests for the Wellday advisor MCP server."""

from __future__ import annotations

import asyncio
import json
import random

import pytest
from fastmcp import Client

from wellday.core.server.app import create_app
from wellday.domains.nutrition.domain_logic.advisor import DEFAULT_MESSAGES, GREETING_MESSAGES


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


ALL_EXPECTED_TOOLS = [
    "health_check",
    "score_health_index",
    "analyze_meal",
    "meal_feedback",
    "analyze_recipe",
    "daily_advice",
    "weekly_summary",
]


def _meal_record(day: str, hour: int, health_index: float, tags=("protein_packed", "fiber_rich")):
    return {
        "name": "Meal",
        "health_index": health_index,
        "tags": list(tags),
        "timestamp": f"{day}T{hour:02d}:00:00",
    }


@pytest.fixture
def client(first_pick):
    """Create an MCP client connected to a server with deterministic randomness."""
    mcp = create_app(pick_one_override=first_pick, rng_override=random.Random(0))
    return Client(mcp)


def _call(client, tool, arguments):
    async def _go():
        async with client:
            result = await client.call_tool(tool, arguments)
            return json.loads(result.content[0].text)
    return _run(_go())


def test_server_starts_and_lists_tools(client):
    """Server should start and expose all registered tools."""
    async def _check():
        async with client:
            tools = await client.list_tools()
            tool_names = [t.name for t in tools]
            for expected in ALL_EXPECTED_TOOLS:
                assert expected in tool_names, f"Missing tool: {expected}"
    _run(_check())


def test_server_lists_prompts(client):
    async def _check():
        async with client:
            prompts = await client.list_prompts()
            names = [p.name for p in prompts]
            assert "daily_checkin_prompt" in names
            assert "weekly_review_prompt" in names
    _run(_check())


def test_health_check_returns_ok(client):
    async def _check():
        async with client:
            result = await client.call_tool("health_check", {})
            assert "ok" in str(result)
    _run(_check())


def test_score_health_index(client):
    result = _call(client, "score_health_index", {"health_index": 80})
    assert result["tier"] == "excellent"
    assert result["points"] == 10
    assert result["tier_emoji"] == "🥇"


def test_analyze_meal_scores_and_gives_feedback(client):
    result = _call(client, "analyze_meal", {
        "name": "Lunch",
        "description": "grilled chicken salad with beans",
    })
    assert result["status"] == "ok"
    assert result["meal"]["tier"] in {"good", "excellent"}
    assert "protein_packed" in result["meal"]["tags"]
    assert result["feedback"]["message"]


def test_analyze_meal_rejects_photo_input(client):
    result = _call(client, "analyze_meal", {
        "name": "Snap",
        "description": "photo.jpg",
        "input_type": "photo",
    })
    assert result["status"] == "error"


def test_meal_feedback(client):
    result = _call(client, "meal_feedback", {"meal": {"health_index": 30}})
    assert result["status"] == "ok"
    assert result["tier"] == "poor"
    assert result["points"] == -3
    assert result["feedback"]["icon"] == "🔄"


def test_meal_feedback_rejects_malformed_record(client):
    result = _call(client, "meal_feedback", {"meal": {"name": "No score"}})
    assert result["status"] == "error"
    assert "health_index" in result["message"]


def test_meal_feedback_rejects_non_list_tags(client):
    result = _call(client, "meal_feedback", {"meal": {"health_index": 70, "tags": 5}})
    assert result["status"] == "error"
    assert "tags" in result["message"]


def test_analyze_recipe_scores_ingredients(client):
    result = _call(client, "analyze_recipe", {
        "title": "Salmon Plate",
        "ingredients": ["salmon fillet", "brown rice", "steamed vegetables"],
        "instructions": "Bake the salmon for 15 minutes.",
        "estimated_cost": 8.5,
        "diet_tags": ["pescatarian"],
    })
    assert result["status"] == "ok"
    recipe = result["recipe"]
    assert recipe["title"] == "Salmon Plate"
    assert recipe["tier"] in {"good", "excellent"}
    assert {"nutrient_dense", "fiber_rich", "pescatarian"} <= set(recipe["tags"])
    assert recipe["estimated_cost"] == 8.5
    assert "meal" not in result


def test_analyze_recipe_logs_as_meal(client):
    result = _call(client, "analyze_recipe", {
        "title": "Salmon Plate",
        "ingredients": ["salmon fillet", "steamed vegetables"],
        "log_as_meal": True,
    })
    meal = result["meal"]
    assert meal["input_type"] == "recipe"
    assert meal["recipe_id"] == result["recipe"]["id"]
    assert meal["description"] == "Made from recipe: Salmon Plate"
    assert meal["points"] == result["recipe"]["points"]
    assert result["feedback"]["message"]


def test_analyze_recipe_requires_ingredients(client):
    result = _call(client, "analyze_recipe", {"title": "Air", "ingredients": ["  "]})
    assert result["status"] == "error"


def test_daily_advice_without_meals_greets(client):
    result = _call(client, "daily_advice", {"meals": [], "today": "2026-03-15"})
    assert result["status"] == "ok"
    assert result["current_streak"] == 0
    assert result["today"] is None
    assert result["advice"]["type"] == "suggestion"
    assert result["advice"]["message"] == GREETING_MESSAGES[0]


def test_daily_advice_derives_streak_from_meal_log(client):
    meals = []
    for day in ("2026-03-13", "2026-03-14", "2026-03-15"):
        meals += [_meal_record(day, 8, 70), _meal_record(day, 12, 70), _meal_record(day, 19, 70)]
    result = _call(client, "daily_advice", {"meals": meals, "today": "2026-03-15"})
    assert result["current_streak"] == 3
    assert result["today"]["meal_count"] == 3
    assert result["advice"]["type"] == "celebration"
    assert "3 day streak" in result["advice"]["message"]


def test_daily_advice_budget(client):
    meals = [_meal_record("2026-03-15", h, 70) for h in (8, 12, 19)]
    result = _call(client, "daily_advice", {
        "meals": meals,
        "today": "2026-03-15",
        "daily_budget": 20.0,
        "total_spent": 25.0,
    })
    assert result["advice"]["type"] == "insight"
    assert "$5.00 over budget" in result["advice"]["message"]


def test_daily_advice_default_message(client):
    meals = [_meal_record("2026-03-15", h, 70) for h in (8, 12, 19)]
    result = _call(client, "daily_advice", {"meals": meals, "today": "2026-03-15"})
    assert result["advice"]["message"] == DEFAULT_MESSAGES[0]


def test_daily_advice_rejects_bad_date(client):
    result = _call(client, "daily_advice", {"meals": [], "today": "not-a-date"})
    assert result["status"] == "error"


def test_weekly_summary(client):
    meals = [
        _meal_record("2026-03-14", 8, 85),
        _meal_record("2026-03-14", 12, 90),
        _meal_record("2026-03-15", 12, 70),
        _meal_record("2026-03-01", 12, 70),  # outside the window
    ]
    result = _call(client, "weekly_summary", {"meals": meals, "today": "2026-03-15"})
    assert result["status"] == "ok"
    assert [d["date"] for d in result["days"]] == ["2026-03-14", "2026-03-15"]
    assert result["summary"] == [
        "You earned 26 points this week (avg: 13.0/day)",
        "Logged 3 meals this week",
        "2 excellent meals this week! 🥇",
    ]


def test_daily_advice_accepts_mixed_timestamp_styles(client):
    meals = [
        {"health_index": 70, "timestamp": "2026-03-15T08:00:00Z"},
        {"health_index": 70, "timestamp": "2026-03-15T12:00:00"},
    ]
    result = _call(client, "daily_advice", {"meals": meals, "today": "2026-03-15"})
    assert result["status"] == "ok"
    assert result["today"]["meal_count"] == 2
    assert result["advice"]["icon"] == "🎯"


def test_daily_advice_rejects_meal_without_timestamp(client):
    meals = [{"health_index": 70}, {"health_index": 70, "timestamp": "2026-03-14T12:00:00"}]
    result = _call(client, "daily_advice", {"meals": meals, "today": "2026-03-14"})
    assert result["status"] == "error"
    assert "timestamp" in result["message"]


def test_weekly_summary_rejects_meal_without_timestamp(client):
    result = _call(client, "weekly_summary", {"meals": [{"health_index": 70}], "today": "2026-03-15"})
    assert result["status"] == "error"


def test_daily_advice_uses_history_for_yesterday(client):
    history = [{"date": "2026-03-14", "total_points": 30, "meal_count": 3}]
    result = _call(client, "daily_advice", {"meals": [], "today": "2026-03-15", "history": history})
    assert result["status"] == "ok"
    assert result["advice"]["message"].startswith("Great job yesterday! You earned 32 points.")


def test_daily_advice_streak_spans_history_and_meals(client):
    history = [
        {"date": "2026-03-13", "total_points": 18, "meal_count": 3},
        {"date": "2026-03-14", "total_points": 18, "meal_count": 3},
    ]
    meals = [_meal_record("2026-03-15", h, 70) for h in (8, 12, 19)]
    result = _call(client, "daily_advice", {"meals": meals, "today": "2026-03-15", "history": history})
    assert result["current_streak"] == 3


def test_weekly_summary_merges_history(client):
    history = [
        {
            "date": "2026-03-13",
            "total_points": 26,
            "meal_count": 3,
            "tier_counts": {"excellent": 2, "good": 1},
        },
        # Recomputed from the meal log below.
        {"date": "2026-03-15", "total_points": 99, "meal_count": 9},
    ]
    meals = [_meal_record("2026-03-15", 12, 70)]
    result = _call(client, "weekly_summary", {"meals": meals, "today": "2026-03-15", "history": history})
    assert result["status"] == "ok"
    assert [d["date"] for d in result["days"]] == ["2026-03-13", "2026-03-15"]
    assert result["days"][0]["tier_counts"] == {"excellent": 2, "good": 1}
    assert result["days"][1]["meal_count"] == 1
    assert result["summary"] == [
        "You earned 34 points this week (avg: 17.0/day)",
        "Logged 4 meals this week",
        "2 excellent meals this week! 🥇",
    ]


def test_weekly_summary_rejects_unknown_history_tier(client):
    history = [{"date": "2026-03-14", "meal_count": 1, "tier_counts": {"legendary": 1}}]
    result = _call(client, "weekly_summary", {"meals": [], "today": "2026-03-15", "history": history})
    assert result["status"] == "error"
    assert "legendary" in result["message"]

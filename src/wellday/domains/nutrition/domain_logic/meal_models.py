"""Meal, daily stats, recipe and advisor message models.

All records are immutable snapshots supplied by the caller. Tier and points
are never stored on a meal; they are derived from its health index.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from wellday.domains.nutrition.domain_logic.scoring import MealTier, points_for, tier_for

COMPLETION_BONUS_MEALS = 3
COMPLETION_BONUS_POINTS = 2


class MealRecordError(Exception):
    """Raised when a meal or stats record supplied by a caller is malformed."""


class MealInputType(str, Enum):
    PHOTO = "photo"
    TEXT = "text"
    VOICE = "voice"
    RECIPE = "recipe"


class MessageType(str, Enum):
    ENCOURAGEMENT = "encouragement"
    SUGGESTION = "suggestion"
    CELEBRATION = "celebration"
    INSIGHT = "insight"


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Field coercion helpers (used by the from_dict constructors)
# ---------------------------------------------------------------------------

def _require(data: dict[str, Any], key: str, kind: str) -> Any:
    if key not in data or data[key] is None:
        raise MealRecordError(f"{kind} record is missing '{key}'")
    return data[key]


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise MealRecordError(f"'{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise MealRecordError(f"'{key}' must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise MealRecordError(f"'{key}' must be a finite number, got {value!r}")
    return number


def _as_int(value: Any, key: str) -> int:
    number = _as_float(value, key)
    if number != int(number):
        raise MealRecordError(f"'{key}' must be a whole number, got {value!r}")
    return int(number)


def _as_str_tuple(value: Any, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise MealRecordError(f"'{key}' must be a list of strings")
    return tuple(value)


def _as_datetime(value: Any) -> datetime:
    """Parse a timestamp into naive UTC.

    Offset-aware values are converted to UTC; naive values are taken as
    already being UTC, so every parsed timestamp is comparable.
    """
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as exc:
            raise MealRecordError(f"Invalid timestamp: {value!r}") from exc
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise MealRecordError(f"Invalid date: {value!r}") from exc


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Meal:
    """A logged meal."""

    name: str
    health_index: float
    tags: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)
    input_type: MealInputType = MealInputType.TEXT
    description: str | None = None
    recipe_id: str | None = None
    nutrition_data: dict[str, float] | None = None
    id: str = field(default_factory=_new_id)

    @property
    def tier(self) -> MealTier:
        return tier_for(self.health_index)

    @property
    def points(self) -> int:
        return points_for(self.health_index)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp.isoformat(),
            "input_type": self.input_type.value,
            "health_index": round(self.health_index, 2),
            "tier": self.tier.value,
            "tier_label": self.tier.label,
            "tier_emoji": self.tier.emoji,
            "points": self.points,
            "tags": list(self.tags),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Meal:
        """Build a meal from a caller-supplied record.

        Only ``health_index`` is required. Any ``tier``/``points`` keys in the
        record are ignored; they are always re-derived.
        """
        if not isinstance(data, dict):
            raise MealRecordError(f"Meal record must be an object, got {type(data).__name__}")
        health_index = _as_float(_require(data, "health_index", "Meal"), "health_index")
        tags = _as_str_tuple(data.get("tags"), "tags")
        try:
            input_type = MealInputType(data.get("input_type") or "text")
        except ValueError as exc:
            raise MealRecordError(f"Unknown input_type: {data.get('input_type')!r}") from exc

        kwargs: dict[str, Any] = {}
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        if data.get("timestamp"):
            kwargs["timestamp"] = _as_datetime(data["timestamp"])
        return cls(
            name=str(data.get("name") or "Meal"),
            health_index=health_index,
            tags=tags,
            input_type=input_type,
            description=data.get("description"),
            recipe_id=data.get("recipe_id"),
            nutrition_data=data.get("nutrition_data"),
            **kwargs,
        )


@dataclass(frozen=True)
class DailyStats:
    """Aggregated totals for one calendar day."""

    date: date
    total_points: int = 0
    meal_count: int = 0
    total_spent: float = 0.0
    tier_counts: dict[MealTier, int] = field(default_factory=dict)
    meal_ids: tuple[str, ...] = ()

    @property
    def has_completion_bonus(self) -> bool:
        return self.meal_count >= COMPLETION_BONUS_MEALS

    @property
    def final_points(self) -> int:
        if self.has_completion_bonus:
            return self.total_points + COMPLETION_BONUS_POINTS
        return self.total_points

    def tier_count(self, tier: MealTier) -> int:
        return self.tier_counts.get(tier, 0)

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "total_points": self.total_points,
            "final_points": self.final_points,
            "meal_count": self.meal_count,
            "has_completion_bonus": self.has_completion_bonus,
            "total_spent": round(self.total_spent, 2),
            "tier_counts": {tier.value: count for tier, count in self.tier_counts.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyStats:
        """Build stats from a caller-supplied record.

        ``tier_counts`` may be keyed by tier values (``"excellent"``) and is
        converted to the typed mapping.
        """
        if not isinstance(data, dict):
            raise MealRecordError(f"Stats record must be an object, got {type(data).__name__}")
        raw_counts = data.get("tier_counts") or {}
        if not isinstance(raw_counts, dict):
            raise MealRecordError("'tier_counts' must be an object of tier -> count")
        tier_counts: dict[MealTier, int] = {}
        for key, count in raw_counts.items():
            try:
                tier = MealTier(key)
            except ValueError as exc:
                raise MealRecordError(f"Unknown tier in tier_counts: {key!r}") from exc
            tier_counts[tier] = _as_int(count, f"tier_counts.{key}")
        return cls(
            date=_as_date(_require(data, "date", "Stats")),
            total_points=_as_int(data.get("total_points", 0), "total_points"),
            meal_count=_as_int(data.get("meal_count", 0), "meal_count"),
            total_spent=_as_float(data.get("total_spent", 0.0), "total_spent"),
            tier_counts=tier_counts,
            meal_ids=_as_str_tuple(data.get("meal_ids"), "meal_ids"),
        )


@dataclass(frozen=True)
class AdvisorMessage:
    """A single coaching message chosen by the advisor."""

    message: str
    type: MessageType
    icon: str

    def as_dict(self) -> dict[str, str]:
        return {"message": self.message, "type": self.type.value, "icon": self.icon}


@dataclass(frozen=True)
class Recipe:
    """A recipe with an analyzed health index."""

    title: str
    ingredients: tuple[str, ...]
    health_index: float
    tags: tuple[str, ...] = ()
    instructions: str | None = None
    prep_time_minutes: int | None = None
    estimated_cost: float | None = None
    source: str = "user"  # 'user' | 'curated' | 'community'
    is_favorite: bool = False
    id: str = field(default_factory=_new_id)

    @property
    def tier(self) -> MealTier:
        return tier_for(self.health_index)

    @property
    def points(self) -> int:
        return points_for(self.health_index)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
            "health_index": round(self.health_index, 2),
            "tier": self.tier.value,
            "tier_label": self.tier.label,
            "points": self.points,
            "tags": list(self.tags),
            "prep_time_minutes": self.prep_time_minutes,
            "estimated_cost": self.estimated_cost,
            "source": self.source,
            "is_favorite": self.is_favorite,
        }

    def to_meal(self, timestamp: datetime | None = None) -> Meal:
        """Log this recipe as a meal."""
        return Meal(
            name=self.title,
            health_index=self.health_index,
            tags=self.tags,
            timestamp=timestamp or datetime.now(),
            input_type=MealInputType.RECIPE,
            description=f"Made from recipe: {self.title}",
            recipe_id=self.id,
        )

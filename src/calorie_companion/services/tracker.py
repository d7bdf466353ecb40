"""Application state for the meal, exercise and weight logs."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from typing import Protocol
from uuid import uuid4

from calorie_companion.domain.logs import Exercise, LogState, Meal, WeightEntry
from calorie_companion.domain.nutrition import NutritionQueryResult
from calorie_companion.domain.profile import EnergyTargets
from calorie_companion.services.achievements import (
    STATIC_ENCOURAGEMENT,
    AchievementService,
)
from calorie_companion.services.aggregator import (
    DailySummary,
    filter_today,
    summarize_day,
)

MEALS_KEY = "meals"
EXERCISES_KEY = "exercises"
WEIGHT_ENTRIES_KEY = "weightEntries"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence interface mapping string keys to JSON values."""

    def get(self, key: str, default: object = None) -> object:
        """Return the stored value or the default."""

    def set(self, key: str, value: object) -> None:
        """Persist a JSON-serializable value under the key."""


def _new_id() -> str:
    return uuid4().hex


@dataclass
class TrackerService:
    """Own the log state and persist every append.

    ``state`` is replaced by a new snapshot on each change; nothing is ever
    edited or removed. Meal and weight changes refresh ``motivation``.
    """

    store: KeyValueStore
    achievement_service: AchievementService
    targets: EnergyTargets
    timezone: tzinfo | None = None
    id_factory: Callable[[], str] = _new_id
    state: LogState = field(init=False)
    motivation: str = field(default=STATIC_ENCOURAGEMENT, init=False)

    def __post_init__(self) -> None:
        self.state = load_state(self.store)

    async def add_meal(
        self, result: NutritionQueryResult, now: datetime | None = None
    ) -> Meal:
        """Append a meal built from a lookup result."""
        meal = Meal(
            id=self.id_factory(),
            name=result.name,
            calories=result.calories,
            carbohydrates_g=result.carbohydrates_g,
            fiber_g=result.fiber_g,
            fat_g=result.fat_g,
            created_at=now or datetime.now(tz=UTC),
        )
        new_state = self.state.with_meal(meal)
        self.store.set(MEALS_KEY, [meal_to_record(item) for item in new_state.meals])
        self.state = new_state
        _logger.info("Meal logged: name=%s calories=%s", meal.name, meal.calories)
        await self.refresh_motivation(now)
        return meal

    def add_exercise(
        self, name: str, calories_burned: float, now: datetime | None = None
    ) -> Exercise:
        """Append an exercise; the name must be set and the burn positive."""
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Exercise name is required")
        if calories_burned <= 0:
            raise ValueError("Calories burned must be positive")
        exercise = Exercise(
            id=self.id_factory(),
            name=cleaned,
            calories_burned=float(calories_burned),
            created_at=now or datetime.now(tz=UTC),
        )
        new_state = self.state.with_exercise(exercise)
        self.store.set(
            EXERCISES_KEY, [exercise_to_record(item) for item in new_state.exercises]
        )
        self.state = new_state
        _logger.info(
            "Exercise logged: name=%s calories_burned=%s",
            exercise.name,
            exercise.calories_burned,
        )
        return exercise

    async def add_weight(
        self, weight: float, now: datetime | None = None
    ) -> WeightEntry:
        """Append a weight entry; the weight must be positive."""
        if weight <= 0:
            raise ValueError("Weight must be positive")
        entry = WeightEntry(
            weight=float(weight), created_at=now or datetime.now(tz=UTC)
        )
        new_state = self.state.with_weight_entry(entry)
        self.store.set(
            WEIGHT_ENTRIES_KEY,
            [weight_entry_to_record(item) for item in new_state.weight_entries],
        )
        self.state = new_state
        _logger.info("Weight logged: weight=%s", entry.weight)
        await self.refresh_motivation(now)
        return entry

    async def refresh_motivation(self, now: datetime | None = None) -> str:
        """Re-run achievement evaluation and cache the message."""
        self.motivation = await self.achievement_service.evaluate(
            self.state, now or datetime.now(tz=UTC)
        )
        return self.motivation

    def summary(self, now: datetime | None = None) -> DailySummary:
        """Return today's totals and remaining calories."""
        return summarize_day(
            self.state,
            now or datetime.now(tz=UTC),
            self.targets.daily_goal,
            self.timezone,
        )

    def todays_meals(self, now: datetime | None = None) -> list[Meal]:
        return filter_today(
            self.state.meals, now or datetime.now(tz=UTC), self.timezone
        )

    def todays_exercises(self, now: datetime | None = None) -> list[Exercise]:
        return filter_today(
            self.state.exercises, now or datetime.now(tz=UTC), self.timezone
        )


def load_state(store: KeyValueStore) -> LogState:
    """Read the three logs from the store, skipping malformed records."""
    return LogState(
        meals=tuple(_load(store, MEALS_KEY, meal_from_record)),
        exercises=tuple(_load(store, EXERCISES_KEY, exercise_from_record)),
        weight_entries=tuple(
            _load(store, WEIGHT_ENTRIES_KEY, weight_entry_from_record)
        ),
    )


def meal_to_record(meal: Meal) -> dict[str, object]:
    return {
        "id": meal.id,
        "name": meal.name,
        "calories": meal.calories,
        "carbohydrates_g": meal.carbohydrates_g,
        "fiber_g": meal.fiber_g,
        "fat_g": meal.fat_g,
        "date": _format_timestamp(meal.created_at),
    }


def meal_from_record(record: dict[str, object]) -> Meal:
    return Meal(
        id=str(record["id"]),
        name=str(record["name"]),
        calories=float(record["calories"]),
        carbohydrates_g=float(record.get("carbohydrates_g", 0.0)),
        fiber_g=float(record.get("fiber_g", 0.0)),
        fat_g=float(record.get("fat_g", 0.0)),
        created_at=_parse_timestamp(record["date"]),
    )


def exercise_to_record(exercise: Exercise) -> dict[str, object]:
    return {
        "id": exercise.id,
        "name": exercise.name,
        "caloriesBurned": exercise.calories_burned,
        "date": _format_timestamp(exercise.created_at),
    }


def exercise_from_record(record: dict[str, object]) -> Exercise:
    return Exercise(
        id=str(record["id"]),
        name=str(record["name"]),
        calories_burned=float(record["caloriesBurned"]),
        created_at=_parse_timestamp(record["date"]),
    )


def weight_entry_to_record(entry: WeightEntry) -> dict[str, object]:
    return {"weight": entry.weight, "date": _format_timestamp(entry.created_at)}


def weight_entry_from_record(record: dict[str, object]) -> WeightEntry:
    return WeightEntry(
        weight=float(record["weight"]),
        created_at=_parse_timestamp(record["date"]),
    )


def _load(
    store: KeyValueStore,
    key: str,
    parse: "Callable[[dict[str, object]], object]",
) -> list:
    raw = store.get(key, [])
    if not isinstance(raw, list):
        _logger.warning("Ignoring non-list value stored under %s", key)
        return []
    parsed = []
    for record in raw:
        try:
            parsed.append(parse(record))
        except (AttributeError, KeyError, TypeError, ValueError):
            _logger.warning("Skipping malformed %s record: %s", key, record)
    return parsed


def _format_timestamp(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat()


def _parse_timestamp(value: object) -> datetime:
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed

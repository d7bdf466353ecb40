"""Pure aggregation of the logs by local calendar day."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import TypeVar

from calorie_companion.domain.logs import Exercise, LogState, Meal, WeightEntry
from calorie_companion.domain.nutrition import MacroTotals

EntryT = TypeVar("EntryT", Meal, Exercise, WeightEntry)


@dataclass(frozen=True)
class DailySummary:
    """Totals and balance for one local day."""

    day: date
    meals: list[Meal]
    exercises: list[Exercise]
    consumed: float
    burned: float
    remaining: float
    daily_goal: float
    macros: MacroTotals


def local_date(moment: datetime | date, tz: tzinfo | None = None) -> date:
    """Return the calendar date of a moment in the given (or system) zone."""
    if isinstance(moment, datetime):
        return moment.astimezone(tz).date()
    return moment


def filter_on_day(
    entries: Iterable[EntryT], day: date, tz: tzinfo | None = None
) -> list[EntryT]:
    """Keep entries whose timestamp falls on the given local day."""
    return [entry for entry in entries if local_date(entry.created_at, tz) == day]


def filter_today(
    entries: Iterable[EntryT], reference: datetime | date, tz: tzinfo | None = None
) -> list[EntryT]:
    """Keep entries from the reference moment's local calendar day."""
    return filter_on_day(entries, local_date(reference, tz), tz)


def sum_calories(meals: Iterable[Meal]) -> float:
    return sum((meal.calories for meal in meals), 0.0)


def sum_calories_burned(exercises: Iterable[Exercise]) -> float:
    return sum((exercise.calories_burned for exercise in exercises), 0.0)


def sum_macros(meals: Iterable[Meal]) -> MacroTotals:
    """Sum calories and macronutrients over the meals."""
    total = MacroTotals(calories=0.0, carbohydrates_g=0.0, fiber_g=0.0, fat_g=0.0)
    for meal in meals:
        total = MacroTotals(
            calories=total.calories + meal.calories,
            carbohydrates_g=total.carbohydrates_g + meal.carbohydrates_g,
            fiber_g=total.fiber_g + meal.fiber_g,
            fat_g=total.fat_g + meal.fat_g,
        )
    return total


def remaining_calories(daily_goal: float, burned: float, consumed: float) -> float:
    """Return the calorie budget left: goal plus exercise burn minus intake."""
    return daily_goal + burned - consumed


def summarize_day(
    state: LogState,
    reference: datetime | date,
    daily_goal: float,
    tz: tzinfo | None = None,
) -> DailySummary:
    """Build the summary for the reference moment's local day."""
    day = local_date(reference, tz)
    meals = filter_on_day(state.meals, day, tz)
    exercises = filter_on_day(state.exercises, day, tz)
    consumed = sum_calories(meals)
    burned = sum_calories_burned(exercises)
    return DailySummary(
        day=day,
        meals=meals,
        exercises=exercises,
        consumed=consumed,
        burned=burned,
        remaining=remaining_calories(daily_goal, burned, consumed),
        daily_goal=daily_goal,
        macros=sum_macros(meals),
    )

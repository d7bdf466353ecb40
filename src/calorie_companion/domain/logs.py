"""Domain models for the meal, exercise and weight logs."""

from dataclasses import dataclass, field, replace
from datetime import datetime


@dataclass(frozen=True)
class Meal:
    """A logged meal with its nutrition facts."""

    id: str
    name: str
    calories: float
    carbohydrates_g: float
    fiber_g: float
    fat_g: float
    created_at: datetime


@dataclass(frozen=True)
class Exercise:
    """A logged exercise with its energy burn."""

    id: str
    name: str
    calories_burned: float
    created_at: datetime


@dataclass(frozen=True)
class WeightEntry:
    """A body weight measurement, ordered by insertion."""

    weight: float
    created_at: datetime


@dataclass(frozen=True)
class LogState:
    """Immutable snapshot of all three append-only logs."""

    meals: tuple[Meal, ...] = field(default_factory=tuple)
    exercises: tuple[Exercise, ...] = field(default_factory=tuple)
    weight_entries: tuple[WeightEntry, ...] = field(default_factory=tuple)

    def with_meal(self, meal: Meal) -> "LogState":
        """Return a new snapshot with the meal appended."""
        return replace(self, meals=(*self.meals, meal))

    def with_exercise(self, exercise: Exercise) -> "LogState":
        """Return a new snapshot with the exercise appended."""
        return replace(self, exercises=(*self.exercises, exercise))

    def with_weight_entry(self, entry: WeightEntry) -> "LogState":
        """Return a new snapshot with the weight entry appended."""
        return replace(self, weight_entries=(*self.weight_entries, entry))

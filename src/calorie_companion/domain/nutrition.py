"""Nutrition domain models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class NutritionQueryResult(BaseModel):
    """Structured nutrition facts returned for a food query."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(min_length=1)
    calories: float = Field(ge=0.0)
    carbohydrates_g: float = Field(ge=0.0)
    fiber_g: float = Field(ge=0.0)
    fat_g: float = Field(ge=0.0)


@dataclass(frozen=True)
class MacroTotals:
    """Summed calories and macronutrients."""

    calories: float
    carbohydrates_g: float
    fiber_g: float
    fat_g: float

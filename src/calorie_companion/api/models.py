"""Request models for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    """Free-text food lookup."""

    model_config = ConfigDict(str_strip_whitespace=True)

    query: str = Field(min_length=1)


class ExerciseRequest(BaseModel):
    """Exercise to append to the log."""

    name: str = Field(min_length=1)
    calories_burned: float = Field(gt=0)


class WeightRequest(BaseModel):
    """Weight measurement to append to the log."""

    weight: float = Field(gt=0)

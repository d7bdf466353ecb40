"""Nutrition lookup backed by a generative-AI service."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from calorie_companion.adapters.openai_generative_client import GenerativeClient
from calorie_companion.domain.errors import LookupFailed
from calorie_companion.domain.nutrition import NutritionQueryResult

NUTRITION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "description": (
                "The name of the food item, including portion size if specified."
            ),
        },
        "calories": {
            "type": "number",
            "minimum": 0,
            "description": "Total calories in the food item.",
        },
        "carbohydrates_g": {
            "type": "number",
            "minimum": 0,
            "description": "Total carbohydrates in grams.",
        },
        "fiber_g": {
            "type": "number",
            "minimum": 0,
            "description": "Total dietary fiber in grams.",
        },
        "fat_g": {
            "type": "number",
            "minimum": 0,
            "description": "Total fat in grams.",
        },
    },
    "required": ["name", "calories", "carbohydrates_g", "fiber_g", "fat_g"],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


def build_nutrition_prompt(query: str) -> str:
    """Return the lookup prompt for a food description or barcode."""
    return (
        f"Provide the nutritional information for: {query}. "
        "Assume a standard single serving unless specified otherwise."
    )


@dataclass
class NutritionLookupService:
    """Turn free text or a barcode value into nutrition facts.

    Every failure is normalised to ``LookupFailed``; results are never cached.
    """

    client: GenerativeClient
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    async def lookup(self, query: str) -> NutritionQueryResult:
        """Return nutrition facts for a single serving of the query."""
        cleaned = query.strip()
        if not cleaned:
            raise LookupFailed("Enter a food to look up.")
        try:
            raw = await self.client.generate_json(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=build_nutrition_prompt(cleaned),
                schema=NUTRITION_SCHEMA,
                schema_name="food_nutrition",
            )
            result = NutritionQueryResult.model_validate(raw)
        except ValidationError as exc:
            _logger.warning("Nutrition response failed validation: query=%s", cleaned)
            raise LookupFailed from exc
        except Exception as exc:
            _logger.warning(
                "Nutrition lookup failed: query=%s error=%s", cleaned, exc
            )
            raise LookupFailed from exc
        _logger.info("Nutrition lookup: query=%s name=%s", cleaned, result.name)
        return result

"""Motivational messages generated from achievements."""

import logging
from dataclasses import dataclass
from enum import Enum

from calorie_companion.adapters.openai_generative_client import GenerativeClient
from calorie_companion.domain.errors import MotivationUnavailable

FALLBACK_MESSAGE = "Great job! Your hard work is paying off."

_logger = logging.getLogger(__name__)


class AchievementKind(Enum):
    """Achievements that earn a generated message."""

    CALORIC_DEFICIT = "caloric_deficit"
    WEIGHT_LOSS = "weight_loss"


PROMPTS: dict[AchievementKind, str] = {
    AchievementKind.CALORIC_DEFICIT: (
        "Generate a short, positive, and motivational message for someone who "
        "successfully stayed in a calorie deficit yesterday. "
        "Keep it under 25 words."
    ),
    AchievementKind.WEIGHT_LOSS: (
        "Generate a short, encouraging message for someone who lost weight. "
        "Keep it under 25 words."
    ),
}


@dataclass
class MotivationService:
    """Request a message for an achievement, never failing the caller."""

    client: GenerativeClient
    model: str
    reasoning_effort: str | None = None
    store: bool = False
    fallback_message: str = FALLBACK_MESSAGE

    async def request_message(self, kind: AchievementKind) -> str:
        """Return generated text, or the fallback message on any failure."""
        try:
            return await self._generate(kind)
        except Exception as exc:
            _logger.warning(
                "Motivation request failed: kind=%s error=%s", kind.value, exc
            )
            return self.fallback_message

    async def _generate(self, kind: AchievementKind) -> str:
        text = await self.client.generate_text(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=PROMPTS[kind],
        )
        message = text.strip()
        if not message:
            raise MotivationUnavailable
        return message

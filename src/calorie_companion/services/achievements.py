"""Achievement evaluation for the daily motivational message."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from calorie_companion.domain.logs import LogState
from calorie_companion.services.aggregator import (
    filter_on_day,
    local_date,
    sum_calories,
    sum_calories_burned,
)
from calorie_companion.services.motivation import AchievementKind, MotivationService

STATIC_ENCOURAGEMENT = "Keep pushing forward, one step at a time. You've got this!"

_logger = logging.getLogger(__name__)


def choose_achievement(
    state: LogState,
    reference: datetime | date,
    tdee: float,
    tz: tzinfo | None = None,
) -> AchievementKind | None:
    """Pick the achievement to celebrate; the deficit check always wins."""
    yesterday = local_date(reference, tz) - timedelta(days=1)
    consumed = sum_calories(filter_on_day(state.meals, yesterday, tz))
    burned = sum_calories_burned(filter_on_day(state.exercises, yesterday, tz))
    if 0 < consumed < tdee + burned:
        return AchievementKind.CALORIC_DEFICIT
    if len(state.weight_entries) >= 2:  # noqa: PLR2004
        previous, latest = state.weight_entries[-2:]
        if latest.weight < previous.weight:
            return AchievementKind.WEIGHT_LOSS
    return None


@dataclass
class AchievementService:
    """Evaluate yesterday's performance and fetch at most one message."""

    motivation_service: MotivationService
    tdee: float
    timezone: tzinfo | None = None
    static_message: str = STATIC_ENCOURAGEMENT

    async def evaluate(self, state: LogState, reference: datetime | date) -> str:
        """Return the message to show for the current state."""
        kind = choose_achievement(state, reference, self.tdee, self.timezone)
        if kind is None:
            return self.static_message
        _logger.info("Achievement unlocked: %s", kind.value)
        return await self.motivation_service.request_message(kind)

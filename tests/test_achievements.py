"""Tests for achievement evaluation."""

import asyncio
from datetime import UTC, datetime, timedelta

from calorie_companion.domain.logs import Exercise, LogState, Meal, WeightEntry
from calorie_companion.services.achievements import (
    STATIC_ENCOURAGEMENT,
    AchievementService,
    choose_achievement,
)
from calorie_companion.services.motivation import (
    PROMPTS,
    AchievementKind,
    MotivationService,
)
from tests.conftest import FakeGenerativeClient

NOW = datetime(2026, 3, 14, 9, 0, tzinfo=UTC)
YESTERDAY = NOW - timedelta(days=1)


def _meal(calories: float, created_at: datetime = YESTERDAY) -> Meal:
    return Meal(
        id=str(calories),
        name="meal",
        calories=calories,
        carbohydrates_g=0,
        fiber_g=0,
        fat_g=0,
        created_at=created_at,
    )


def _weights(*values: float) -> tuple[WeightEntry, ...]:
    return tuple(
        WeightEntry(weight=value, created_at=NOW - timedelta(days=len(values) - i))
        for i, value in enumerate(values)
    )


def _service(client: FakeGenerativeClient, tdee: float = 2000) -> AchievementService:
    return AchievementService(
        motivation_service=MotivationService(client=client, model="gpt-5-mini"),
        tdee=tdee,
        timezone=UTC,
    )


def test_deficit_yesterday_requests_deficit_message() -> None:
    client = FakeGenerativeClient(text="Deficit achieved!")
    state = LogState(meals=(_meal(1000), _meal(800)))

    message = asyncio.run(_service(client).evaluate(state, NOW))

    assert message == "Deficit achieved!"
    assert client.text_prompts == [PROMPTS[AchievementKind.CALORIC_DEFICIT]]


def test_exercise_burn_raises_deficit_threshold() -> None:
    state = LogState(
        meals=(_meal(2100),),
        exercises=(
            Exercise(id="e1", name="run", calories_burned=300, created_at=YESTERDAY),
        ),
    )

    assert choose_achievement(state, NOW, 2000, UTC) is AchievementKind.CALORIC_DEFICIT


def test_consumption_at_expenditure_is_not_a_deficit() -> None:
    state = LogState(meals=(_meal(2000),))

    assert choose_achievement(state, NOW, 2000, UTC) is None


def test_todays_meals_do_not_count_as_yesterday() -> None:
    state = LogState(meals=(_meal(1200, created_at=NOW),))

    assert choose_achievement(state, NOW, 2000, UTC) is None


def test_weight_loss_requests_weight_message() -> None:
    client = FakeGenerativeClient(text="Down 1.5 lbs!")
    state = LogState(weight_entries=_weights(180.0, 178.5))

    message = asyncio.run(_service(client).evaluate(state, NOW))

    assert message == "Down 1.5 lbs!"
    assert client.text_prompts == [PROMPTS[AchievementKind.WEIGHT_LOSS]]


def test_weight_gain_is_not_celebrated() -> None:
    state = LogState(weight_entries=_weights(178.5, 180.0))

    assert choose_achievement(state, NOW, 2000, UTC) is None


def test_deficit_wins_over_weight_loss() -> None:
    client = FakeGenerativeClient()
    state = LogState(meals=(_meal(1500),), weight_entries=_weights(180.0, 178.5))

    asyncio.run(_service(client).evaluate(state, NOW))

    assert client.text_prompts == [PROMPTS[AchievementKind.CALORIC_DEFICIT]]


def test_no_achievement_uses_static_message_without_network() -> None:
    client = FakeGenerativeClient()
    state = LogState(weight_entries=_weights(180.0))

    message = asyncio.run(_service(client).evaluate(state, NOW))

    assert message == STATIC_ENCOURAGEMENT
    assert client.text_prompts == []


def test_empty_generated_message_uses_fallback() -> None:
    client = FakeGenerativeClient(text="")
    state = LogState(weight_entries=_weights(180.0, 178.5))

    message = asyncio.run(_service(client).evaluate(state, NOW))

    assert message == "Great job! Your hard work is paying off."

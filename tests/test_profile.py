"""Tests for energy target calculations."""

import pytest

from calorie_companion.domain.profile import (
    UserProfile,
    basal_metabolic_rate,
    compute_energy_targets,
)


def test_default_profile_targets() -> None:
    profile = UserProfile(weight_lbs=175, height_in=68, age=39, sex="male")

    targets = compute_energy_targets(profile)

    assert targets.bmr == pytest.approx(1683.29, abs=0.01)
    assert targets.tdee == pytest.approx(2019.95, abs=0.01)
    assert targets.daily_goal == 1520


def test_female_offset() -> None:
    male = UserProfile(weight_lbs=150, height_in=65, age=30, sex="male")
    female = UserProfile(weight_lbs=150, height_in=65, age=30, sex="female")

    assert basal_metabolic_rate(male) - basal_metabolic_rate(female) == pytest.approx(
        166
    )


def test_custom_multiplier_and_deficit() -> None:
    profile = UserProfile(weight_lbs=175, height_in=68, age=39, sex="male")

    targets = compute_energy_targets(
        profile, activity_multiplier=1.55, deficit_kcal=250
    )

    assert targets.daily_goal == round(targets.bmr * 1.55 - 250)

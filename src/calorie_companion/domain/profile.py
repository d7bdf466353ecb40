"""User profile and energy targets."""

from dataclasses import dataclass

LBS_PER_KG = 2.20462
CM_PER_INCH = 2.54
_MALE_OFFSET = 5.0
_FEMALE_OFFSET = -161.0


@dataclass(frozen=True)
class UserProfile:
    """Fixed body profile used to derive energy targets."""

    weight_lbs: float
    height_in: float
    age: int
    sex: str

    @property
    def weight_kg(self) -> float:
        return self.weight_lbs / LBS_PER_KG

    @property
    def height_cm(self) -> float:
        return self.height_in * CM_PER_INCH


@dataclass(frozen=True)
class EnergyTargets:
    """Energy figures derived once from the profile."""

    bmr: float
    tdee: float
    daily_goal: int


def basal_metabolic_rate(profile: UserProfile) -> float:
    """Return the Mifflin-St Jeor basal metabolic rate in kcal/day."""
    offset = _MALE_OFFSET if profile.sex.lower() == "male" else _FEMALE_OFFSET
    return (
        10 * profile.weight_kg
        + 6.25 * profile.height_cm
        - 5 * profile.age
        + offset
    )


def compute_energy_targets(
    profile: UserProfile,
    activity_multiplier: float = 1.2,
    deficit_kcal: float = 500.0,
) -> EnergyTargets:
    """Derive BMR, TDEE and the rounded daily calorie goal."""
    bmr = basal_metabolic_rate(profile)
    tdee = bmr * activity_multiplier
    return EnergyTargets(bmr=bmr, tdee=tdee, daily_goal=round(tdee - deficit_kcal))

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from supabase import create_client

from calorie_companion.adapters.json_file_store import JsonFileStore
from calorie_companion.adapters.opencv_barcode_detector import OpenCVBarcodeDetector
from calorie_companion.adapters.opencv_camera import OpenCVCamera
from calorie_companion.adapters.openai_generative_client import (
    OpenAIGenerativeClient,
)
from calorie_companion.adapters.supabase_kv_store import SupabaseKeyValueStore
from calorie_companion.config import Settings, uses_supabase
from calorie_companion.domain.profile import (
    EnergyTargets,
    UserProfile,
    compute_energy_targets,
)
from calorie_companion.services.achievements import AchievementService
from calorie_companion.services.food_search import FoodSearchSession
from calorie_companion.services.motivation import MotivationService
from calorie_companion.services.nutrition import NutritionLookupService
from calorie_companion.services.scanner import BarcodeScanController
from calorie_companion.services.tracker import KeyValueStore, TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    targets: EnergyTargets
    nutrition_service: NutritionLookupService
    motivation_service: MotivationService
    achievement_service: AchievementService
    tracker_service: TrackerService
    food_search: FoodSearchSession
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = resolve_timezone(resolved_settings.timezone)
    targets = compute_energy_targets(
        UserProfile(
            weight_lbs=resolved_settings.profile_weight_lbs,
            height_in=resolved_settings.profile_height_in,
            age=resolved_settings.profile_age,
            sex=resolved_settings.profile_sex,
        ),
        activity_multiplier=resolved_settings.activity_multiplier,
        deficit_kcal=resolved_settings.daily_deficit_kcal,
    )
    generative_client = OpenAIGenerativeClient.create(
        resolved_settings.openai_api_key
    )
    nutrition_service = NutritionLookupService(
        client=generative_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    motivation_service = MotivationService(
        client=generative_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    achievement_service = AchievementService(
        motivation_service=motivation_service,
        tdee=targets.tdee,
        timezone=timezone,
    )
    tracker_service = TrackerService(
        store=build_store(resolved_settings),
        achievement_service=achievement_service,
        targets=targets,
        timezone=timezone,
    )
    scanner = BarcodeScanController(
        camera=OpenCVCamera(rear_index=resolved_settings.camera_index),
        detector_factory=OpenCVBarcodeDetector.create,
        poll_interval_seconds=resolved_settings.scan_interval_seconds,
    )
    food_search = FoodSearchSession(
        nutrition_service=nutrition_service,
        scanner=scanner,
    )

    async def close_resources() -> None:
        await food_search.close()
        await generative_client.close()

    return AppContainer(
        settings=resolved_settings,
        targets=targets,
        nutrition_service=nutrition_service,
        motivation_service=motivation_service,
        achievement_service=achievement_service,
        tracker_service=tracker_service,
        food_search=food_search,
        close_resources=close_resources,
    )


def build_store(settings: Settings) -> KeyValueStore:
    """Use Supabase when configured, otherwise a local JSON file."""
    if uses_supabase(settings):
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client=client, table=settings.supabase_table)
    return JsonFileStore(path=Path(settings.data_file))


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the configured zone, or None for the system local zone."""
    if name is None or not name.strip():
        return None
    return ZoneInfo(name.strip())

"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC
from pathlib import Path

import pytest

from calorie_companion.adapters.openai_generative_client import GenerativeClient
from calorie_companion.config import Settings
from calorie_companion.containers import AppContainer
from calorie_companion.domain.profile import UserProfile, compute_energy_targets
from calorie_companion.domain.scanner import BarcodeDetection, BarcodeFormat
from calorie_companion.services.achievements import AchievementService
from calorie_companion.services.food_search import FoodSearchSession
from calorie_companion.services.motivation import MotivationService
from calorie_companion.services.nutrition import NutritionLookupService
from calorie_companion.services.scanner import (
    BarcodeDetector,
    BarcodeScanController,
    CameraProvider,
    CameraStream,
)
from calorie_companion.services.tracker import KeyValueStore, TrackerService

OATMEAL = {
    "name": "1 cup oatmeal",
    "calories": 158,
    "carbohydrates_g": 27,
    "fiber_g": 4,
    "fat_g": 3.2,
}


@dataclass
class FakeGenerativeClient(GenerativeClient):
    """Fake generative client recording prompts."""

    json_payload: object = field(default_factory=lambda: dict(OATMEAL))
    text: str = "Nice work staying on track!"
    json_error: Exception | None = None
    text_error: Exception | None = None
    json_prompts: list[str] = field(default_factory=list)
    text_prompts: list[str] = field(default_factory=list)
    schemas: list[dict[str, object]] = field(default_factory=list)

    async def generate_json(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        self.json_prompts.append(prompt)
        self.schemas.append(schema)
        if self.json_error is not None:
            raise self.json_error
        return self.json_payload  # type: ignore[return-value]

    async def generate_text(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        self.text_prompts.append(prompt)
        if self.text_error is not None:
            raise self.text_error
        return self.text


@dataclass
class InMemoryStore(KeyValueStore):
    """In-memory key-value store for tests."""

    data: dict[str, object] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)
    error: Exception | None = None

    def get(self, key: str, default: object = None) -> object:
        return self.data.get(key, default)

    def set(self, key: str, value: object) -> None:
        if self.error is not None:
            raise self.error
        self.writes.append(key)
        self.data[key] = value


@dataclass
class FakeCameraStream(CameraStream):
    """Camera stream with a single track."""

    frame: object = "frame"
    read_error: Exception | None = None
    tracks: int = 1
    stop_calls: int = 0

    @property
    def active(self) -> bool:
        return self.tracks > 0

    @property
    def active_tracks(self) -> int:
        return self.tracks

    async def read_frame(self) -> object:
        if self.read_error is not None:
            raise self.read_error
        return self.frame

    def stop(self) -> None:
        self.stop_calls += 1
        self.tracks = 0


@dataclass
class FakeCamera(CameraProvider):
    """Camera provider handing out fake streams."""

    error: Exception | None = None
    read_error: Exception | None = None
    streams: list[FakeCameraStream] = field(default_factory=list)
    facings: list[str] = field(default_factory=list)

    async def open(self, facing: str = "environment") -> FakeCameraStream:
        self.facings.append(facing)
        if self.error is not None:
            raise self.error
        stream = FakeCameraStream(read_error=self.read_error)
        self.streams.append(stream)
        return stream

    @property
    def active_tracks(self) -> int:
        return sum(stream.active_tracks for stream in self.streams)


@dataclass
class FakeBarcodeDetector(BarcodeDetector):
    """Detector returning queued results, then nothing."""

    results: list[list[BarcodeDetection]] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    gate: asyncio.Event | None = None
    calls: int = 0

    async def detect(self, frame: object) -> list[BarcodeDetection]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.errors:
            raise self.errors.pop(0)
        if self.results:
            return self.results.pop(0)
        return []


def detection(value: str = "0123456789012") -> BarcodeDetection:
    return BarcodeDetection(raw_value=value, format=BarcodeFormat.EAN_13)


async def wait_until(predicate: Callable[[], bool], attempts: int = 500) -> None:
    """Yield to the event loop until the predicate holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


def make_scanner(
    camera: FakeCamera | None = None, detector: FakeBarcodeDetector | None = None
) -> BarcodeScanController:
    resolved_detector = detector or FakeBarcodeDetector()
    return BarcodeScanController(
        camera=camera or FakeCamera(),
        detector_factory=lambda: resolved_detector,
        poll_interval_seconds=0,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        data_file=str(tmp_path / "data.json"),
        timezone="UTC",
    )


@pytest.fixture
def generative_client() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def detector() -> FakeBarcodeDetector:
    return FakeBarcodeDetector()


@pytest.fixture
def container(
    settings: Settings,
    generative_client: FakeGenerativeClient,
    store: InMemoryStore,
    camera: FakeCamera,
    detector: FakeBarcodeDetector,
) -> AppContainer:
    targets = compute_energy_targets(
        UserProfile(weight_lbs=175, height_in=68, age=39, sex="male")
    )
    nutrition_service = NutritionLookupService(
        client=generative_client, model=settings.openai_model
    )
    motivation_service = MotivationService(
        client=generative_client, model=settings.openai_model
    )
    achievement_service = AchievementService(
        motivation_service=motivation_service, tdee=targets.tdee, timezone=UTC
    )
    tracker_service = TrackerService(
        store=store,
        achievement_service=achievement_service,
        targets=targets,
        timezone=UTC,
    )
    food_search = FoodSearchSession(
        nutrition_service=nutrition_service,
        scanner=make_scanner(camera, detector),
    )

    async def close_resources() -> None:
        await food_search.close()

    return AppContainer(
        settings=settings,
        targets=targets,
        nutrition_service=nutrition_service,
        motivation_service=motivation_service,
        achievement_service=achievement_service,
        tracker_service=tracker_service,
        food_search=food_search,
        close_resources=close_resources,
    )

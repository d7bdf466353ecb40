"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from calorie_companion.api.models import ExerciseRequest, SearchRequest, WeightRequest
from calorie_companion.app_logging import configure_logging
from calorie_companion.containers import AppContainer
from calorie_companion.domain.nutrition import MacroTotals, NutritionQueryResult
from calorie_companion.services.food_search import FoodSearchSession
from calorie_companion.services.tracker import (
    exercise_to_record,
    meal_to_record,
    weight_entry_to_record,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.tracker_service.refresh_motivation()
        except Exception:
            logger.exception("Failed to evaluate achievements on startup")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/dashboard")
    async def dashboard(request: Request) -> dict[str, object]:
        """Return today's balance, logs and the motivational message."""
        state_container: AppContainer = request.app.state.container
        tracker = state_container.tracker_service
        summary = tracker.summary()
        return {
            "day": summary.day.isoformat(),
            "daily_goal": summary.daily_goal,
            "remaining": summary.remaining,
            "consumed": summary.consumed,
            "burned": summary.burned,
            "meals": [meal_to_record(meal) for meal in summary.meals],
            "exercises": [exercise_to_record(item) for item in summary.exercises],
            "motivation": tracker.motivation,
        }

    @app.get("/meals/today")
    async def todays_meals(request: Request) -> dict[str, object]:
        """Return today's meals with macro totals."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.tracker_service.summary()
        return {
            "meals": [meal_to_record(meal) for meal in summary.meals],
            "totals": _format_totals(summary.macros),
        }

    @app.post("/meals/search")
    async def search_meal(body: SearchRequest, request: Request) -> dict[str, object]:
        """Look up nutrition facts for a free-text query."""
        state_container: AppContainer = request.app.state.container
        session = state_container.food_search
        result = await session.search(body.query)
        if result is None:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=session.error or "Lookup failed.",
            )
        return {"query": session.query, "result": _format_result(result)}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def add_meal(request: Request) -> dict[str, object]:
        """Add the pending lookup result to the log."""
        state_container: AppContainer = request.app.state.container
        session = state_container.food_search
        result = session.result
        if result is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Search for a food before adding it to the log.",
            )
        meal = await state_container.tracker_service.add_meal(result)
        session.take_result()
        return meal_to_record(meal)

    @app.get("/scanner")
    async def scanner_status(request: Request) -> dict[str, object]:
        """Return the scan flow state and any pending result."""
        state_container: AppContainer = request.app.state.container
        return _format_session(state_container.food_search)

    @app.post("/scanner/start")
    async def start_scanner(request: Request) -> dict[str, object]:
        """Open the camera and start looking for a barcode."""
        state_container: AppContainer = request.app.state.container
        session = state_container.food_search
        if session.scanner.running:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Scanner is already running.",
            )
        if not await session.start_scan():
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=session.error,
            )
        return _format_session(session)

    @app.post("/scanner/stop")
    async def stop_scanner(request: Request) -> dict[str, object]:
        """Cancel scanning and release the camera."""
        state_container: AppContainer = request.app.state.container
        state_container.food_search.stop_scan()
        return _format_session(state_container.food_search)

    @app.get("/exercises/today")
    async def todays_exercises(request: Request) -> dict[str, object]:
        """Return today's exercises and the total burn."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.tracker_service.summary()
        return {
            "exercises": [exercise_to_record(item) for item in summary.exercises],
            "total_burned": summary.burned,
        }

    @app.post("/exercises", status_code=status.HTTP_201_CREATED)
    async def add_exercise(
        body: ExerciseRequest, request: Request
    ) -> dict[str, object]:
        """Append an exercise to the log."""
        state_container: AppContainer = request.app.state.container
        try:
            exercise = state_container.tracker_service.add_exercise(
                body.name, body.calories_burned
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return exercise_to_record(exercise)

    @app.get("/weight")
    async def weight_history(request: Request) -> dict[str, object]:
        """Return every weight entry in insertion order."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.tracker_service.state.weight_entries
        return {"entries": [weight_entry_to_record(entry) for entry in entries]}

    @app.post("/weight", status_code=status.HTTP_201_CREATED)
    async def add_weight(body: WeightRequest, request: Request) -> dict[str, object]:
        """Append a weight entry to the log."""
        state_container: AppContainer = request.app.state.container
        entry = await state_container.tracker_service.add_weight(body.weight)
        return weight_entry_to_record(entry)

    @app.get("/motivation")
    async def motivation(request: Request) -> dict[str, str]:
        """Return the current motivational message."""
        state_container: AppContainer = request.app.state.container
        return {"message": state_container.tracker_service.motivation}

    @app.post("/motivation/refresh")
    async def refresh_motivation(request: Request) -> dict[str, str]:
        """Re-evaluate achievements and return the new message."""
        state_container: AppContainer = request.app.state.container
        message = await state_container.tracker_service.refresh_motivation()
        return {"message": message}

    return app


def _format_result(result: NutritionQueryResult) -> dict[str, object]:
    return result.model_dump()


def _format_totals(totals: MacroTotals) -> dict[str, float]:
    return {
        "calories": totals.calories,
        "carbohydrates_g": totals.carbohydrates_g,
        "fiber_g": totals.fiber_g,
        "fat_g": totals.fat_g,
    }


def _format_session(session: FoodSearchSession) -> dict[str, object]:
    return {
        "state": session.scanner.state.value,
        "active_tracks": session.scanner.active_tracks,
        "query": session.query,
        "loading": session.loading,
        "error": session.error,
        "result": _format_result(session.result) if session.result else None,
    }

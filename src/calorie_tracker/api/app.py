"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from calorie_tracker.api.models import (
    AddFoodRequest,
    EstimateFoodRequest,
    ManualFoodRequest,
    ProfileUpdate,
    QuantityChange,
    SaveDayRequest,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.chart import TrendChart
from calorie_tracker.domain.errors import (
    EmptyIntakeError,
    ResolutionError,
    ResolutionKind,
)
from calorie_tracker.services.projection import EnergySummary
from calorie_tracker.services.storage import (
    encode_food_entry,
    encode_library_item,
    encode_profile,
    encode_record,
)
from calorie_tracker.services.tracker import TrackerService

# Starlette renamed its 422 constant between releases.
HTTP_422_UNPROCESSABLE = 422

_RESOLUTION_STATUS = {
    ResolutionKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ResolutionKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ResolutionKind.MALFORMED: status.HTTP_502_BAD_GATEWAY,
    ResolutionKind.UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the profile with its BMR and TDEE."""
        return _format_profile(_tracker(request))

    @app.put("/profile")
    async def update_profile(
        payload: ProfileUpdate, request: Request
    ) -> dict[str, object]:
        """Update profile fields and return the recomputed targets."""
        tracker = _tracker(request)
        tracker.biometrics.update(**payload.model_dump(exclude_none=True))
        return _format_profile(tracker)

    @app.get("/meals")
    async def get_meals(request: Request) -> dict[str, object]:
        """Return the ledger grouped by meal with subtotals."""
        return _format_ledger(_tracker(request))

    @app.post("/meals/entries", status_code=status.HTTP_201_CREATED)
    async def add_entry(payload: AddFoodRequest, request: Request) -> dict[str, object]:
        """Log a library food."""
        entry = _tracker(request).add_food(payload.name, payload.category)
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown food: {payload.name}",
            )
        return encode_food_entry(entry)

    @app.post("/meals/estimate", status_code=status.HTTP_201_CREATED)
    async def estimate_entry(
        payload: EstimateFoodRequest, request: Request
    ) -> dict[str, object]:
        """Estimate a food with the AI service and log it."""
        try:
            entry = await _tracker(request).estimate_and_add(
                payload.description, payload.category
            )
        except ResolutionError as exc:
            logger.warning(
                "Food estimate rejected: description=%s kind=%s",
                payload.description,
                exc.kind,
            )
            raise HTTPException(
                status_code=_RESOLUTION_STATUS[exc.kind],
                detail={"kind": exc.kind.value, "message": exc.user_message},
            ) from exc
        return encode_food_entry(entry)

    @app.patch("/meals/entries/{entry_id}")
    async def change_quantity(
        entry_id: str, payload: QuantityChange, request: Request
    ) -> dict[str, object]:
        """Adjust a logged food's quantity."""
        tracker = _tracker(request)
        tracker.ledger.adjust_quantity(entry_id, payload.delta)
        return _format_ledger(tracker)

    @app.delete("/meals/entries/{entry_id}")
    async def remove_entry(entry_id: str, request: Request) -> dict[str, object]:
        """Remove a logged food. Unknown ids are ignored."""
        tracker = _tracker(request)
        tracker.ledger.remove(entry_id)
        return _format_ledger(tracker)

    @app.delete("/meals")
    async def clear_meals(request: Request) -> dict[str, object]:
        """Start a new, empty ledger."""
        tracker = _tracker(request)
        tracker.ledger.clear()
        return _format_ledger(tracker)

    @app.get("/library")
    async def search_library(request: Request, query: str = "") -> dict[str, object]:
        """Return library foods whose name contains the query."""
        items = _tracker(request).library.suggest(query)
        return {"items": [encode_library_item(item) for item in items]}

    @app.post("/library", status_code=status.HTTP_201_CREATED)
    async def add_library_food(
        payload: ManualFoodRequest, request: Request
    ) -> dict[str, object]:
        """Add a user-entered food to the library."""
        try:
            item = _tracker(request).library.add_manual(
                payload.name, payload.calories_per_unit, payload.unit
            )
        except ResolutionError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return encode_library_item(item)

    @app.get("/summary")
    async def get_summary(request: Request) -> dict[str, object]:
        """Return today's energy balance and weekly projection."""
        return _format_summary(_tracker(request).summary())

    @app.get("/records")
    async def list_records(request: Request) -> dict[str, object]:
        """Return saved days, most recent first."""
        records = _tracker(request).records.all()
        return {"records": [encode_record(record) for record in records]}

    @app.post("/records", status_code=status.HTTP_201_CREATED)
    async def save_day(payload: SaveDayRequest, request: Request) -> dict[str, object]:
        """Save the current ledger as a day's record."""
        try:
            record = _tracker(request).save_day(
                payload.date, confirm_empty=payload.confirm_empty
            )
        except EmptyIntakeError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except ValueError as exc:
            raise _invalid_date(payload.date) from exc
        return encode_record(record)

    @app.delete("/records/{day}")
    async def delete_record(
        day: str, request: Request, confirm: bool = False
    ) -> dict[str, str]:
        """Delete a saved day once the user has confirmed."""
        _require_confirmation(confirm)
        try:
            date_key = _tracker(request).delete_day(day)
        except ValueError as exc:
            raise _invalid_date(day) from exc
        return {"status": "deleted", "date": date_key}

    @app.delete("/records")
    async def clear_records(request: Request, confirm: bool = False) -> dict[str, str]:
        """Delete every saved day once the user has confirmed."""
        _require_confirmation(confirm)
        _tracker(request).records.clear()
        return {"status": "cleared"}

    @app.get("/chart")
    async def get_chart(
        request: Request, window: int | None = None
    ) -> dict[str, object]:
        """Return trend chart coordinates for recent saved days."""
        chart = _tracker(request).chart(window)
        if chart is None:
            return {"status": "no_data"}
        return _format_chart(chart)

    return app


def _tracker(request: Request) -> TrackerService:
    container: AppContainer = request.app.state.container
    return container.tracker


def _require_confirmation(confirm: bool) -> None:
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Deletion requires confirm=true",
        )


def _invalid_date(day: str | None) -> HTTPException:
    return HTTPException(
        status_code=HTTP_422_UNPROCESSABLE,
        detail=f"Invalid date: {day}",
    )


def _format_profile(tracker: TrackerService) -> dict[str, object]:
    return {
        "profile": encode_profile(tracker.biometrics.profile),
        "bmr": round(tracker.biometrics.bmr, 2),
        "tdee": tracker.biometrics.tdee,
    }


def _format_ledger(tracker: TrackerService) -> dict[str, object]:
    ledger = tracker.ledger
    subtotals = ledger.category_calories()
    return {
        "meals": {
            category.value: {
                "entries": [encode_food_entry(entry) for entry in entries],
                "calories": subtotals[category],
            }
            for category, entries in ledger.by_category().items()
        },
        "total_calories": ledger.total_calories(),
    }


def _format_summary(summary: EnergySummary) -> dict[str, object]:
    return {
        "intake": summary.intake,
        "tdee": summary.tdee,
        "daily_balance": summary.daily_balance,
        "direction": summary.direction,
        "percent_of_target": round(summary.percent_of_target, 1),
        "projection_days": summary.projection_days,
        "projected_change_kg": round(summary.projected_change_kg, 3),
        "projected_weight_kg": (
            round(summary.projected_weight_kg, 2)
            if summary.projected_weight_kg is not None
            else None
        ),
    }


def _format_chart(chart: TrendChart) -> dict[str, object]:
    return {
        "status": "ok",
        "width": chart.width,
        "height": chart.height,
        "max_value": chart.max_value,
        "tdee_y": chart.tdee_y,
        "points": [
            {"x": point.x, "y": point.y, "date": point.date, "calories": point.calories}
            for point in chart.points
        ],
        "line_path": chart.line_path(),
        "area_path": chart.area_path(),
    }


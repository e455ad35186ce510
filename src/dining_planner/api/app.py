"""FastAPI application factory."""

import datetime as dt
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dining_planner.api.models import (
    LLMSuggestRequest,
    SuggestRequest,
    SwapOptionsRequest,
)
from dining_planner.app_logging import configure_logging
from dining_planner.containers import AppContainer
from dining_planner.domain.errors import (
    LocationsClosedError,
    PlanningUnavailableError,
    PlanParseError,
    UpstreamUnavailableError,
)
from dining_planner.domain.menu import DailyMenu
from dining_planner.domain.preferences import UserPreferences
from dining_planner.services.availability import check_location_availability
from dining_planner.services.suggestions import generate_daily_suggestion
from dining_planner.services.swaps import get_swap_alternatives


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def bad_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "bad_request",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(UpstreamUnavailableError)
    async def upstream_unavailable(
        request: Request, exc: UpstreamUnavailableError
    ) -> JSONResponse:
        logger.error("Menu upstream unavailable: %s", exc.__cause__ or exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": "upstream_unavailable",
                "message": "Menu data is temporarily unavailable. Try again later.",
                "date": exc.menu_date,
            },
        )

    @app.exception_handler(LocationsClosedError)
    async def locations_closed(
        request: Request, exc: LocationsClosedError
    ) -> JSONResponse:
        availability = exc.availability
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "error": "locations_closed",
                "message": (
                    "Some of your selected locations have no service that day. "
                    "Choose different locations in settings."
                ),
                "closed_locations": [
                    asdict(slot) for slot in availability.closed_locations
                ],
                "available_locations": availability.available_locations,
            },
        )

    @app.exception_handler(PlanParseError)
    async def planning_failed(request: Request, exc: PlanParseError) -> JSONResponse:
        logger.error("Planning failed: %s; raw=%r", exc, exc.raw_response)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "planning_failed", "message": str(exc)},
        )

    @app.exception_handler(PlanningUnavailableError)
    async def planning_unavailable(
        request: Request, exc: PlanningUnavailableError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "planning_unavailable", "message": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/menu")
    async def menu(request: Request, date: dt.date | None = None) -> dict[str, object]:
        """Return the scraped menu for a date, or for today."""
        daily_menu = await _load_menu(request.app.state.container, date)
        return asdict(daily_menu)

    @app.post("/suggest")
    async def suggest(body: SuggestRequest, request: Request) -> dict[str, object]:
        """Return a deterministic daily plan."""
        daily_menu = await _load_menu(request.app.state.container, body.date)
        _require_open_locations(daily_menu, body.preferences)
        return asdict(generate_daily_suggestion(daily_menu, body.preferences))

    @app.post("/suggest-llm")
    async def suggest_llm(
        body: LLMSuggestRequest, request: Request
    ) -> dict[str, object]:
        """Return an LLM-generated daily plan."""
        state_container: AppContainer = request.app.state.container
        planner = state_container.planner_service
        if planner is None:
            raise PlanningUnavailableError("LLM planning is not configured")
        daily_menu = await _load_menu(state_container, body.date)
        _require_open_locations(daily_menu, body.preferences)
        try:
            suggestion = await planner.generate_plan(
                daily_menu,
                body.preferences,
                user_feedback=body.user_feedback,
                approach=body.approach,
            )
        except PlanParseError:
            if not body.fallback:
                raise
            logger.warning("LLM plan unusable, using deterministic plan")
            return {
                **asdict(generate_daily_suggestion(daily_menu, body.preferences)),
                "fallback": True,
            }
        return {**asdict(suggestion), "fallback": False}

    @app.post("/swap-options")
    async def swap_options(
        body: SwapOptionsRequest, request: Request
    ) -> dict[str, object]:
        """Return alternatives for a planned item."""
        daily_menu = await _load_menu(request.app.state.container, body.date)
        alternatives = get_swap_alternatives(
            daily_menu,
            body.meal_type,
            body.location_id,
            body.current_item_id,
            body.preferences,
        )
        return {"alternatives": [asdict(item) for item in alternatives]}

    return app


async def _load_menu(container: AppContainer, menu_date: dt.date | None) -> DailyMenu:
    if menu_date is None:
        return await container.scraper_service.scrape_menu_for_today()
    return await container.scraper_service.scrape_menu_for_date(menu_date)


def _require_open_locations(menu: DailyMenu, prefs: UserPreferences) -> None:
    availability = check_location_availability(menu, prefs)
    if not availability.available:
        raise LocationsClosedError(availability)

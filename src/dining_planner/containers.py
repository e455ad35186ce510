"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from dining_planner.adapters.menu_report_client import HttpxMenuReportClient
from dining_planner.adapters.openai_planner_client import OpenAIPlannerClient
from dining_planner.config import Settings
from dining_planner.services.planner import PlannerService
from dining_planner.services.scraper import MenuScraperService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    scraper_service: MenuScraperService
    planner_service: PlannerService | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    menu_client = HttpxMenuReportClient.create(
        base_url=resolved_settings.menu_base_url,
        user_agent=resolved_settings.menu_user_agent,
        timeout_seconds=resolved_settings.menu_request_timeout_seconds,
    )
    scraper_service = MenuScraperService(
        client=menu_client,
        max_concurrency=resolved_settings.menu_max_concurrency,
        slice_fallback_enabled=resolved_settings.menu_slice_fallback_enabled,
        timezone_name=resolved_settings.menu_timezone,
    )
    planner_service = None
    if resolved_settings.openai_api_key:
        planner_service = PlannerService(
            client=OpenAIPlannerClient.create(resolved_settings.openai_api_key),
            model=resolved_settings.openai_model,
            max_attempts=resolved_settings.planner_max_attempts,
        )

    async def close_resources() -> None:
        await menu_client.close()

    return AppContainer(
        settings=resolved_settings,
        scraper_service=scraper_service,
        planner_service=planner_service,
        close_resources=close_resources,
    )

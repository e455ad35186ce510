"""Menu scraping service that assembles a DailyMenu from report pages."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import httpx

from dining_planner.adapters.menu_report_client import MenuReportClient
from dining_planner.domain.errors import UpstreamUnavailableError
from dining_planner.domain.menu import DailyMenu, LocationMenu, MenuItem
from dining_planner.services.report_index import MenuReportInfo, extract_menu_reports
from dining_planner.services.report_parser import parse_menu_report

_logger = logging.getLogger(__name__)


@dataclass
class MenuScraperService:
    """Scrapes every dining hall's reports for a date."""

    client: MenuReportClient
    max_concurrency: int = 4
    slice_fallback_enabled: bool = True
    timezone_name: str = "America/Toronto"

    async def scrape_menu_for_date(self, menu_date: date) -> DailyMenu:
        """Scrape all locations for an explicit date."""
        return await self._scrape(menu_date, index_date=menu_date)

    async def scrape_menu_for_today(self) -> DailyMenu:
        """Scrape all locations using the site's /Today page."""
        today = datetime.now(tz=ZoneInfo(self.timezone_name)).date()
        return await self._scrape(today, index_date=None)

    async def scrape_menus_for_range(
        self, days: int, start: date | None = None
    ) -> list[DailyMenu]:
        """Scrape consecutive days, skipping days whose index is unavailable."""
        first = start or datetime.now(tz=ZoneInfo(self.timezone_name)).date()
        menus: list[DailyMenu] = []
        for offset in range(days):
            menu_date = first + timedelta(days=offset)
            try:
                menus.append(await self.scrape_menu_for_date(menu_date))
            except UpstreamUnavailableError:
                _logger.warning("Skipping %s: menu index unavailable", menu_date)
        return menus

    async def _scrape(self, menu_date: date, index_date: date | None) -> DailyMenu:
        date_label = menu_date.isoformat()
        try:
            index_html = await self.client.fetch_index(index_date)
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(date_label) from exc

        reports = extract_menu_reports(
            index_html, slice_fallback=self.slice_fallback_enabled
        )
        semaphore = asyncio.Semaphore(max(1, self.max_concurrency))

        async def fetch(report: MenuReportInfo) -> list[MenuItem] | None:
            async with semaphore:
                return await self._fetch_report_items(report, date_label)

        results = await asyncio.gather(*(fetch(report) for report in reports))

        names: dict[str, str] = {}
        meals: dict[str, dict[str, tuple[MenuItem, ...]]] = {}
        for report, items in zip(reports, results, strict=True):
            if items is None:
                continue
            names.setdefault(report.location_id, report.location)
            meals.setdefault(report.location_id, {})[report.meal] = tuple(items)

        _logger.info(
            "Scraped %s: %s locations from %s reports",
            date_label,
            len(meals),
            len(reports),
        )
        return DailyMenu(
            date=date_label,
            locations={
                location_id: LocationMenu(name=names[location_id], meals=location_meals)
                for location_id, location_meals in meals.items()
            },
        )

    async def _fetch_report_items(
        self, report: MenuReportInfo, date_label: str
    ) -> list[MenuItem] | None:
        """Fetch and parse one report, returning None when it fails."""
        try:
            html = await self.client.fetch_report(report.id)
            return parse_menu_report(html, report.location, report.meal, date_label)
        except Exception:
            _logger.exception(
                "Failed to fetch report %s (%s %s)",
                report.id,
                report.location_id,
                report.meal,
            )
            return None

"""HTTP client for the dining-hall ServiceMenuReport site."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

import httpx


class MenuReportClient(Protocol):
    """Interface for fetching raw menu HTML."""

    async def fetch_index(self, menu_date: date | None = None) -> str:
        """Return the report index page for a date, or for today."""

    async def fetch_report(self, report_id: str) -> str:
        """Return the HTML of one menu report."""


@dataclass
class HttpxMenuReportClient(MenuReportClient):
    """HTTPX-backed menu report client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 15
    ) -> "HttpxMenuReportClient":
        """Create a menu report client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout_seconds=timeout_seconds,
        )

    async def fetch_index(self, menu_date: date | None = None) -> str:
        """Fetch the index page via /Today or /GetDate?dt=YYYYMMDD."""
        if menu_date is None:
            response = await self.http_client.get(
                f"{self.base_url}/Today", timeout=self.timeout_seconds
            )
        else:
            response = await self.http_client.get(
                f"{self.base_url}/GetDate",
                params={"dt": menu_date.strftime("%Y%m%d")},
                timeout=self.timeout_seconds,
            )
        response.raise_for_status()
        return response.text

    async def fetch_report(self, report_id: str) -> str:
        """Fetch one report with an empty form POST."""
        response = await self.http_client.post(
            f"{self.base_url}/GetReport/{report_id}",
            content=b"",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

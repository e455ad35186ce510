"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import httpx
import pytest

from dining_planner.adapters.menu_report_client import MenuReportClient
from dining_planner.config import Settings
from dining_planner.containers import AppContainer
from dining_planner.domain.menu import DailyMenu, LocationMenu, Meal, MenuItem
from dining_planner.domain.preferences import UserPreferences
from dining_planner.services.planner import PlannerClient, PlannerService
from dining_planner.services.scraper import MenuScraperService

FIXTURES = Path(__file__).parent / "fixtures"

MENU_DATE = "2025-12-22"


def load_fixture(name: str) -> str:
    """Read an HTML fixture."""
    return (FIXTURES / name).read_text(encoding="utf-8")


def make_item(  # noqa: PLR0913
    item_id: str,
    name: str,
    category: str,
    meal: Meal,
    calories: float,
    protein: float,
    carbs: float = 0.0,
    fat: float = 0.0,
    *,
    vegetarian: bool = False,
    vegan: bool = False,
    halal: bool = False,
    serving_size: str = "100g",
    location: str = "CampusOne",
) -> MenuItem:
    """Build a menu item with explicit flags."""
    return MenuItem(
        id=item_id,
        name=name,
        category=category,
        location=location,
        meal=meal,
        date=MENU_DATE,
        serving_size=serving_size,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=2,
        sugar=5,
        sodium=200,
        is_vegetarian=vegetarian,
        is_vegan=vegan,
        is_halal=halal,
    )


def build_mock_menu() -> DailyMenu:
    """A single-location menu covering every dietary flag combination."""
    breakfast = (
        make_item("b1", "Scrambled Eggs", "Breakfast Entree", "breakfast", 150, 12, 2, 10, vegetarian=True),
        make_item("b2", "Turkey Bacon", "Breakfast Entree", "breakfast", 100, 8, 1, 7),
        make_item("b3", "Oatmeal", "Breakfast Entree", "breakfast", 150, 5, 27, 3, vegetarian=True, vegan=True),
        make_item("b4", "Greek Yogurt Parfait", "Breakfast Entree", "breakfast", 200, 15, 25, 5, vegetarian=True),
        make_item("b5", "Halal Chicken Sausage", "Breakfast Entree", "breakfast", 180, 14, 3, 12, halal=True),
        make_item("b6", "Pork Sausage Links", "Breakfast Entree", "breakfast", 200, 10, 2, 16),
    )  # fmt: skip
    lunch = (
        make_item("l1", "Grilled Chicken Breast", "Grill", "lunch", 200, 35, 0, 5, halal=True),
        make_item("l2", "Beef Burger", "Grill", "lunch", 350, 25, 30, 18),
        make_item("l3", "Veggie Bowl", "Bowls", "lunch", 300, 12, 45, 8, vegetarian=True, vegan=True),
        make_item("l4", "Salmon Fillet", "Grill", "lunch", 250, 30, 0, 14),
        make_item("l5", "Tofu Stir Fry", "Bowls", "lunch", 280, 18, 30, 12, vegetarian=True, vegan=True),
        make_item("l6", "Caesar Salad", "Salad Bar", "lunch", 150, 5, 10, 10, vegetarian=True),
        make_item("l7", "Cottage Cheese Cup", "Sides and More", "lunch", 120, 14, 5, 5, vegetarian=True),
    )  # fmt: skip
    dinner = (
        make_item("d1", "Grilled Halal Chicken Thigh", "Dinner Entree", "dinner", 250, 28, 2, 14, halal=True),
        make_item("d2", "Lamb Kebab", "Dinner Entree", "dinner", 300, 25, 5, 20, halal=True),
        make_item("d3", "Vegetarian Lasagna", "Dinner Entree", "dinner", 400, 18, 45, 15, vegetarian=True),
        make_item("d4", "Shrimp Scampi", "Dinner Entree", "dinner", 350, 28, 30, 15),
        make_item("d5", "Steamed Broccoli", "Sides and More", "dinner", 50, 4, 8, 1, vegetarian=True, vegan=True),
        make_item("d6", "Brown Rice", "Sides and More", "dinner", 150, 4, 32, 1, vegetarian=True, vegan=True),
    )  # fmt: skip
    return DailyMenu(
        date=MENU_DATE,
        locations={
            "campusone": LocationMenu(
                name="CampusOne Dining Hall",
                meals={"breakfast": breakfast, "lunch": lunch, "dinner": dinner},
            )
        },
    )


def make_preferences(**overrides: object) -> UserPreferences:
    """Preferences pointing every meal at the mock location."""
    values: dict[str, object] = {
        "target_calories": 2000,
        "target_protein": 150,
        "target_carbs": 200,
        "target_fat": 70,
        "breakfast_location": "campusone",
        "lunch_location": "campusone",
        "dinner_location": "campusone",
        "onboarding_completed": True,
    }
    values.update(overrides)
    return UserPreferences.model_validate(values)


@dataclass
class FakeMenuReportClient(MenuReportClient):
    """Serves fixture HTML for the index and every report."""

    index_html: str = ""
    reports: dict[str, str] = field(default_factory=dict)
    default_report: str = ""
    failing_report_ids: set[str] = field(default_factory=set)
    index_error: Exception | None = None
    index_dates: list[date | None] = field(default_factory=list)
    report_calls: list[str] = field(default_factory=list)

    async def fetch_index(self, menu_date: date | None = None) -> str:
        self.index_dates.append(menu_date)
        if self.index_error is not None:
            raise self.index_error
        return self.index_html

    async def fetch_report(self, report_id: str) -> str:
        self.report_calls.append(report_id)
        if report_id in self.failing_report_ids:
            request = httpx.Request("POST", f"https://menu.test/GetReport/{report_id}")
            raise httpx.HTTPStatusError(
                "boom", request=request, response=httpx.Response(500, request=request)
            )
        return self.reports.get(report_id, self.default_report)

    async def close(self) -> None:
        return None


@dataclass
class FakePlannerClient(PlannerClient):
    """Planner client that replays canned responses."""

    text_responses: list[str] = field(default_factory=list)
    tool_responses: list[str | None] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    tool_calls: int = 0

    async def complete_text(
        self, *, model: str, system_prompt: str, user_prompt: str
    ) -> str:
        self.prompts.append(user_prompt)
        return self.text_responses.pop(0)

    async def call_tool(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        tool_name: str,
        schema: dict[str, object],
    ) -> str | None:
        self.prompts.append(user_prompt)
        self.tool_calls += 1
        if not self.tool_responses:
            return None
        return self.tool_responses.pop(0)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        menu_base_url="https://menu.test/FSO/ServiceMenuReport",
        openai_api_key="test-key",
        openai_model="gpt-test",
    )


@pytest.fixture
def mock_menu() -> DailyMenu:
    return build_mock_menu()


@pytest.fixture
def menu_client() -> FakeMenuReportClient:
    return FakeMenuReportClient(
        index_html=load_fixture("index_nested.html"),
        default_report=load_fixture("report_lunch.html"),
    )


@pytest.fixture
def planner_client() -> FakePlannerClient:
    return FakePlannerClient()


@pytest.fixture
def container(
    settings: Settings,
    menu_client: FakeMenuReportClient,
    planner_client: FakePlannerClient,
) -> AppContainer:
    async def close_resources() -> None:
        await menu_client.close()

    return AppContainer(
        settings=settings,
        scraper_service=MenuScraperService(client=menu_client),
        planner_service=PlannerService(client=planner_client, model="gpt-test"),
        close_resources=close_resources,
    )

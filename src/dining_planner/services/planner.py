"""LLM-backed meal planning with strict post-validation."""

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from pydantic import ValidationError

from dining_planner.domain.errors import PlanParseError
from dining_planner.domain.menu import MEALS, DailyMenu, Meal, MenuItem
from dining_planner.domain.planner import PlannedDay, PlannedMeal
from dining_planner.domain.plans import DailySuggestion, MealSuggestion, SelectedItem
from dining_planner.domain.preferences import UserPreferences
from dining_planner.services.filters import filter_items, is_item_allowed
from dining_planner.services.normalize import round_half_up
from dining_planner.services.servings import format_serving_size
from dining_planner.services.suggestions import (
    MEAL_DISTRIBUTION,
    calculate_totals,
    sum_daily_totals,
)

_logger = logging.getLogger(__name__)

MIN_SERVINGS = 1
MAX_SERVINGS = 5
TOOL_NAME = "submit_meal_plan"

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "meals": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "meal": {"type": "string", "enum": list(MEALS)},
                    "items": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "item_id": {"type": "string"},
                                "servings": {"type": "number"},
                            },
                            "required": ["item_id", "servings"],
                            "additionalProperties": False,
                        },
                    },
                },
                "required": ["meal", "items"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["meals"],
    "additionalProperties": False,
}

SYSTEM_PROMPT = """You are a meal planning assistant for university students. \
Select items from the menu to create a balanced meal plan.

RULES:
1. ONLY use exact item IDs from the menu - never invent items
2. Select 1-3 items per meal with servings 1-5
3. Prioritize hitting protein targets
4. STRICTLY respect the user's dietary restrictions based on item names. \
For vegetarian users, avoid meat/fish/poultry. For vegan users, avoid all animal \
products. For halal users, avoid pork and non-halal meat."""

TEXT_FORMAT_INSTRUCTIONS = """
Return ONLY valid JSON matching this schema:
{
  "meals": [
    { "meal": "breakfast", "items": [{ "item_id": "exact-id", "servings": 1 }] },
    { "meal": "lunch", "items": [{ "item_id": "exact-id", "servings": 2 }] },
    { "meal": "dinner", "items": [{ "item_id": "exact-id", "servings": 1 }] }
  ]
}"""


class PlanningApproach(StrEnum):
    """Prompting strategy used to obtain a plan."""

    TEXT = "text"
    TOOL = "tool"


class PlannerClient(Protocol):
    """Interface for the external text-generation service."""

    async def complete_text(
        self, *, model: str, system_prompt: str, user_prompt: str
    ) -> str:
        """Return the model's free-text answer."""

    async def call_tool(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        tool_name: str,
        schema: dict[str, object],
    ) -> str | None:
        """Force a function call and return its raw JSON arguments, if any."""


@dataclass
class PlannerService:
    """Builds prompts, calls the planner client and validates its plan."""

    client: PlannerClient
    model: str
    max_attempts: int = 5

    async def generate_plan(
        self,
        menu: DailyMenu,
        prefs: UserPreferences,
        user_feedback: str | None = None,
        approach: PlanningApproach = PlanningApproach.TEXT,
    ) -> DailySuggestion:
        """Ask the model for a plan and keep only valid, allowed selections."""
        use_tool = approach == PlanningApproach.TOOL
        catalog = build_catalog(menu, prefs, prefilter=use_tool)
        user_prompt = build_user_prompt(menu, prefs, catalog, user_feedback)
        if use_tool:
            plan = await self._plan_with_tool(user_prompt)
        else:
            plan = await self._plan_with_text(user_prompt)
        return convert_plan_to_suggestion(plan, menu, prefs, catalog)

    async def _plan_with_text(self, user_prompt: str) -> PlannedDay:
        raw = await self.client.complete_text(
            model=self.model,
            system_prompt=SYSTEM_PROMPT + "\n" + TEXT_FORMAT_INSTRUCTIONS,
            user_prompt=user_prompt + "\n\nCreate a meal plan. Return ONLY JSON.",
        )
        return parse_plan_text(raw)

    async def _plan_with_tool(self, user_prompt: str) -> PlannedDay:
        last_raw: str | None = None
        for attempt in range(1, self.max_attempts + 1):
            raw = await self.client.call_tool(
                model=self.model,
                system_prompt=SYSTEM_PROMPT,
                user_prompt=user_prompt
                + f"\n\nCreate a meal plan and submit it with {TOOL_NAME}.",
                tool_name=TOOL_NAME,
                schema=PLAN_SCHEMA,
            )
            if raw is None:
                _logger.warning(
                    "Planner returned no tool call (attempt %s/%s)",
                    attempt,
                    self.max_attempts,
                )
                continue
            last_raw = raw
            try:
                return PlannedDay.model_validate_json(raw)
            except ValidationError as exc:
                _logger.warning(
                    "Planner tool payload invalid (attempt %s/%s): %s",
                    attempt,
                    self.max_attempts,
                    exc.error_count(),
                )
        raise PlanParseError(
            f"No valid {TOOL_NAME} payload after {self.max_attempts} attempts",
            raw_response=last_raw,
        )


def parse_plan_text(raw: str) -> PlannedDay:
    """Extract and validate the JSON plan embedded in free text."""
    if not raw:
        raise PlanParseError("Planner returned an empty response", raw_response=raw)
    match = _JSON_OBJECT.search(raw)
    if match is None:
        _logger.error("No JSON object in planner response")
        raise PlanParseError("No JSON object in planner response", raw_response=raw)
    try:
        return PlannedDay.model_validate_json(match.group(0))
    except ValidationError as exc:
        _logger.error("Planner response failed validation: %s", exc.error_count())
        raise PlanParseError(
            "Planner response does not match the plan schema", raw_response=raw
        ) from exc


def build_catalog(
    menu: DailyMenu, prefs: UserPreferences, *, prefilter: bool
) -> dict[Meal, list[MenuItem]]:
    """Collect the items offered for each meal at its chosen location."""
    catalog: dict[Meal, list[MenuItem]] = {}
    for meal in MEALS:
        items = list(menu.items_for(prefs.location_for(meal), meal))
        catalog[meal] = filter_items(items, prefs) if prefilter else items
    return catalog


def build_user_prompt(
    menu: DailyMenu,
    prefs: UserPreferences,
    catalog: dict[Meal, list[MenuItem]],
    user_feedback: str | None,
) -> str:
    """Render targets, restrictions, the menu and optional feedback."""
    distribution = ", ".join(
        f"{meal} {round_half_up(ratio * 100)}%"
        for meal, ratio in MEAL_DISTRIBUTION.items()
    )
    lines = [
        f"DAILY TARGETS: {prefs.target_calories} cal, {prefs.target_protein}g protein",
        f"MEAL DISTRIBUTION: {distribution}",
    ]
    restrictions = _describe_restrictions(prefs)
    if restrictions:
        lines.append(f"RESTRICTIONS: {restrictions}")
    if prefs.dietary_preferences.strip():
        lines.append(f"USER PREFERENCES: {prefs.dietary_preferences.strip()}")

    lines.append("")
    lines.append("MENU:")
    for meal in MEALS:
        location_id = prefs.location_for(meal)
        location = menu.locations.get(location_id)
        label = location.name if location else location_id
        lines.append(f"## {meal.upper()} at {label}")
        if not catalog[meal]:
            lines.append("No items available.")
            continue
        lines.extend(
            f'- ID: "{item.id}" | {item.name} | {item.calories:g}cal, '
            f"{item.protein:g}g protein per {item.serving_size}"
            for item in catalog[meal]
        )

    if user_feedback and user_feedback.strip():
        lines.append("")
        lines.append(f"USER REQUEST: {user_feedback.strip()}")
    return "\n".join(lines)


def _describe_restrictions(prefs: UserPreferences) -> str:
    parts: list[str] = []
    if prefs.dietary_filter != "all":
        parts.append(prefs.dietary_filter)
    if prefs.is_halal:
        parts.append("halal")
    if prefs.excluded_proteins:
        parts.append("no " + ", ".join(prefs.excluded_proteins))
    if prefs.excluded_allergens:
        parts.append("avoid allergens " + ", ".join(prefs.excluded_allergens))
    if prefs.disliked_item_ids:
        parts.append("never use ids " + ", ".join(prefs.disliked_item_ids))
    return "; ".join(parts)


def clamp_servings(servings: float) -> int:
    """Round servings and bound them to the allowed range."""
    return max(MIN_SERVINGS, min(MAX_SERVINGS, round_half_up(servings)))


def convert_plan_to_suggestion(
    plan: PlannedDay,
    menu: DailyMenu,
    prefs: UserPreferences,
    catalog: dict[Meal, list[MenuItem]],
) -> DailySuggestion:
    """Resolve claimed ids against the offered catalog and re-check constraints.

    Only the first entry for each meal is used. Unknown ids and constraint
    violations are dropped with a warning; a meal left with no items is
    returned empty.
    """
    first_entries: dict[str, PlannedMeal] = {}
    for planned_meal in plan.meals:
        first_entries.setdefault(planned_meal.meal, planned_meal)

    meals: list[MealSuggestion] = []
    for meal in MEALS:
        offered = {item.id: item for item in catalog[meal]}
        planned = first_entries.get(meal)
        selected: list[SelectedItem] = []
        for claimed in planned.items if planned else []:
            item = offered.get(claimed.item_id)
            if item is None:
                _logger.warning(
                    "Planner selected unknown %s item: %s", meal, claimed.item_id
                )
                continue
            if not is_item_allowed(item, prefs, prefs.disliked_item_ids):
                _logger.warning(
                    "Planner selected disallowed %s item: %s", meal, item.id
                )
                continue
            servings = clamp_servings(claimed.servings)
            selected.append(
                SelectedItem(
                    item=item,
                    servings=servings,
                    display_quantity=format_serving_size(item, servings),
                )
            )
        meals.append(
            MealSuggestion(
                meal=meal, items=tuple(selected), totals=calculate_totals(selected)
            )
        )
    return DailySuggestion(
        date=menu.date, meals=tuple(meals), daily_totals=sum_daily_totals(meals)
    )

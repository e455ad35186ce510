"""Deterministic meal selection and daily aggregation.

Each meal gets one main chosen for liked items or protein density and at
most one side at a single serving. The side rule keeps plans simple and is
not a nutritional optimum.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from dining_planner.domain.menu import MEALS, DailyMenu, Meal, MenuItem
from dining_planner.domain.plans import (
    DailySuggestion,
    MacroTotals,
    MealSuggestion,
    SelectedItem,
    Shortfall,
)
from dining_planner.domain.preferences import UserPreferences
from dining_planner.services.filters import filter_items, protein_density
from dining_planner.services.normalize import round_half_up
from dining_planner.services.servings import format_serving_size

MEAL_DISTRIBUTION: dict[Meal, float] = {
    "breakfast": 0.25,
    "lunch": 0.35,
    "dinner": 0.40,
}

MAIN_CATEGORIES = (
    "Bowls",
    "Burritos",
    "Grill",
    "Dinner Entree",
    "Lunch Entree",
    "Breakfast Entree",
    "Pizza and Bake Station",
    "Pan Station",
    "Large Burrito Bowls",
    "Small Burrito Bowls",
    "Express Bowls",
    "Combos",
    "Entree (Selections will vary Daily)",
)

SIDE_CATEGORIES = (
    "Salad Bar",
    "Soup",
    "Sides and More",
    "Breakfast Cold Pantry",
    "Dessert",
)

MAIN_PROTEIN_TARGET_SHARE = 0.8
MAX_MAIN_SERVINGS = 4
FALLBACK_MAIN_MIN_PROTEIN = 5
SHORTFALL_THRESHOLD_G = 20
LARGE_SHORTFALL_THRESHOLD_G = 40


@dataclass(frozen=True)
class MealTargets:
    """Calorie and protein targets for one meal."""

    calories: int
    protein: int


def get_meal_targets(prefs: UserPreferences, meal: Meal) -> MealTargets:
    """Split the daily targets by the fixed meal distribution."""
    ratio = MEAL_DISTRIBUTION[meal]
    return MealTargets(
        calories=round_half_up(prefs.target_calories * ratio),
        protein=round_half_up(prefs.target_protein * ratio),
    )


def is_main_category(category: str) -> bool:
    """Check a category against the entree list in either direction."""
    return _matches_category(category, MAIN_CATEGORIES)


def is_side_category(category: str) -> bool:
    """Check a category against the side list in either direction."""
    return _matches_category(category, SIDE_CATEGORIES)


def _matches_category(category: str, known: Iterable[str]) -> bool:
    lowered = category.strip().lower()
    if not lowered:
        return False
    return any(
        lowered in candidate.lower() or candidate.lower() in lowered
        for candidate in known
    )


def select_meal_items(
    items: Sequence[MenuItem], targets: MealTargets, prefs: UserPreferences
) -> list[SelectedItem]:
    """Pick a main and an optional side for one meal."""
    eligible = filter_items(items, prefs)
    if not eligible:
        return []

    mains = [
        item
        for item in eligible
        if is_main_category(item.category) and item.protein > 0
    ]
    if not mains:
        mains = [item for item in eligible if item.protein > FALLBACK_MAIN_MIN_PROTEIN]
    sides = [item for item in eligible if is_side_category(item.category)]

    main = _choose_main(mains, prefs.liked_item_ids)
    if main is None:
        return []

    servings = main_servings(main, targets)
    selected = [
        SelectedItem(
            item=main,
            servings=servings,
            display_quantity=format_serving_size(main, servings),
        )
    ]
    side = _choose_side(sides)
    if side is not None:
        selected.append(
            SelectedItem(
                item=side, servings=1, display_quantity=format_serving_size(side, 1)
            )
        )
    return selected


def _choose_main(mains: list[MenuItem], liked_item_ids: list[str]) -> MenuItem | None:
    by_id: dict[str, MenuItem] = {}
    for item in mains:
        by_id.setdefault(item.id, item)
    for liked_id in liked_item_ids:
        if liked_id in by_id:
            return by_id[liked_id]
    if not mains:
        return None
    return sorted(mains, key=protein_density, reverse=True)[0]


def _choose_side(sides: list[MenuItem]) -> MenuItem | None:
    for side in sides:
        category = side.category.lower()
        if "salad" in category or "soup" in category:
            return side
    return sides[0] if sides else None


def main_servings(item: MenuItem, targets: MealTargets) -> int:
    """Servings needed to reach most of the meal's protein target, capped at 4."""
    if item.protein <= 0:
        return 1
    needed = math.ceil(targets.protein * MAIN_PROTEIN_TARGET_SHARE / item.protein)
    return min(max(1, needed), MAX_MAIN_SERVINGS)


def calculate_totals(selected: Iterable[SelectedItem]) -> MacroTotals:
    """Sum macro times servings over the selected items."""
    totals = MacroTotals()
    for line in selected:
        totals += MacroTotals(
            calories=line.item.calories * line.servings,
            protein=line.item.protein * line.servings,
            carbs=line.item.carbs * line.servings,
            fat=line.item.fat * line.servings,
        )
    return totals


def generate_meal_suggestion(
    items: Sequence[MenuItem], meal: Meal, prefs: UserPreferences
) -> MealSuggestion:
    """Build the suggestion for one meal from a location's items."""
    selected = select_meal_items(items, get_meal_targets(prefs, meal), prefs)
    return MealSuggestion(
        meal=meal, items=tuple(selected), totals=calculate_totals(selected)
    )


def sum_daily_totals(meals: Iterable[MealSuggestion]) -> MacroTotals:
    """Sum the meal totals of a day."""
    totals = MacroTotals()
    for meal in meals:
        totals += meal.totals
    return totals


def calculate_shortfall(prefs: UserPreferences, totals: MacroTotals) -> Shortfall:
    """Compare the daily totals with the targets."""
    protein = max(0.0, prefs.target_protein - totals.protein)
    calories = max(0.0, prefs.target_calories - totals.calories)
    message = None
    if protein > LARGE_SHORTFALL_THRESHOLD_G:
        message = (
            f"You're {round_half_up(protein)}g protein short. Add a protein shake "
            "and an extra high-protein side, or pick locations with more "
            "protein-rich entrees."
        )
    elif protein > SHORTFALL_THRESHOLD_G:
        message = (
            f"You're {round_half_up(protein)}g protein short. "
            "Consider adding a protein shake or extra eggs."
        )
    return Shortfall(protein=protein, calories=calories, message=message)


def generate_daily_suggestion(
    menu: DailyMenu, prefs: UserPreferences
) -> DailySuggestion:
    """Plan breakfast, lunch and dinner at the user's chosen locations."""
    meals = tuple(
        generate_meal_suggestion(
            menu.items_for(prefs.location_for(meal), meal), meal, prefs
        )
        for meal in MEALS
    )
    totals = sum_daily_totals(meals)
    return DailySuggestion(
        date=menu.date,
        meals=meals,
        daily_totals=totals,
        shortfall=calculate_shortfall(prefs, totals),
    )


def get_high_protein_items(items: Iterable[MenuItem], limit: int = 5) -> list[MenuItem]:
    """Return the densest protein sources, best first."""
    with_protein = [item for item in items if item.protein > 0]
    return sorted(with_protein, key=protein_density, reverse=True)[:limit]

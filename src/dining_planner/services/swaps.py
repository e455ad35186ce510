"""Alternatives for swapping a planned item."""

from dining_planner.domain.menu import DailyMenu, Meal, MenuItem
from dining_planner.domain.preferences import UserPreferences
from dining_planner.services.filters import filter_items, protein_density


def get_swap_alternatives(
    menu: DailyMenu,
    meal: Meal,
    location_id: str,
    current_item_id: str,
    prefs: UserPreferences,
) -> list[MenuItem]:
    """Return eligible replacements sorted by protein density, best first.

    The current item and disliked items are never offered.
    """
    excluded = {current_item_id, *prefs.disliked_item_ids}
    candidates = filter_items(menu.items_for(location_id, meal), prefs, excluded)
    return sorted(candidates, key=protein_density, reverse=True)

"""Domain models for scraped dining-hall menus."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

Meal = Literal["breakfast", "lunch", "dinner"]

MEALS: tuple[Meal, ...] = ("breakfast", "lunch", "dinner")


@dataclass(frozen=True)
class Location:
    """A dining location known to the upstream report site."""

    id: str
    name: str


# Document order of location groups in the upstream navigation tree.
LOCATIONS: dict[str, Location] = {
    location.id: location
    for location in (
        Location(id="campusone", name="CampusOne Dining Hall"),
        Location(id="chestnut", name="Chestnut Residence"),
        Location(id="msb", name="Medical Science Building (MSB) Cafeteria"),
        Location(id="newcollege", name="New College Dining Hall"),
        Location(id="oakhouse", name="Oak House Dining Hall"),
        Location(id="robarts", name="Robarts Cafeteria"),
        Location(id="sidneysmith", name="Sidney Smith Cafeteria"),
    )
}


@dataclass(frozen=True)
class MenuItem:
    """One dining-hall offering for a specific date, meal and location.

    Dietary flags are inferred from the item name and are never
    authoritative. Allergens are not published by the upstream report, so
    the tuple is always empty.
    """

    id: str
    name: str
    category: str
    location: str
    meal: Meal
    date: str
    serving_size: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_halal: bool = False
    allergens: tuple[str, ...] = ()


@dataclass(frozen=True)
class LocationMenu:
    """Items served at one location, keyed by meal."""

    name: str
    meals: Mapping[str, tuple[MenuItem, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class DailyMenu:
    """All scraped locations for one date."""

    date: str
    locations: Mapping[str, LocationMenu] = field(default_factory=dict)

    def items_for(self, location_id: str, meal: str) -> tuple[MenuItem, ...]:
        """Return the items served at a location for a meal, or an empty tuple."""
        location = self.locations.get(location_id)
        if location is None:
            return ()
        return location.meals.get(meal, ())

    def item_index(self) -> dict[str, MenuItem]:
        """Map every item id in the menu to its item."""
        index: dict[str, MenuItem] = {}
        for location in self.locations.values():
            for items in location.meals.values():
                for item in items:
                    index.setdefault(item.id, item)
        return index

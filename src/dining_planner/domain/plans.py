"""Domain models for generated meal plans."""

from dataclasses import dataclass, field

from dining_planner.domain.menu import Meal, MenuItem


@dataclass(frozen=True)
class MacroTotals:
    """Summed macros for a meal or a day."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )


@dataclass(frozen=True)
class SelectedItem:
    """One line of a meal: an item, its servings and a display quantity."""

    item: MenuItem
    servings: int
    display_quantity: str


@dataclass(frozen=True)
class MealSuggestion:
    """Selected items and totals for one meal."""

    meal: Meal
    items: tuple[SelectedItem, ...] = ()
    totals: MacroTotals = field(default_factory=MacroTotals)


@dataclass(frozen=True)
class Shortfall:
    """Gap between the daily targets and the planned totals."""

    protein: float
    calories: float
    message: str | None


@dataclass(frozen=True)
class DailySuggestion:
    """A full day of meals, always breakfast, lunch and dinner."""

    date: str
    meals: tuple[MealSuggestion, ...]
    daily_totals: MacroTotals
    shortfall: Shortfall | None = None

    def meal(self, meal: Meal) -> MealSuggestion:
        """Return the suggestion for a meal."""
        for suggestion in self.meals:
            if suggestion.meal == meal:
                return suggestion
        raise KeyError(meal)


@dataclass(frozen=True)
class ClosedLocation:
    """A chosen location that serves nothing for a meal."""

    meal: Meal
    location_id: str


@dataclass(frozen=True)
class LocationAvailability:
    """Availability of the user's chosen locations on a menu."""

    available: bool
    closed_locations: list[ClosedLocation]
    available_locations: list[str]

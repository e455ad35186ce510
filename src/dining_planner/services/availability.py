"""Service availability of the user's chosen locations."""

from dining_planner.domain.menu import MEALS, DailyMenu
from dining_planner.domain.plans import ClosedLocation, LocationAvailability
from dining_planner.domain.preferences import UserPreferences


def check_location_availability(
    menu: DailyMenu, prefs: UserPreferences
) -> LocationAvailability:
    """Report which chosen (meal, location) slots serve nothing."""
    closed = [
        ClosedLocation(meal=meal, location_id=prefs.location_for(meal))
        for meal in MEALS
        if not menu.items_for(prefs.location_for(meal), meal)
    ]
    open_locations = [
        location_id
        for location_id, location in menu.locations.items()
        if any(location.meals.values())
    ]
    return LocationAvailability(
        available=not closed,
        closed_locations=closed,
        available_locations=open_locations,
    )

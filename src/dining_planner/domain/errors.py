"""Error types raised by the dining planner."""

from dining_planner.domain.plans import LocationAvailability


class DiningPlannerError(Exception):
    """Base error for the dining planner."""


class UpstreamUnavailableError(DiningPlannerError):
    """Raised when the menu index page cannot be fetched."""

    def __init__(self, menu_date: str | None, message: str | None = None) -> None:
        self.menu_date = menu_date
        label = menu_date or "today"
        super().__init__(message or f"Menu index unavailable for {label}")


class LocationsClosedError(DiningPlannerError):
    """Raised when a chosen location serves nothing for its meal."""

    def __init__(self, availability: LocationAvailability) -> None:
        self.availability = availability
        closed = ", ".join(
            f"{slot.meal}@{slot.location_id}" for slot in availability.closed_locations
        )
        super().__init__(f"Selected locations have no service: {closed}")


class PlanParseError(DiningPlannerError):
    """Raised when the LLM response has no usable structured plan."""

    def __init__(self, message: str, raw_response: str | None = None) -> None:
        self.raw_response = raw_response
        super().__init__(message)


class PlanningUnavailableError(DiningPlannerError):
    """Raised when no LLM planner client is configured."""

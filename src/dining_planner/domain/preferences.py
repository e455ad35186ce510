"""User preference models consumed by the planners."""

from typing import Literal

from pydantic import BaseModel, Field

from dining_planner.domain.menu import Meal

DietaryFilter = Literal["all", "vegetarian", "vegan"]


class UserPreferences(BaseModel):
    """Client-owned planning preferences.

    The core only reads these values; persistence lives with the client.
    """

    target_calories: int = Field(default=2500, gt=0)
    target_protein: int = Field(default=150, gt=0)
    target_carbs: int | None = Field(default=None, gt=0)
    target_fat: int | None = Field(default=None, gt=0)
    breakfast_location: str = "chestnut"
    lunch_location: str = "newcollege"
    dinner_location: str = "chestnut"
    dietary_filter: DietaryFilter = "all"
    is_halal: bool = False
    excluded_allergens: list[str] = Field(default_factory=list)
    excluded_proteins: list[str] = Field(default_factory=list)
    liked_item_ids: list[str] = Field(default_factory=list)
    disliked_item_ids: list[str] = Field(default_factory=list)
    dietary_preferences: str = ""
    onboarding_completed: bool = False

    def location_for(self, meal: Meal) -> str:
        """Return the location id chosen for a meal."""
        return {
            "breakfast": self.breakfast_location,
            "lunch": self.lunch_location,
            "dinner": self.dinner_location,
        }[meal]

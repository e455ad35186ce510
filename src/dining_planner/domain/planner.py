"""Schemas for structured meal-plan output from the LLM."""

from pydantic import BaseModel, ConfigDict, Field

from dining_planner.domain.menu import Meal


class PlannedItem(BaseModel):
    """Item claimed by the model for a meal."""

    model_config = ConfigDict(extra="ignore")

    item_id: str
    servings: float = Field(allow_inf_nan=False)


class PlannedMeal(BaseModel):
    """Meal selection claimed by the model."""

    model_config = ConfigDict(extra="ignore")

    meal: Meal
    items: list[PlannedItem]


class PlannedDay(BaseModel):
    """Three-meal structure returned by the model."""

    model_config = ConfigDict(extra="ignore")

    meals: list[PlannedMeal]

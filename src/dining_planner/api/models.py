"""Pydantic request models for the planner API."""

import datetime as dt

from pydantic import BaseModel, Field

from dining_planner.domain.menu import Meal
from dining_planner.domain.preferences import UserPreferences
from dining_planner.services.planner import PlanningApproach


class SuggestRequest(BaseModel):
    """Deterministic plan request."""

    date: dt.date | None = None
    preferences: UserPreferences


class LLMSuggestRequest(SuggestRequest):
    """LLM plan request with optional feedback."""

    user_feedback: str | None = None
    approach: PlanningApproach = PlanningApproach.TEXT
    fallback: bool = False


class SwapOptionsRequest(BaseModel):
    """Swap alternatives request."""

    date: dt.date | None = None
    meal_type: Meal
    location_id: str = Field(min_length=1)
    current_item_id: str = Field(min_length=1)
    preferences: UserPreferences

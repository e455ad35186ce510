"""Normalization helpers for noisy upstream text."""

import math
import re

from dining_planner.domain.menu import Meal

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_WHITESPACE = re.compile(r"\s+")
_NON_ID_CHARS = re.compile(r"[^a-z0-9-]")


def parse_number(text: str | None) -> float:
    """Parse a nutrition cell into a float, returning 0.0 when unparseable.

    Thousands separators and surrounding whitespace are ignored and the
    leading numeric prefix is used, so ``"12 g"`` parses as 12. Values that
    overflow to infinity count as unparseable.
    """
    if not text:
        return 0.0
    cleaned = text.replace(",", "").strip()
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return 0.0
    value = float(match.group(0))
    return value if math.isfinite(value) else 0.0


def normalize_meal(label: str) -> Meal:
    """Map a meal label onto breakfast, lunch or dinner.

    Labels that mention none of the three default to lunch.
    """
    lowered = label.lower()
    if "breakfast" in lowered:
        return "breakfast"
    if "lunch" in lowered:
        return "lunch"
    if "dinner" in lowered:
        return "dinner"
    return "lunch"


def generate_item_id(name: str, location: str, meal: str, menu_date: str) -> str:
    """Build a deterministic item id from its name, location, meal and date."""
    raw = f"{menu_date}-{location}-{meal}-{name}".lower()
    return _NON_ID_CHARS.sub("", _WHITESPACE.sub("-", raw))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)

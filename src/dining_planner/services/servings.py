"""Human-readable serving quantities."""

import re

from dining_planner.domain.menu import MenuItem
from dining_planner.services.normalize import round_half_up

_GRAMS = re.compile(r"(\d+)\s*g", re.IGNORECASE)
_COUNT_UNITS = ("each", "slice", "piece")

# Upper bound in cups (exclusive) and the label shown below it.
_CUP_BUCKETS = (
    (0.3, "~1/4 cup"),
    (0.6, "~1/2 cup"),
    (0.9, "~3/4 cup"),
    (1.3, "~1 cup"),
    (1.7, "~1.5 cups"),
    (2.3, "~2 cups"),
)


def format_serving_size(item: MenuItem, servings: int) -> str:
    """Describe the total quantity for a number of servings."""
    serving_size = item.serving_size.lower()
    if any(unit in serving_size for unit in _COUNT_UNITS):
        return "1" if servings == 1 else f"{servings}x"

    match = _GRAMS.search(item.serving_size)
    if match:
        total_grams = int(match.group(1)) * servings
        return f"{total_grams}g ({mass_to_volume(total_grams, item.category)})"

    if servings == 1:
        return item.serving_size
    return f"{servings}x {item.serving_size}"


def mass_to_volume(grams: float, category: str) -> str:
    """Approximate a mass in cups using a per-category density."""
    lowered = category.lower()
    grams_per_cup = 150
    if "salad" in lowered:
        grams_per_cup = 50
    elif "rice" in lowered or "grain" in lowered or "cereal" in lowered:
        grams_per_cup = 180
    elif "soup" in lowered:
        grams_per_cup = 240

    cups = grams / grams_per_cup
    for upper, label in _CUP_BUCKETS:
        if cups < upper:
            return label
    return f"~{round_half_up(cups)} cups"

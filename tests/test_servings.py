"""Tests for display quantities."""

import pytest

from dining_planner.services.servings import format_serving_size, mass_to_volume
from tests.conftest import make_item


def test_count_units_show_multiplier() -> None:
    item = make_item(
        "e1", "Boiled Egg", "Breakfast Entree", "breakfast", 70, 6, serving_size="1 each"
    )

    assert format_serving_size(item, 1) == "1"
    assert format_serving_size(item, 3) == "3x"


def test_gram_servings_show_mass_and_cups() -> None:
    item = make_item(
        "r1", "Chicken Curry", "Dinner Entree", "dinner", 250, 20, serving_size="100g"
    )

    assert format_serving_size(item, 2) == "200g (~1.5 cups)"


def test_salad_density_is_lighter() -> None:
    item = make_item(
        "s1", "Garden Salad", "Salad Bar", "lunch", 60, 2, serving_size="100g"
    )

    assert format_serving_size(item, 1) == "100g (~2 cups)"


def test_other_units_are_kept_verbatim() -> None:
    item = make_item(
        "m1", "Milk", "Beverages", "breakfast", 120, 8, serving_size="1 cup"
    )

    assert format_serving_size(item, 1) == "1 cup"
    assert format_serving_size(item, 2) == "2x 1 cup"


@pytest.mark.parametrize(
    ("grams", "category", "expected"),
    [
        (30, "Grill", "~1/4 cup"),
        (60, "Grill", "~1/2 cup"),
        (120, "Grill", "~3/4 cup"),
        (150, "Grill", "~1 cup"),
        (360, "Rice Bowls", "~2 cups"),
        (720, "Soup", "~3 cups"),
        (500, "Salad Bar", "~10 cups"),
    ],
)
def test_mass_to_volume_buckets(grams: float, category: str, expected: str) -> None:
    assert mass_to_volume(grams, category) == expected

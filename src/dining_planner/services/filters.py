"""Eligibility checks shared by the deterministic and LLM planners."""

from collections.abc import Collection, Iterable

from dining_planner.domain.menu import MenuItem
from dining_planner.domain.preferences import UserPreferences

PROTEIN_KEYWORDS: dict[str, tuple[str, ...]] = {
    "fish": (
        "fish",
        "salmon",
        "tuna",
        "cod",
        "tilapia",
        "halibut",
        "trout",
        "mackerel",
        "sardine",
        "anchovy",
    ),
    "pork": ("pork", "bacon", "ham", "sausage", "pepperoni", "prosciutto", "chorizo"),
    "beef": ("beef", "steak", "burger", "brisket", "meatball"),
    "shellfish": (
        "shrimp",
        "prawn",
        "crab",
        "lobster",
        "oyster",
        "clam",
        "mussel",
        "scallop",
        "calamari",
        "squid",
    ),
    "tofu": ("tofu",),
    "lamb": ("lamb",),
}


def contains_excluded_protein(name: str, excluded_proteins: Iterable[str]) -> bool:
    """Return True when the name mentions a keyword of an excluded category.

    Matching is plain substring search, so "porkpie" counts as pork.
    """
    lowered = name.lower()
    for category in excluded_proteins:
        keywords = PROTEIN_KEYWORDS.get(category, ())
        if any(keyword in lowered for keyword in keywords):
            return True
    return False


def is_item_allowed(
    item: MenuItem, prefs: UserPreferences, exclude_ids: Collection[str] = ()
) -> bool:
    """Check an item against the user's hard constraints."""
    if item.id in exclude_ids:
        return False
    if prefs.dietary_filter == "vegetarian" and not item.is_vegetarian:
        return False
    if prefs.dietary_filter == "vegan" and not item.is_vegan:
        return False
    # Meat-free items count as halal-safe.
    if prefs.is_halal and not (item.is_halal or item.is_vegetarian or item.is_vegan):
        return False
    if set(item.allergens) & set(prefs.excluded_allergens):
        return False
    return not contains_excluded_protein(item.name, prefs.excluded_proteins)


def filter_items(
    items: Iterable[MenuItem],
    prefs: UserPreferences,
    exclude_ids: Collection[str] = (),
) -> list[MenuItem]:
    """Return the items that pass every constraint, in menu order."""
    excluded = set(exclude_ids)
    return [item for item in items if is_item_allowed(item, prefs, excluded)]


def protein_density(item: MenuItem) -> float:
    """Protein grams per calorie; zero-calorie items have density zero."""
    if item.calories == 0:
        return 0.0
    return item.protein / item.calories

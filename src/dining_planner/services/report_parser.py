"""Parsing of a single menu report table into menu items.

Item rows are read by fixed cell offsets. Upstream column changes break the
mapping silently, so the offsets are pinned by fixture tests.
"""

from bs4 import BeautifulSoup, Tag

from dining_planner.domain.menu import MenuItem
from dining_planner.services.normalize import (
    generate_item_id,
    normalize_meal,
    parse_number,
)

SERVING_SIZE_CELL = 1
CALORIES_CELL = 2
FAT_CELL = 3
SODIUM_CELL = 6
CARBS_CELL = 7
FIBER_CELL = 8
SUGAR_CELL = 9
PROTEIN_CELL = 10

MEAT_KEYWORDS = (
    "chicken",
    "beef",
    "pork",
    "bacon",
    "ham",
    "turkey",
    "sausage",
    "meat",
    "steak",
    "lamb",
    "fish",
    "salmon",
    "tuna",
    "shrimp",
    "prawn",
    "crab",
    "lobster",
    "duck",
    "veal",
    "pepperoni",
    "meatball",
    "chorizo",
    "prosciutto",
    "salami",
    "bologna",
    "hotdog",
    "burger patty",
    "surimi",
    "anchovy",
    "anchovies",
    "sardine",
    "cod",
    "tilapia",
    "halibut",
    "trout",
    "mackerel",
    "oyster",
    "clam",
    "mussel",
    "scallop",
    "calamari",
    "squid",
    "octopus",
    "eel",
    "brisket",
    "ribs",
    "wings",
)

PLANT_BASED_KEYWORDS = ("plant based", "plant-based", "impossible", "beyond", "vegan")


def parse_menu_report(
    html: str, location: str, meal: str, menu_date: str
) -> list[MenuItem]:
    """Parse report HTML into menu items for one location and meal."""
    soup = BeautifulSoup(html, "html.parser")
    items: list[MenuItem] = []
    current_category = ""
    for row in soup.find_all("tr"):
        cells = row.find_all("td")
        if len(cells) == 1 and "courseHeader" in (cells[0].get("class") or []):
            current_category = cells[0].get_text().strip()
            continue
        description = row.find("td", class_="description")
        if description is None:
            continue
        name = description.get_text().strip()
        if not name:
            continue
        items.append(
            _build_item(cells, name, current_category, location, meal, menu_date)
        )
    return items


def contains_meat(name: str) -> bool:
    """Return True when a lowercased name mentions meat.

    Names that also mention a plant-based alternative are not meat, so
    "beyond beef burger" is meat-free.
    """
    if not any(keyword in name for keyword in MEAT_KEYWORDS):
        return False
    return not any(keyword in name for keyword in PLANT_BASED_KEYWORDS)


def infer_dietary_flags(name: str) -> tuple[bool, bool, bool]:
    """Infer (vegetarian, vegan, halal) from an item name."""
    lowered = name.lower()
    is_meat = contains_meat(lowered)
    is_vegan = not is_meat and ("vegan" in lowered or "plant based" in lowered)
    return not is_meat, is_vegan, "halal" in lowered


def _build_item(  # noqa: PLR0913
    cells: list[Tag],
    name: str,
    category: str,
    location: str,
    meal: str,
    menu_date: str,
) -> MenuItem:
    is_vegetarian, is_vegan, is_halal = infer_dietary_flags(name)
    return MenuItem(
        id=generate_item_id(name, location, meal, menu_date),
        name=name,
        category=category,
        location=location,
        meal=normalize_meal(meal),
        date=menu_date,
        serving_size=_cell_text(cells, SERVING_SIZE_CELL).strip(),
        calories=_cell_number(cells, CALORIES_CELL),
        fat=_cell_number(cells, FAT_CELL),
        protein=_cell_number(cells, PROTEIN_CELL),
        carbs=_cell_number(cells, CARBS_CELL),
        fiber=_cell_number(cells, FIBER_CELL),
        sugar=_cell_number(cells, SUGAR_CELL),
        sodium=_cell_number(cells, SODIUM_CELL),
        is_vegetarian=is_vegetarian,
        is_vegan=is_vegan,
        is_halal=is_halal,
    )


def _cell_text(cells: list[Tag], index: int) -> str:
    if index >= len(cells):
        return ""
    return cells[index].get_text()


def _cell_number(cells: list[Tag], index: int) -> float:
    return max(0.0, parse_number(_cell_text(cells, index)))

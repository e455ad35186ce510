"""Report-id extraction from the menu index page.

The index page embeds its navigation tree as single-quoted pseudo-JSON in an
inline script. Report ids carry no location or meal labels, so both
strategies below rely on the positional layout of the upstream site.
"""

import logging
import re
from dataclasses import dataclass

from dining_planner.domain.menu import LOCATIONS, MEALS, Location, Meal

_logger = logging.getLogger(__name__)

_GUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
_OUTER_TREE = re.compile(r"'items':\[\{'name':'noaction','items':\[([\s\S]*?)\]\}\]")
_NESTED_GROUP = re.compile(
    r"\{'name':'noaction','items':\[((?:\{'name':'[^']+'\},?)+)\]\}"
)
_GROUP_GUID = re.compile(r"\{'name':'(" + _GUID + r")'\}")
_FLAT_GUID = re.compile(r"name':'(" + _GUID + r")'")

# Location groups appear in the navigation tree in registry order.
GROUP_LOCATIONS: tuple[Location, ...] = tuple(LOCATIONS.values())

# (location, index of the breakfast report) in the flat id list.
SLICE_LOCATIONS: tuple[tuple[Location, int], ...] = (
    (LOCATIONS["campusone"], 0),
    (LOCATIONS["chestnut"], 3),
    (LOCATIONS["newcollege"], 14),
    (LOCATIONS["oakhouse"], 17),
)


@dataclass(frozen=True)
class MenuReportInfo:
    """A report id with its inferred location and meal."""

    id: str
    location: str
    location_id: str
    meal: Meal


def extract_menu_reports(
    html: str, *, slice_fallback: bool = True
) -> list[MenuReportInfo]:
    """Recover report ids for every dining hall on the index page.

    Uses the nested group structure when present and falls back to fixed
    index slices of the flat id list otherwise.
    """
    if _OUTER_TREE.search(html) is not None:
        reports = extract_reports_by_group(html)
        _logger.info("Extracted %s reports from nested groups", len(reports))
        return reports
    if not slice_fallback:
        _logger.warning("Navigation tree not found and slice fallback disabled")
        return []
    reports = extract_reports_by_slice(html)
    _logger.warning(
        "Navigation tree not found, used slice fallback: %s reports", len(reports)
    )
    return reports


def extract_reports_by_group(html: str) -> list[MenuReportInfo]:
    """Map nested groups of exactly three ids onto breakfast, lunch and dinner."""
    groups: list[list[str]] = []
    for match in _NESTED_GROUP.finditer(html):
        guids = _GROUP_GUID.findall(match.group(1))
        if guids:
            groups.append(guids)

    reports: list[MenuReportInfo] = []
    for guids, location in zip(groups, GROUP_LOCATIONS, strict=False):
        if len(guids) != len(MEALS):
            _logger.debug(
                "Skipping %s: %s reports is not a three-meal group",
                location.id,
                len(guids),
            )
            continue
        reports.extend(
            MenuReportInfo(
                id=guid, location=location.name, location_id=location.id, meal=meal
            )
            for guid, meal in zip(guids, MEALS, strict=True)
        )
    return reports


def extract_reports_by_slice(html: str) -> list[MenuReportInfo]:
    """Slice the flat id list with hard-coded per-location offsets."""
    guids = _FLAT_GUID.findall(html)
    reports: list[MenuReportInfo] = []
    for location, start in SLICE_LOCATIONS:
        for offset, meal in enumerate(MEALS):
            index = start + offset
            if index < len(guids):
                reports.append(
                    MenuReportInfo(
                        id=guids[index],
                        location=location.name,
                        location_id=location.id,
                        meal=meal,
                    )
                )
    return reports

"""
Audit results: annualised plastic counts from the daily room counts.

Every count field of the lunchroom/staffroom and rooms steps rolls up into
one category; all "Other" fields share a single bucket. Daily totals are
multiplied by the number of school days in a year.
"""

from typing import Any, Dict, Mapping, Tuple

from plastic_audit.core.utils import parse_count
from .schemas import AuditResults, TopPlastic

SCHOOL_DAYS_PER_YEAR = 190
TOP_PLASTICS_LIMIT = 5
OTHER_CATEGORY = "Other plastic items"

CATEGORY_FIELDS: Dict[str, Tuple[str, ...]] = {
    "Plastic bottles": (
        "lunchroomPlasticBottles",
        "staffroomPlasticBottles",
        "officePlasticBottles",
        "libraryPlasticBottles",
        "gymPlasticBottles",
        "playgroundPlasticBottles",
        "corridorsPlasticBottles",
        "scienceLabsPlasticBottles",
        "artRoomsPlasticBottles",
    ),
    "Plastic cups": ("lunchroomPlasticCups", "staffroomPlasticCups", "officePlasticCups"),
    "Plastic cutlery": ("lunchroomPlasticCutlery",),
    "Plastic straws": ("lunchroomPlasticStraws",),
    "Snack wrappers": ("lunchroomSnackWrappers", "staffroomSnackWrappers"),
    "Yoghurt pots": ("lunchroomYoghurtPots", "staffroomYoghurtPots"),
    "Takeaway containers": ("lunchroomTakeawayContainers", "staffroomTakeawayContainers"),
    "Cling film": ("lunchroomClingFilm",),
    "Pens & pencils": ("classroomPensPencils",),
    "Stationery items": ("classroomStationery", "officeStationery", "libraryStationery"),
    "Display materials": (
        "classroomDisplayMaterials",
        "libraryDisplayMaterials",
        "corridorsDisplayMaterials",
    ),
    "Soap bottles": ("toiletSoapBottles",),
    "Bin liners": ("toiletBinLiners", "corridorsBinLiners"),
    "Toilet cups/dispensers": ("toiletCupsPaper",),
    "Period products": ("toiletPeriodProducts",),
    "Sport equipment": ("gymSportEquipment",),
    "Toys/equipment": ("playgroundToysEquipment",),
    "Lab equipment": ("scienceLabsLabEquipment",),
    "Art supplies": ("artRoomsArtSupplies",),
}

OTHER_FIELDS: Tuple[str, ...] = (
    "lunchroomOther",
    "staffroomOther",
    "classroomOther",
    "toiletOther",
    "officeOther",
    "libraryOther",
    "gymOther",
    "playgroundOther",
    "corridorsOther",
    "scienceLabsOther",
    "artRoomsOther",
)


def _sum_fields(values: Mapping[str, Any], fields: Tuple[str, ...]) -> int:
    return sum(parse_count(values.get(field)) for field in fields)


def daily_counts(values: Mapping[str, Any]) -> Dict[str, int]:
    """Per-category daily totals; the "Other" bucket only when non-empty."""
    counts = {
        category: _sum_fields(values, fields)
        for category, fields in CATEGORY_FIELDS.items()
    }
    other_total = _sum_fields(values, OTHER_FIELDS)
    if other_total > 0:
        counts[OTHER_CATEGORY] = other_total
    return counts


def calculate_results(values: Mapping[str, Any]) -> AuditResults:
    """
    Derive the audit results from raw form values.

    Args:
        values: Union of the lunchroom/staffroom and rooms step values.
            Unparseable counts read as 0.

    Returns:
        AuditResults with annual counts per category, their total and the
        five largest non-zero categories, largest first
    """
    annual_counts = {
        category: count * SCHOOL_DAYS_PER_YEAR
        for category, count in daily_counts(values).items()
    }
    total = sum(annual_counts.values())

    ranked = sorted(annual_counts.items(), key=lambda item: item[1], reverse=True)
    top = [
        TopPlastic(name=name, count=count)
        for name, count in ranked[:TOP_PLASTICS_LIMIT]
        if count > 0
    ]

    return AuditResults(
        totalPlasticItems=total,
        topProblemPlastics=top,
        plasticCounts=annual_counts,
    )

"""
Environmental impact of reduction promises.

Promised reductions are annualised from their timeframe, converted to grams
with an average weight per item type, then expressed as relatable
comparisons (sea turtles, fish) and harder numbers (CO2, oil).
"""

from typing import Dict, Iterable

from .schemas import (
    AggregatedImpact,
    FunMetricDescriptions,
    FunMetrics,
    ItemImpact,
    PromiseResponse,
    SeriousMetrics,
)

# Average weight of one item, in grams
PLASTIC_ITEM_WEIGHTS: Dict[str, float] = {
    "plastic_cups": 5,
    "plastic_bottles": 15,
    "plastic_straws": 0.42,
    "plastic_bags": 5,
    "plastic_cutlery": 4,
    "plastic_plates": 8,
    "food_wrappers": 2,
    "bottle_caps": 2,
    "styrofoam_containers": 12,
    "plastic_stirrers": 0.5,
    "juice_pouches": 6,
    "sandwich_bags": 4,
    "chip_bags": 3,
    "plastic_wrap": 1.5,
    "yogurt_containers": 5,
    "milk_bottles": 30,
    "soda_bottles": 18,
    "detergent_bottles": 50,
    "shampoo_bottles": 25,
    "plastic_lids": 3,
    "balloons": 2,
    "plastic_gloves": 4,
    "disposable_razors": 8,
    "toothbrushes": 18,
    "plastic_utensils_set": 12,
    # Items recorded by the audit
    "snack_wrappers": 2,
    "yoghurt_pots": 5,
    "takeaway_containers": 12,
    "cling_film": 1.5,
    "pens_pencils": 3,
    "stationery": 4,
    "display_materials": 2,
    "soap_bottles": 25,
    "bin_liners": 8,
    "cups_dispensers": 3,
    "period_products": 5,
    "sport_equipment": 50,
    "toys_equipment": 30,
    "lab_equipment": 15,
    "art_supplies": 10,
}

TIMEFRAME_MULTIPLIERS: Dict[str, int] = {"week": 52, "month": 12, "year": 1}

SEA_TURTLE_GRAMS = 140_000
DOLPHIN_GRAMS = 180_000
OCEAN_BOTTLE_GRAMS = 15
PLASTIC_BAG_GRAMS = 5
FISH_INGESTION_GRAMS = 50
CO2_KG_PER_KG_PLASTIC = 6
OIL_LITRES_PER_KG_PLASTIC = 2
YEARLY_OCEAN_PLASTIC_TONS = 8_000_000


def convert_to_weight(item_type: str, quantity: float) -> Dict[str, float]:
    """Weight of `quantity` items; unknown item types weigh nothing."""
    grams = PLASTIC_ITEM_WEIGHTS.get(item_type, 0) * quantity
    return {"grams": grams, "kilograms": grams / 1000, "tons": grams / 1_000_000}


def _plural(value: float) -> str:
    return "" if value == 1 else "s"


def convert_to_fun_metrics(grams_reduced: float) -> FunMetrics:
    sea_turtles = grams_reduced / SEA_TURTLE_GRAMS
    dolphins = grams_reduced / DOLPHIN_GRAMS
    bottles = grams_reduced / OCEAN_BOTTLE_GRAMS
    bags = grams_reduced / PLASTIC_BAG_GRAMS
    fish = grams_reduced / FISH_INGESTION_GRAMS

    return FunMetrics(
        seaTurtles=sea_turtles,
        dolphins=dolphins,
        oceanPlasticBottles=bottles,
        plasticBags=bags,
        fishSaved=fish,
        descriptions=FunMetricDescriptions(
            seaTurtles=f"🐢 Equivalent to {sea_turtles:.2f} sea turtle{_plural(sea_turtles)} worth of plastic saved!",
            dolphins=f"🐬 That's {dolphins:.2f} dolphin{_plural(dolphins)} worth of plastic prevented!",
            oceanPlasticBottles=f"🍾 {int(bottles):,} plastic bottles kept out of the ocean!",
            plasticBags=f"🛍️ {int(bags):,} plastic bags prevented from polluting our seas!",
            fishSaved=f"🐟 Potentially saved {int(fish):,} fish from plastic ingestion!",
        ),
    )


def convert_to_serious_metrics(grams_reduced: float) -> SeriousMetrics:
    kilograms = grams_reduced / 1000
    tons = grams_reduced / 1_000_000
    return SeriousMetrics(
        kilograms=kilograms,
        tons=tons,
        co2Prevented=kilograms * CO2_KG_PER_KG_PLASTIC,
        oilSaved=kilograms * OIL_LITRES_PER_KG_PLASTIC,
        plasticBagEquivalent=grams_reduced / PLASTIC_BAG_GRAMS,
        yearlyOceanPlasticPrevented=(tons / YEARLY_OCEAN_PLASTIC_TONS) * 100,
    )


def calculate_aggregate_metrics(promises: Iterable[PromiseResponse]) -> AggregatedImpact:
    """
    Aggregate the annual impact of a set of promises.

    Each promise's reductionAmount is annualised by its timeframe
    (week x52, month x12, year x1), weighted by item type and summed.
    The per-type breakdown keeps the label of the first promise of that
    type and is sorted by grams, heaviest first.
    """
    by_type: Dict[str, ItemImpact] = {}
    total_grams = 0.0

    for promise in promises:
        unit = getattr(promise.timeframeUnit, "value", promise.timeframeUnit)
        annual_reduction = promise.reductionAmount * TIMEFRAME_MULTIPLIERS.get(unit, 1)
        grams = convert_to_weight(promise.plasticItemType, annual_reduction)["grams"]
        total_grams += grams

        existing = by_type.get(promise.plasticItemType)
        if existing:
            existing.totalReduction += annual_reduction
            existing.gramsReduced += grams
        else:
            by_type[promise.plasticItemType] = ItemImpact(
                itemType=promise.plasticItemType,
                itemLabel=promise.plasticItemLabel,
                totalReduction=annual_reduction,
                gramsReduced=grams,
            )

    return AggregatedImpact(
        totalGramsReduced=total_grams,
        funMetrics=convert_to_fun_metrics(total_grams),
        seriousMetrics=convert_to_serious_metrics(total_grams),
        byItemType=sorted(by_type.values(), key=lambda item: item.gramsReduced, reverse=True),
    )

"""Variable Costs — population cost averages and per-farm cost redistribution.

Invariants:
    - Averages only consider strictly positive costs (zero means "unknown", not "free")
    - A production keeps its previous per-unit cost when that cost was non-zero
    - Costs the SP engine reports but that are not explained by kept costs are spread over
      the remaining productions in proportion to quantity × population average
    - to_distribute == 0 yields ratio 0 (never divides by zero)

Design Decisions:
    - Averages are computed once per population and passed in, so a region loop
      does not query them again
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from farmdata.core.snapshots import CropRecord, LivestockRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostAverages:
    """Population-wide mean unit costs keyed by product group id."""
    crop: dict[int, float]
    livestock: dict[int, float]
    milk: dict[int, float]


def average_costs_by_group(values: Iterable[tuple[int, float]]) -> dict[int, float]:
    """Mean of strictly positive values per product group."""
    sums: dict[int, float] = defaultdict(float)
    counts: dict[int, int] = defaultdict(int)
    for group_id, value in values:
        if value is not None and value > 0:
            sums[group_id] += value
            counts[group_id] += 1
    return {g: sums[g] / counts[g] for g in sums}


def compute_cost_averages(
    crops: Iterable[CropRecord], livestock: Iterable[LivestockRecord],
) -> CostAverages:
    livestock = list(livestock)
    return CostAverages(
        crop=average_costs_by_group(
            (c.product_group_id, c.variable_costs) for c in crops
        ),
        livestock=average_costs_by_group(
            (lp.product_group_id, lp.variable_costs) for lp in livestock
        ),
        # milk averages use the same row filter as livestock (variable_costs > 0)
        milk=_milk_averages(livestock),
    )


def _milk_averages(livestock: list[LivestockRecord]) -> dict[int, float]:
    sums: dict[int, float] = defaultdict(float)
    counts: dict[int, int] = defaultdict(int)
    for lp in livestock:
        if lp.variable_costs > 0:
            sums[lp.product_group_id] += lp.milk_variable_costs
            counts[lp.product_group_id] += 1
    return {g: sums[g] / counts[g] for g in sums}


def livestock_quantity(lp: LivestockRecord) -> float:
    return lp.eggs_total_production + lp.milk_total_production + lp.wool_total_production


def redistribute_variable_costs(
    total_variable_costs: float,
    crops: list[CropRecord],
    livestock: list[LivestockRecord],
    previous_crops: dict[int, CropRecord],
    previous_livestock: dict[int, LivestockRecord],
    averages: CostAverages,
) -> float:
    """Fix unit costs of new productions in place. Returns the ratio applied.

    previous_* map product_group_id → previous-year production of the same farm.
    """
    accumulated = 0.0
    to_distribute = 0.0
    pending_crops: list[CropRecord] = []
    pending_livestock: list[LivestockRecord] = []

    for crop in crops:
        previous = previous_crops.get(crop.product_group_id)
        if previous is not None and previous.variable_costs != 0:
            crop.variable_costs = previous.variable_costs
            accumulated += previous.variable_costs * crop.quantity
        else:
            average = averages.crop.get(crop.product_group_id, 0.0)
            to_distribute += crop.quantity * average
            pending_crops.append(crop)

    for lp in livestock:
        previous = previous_livestock.get(lp.product_group_id)
        if previous is not None and previous.milk_variable_costs != 0:
            lp.milk_variable_costs = previous.milk_variable_costs
            lp.variable_costs = previous.variable_costs
            accumulated += previous.milk_variable_costs * lp.milk_total_production
        else:
            average = averages.livestock.get(lp.product_group_id, 0.0)
            to_distribute += livestock_quantity(lp) * average
            pending_livestock.append(lp)

    unknown = total_variable_costs - accumulated
    ratio = unknown / to_distribute if to_distribute else 0.0
    if not to_distribute and (pending_crops or pending_livestock):
        logger.warning(
            "No cost basis to redistribute %.2f over %d productions",
            unknown, len(pending_crops) + len(pending_livestock),
        )

    for crop in pending_crops:
        crop.variable_costs = averages.crop.get(crop.product_group_id, 0.0) * ratio
    for lp in pending_livestock:
        lp.variable_costs = (
            averages.livestock.get(lp.product_group_id, 0.0)
            + averages.milk.get(lp.product_group_id, 0.0)
        ) * ratio
    return ratio

"""Short Period Results — reconciling SP engine output with the previous farm-year.

Invariants:
    - Pure: previous-year records + SP results in, target-year records out
    - Every region farm yields exactly one closing value; a farm without a previous
      closing value aborts the whole region (DataConflictError)
    - |rent_balance_area| below the tolerance is treated as 0
    - Simulated farms: non-"other" crops come from SP, "other" crops migrate with land
      transfers, "other" livestock and "other" subsidies carry over
    - Non-simulated farms: every previous production migrates or carries over
    - Agricultural productions with zero cultivated area are never emitted
    - Unknown crop names or policy identifiers in SP output are conflicts, not skips

Design Decisions:
    - Region rents are collected from every SP result before any farm is reconciled,
      so a farm's current assets see each of its rents whichever region reported it
    - Coupled subsidies are split once per farm, not once per crop
"""

import logging
from dataclasses import dataclass, field, replace

from farmdata.core.closing_values import (
    DEFAULT_RENT_PRICE_PER_HECTARE, IncomeRates, finalise_closing_value, start_closing_value,
)
from farmdata.core.domain_types import DAIRY_GROUP, is_milk_crop
from farmdata.core.errors import DataConflictError, ErrorContext
from farmdata.core.land_transfers import carry_over, migrate_crop_productions
from farmdata.core.snapshots import (
    ClosingRecord, CropRecord, DecisionRecord, LivestockRecord, PolicyRef,
    ProductGroupRef, RentRecord, SPCrop, SPFarmResult, SubsidyRecord, TransactionRecord,
)
from farmdata.core.variable_costs import CostAverages, redistribute_variable_costs

logger = logging.getLogger(__name__)


# ─── Inputs ──────────────────────────────────────────────────────

@dataclass
class PreviousFarmYear:
    """A region farm's previous-year state plus its target-year LP decision."""
    farm_id: int
    closing: ClosingRecord | None
    crops: list[CropRecord] = field(default_factory=list)
    livestock: list[LivestockRecord] = field(default_factory=list)
    subsidies: list[SubsidyRecord] = field(default_factory=list)
    greening_surface: float = 0.0
    decision: DecisionRecord | None = None


@dataclass
class ReconciliationContext:
    """Population-level reference data shared by every farm of a run."""
    product_groups: list[ProductGroupRef]
    policies: list[PolicyRef]
    averages: CostAverages
    rates: IncomeRates
    transactions: list[TransactionRecord] = field(default_factory=list)
    sources: dict[int, CropRecord] = field(default_factory=dict)
    rent_price_per_hectare: float = DEFAULT_RENT_PRICE_PER_HECTARE
    rent_balance_tolerance: float = 0.1
    year: int | None = None

    def __post_init__(self):
        self.groups_by_name = {g.name: g for g in self.product_groups}
        self.other_group_ids = {g.id for g in self.product_groups if g.is_other}
        self.policies_by_identifier = {p.policy_identifier: p for p in self.policies}
        self.other_policy_ids = {
            p.id for p in self.policies
            if any(group_id in self.other_group_ids for group_id, _ in p.relations)
        }
        dairy = self.groups_by_name.get(DAIRY_GROUP)
        self.dairy_group_id = dairy.id if dairy is not None else None


# ─── Outputs ─────────────────────────────────────────────────────

@dataclass
class FarmYearOutcome:
    farm_id: int
    closing: ClosingRecord
    crops: list[CropRecord] = field(default_factory=list)
    livestock: list[LivestockRecord] = field(default_factory=list)
    subsidies: list[SubsidyRecord] = field(default_factory=list)
    greening_surface: float | None = None
    rents: list[RentRecord] = field(default_factory=list)
    simulated: bool = False


@dataclass
class RegionOutcome:
    farms: list[FarmYearOutcome] = field(default_factory=list)
    rents: list[RentRecord] = field(default_factory=list)

    @property
    def crops(self) -> list[CropRecord]:
        return [c for f in self.farms for c in f.crops]

    @property
    def livestock(self) -> list[LivestockRecord]:
        return [lp for f in self.farms for lp in f.livestock]

    @property
    def subsidies(self) -> list[SubsidyRecord]:
        return [s for f in self.farms for s in f.subsidies]

    @property
    def closing_values(self) -> list[ClosingRecord]:
        return [f.closing for f in self.farms]


# ─── SP output → productions ─────────────────────────────────────

def milk_to_livestock(
    farm_id: int,
    dairy_group_id: int,
    crop: SPCrop,
    previous: LivestockRecord | None,
) -> LivestockRecord:
    dairy_cows = int(round(crop.dairy_cows or 0))
    rebreeding = int(round(crop.rebreeding_cows or 0))
    lp = LivestockRecord(
        farm_id=farm_id,
        product_group_id=dairy_group_id,
        dairy_cows=dairy_cows,
        number_animals_rearing_breading=rebreeding,
        number_of_animals=dairy_cows + rebreeding,
        variable_costs=crop.crop_variable_costs,
        milk_variable_costs=crop.crop_variable_costs,
        milk_production_sold=crop.quantity_sold,
        milk_total_sales=crop.quantity_sold * crop.crop_selling_price,
        selling_price=crop.crop_selling_price,
    )
    if previous is not None:
        # used milk is not reported by SP; keep last year's production/sales ratio
        if previous.milk_total_sales > 0:
            lp.milk_total_production = (
                lp.milk_total_sales * previous.milk_total_production / previous.milk_total_sales
            )
        if previous.value_sold_animals > 0:
            lp.value_sold_animals = previous.value_sold_animals
        if previous.value_animals_rearing_breading > 0:
            lp.value_animals_rearing_breading = previous.value_animals_rearing_breading
        if previous.value_slaughtered_animals > 0:
            lp.value_slaughtered_animals = previous.value_slaughtered_animals
    return lp


def crop_to_production(
    farm_id: int,
    group: ProductGroupRef,
    crop: SPCrop,
    closing: ClosingRecord,
    previous: CropRecord | None,
) -> CropRecord:
    area = crop.crop_productive_area
    production = CropRecord(
        farm_id=farm_id,
        product_group_id=group.id,
        cultivated_area=area,
        variable_costs=crop.crop_variable_costs,
        crop_production=(crop.quantity_sold + crop.quantity_used) * crop.crop_selling_price,
        selling_price=crop.crop_selling_price,
        value_sales=crop.quantity_sold * crop.crop_selling_price,
        quantity_sold=crop.quantity_sold,
        quantity_used=crop.quantity_used,
        land_value=(
            area * closing.agricultural_land_value / closing.agricultural_land_area
            if closing.agricultural_land_area > 0 else 0.0
        ),
        organic_production_type=group.organic,
    )
    # SP does not report irrigation; keep last year's ratio
    if previous is not None and previous.irrigated_area > 0 and previous.cultivated_area > 0:
        production.irrigated_area = previous.irrigated_area * area / previous.cultivated_area
    return production


def split_coupled_subsidy(policy: PolicyRef, value: float) -> float:
    """Portion of an SP subsidy recorded for the policy, split by compensation."""
    total = sum(compensation for _, compensation in policy.relations)
    if not total:
        return 0.0
    return sum(
        value * compensation / total
        for _, compensation in policy.relations
        if compensation > 0
    )


def _conflict(message: str, context: ReconciliationContext, farm_id: int) -> DataConflictError:
    return DataConflictError(
        message, ErrorContext(year=context.year, farm_id=farm_id),
    )


# ─── Farm reconciliation ─────────────────────────────────────────

def _simulated_farm(
    context: ReconciliationContext,
    previous: PreviousFarmYear,
    sp_result: SPFarmResult,
    closing: ClosingRecord,
    outcome: FarmYearOutcome,
) -> None:
    farm_id = previous.farm_id
    prev_crops = {c.product_group_id: c for c in previous.crops}
    prev_livestock = {lp.product_group_id: lp for lp in previous.livestock}
    crops: dict[int, CropRecord] = {}

    for name, crop in sp_result.crops.items():
        if is_milk_crop(name):
            if context.dairy_group_id is None:
                raise _conflict(f"Product group {DAIRY_GROUP} is not defined", context, farm_id)
            outcome.livestock.append(milk_to_livestock(
                farm_id, context.dairy_group_id, crop,
                prev_livestock.get(context.dairy_group_id),
            ))
            continue
        group = context.groups_by_name.get(name)
        if group is None:
            raise _conflict(f"Unknown crop '{name}' in SP results", context, farm_id)
        if group.id in crops:
            logger.warning(
                "Duplicate agricultural production for %s ignored", name,
                extra={"farm_id": farm_id},
            )
            continue
        crops[group.id] = crop_to_production(
            farm_id, group, crop, closing, prev_crops.get(group.id),
        )

    subsidies: dict[int, SubsidyRecord] = {}
    for sp_subsidy in sp_result.subsidies:
        policy = context.policies_by_identifier.get(sp_subsidy.policy_identifier)
        if policy is None:
            raise _conflict(
                f"Unknown policy '{sp_subsidy.policy_identifier}' in SP results",
                context, farm_id,
            )
        if not policy.relations:
            continue
        value = split_coupled_subsidy(policy, sp_subsidy.value)
        if policy.id in subsidies:
            subsidies[policy.id].value += value
        else:
            subsidies[policy.id] = SubsidyRecord(farm_id=farm_id, policy_id=policy.id, value=value)

    redistribute_variable_costs(
        sp_result.total_variable_costs,
        list(crops.values()),
        outcome.livestock,
        prev_crops,
        prev_livestock,
        context.averages,
    )

    others = context.other_group_ids
    migrated = migrate_crop_productions(
        farm_id,
        [c for c in previous.crops if c.product_group_id in others],
        [t for t in context.transactions
         if t.origin_farm_id == farm_id and t.product_group_id in others],
        [t for t in context.transactions
         if t.destination_farm_id == farm_id and t.product_group_id in others],
        context.sources,
    )
    for production in migrated:
        if production.product_group_id in crops:
            logger.warning(
                "Duplicate agricultural production for group %s ignored",
                production.product_group_id, extra={"farm_id": farm_id},
            )
            continue
        crops[production.product_group_id] = production
    outcome.crops = list(crops.values())

    outcome.livestock.extend(
        replace(lp, id=None) for lp in previous.livestock if lp.product_group_id in others
    )

    for subsidy in previous.subsidies:
        if subsidy.policy_id not in context.other_policy_ids:
            continue
        if subsidy.policy_id in subsidies:
            logger.warning(
                "Policy %s already subsidised by SP; previous value not carried over",
                subsidy.policy_id, extra={"farm_id": farm_id},
            )
            continue
        subsidies[subsidy.policy_id] = replace(subsidy)
    outcome.subsidies = list(subsidies.values())

    if sp_result.greening_surface > 0:
        outcome.greening_surface = sp_result.greening_surface


def _non_simulated_farm(
    context: ReconciliationContext,
    previous: PreviousFarmYear,
    outcome: FarmYearOutcome,
) -> None:
    farm_id = previous.farm_id
    outcome.crops = migrate_crop_productions(
        farm_id,
        previous.crops,
        [t for t in context.transactions if t.origin_farm_id == farm_id],
        [t for t in context.transactions if t.destination_farm_id == farm_id],
        context.sources,
    )
    outcome.livestock = [replace(lp, id=None) for lp in previous.livestock]
    outcome.subsidies = [replace(s) for s in previous.subsidies]
    if previous.greening_surface > 0:
        outcome.greening_surface = previous.greening_surface


def reconcile_farm(
    context: ReconciliationContext,
    previous: PreviousFarmYear,
    sp_result: SPFarmResult | None,
    region_rents: list[RentRecord] = (),
) -> FarmYearOutcome:
    """Target-year state of one farm. region_rents are the target-year rents of its region."""
    if previous.closing is None:
        raise _conflict(
            f"Farm {previous.farm_id} has no closing value for the previous year",
            context, previous.farm_id,
        )

    rent_balance_area = 0.0
    if sp_result is not None and abs(sp_result.rent_balance_area) >= context.rent_balance_tolerance:
        rent_balance_area = sp_result.rent_balance_area

    closing = start_closing_value(
        previous.farm_id, previous.closing, sp_result, previous.decision,
        rent_balance_area, context.rent_price_per_hectare,
    )
    outcome = FarmYearOutcome(
        farm_id=previous.farm_id, closing=closing, simulated=sp_result is not None,
    )

    if sp_result is not None:
        outcome.rents = [replace(r) for r in sp_result.rented_in_lands]
        _simulated_farm(context, previous, sp_result, closing, outcome)
    else:
        _non_simulated_farm(context, previous, outcome)

    finalise_closing_value(
        closing, previous.closing, outcome.crops, outcome.livestock, outcome.subsidies,
        region_rents, sp_result, context.rates,
        context.other_group_ids, context.other_policy_ids,
    )
    outcome.crops = [c for c in outcome.crops if c.cultivated_area != 0]
    return outcome


def _unique_rents(rents: list[RentRecord]) -> list[RentRecord]:
    by_pair: dict[tuple[int, int], RentRecord] = {}
    for rent in rents:
        key = (rent.origin_farm_id, rent.destination_farm_id)
        if key in by_pair:
            logger.warning("Duplicate land rent %s -> %s; last one kept", *key)
        by_pair[key] = rent
    return list(by_pair.values())


def reconcile_region(
    context: ReconciliationContext,
    farms: list[PreviousFarmYear],
    sp_results: dict[int, SPFarmResult],
    previous_rents: list[RentRecord] = (),
) -> RegionOutcome:
    """Reconcile every farm of a region.

    sp_results holds every simulated farm of the run, keyed by farm id; farms of the
    region missing from it are carried over. previous_rents are the previous-year
    rents involving the region's farms. SP rents reported by farms of other regions
    count when either party belongs to this region.
    """
    kept = [
        replace(r) for r in previous_rents
        if r.origin_farm_id not in sp_results and r.destination_farm_id not in sp_results
    ]
    region_farm_ids = {f.farm_id for f in farms}
    rents = _unique_rents(kept + [
        replace(r)
        for result in sp_results.values()
        for r in result.rented_in_lands
        if r.origin_farm_id in region_farm_ids or r.destination_farm_id in region_farm_ids
    ])

    outcome = RegionOutcome(rents=rents)
    for previous in farms:
        outcome.farms.append(
            reconcile_farm(context, previous, sp_results.get(previous.farm_id), rents)
        )
    return outcome

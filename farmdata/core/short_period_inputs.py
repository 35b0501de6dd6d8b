"""Short Period Inputs — shaping previous-year farm data for the SP engine.

Invariants:
    - "Other" product groups are never sent to SP
    - Every farm gets an entry for every non-"other" product group (zeros when absent)
    - Only the DAIRY livestock production is sent; milk price is sales / sold quantity
    - Simulation data additionally reflects target-year land transactions and the
      current assets decided by the LP engine
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

from farmdata.core.domain_types import DAIRY_GROUP
from farmdata.core.land_transfers import apply_transfer_to_sp_crops
from farmdata.core.snapshots import (
    ClosingRecord, CropRecord, DecisionRecord, HolderRecord, LivestockRecord,
    ProductGroupRef, RentRecord, SPCrop, TransactionRecord,
)


@dataclass
class SPInputFarm:
    """Previous-year view of a farm as needed to build its SP value."""
    farm_id: int
    region_level_1: str
    region_level_2: str
    region_level_3: int
    technical_economic_orientation: int
    altitude: int
    closing: ClosingRecord | None = None
    holder: HolderRecord | None = None
    crops: list[CropRecord] = field(default_factory=list)
    livestock: list[LivestockRecord] = field(default_factory=list)
    greening_surface: float = 0.0
    rented_in: list[RentRecord] = field(default_factory=list)


def active_policies(policies: Iterable[Any], year: int) -> list[Any]:
    """Policies whose [start, end] year window contains year."""
    return [p for p in policies if p.start_year_number <= year <= p.end_year_number]


def sp_crop(production: CropRecord | None) -> SPCrop:
    if production is None:
        return SPCrop()
    return SPCrop(
        uaa=production.cultivated_area,
        quantity_sold=production.quantity_sold,
        quantity_used=production.quantity_used,
        crop_selling_price=production.selling_price,
        crop_variable_costs=production.variable_costs,
        crop_productive_area=round(production.cultivated_area, 2),
    )


def sp_livestock(dairy: LivestockRecord | None) -> dict[str, float]:
    if dairy is None:
        return {
            "number_of_animals": 0.0, "dairy_cows": 0, "rebreeding_cows": 0.0,
            "milk_production": 0.0, "milk_selling_price": 0.0, "variable_costs": 0.0,
        }
    return {
        "number_of_animals": dairy.number_of_animals,
        "dairy_cows": dairy.dairy_cows,
        "rebreeding_cows": dairy.number_animals_rearing_breading,
        "milk_production": dairy.milk_production_sold,
        "milk_selling_price": (
            dairy.milk_total_sales / dairy.milk_production_sold
            if dairy.milk_production_sold else 0.0
        ),
        "variable_costs": dairy.milk_variable_costs,
    }


def sp_holder(holder: HolderRecord | None) -> dict[str, Any] | None:
    if holder is None:
        return None
    return {
        "holder_age": holder.holder_age,
        "holder_successors": holder.holder_successors,
        "holder_successors_age": holder.holder_successors_age,
        "holder_family_members": holder.holder_family_members,
        "holder_gender": str(holder.holder_gender),
    }


def build_sp_crops(
    farm: SPInputFarm, product_groups: Iterable[ProductGroupRef],
) -> dict[str, SPCrop]:
    by_group = {c.product_group_id: c for c in farm.crops}
    return {
        g.name: sp_crop(by_group.get(g.id))
        for g in product_groups if not g.is_other
    }


def build_sp_values(
    farms: Iterable[SPInputFarm], product_groups: list[ProductGroupRef],
) -> list[dict[str, Any]]:
    """One SP value per farm, crops as SPCrop (serialised by the caller)."""
    dairy_ids = {g.id for g in product_groups if g.name == DAIRY_GROUP}
    values = []
    for farm in farms:
        dairy = next((lp for lp in farm.livestock if lp.product_group_id in dairy_ids), None)
        values.append({
            "farm_code": farm.farm_id,
            "holder_info": sp_holder(farm.holder),
            "cod_ragr": farm.region_level_1,
            "cod_ragr2": farm.region_level_2,
            "cod_ragr3": farm.region_level_3,
            "technical_economic_orientation": farm.technical_economic_orientation,
            "altitude": farm.altitude,
            "current_assets": farm.closing.total_current_assets if farm.closing else 0.0,
            "crops": build_sp_crops(farm, product_groups),
            "livestock": sp_livestock(dairy),
            "greening_surface": farm.greening_surface,
            "rented_in_lands": [asdict(r) for r in farm.rented_in],
        })
    return values


def apply_simulation_adjustments(
    values: list[dict[str, Any]],
    transactions: Iterable[TransactionRecord],
    group_names: dict[int, str],
    decisions: Iterable[DecisionRecord],
) -> list[dict[str, Any]]:
    """Reflect target-year land transactions and LP current assets, in place."""
    crops_by_farm = {v["farm_code"]: v["crops"] for v in values}
    for t in transactions:
        name = group_names.get(t.product_group_id)
        if name is not None:
            apply_transfer_to_sp_crops(crops_by_farm, t, name)
    by_farm = {v["farm_code"]: v for v in values}
    for decision in decisions:
        value = by_farm.get(decision.farm_id)
        if value is not None:
            value["current_assets"] = decision.total_current_assets
    return values

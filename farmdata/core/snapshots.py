"""Snapshots — plain in-memory records the pure core computes on.

Invariants:
    - Field names match the ORM column names one-to-one, so services convert rows
      with record_from_row() / asdict() without per-field mapping code
    - Numeric fields are never None inside a record (None in the DB becomes 0.0)
    - Records carry no year: every core call works on exactly one source year and
      one target year chosen by the caller

Design Decisions:
    - Mutable dataclasses: reconciliation accumulates into productions in place, the same
      way a spreadsheet row is edited, and the caller persists the final state
    - Records never hold ORM objects: core stays importable without SQLAlchemy
"""

from dataclasses import dataclass, field, fields
from typing import Any, TypeVar

from farmdata.core.domain_types import OrganicProductionType, is_other_group


# ─── Productions ─────────────────────────────────────────────────

@dataclass
class CropRecord:
    """One agricultural production of a farm for one year."""
    farm_id: int
    product_group_id: int
    cultivated_area: float = 0.0
    irrigated_area: float = 0.0
    crop_production: float = 0.0
    quantity_sold: float = 0.0
    quantity_used: float = 0.0
    value_sales: float = 0.0
    variable_costs: float = 0.0
    land_value: float = 0.0
    selling_price: float = 0.0
    organic_production_type: int = OrganicProductionType.UNDETERMINED
    id: int | None = None

    @property
    def quantity(self) -> float:
        return self.quantity_sold + self.quantity_used


@dataclass
class LivestockRecord:
    """One livestock production of a farm for one year."""
    farm_id: int
    product_group_id: int
    number_of_animals: float = 0.0
    dairy_cows: int = 0
    number_of_animals_sold: int = 0
    value_sold_animals: float = 0.0
    number_animals_for_slaughtering: int = 0
    value_slaughtered_animals: float = 0.0
    number_animals_rearing_breading: float = 0.0
    value_animals_rearing_breading: float = 0.0
    milk_total_production: float = 0.0
    milk_production_sold: float = 0.0
    milk_total_sales: float = 0.0
    milk_variable_costs: float = 0.0
    wool_total_production: float = 0.0
    wool_production_sold: float = 0.0
    eggs_total_sales: float = 0.0
    eggs_total_production: float = 0.0
    eggs_production_sold: float = 0.0
    manure_total_sales: float = 0.0
    variable_costs: float = 0.0
    selling_price: float = 0.0
    id: int | None = None


# ─── Farm-year financial state ───────────────────────────────────

@dataclass
class ClosingRecord:
    """Year-end closing values of a farm (FADN SE codes noted per field)."""
    farm_id: int
    agricultural_land_value: float = 0.0
    agricultural_land_area: float = 0.0
    land_improvements: float = 0.0
    plantations_value: float = 0.0
    forest_land_value: float = 0.0
    forest_land_area: float = 0.0
    farm_buildings_value: float = 0.0
    machinery_and_equipment: float = 0.0
    intangible_assets_tradable: float = 0.0
    intangible_assets_non_tradable: float = 0.0
    other_non_current_assets: float = 0.0
    long_and_medium_term_loans: float = 0.0                   # SE490
    total_current_assets: float = 0.0                         # SE465
    farm_net_income: float = 0.0                              # SE420
    gross_farm_income: float = 0.0                            # SE410
    subsidies_on_investments: float = 0.0                     # SE406
    vat_balance_on_investments: float = 0.0                   # SE408
    total_output_crops_and_crop_production: float = 0.0       # SE135
    total_output_livestock_and_livestock_production: float = 0.0  # SE206
    other_outputs: float = 0.0                                # SE256
    total_intermediate_consumption: float = 0.0               # SE275
    taxes: float = 0.0                                        # SE390
    vat_balance_excluding_investments: float = 0.0            # SE395
    fixed_assets: float = 0.0                                 # SE441
    depreciation: float = 0.0                                 # SE360
    total_external_factors: float = 0.0                       # SE365
    machinery: float = 0.0                                    # SE455
    rent_balance: float = 0.0


@dataclass
class SubsidyRecord:
    farm_id: int
    policy_id: int
    value: float = 0.0


@dataclass
class RentRecord:
    """Land rented from origin (landlord) to destination (tenant)."""
    origin_farm_id: int
    destination_farm_id: int
    rent_value: float = 0.0
    rent_area: float = 0.0


@dataclass
class TransactionRecord:
    """Share of an origin production's land sold to a destination farm."""
    production_id: int
    origin_farm_id: int
    product_group_id: int
    destination_farm_id: int
    percentage: float = 0.0
    sale_price: float = 0.0


@dataclass
class DecisionRecord:
    """Agro-management decision produced by the LP engine for one farm and year."""
    farm_id: int
    agricultural_land_area: float = 0.0
    agricultural_land_value: float = 0.0
    long_and_medium_term_loans: float = 0.0
    total_current_assets: float = 0.0
    average_land_value: float = 0.0
    targeted_land_aquisition_area: float = 0.0
    targeted_land_aquisition_hectar_price: float = 0.0
    retire_and_hand_over: bool = False


@dataclass
class HolderRecord:
    farm_id: int
    holder_age: int = 0
    holder_family_members: int = 0
    holder_successors_age: int = 0
    holder_gender: int = 1
    holder_successors: int = 0


# ─── Reference data ──────────────────────────────────────────────

@dataclass
class ProductGroupRef:
    id: int
    name: str
    organic: int = OrganicProductionType.UNDETERMINED
    model_specific_categories: list[str] = field(default_factory=list)

    @property
    def is_other(self) -> bool:
        return is_other_group(self.model_specific_categories)


@dataclass
class PolicyRef:
    """Policy with its product-group compensations: (product_group_id, compensation)."""
    id: int
    policy_identifier: str
    relations: list[tuple[int, float]] = field(default_factory=list)


# ─── SP engine output ────────────────────────────────────────────

@dataclass
class SPCrop:
    crop_productive_area: float = 0.0
    crop_variable_costs: float = 0.0
    quantity_sold: float = 0.0
    quantity_used: float = 0.0
    coupled_subsidy: float = 0.0
    uaa: float = 0.0
    crop_selling_price: float = 0.0
    rebreeding_cows: float = 0.0
    dairy_cows: float = 0.0


@dataclass
class SPSubsidy:
    policy_identifier: str
    value: float = 0.0


@dataclass
class SPFarmResult:
    """What the SP engine reports for one simulated farm."""
    farm_id: int
    total_current_assets: float = 0.0
    farm_net_income: float = 0.0
    farm_gross_income: float = 0.0
    agricultural_land: float = 0.0
    crops: dict[str, SPCrop] = field(default_factory=dict)
    subsidies: list[SPSubsidy] = field(default_factory=list)
    total_variable_costs: float = 0.0
    rent_balance_area: float = 0.0
    greening_surface: float = 0.0
    rented_in_lands: list[RentRecord] = field(default_factory=list)


R = TypeVar("R")


def record_from_row(record_type: type[R], row: Any, **overrides: Any) -> R:
    """Build a record from any object exposing the record's field names.

    Missing or None numeric attributes fall back to the record default.
    """
    values: dict[str, Any] = {}
    for f in fields(record_type):
        if f.name in overrides:
            values[f.name] = overrides[f.name]
            continue
        value = getattr(row, f.name, None)
        if value is not None:
            values[f.name] = value
    return record_type(**values)

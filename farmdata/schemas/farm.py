"""Farm Schemas — farms and their per-year holder, greening, closing and decision data.

Invariants:
    - Per-year payloads reference the year by id (years are population-scoped)
    - Counts and areas are non-negative; money fields are free-signed
"""

from pydantic import BaseModel, Field

from farmdata.core.domain_types import Altitude, Gender
from farmdata.schemas.base import ORMResponse


# ─── Farm ────────────────────────────────────────────────────────

class FarmCreate(BaseModel):
    farm_code: str = Field(min_length=1, max_length=64)
    lat: int = 0
    long: int = 0
    altitude: Altitude = Altitude.PLAINS
    region_level_1: str = ""
    region_level_1_name: str | None = None
    region_level_2: str = ""
    region_level_2_name: str | None = None
    region_level_3: int = 0
    region_level_3_name: str | None = None
    technical_economic_orientation: int = 0


class FarmResponse(FarmCreate, ORMResponse):
    id: int
    population_id: int


# ─── Holder ──────────────────────────────────────────────────────

class HolderDataCreate(BaseModel):
    year_id: int
    holder_age: int = Field(ge=0)
    holder_family_members: int = Field(0, ge=0)
    holder_successors: int = Field(0, ge=0)
    holder_successors_age: int = Field(0, ge=0)
    holder_gender: Gender = Gender.MALE


class HolderDataResponse(HolderDataCreate, ORMResponse):
    id: int
    farm_id: int


# ─── Greening ────────────────────────────────────────────────────

class GreeningCreate(BaseModel):
    year_id: int
    greening_surface: float = Field(0.0, ge=0)


class GreeningResponse(GreeningCreate, ORMResponse):
    id: int
    farm_id: int


# ─── Closing values ──────────────────────────────────────────────

class ClosingValueFields(BaseModel):
    agricultural_land_value: float = 0.0
    agricultural_land_area: float = Field(0.0, ge=0)
    land_improvements: float = 0.0
    plantations_value: float = 0.0
    forest_land_value: float = 0.0
    forest_land_area: float = Field(0.0, ge=0)
    farm_buildings_value: float = 0.0
    machinery_and_equipment: float = 0.0
    intangible_assets_tradable: float = 0.0
    intangible_assets_non_tradable: float = 0.0
    other_non_current_assets: float = 0.0
    long_and_medium_term_loans: float = 0.0
    total_current_assets: float = 0.0
    farm_net_income: float = 0.0
    gross_farm_income: float = 0.0
    subsidies_on_investments: float = 0.0
    vat_balance_on_investments: float = 0.0
    total_output_crops_and_crop_production: float = 0.0
    total_output_livestock_and_livestock_production: float = 0.0
    other_outputs: float = 0.0
    total_intermediate_consumption: float = 0.0
    taxes: float = 0.0
    vat_balance_excluding_investments: float = 0.0
    fixed_assets: float = 0.0
    depreciation: float = 0.0
    total_external_factors: float = 0.0
    machinery: float = 0.0
    rent_balance: float = 0.0


class ClosingValueCreate(ClosingValueFields):
    year_id: int


class ClosingValueResponse(ClosingValueCreate, ORMResponse):
    id: int
    farm_id: int


# ─── Agro-management decisions ───────────────────────────────────

class DecisionFields(BaseModel):
    agricultural_land_area: float = Field(0.0, ge=0)
    agricultural_land_value: float = 0.0
    long_and_medium_term_loans: float = 0.0
    total_current_assets: float = 0.0
    average_land_value: float = 0.0
    targeted_land_aquisition_area: float = 0.0
    targeted_land_aquisition_hectar_price: float = 0.0
    retire_and_hand_over: bool = False


class DecisionCreate(DecisionFields):
    year_id: int


class DecisionResponse(DecisionCreate, ORMResponse):
    id: int
    farm_id: int

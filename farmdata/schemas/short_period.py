"""Short Period Schemas — SP engine input data and SP result payloads.

Invariants:
    - SP results are converted to core records (to_record) before any processing
    - Crops are keyed by product group name; "MILK" carries the dairy herd
"""

from pydantic import BaseModel, Field

from farmdata.core.snapshots import RentRecord, SPCrop, SPFarmResult, SPSubsidy
from farmdata.schemas.policy import PolicyCreate, ProductGroupCreate


# ─── SP results (engine → farmdata) ──────────────────────────────

class SPCropIn(BaseModel):
    crop_productive_area: float = 0.0
    crop_variable_costs: float = 0.0
    quantity_sold: float = 0.0
    quantity_used: float = 0.0
    coupled_subsidy: float = 0.0
    uaa: float | None = None
    crop_selling_price: float | None = None
    rebreeding_cows: float | None = None
    dairy_cows: float | None = None

    def to_record(self) -> SPCrop:
        return SPCrop(
            crop_productive_area=self.crop_productive_area,
            crop_variable_costs=self.crop_variable_costs,
            quantity_sold=self.quantity_sold,
            quantity_used=self.quantity_used,
            coupled_subsidy=self.coupled_subsidy,
            uaa=self.uaa or 0.0,
            crop_selling_price=self.crop_selling_price or 0.0,
            rebreeding_cows=self.rebreeding_cows or 0.0,
            dairy_cows=self.dairy_cows or 0.0,
        )


class SPSubsidyIn(BaseModel):
    policy_identifier: str
    value: float = 0.0


class RentedInLand(BaseModel):
    origin_farm_id: int
    destination_farm_id: int
    rent_value: float = 0.0
    rent_area: float = 0.0


class SPResultIn(BaseModel):
    farm_id: int
    total_current_assets: float = 0.0
    farm_net_income: float = 0.0
    farm_gross_income: float = 0.0
    agricultural_land: float = 0.0
    crops: dict[str, SPCropIn] = Field(default_factory=dict)
    subsidies: list[SPSubsidyIn] = Field(default_factory=list)
    total_variable_costs: float = 0.0
    rent_balance_area: float = 0.0
    greening_surface: float = 0.0
    rented_in_lands: list[RentedInLand] = Field(default_factory=list)

    def to_record(self) -> SPFarmResult:
        return SPFarmResult(
            farm_id=self.farm_id,
            total_current_assets=self.total_current_assets,
            farm_net_income=self.farm_net_income,
            farm_gross_income=self.farm_gross_income,
            agricultural_land=self.agricultural_land,
            crops={name: crop.to_record() for name, crop in self.crops.items()},
            subsidies=[SPSubsidy(s.policy_identifier, s.value) for s in self.subsidies],
            total_variable_costs=self.total_variable_costs,
            rent_balance_area=self.rent_balance_area,
            greening_surface=self.greening_surface,
            rented_in_lands=[
                RentRecord(r.origin_farm_id, r.destination_farm_id, r.rent_value, r.rent_area)
                for r in self.rented_in_lands
            ],
        )


class IngestionSummary(BaseModel):
    population_id: int
    year: int
    farms: int
    simulated_farms: int
    regions: int
    closing_values: int
    agricultural_productions: int
    livestock_productions: int
    subsidies: int
    land_rents: int


# ─── SP input data (farmdata → engine) ───────────────────────────

class HolderInfo(BaseModel):
    holder_age: int
    holder_successors: int
    holder_successors_age: int
    holder_family_members: int
    holder_gender: str


class SPCropOut(BaseModel):
    uaa: float
    quantity_sold: float
    quantity_used: float
    crop_selling_price: float
    coupled_subsidy: float
    crop_variable_costs: float
    crop_productive_area: float
    rebreeding_cows: float
    dairy_cows: float


class SPLivestockOut(BaseModel):
    number_of_animals: float
    dairy_cows: int
    rebreeding_cows: float
    milk_production: float
    milk_selling_price: float
    variable_costs: float


class SPValueOut(BaseModel):
    farm_code: int
    holder_info: HolderInfo | None
    cod_ragr: str
    cod_ragr2: str
    cod_ragr3: int
    technical_economic_orientation: int
    altitude: int
    current_assets: float
    crops: dict[str, SPCropOut]
    livestock: SPLivestockOut
    greening_surface: float
    rented_in_lands: list[RentedInLand]


class PolicyJsonOut(PolicyCreate):
    population_id: int


class PolicyGroupRelationOut(BaseModel):
    population_id: int
    policy_identifier: str
    product_group_name: str
    economic_compensation: float


class FarmYearSubsidyOut(BaseModel):
    farm_id: int
    year_number: int
    policy_identifier: str
    value: float


class DataToSP(BaseModel):
    values: list[SPValueOut]
    product_groups: list[ProductGroupCreate]
    policies: list[PolicyJsonOut]
    policy_group_relations: list[PolicyGroupRelationOut]
    farm_year_subsidies: list[FarmYearSubsidyOut]

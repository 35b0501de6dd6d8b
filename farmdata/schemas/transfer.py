"""Transfer Schemas — the portable JSON tree of a population.

Invariants:
    - No database ids: farms are referenced by farm_code, years by year_number,
      product groups by name, policies by identifier
    - A land transaction names the year of the production it sells
      (production_year_number, by default the year before the transaction)

Design Decisions:
    - Per-year farm data reuses the field sets of the CRUD schemas, so the tree and
      the API can never disagree on a column
"""

from pydantic import BaseModel, Field

from farmdata.schemas.farm import ClosingValueFields, DecisionFields, FarmCreate
from farmdata.schemas.policy import FADNProductCreate, PolicyCreate, ProductGroupCreate
from farmdata.schemas.production import AgriculturalProductionFields, LivestockProductionFields
from farmdata.core.domain_types import Gender


class YearScoped(BaseModel):
    year_number: int


class AgriculturalProductionJson(AgriculturalProductionFields, YearScoped):
    product_name: str


class LivestockProductionJson(LivestockProductionFields, YearScoped):
    product_name: str


class HolderJson(YearScoped):
    holder_age: int = 0
    holder_family_members: int = 0
    holder_successors: int = 0
    holder_successors_age: int = 0
    holder_gender: Gender = Gender.MALE


class GreeningJson(YearScoped):
    greening_surface: float = 0.0


class ClosingValueJson(ClosingValueFields, YearScoped):
    pass


class DecisionJson(DecisionFields, YearScoped):
    pass


class SubsidyJson(YearScoped):
    policy_identifier: str
    value: float = 0.0


class FarmJson(FarmCreate):
    agricultural_productions: list[AgriculturalProductionJson] = Field(default_factory=list)
    livestock_productions: list[LivestockProductionJson] = Field(default_factory=list)
    holder_farm_year_data: list[HolderJson] = Field(default_factory=list)
    greening_farm_year_data: list[GreeningJson] = Field(default_factory=list)
    closing_values: list[ClosingValueJson] = Field(default_factory=list)
    farm_year_subsidies: list[SubsidyJson] = Field(default_factory=list)
    agro_management_decisions: list[DecisionJson] = Field(default_factory=list)


class ProductGroupJson(ProductGroupCreate):
    fadn_products: list[FADNProductCreate] = Field(default_factory=list)


class PolicyGroupRelationJson(BaseModel):
    policy_identifier: str
    product_group_name: str
    economic_compensation: float = 0.0


class LandRentJson(YearScoped):
    origin_farm_code: str
    destination_farm_code: str
    rent_value: float = 0.0
    rent_area: float = 0.0


class LandTransactionJson(YearScoped):
    product_group_name: str
    origin_farm_code: str
    destination_farm_code: str
    production_year_number: int | None = None
    percentage: float = Field(0.0, ge=0, le=1)
    sale_price: float = 0.0


class PopulationJson(BaseModel):
    description: str = ""
    year_numbers: list[int] = Field(default_factory=list)
    farms: list[FarmJson] = Field(default_factory=list)
    product_groups: list[ProductGroupJson] = Field(default_factory=list)
    policies: list[PolicyCreate] = Field(default_factory=list)
    policy_group_relations: list[PolicyGroupRelationJson] = Field(default_factory=list)
    land_rents: list[LandRentJson] = Field(default_factory=list)
    land_transactions: list[LandTransactionJson] = Field(default_factory=list)


class SyntheticPopulationJson(BaseModel):
    name: str = ""
    description: str = ""
    year_number: int
    population: PopulationJson = Field(default_factory=PopulationJson)

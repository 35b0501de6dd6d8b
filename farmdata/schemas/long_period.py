"""Long Period Schemas — LP engine input data and LP result payloads."""

from pydantic import BaseModel, Field

from farmdata.schemas.farm import DecisionFields, DecisionResponse
from farmdata.schemas.land import LandRentResponse, LandTransactionCreate, LandTransactionResponse
from farmdata.schemas.production import AgriculturalProductionResponse
from farmdata.schemas.short_period import (
    FarmYearSubsidyOut, PolicyGroupRelationOut, PolicyJsonOut,
)
from farmdata.core.domain_types import Gender


class AgentHolder(BaseModel):
    year_number: int
    holder_age: int
    holder_family_members: int
    holder_successors: int
    holder_successors_age: int
    holder_gender: Gender


class LPValueOut(BaseModel):
    farm_id: int
    year_id: int
    se465: float
    se420: float
    se410: float
    se490: float
    agricultural_land_value: float
    agricultural_land_area: float
    average_ha_price: float
    aversion_risk_factor: float
    agent_holder: AgentHolder | None
    agent_subsidies: list[FarmYearSubsidyOut]
    region_level_3: int


class DataToLP(BaseModel):
    values: list[LPValueOut]
    agricultural_productions: list[AgriculturalProductionResponse]
    policies: list[PolicyJsonOut]
    policy_group_relations: list[PolicyGroupRelationOut]
    rent_operations: list[LandRentResponse]
    ignore_lp: bool
    ignore_lmm: bool


class DecisionIn(DecisionFields):
    farm_id: int
    year_id: int


class LPResultsIn(BaseModel):
    agro_management_decisions: list[DecisionIn] = Field(default_factory=list)
    land_transactions: list[LandTransactionCreate] = Field(default_factory=list)
    error_list: list[int] = Field(default_factory=list)


class LPResultsOut(BaseModel):
    agro_management_decisions: list[DecisionResponse]
    land_transactions: list[LandTransactionResponse]

"""Policy Schemas — policies, product groups, their relations, FADN products and subsidies.

Invariants:
    - A policy's start year is not after its end year
    - model_specific_categories are stripped; empty entries are dropped
"""

from pydantic import BaseModel, Field, field_validator, model_validator

from farmdata.core.domain_types import OrganicProductionType, ProductType
from farmdata.schemas.base import ORMResponse


# ─── Policies ────────────────────────────────────────────────────

class PolicyCreate(BaseModel):
    policy_identifier: str = Field(min_length=1, max_length=128)
    policy_description: str = ""
    is_coupled: bool = False
    economic_compensation: float = 0.0
    model_label: str | None = None
    start_year_number: int = 0
    end_year_number: int = 0

    @model_validator(mode="after")
    def check_year_window(self):
        if self.start_year_number > self.end_year_number:
            raise ValueError("start_year_number must not be after end_year_number")
        return self


class PolicyResponse(PolicyCreate, ORMResponse):
    id: int
    population_id: int


# ─── Product groups ──────────────────────────────────────────────

class ProductGroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    product_type: ProductType = ProductType.AGRICULTURAL
    original_name_datasource: str | None = None
    products_included_in_original_dataset: str | None = None
    organic: OrganicProductionType = OrganicProductionType.UNDETERMINED
    model_specific_categories: list[str] = Field(default_factory=list)

    @field_validator("model_specific_categories")
    @classmethod
    def clean_categories(cls, v: list[str]) -> list[str]:
        return [c.strip() for c in v if c and c.strip()]


class ProductGroupResponse(ProductGroupCreate, ORMResponse):
    id: int
    population_id: int


class ArableUpdateSummary(BaseModel):
    product_groups: int
    arable: list[str]


# ─── Policy-group relations ──────────────────────────────────────

class PolicyGroupRelationCreate(BaseModel):
    policy_id: int
    product_group_id: int
    economic_compensation: float = 0.0


class PolicyGroupRelationResponse(PolicyGroupRelationCreate, ORMResponse):
    id: int
    population_id: int


# ─── FADN ────────────────────────────────────────────────────────

class FADNProductCreate(BaseModel):
    fadn_identifier: str = Field(min_length=1, max_length=64)
    description: str = ""
    product_type: ProductType = ProductType.AGRICULTURAL
    arable: bool = False


class FADNProductResponse(FADNProductCreate, ORMResponse):
    id: int


class FADNImportSummary(BaseModel):
    created: int
    updated: int


class FADNProductRelationCreate(BaseModel):
    product_group_id: int
    fadn_product_id: int
    representativeness_occurrence: float = 0.0
    representativeness_area: float = 0.0
    representativeness_value: float = 0.0


class FADNProductRelationResponse(FADNProductRelationCreate, ORMResponse):
    id: int
    population_id: int


# ─── Subsidies ───────────────────────────────────────────────────

class FarmYearSubsidyCreate(BaseModel):
    year_id: int
    policy_id: int
    value: float = 0.0


class FarmYearSubsidyResponse(FarmYearSubsidyCreate, ORMResponse):
    id: int
    farm_id: int

"""Production Schemas — agricultural and livestock productions of a farm-year."""

from pydantic import BaseModel, Field

from farmdata.core.domain_types import OrganicProductionType
from farmdata.schemas.base import ORMResponse


class AgriculturalProductionFields(BaseModel):
    organic_production_type: OrganicProductionType = OrganicProductionType.UNDETERMINED
    cultivated_area: float = Field(0.0, ge=0)
    irrigated_area: float = Field(0.0, ge=0)
    crop_production: float = 0.0
    quantity_sold: float = Field(0.0, ge=0)
    quantity_used: float = Field(0.0, ge=0)
    value_sales: float = 0.0
    variable_costs: float = 0.0
    land_value: float = 0.0
    selling_price: float = 0.0


class AgriculturalProductionCreate(AgriculturalProductionFields):
    year_id: int
    product_group_id: int


class AgriculturalProductionResponse(AgriculturalProductionCreate, ORMResponse):
    id: int
    farm_id: int


class LivestockProductionFields(BaseModel):
    number_of_animals: float = Field(0.0, ge=0)
    dairy_cows: int = Field(0, ge=0)
    number_of_animals_sold: int = Field(0, ge=0)
    value_sold_animals: float = 0.0
    number_animals_for_slaughtering: int = Field(0, ge=0)
    value_slaughtered_animals: float = 0.0
    number_animals_rearing_breading: float = Field(0.0, ge=0)
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


class LivestockProductionCreate(LivestockProductionFields):
    year_id: int
    product_group_id: int


class LivestockProductionResponse(LivestockProductionCreate, ORMResponse):
    id: int
    farm_id: int

"""Land Schemas — land rents and land transactions between farms."""

from pydantic import BaseModel, Field, model_validator

from farmdata.schemas.base import ORMResponse


class LandRentCreate(BaseModel):
    origin_farm_id: int
    destination_farm_id: int
    year_id: int
    rent_value: float = 0.0
    rent_area: float = Field(0.0, ge=0)

    @model_validator(mode="after")
    def check_parties(self):
        if self.origin_farm_id == self.destination_farm_id:
            raise ValueError("a farm cannot rent land to itself")
        return self


class LandRentResponse(LandRentCreate, ORMResponse):
    id: int


class LandTransactionCreate(BaseModel):
    production_id: int
    destination_farm_id: int
    year_id: int
    percentage: float = Field(ge=0, le=1)
    sale_price: float = 0.0


class LandTransactionResponse(LandTransactionCreate, ORMResponse):
    id: int

"""Population Schemas — populations and their years."""

from pydantic import BaseModel, Field, field_validator

from farmdata.schemas.base import ORMResponse


class PopulationCreate(BaseModel):
    description: str = Field("", max_length=10_000)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return v.strip()


class PopulationResponse(ORMResponse):
    id: int
    description: str


class YearCreate(BaseModel):
    year_number: int = Field(ge=0)


class YearResponse(ORMResponse):
    id: int
    year_number: int
    population_id: int

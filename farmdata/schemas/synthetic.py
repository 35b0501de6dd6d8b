"""Synthetic Population Schemas."""

from pydantic import BaseModel, Field

from farmdata.schemas.base import ORMResponse


class SyntheticPopulationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    population_id: int
    year_id: int


class SyntheticPopulationUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class SyntheticPopulationResponse(SyntheticPopulationCreate, ORMResponse):
    id: int

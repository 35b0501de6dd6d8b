"""Synthetic Populations — reusable baseline populations, their copies and JSON transfer."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings, get_settings
from farmdata.infrastructure.database import get_db
from farmdata.models import Population, SyntheticPopulation
from farmdata.schemas.synthetic import (
    SyntheticPopulationCreate, SyntheticPopulationResponse, SyntheticPopulationUpdate,
)
from farmdata.schemas.transfer import SyntheticPopulationJson
from farmdata.services.farm_year_data import get_or_404, get_year_of_population
from farmdata.services.population_duplication import duplicate_synthetic_population
from farmdata.services.population_transfer import (
    export_synthetic_population, import_synthetic_population,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/synthetic-populations", tags=["synthetic-populations"])


@router.post("", response_model=SyntheticPopulationResponse, status_code=status.HTTP_201_CREATED)
async def create_synthetic_population(
    body: SyntheticPopulationCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, body.population_id)
    await get_year_of_population(db, body.population_id, body.year_id)
    synthetic = SyntheticPopulation(**body.model_dump())
    db.add(synthetic)
    await db.commit()
    await db.refresh(synthetic)
    return synthetic


@router.get("", response_model=list[SyntheticPopulationResponse])
async def list_synthetic_populations(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(SyntheticPopulation).order_by(SyntheticPopulation.id))
    return result.scalars().all()


@router.post("/import", response_model=SyntheticPopulationResponse, status_code=status.HTTP_201_CREATED)
async def import_synthetic(body: SyntheticPopulationJson, db: AsyncSession = Depends(get_db)):
    return await import_synthetic_population(db, body)


@router.get("/{synthetic_population_id}", response_model=SyntheticPopulationResponse)
async def get_synthetic_population(
    synthetic_population_id: int, db: AsyncSession = Depends(get_db),
):
    return await get_or_404(db, SyntheticPopulation, synthetic_population_id)


@router.patch("/{synthetic_population_id}", response_model=SyntheticPopulationResponse)
async def update_synthetic_population(
    synthetic_population_id: int,
    body: SyntheticPopulationUpdate,
    db: AsyncSession = Depends(get_db),
):
    synthetic = await get_or_404(db, SyntheticPopulation, synthetic_population_id)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(synthetic, field, value)
    await db.commit()
    await db.refresh(synthetic)
    return synthetic


@router.delete("/{synthetic_population_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_synthetic_population(
    synthetic_population_id: int, db: AsyncSession = Depends(get_db),
):
    """Delete the synthetic population together with its population."""
    synthetic = await get_or_404(db, SyntheticPopulation, synthetic_population_id)
    population = await get_or_404(db, Population, synthetic.population_id)
    await db.delete(population)
    await db.commit()
    logger.info(
        "Synthetic population deleted", extra={"population_id": synthetic.population_id},
    )


@router.post(
    "/{synthetic_population_id}/duplicate", response_model=SyntheticPopulationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate(
    synthetic_population_id: int,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await duplicate_synthetic_population(db, synthetic_population_id, settings)


@router.get("/{synthetic_population_id}/export", response_model=SyntheticPopulationJson)
async def export_synthetic(synthetic_population_id: int, db: AsyncSession = Depends(get_db)):
    return await export_synthetic_population(db, synthetic_population_id)

"""Populations — population and year CRUD, JSON export/import and income recomputation.

Invariants:
    - A year number is unique inside its population (409 on duplicates)
    - Deleting a population deletes everything it owns
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.infrastructure.database import get_db
from farmdata.models import Population, Year
from farmdata.schemas.population import (
    PopulationCreate, PopulationResponse, YearCreate, YearResponse,
)
from farmdata.schemas.transfer import PopulationJson
from farmdata.services.farm_year_data import ensure_unique, get_farms, get_or_404
from farmdata.services.income_margin import recompute_income_and_margin
from farmdata.services.population_transfer import export_population, import_population

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/populations", tags=["populations"])


@router.post("", response_model=PopulationResponse, status_code=status.HTTP_201_CREATED)
async def create_population(body: PopulationCreate, db: AsyncSession = Depends(get_db)):
    population = Population(description=body.description)
    db.add(population)
    await db.commit()
    await db.refresh(population)
    return population


@router.get("", response_model=list[PopulationResponse])
async def list_populations(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Population).order_by(Population.id))
    return result.scalars().all()


@router.post("/import", response_model=PopulationResponse, status_code=status.HTTP_201_CREATED)
async def import_population_tree(body: PopulationJson, db: AsyncSession = Depends(get_db)):
    """Create a new population from an exported JSON tree."""
    return await import_population(db, body)


@router.get("/{population_id}", response_model=PopulationResponse)
async def get_population(population_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Population, population_id)


@router.delete("/{population_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_population(population_id: int, db: AsyncSession = Depends(get_db)):
    population = await get_or_404(db, Population, population_id)
    await db.delete(population)
    await db.commit()
    logger.info("Population deleted", extra={"population_id": population_id})


@router.get("/{population_id}/export", response_model=PopulationJson)
async def export_population_tree(
    population_id: int,
    limit: int | None = Query(None, ge=1),
    after_farm_id: int | None = Query(None, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Population JSON tree; limit / after_farm_id page over farms."""
    return await export_population(db, population_id, limit, after_farm_id)


# ─── Years ───────────────────────────────────────────────────────

@router.post(
    "/{population_id}/years", response_model=YearResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_year(
    population_id: int, body: YearCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, population_id)
    await ensure_unique(
        db, Year, "Year", year_number=body.year_number, population_id=population_id,
    )
    year = Year(year_number=body.year_number, population_id=population_id)
    db.add(year)
    await db.commit()
    await db.refresh(year)
    return year


@router.get("/{population_id}/years", response_model=list[YearResponse])
async def list_years(population_id: int, db: AsyncSession = Depends(get_db)):
    await get_or_404(db, Population, population_id)
    result = await db.execute(
        select(Year).where(Year.population_id == population_id).order_by(Year.year_number),
    )
    return result.scalars().all()


# ─── Income & margin ─────────────────────────────────────────────

@router.post("/{population_id}/income-margin")
async def recompute_population_income(
    population_id: int,
    year: int | None = Query(None, description="Year number; every year when omitted"),
    db: AsyncSession = Depends(get_db),
):
    """Recompute gross farm income and farm net income from stored year data."""
    await get_or_404(db, Population, population_id)
    farms = await get_farms(db, population_id)
    updated = await recompute_income_and_margin(
        db, [f.id for f in farms], [year] if year is not None else None,
    )
    await db.commit()
    return {"population_id": population_id, "closing_values_updated": updated}

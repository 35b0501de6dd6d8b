"""Farms — farm CRUD and per-year holder, greening, closing value and decision data.

Invariants:
    - farm_code is unique inside a population (409 on duplicates)
    - Per-year rows are unique per (farm, year); the year must belong to the farm's
      population (404 otherwise)
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.infrastructure.database import get_db
from farmdata.models import (
    AgroManagementDecision, ClosingValFarmValue, Farm, GreeningFarmYearData,
    HolderFarmYearData, Population,
)
from farmdata.schemas.farm import (
    ClosingValueCreate, ClosingValueResponse, DecisionCreate, DecisionResponse,
    FarmCreate, FarmResponse, GreeningCreate, GreeningResponse, HolderDataCreate,
    HolderDataResponse,
)
from farmdata.services.farm_year_data import ensure_unique, get_or_404, get_year_of_population

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["farms"])


@router.post(
    "/populations/{population_id}/farms", response_model=FarmResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_farm(
    population_id: int, body: FarmCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, population_id)
    await ensure_unique(db, Farm, "Farm", farm_code=body.farm_code, population_id=population_id)
    farm = Farm(population_id=population_id, **body.model_dump())
    db.add(farm)
    await db.commit()
    await db.refresh(farm)
    return farm


@router.get("/populations/{population_id}/farms", response_model=list[FarmResponse])
async def list_farms(
    population_id: int,
    region_level_3: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, population_id)
    stmt = select(Farm).where(Farm.population_id == population_id).order_by(Farm.id)
    if region_level_3 is not None:
        stmt = stmt.where(Farm.region_level_3 == region_level_3)
    return (await db.execute(stmt)).scalars().all()


@router.get("/farms/{farm_id}", response_model=FarmResponse)
async def get_farm(farm_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Farm, farm_id)


@router.delete("/farms/{farm_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_farm(farm_id: int, db: AsyncSession = Depends(get_db)):
    farm = await get_or_404(db, Farm, farm_id)
    await db.delete(farm)
    await db.commit()


# ─── Per-year farm data ──────────────────────────────────────────

async def add_farm_year_row(
    db: AsyncSession, farm_id: int, model, entity: str, body: BaseModel, **key,
):
    """Insert a per-year row for a farm after parent and uniqueness checks."""
    farm = await get_or_404(db, Farm, farm_id)
    await get_year_of_population(db, farm.population_id, body.year_id)
    await ensure_unique(db, model, entity, farm_id=farm_id, year_id=body.year_id, **key)
    row = model(farm_id=farm_id, **body.model_dump())
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def list_farm_year_rows(db: AsyncSession, farm_id: int, model, year_id: int | None):
    await get_or_404(db, Farm, farm_id)
    stmt = select(model).where(model.farm_id == farm_id).order_by(model.year_id)
    if year_id is not None:
        stmt = stmt.where(model.year_id == year_id)
    return (await db.execute(stmt)).scalars().all()


@router.post(
    "/farms/{farm_id}/holder-data", response_model=HolderDataResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_holder_data(
    farm_id: int, body: HolderDataCreate, db: AsyncSession = Depends(get_db),
):
    return await add_farm_year_row(db, farm_id, HolderFarmYearData, "Holder data", body)


@router.get("/farms/{farm_id}/holder-data", response_model=list[HolderDataResponse])
async def list_holder_data(
    farm_id: int, year_id: int | None = Query(None), db: AsyncSession = Depends(get_db),
):
    return await list_farm_year_rows(db, farm_id, HolderFarmYearData, year_id)


@router.post(
    "/farms/{farm_id}/greening", response_model=GreeningResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_greening(
    farm_id: int, body: GreeningCreate, db: AsyncSession = Depends(get_db),
):
    return await add_farm_year_row(db, farm_id, GreeningFarmYearData, "Greening data", body)


@router.get("/farms/{farm_id}/greening", response_model=list[GreeningResponse])
async def list_greening(
    farm_id: int, year_id: int | None = Query(None), db: AsyncSession = Depends(get_db),
):
    return await list_farm_year_rows(db, farm_id, GreeningFarmYearData, year_id)


@router.post(
    "/farms/{farm_id}/closing-values", response_model=ClosingValueResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_closing_value(
    farm_id: int, body: ClosingValueCreate, db: AsyncSession = Depends(get_db),
):
    return await add_farm_year_row(db, farm_id, ClosingValFarmValue, "Closing value", body)


@router.get("/farms/{farm_id}/closing-values", response_model=list[ClosingValueResponse])
async def list_closing_values(
    farm_id: int, year_id: int | None = Query(None), db: AsyncSession = Depends(get_db),
):
    return await list_farm_year_rows(db, farm_id, ClosingValFarmValue, year_id)


@router.post(
    "/farms/{farm_id}/decisions", response_model=DecisionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_decision(
    farm_id: int, body: DecisionCreate, db: AsyncSession = Depends(get_db),
):
    return await add_farm_year_row(
        db, farm_id, AgroManagementDecision, "Agro-management decision", body,
    )


@router.get("/farms/{farm_id}/decisions", response_model=list[DecisionResponse])
async def list_decisions(
    farm_id: int, year_id: int | None = Query(None), db: AsyncSession = Depends(get_db),
):
    return await list_farm_year_rows(db, farm_id, AgroManagementDecision, year_id)

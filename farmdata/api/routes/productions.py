"""Productions — agricultural and livestock productions of a farm-year.

Invariants:
    - A production is unique per (farm, product group, year) (409 on duplicates)
    - Its product group and year belong to the farm's population (404 otherwise)
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.api.routes.farms import add_farm_year_row, list_farm_year_rows
from farmdata.core.errors import ResourceNotFoundError
from farmdata.infrastructure.database import get_db
from farmdata.models import AgriculturalProduction, Farm, LivestockProduction, ProductGroup
from farmdata.schemas.production import (
    AgriculturalProductionCreate, AgriculturalProductionResponse,
    LivestockProductionCreate, LivestockProductionResponse,
)
from farmdata.services.farm_year_data import get_or_404

router = APIRouter(prefix="/api/v1", tags=["productions"])


async def _check_product_group(db: AsyncSession, farm_id: int, product_group_id: int) -> None:
    farm = await get_or_404(db, Farm, farm_id)
    group = await db.get(ProductGroup, product_group_id)
    if group is None or group.population_id != farm.population_id:
        raise ResourceNotFoundError("ProductGroup", product_group_id)


@router.post(
    "/farms/{farm_id}/agricultural-productions",
    response_model=AgriculturalProductionResponse, status_code=status.HTTP_201_CREATED,
)
async def add_agricultural_production(
    farm_id: int, body: AgriculturalProductionCreate, db: AsyncSession = Depends(get_db),
):
    await _check_product_group(db, farm_id, body.product_group_id)
    return await add_farm_year_row(
        db, farm_id, AgriculturalProduction, "Agricultural production", body,
        product_group_id=body.product_group_id,
    )


@router.get(
    "/farms/{farm_id}/agricultural-productions",
    response_model=list[AgriculturalProductionResponse],
)
async def list_agricultural_productions(
    farm_id: int, year_id: int | None = Query(None), db: AsyncSession = Depends(get_db),
):
    return await list_farm_year_rows(db, farm_id, AgriculturalProduction, year_id)


@router.delete(
    "/agricultural-productions/{production_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_agricultural_production(production_id: int, db: AsyncSession = Depends(get_db)):
    production = await get_or_404(db, AgriculturalProduction, production_id)
    await db.delete(production)
    await db.commit()


@router.post(
    "/farms/{farm_id}/livestock-productions",
    response_model=LivestockProductionResponse, status_code=status.HTTP_201_CREATED,
)
async def add_livestock_production(
    farm_id: int, body: LivestockProductionCreate, db: AsyncSession = Depends(get_db),
):
    await _check_product_group(db, farm_id, body.product_group_id)
    return await add_farm_year_row(
        db, farm_id, LivestockProduction, "Livestock production", body,
        product_group_id=body.product_group_id,
    )


@router.get(
    "/farms/{farm_id}/livestock-productions",
    response_model=list[LivestockProductionResponse],
)
async def list_livestock_productions(
    farm_id: int, year_id: int | None = Query(None), db: AsyncSession = Depends(get_db),
):
    return await list_farm_year_rows(db, farm_id, LivestockProduction, year_id)


@router.delete(
    "/livestock-productions/{production_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_livestock_production(production_id: int, db: AsyncSession = Depends(get_db)):
    production = await get_or_404(db, LivestockProduction, production_id)
    await db.delete(production)
    await db.commit()

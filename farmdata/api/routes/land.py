"""Land — land rents and land transactions between farms of one population.

Invariants:
    - Both parties of a rent, and the seller and buyer of a transaction, belong to the
      population of the year (404 otherwise)
    - Rents are unique per (origin, destination, year); transactions per
      (production, destination, year)
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.core.errors import ResourceNotFoundError
from farmdata.infrastructure.database import get_db
from farmdata.models import AgriculturalProduction, Farm, LandRent, LandTransaction, Population, Year
from farmdata.schemas.land import (
    LandRentCreate, LandRentResponse, LandTransactionCreate, LandTransactionResponse,
)
from farmdata.services.farm_year_data import ensure_unique, get_or_404, get_year_of_population

router = APIRouter(prefix="/api/v1", tags=["land"])


async def _farm_of_population(db: AsyncSession, farm_id: int, population_id: int) -> Farm:
    farm = await db.get(Farm, farm_id)
    if farm is None or farm.population_id != population_id:
        raise ResourceNotFoundError("Farm", farm_id)
    return farm


async def _year_ids(db: AsyncSession, population_id: int, year_number: int | None) -> list[int]:
    await get_or_404(db, Population, population_id)
    stmt = select(Year.id).where(Year.population_id == population_id)
    if year_number is not None:
        stmt = stmt.where(Year.year_number == year_number)
    return list((await db.execute(stmt)).scalars().all())


@router.post("/land-rents", response_model=LandRentResponse, status_code=status.HTTP_201_CREATED)
async def create_land_rent(body: LandRentCreate, db: AsyncSession = Depends(get_db)):
    origin = await get_or_404(db, Farm, body.origin_farm_id)
    await _farm_of_population(db, body.destination_farm_id, origin.population_id)
    await get_year_of_population(db, origin.population_id, body.year_id)
    await ensure_unique(
        db, LandRent, "Land rent",
        origin_farm_id=body.origin_farm_id, destination_farm_id=body.destination_farm_id,
        year_id=body.year_id,
    )
    rent = LandRent(**body.model_dump())
    db.add(rent)
    await db.commit()
    await db.refresh(rent)
    return rent


@router.get("/populations/{population_id}/land-rents", response_model=list[LandRentResponse])
async def list_land_rents(
    population_id: int,
    year: int | None = Query(None, description="Year number"),
    db: AsyncSession = Depends(get_db),
):
    year_ids = await _year_ids(db, population_id, year)
    if not year_ids:
        return []
    result = await db.execute(
        select(LandRent).where(LandRent.year_id.in_(year_ids)).order_by(LandRent.id),
    )
    return result.scalars().all()


@router.delete("/land-rents/{rent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_land_rent(rent_id: int, db: AsyncSession = Depends(get_db)):
    rent = await get_or_404(db, LandRent, rent_id)
    await db.delete(rent)
    await db.commit()


@router.post(
    "/land-transactions", response_model=LandTransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_land_transaction(body: LandTransactionCreate, db: AsyncSession = Depends(get_db)):
    production = await get_or_404(db, AgriculturalProduction, body.production_id)
    seller = await get_or_404(db, Farm, production.farm_id)
    await _farm_of_population(db, body.destination_farm_id, seller.population_id)
    await get_year_of_population(db, seller.population_id, body.year_id)
    await ensure_unique(
        db, LandTransaction, "Land transaction",
        production_id=body.production_id, destination_farm_id=body.destination_farm_id,
        year_id=body.year_id,
    )
    transaction = LandTransaction(**body.model_dump())
    db.add(transaction)
    await db.commit()
    await db.refresh(transaction)
    return transaction


@router.get(
    "/populations/{population_id}/land-transactions",
    response_model=list[LandTransactionResponse],
)
async def list_land_transactions(
    population_id: int,
    year: int | None = Query(None, description="Year number"),
    db: AsyncSession = Depends(get_db),
):
    year_ids = await _year_ids(db, population_id, year)
    if not year_ids:
        return []
    result = await db.execute(
        select(LandTransaction)
        .where(LandTransaction.year_id.in_(year_ids))
        .order_by(LandTransaction.id),
    )
    return result.scalars().all()


@router.delete("/land-transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_land_transaction(transaction_id: int, db: AsyncSession = Depends(get_db)):
    transaction = await get_or_404(db, LandTransaction, transaction_id)
    await db.delete(transaction)
    await db.commit()

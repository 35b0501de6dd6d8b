"""Short Period — SP engine input data and SP result ingestion."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings, get_settings
from farmdata.infrastructure.database import get_db
from farmdata.schemas.short_period import DataToSP, IngestionSummary, SPResultIn
from farmdata.services.short_period_data import get_short_period_data
from farmdata.services.short_period_ingestion import ingest_short_period_results

router = APIRouter(prefix="/api/v1", tags=["short-period"])


@router.put(
    "/results/shortperiod/simulation", response_model=IngestionSummary,
    status_code=status.HTTP_201_CREATED,
)
async def add_short_period_results(
    body: list[SPResultIn],
    year: int = Query(..., description="Year number the SP results belong to"),
    simulation_run_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Reconcile SP results with the previous year and store the year's farm data."""
    return await ingest_short_period_results(
        db, [r.to_record() for r in body], year, settings, simulation_run_id,
    )


@router.get(
    "/populations/{population_id}/calibrationdata/shortperiod", response_model=DataToSP,
)
async def get_calibration_data(
    population_id: int,
    year: int = Query(..., description="Year number to calibrate"),
    db: AsyncSession = Depends(get_db),
):
    return await get_short_period_data(db, population_id, year, simulation=False)


@router.get(
    "/populations/{population_id}/simulationdata/shortperiod", response_model=DataToSP,
)
async def get_simulation_data(
    population_id: int,
    year: int = Query(..., description="Year number to simulate"),
    db: AsyncSession = Depends(get_db),
):
    return await get_short_period_data(db, population_id, year, simulation=True)

"""Long Period — LP engine input data and LP result ingestion."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings, get_settings
from farmdata.infrastructure.database import get_db
from farmdata.schemas.long_period import DataToLP, LPResultsIn, LPResultsOut
from farmdata.services.long_period import add_long_period_results, get_long_period_data

router = APIRouter(prefix="/api/v1", tags=["long-period"])


@router.get("/populations/{population_id}/simulationdata/longperiod", response_model=DataToLP)
async def get_lp_data(
    population_id: int,
    year: int = Query(..., description="Year number to simulate"),
    ignore_lp: bool = Query(False),
    ignore_lmm: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await get_long_period_data(db, population_id, year, settings, ignore_lp, ignore_lmm)


@router.post(
    "/results/longperiod", response_model=LPResultsOut, status_code=status.HTTP_201_CREATED,
)
async def add_lp_results(body: LPResultsIn, db: AsyncSession = Depends(get_db)):
    """Store LP decisions and land transactions; advance holder data to the year."""
    return await add_long_period_results(db, body)

"""Simulations — scenarios, their runs and the runs' log messages.

Invariants:
    - Creating a scenario copies its synthetic population and dispatches the scenario
      to the simulation manager when one is configured
    - Cascade deletion of a scenario also deletes its population copy
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings, get_settings
from farmdata.infrastructure.database import get_db
from farmdata.models import LogMessage, Population, SimulationRun, SimulationScenario
from farmdata.schemas.simulation import (
    LogMessageCreate, LogMessageResponse, RunCreate, RunProgress, RunResponse,
    ScenarioCreate, ScenarioCreatedResponse, ScenarioWithRunsResponse,
)
from farmdata.services.farm_year_data import get_or_404
from farmdata.services.simulation_tasks import create_scenario

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["simulations"])


# ─── Scenarios ───────────────────────────────────────────────────

@router.post(
    "/scenarios", response_model=ScenarioCreatedResponse, status_code=status.HTTP_201_CREATED,
)
async def add_scenario(
    body: ScenarioCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await create_scenario(db, body, settings)


@router.get("/scenarios", response_model=list[ScenarioWithRunsResponse])
async def list_scenarios(
    population_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(SimulationScenario).order_by(SimulationScenario.id)
    if population_id is not None:
        stmt = stmt.where(SimulationScenario.population_id == population_id)
    return (await db.execute(stmt)).scalars().all()


@router.get("/scenarios/{scenario_id}", response_model=ScenarioWithRunsResponse)
async def get_scenario(scenario_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, SimulationScenario, scenario_id)


@router.delete("/scenarios/{scenario_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_scenario(
    scenario_id: int,
    cascade: bool = Query(False, description="Also delete the scenario's population copy"),
    db: AsyncSession = Depends(get_db),
):
    scenario = await get_or_404(db, SimulationScenario, scenario_id)
    if cascade:
        await db.delete(await get_or_404(db, Population, scenario.population_id))
    else:
        await db.delete(scenario)
    await db.commit()
    logger.info(
        "Scenario %d deleted (cascade=%s)", scenario_id, cascade,
        extra={"population_id": scenario.population_id},
    )


# ─── Runs ────────────────────────────────────────────────────────

@router.post("/runs", response_model=RunResponse, status_code=status.HTTP_201_CREATED)
async def add_run(body: RunCreate, db: AsyncSession = Depends(get_db)):
    await get_or_404(db, SimulationScenario, body.simulation_scenario_id)
    run = SimulationRun(**body.model_dump())
    db.add(run)
    await db.commit()
    await db.refresh(run)
    return run


@router.get("/runs/{run_id}", response_model=RunResponse)
async def get_run(run_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, SimulationRun, run_id)


@router.put("/runs/{run_id}/progress", response_model=RunResponse)
async def update_run_progress(
    run_id: int, body: RunProgress, db: AsyncSession = Depends(get_db),
):
    run = await get_or_404(db, SimulationRun, run_id)
    for field, value in body.model_dump().items():
        setattr(run, field, value)
    await db.commit()
    await db.refresh(run)
    return run


@router.delete("/runs/{run_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_run(run_id: int, db: AsyncSession = Depends(get_db)):
    run = await get_or_404(db, SimulationRun, run_id)
    await db.delete(run)
    await db.commit()


# ─── Log messages ────────────────────────────────────────────────

@router.post(
    "/runs/{run_id}/log-messages", response_model=LogMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_log_message(
    run_id: int, body: LogMessageCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, SimulationRun, run_id)
    message = LogMessage(simulation_run_id=run_id, **body.model_dump())
    db.add(message)
    await db.commit()
    await db.refresh(message)
    return message


@router.get("/runs/{run_id}/log-messages", response_model=list[LogMessageResponse])
async def list_log_messages(
    run_id: int,
    min_level: int = Query(0, ge=0, description="Lowest log level returned"),
    db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, SimulationRun, run_id)
    result = await db.execute(
        select(LogMessage)
        .where(LogMessage.simulation_run_id == run_id, LogMessage.log_level >= min_level)
        .order_by(LogMessage.time_stamp, LogMessage.id),
    )
    return result.scalars().all()

"""Simulation Tasks — scenario creation on a population copy and dispatch to the manager.

Invariants:
    - A scenario always runs on its own copy of the synthetic population
    - If any additional policy or coupled compensation cannot be added, nothing of the
      copy is kept and ScenarioCreationError (500) is raised
    - A stored scenario stays stored when dispatch fails; the failure is reported in
      the response and logged
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings
from farmdata.core.errors import ErrorContext, ScenarioCreationError, SimulationManagerError
from farmdata.infrastructure.simulation_manager_client import SimulationManagerClient
from farmdata.models import Policy, PolicyGroupRelation, ProductGroup, SimulationScenario
from farmdata.schemas.simulation import AdditionalPolicy, ScenarioCreate, ScenarioCreatedResponse
from farmdata.services.population_duplication import duplicate_for_simulation

logger = logging.getLogger(__name__)


async def _add_policies(
    db: AsyncSession, population_id: int, policies: list[AdditionalPolicy],
) -> None:
    groups = {
        g.name: g.id
        for g in (await db.execute(
            select(ProductGroup).where(ProductGroup.population_id == population_id),
        )).scalars().all()
    }
    existing = set((await db.execute(
        select(Policy.policy_identifier).where(Policy.population_id == population_id),
    )).scalars().all())
    for p in policies:
        if p.policy_identifier in existing:
            raise ScenarioCreationError(
                f"Additional policy {p.policy_identifier!r} already exists in the population",
            )
        existing.add(p.policy_identifier)
        policy = Policy(
            population_id=population_id,
            **p.model_dump(exclude={"coupled_compensations"}),
        )
        db.add(policy)
        await db.flush()
        if not policy.is_coupled:
            continue
        for compensation in p.coupled_compensations:
            group_id = groups.get(compensation.product_group)
            if group_id is None:
                raise ScenarioCreationError(
                    f"Unknown product group {compensation.product_group!r} "
                    f"in coupled compensation of {p.policy_identifier!r}",
                )
            db.add(PolicyGroupRelation(
                policy_id=policy.id,
                product_group_id=group_id,
                population_id=population_id,
                economic_compensation=compensation.economic_compensation,
            ))
    await db.flush()


async def create_scenario(
    db: AsyncSession,
    data: ScenarioCreate,
    settings: Settings,
    client: SimulationManagerClient | None = None,
) -> ScenarioCreatedResponse:
    population, year_id = await duplicate_for_simulation(
        db, data.synthetic_population_id, settings,
    )
    population_id = population.id
    try:
        await _add_policies(db, population_id, data.additional_policies)
    except ScenarioCreationError:
        await db.rollback()
        logger.error(
            "Scenario creation failed, population copy discarded",
            extra={"population_id": population_id},
        )
        raise

    scenario = SimulationScenario(
        population_id=population_id,
        year_id=year_id,
        additional_policies=[p.model_dump(mode="json") for p in data.additional_policies],
        **data.model_dump(include={
            "short_term_model_branch", "long_term_model_branch",
            "ignore_lp", "ignore_lmm", "compress", "horizon",
        }),
    )
    db.add(scenario)
    await db.commit()
    await db.refresh(scenario)
    logger.info(
        "Simulation scenario created: %d", scenario.id,
        extra={"population_id": population_id},
    )

    dispatched, dispatch_error = await dispatch_scenario(
        scenario.id, data.queue_suffix, settings, client,
    )
    return ScenarioCreatedResponse(
        scenario=scenario, dispatched=dispatched, dispatch_error=dispatch_error,
    )


async def dispatch_scenario(
    scenario_id: int,
    queue_suffix: str,
    settings: Settings,
    client: SimulationManagerClient | None = None,
) -> tuple[bool, str | None]:
    """Post the scenario to the simulation manager; (dispatched, error message)."""
    if client is None:
        if not settings.simulation_manager_base:
            logger.info("Simulation manager not configured, scenario %d not dispatched", scenario_id)
            return False, None
        client = SimulationManagerClient(
            settings.simulation_manager_base,
            timeout_seconds=settings.simulation_manager_timeout_seconds,
            max_retries=settings.simulation_manager_max_retries,
        )
    try:
        await client.launch_scenario(scenario_id, queue_suffix)
    except SimulationManagerError as e:
        logger.error(
            f"Scenario dispatch failed: {e.message}",
            extra={"error_code": e.code},
        )
        return False, e.message
    return True, None

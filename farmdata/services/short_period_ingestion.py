"""Short Period Ingestion — writes the SP engine results of a year into the database.

Invariants:
    - All-or-nothing: any conflict raises before commit and the session rolls back
    - Re-running the same year replaces its closing values, productions, subsidies,
      greening and rents (idempotent)
    - Every farm of the population gets a target-year closing value, simulated or not
    - A rent involving two regions is written once

Design Decisions:
    - Population-level data (product groups, policies, cost averages, income rates,
      target-year transactions) loaded once; farm-year data loaded per region
    - Cost averages span every stored year of the population, read after the target
      year is cleared
    - Income and margin recomputed for the whole population after all regions are written
"""

import logging
from collections import defaultdict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings
from farmdata.core.closing_values import income_rates
from farmdata.core.domain_types import RunLogLevel
from farmdata.core.errors import DataConflictError, ErrorContext, ResourceNotFoundError
from farmdata.core.short_period_results import (
    PreviousFarmYear, ReconciliationContext, reconcile_region,
)
from farmdata.core.snapshots import SPFarmResult
from farmdata.core.variable_costs import compute_cost_averages
from farmdata.models import (
    AgriculturalProduction, ClosingValFarmValue, Farm, FarmYearSubsidy,
    GreeningFarmYearData, LandRent, LandTransaction, LivestockProduction, SimulationRun,
)
from farmdata.schemas.short_period import IngestionSummary
from farmdata.services.farm_year_data import (
    get_farms, get_year, load_closing_values, load_crops, load_decisions, load_greening,
    load_livestock, load_policies, load_population_productions, load_product_groups,
    load_rents, load_subsidies, load_transactions, to_row, to_rows,
)
from farmdata.services.income_margin import recompute_income_and_margin
from farmdata.services.run_log import RunLog

logger = logging.getLogger(__name__)

SOURCE = "short_period_ingestion"


async def _clear_target_year(db: AsyncSession, year_id: int) -> None:
    target_productions = select(AgriculturalProduction.id).where(
        AgriculturalProduction.year_id == year_id,
    )
    await db.execute(
        delete(LandTransaction).where(LandTransaction.production_id.in_(target_productions)),
    )
    for model in (
        ClosingValFarmValue, AgriculturalProduction, LivestockProduction,
        FarmYearSubsidy, GreeningFarmYearData, LandRent,
    ):
        await db.execute(delete(model).where(model.year_id == year_id))


async def ingest_short_period_results(
    db: AsyncSession,
    results: list[SPFarmResult],
    year: int,
    settings: Settings,
    simulation_run_id: int | None = None,
) -> IngestionSummary:
    """Reconcile SP results for `year` with the population's year − 1 data and persist them."""
    context_ids = ErrorContext(year=year, simulation_run_id=simulation_run_id)
    if not results:
        raise DataConflictError("No SP results received", context_ids)
    if simulation_run_id and await db.get(SimulationRun, simulation_run_id) is None:
        raise ResourceNotFoundError("SimulationRun", simulation_run_id, context_ids)

    first = await db.get(Farm, results[0].farm_id)
    if first is None:
        raise DataConflictError(
            f"Farm {results[0].farm_id} does not belong to any population", context_ids,
        )
    population_id = first.population_id
    context_ids.population_id = population_id

    target_year = await get_year(db, population_id, year)
    previous_year = await get_year(db, population_id, year - 1)
    if target_year is None or previous_year is None:
        raise DataConflictError(
            f"Population {population_id} lacks year {year} or {year - 1}", context_ids,
        )

    run_log = RunLog(db, simulation_run_id, SOURCE)
    run_log.add("SP ingestion started", f"{len(results)} results for year {year}")

    farms = await get_farms(db, population_id)
    farm_ids = {f.id for f in farms}
    sp_results: dict[int, SPFarmResult] = {}
    for result in results:
        if result.farm_id not in farm_ids:
            logger.warning(
                "SP result for farm outside the population ignored",
                extra={"farm_id": result.farm_id, "population_id": population_id},
            )
            continue
        sp_results[result.farm_id] = result

    await _clear_target_year(db, target_year.id)

    previous_closings = await load_closing_values(db, previous_year.id)
    transactions, sources = await load_transactions(db, target_year.id)
    context = ReconciliationContext(
        product_groups=await load_product_groups(db, population_id),
        policies=await load_policies(db, population_id),
        averages=compute_cost_averages(*await load_population_productions(db, population_id)),
        rates=income_rates(previous_closings.values()),
        transactions=transactions,
        sources=sources,
        rent_price_per_hectare=settings.rent_price_per_hectare,
        rent_balance_tolerance=settings.rent_balance_tolerance,
        year=year,
    )

    regions: dict[int, list[Farm]] = defaultdict(list)
    for farm in farms:
        regions[farm.region_level_3].append(farm)

    written_rents: set[tuple[int, int]] = set()
    counts = defaultdict(int)
    for region, region_farms in sorted(regions.items()):
        ids = [f.id for f in region_farms]
        crops = await load_crops(db, previous_year.id, ids)
        livestock = await load_livestock(db, previous_year.id, ids)
        subsidies = await load_subsidies(db, previous_year.id, ids)
        greening = await load_greening(db, previous_year.id, ids)
        decisions = await load_decisions(db, target_year.id, ids)

        previous = [
            PreviousFarmYear(
                farm_id=farm_id,
                closing=previous_closings.get(farm_id),
                crops=[c for c in crops if c.farm_id == farm_id],
                livestock=[lp for lp in livestock if lp.farm_id == farm_id],
                subsidies=[s for s in subsidies if s.farm_id == farm_id],
                greening_surface=greening.get(farm_id, 0.0),
                decision=decisions.get(farm_id),
            )
            for farm_id in ids
        ]
        outcome = reconcile_region(
            context, previous, sp_results,
            await load_rents(db, previous_year.id, ids),
        )

        y = {"year_id": target_year.id}
        db.add_all(to_rows(ClosingValFarmValue, outcome.closing_values, **y))
        db.add_all(to_rows(AgriculturalProduction, outcome.crops, **y))
        db.add_all(to_rows(LivestockProduction, outcome.livestock, **y))
        db.add_all(to_rows(FarmYearSubsidy, outcome.subsidies, **y))
        for farm in outcome.farms:
            if farm.greening_surface is not None:
                db.add(GreeningFarmYearData(
                    farm_id=farm.farm_id, greening_surface=farm.greening_surface, **y,
                ))
                counts["greening"] += 1
        for rent in outcome.rents:
            key = (rent.origin_farm_id, rent.destination_farm_id)
            if key in written_rents:
                continue
            written_rents.add(key)
            db.add(to_row(LandRent, rent, **y))
        await db.flush()

        counts["closing_values"] += len(outcome.closing_values)
        counts["agricultural_productions"] += len(outcome.crops)
        counts["livestock_productions"] += len(outcome.livestock)
        counts["subsidies"] += len(outcome.subsidies)
        run_log.add(
            f"Region {region} processed",
            f"{len(region_farms)} farms, "
            f"{sum(1 for f in outcome.farms if f.simulated)} simulated",
        )

    await recompute_income_and_margin(db, sorted(farm_ids), [year])
    run_log.add("SP ingestion completed", f"year {year}", RunLogLevel.SUCCESS)
    await db.commit()

    return IngestionSummary(
        population_id=population_id,
        year=year,
        farms=len(farms),
        simulated_farms=len(sp_results),
        regions=len(regions),
        closing_values=counts["closing_values"],
        agricultural_productions=counts["agricultural_productions"],
        livestock_productions=counts["livestock_productions"],
        subsidies=counts["subsidies"],
        land_rents=len(written_rents),
    )

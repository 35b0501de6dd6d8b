"""Short Period Data — the previous-year dataset the SP engine calibrates or simulates on.

Invariants:
    - Farm data always comes from year − 1
    - Calibration uses the policies active in year − 1, simulation those active in year
    - Subsidy entries are reported with year_number = year − 1
    - Simulation data reflects target-year land transactions and LP current assets
"""

import logging
from collections import defaultdict
from dataclasses import asdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.core.errors import DataConflictError, EmptyResultError, ErrorContext
from farmdata.core.short_period_inputs import (
    SPInputFarm, active_policies, apply_simulation_adjustments, build_sp_values,
)
from farmdata.models import FarmYearSubsidy, Policy, PolicyGroupRelation, ProductGroup
from farmdata.schemas.short_period import DataToSP
from farmdata.services.farm_year_data import (
    get_farms, get_population, get_year, load_closing_values, load_crops, load_decisions,
    load_greening, load_holders, load_livestock, load_product_groups, load_rents,
    load_transactions,
)

logger = logging.getLogger(__name__)


async def get_short_period_data(
    db: AsyncSession, population_id: int, year: int, simulation: bool = False,
) -> DataToSP:
    context = ErrorContext(population_id=population_id, year=year)
    previous_number = year - 1
    if await get_population(db, population_id) is None:
        raise DataConflictError(f"Population {population_id} does not exist", context)
    previous_year = await get_year(db, population_id, previous_number)
    if previous_year is None:
        raise DataConflictError(
            f"Population {population_id} does not contain year {previous_number}", context,
        )
    farms = await get_farms(db, population_id)
    if not farms:
        raise DataConflictError(f"Population {population_id} has no farms", context)

    closings = await load_closing_values(db, previous_year.id)
    holders = await load_holders(db, previous_year.id)
    greening = await load_greening(db, previous_year.id)
    crops = defaultdict(list)
    for c in await load_crops(db, previous_year.id):
        crops[c.farm_id].append(c)
    livestock = defaultdict(list)
    for lp in await load_livestock(db, previous_year.id):
        livestock[lp.farm_id].append(lp)
    rented_in = defaultdict(list)
    for r in await load_rents(db, previous_year.id):
        rented_in[r.destination_farm_id].append(r)

    product_groups = [g for g in await load_product_groups(db, population_id) if not g.is_other]
    values = build_sp_values(
        [
            SPInputFarm(
                farm_id=f.id,
                region_level_1=f.region_level_1,
                region_level_2=f.region_level_2,
                region_level_3=f.region_level_3,
                technical_economic_orientation=f.technical_economic_orientation,
                altitude=f.altitude,
                closing=closings.get(f.id),
                holder=holders.get(f.id),
                crops=crops[f.id],
                livestock=livestock[f.id],
                greening_surface=greening.get(f.id, 0.0),
                rented_in=rented_in[f.id],
            )
            for f in farms
        ],
        product_groups,
    )

    if simulation:
        target_year = await get_year(db, population_id, year)
        if target_year is None:
            logger.warning(
                "Target year missing; simulation data left unadjusted", extra={"year": year},
            )
        else:
            transactions, _ = await load_transactions(db, target_year.id)
            decisions = await load_decisions(db, target_year.id)
            apply_simulation_adjustments(
                values, transactions, {g.id: g.name for g in product_groups},
                decisions.values(),
            )

    if not values:
        raise EmptyResultError(f"No SP values for year {year}", context)

    policy_year = year if simulation else previous_number
    policies = active_policies(
        (await db.execute(select(Policy).where(Policy.population_id == population_id)))
        .scalars().all(),
        policy_year,
    )
    policy_ids = {p.id for p in policies}
    identifiers = {p.id: p.policy_identifier for p in policies}
    group_names = {
        g.id: g.name
        for g in (await db.execute(
            select(ProductGroup).where(ProductGroup.population_id == population_id),
        )).scalars().all()
    }
    relations = (await db.execute(
        select(PolicyGroupRelation).where(PolicyGroupRelation.population_id == population_id),
    )).scalars().all()
    subsidies = (await db.execute(
        select(FarmYearSubsidy).where(FarmYearSubsidy.year_id == previous_year.id),
    )).scalars().all()

    for value in values:
        value["crops"] = {name: asdict(crop) for name, crop in value["crops"].items()}
    return DataToSP(
        values=values,
        product_groups=[
            {
                "name": g.name, "organic": g.organic,
                "model_specific_categories": g.model_specific_categories,
            }
            for g in product_groups
        ],
        policies=[
            {
                "population_id": p.population_id,
                "policy_identifier": p.policy_identifier,
                "policy_description": p.policy_description,
                "is_coupled": p.is_coupled,
                "economic_compensation": p.economic_compensation,
                "model_label": p.model_label,
                "start_year_number": p.start_year_number,
                "end_year_number": p.end_year_number,
            }
            for p in policies
        ],
        policy_group_relations=[
            {
                "population_id": r.population_id,
                "policy_identifier": identifiers[r.policy_id],
                "product_group_name": group_names.get(r.product_group_id, ""),
                "economic_compensation": r.economic_compensation,
            }
            for r in relations if r.policy_id in policy_ids
        ],
        farm_year_subsidies=[
            {
                "farm_id": s.farm_id,
                "year_number": previous_number,
                "policy_identifier": identifiers[s.policy_id],
                "value": s.value,
            }
            for s in subsidies if s.policy_id in policy_ids
        ],
    )

"""Long Period Service — LP engine input data and LP result ingestion.

Invariants:
    - LP data is built from year − 1; farms without a closing value are left out
    - LP results of a year replace that year's decisions, land transactions and
      holder data (re-run support)
    - After ingestion every farm of the population has exactly one decision for the year
"""

import logging
from collections import defaultdict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings
from farmdata.core.errors import (
    DataConflictError, EmptyResultError, ErrorContext, InvalidInputError, ResourceNotFoundError,
)
from farmdata.core.long_period import build_lp_value, default_decision, next_holder_data
from farmdata.core.snapshots import DecisionRecord
from farmdata.models import (
    AgriculturalProduction, AgroManagementDecision, FarmYearSubsidy, HolderFarmYearData,
    LandRent, LandTransaction, Policy, PolicyGroupRelation, ProductGroup, Year,
)
from farmdata.schemas.long_period import DataToLP, LPResultsIn, LPResultsOut
from farmdata.services.farm_year_data import (
    get_farms, get_population, get_year, load_closing_values, load_holders, to_row,
)

logger = logging.getLogger(__name__)


# ─── LP input data ───────────────────────────────────────────────

async def get_long_period_data(
    db: AsyncSession,
    population_id: int,
    year: int,
    settings: Settings,
    ignore_lp: bool = False,
    ignore_lmm: bool = False,
) -> DataToLP:
    context = ErrorContext(population_id=population_id, year=year)
    previous_number = year - 1
    if await get_population(db, population_id) is None:
        raise DataConflictError(f"Population {population_id} does not exist", context)
    previous_year = await get_year(db, population_id, previous_number)
    if previous_year is None:
        raise ResourceNotFoundError("Year", previous_number, context)
    farms = await get_farms(db, population_id)
    if not farms:
        raise ResourceNotFoundError("Farms of population", population_id, context)

    closings = await load_closing_values(db, previous_year.id)
    holders = await load_holders(db, previous_year.id)
    policies = (await db.execute(
        select(Policy).where(Policy.population_id == population_id),
    )).scalars().all()
    identifiers = {p.id: p.policy_identifier for p in policies}
    subsidies = defaultdict(list)
    for s in (await db.execute(
        select(FarmYearSubsidy).where(FarmYearSubsidy.year_id == previous_year.id),
    )).scalars().all():
        subsidies[s.farm_id].append({
            "farm_id": s.farm_id, "year_number": previous_number,
            "policy_identifier": identifiers[s.policy_id], "value": s.value,
        })

    values = []
    for farm in farms:
        closing = closings.get(farm.id)
        if closing is None:
            logger.warning(
                "Farm without closing value left out of LP data",
                extra={"farm_id": farm.id, "year": previous_number},
            )
            continue
        holder = holders.get(farm.id)
        value = build_lp_value(
            closing, holder, subsidies[farm.id], farm.region_level_3,
            settings.aversion_risk_factor,
        )
        value["year_id"] = previous_year.id
        if holder is not None:
            value["agent_holder"] = {
                "year_number": previous_number,
                "holder_age": holder.holder_age,
                "holder_family_members": holder.holder_family_members,
                "holder_successors": holder.holder_successors,
                "holder_successors_age": holder.holder_successors_age,
                "holder_gender": holder.holder_gender,
            }
        values.append(value)
    if not values:
        raise EmptyResultError(f"No LP values for year {year}", context)

    productions = (await db.execute(
        select(AgriculturalProduction).where(AgriculturalProduction.year_id == previous_year.id),
    )).scalars().all()
    group_names = {
        g.id: g.name
        for g in (await db.execute(
            select(ProductGroup).where(ProductGroup.population_id == population_id),
        )).scalars().all()
    }
    relations = (await db.execute(
        select(PolicyGroupRelation).where(PolicyGroupRelation.population_id == population_id),
    )).scalars().all()
    rents = (await db.execute(
        select(LandRent).where(LandRent.year_id == previous_year.id),
    )).scalars().all()

    return DataToLP(
        values=values,
        agricultural_productions=productions,
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
            for r in relations
        ],
        rent_operations=rents,
        ignore_lp=ignore_lp,
        ignore_lmm=ignore_lmm,
    )


# ─── LP results ──────────────────────────────────────────────────

async def add_long_period_results(db: AsyncSession, data: LPResultsIn) -> LPResultsOut:
    if not data.agro_management_decisions:
        raise InvalidInputError("No agro-management decisions to add", field="agro_management_decisions")

    year_ids = {d.year_id for d in data.agro_management_decisions}
    years = (await db.execute(select(Year).where(Year.id.in_(year_ids)))).scalars().all()
    if len(year_ids) != 1 or len(years) != 1:
        raise InvalidInputError(
            "Decisions must all reference the same existing year", field="year_id",
        )
    year = years[0]
    context = ErrorContext(population_id=year.population_id, year=year.year_number)

    farms = await get_farms(db, year.population_id)
    farm_ids = {f.id for f in farms}
    foreign = {d.farm_id for d in data.agro_management_decisions} - farm_ids
    if foreign:
        raise InvalidInputError(
            f"Farms {sorted(foreign)} do not belong to population {year.population_id}",
            field="farm_id",
        )

    previous_year = await get_year(db, year.population_id, year.year_number - 1)
    previous_closings = (
        await load_closing_values(db, previous_year.id) if previous_year is not None else {}
    )
    previous_holders = (
        await load_holders(db, previous_year.id) if previous_year is not None else {}
    )

    decisions: dict[int, DecisionRecord] = {
        d.farm_id: DecisionRecord(
            farm_id=d.farm_id,
            **d.model_dump(exclude={"farm_id", "year_id"}),
        )
        for d in data.agro_management_decisions
    }
    for farm_id in data.error_list:
        if farm_id not in farm_ids:
            continue
        closing = previous_closings.get(farm_id)
        if closing is None:
            raise DataConflictError(
                f"Farm {farm_id} has no closing value for year {year.year_number - 1}", context,
            )
        decisions[farm_id] = default_decision(farm_id, closing)

    if len(decisions) != len(farms):
        raise InvalidInputError(
            f"{len(decisions)} decisions for {len(farms)} farms", field="agro_management_decisions",
        )

    await db.execute(delete(AgroManagementDecision).where(AgroManagementDecision.year_id == year.id))
    await db.execute(delete(LandTransaction).where(LandTransaction.year_id == year.id))
    await db.execute(delete(HolderFarmYearData).where(HolderFarmYearData.year_id == year.id))

    decision_rows = [
        to_row(AgroManagementDecision, d, year_id=year.id) for d in decisions.values()
    ]
    transaction_rows = [
        LandTransaction(**t.model_dump()) for t in data.land_transactions
    ]
    db.add_all(decision_rows)
    db.add_all(transaction_rows)

    for farm in farms:
        holder = previous_holders.get(farm.id)
        if holder is None:
            logger.warning(
                "No previous holder data; holder not advanced",
                extra={"farm_id": farm.id, "year": year.year_number},
            )
            continue
        decision = decisions.get(farm.id)
        db.add(to_row(
            HolderFarmYearData,
            next_holder_data(holder, bool(decision and decision.retire_and_hand_over)),
            year_id=year.id,
        ))

    await db.commit()
    logger.info(
        "LP results stored: %d decisions, %d transactions",
        len(decision_rows), len(transaction_rows),
        extra={"population_id": year.population_id, "year": year.year_number},
    )
    return LPResultsOut(
        agro_management_decisions=decision_rows,
        land_transactions=transaction_rows,
    )

"""Population Duplication — copying a synthetic population for a simulation scenario.

Invariants:
    - The copy is a new population; the source is only read
    - Years, product groups, policies and relations are copied first, then farms with
      all their year data in batches, then land rents and transactions via farm maps
    - Every copied row references copied parents only (ids remapped, never shared)

Design Decisions:
    - Rows are cloned from their table columns (__table__.columns) so new columns are
      copied without touching this module
    - Batches are flushed, not committed: a failed duplication leaves nothing behind
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.config import Settings
from farmdata.models import (
    AgriculturalProduction, AgroManagementDecision, ClosingValFarmValue, FADNProductRelation,
    Farm, FarmYearSubsidy, GreeningFarmYearData, HolderFarmYearData, LandRent,
    LandTransaction, LivestockProduction, Policy, PolicyGroupRelation, Population,
    ProductGroup, SyntheticPopulation, Year,
)
from farmdata.services.farm_year_data import get_or_404

logger = logging.getLogger(__name__)

_FARM_YEAR_MODELS = (
    ClosingValFarmValue, LivestockProduction, FarmYearSubsidy, HolderFarmYearData,
    GreeningFarmYearData, AgroManagementDecision,
)


def clone(row, **overrides):
    """New instance of row's model with every column but the primary key copied."""
    model = type(row)
    values = {
        c.key: getattr(row, c.key)
        for c in model.__table__.columns if not c.primary_key
    }
    values.update(overrides)
    return model(**values)


async def _all(db: AsyncSession, stmt) -> list:
    return list((await db.execute(stmt)).scalars().all())


class _IdMaps:
    """Source id → copy id, per entity."""

    def __init__(self):
        self.years: dict[int, int] = {}
        self.groups: dict[int, int] = {}
        self.policies: dict[int, int] = {}
        self.farms: dict[int, int] = {}
        self.productions: dict[int, int] = {}


async def _copy_structure(db: AsyncSession, source_id: int, target_id: int, maps: _IdMaps) -> None:
    pairs = []
    for year in await _all(db, select(Year).where(Year.population_id == source_id)):
        pairs.append((maps.years, year.id, clone(year, population_id=target_id)))
    for group in await _all(db, select(ProductGroup).where(ProductGroup.population_id == source_id)):
        pairs.append((maps.groups, group.id, clone(
            group,
            population_id=target_id,
            model_specific_categories=list(group.model_specific_categories or []),
        )))
    for policy in await _all(db, select(Policy).where(Policy.population_id == source_id)):
        pairs.append((maps.policies, policy.id, clone(policy, population_id=target_id)))
    db.add_all([copy for _, _, copy in pairs])
    await db.flush()
    for mapping, source, copy in pairs:
        mapping[source] = copy.id

    for relation in await _all(
        db, select(PolicyGroupRelation).where(PolicyGroupRelation.population_id == source_id),
    ):
        db.add(clone(
            relation,
            policy_id=maps.policies[relation.policy_id],
            product_group_id=maps.groups[relation.product_group_id],
            population_id=target_id,
        ))
    for relation in await _all(
        db, select(FADNProductRelation).where(FADNProductRelation.population_id == source_id),
    ):
        db.add(clone(
            relation,
            product_group_id=maps.groups[relation.product_group_id],
            population_id=target_id,
        ))
    await db.flush()


async def _copy_farm_batch(db: AsyncSession, farms: list[Farm], target_id: int, maps: _IdMaps):
    copies = [(farm.id, clone(farm, population_id=target_id)) for farm in farms]
    db.add_all([copy for _, copy in copies])
    await db.flush()
    for source, copy in copies:
        maps.farms[source] = copy.id
    farm_ids = [farm.id for farm in farms]

    productions = [
        (p.id, clone(
            p,
            farm_id=maps.farms[p.farm_id],
            year_id=maps.years[p.year_id],
            product_group_id=maps.groups[p.product_group_id],
        ))
        for p in await _all(
            db, select(AgriculturalProduction).where(AgriculturalProduction.farm_id.in_(farm_ids)),
        )
    ]
    db.add_all([copy for _, copy in productions])

    for model in _FARM_YEAR_MODELS:
        for row in await _all(db, select(model).where(model.farm_id.in_(farm_ids))):
            overrides = {"farm_id": maps.farms[row.farm_id], "year_id": maps.years[row.year_id]}
            if hasattr(row, "product_group_id"):
                overrides["product_group_id"] = maps.groups[row.product_group_id]
            if hasattr(row, "policy_id"):
                overrides["policy_id"] = maps.policies[row.policy_id]
            db.add(clone(row, **overrides))
    await db.flush()
    for source, copy in productions:
        maps.productions[source] = copy.id


async def _copy_land_operations(db: AsyncSession, maps: _IdMaps) -> tuple[int, int]:
    rents = await _all(db, select(LandRent).where(LandRent.year_id.in_(list(maps.years))))
    for rent in rents:
        db.add(clone(
            rent,
            origin_farm_id=maps.farms[rent.origin_farm_id],
            destination_farm_id=maps.farms[rent.destination_farm_id],
            year_id=maps.years[rent.year_id],
        ))
    transactions = await _all(
        db, select(LandTransaction).where(LandTransaction.year_id.in_(list(maps.years))),
    )
    for transaction in transactions:
        db.add(clone(
            transaction,
            production_id=maps.productions[transaction.production_id],
            destination_farm_id=maps.farms[transaction.destination_farm_id],
            year_id=maps.years[transaction.year_id],
        ))
    await db.flush()
    return len(rents), len(transactions)


async def duplicate_population(
    db: AsyncSession, source_id: int, description: str, settings: Settings,
) -> tuple[Population, dict[int, int]]:
    """Copy population source_id; returns the copy and the source → copy year id map."""
    target = Population(description=description)
    db.add(target)
    await db.flush()
    target_id = target.id
    maps = _IdMaps()
    await _copy_structure(db, source_id, target_id, maps)

    after = 0
    while True:
        batch = await _all(
            db,
            select(Farm)
            .where(Farm.population_id == source_id, Farm.id > after)
            .order_by(Farm.id)
            .limit(settings.duplication_batch_size),
        )
        if not batch:
            break
        after = batch[-1].id
        await _copy_farm_batch(db, batch, target_id, maps)
        logger.info(
            "Duplicated %d farms", len(maps.farms),
            extra={"population_id": target_id},
        )

    rents, transactions = await _copy_land_operations(db, maps)
    logger.info(
        "Population duplicated: %d farms, %d rents, %d transactions",
        len(maps.farms), rents, transactions,
        extra={"population_id": target_id},
    )
    return target, maps.years


async def duplicate_for_simulation(
    db: AsyncSession, synthetic_population_id: int, settings: Settings,
) -> tuple[Population, int]:
    """Copy a synthetic population's data; returns the copy and the copied base year id.

    Flushes without committing: the caller commits once the scenario is complete.
    """
    synthetic = await get_or_404(db, SyntheticPopulation, synthetic_population_id)
    source = await get_or_404(db, Population, synthetic.population_id)
    name, year_id = synthetic.name, synthetic.year_id
    description = f"(Replicated from SP: {name} - {source.description} - {synthetic.id})"
    population, years = await duplicate_population(db, source.id, description, settings)
    return population, years[year_id]


async def duplicate_synthetic_population(
    db: AsyncSession, synthetic_population_id: int, settings: Settings,
) -> SyntheticPopulation:
    population, year_id = await duplicate_for_simulation(db, synthetic_population_id, settings)
    source = await get_or_404(db, SyntheticPopulation, synthetic_population_id)
    population.description = population.description.replace("Replicated", "Duplicated")
    synthetic = SyntheticPopulation(
        name=f"Duplicated from SP: {source.name}",
        description=source.description,
        population_id=population.id,
        year_id=year_id,
    )
    db.add(synthetic)
    await db.flush()
    synthetic.name = f"{synthetic.name} - {synthetic.id}"
    await db.commit()
    await db.refresh(synthetic)
    logger.info(
        "Synthetic population duplicated: %s", synthetic.name,
        extra={"population_id": population.id},
    )
    return synthetic

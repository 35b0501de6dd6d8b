"""Population Transfer — export and import of the portable population JSON tree.

Invariants:
    - Export never leaks database ids: farms by code, years by number, product groups
      by name, policies by identifier
    - Import always creates a new population; FADN products are shared and upserted
      by fadn_identifier
    - An import referencing an unknown year, farm code, product group or policy is
      rejected as a whole (400) and nothing is committed
    - Income and margin are recomputed for every imported farm before commit

Design Decisions:
    - Batched export (limit / after_farm_id) pages over farms ordered by id; land
      operations are exported with the batch that owns their origin farm
    - Column sets are read from the pydantic field sets (schema.model_fields) so the
      tree follows the CRUD schemas without per-field mapping code
"""

import logging
from collections import defaultdict

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from farmdata.core.errors import InvalidInputError
from farmdata.models import (
    AgriculturalProduction, AgroManagementDecision, ClosingValFarmValue, FADNProduct,
    FADNProductRelation, Farm, FarmYearSubsidy, GreeningFarmYearData, HolderFarmYearData,
    LandRent, LandTransaction, LivestockProduction, Policy, PolicyGroupRelation,
    Population, ProductGroup, SyntheticPopulation, Year,
)
from farmdata.schemas.farm import ClosingValueFields, DecisionFields, FarmCreate
from farmdata.schemas.policy import FADNProductCreate, PolicyCreate, ProductGroupCreate
from farmdata.schemas.production import AgriculturalProductionFields, LivestockProductionFields
from farmdata.schemas.transfer import (
    AgriculturalProductionJson, ClosingValueJson, DecisionJson, FarmJson, GreeningJson,
    HolderJson, LandRentJson, LandTransactionJson, LivestockProductionJson,
    PolicyGroupRelationJson, PopulationJson, ProductGroupJson, SubsidyJson,
    SyntheticPopulationJson,
)
from farmdata.services.farm_year_data import get_or_404
from farmdata.services.income_margin import recompute_income_and_margin

logger = logging.getLogger(__name__)

_HOLDER_FIELDS = (
    "holder_age", "holder_family_members", "holder_successors",
    "holder_successors_age", "holder_gender",
)


def _columns(row, schema: type[BaseModel] | tuple[str, ...]) -> dict:
    names = schema if isinstance(schema, tuple) else schema.model_fields
    return {name: getattr(row, name) for name in names}


def _by_farm(rows) -> dict[int, list]:
    grouped = defaultdict(list)
    for row in rows:
        grouped[row.farm_id].append(row)
    return grouped


# ─── Export ──────────────────────────────────────────────────────

async def export_population(
    db: AsyncSession,
    population_id: int,
    limit: int | None = None,
    after_farm_id: int | None = None,
) -> PopulationJson:
    population = await get_or_404(db, Population, population_id)

    years = {
        y.id: y.year_number
        for y in (await db.execute(
            select(Year).where(Year.population_id == population_id).order_by(Year.year_number),
        )).scalars().all()
    }
    groups = (await db.execute(
        select(ProductGroup)
        .where(ProductGroup.population_id == population_id)
        .options(selectinload(ProductGroup.fadn_product_relations))
        .order_by(ProductGroup.id),
    )).scalars().all()
    group_names = {g.id: g.name for g in groups}
    policies = (await db.execute(
        select(Policy).where(Policy.population_id == population_id).order_by(Policy.id),
    )).scalars().all()
    identifiers = {p.id: p.policy_identifier for p in policies}
    farm_codes = {
        farm_id: code
        for farm_id, code in (await db.execute(
            select(Farm.id, Farm.farm_code).where(Farm.population_id == population_id),
        )).all()
    }

    stmt = select(Farm).where(Farm.population_id == population_id).order_by(Farm.id)
    if after_farm_id is not None:
        stmt = stmt.where(Farm.id > after_farm_id)
    if limit is not None:
        stmt = stmt.limit(limit)
    farms = (await db.execute(stmt)).scalars().all()
    farm_ids = [f.id for f in farms]

    async def rows_of(model):
        if not farm_ids:
            return {}
        result = await db.execute(select(model).where(model.farm_id.in_(farm_ids)))
        return _by_farm(result.scalars().all())

    crops = await rows_of(AgriculturalProduction)
    livestock = await rows_of(LivestockProduction)
    holders = await rows_of(HolderFarmYearData)
    greening = await rows_of(GreeningFarmYearData)
    closings = await rows_of(ClosingValFarmValue)
    subsidies = await rows_of(FarmYearSubsidy)
    decisions = await rows_of(AgroManagementDecision)

    farm_trees = [
        FarmJson(
            **_columns(farm, FarmCreate),
            agricultural_productions=[
                AgriculturalProductionJson(
                    year_number=years[p.year_id], product_name=group_names[p.product_group_id],
                    **_columns(p, AgriculturalProductionFields),
                )
                for p in crops.get(farm.id, [])
            ],
            livestock_productions=[
                LivestockProductionJson(
                    year_number=years[p.year_id], product_name=group_names[p.product_group_id],
                    **_columns(p, LivestockProductionFields),
                )
                for p in livestock.get(farm.id, [])
            ],
            holder_farm_year_data=[
                HolderJson(year_number=years[h.year_id], **_columns(h, _HOLDER_FIELDS))
                for h in holders.get(farm.id, [])
            ],
            greening_farm_year_data=[
                GreeningJson(year_number=years[g.year_id], greening_surface=g.greening_surface)
                for g in greening.get(farm.id, [])
            ],
            closing_values=[
                ClosingValueJson(year_number=years[c.year_id], **_columns(c, ClosingValueFields))
                for c in closings.get(farm.id, [])
            ],
            farm_year_subsidies=[
                SubsidyJson(
                    year_number=years[s.year_id],
                    policy_identifier=identifiers[s.policy_id], value=s.value,
                )
                for s in subsidies.get(farm.id, [])
            ],
            agro_management_decisions=[
                DecisionJson(year_number=years[d.year_id], **_columns(d, DecisionFields))
                for d in decisions.get(farm.id, [])
            ],
        )
        for farm in farms
    ]

    rents, transactions = [], []
    if farm_ids:
        for rent in (await db.execute(
            select(LandRent).where(LandRent.origin_farm_id.in_(farm_ids)),
        )).scalars().all():
            rents.append(LandRentJson(
                year_number=years[rent.year_id],
                origin_farm_code=farm_codes[rent.origin_farm_id],
                destination_farm_code=farm_codes[rent.destination_farm_id],
                rent_value=rent.rent_value, rent_area=rent.rent_area,
            ))
        for transaction, production in (await db.execute(
            select(LandTransaction, AgriculturalProduction)
            .join(AgriculturalProduction, LandTransaction.production_id == AgriculturalProduction.id)
            .where(AgriculturalProduction.farm_id.in_(farm_ids)),
        )).all():
            transactions.append(LandTransactionJson(
                year_number=years[transaction.year_id],
                product_group_name=group_names[production.product_group_id],
                origin_farm_code=farm_codes[production.farm_id],
                destination_farm_code=farm_codes[transaction.destination_farm_id],
                production_year_number=years[production.year_id],
                percentage=transaction.percentage,
                sale_price=transaction.sale_price,
            ))

    logger.info(
        "Population exported: %d farms", len(farm_trees),
        extra={"population_id": population_id},
    )
    return PopulationJson(
        description=population.description,
        year_numbers=list(years.values()),
        farms=farm_trees,
        product_groups=[
            ProductGroupJson(
                **_columns(g, ProductGroupCreate),
                fadn_products=[
                    FADNProductCreate(**_columns(r.fadn_product, FADNProductCreate))
                    for r in g.fadn_product_relations
                ],
            )
            for g in groups
        ],
        policies=[PolicyCreate(**_columns(p, PolicyCreate)) for p in policies],
        policy_group_relations=[
            PolicyGroupRelationJson(
                policy_identifier=p.policy_identifier,
                product_group_name=group_names[r.product_group_id],
                economic_compensation=r.economic_compensation,
            )
            for p in policies for r in p.group_relations
        ],
        land_rents=rents,
        land_transactions=transactions,
    )


async def export_synthetic_population(
    db: AsyncSession, synthetic_population_id: int,
) -> SyntheticPopulationJson:
    synthetic = await get_or_404(db, SyntheticPopulation, synthetic_population_id)
    return SyntheticPopulationJson(
        name=synthetic.name,
        description=synthetic.description,
        year_number=synthetic.year.year_number,
        population=await export_population(db, synthetic.population_id),
    )


# ─── Import ──────────────────────────────────────────────────────

def _lookup(mapping: dict, key, what: str, field: str):
    try:
        return mapping[key]
    except KeyError:
        raise InvalidInputError(f"Unknown {what}: {key!r}", field=field) from None


def _referenced_years(data: PopulationJson) -> set[int]:
    numbers = set(data.year_numbers)
    for farm in data.farms:
        for collection in (
            farm.agricultural_productions, farm.livestock_productions,
            farm.holder_farm_year_data, farm.greening_farm_year_data,
            farm.closing_values, farm.farm_year_subsidies, farm.agro_management_decisions,
        ):
            numbers.update(item.year_number for item in collection)
    numbers.update(r.year_number for r in data.land_rents)
    numbers.update(t.year_number for t in data.land_transactions)
    return numbers


async def _upsert_fadn_product(db: AsyncSession, data: FADNProductCreate) -> FADNProduct:
    product = (await db.execute(
        select(FADNProduct).where(FADNProduct.fadn_identifier == data.fadn_identifier),
    )).scalar_one_or_none()
    if product is None:
        product = FADNProduct(**data.model_dump())
        db.add(product)
        await db.flush()
    return product


async def _import_tree(
    db: AsyncSession, data: PopulationJson, extra_years: tuple[int, ...] = (),
) -> tuple[Population, dict[int, int]]:
    """Create the population tree without committing; returns it and its year ids by number."""
    population = Population(description=data.description.strip())
    db.add(population)
    await db.flush()

    years = {}
    for number in sorted(_referenced_years(data) | set(extra_years)):
        year = Year(year_number=number, population_id=population.id)
        db.add(year)
        years[number] = year
    groups = {}
    for g in data.product_groups:
        group = ProductGroup(
            population_id=population.id, **g.model_dump(exclude={"fadn_products"}),
        )
        db.add(group)
        groups[g.name] = group
    policies = {}
    for p in data.policies:
        policy = Policy(population_id=population.id, **p.model_dump())
        db.add(policy)
        policies[p.policy_identifier] = policy
    await db.flush()
    year_ids = {number: y.id for number, y in years.items()}
    group_ids = {name: g.id for name, g in groups.items()}
    policy_ids = {identifier: p.id for identifier, p in policies.items()}

    for g in data.product_groups:
        for fadn in g.fadn_products:
            product = await _upsert_fadn_product(db, fadn)
            db.add(FADNProductRelation(
                product_group_id=group_ids[g.name], fadn_product_id=product.id,
                population_id=population.id,
            ))
    for r in data.policy_group_relations:
        db.add(PolicyGroupRelation(
            policy_id=_lookup(policy_ids, r.policy_identifier, "policy", "policy_identifier"),
            product_group_id=_lookup(
                group_ids, r.product_group_name, "product group", "product_group_name",
            ),
            population_id=population.id,
            economic_compensation=r.economic_compensation,
        ))

    farms = {}
    for f in data.farms:
        farm = Farm(population_id=population.id, **f.model_dump(include=set(FarmCreate.model_fields)))
        db.add(farm)
        farms[f.farm_code] = farm
    await db.flush()
    farm_ids = {code: farm.id for code, farm in farms.items()}

    def year_id(number: int) -> int:
        return _lookup(year_ids, number, "year", "year_number")

    productions = {}
    for f in data.farms:
        farm_id = farm_ids[f.farm_code]
        for p in f.agricultural_productions:
            group_id = _lookup(group_ids, p.product_name, "product group", "product_name")
            row = AgriculturalProduction(
                farm_id=farm_id, year_id=year_id(p.year_number), product_group_id=group_id,
                **p.model_dump(include=set(AgriculturalProductionFields.model_fields)),
            )
            db.add(row)
            productions[(f.farm_code, p.product_name, p.year_number)] = row
        for p in f.livestock_productions:
            db.add(LivestockProduction(
                farm_id=farm_id, year_id=year_id(p.year_number),
                product_group_id=_lookup(group_ids, p.product_name, "product group", "product_name"),
                **p.model_dump(include=set(LivestockProductionFields.model_fields)),
            ))
        for h in f.holder_farm_year_data:
            db.add(HolderFarmYearData(
                farm_id=farm_id, year_id=year_id(h.year_number),
                **h.model_dump(exclude={"year_number"}),
            ))
        for g in f.greening_farm_year_data:
            db.add(GreeningFarmYearData(
                farm_id=farm_id, year_id=year_id(g.year_number),
                greening_surface=g.greening_surface,
            ))
        for c in f.closing_values:
            db.add(ClosingValFarmValue(
                farm_id=farm_id, year_id=year_id(c.year_number),
                **c.model_dump(exclude={"year_number"}),
            ))
        for s in f.farm_year_subsidies:
            db.add(FarmYearSubsidy(
                farm_id=farm_id, year_id=year_id(s.year_number),
                policy_id=_lookup(policy_ids, s.policy_identifier, "policy", "policy_identifier"),
                value=s.value,
            ))
        for d in f.agro_management_decisions:
            db.add(AgroManagementDecision(
                farm_id=farm_id, year_id=year_id(d.year_number),
                **d.model_dump(exclude={"year_number"}),
            ))
    await db.flush()

    for r in data.land_rents:
        db.add(LandRent(
            origin_farm_id=_lookup(farm_ids, r.origin_farm_code, "farm code", "origin_farm_code"),
            destination_farm_id=_lookup(
                farm_ids, r.destination_farm_code, "farm code", "destination_farm_code",
            ),
            year_id=year_id(r.year_number),
            rent_value=r.rent_value, rent_area=r.rent_area,
        ))
    for t in data.land_transactions:
        production_year = (
            t.production_year_number if t.production_year_number is not None
            else t.year_number - 1
        )
        production = _lookup(
            productions, (t.origin_farm_code, t.product_group_name, production_year),
            "sold production", "land_transactions",
        )
        db.add(LandTransaction(
            production_id=production.id,
            destination_farm_id=_lookup(
                farm_ids, t.destination_farm_code, "farm code", "destination_farm_code",
            ),
            year_id=year_id(t.year_number),
            percentage=t.percentage, sale_price=t.sale_price,
        ))
    await db.flush()

    await recompute_income_and_margin(db, list(farm_ids.values()))
    return population, year_ids


async def import_population(db: AsyncSession, data: PopulationJson) -> Population:
    population, _ = await _import_tree(db, data)
    await db.commit()
    logger.info(
        "Population imported: %d farms", len(data.farms),
        extra={"population_id": population.id},
    )
    return population


async def import_synthetic_population(
    db: AsyncSession, data: SyntheticPopulationJson,
) -> SyntheticPopulation:
    population, year_ids = await _import_tree(db, data.population, (data.year_number,))
    synthetic = SyntheticPopulation(
        name=data.name, description=data.description,
        population_id=population.id, year_id=year_ids[data.year_number],
    )
    db.add(synthetic)
    await db.commit()
    await db.refresh(synthetic)
    logger.info(
        "Synthetic population imported: %s", synthetic.name,
        extra={"population_id": population.id},
    )
    return synthetic

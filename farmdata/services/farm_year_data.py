"""Farm-Year Data — loading ORM rows as core records and writing records back.

Invariants:
    - Years are population-scoped, so filtering by year_id never crosses populations
    - farm_ids=None means "every farm of the year"; an empty list loads nothing
    - to_row() never copies a record id: written rows always get fresh keys

Design Decisions:
    - Explicit select() per table over relationship loading: every caller needs one
      year of a subset of farms, which relationship collections cannot express
"""

from dataclasses import asdict
from typing import Any, Iterable, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.core.errors import DuplicateEntityError, ResourceNotFoundError
from farmdata.core.snapshots import (
    ClosingRecord, CropRecord, DecisionRecord, HolderRecord, LivestockRecord,
    PolicyRef, ProductGroupRef, RentRecord, SubsidyRecord, TransactionRecord,
    record_from_row,
)
from farmdata.models import (
    AgriculturalProduction, AgroManagementDecision, ClosingValFarmValue, Farm,
    FarmYearSubsidy, GreeningFarmYearData, HolderFarmYearData, LandRent,
    LandTransaction, LivestockProduction, Policy, Population, ProductGroup, Year,
)


# ─── Lookups ─────────────────────────────────────────────────────

async def get_or_404(db: AsyncSession, model, entity_id: int, name: str | None = None):
    row = await db.get(model, entity_id)
    if row is None:
        raise ResourceNotFoundError(name or model.__name__, entity_id)
    return row


async def get_population(db: AsyncSession, population_id: int) -> Population | None:
    return await db.get(Population, population_id)


async def get_year(db: AsyncSession, population_id: int, year_number: int) -> Year | None:
    result = await db.execute(
        select(Year).where(
            Year.population_id == population_id, Year.year_number == year_number,
        ),
    )
    return result.scalar_one_or_none()


async def get_year_of_population(db: AsyncSession, population_id: int, year_id: int) -> Year:
    """Year year_id, 404 when it does not exist or belongs to another population."""
    year = await db.get(Year, year_id)
    if year is None or year.population_id != population_id:
        raise ResourceNotFoundError("Year", year_id)
    return year


async def ensure_unique(db: AsyncSession, model, entity: str, **key: Any) -> None:
    """Raise DuplicateEntityError when a model row with the given column values exists."""
    stmt = select(model.id).where(*(getattr(model, column) == value for column, value in key.items()))
    if (await db.execute(stmt.limit(1))).first() is not None:
        raise DuplicateEntityError(
            entity, ", ".join(f"{column}={value}" for column, value in key.items()),
        )


async def get_farms(db: AsyncSession, population_id: int) -> list[Farm]:
    result = await db.execute(
        select(Farm).where(Farm.population_id == population_id).order_by(Farm.id),
    )
    return list(result.scalars().all())


# ─── Reference data ──────────────────────────────────────────────

async def load_product_groups(db: AsyncSession, population_id: int) -> list[ProductGroupRef]:
    result = await db.execute(
        select(ProductGroup)
        .where(ProductGroup.population_id == population_id)
        .order_by(ProductGroup.id),
    )
    return [
        ProductGroupRef(
            id=g.id, name=g.name, organic=g.organic,
            model_specific_categories=list(g.model_specific_categories or []),
        )
        for g in result.scalars().all()
    ]


async def load_policies(db: AsyncSession, population_id: int) -> list[PolicyRef]:
    result = await db.execute(select(Policy).where(Policy.population_id == population_id))
    return [
        PolicyRef(
            id=p.id, policy_identifier=p.policy_identifier,
            relations=[(r.product_group_id, r.economic_compensation) for r in p.group_relations],
        )
        for p in result.scalars().all()
    ]


# ─── Farm-year records ───────────────────────────────────────────

def _scoped(stmt, model, year_id: int, farm_ids: Sequence[int] | None):
    stmt = stmt.where(model.year_id == year_id)
    if farm_ids is not None:
        stmt = stmt.where(model.farm_id.in_(list(farm_ids)))
    return stmt


async def _rows(db: AsyncSession, model, year_id: int, farm_ids: Sequence[int] | None):
    if farm_ids is not None and not farm_ids:
        return []
    result = await db.execute(_scoped(select(model), model, year_id, farm_ids))
    return list(result.scalars().all())


async def load_crops(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> list[CropRecord]:
    return [
        record_from_row(CropRecord, row)
        for row in await _rows(db, AgriculturalProduction, year_id, farm_ids)
    ]


async def load_livestock(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> list[LivestockRecord]:
    return [
        record_from_row(LivestockRecord, row)
        for row in await _rows(db, LivestockProduction, year_id, farm_ids)
    ]


async def _population_rows(db: AsyncSession, model, population_id: int) -> list:
    result = await db.execute(
        select(model)
        .join(Year, model.year_id == Year.id)
        .where(Year.population_id == population_id),
    )
    return list(result.scalars().all())


async def load_population_productions(
    db: AsyncSession, population_id: int,
) -> tuple[list[CropRecord], list[LivestockRecord]]:
    """Crop and livestock productions of every stored year of the population."""
    return (
        [
            record_from_row(CropRecord, row)
            for row in await _population_rows(db, AgriculturalProduction, population_id)
        ],
        [
            record_from_row(LivestockRecord, row)
            for row in await _population_rows(db, LivestockProduction, population_id)
        ],
    )


async def load_closing_values(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> dict[int, ClosingRecord]:
    return {
        row.farm_id: record_from_row(ClosingRecord, row)
        for row in await _rows(db, ClosingValFarmValue, year_id, farm_ids)
    }


async def load_subsidies(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> list[SubsidyRecord]:
    return [
        record_from_row(SubsidyRecord, row)
        for row in await _rows(db, FarmYearSubsidy, year_id, farm_ids)
    ]


async def load_holders(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> dict[int, HolderRecord]:
    return {
        row.farm_id: record_from_row(HolderRecord, row)
        for row in await _rows(db, HolderFarmYearData, year_id, farm_ids)
    }


async def load_greening(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> dict[int, float]:
    return {
        row.farm_id: row.greening_surface or 0.0
        for row in await _rows(db, GreeningFarmYearData, year_id, farm_ids)
    }


async def load_decisions(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> dict[int, DecisionRecord]:
    return {
        row.farm_id: record_from_row(DecisionRecord, row)
        for row in await _rows(db, AgroManagementDecision, year_id, farm_ids)
    }


async def load_rents(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> list[RentRecord]:
    """Rents of the year where either party is one of farm_ids."""
    stmt = select(LandRent).where(LandRent.year_id == year_id)
    if farm_ids is not None:
        if not farm_ids:
            return []
        ids = list(farm_ids)
        stmt = stmt.where(or_(
            LandRent.origin_farm_id.in_(ids), LandRent.destination_farm_id.in_(ids),
        ))
    result = await db.execute(stmt)
    return [record_from_row(RentRecord, row) for row in result.scalars().all()]


async def load_transactions(
    db: AsyncSession, year_id: int, farm_ids: Sequence[int] | None = None,
) -> tuple[list[TransactionRecord], dict[int, CropRecord]]:
    """Transactions of the year (seller or buyer in farm_ids) and the productions they sell."""
    stmt = (
        select(LandTransaction, AgriculturalProduction)
        .join(AgriculturalProduction, LandTransaction.production_id == AgriculturalProduction.id)
        .where(LandTransaction.year_id == year_id)
    )
    if farm_ids is not None:
        if not farm_ids:
            return [], {}
        ids = list(farm_ids)
        stmt = stmt.where(or_(
            AgriculturalProduction.farm_id.in_(ids),
            LandTransaction.destination_farm_id.in_(ids),
        ))
    result = await db.execute(stmt)
    transactions: list[TransactionRecord] = []
    sources: dict[int, CropRecord] = {}
    for transaction, production in result.all():
        transactions.append(TransactionRecord(
            production_id=production.id,
            origin_farm_id=production.farm_id,
            product_group_id=production.product_group_id,
            destination_farm_id=transaction.destination_farm_id,
            percentage=transaction.percentage or 0.0,
            sale_price=transaction.sale_price or 0.0,
        ))
        sources[production.id] = record_from_row(CropRecord, production)
    return transactions, sources


# ─── Writing ─────────────────────────────────────────────────────

def to_row(model, record: Any, **extra: Any):
    """ORM instance for model from a core record plus extra columns (year_id...)."""
    values = {k: v for k, v in asdict(record).items() if k != "id"}
    values.update(extra)
    return model(**values)


def to_rows(model, records: Iterable[Any], **extra: Any) -> list:
    return [to_row(model, r, **extra) for r in records]

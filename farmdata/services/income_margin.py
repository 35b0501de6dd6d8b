"""Income & Margin Service — recomputes stored SE410/SE420 from stored year data.

Invariants:
    - Only gross_farm_income and farm_net_income are written; every other closing
      field is left as stored
    - A farm without a closing value for a year is skipped for that year
"""

import logging
from collections import defaultdict
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.core.income_margin import compute_income_and_margin
from farmdata.models import ClosingValFarmValue, Farm, Year
from farmdata.services.farm_year_data import (
    load_crops, load_livestock, load_rents, load_subsidies, load_transactions,
)

logger = logging.getLogger(__name__)


def _group(records: Iterable, key: str = "farm_id") -> dict[int, list]:
    grouped: dict[int, list] = defaultdict(list)
    for r in records:
        grouped[getattr(r, key)].append(r)
    return grouped


async def recompute_income_and_margin(
    db: AsyncSession,
    farm_ids: Sequence[int],
    year_numbers: Sequence[int] | None = None,
) -> int:
    """Recompute income and margin for farm_ids; returns the number of closing values updated.

    year_numbers=None recomputes every year of the farms' populations. The session is
    flushed, not committed: the caller owns the transaction.
    """
    farm_ids = list(farm_ids)
    if not farm_ids:
        return 0
    population_ids = (await db.execute(
        select(Farm.population_id).where(Farm.id.in_(farm_ids)).distinct(),
    )).scalars().all()
    stmt = select(Year).where(Year.population_id.in_(population_ids))
    if year_numbers is not None:
        stmt = stmt.where(Year.year_number.in_(list(year_numbers)))
    years = (await db.execute(stmt)).scalars().all()

    updated = 0
    for year in years:
        closings = (await db.execute(
            select(ClosingValFarmValue).where(
                ClosingValFarmValue.year_id == year.id,
                ClosingValFarmValue.farm_id.in_(farm_ids),
            ),
        )).scalars().all()
        if not closings:
            continue
        ids = [c.farm_id for c in closings]
        crops = _group(await load_crops(db, year.id, ids))
        livestock = _group(await load_livestock(db, year.id, ids))
        subsidies = _group(await load_subsidies(db, year.id, ids))
        rents = await load_rents(db, year.id, ids)
        transactions, _ = await load_transactions(db, year.id, ids)

        for closing in closings:
            result = compute_income_and_margin(
                closing.farm_id,
                crops.get(closing.farm_id, []),
                livestock.get(closing.farm_id, []),
                subsidies.get(closing.farm_id, []),
                rents,
                transactions,
            )
            closing.gross_farm_income = result.gross_farm_income
            closing.farm_net_income = result.farm_net_income
            updated += 1
        logger.info(
            "Income and margin recomputed for %d farms", len(closings),
            extra={"year": year.year_number, "population_id": year.population_id},
        )
    await db.flush()
    return updated

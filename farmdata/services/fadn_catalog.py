"""FADN Catalog — FADN product CSV import and the arable category of product groups.

Invariants:
    - FADN products are upserted by fadn_identifier: description and arable flag of an
      existing product are overwritten, its relations are kept
    - Arable categories change only for groups with at least one related FADN product
"""

import logging
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.core.arable import update_arable_category
from farmdata.core.domain_types import ARABLE_CATEGORY
from farmdata.core.fadn_csv import parse_fadn_products
from farmdata.models import FADNProduct, FADNProductRelation, Population, ProductGroup
from farmdata.schemas.policy import ArableUpdateSummary, FADNImportSummary
from farmdata.services.farm_year_data import get_or_404

logger = logging.getLogger(__name__)


async def import_fadn_products(db: AsyncSession, text: str) -> FADNImportSummary:
    rows = parse_fadn_products(text)
    existing = {
        p.fadn_identifier: p
        for p in (await db.execute(
            select(FADNProduct).where(
                FADNProduct.fadn_identifier.in_([r.fadn_identifier for r in rows]),
            ),
        )).scalars().all()
    } if rows else {}

    created = updated = 0
    for row in rows:
        product = existing.get(row.fadn_identifier)
        if product is None:
            product = FADNProduct(
                fadn_identifier=row.fadn_identifier,
                description=row.description,
                product_type=row.product_type,
                arable=row.arable,
            )
            db.add(product)
            existing[row.fadn_identifier] = product
            created += 1
        else:
            product.description = row.description
            product.arable = row.arable
            updated += 1
    await db.commit()
    logger.info("FADN products imported: %d created, %d updated", created, updated)
    return FADNImportSummary(created=created, updated=updated)


async def update_arable_categories(db: AsyncSession, population_id: int) -> ArableUpdateSummary:
    await get_or_404(db, Population, population_id)
    groups = (await db.execute(
        select(ProductGroup).where(ProductGroup.population_id == population_id),
    )).scalars().all()
    flags: dict[int, list[bool]] = defaultdict(list)
    for relation in (await db.execute(
        select(FADNProductRelation).where(FADNProductRelation.population_id == population_id),
    )).scalars().all():
        flags[relation.product_group_id].append(relation.fadn_product.arable)

    arable = []
    for group in groups:
        group.model_specific_categories = update_arable_category(
            group.model_specific_categories, flags.get(group.id, []),
        )
        if ARABLE_CATEGORY in group.model_specific_categories:
            arable.append(group.name)
    await db.commit()
    logger.info(
        "Arable categories updated: %d arable groups", len(arable),
        extra={"population_id": population_id},
    )
    return ArableUpdateSummary(product_groups=len(groups), arable=sorted(arable))

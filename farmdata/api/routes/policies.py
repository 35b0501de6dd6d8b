"""Policies — policies, product groups, their relations, FADN products and farm subsidies.

Invariants:
    - Policy identifiers and product group names are unique inside a population
    - FADN identifiers are globally unique
    - Relations only link rows of the same population (404 otherwise)
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.api.routes.farms import add_farm_year_row, list_farm_year_rows
from farmdata.core.errors import InvalidInputError, ResourceNotFoundError
from farmdata.infrastructure.database import get_db
from farmdata.models import (
    FADNProduct, FADNProductRelation, Farm, FarmYearSubsidy, Policy, PolicyGroupRelation,
    Population, ProductGroup,
)
from farmdata.schemas.policy import (
    ArableUpdateSummary, FADNImportSummary, FADNProductCreate, FADNProductRelationCreate,
    FADNProductRelationResponse, FADNProductResponse, FarmYearSubsidyCreate,
    FarmYearSubsidyResponse, PolicyCreate, PolicyGroupRelationCreate,
    PolicyGroupRelationResponse, PolicyResponse, ProductGroupCreate, ProductGroupResponse,
)
from farmdata.services.fadn_catalog import import_fadn_products, update_arable_categories
from farmdata.services.farm_year_data import ensure_unique, get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["policies"])


async def _in_population(db: AsyncSession, model, entity_id: int, population_id: int):
    row = await db.get(model, entity_id)
    if row is None or row.population_id != population_id:
        raise ResourceNotFoundError(model.__name__, entity_id)
    return row


async def _list_in_population(db: AsyncSession, model, population_id: int):
    await get_or_404(db, Population, population_id)
    result = await db.execute(
        select(model).where(model.population_id == population_id).order_by(model.id),
    )
    return result.scalars().all()


async def _store(db: AsyncSession, row):
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


# ─── Policies ────────────────────────────────────────────────────

@router.post(
    "/populations/{population_id}/policies", response_model=PolicyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_policy(
    population_id: int, body: PolicyCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, population_id)
    await ensure_unique(
        db, Policy, "Policy",
        policy_identifier=body.policy_identifier, population_id=population_id,
    )
    return await _store(db, Policy(population_id=population_id, **body.model_dump()))


@router.get("/populations/{population_id}/policies", response_model=list[PolicyResponse])
async def list_policies(
    population_id: int,
    active_in: int | None = Query(None, description="Only policies active in this year number"),
    db: AsyncSession = Depends(get_db),
):
    policies = await _list_in_population(db, Policy, population_id)
    if active_in is None:
        return policies
    return [p for p in policies if p.start_year_number <= active_in <= p.end_year_number]


@router.delete("/policies/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_policy(policy_id: int, db: AsyncSession = Depends(get_db)):
    policy = await get_or_404(db, Policy, policy_id)
    await db.delete(policy)
    await db.commit()


# ─── Product groups ──────────────────────────────────────────────

@router.post(
    "/populations/{population_id}/product-groups", response_model=ProductGroupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_product_group(
    population_id: int, body: ProductGroupCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, population_id)
    await ensure_unique(
        db, ProductGroup, "Product group", name=body.name, population_id=population_id,
    )
    return await _store(db, ProductGroup(population_id=population_id, **body.model_dump()))


@router.get(
    "/populations/{population_id}/product-groups", response_model=list[ProductGroupResponse],
)
async def list_product_groups(population_id: int, db: AsyncSession = Depends(get_db)):
    return await _list_in_population(db, ProductGroup, population_id)


@router.post(
    "/populations/{population_id}/product-groups/arable", response_model=ArableUpdateSummary,
)
async def update_arable(population_id: int, db: AsyncSession = Depends(get_db)):
    """Set or clear the "Arable" category from the majority of related FADN products."""
    return await update_arable_categories(db, population_id)


# ─── Policy-group relations ──────────────────────────────────────

@router.post(
    "/populations/{population_id}/policy-group-relations",
    response_model=PolicyGroupRelationResponse, status_code=status.HTTP_201_CREATED,
)
async def create_policy_group_relation(
    population_id: int, body: PolicyGroupRelationCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, population_id)
    await _in_population(db, Policy, body.policy_id, population_id)
    await _in_population(db, ProductGroup, body.product_group_id, population_id)
    await ensure_unique(
        db, PolicyGroupRelation, "Policy-group relation",
        policy_id=body.policy_id, product_group_id=body.product_group_id,
        population_id=population_id,
    )
    return await _store(
        db, PolicyGroupRelation(population_id=population_id, **body.model_dump()),
    )


@router.get(
    "/populations/{population_id}/policy-group-relations",
    response_model=list[PolicyGroupRelationResponse],
)
async def list_policy_group_relations(population_id: int, db: AsyncSession = Depends(get_db)):
    return await _list_in_population(db, PolicyGroupRelation, population_id)


# ─── FADN products ───────────────────────────────────────────────

@router.post(
    "/fadn-products", response_model=FADNProductResponse, status_code=status.HTTP_201_CREATED,
)
async def create_fadn_product(body: FADNProductCreate, db: AsyncSession = Depends(get_db)):
    await ensure_unique(db, FADNProduct, "FADN product", fadn_identifier=body.fadn_identifier)
    return await _store(db, FADNProduct(**body.model_dump()))


@router.get("/fadn-products", response_model=list[FADNProductResponse])
async def list_fadn_products(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(FADNProduct).order_by(FADNProduct.fadn_identifier))
    return result.scalars().all()


@router.post("/fadn-products/import", response_model=FADNImportSummary)
async def import_fadn_csv(request: Request, db: AsyncSession = Depends(get_db)):
    """Upsert FADN products from a CSV body (fadn code, crop description, arable)."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InvalidInputError(f"FADN CSV is not UTF-8: {e}", field="file") from e
    return await import_fadn_products(db, text)


@router.post(
    "/populations/{population_id}/fadn-product-relations",
    response_model=FADNProductRelationResponse, status_code=status.HTTP_201_CREATED,
)
async def create_fadn_product_relation(
    population_id: int, body: FADNProductRelationCreate, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Population, population_id)
    await _in_population(db, ProductGroup, body.product_group_id, population_id)
    await get_or_404(db, FADNProduct, body.fadn_product_id)
    await ensure_unique(
        db, FADNProductRelation, "FADN product relation",
        product_group_id=body.product_group_id, fadn_product_id=body.fadn_product_id,
        population_id=population_id,
    )
    return await _store(
        db, FADNProductRelation(population_id=population_id, **body.model_dump()),
    )


@router.get(
    "/populations/{population_id}/fadn-product-relations",
    response_model=list[FADNProductRelationResponse],
)
async def list_fadn_product_relations(population_id: int, db: AsyncSession = Depends(get_db)):
    return await _list_in_population(db, FADNProductRelation, population_id)


# ─── Farm-year subsidies ─────────────────────────────────────────

@router.post(
    "/farms/{farm_id}/subsidies", response_model=FarmYearSubsidyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_subsidy(
    farm_id: int, body: FarmYearSubsidyCreate, db: AsyncSession = Depends(get_db),
):
    farm = await get_or_404(db, Farm, farm_id)
    await _in_population(db, Policy, body.policy_id, farm.population_id)
    return await add_farm_year_row(
        db, farm_id, FarmYearSubsidy, "Farm-year subsidy", body, policy_id=body.policy_id,
    )


@router.get("/farms/{farm_id}/subsidies", response_model=list[FarmYearSubsidyResponse])
async def list_subsidies(
    farm_id: int, year_id: int | None = Query(None), db: AsyncSession = Depends(get_db),
):
    return await list_farm_year_rows(db, farm_id, FarmYearSubsidy, year_id)

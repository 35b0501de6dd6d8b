"""Land Transfers — carrying crop productions across a year boundary.

Invariants:
    - A production sold for a total percentage p in (0, 1) keeps (1 - p) of every
      quantity; unit price, unit cost and organic type are unchanged
    - p >= 1 means the farm no longer owns the land: no production next year
    - Absorbed land brings source × percentage of every quantity; the unit price,
      unit cost and organic type of the source replace the target's
    - Percentages outside [0, 1] are ignored with a warning, never applied
    - Inputs are never mutated: every returned production is a fresh record

Design Decisions:
    - A farm may both sell and buy land in the same year: sales are applied first,
      then purchases are absorbed into the scaled result
    - SP-input transfers work on SPCrop values keyed by product group name, the shape
      the SP engine receives
"""

import logging
from dataclasses import replace
from typing import Iterable

from farmdata.core.snapshots import CropRecord, SPCrop, TransactionRecord

logger = logging.getLogger(__name__)

_SCALED_FIELDS = (
    "cultivated_area", "crop_production", "irrigated_area", "land_value",
    "quantity_sold", "quantity_used", "value_sales",
)


def carry_over(previous: CropRecord) -> CropRecord:
    """Copy a previous-year production as a new (unsaved) production."""
    return replace(previous, id=None)


def sold_percentage(product_group_id: int, out_transactions: Iterable[TransactionRecord]) -> float:
    return sum(
        t.percentage for t in out_transactions
        if t.product_group_id == product_group_id
    )


def scale_for_sales(
    previous: CropRecord, out_transactions: Iterable[TransactionRecord],
) -> CropRecord | None:
    """Previous production reduced by the share of its land sold. None when all sold."""
    p = sold_percentage(previous.product_group_id, out_transactions)
    if p >= 1:
        return None
    if p <= 0:
        return carry_over(previous)
    kept = 1 - p
    return replace(
        previous, id=None,
        **{name: getattr(previous, name) * kept for name in _SCALED_FIELDS},
    )


def absorb_transaction(
    target: CropRecord | None, farm_id: int, source: CropRecord, percentage: float,
) -> CropRecord | None:
    """Return target plus source × percentage. Target is created empty when missing."""
    if not 0 <= percentage <= 1:
        logger.warning(
            "Land transfer with percentage %s outside [0, 1] ignored",
            percentage, extra={"farm_id": farm_id},
        )
        return target
    base = target if target is not None else CropRecord(
        farm_id=farm_id, product_group_id=source.product_group_id,
    )
    return replace(
        base, id=None,
        variable_costs=source.variable_costs,
        selling_price=source.selling_price,
        organic_production_type=source.organic_production_type,
        **{
            name: getattr(base, name) + getattr(source, name) * percentage
            for name in _SCALED_FIELDS
        },
    )


def migrate_crop_productions(
    farm_id: int,
    previous: Iterable[CropRecord],
    out_transactions: list[TransactionRecord],
    in_transactions: list[TransactionRecord],
    sources: dict[int, CropRecord],
) -> list[CropRecord]:
    """Target-year crop productions of a farm after its land sales and purchases.

    sources maps previous-year production id → production, for every farm the
    in_transactions may originate from.
    """
    by_group: dict[int, CropRecord] = {}
    for production in previous:
        migrated = scale_for_sales(production, out_transactions)
        if migrated is not None:
            by_group[migrated.product_group_id] = migrated

    for t in in_transactions:
        source = sources.get(t.production_id)
        if source is None:
            logger.warning(
                "Source production %s of a land transfer not found in previous year",
                t.production_id, extra={"farm_id": farm_id},
            )
            continue
        absorbed = absorb_transaction(
            by_group.get(source.product_group_id), farm_id, source, t.percentage,
        )
        if absorbed is not None:
            by_group[source.product_group_id] = absorbed

    return list(by_group.values())


def apply_transfer_to_sp_crops(
    crops_by_farm: dict[int, dict[str, SPCrop]],
    transaction: TransactionRecord,
    product_group_name: str,
) -> None:
    """Move a share of an origin farm's SP crop to the destination farm, in place."""
    origin_crops = crops_by_farm.get(transaction.origin_farm_id)
    destination_crops = crops_by_farm.get(transaction.destination_farm_id)
    if origin_crops is None or destination_crops is None:
        logger.warning(
            "Land transfer between %s and %s skipped: farm not in SP values",
            transaction.origin_farm_id, transaction.destination_farm_id,
        )
        return
    origin = origin_crops.get(product_group_name)
    if origin is None:
        logger.warning(
            "Land transfer of unknown crop %s skipped", product_group_name,
            extra={"farm_id": transaction.origin_farm_id},
        )
        return

    pct = transaction.percentage
    moved = SPCrop(
        crop_productive_area=origin.crop_productive_area * pct,
        crop_variable_costs=origin.crop_variable_costs,
        quantity_sold=origin.quantity_sold * pct,
        quantity_used=origin.quantity_used * pct,
        coupled_subsidy=origin.coupled_subsidy * pct,
        uaa=origin.uaa * pct,
        crop_selling_price=origin.crop_selling_price,
    )

    if pct == 1:
        origin_crops[product_group_name] = SPCrop(
            rebreeding_cows=origin.rebreeding_cows, dairy_cows=origin.dairy_cows,
        )
    else:
        origin.crop_productive_area -= moved.crop_productive_area
        origin.quantity_sold -= moved.quantity_sold
        origin.quantity_used -= moved.quantity_used
        origin.coupled_subsidy -= moved.coupled_subsidy
        origin.uaa -= moved.uaa

    destination = destination_crops.get(product_group_name)
    if destination is None:
        destination = SPCrop(crop_variable_costs=moved.crop_variable_costs)
        destination_crops[product_group_name] = destination

    previous_uaa = destination.uaa
    weight = moved.uaa + previous_uaa
    destination.crop_selling_price = (
        (moved.crop_selling_price * moved.uaa + destination.crop_selling_price * previous_uaa) / weight
        if weight else moved.crop_selling_price
    )
    destination.crop_productive_area += moved.crop_productive_area
    destination.quantity_sold += moved.quantity_sold
    destination.quantity_used += moved.quantity_used
    destination.coupled_subsidy += moved.coupled_subsidy
    destination.uaa += moved.uaa

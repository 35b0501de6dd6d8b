"""Land Transfers — verifies how crop productions migrate across a year boundary.

Tests:
    - Partial sale keeps (1 - p) of every quantity and the unit price
    - Full sale removes the production
    - Purchases add source × percentage and take the source's unit price
    - Out-of-range percentages are ignored
    - SP crop transfers move area and quantities between farms
"""

import pytest

from farmdata.core.land_transfers import (
    absorb_transaction, apply_transfer_to_sp_crops, migrate_crop_productions, scale_for_sales,
)
from farmdata.core.snapshots import CropRecord, SPCrop, TransactionRecord


def _crop(farm_id=1, group=5, area=10.0, **kwargs):
    values = dict(
        quantity_sold=100.0, value_sales=200.0, selling_price=2.0, variable_costs=0.5, id=11,
    )
    values.update(kwargs)
    return CropRecord(farm_id=farm_id, product_group_id=group, cultivated_area=area, **values)


def _sale(percentage, origin=1, destination=2, group=5, production_id=11):
    return TransactionRecord(
        production_id=production_id, origin_farm_id=origin, product_group_id=group,
        destination_farm_id=destination, percentage=percentage,
    )


def test_partial_sale_scales_quantities():
    kept = scale_for_sales(_crop(), [_sale(0.25)])
    assert kept.cultivated_area == pytest.approx(7.5)
    assert kept.quantity_sold == pytest.approx(75.0)
    assert kept.value_sales == pytest.approx(150.0)
    assert kept.selling_price == 2.0
    assert kept.id is None


def test_full_sale_removes_production():
    assert scale_for_sales(_crop(), [_sale(0.6), _sale(0.4)]) is None


def test_no_sale_carries_over_unchanged():
    previous = _crop()
    carried = scale_for_sales(previous, [_sale(0.5, group=6)])
    assert carried.cultivated_area == previous.cultivated_area
    assert carried is not previous


def test_absorb_creates_target_with_source_prices():
    source = _crop(farm_id=1, selling_price=3.0)
    result = absorb_transaction(None, 2, source, 0.5)
    assert result.farm_id == 2
    assert result.cultivated_area == pytest.approx(5.0)
    assert result.selling_price == 3.0


def test_absorb_ignores_out_of_range_percentage():
    target = _crop(farm_id=2)
    assert absorb_transaction(target, 2, _crop(), 1.5) is target


def test_migrate_sells_then_buys():
    seller_crop = _crop(farm_id=1, id=11)
    buyer_crop = _crop(farm_id=2, id=12, area=4.0)
    sale = _sale(0.5)

    seller = migrate_crop_productions(1, [seller_crop], [sale], [], {11: seller_crop})
    buyer = migrate_crop_productions(2, [buyer_crop], [], [sale], {11: seller_crop})

    assert seller[0].cultivated_area == pytest.approx(5.0)
    assert buyer[0].cultivated_area == pytest.approx(9.0)


def test_migrate_skips_unknown_source():
    result = migrate_crop_productions(2, [], [], [_sale(0.5, production_id=99)], {})
    assert result == []


def test_sp_transfer_moves_share_and_weights_price():
    crops = {
        1: {"WHEAT": SPCrop(crop_productive_area=10.0, quantity_sold=100.0, uaa=10.0, crop_selling_price=2.0)},
        2: {"WHEAT": SPCrop(crop_productive_area=10.0, quantity_sold=50.0, uaa=10.0, crop_selling_price=4.0)},
    }
    apply_transfer_to_sp_crops(crops, _sale(0.5), "WHEAT")

    assert crops[1]["WHEAT"].uaa == pytest.approx(5.0)
    assert crops[1]["WHEAT"].quantity_sold == pytest.approx(50.0)
    assert crops[2]["WHEAT"].uaa == pytest.approx(15.0)
    # price weighted by the destination's uaa before the transfer
    assert crops[2]["WHEAT"].crop_selling_price == pytest.approx((2.0 * 5 + 4.0 * 10) / 15)


def test_sp_full_transfer_keeps_only_cows():
    crops = {
        1: {"WHEAT": SPCrop(uaa=10.0, dairy_cows=3.0)},
        2: {},
    }
    apply_transfer_to_sp_crops(crops, _sale(1.0), "WHEAT")
    assert crops[1]["WHEAT"].uaa == 0.0
    assert crops[1]["WHEAT"].dairy_cows == 3.0
    assert crops[2]["WHEAT"].uaa == pytest.approx(10.0)


def test_sp_transfer_with_unknown_farm_is_skipped():
    crops = {1: {"WHEAT": SPCrop(uaa=10.0)}}
    apply_transfer_to_sp_crops(crops, _sale(0.5), "WHEAT")
    assert crops[1]["WHEAT"].uaa == 10.0

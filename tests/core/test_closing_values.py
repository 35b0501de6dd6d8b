"""Closing Values — verifies inheritance, decision overrides and income scaling.

Tests:
    - Untouched fields inherit from the previous year
    - LP decisions override land and loans
    - Taxes scale with SP gross income, or use the population rate when previous GFI is 0
    - Only simulated farms fold "other" margins into current assets
"""

import pytest

from farmdata.core.closing_values import (
    IncomeRates, finalise_closing_value, income_rates, scale_by_gross_income,
    start_closing_value,
)
from farmdata.core.snapshots import (
    ClosingRecord, CropRecord, DecisionRecord, RentRecord, SPFarmResult,
)


def _previous(**kwargs):
    values = dict(
        farm_id=1, machinery=50.0, depreciation=10.0, total_current_assets=1000.0,
        agricultural_land_value=2000.0, agricultural_land_area=20.0,
        long_and_medium_term_loans=300.0, gross_farm_income=400.0, taxes=40.0,
        vat_balance_excluding_investments=20.0,
    )
    values.update(kwargs)
    return ClosingRecord(**values)


def test_start_without_sp_result_inherits():
    closing = start_closing_value(1, _previous(), None, None)
    assert closing.machinery == 50.0
    assert closing.total_current_assets == 1000.0
    assert closing.agricultural_land_area == 20.0
    assert closing.rent_balance == 0.0


def test_start_with_sp_result_and_decision():
    decision = DecisionRecord(
        farm_id=1, agricultural_land_area=25.0, agricultural_land_value=2600.0,
        long_and_medium_term_loans=100.0,
    )
    sp = SPFarmResult(farm_id=1, total_current_assets=1500.0)
    closing = start_closing_value(1, _previous(), sp, decision, rent_balance_area=2.0,
                                  rent_price_per_hectare=500.0)
    assert closing.total_current_assets == 1500.0
    assert closing.agricultural_land_area == 25.0
    assert closing.long_and_medium_term_loans == 100.0
    assert closing.rent_balance == -1000.0


def test_income_rates_skip_zero_gross_income():
    rates = income_rates([
        _previous(gross_farm_income=100.0, taxes=10.0, vat_balance_excluding_investments=5.0),
        _previous(gross_farm_income=0.0, taxes=99.0),
    ])
    assert rates.tax == pytest.approx(0.1)
    assert rates.vat == pytest.approx(0.05)
    assert income_rates([]) == IncomeRates()


def test_scale_by_gross_income_cases():
    assert scale_by_gross_income(40.0, 400.0, None, 0.3) == 40.0
    assert scale_by_gross_income(40.0, 400.0, 800.0, 0.3) == pytest.approx(80.0)
    assert scale_by_gross_income(40.0, 0.0, 800.0, 0.3) == pytest.approx(240.0)


def test_finalise_simulated_farm_folds_other_margins():
    previous = _previous()
    sp = SPFarmResult(farm_id=1, total_current_assets=1000.0, farm_gross_income=800.0)
    closing = start_closing_value(1, previous, sp, None)
    crops = [
        CropRecord(farm_id=1, product_group_id=1, value_sales=300.0, crop_production=30.0),
        CropRecord(farm_id=1, product_group_id=2, value_sales=100.0, quantity_sold=10.0,
                   variable_costs=2.0, crop_production=10.0),
    ]
    rents = [RentRecord(origin_farm_id=1, destination_farm_id=2, rent_value=50.0)]

    finalise_closing_value(
        closing, previous, crops, [], [], rents, sp, IncomeRates(),
        other_group_ids={2}, other_policy_ids=set(),
    )

    assert closing.gross_farm_income == pytest.approx(400.0 - 20.0)
    assert closing.taxes == pytest.approx(80.0)
    assert closing.farm_net_income == pytest.approx(380.0 + 80.0 - 10.0)
    # other margin 80 and rent received 50
    assert closing.total_current_assets == pytest.approx(1130.0)
    assert closing.total_output_crops_and_crop_production == pytest.approx(40.0)


def test_finalise_non_simulated_keeps_current_assets():
    previous = _previous()
    closing = start_closing_value(1, previous, None, None)
    crops = [CropRecord(farm_id=1, product_group_id=2, value_sales=100.0)]
    finalise_closing_value(
        closing, previous, crops, [], [], [], None, IncomeRates(),
        other_group_ids={2}, other_policy_ids=set(),
    )
    assert closing.total_current_assets == 1000.0
    assert closing.taxes == 40.0

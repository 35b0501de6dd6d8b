"""Variable Costs — verifies averages and the redistribution of SP total costs.

Tests:
    - Averages ignore zero and negative costs
    - Kept previous costs are excluded from the redistributed amount
    - No cost basis gives ratio 0 instead of dividing by zero
"""

import pytest

from farmdata.core.snapshots import CropRecord, LivestockRecord
from farmdata.core.variable_costs import (
    CostAverages, average_costs_by_group, compute_cost_averages, redistribute_variable_costs,
)


def test_average_ignores_non_positive_costs():
    averages = average_costs_by_group([(1, 2.0), (1, 4.0), (1, 0.0), (2, -1.0), (3, None)])
    assert averages == {1: 3.0}


def test_compute_cost_averages_milk_uses_livestock_filter():
    livestock = [
        LivestockRecord(farm_id=1, product_group_id=9, variable_costs=1.0, milk_variable_costs=0.4),
        LivestockRecord(farm_id=2, product_group_id=9, variable_costs=0.0, milk_variable_costs=5.0),
    ]
    averages = compute_cost_averages([], livestock)
    assert averages.livestock == {9: 1.0}
    assert averages.milk == {9: 0.4}


def test_previous_cost_kept_and_remainder_redistributed():
    kept = CropRecord(farm_id=1, product_group_id=1, quantity_sold=10.0)
    new = CropRecord(farm_id=1, product_group_id=2, quantity_sold=6.0, quantity_used=4.0)
    previous = {1: CropRecord(farm_id=1, product_group_id=1, variable_costs=2.0)}
    averages = CostAverages(crop={1: 1.0, 2: 3.0}, livestock={}, milk={})

    ratio = redistribute_variable_costs(80.0, [kept, new], [], previous, {}, averages)

    # 80 - 2 × 10 = 60 spread over 10 × 3.0
    assert ratio == pytest.approx(2.0)
    assert kept.variable_costs == 2.0
    assert new.variable_costs == pytest.approx(6.0)


def test_livestock_without_previous_gets_livestock_and_milk_average():
    lp = LivestockRecord(farm_id=1, product_group_id=9, milk_total_production=10.0)
    averages = CostAverages(crop={}, livestock={9: 1.0}, milk={9: 0.5})

    ratio = redistribute_variable_costs(20.0, [], [lp], {}, {}, averages)

    assert ratio == pytest.approx(2.0)
    assert lp.variable_costs == pytest.approx(3.0)


def test_no_cost_basis_gives_zero_ratio():
    crop = CropRecord(farm_id=1, product_group_id=7, quantity_sold=5.0)
    ratio = redistribute_variable_costs(
        100.0, [crop], [], {}, {}, CostAverages(crop={}, livestock={}, milk={}),
    )
    assert ratio == 0.0
    assert crop.variable_costs == 0.0

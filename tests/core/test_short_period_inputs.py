"""Short Period Inputs — verifies the shape of the data sent to the SP engine.

Tests:
    - "Other" groups are left out; absent crops are sent as zeros
    - Only the DAIRY livestock production is reported, with milk price = sales / sold
    - Simulation adjustments apply land transactions and LP current assets
"""

import pytest

from farmdata.core.short_period_inputs import (
    SPInputFarm, active_policies, apply_simulation_adjustments, build_sp_values, sp_holder,
)
from farmdata.core.snapshots import (
    ClosingRecord, CropRecord, DecisionRecord, HolderRecord, LivestockRecord,
    ProductGroupRef, TransactionRecord,
)

GROUPS = [
    ProductGroupRef(id=1, name="WHEAT"),
    ProductGroupRef(id=2, name="BARLEY"),
    ProductGroupRef(id=3, name="DAIRY"),
    ProductGroupRef(id=4, name="FORESTRY", model_specific_categories=["Other"]),
]


def _farm(farm_id, **kwargs):
    return SPInputFarm(
        farm_id=farm_id, region_level_1="R1", region_level_2="R2", region_level_3=100,
        technical_economic_orientation=15, altitude=3, **kwargs,
    )


class _Policy:
    def __init__(self, start, end):
        self.start_year_number = start
        self.end_year_number = end


def test_active_policies_window_is_inclusive():
    policies = [_Policy(2019, 2020), _Policy(2021, 2025), _Policy(2010, 2030)]
    assert active_policies(policies, 2020) == [policies[0], policies[2]]


def test_crops_cover_every_non_other_group():
    farm = _farm(1, crops=[CropRecord(
        farm_id=1, product_group_id=1, cultivated_area=12.345, quantity_sold=4.0, selling_price=2.0,
    )], closing=ClosingRecord(farm_id=1, total_current_assets=99.0))

    [value] = build_sp_values([farm], GROUPS)

    assert set(value["crops"]) == {"WHEAT", "BARLEY", "DAIRY"}
    assert value["crops"]["WHEAT"].crop_productive_area == 12.35
    assert value["crops"]["WHEAT"].uaa == 12.345
    assert value["crops"]["BARLEY"].uaa == 0.0
    assert value["current_assets"] == 99.0
    assert value["farm_code"] == 1
    assert value["holder_info"] is None


def test_dairy_livestock_milk_price():
    farm = _farm(1, livestock=[
        LivestockRecord(farm_id=1, product_group_id=3, dairy_cows=10,
                        milk_production_sold=200.0, milk_total_sales=100.0),
    ])
    [value] = build_sp_values([farm], GROUPS)
    assert value["livestock"]["dairy_cows"] == 10
    assert value["livestock"]["milk_selling_price"] == pytest.approx(0.5)


def test_missing_dairy_sends_zeros():
    [value] = build_sp_values([_farm(1)], GROUPS)
    assert value["livestock"]["milk_production"] == 0.0


def test_holder_gender_is_sent_as_text():
    holder = sp_holder(HolderRecord(farm_id=1, holder_age=44, holder_gender=2))
    assert holder["holder_gender"] == "2"
    assert holder["holder_age"] == 44


def test_simulation_adjustments():
    seller = _farm(1, crops=[CropRecord(farm_id=1, product_group_id=1, cultivated_area=10.0)])
    buyer = _farm(2)
    values = build_sp_values([seller, buyer], GROUPS)
    transaction = TransactionRecord(
        production_id=5, origin_farm_id=1, product_group_id=1,
        destination_farm_id=2, percentage=0.5,
    )
    decision = DecisionRecord(farm_id=2, total_current_assets=321.0)

    apply_simulation_adjustments(values, [transaction], {1: "WHEAT"}, [decision])

    assert values[0]["crops"]["WHEAT"].uaa == pytest.approx(5.0)
    assert values[1]["crops"]["WHEAT"].uaa == pytest.approx(5.0)
    assert values[1]["current_assets"] == 321.0

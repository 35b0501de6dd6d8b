"""Long Period — verifies LP input values, default decisions and holder ageing."""

from farmdata.core.long_period import (
    average_ha_price, build_lp_value, default_decision, next_holder_data,
)
from farmdata.core.snapshots import ClosingRecord, HolderRecord, SubsidyRecord


def test_average_ha_price_without_land_is_zero():
    assert average_ha_price(1000.0, 0.0) == 0.0
    assert average_ha_price(1000.0, 4.0) == 250.0


def test_build_lp_value_maps_se_codes():
    closing = ClosingRecord(
        farm_id=3, total_current_assets=10.0, farm_net_income=20.0, gross_farm_income=30.0,
        long_and_medium_term_loans=40.0, agricultural_land_value=500.0, agricultural_land_area=5.0,
    )
    value = build_lp_value(closing, None, [SubsidyRecord(farm_id=3, policy_id=1, value=9.0)], 42)
    assert value["farm_id"] == 3
    assert (value["se465"], value["se420"], value["se410"], value["se490"]) == (10.0, 20.0, 30.0, 40.0)
    assert value["average_ha_price"] == 100.0
    assert value["aversion_risk_factor"] == 0.5
    assert value["region_level_3"] == 42
    assert len(value["agent_subsidies"]) == 1


def test_default_decision_reproduces_previous_closing():
    previous = ClosingRecord(
        farm_id=3, agricultural_land_area=10.0, agricultural_land_value=1000.0,
        total_current_assets=77.0, long_and_medium_term_loans=5.0,
    )
    decision = default_decision(3, previous)
    assert decision.agricultural_land_area == 10.0
    assert decision.average_land_value == 100.0
    assert decision.targeted_land_aquisition_area == 0.0
    assert decision.retire_and_hand_over is False


def test_holder_ages_one_year():
    previous = HolderRecord(farm_id=1, holder_age=50, holder_successors=0, holder_successors_age=0)
    holder = next_holder_data(previous, retire_and_hand_over=False)
    assert holder.holder_age == 51
    assert holder.holder_successors_age == 0


def test_hand_over_to_successor():
    previous = HolderRecord(
        farm_id=1, holder_age=70, holder_successors=2, holder_successors_age=40, holder_gender=2,
    )
    holder = next_holder_data(previous, retire_and_hand_over=True)
    assert holder.holder_age == 41
    assert holder.holder_successors == 1
    assert holder.holder_gender == 2


def test_hand_over_without_successor_only_ages():
    previous = HolderRecord(farm_id=1, holder_age=70, holder_successors=0)
    assert next_holder_data(previous, retire_and_hand_over=True).holder_age == 71

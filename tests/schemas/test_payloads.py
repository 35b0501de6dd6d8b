"""Payload schemas — validation bounds and conversion to core records.

Tests:
    - SP results convert to SPFarmResult with None prices read as 0
    - Percentages and progress values are bounded
    - Descriptions are stripped
"""

import pytest
from pydantic import ValidationError

from farmdata.schemas.land import LandTransactionCreate
from farmdata.schemas.population import PopulationCreate
from farmdata.schemas.short_period import SPResultIn
from farmdata.schemas.simulation import RunProgress
from farmdata.schemas.transfer import LandTransactionJson


def test_sp_result_to_record():
    result = SPResultIn.model_validate({
        "farm_id": 4,
        "crops": {"MILK": {"quantity_sold": 10.0, "dairy_cows": 3}},
        "subsidies": [{"policy_identifier": "BASIC", "value": 5.0}],
        "rented_in_lands": [{"origin_farm_id": 1, "destination_farm_id": 4, "rent_value": 2.0}],
    }).to_record()

    assert result.farm_id == 4
    milk = result.crops["MILK"]
    assert milk.dairy_cows == 3.0
    assert milk.crop_selling_price == 0.0
    assert result.subsidies[0].policy_identifier == "BASIC"
    assert result.rented_in_lands[0].destination_farm_id == 4


def test_land_transaction_percentage_bounds():
    with pytest.raises(ValidationError):
        LandTransactionCreate(production_id=1, destination_farm_id=2, year_id=3, percentage=1.2)
    with pytest.raises(ValidationError):
        LandTransactionJson(
            year_number=2021, product_group_name="WHEAT", origin_farm_code="A",
            destination_farm_code="B", percentage=-0.1,
        )


def test_transaction_json_production_year_is_optional():
    transaction = LandTransactionJson(
        year_number=2021, product_group_name="WHEAT", origin_farm_code="A",
        destination_farm_code="B", percentage=0.5,
    )
    assert transaction.production_year_number is None


def test_run_progress_bounds():
    assert RunProgress(current_stage_progress=100).current_stage_progress == 100
    with pytest.raises(ValidationError):
        RunProgress(current_substage_progress=-1)


def test_population_description_is_stripped():
    assert PopulationCreate(description="  North  ").description == "North"

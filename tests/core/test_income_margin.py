"""Income & Margin — verifies SE410/SE420 and the rent/sale sign conventions.

Tests:
    - Landlord receives rent, tenant pays it
    - Seller receives the sale price, buyer pays it
    - Gross income sums sales and subsidies; net income subtracts unit costs
"""

import pytest

from farmdata.core.income_margin import (
    compute_income_and_margin, land_transaction_balance, rent_balance,
)
from farmdata.core.snapshots import (
    CropRecord, LivestockRecord, RentRecord, SubsidyRecord, TransactionRecord,
)


def test_rent_balance_sign_convention():
    rents = [
        RentRecord(origin_farm_id=1, destination_farm_id=2, rent_value=100.0),
        RentRecord(origin_farm_id=3, destination_farm_id=1, rent_value=40.0),
    ]
    assert rent_balance(1, rents) == 60.0
    assert rent_balance(2, rents) == -100.0
    assert rent_balance(4, rents) == 0.0


def test_land_transaction_balance_sign_convention():
    transactions = [TransactionRecord(
        production_id=10, origin_farm_id=1, product_group_id=5,
        destination_farm_id=2, percentage=0.5, sale_price=1000.0,
    )]
    assert land_transaction_balance(1, transactions) == 1000.0
    assert land_transaction_balance(2, transactions) == -1000.0


def test_gross_and_net_income():
    crops = [CropRecord(
        farm_id=1, product_group_id=5, value_sales=500.0,
        quantity_sold=10.0, quantity_used=5.0, variable_costs=2.0,
    )]
    livestock = [LivestockRecord(
        farm_id=1, product_group_id=6, milk_total_sales=300.0, eggs_total_sales=20.0,
        manure_total_sales=10.0, milk_total_production=50.0, variable_costs=1.0,
    )]
    subsidies = [SubsidyRecord(farm_id=1, policy_id=1, value=70.0)]
    rents = [RentRecord(origin_farm_id=2, destination_farm_id=1, rent_value=25.0)]

    result = compute_income_and_margin(1, crops, livestock, subsidies, rents)

    assert result.gross_farm_income == pytest.approx(500 + 330 + 70)
    # costs: 2 × 15 on crops, 1 × 50 on milk; rent paid 25
    assert result.farm_net_income == pytest.approx(900 - 30 - 50 - 25)
    assert result.rent_balance == -25.0
    assert result.land_transaction_balance == 0.0


def test_empty_farm_has_zero_income():
    result = compute_income_and_margin(1, [], [], [])
    assert result.gross_farm_income == 0.0
    assert result.farm_net_income == 0.0

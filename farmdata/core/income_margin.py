"""Income & Margin — gross farm income and farm net income of one farm-year.

Invariants:
    - Pure: records in, IncomeMargin out; no IO
    - Agricultural variable costs are per produced unit: cost = unit cost × (sold + used)
    - Livestock costs are charged on milk production only
    - Rent: the origin farm (landlord) receives, the destination farm (tenant) pays
    - Land sale: the farm owning the origin production receives, the destination pays

Design Decisions:
    - Landlord and seller receive, tenant and buyer pay: the same sign the SP
      current-assets adjustment uses for rents (closing_values.finalise_closing_value)
    - Runs after every bulk write of year data (SP ingestion, population import) so the
      stored SE410/SE420 always match the stored productions
"""

from dataclasses import dataclass
from typing import Iterable

from farmdata.core.snapshots import (
    CropRecord, LivestockRecord, RentRecord, SubsidyRecord, TransactionRecord,
)


@dataclass(frozen=True)
class IncomeMargin:
    gross_farm_income: float
    farm_net_income: float
    rent_balance: float
    land_transaction_balance: float


def rent_balance(farm_id: int, rents: Iterable[RentRecord]) -> float:
    """Rent received as landlord minus rent paid as tenant."""
    received = paid = 0.0
    for r in rents:
        if r.origin_farm_id == farm_id:
            received += r.rent_value
        if r.destination_farm_id == farm_id:
            paid += r.rent_value
    return received - paid


def land_transaction_balance(
    farm_id: int, transactions: Iterable[TransactionRecord],
) -> float:
    """Sale prices received as seller minus sale prices paid as buyer."""
    received = paid = 0.0
    for t in transactions:
        if t.origin_farm_id == farm_id:
            received += t.sale_price
        if t.destination_farm_id == farm_id:
            paid += t.sale_price
    return received - paid


def compute_income_and_margin(
    farm_id: int,
    crops: Iterable[CropRecord],
    livestock: Iterable[LivestockRecord],
    subsidies: Iterable[SubsidyRecord],
    rents: Iterable[RentRecord] = (),
    transactions: Iterable[TransactionRecord] = (),
) -> IncomeMargin:
    """Recompute SE410 (gross farm income) and SE420 (farm net income)."""
    crops = list(crops)
    livestock = list(livestock)

    agricultural_income = sum(c.value_sales for c in crops)
    agricultural_costs = sum(c.variable_costs * c.quantity for c in crops)
    livestock_income = sum(
        lp.manure_total_sales + lp.eggs_total_sales + lp.milk_total_sales
        for lp in livestock
    )
    livestock_costs = sum(
        lp.variable_costs * lp.milk_total_production for lp in livestock
    )
    subsidy_total = sum(s.value for s in subsidies)
    rents_net = rent_balance(farm_id, rents)
    sales_net = land_transaction_balance(farm_id, transactions)

    gross = agricultural_income + livestock_income + subsidy_total
    net = gross - agricultural_costs - livestock_costs + rents_net + sales_net
    return IncomeMargin(
        gross_farm_income=gross,
        farm_net_income=net,
        rent_balance=rents_net,
        land_transaction_balance=sales_net,
    )

"""Closing Values — building a farm's target-year closing value from the previous one.

Invariants:
    - Fields the simulation does not touch are inherited unchanged from the previous year
    - Taxes and VAT follow the SP gross income: proportional to the previous year's ratio,
      or to the population average ratio when the previous gross income is 0
    - Without an SP result, taxes and VAT keep their previous amounts
    - Only simulated farms fold "other" margins, "other" subsidies and rents into current assets

Design Decisions:
    - Two steps (start / finalise): land value is needed to price new crop productions,
      while income needs the final productions
"""

from dataclasses import dataclass
from typing import Iterable

from farmdata.core.income_margin import rent_balance
from farmdata.core.snapshots import (
    ClosingRecord, CropRecord, DecisionRecord, LivestockRecord, RentRecord,
    SPFarmResult, SubsidyRecord,
)

DEFAULT_RENT_PRICE_PER_HECTARE = 589.0

_INHERITED_FIELDS = (
    "farm_buildings_value", "fixed_assets", "forest_land_area", "forest_land_value",
    "intangible_assets_non_tradable", "intangible_assets_tradable", "land_improvements",
    "machinery", "machinery_and_equipment", "other_non_current_assets", "other_outputs",
    "subsidies_on_investments", "total_external_factors", "total_intermediate_consumption",
    "vat_balance_on_investments", "plantations_value", "depreciation",
)


@dataclass(frozen=True)
class IncomeRates:
    """Population averages of taxes and VAT over gross farm income."""
    tax: float = 0.0
    vat: float = 0.0


def start_closing_value(
    farm_id: int,
    previous: ClosingRecord,
    sp_result: SPFarmResult | None,
    decision: DecisionRecord | None,
    rent_balance_area: float = 0.0,
    rent_price_per_hectare: float = DEFAULT_RENT_PRICE_PER_HECTARE,
) -> ClosingRecord:
    """Target-year closing value before productions are known."""
    closing = ClosingRecord(
        farm_id=farm_id,
        **{name: getattr(previous, name) for name in _INHERITED_FIELDS},
    )
    if sp_result is not None:
        closing.total_current_assets = sp_result.total_current_assets
        closing.rent_balance = rent_balance_area * -rent_price_per_hectare
    else:
        closing.total_current_assets = previous.total_current_assets

    source = decision if decision is not None else previous
    closing.long_and_medium_term_loans = source.long_and_medium_term_loans
    closing.agricultural_land_value = source.agricultural_land_value
    closing.agricultural_land_area = source.agricultural_land_area
    return closing


def income_rates(previous_closing_values: Iterable[ClosingRecord]) -> IncomeRates:
    considered = [c for c in previous_closing_values if c.gross_farm_income != 0]
    if not considered:
        return IncomeRates()
    return IncomeRates(
        tax=sum(c.taxes / c.gross_farm_income for c in considered) / len(considered),
        vat=sum(
            c.vat_balance_excluding_investments / c.gross_farm_income for c in considered
        ) / len(considered),
    )


def scale_by_gross_income(
    previous_amount: float,
    previous_gfi: float,
    sp_gross_income: float | None,
    average_rate: float,
) -> float:
    if sp_gross_income is None:
        return previous_amount
    if previous_gfi != 0:
        return previous_amount * sp_gross_income / previous_gfi
    return average_rate * sp_gross_income


def crop_margin(crop: CropRecord) -> float:
    return crop.value_sales - crop.variable_costs * crop.quantity


def livestock_margin(lp: LivestockRecord) -> float:
    milk = lp.milk_total_sales - lp.milk_variable_costs * lp.milk_total_production
    rest = (
        lp.manure_total_sales + lp.eggs_total_sales + lp.value_sold_animals
        - lp.variable_costs * (lp.eggs_total_production + lp.wool_total_production)
    )
    return milk + rest


def finalise_closing_value(
    closing: ClosingRecord,
    previous: ClosingRecord,
    crops: list[CropRecord],
    livestock: list[LivestockRecord],
    subsidies: list[SubsidyRecord],
    rents: Iterable[RentRecord],
    sp_result: SPFarmResult | None,
    rates: IncomeRates,
    other_group_ids: set[int],
    other_policy_ids: set[int],
) -> ClosingRecord:
    """Fill income, taxes, VAT, outputs and current assets in place."""
    total_costs = (
        sum(c.variable_costs * c.quantity for c in crops)
        + sum(
            lp.variable_costs * (lp.eggs_total_production + lp.milk_total_production + lp.wool_total_production)
            for lp in livestock
        )
    )
    total_sales = (
        sum(c.value_sales for c in crops)
        + sum(
            lp.milk_total_sales + lp.manure_total_sales + lp.value_sold_animals + lp.eggs_total_sales
            for lp in livestock
        )
    )
    total_subsidies = sum(s.value for s in subsidies)
    sp_gross_income = sp_result.farm_gross_income if sp_result is not None else None

    closing.gross_farm_income = total_sales + total_subsidies - total_costs
    closing.taxes = scale_by_gross_income(
        previous.taxes, previous.gross_farm_income, sp_gross_income, rates.tax,
    )
    closing.farm_net_income = closing.gross_farm_income + closing.taxes - closing.depreciation
    closing.vat_balance_excluding_investments = scale_by_gross_income(
        previous.vat_balance_excluding_investments, previous.gross_farm_income,
        sp_gross_income, rates.vat,
    )

    if sp_result is not None:
        closing.total_current_assets += (
            sum(crop_margin(c) for c in crops if c.product_group_id in other_group_ids)
            + sum(livestock_margin(lp) for lp in livestock if lp.product_group_id in other_group_ids)
            + sum(s.value for s in subsidies if s.policy_id in other_policy_ids)
            + rent_balance(closing.farm_id, rents)
        )

    closing.total_output_crops_and_crop_production = sum(c.crop_production for c in crops)
    closing.total_output_livestock_and_livestock_production = sum(
        lp.milk_total_production + lp.eggs_total_production + lp.wool_total_production
        for lp in livestock
    )
    return closing

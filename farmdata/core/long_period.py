"""Long Period — LP engine input values and LP result rules.

Invariants:
    - average_ha_price is 0 when the farm owns no land (never divides by zero)
    - A default decision reproduces the previous closing value: no land bought,
      no hand-over
    - Holder ages advance by exactly one year; a hand-over only happens when the farm
      has successors
"""

from typing import Any, Iterable

from farmdata.core.snapshots import ClosingRecord, DecisionRecord, HolderRecord, SubsidyRecord

DEFAULT_AVERSION_RISK_FACTOR = 0.5


def average_ha_price(land_value: float, land_area: float) -> float:
    return land_value / land_area if land_area > 0 else 0.0


def build_lp_value(
    closing: ClosingRecord,
    holder: HolderRecord | None,
    subsidies: Iterable[SubsidyRecord],
    region_level_3: int,
    aversion_risk_factor: float = DEFAULT_AVERSION_RISK_FACTOR,
) -> dict[str, Any]:
    return {
        "farm_id": closing.farm_id,
        "se465": closing.total_current_assets,
        "se420": closing.farm_net_income,
        "se410": closing.gross_farm_income,
        "se490": closing.long_and_medium_term_loans,
        "agricultural_land_value": closing.agricultural_land_value,
        "agricultural_land_area": closing.agricultural_land_area,
        "average_ha_price": average_ha_price(
            closing.agricultural_land_value, closing.agricultural_land_area,
        ),
        "aversion_risk_factor": aversion_risk_factor,
        "agent_holder": holder,
        "agent_subsidies": list(subsidies),
        "region_level_3": region_level_3,
    }


def default_decision(farm_id: int, previous: ClosingRecord) -> DecisionRecord:
    """Decision that keeps the farm as it was, for farms the LP engine failed on."""
    return DecisionRecord(
        farm_id=farm_id,
        agricultural_land_area=previous.agricultural_land_area,
        agricultural_land_value=previous.agricultural_land_value,
        total_current_assets=previous.total_current_assets,
        long_and_medium_term_loans=previous.long_and_medium_term_loans,
        average_land_value=average_ha_price(
            previous.agricultural_land_value, previous.agricultural_land_area,
        ),
        targeted_land_aquisition_area=0.0,
        targeted_land_aquisition_hectar_price=0.0,
        retire_and_hand_over=False,
    )


def next_holder_data(previous: HolderRecord, retire_and_hand_over: bool) -> HolderRecord:
    if retire_and_hand_over and previous.holder_successors > 0:
        # successor gender is unknown; the previous holder's is kept
        return HolderRecord(
            farm_id=previous.farm_id,
            holder_age=previous.holder_successors_age + 1,
            holder_family_members=previous.holder_family_members,
            holder_gender=previous.holder_gender,
            holder_successors=previous.holder_successors - 1,
            holder_successors_age=previous.holder_successors_age + 1,
        )
    return HolderRecord(
        farm_id=previous.farm_id,
        holder_age=previous.holder_age + 1,
        holder_family_members=previous.holder_family_members,
        holder_gender=previous.holder_gender,
        holder_successors=previous.holder_successors,
        holder_successors_age=(
            previous.holder_successors_age + 1 if previous.holder_successors_age > 0 else 0
        ),
    )

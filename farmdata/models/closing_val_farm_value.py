"""ClosingValFarmValue ORM — year-end financial state of a farm.

Invariants:
    - Unique per (farm, year)
    - FADN SE codes are noted per column; money in €, areas in ha
    - farm_net_income / gross_farm_income are recomputed after every bulk write of
      the year's productions (services/income_margin.py)
"""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


def _money():
    return mapped_column(Float, nullable=False, default=0.0)


class ClosingValFarmValue(Base):
    __tablename__ = "closing_val_farm_values"
    __table_args__ = (
        UniqueConstraint("farm_id", "year_id", name="uq_closing_value_farm_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    agricultural_land_value: Mapped[float] = _money()
    agricultural_land_area: Mapped[float] = _money()
    land_improvements: Mapped[float] = _money()
    plantations_value: Mapped[float] = _money()
    forest_land_value: Mapped[float] = _money()
    forest_land_area: Mapped[float] = _money()
    farm_buildings_value: Mapped[float] = _money()
    machinery_and_equipment: Mapped[float] = _money()
    intangible_assets_tradable: Mapped[float] = _money()
    intangible_assets_non_tradable: Mapped[float] = _money()
    other_non_current_assets: Mapped[float] = _money()
    long_and_medium_term_loans: Mapped[float] = _money()                 # SE490
    total_current_assets: Mapped[float] = _money()                       # SE465
    farm_net_income: Mapped[float] = _money()                            # SE420
    gross_farm_income: Mapped[float] = _money()                          # SE410
    subsidies_on_investments: Mapped[float] = _money()                   # SE406
    vat_balance_on_investments: Mapped[float] = _money()                 # SE408
    total_output_crops_and_crop_production: Mapped[float] = _money()     # SE135
    total_output_livestock_and_livestock_production: Mapped[float] = _money()  # SE206
    other_outputs: Mapped[float] = _money()                              # SE256
    total_intermediate_consumption: Mapped[float] = _money()             # SE275
    taxes: Mapped[float] = _money()                                      # SE390
    vat_balance_excluding_investments: Mapped[float] = _money()          # SE395
    fixed_assets: Mapped[float] = _money()                               # SE441
    depreciation: Mapped[float] = _money()                               # SE360
    total_external_factors: Mapped[float] = _money()                     # SE365
    machinery: Mapped[float] = _money()                                  # SE455
    rent_balance: Mapped[float] = _money()

    farm: Mapped["Farm"] = relationship("Farm", back_populates="closing_values")

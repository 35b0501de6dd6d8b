"""LivestockProduction ORM — one livestock activity of a farm in one year."""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class LivestockProduction(Base):
    __tablename__ = "livestock_productions"
    __table_args__ = (
        UniqueConstraint(
            "farm_id", "product_group_id", "year_id", name="uq_livestock_production",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    product_group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product_groups.id", ondelete="CASCADE"), nullable=False,
    )
    number_of_animals: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    dairy_cows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    number_of_animals_sold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    value_sold_animals: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    number_animals_for_slaughtering: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    value_slaughtered_animals: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    number_animals_rearing_breading: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    value_animals_rearing_breading: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    milk_total_production: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    milk_production_sold: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    milk_total_sales: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    milk_variable_costs: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    wool_total_production: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    wool_production_sold: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    eggs_total_sales: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    eggs_total_production: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    eggs_production_sold: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    manure_total_sales: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    variable_costs: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    selling_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="livestock_productions")
    product_group: Mapped["ProductGroup"] = relationship("ProductGroup")

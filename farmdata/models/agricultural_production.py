"""AgriculturalProduction ORM — one crop of a farm in one year.

Invariants:
    - Unique per (farm, product group, year)
    - variable_costs is per produced unit (€/ton); quantities in tons, areas in ha
    - Deleting a production deletes the land transactions selling its land
"""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.core.domain_types import OrganicProductionType
from farmdata.db.base import Base


class AgriculturalProduction(Base):
    __tablename__ = "agricultural_productions"
    __table_args__ = (
        UniqueConstraint(
            "farm_id", "product_group_id", "year_id", name="uq_agricultural_production",
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
    organic_production_type: Mapped[int] = mapped_column(
        Integer, nullable=False, default=OrganicProductionType.UNDETERMINED,
    )
    cultivated_area: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    irrigated_area: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    crop_production: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    quantity_sold: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    quantity_used: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    value_sales: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    variable_costs: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    land_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    selling_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="agricultural_productions")
    product_group: Mapped["ProductGroup"] = relationship("ProductGroup")
    land_transactions: Mapped[list["LandTransaction"]] = relationship(
        "LandTransaction", back_populates="production", cascade="all, delete-orphan",
    )

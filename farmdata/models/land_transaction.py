"""LandTransaction ORM — share of a production's land sold to a destination farm.

Invariants:
    - Unique per (production, destination farm, year)
    - percentage in [0, 1]; the seller is the farm owning the production
"""

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class LandTransaction(Base):
    __tablename__ = "land_transactions"
    __table_args__ = (
        UniqueConstraint(
            "production_id", "destination_farm_id", "year_id", name="uq_land_transaction",
        ),
        CheckConstraint("percentage >= 0 AND percentage <= 1", name="ck_land_transaction_percentage"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    production_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("agricultural_productions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    destination_farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sale_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    production: Mapped["AgriculturalProduction"] = relationship(
        "AgriculturalProduction", back_populates="land_transactions",
    )
    destination_farm: Mapped["Farm"] = relationship("Farm", back_populates="purchases")

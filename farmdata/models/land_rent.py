"""LandRent ORM — land rented from an origin farm (landlord) to a destination farm (tenant).

Invariants:
    - Unique per (origin, destination, year)
    - rent_value is the total yearly price (€), rent_area the total area (ha)
"""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class LandRent(Base):
    __tablename__ = "land_rents"
    __table_args__ = (
        UniqueConstraint(
            "origin_farm_id", "destination_farm_id", "year_id", name="uq_land_rent",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    origin_farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    destination_farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    rent_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rent_area: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    origin_farm: Mapped["Farm"] = relationship(
        "Farm", back_populates="rents_out", foreign_keys=[origin_farm_id],
    )
    destination_farm: Mapped["Farm"] = relationship(
        "Farm", back_populates="rents_in", foreign_keys=[destination_farm_id],
    )

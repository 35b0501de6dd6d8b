"""GreeningFarmYearData ORM — greening surface (ha) of a farm in one year."""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class GreeningFarmYearData(Base):
    __tablename__ = "greening_farm_year_data"
    __table_args__ = (
        UniqueConstraint("farm_id", "year_id", name="uq_greening_farm_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    greening_surface: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="greening_data")

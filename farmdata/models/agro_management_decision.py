"""AgroManagementDecision ORM — LP engine decision for a farm and year."""

from sqlalchemy import Boolean, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class AgroManagementDecision(Base):
    __tablename__ = "agro_management_decisions"
    __table_args__ = (
        UniqueConstraint("farm_id", "year_id", name="uq_decision_farm_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    agricultural_land_area: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    agricultural_land_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    long_and_medium_term_loans: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_current_assets: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    average_land_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    targeted_land_aquisition_area: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    targeted_land_aquisition_hectar_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    retire_and_hand_over: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="decisions")

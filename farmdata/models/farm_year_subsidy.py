"""FarmYearSubsidy ORM — amount a farm receives from one policy in one year."""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class FarmYearSubsidy(Base):
    __tablename__ = "farm_year_subsidies"
    __table_args__ = (
        UniqueConstraint("farm_id", "year_id", "policy_id", name="uq_subsidy_farm_year_policy"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    policy_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("policies.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="subsidies")
    policy: Mapped["Policy"] = relationship("Policy", back_populates="subsidies")

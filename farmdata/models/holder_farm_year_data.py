"""HolderFarmYearData ORM — the farm holder's situation in one year.

Invariants:
    - Unique per (farm, year)
    - A new row per year is derived from the previous one when LP results arrive
"""

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.core.domain_types import Gender
from farmdata.db.base import Base


class HolderFarmYearData(Base):
    __tablename__ = "holder_farm_year_data"
    __table_args__ = (
        UniqueConstraint("farm_id", "year_id", name="uq_holder_farm_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    holder_age: Mapped[int] = mapped_column(Integer, nullable=False)
    holder_family_members: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    holder_successors: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    holder_successors_age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    holder_gender: Mapped[int] = mapped_column(Integer, nullable=False, default=Gender.MALE)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="holder_data")

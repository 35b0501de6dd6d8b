"""Year ORM — a simulated year of one population."""

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class Year(Base):
    __tablename__ = "years"
    __table_args__ = (
        UniqueConstraint("year_number", "population_id", name="uq_year_number_population"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    year_number: Mapped[int] = mapped_column(Integer, nullable=False)
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    population: Mapped["Population"] = relationship("Population", back_populates="years")

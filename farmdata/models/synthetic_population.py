"""SyntheticPopulation ORM — a named, reusable baseline population.

Invariants:
    - Points to its population and the base year simulations start from
    - Deleted together with its population
"""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class SyntheticPopulation(Base):
    __tablename__ = "synthetic_populations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False,
    )

    population: Mapped["Population"] = relationship(
        "Population", back_populates="synthetic_populations",
    )
    year: Mapped["Year"] = relationship("Year", lazy="selectin")

"""Policy ORM — a CAP policy and its coupled compensations per product group.

Invariants:
    - policy_identifier is unique inside a population
    - A policy is active in year Y when start_year_number <= Y <= end_year_number
    - Coupled subsidies are split over group_relations by economic_compensation

Design Decisions:
    - group_relations loaded with selectin: every consumer of a policy needs them
"""

from sqlalchemy import (
    Boolean, Float, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class Policy(Base):
    __tablename__ = "policies"
    __table_args__ = (
        UniqueConstraint("population_id", "policy_identifier", name="uq_policy_identifier"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    policy_identifier: Mapped[str] = mapped_column(String(128), nullable=False)
    policy_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_coupled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    economic_compensation: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    model_label: Mapped[str | None] = mapped_column(String(128), nullable=True)
    start_year_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    end_year_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    population: Mapped["Population"] = relationship("Population", back_populates="policies")
    group_relations: Mapped[list["PolicyGroupRelation"]] = relationship(
        "PolicyGroupRelation", back_populates="policy",
        cascade="all, delete-orphan", lazy="selectin",
    )
    subsidies: Mapped[list["FarmYearSubsidy"]] = relationship(
        "FarmYearSubsidy", back_populates="policy", cascade="all, delete-orphan",
    )

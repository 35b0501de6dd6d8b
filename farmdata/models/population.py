"""Population ORM — the aggregate root of every farm, year and policy.

Invariants:
    - Deleting a population deletes everything it owns (years, farms, product groups,
      policies, relations, synthetic populations, scenarios)
    - description is non-nullable (empty string by default)

Design Decisions:
    - Collections use the default lazy loader: services query children explicitly,
      the relationships exist for ORM-level cascade
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class Population(Base):
    """Population aggregate root."""
    __tablename__ = "populations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    years: Mapped[list["Year"]] = relationship(
        "Year", back_populates="population", cascade="all, delete-orphan",
    )
    farms: Mapped[list["Farm"]] = relationship(
        "Farm", back_populates="population", cascade="all, delete-orphan",
    )
    product_groups: Mapped[list["ProductGroup"]] = relationship(
        "ProductGroup", back_populates="population", cascade="all, delete-orphan",
    )
    policies: Mapped[list["Policy"]] = relationship(
        "Policy", back_populates="population", cascade="all, delete-orphan",
    )
    policy_group_relations: Mapped[list["PolicyGroupRelation"]] = relationship(
        "PolicyGroupRelation", back_populates="population", cascade="all, delete-orphan",
    )
    fadn_product_relations: Mapped[list["FADNProductRelation"]] = relationship(
        "FADNProductRelation", back_populates="population", cascade="all, delete-orphan",
    )
    synthetic_populations: Mapped[list["SyntheticPopulation"]] = relationship(
        "SyntheticPopulation", back_populates="population", cascade="all, delete-orphan",
    )
    simulation_scenarios: Mapped[list["SimulationScenario"]] = relationship(
        "SimulationScenario", back_populates="population", cascade="all, delete-orphan",
    )

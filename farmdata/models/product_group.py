"""ProductGroup ORM — a crop or livestock group as the simulation engines see it.

Invariants:
    - name is unique inside a population
    - A group is "other" when any model_specific_categories entry equals "Other"
      (case-insensitive); "other" groups are never sent to the SP engine

Design Decisions:
    - model_specific_categories stored as JSON list: portable between PostgreSQL and SQLite
"""

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.core.domain_types import OrganicProductionType, ProductType, is_other_group
from farmdata.db.base import Base


class ProductGroup(Base):
    __tablename__ = "product_groups"
    __table_args__ = (
        UniqueConstraint("name", "population_id", name="uq_product_group_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    product_type: Mapped[int] = mapped_column(
        Integer, nullable=False, default=ProductType.AGRICULTURAL,
    )
    original_name_datasource: Mapped[str | None] = mapped_column(String(255), nullable=True)
    products_included_in_original_dataset: Mapped[str | None] = mapped_column(Text, nullable=True)
    organic: Mapped[int] = mapped_column(
        Integer, nullable=False, default=OrganicProductionType.UNDETERMINED,
    )
    model_specific_categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    population: Mapped["Population"] = relationship("Population", back_populates="product_groups")
    policy_group_relations: Mapped[list["PolicyGroupRelation"]] = relationship(
        "PolicyGroupRelation", back_populates="product_group", cascade="all, delete-orphan",
    )
    fadn_product_relations: Mapped[list["FADNProductRelation"]] = relationship(
        "FADNProductRelation", back_populates="product_group", cascade="all, delete-orphan",
    )

    @property
    def is_other(self) -> bool:
        return is_other_group(self.model_specific_categories)

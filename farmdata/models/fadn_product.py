"""FADN product ORM — reference FADN crop codes and their mapping to product groups.

Invariants:
    - fadn_identifier is globally unique (FADN products are shared by all populations)
    - A relation is unique per (product group, FADN product, population)
"""

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.core.domain_types import ProductType
from farmdata.db.base import Base


class FADNProduct(Base):
    __tablename__ = "fadn_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    fadn_identifier: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    product_type: Mapped[int] = mapped_column(
        Integer, nullable=False, default=ProductType.AGRICULTURAL,
    )
    arable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    relations: Mapped[list["FADNProductRelation"]] = relationship(
        "FADNProductRelation", back_populates="fadn_product", cascade="all, delete-orphan",
    )


class FADNProductRelation(Base):
    __tablename__ = "fadn_product_relations"
    __table_args__ = (
        UniqueConstraint(
            "product_group_id", "fadn_product_id", "population_id",
            name="uq_fadn_product_relation",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product_groups.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    fadn_product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fadn_products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    representativeness_occurrence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    representativeness_area: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    representativeness_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    product_group: Mapped["ProductGroup"] = relationship(
        "ProductGroup", back_populates="fadn_product_relations",
    )
    fadn_product: Mapped["FADNProduct"] = relationship(
        "FADNProduct", back_populates="relations", lazy="selectin",
    )
    population: Mapped["Population"] = relationship(
        "Population", back_populates="fadn_product_relations",
    )

"""PolicyGroupRelation ORM — compensation a policy grants to one product group."""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.db.base import Base


class PolicyGroupRelation(Base):
    __tablename__ = "policy_group_relations"
    __table_args__ = (
        UniqueConstraint(
            "product_group_id", "policy_id", "population_id", name="uq_policy_group_relation",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product_groups.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    policy_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("policies.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    economic_compensation: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    policy: Mapped["Policy"] = relationship("Policy", back_populates="group_relations")
    product_group: Mapped["ProductGroup"] = relationship(
        "ProductGroup", back_populates="policy_group_relations",
    )
    population: Mapped["Population"] = relationship(
        "Population", back_populates="policy_group_relations",
    )

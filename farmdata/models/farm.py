"""Farm ORM — one agent of the population.

Invariants:
    - farm_code is unique inside a population
    - region_level_3 is the grouping unit of SP result ingestion
    - Deleting a farm deletes all its farm-year data, rents and transactions

Design Decisions:
    - Region codes kept as the FADN strings (levels 1-2) and a numeric code (level 3),
      exactly as the SP engine exchanges them
"""

from sqlalchemy import BigInteger, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.core.domain_types import Altitude
from farmdata.db.base import Base

_OWNED = "all, delete-orphan"


class Farm(Base):
    """Farm entity — owns its yearly productions and accounts."""
    __tablename__ = "farms"
    __table_args__ = (
        UniqueConstraint("farm_code", "population_id", name="uq_farm_code_population"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_code: Mapped[str] = mapped_column(String(64), nullable=False)
    lat: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    long: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    altitude: Mapped[int] = mapped_column(Integer, nullable=False, default=Altitude.PLAINS)
    region_level_1: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    region_level_1_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    region_level_2: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    region_level_2_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    region_level_3: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, index=True)
    region_level_3_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    technical_economic_orientation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    population: Mapped["Population"] = relationship("Population", back_populates="farms")
    agricultural_productions: Mapped[list["AgriculturalProduction"]] = relationship(
        "AgriculturalProduction", back_populates="farm", cascade=_OWNED,
    )
    livestock_productions: Mapped[list["LivestockProduction"]] = relationship(
        "LivestockProduction", back_populates="farm", cascade=_OWNED,
    )
    closing_values: Mapped[list["ClosingValFarmValue"]] = relationship(
        "ClosingValFarmValue", back_populates="farm", cascade=_OWNED,
    )
    subsidies: Mapped[list["FarmYearSubsidy"]] = relationship(
        "FarmYearSubsidy", back_populates="farm", cascade=_OWNED,
    )
    holder_data: Mapped[list["HolderFarmYearData"]] = relationship(
        "HolderFarmYearData", back_populates="farm", cascade=_OWNED,
    )
    greening_data: Mapped[list["GreeningFarmYearData"]] = relationship(
        "GreeningFarmYearData", back_populates="farm", cascade=_OWNED,
    )
    decisions: Mapped[list["AgroManagementDecision"]] = relationship(
        "AgroManagementDecision", back_populates="farm", cascade=_OWNED,
    )
    purchases: Mapped[list["LandTransaction"]] = relationship(
        "LandTransaction", back_populates="destination_farm", cascade=_OWNED,
    )
    rents_out: Mapped[list["LandRent"]] = relationship(
        "LandRent", back_populates="origin_farm", cascade=_OWNED,
        foreign_keys="LandRent.origin_farm_id",
    )
    rents_in: Mapped[list["LandRent"]] = relationship(
        "LandRent", back_populates="destination_farm", cascade=_OWNED,
        foreign_keys="LandRent.destination_farm_id",
    )

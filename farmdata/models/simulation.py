"""Simulation ORM — scenarios, their runs and the runs' log messages.

Invariants:
    - A scenario runs on its own copy of a synthetic population (population_id)
    - Deleting a scenario deletes its runs; deleting a run deletes its log messages
    - Run progress percentages are in [0, 100]

Design Decisions:
    - additional_policies stored as JSON: the scenario keeps the policy definitions it
      was created with, independent of the copied population rows
    - Log message timestamps are epoch milliseconds, as sent by the simulation manager
"""

from sqlalchemy import (
    JSON, BigInteger, Boolean, CheckConstraint, ForeignKey, Integer, String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmdata.core.domain_types import OverallStatus, RunLogLevel, SimulationStage
from farmdata.db.base import Base


class SimulationScenario(Base):
    __tablename__ = "simulation_scenarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    population_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("populations.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False,
    )
    ignore_lp: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ignore_lmm: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    compress: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    short_term_model_branch: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    long_term_model_branch: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    horizon: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    additional_policies: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    population: Mapped["Population"] = relationship(
        "Population", back_populates="simulation_scenarios",
    )
    runs: Mapped[list["SimulationRun"]] = relationship(
        "SimulationRun", back_populates="scenario",
        cascade="all, delete-orphan", lazy="selectin",
    )


class SimulationRun(Base):
    __tablename__ = "simulation_runs"
    __table_args__ = (
        CheckConstraint(
            "current_stage_progress BETWEEN 0 AND 100", name="ck_run_stage_progress",
        ),
        CheckConstraint(
            "current_substage_progress BETWEEN 0 AND 100", name="ck_run_substage_progress",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    simulation_scenario_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("simulation_scenarios.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    overall_status: Mapped[int] = mapped_column(
        Integer, nullable=False, default=OverallStatus.INPROGRESS,
    )
    current_stage: Mapped[int] = mapped_column(
        Integer, nullable=False, default=SimulationStage.DATAPREPARATION,
    )
    current_year: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_substage: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    current_stage_progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_substage_progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    scenario: Mapped["SimulationScenario"] = relationship(
        "SimulationScenario", back_populates="runs",
    )
    log_messages: Mapped[list["LogMessage"]] = relationship(
        "LogMessage", back_populates="run", cascade="all, delete-orphan",
    )


class LogMessage(Base):
    __tablename__ = "log_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    simulation_run_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("simulation_runs.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    time_stamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    source: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    log_level: Mapped[int] = mapped_column(Integer, nullable=False, default=RunLogLevel.INFO)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    run: Mapped["SimulationRun"] = relationship("SimulationRun", back_populates="log_messages")

"""Simulation Schemas — scenarios, runs and run log messages.

Invariants:
    - Coupled compensations name product groups of the scenario's population by name
    - Run progress percentages are in [0, 100]
"""

from pydantic import BaseModel, Field

from farmdata.core.domain_types import OverallStatus, RunLogLevel, SimulationStage
from farmdata.schemas.base import ORMResponse
from farmdata.schemas.policy import PolicyCreate


# ─── Scenarios ───────────────────────────────────────────────────

class CoupledCompensation(BaseModel):
    product_group: str = Field(min_length=1)
    economic_compensation: float = 0.0


class AdditionalPolicy(PolicyCreate):
    coupled_compensations: list[CoupledCompensation] = Field(default_factory=list)


class ScenarioSettings(BaseModel):
    short_term_model_branch: str = ""
    long_term_model_branch: str = ""
    ignore_lp: bool = False
    ignore_lmm: bool = False
    compress: bool = False
    horizon: int = Field(0, ge=0)


class ScenarioCreate(ScenarioSettings):
    synthetic_population_id: int
    queue_suffix: str = ""
    additional_policies: list[AdditionalPolicy] = Field(default_factory=list)


class ScenarioResponse(ScenarioSettings, ORMResponse):
    id: int
    population_id: int
    year_id: int
    additional_policies: list[AdditionalPolicy] = Field(default_factory=list)


class ScenarioCreatedResponse(BaseModel):
    scenario: ScenarioResponse
    dispatched: bool
    dispatch_error: str | None = None


# ─── Runs ────────────────────────────────────────────────────────

class RunProgress(BaseModel):
    overall_status: OverallStatus = OverallStatus.INPROGRESS
    current_stage: SimulationStage = SimulationStage.DATAPREPARATION
    current_year: int = 0
    current_substage: str = ""
    current_stage_progress: int = Field(0, ge=0, le=100)
    current_substage_progress: int = Field(0, ge=0, le=100)


class RunCreate(RunProgress):
    simulation_scenario_id: int


class RunResponse(RunCreate, ORMResponse):
    id: int


class ScenarioWithRunsResponse(ScenarioResponse):
    runs: list[RunResponse] = Field(default_factory=list)


# ─── Log messages ────────────────────────────────────────────────

class LogMessageCreate(BaseModel):
    time_stamp: int = Field(ge=0)
    source: str = ""
    log_level: RunLogLevel = RunLogLevel.INFO
    title: str = ""
    description: str = ""


class LogMessageResponse(LogMessageCreate, ORMResponse):
    id: int
    simulation_run_id: int

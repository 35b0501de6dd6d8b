"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Connection strings come from environment variables (never hardcoded secrets)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Model constants (rent price, risk aversion...) are settings so a deployment can
      recalibrate them without a release
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://farmdata:farmdata@db:5432/farmdata"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Simulation manager (scenario dispatch); unset disables dispatch
    simulation_manager_base: str | None = None
    simulation_manager_timeout_seconds: float = 30.0
    simulation_manager_max_retries: int = 2

    # Model constants
    rent_price_per_hectare: float = 589.0
    rent_balance_tolerance: float = 0.1
    aversion_risk_factor: float = 0.5
    duplication_batch_size: int = 2500

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

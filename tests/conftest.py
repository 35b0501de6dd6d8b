"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or simulation manager
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.pop("SIMULATION_MANAGER_BASE", None)

"""Domain Types — enums and fixed names shared across the codebase.

Invariants:
    - Integer enums keep the numeric values stored in the database and exchanged with
      the SP/LP engines (Altitude 1-3, OrganicProductionType 0-2, ...)
    - "Other" detection is case-insensitive on model-specific categories

Design Decisions:
    - IntEnum for persisted codes
"""

from enum import IntEnum
from typing import Iterable


# ─── Fixed names ─────────────────────────────────────────────────

OTHER_CATEGORY = "other"
ARABLE_CATEGORY = "Arable"
DAIRY_GROUP = "DAIRY"
MILK_CROP = "MILK"


# ─── Enums ───────────────────────────────────────────────────────

class Altitude(IntEnum):
    MOUNTAINS = 1
    HILLS = 2
    PLAINS = 3


class OrganicProductionType(IntEnum):
    CONVENTIONAL = 0
    ORGANIC = 1
    UNDETERMINED = 2


class ProductType(IntEnum):
    AGRICULTURAL = 0
    LIVESTOCK = 1


class Gender(IntEnum):
    MALE = 1
    FEMALE = 2


class OverallStatus(IntEnum):
    """Simulation run lifecycle."""
    INPROGRESS = 1
    CANCELLED = 2
    COMPLETED = 3
    ERROR = 4


class SimulationStage(IntEnum):
    """Stage a simulation run is currently executing."""
    DATAPREPARATION = 1
    LONGPERIOD = 2
    LANDMARKET = 3
    SHORTPERIOD = 4
    REALISATION = 5


class RunLogLevel(IntEnum):
    """Levels of messages attached to a simulation run (loguru-compatible numbers)."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    SUCCESS = 25
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


def is_other_group(categories: Iterable[str] | None) -> bool:
    """True when any model-specific category is "Other" (case-insensitive)."""
    return any(
        (c or "").strip().lower() == OTHER_CATEGORY for c in (categories or [])
    )


def is_milk_crop(name: str) -> bool:
    return name.strip().upper() == MILK_CROP

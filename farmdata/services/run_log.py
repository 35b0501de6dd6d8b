"""Run Log — progress messages of a long operation attached to a simulation run.

Invariants:
    - Every message is also emitted to the module logger
    - Without a simulation run id nothing is written to the database
"""

import logging
import time

from sqlalchemy.ext.asyncio import AsyncSession

from farmdata.core.domain_types import RunLogLevel
from farmdata.models import LogMessage

logger = logging.getLogger(__name__)

_PY_LEVELS = {
    RunLogLevel.TRACE: logging.DEBUG,
    RunLogLevel.DEBUG: logging.DEBUG,
    RunLogLevel.INFO: logging.INFO,
    RunLogLevel.SUCCESS: logging.INFO,
    RunLogLevel.WARNING: logging.WARNING,
    RunLogLevel.ERROR: logging.ERROR,
    RunLogLevel.CRITICAL: logging.CRITICAL,
}


class RunLog:
    """Writes LogMessage rows for one simulation run."""

    def __init__(self, db: AsyncSession, simulation_run_id: int | None, source: str):
        self.db = db
        self.simulation_run_id = simulation_run_id or None
        self.source = source

    def add(self, title: str, description: str = "", level: RunLogLevel = RunLogLevel.INFO) -> None:
        logger.log(
            _PY_LEVELS[level], "%s: %s", title, description,
            extra={"simulation_run_id": self.simulation_run_id},
        )
        if self.simulation_run_id is None:
            return
        self.db.add(LogMessage(
            simulation_run_id=self.simulation_run_id,
            time_stamp=int(time.time() * 1000),
            source=self.source,
            log_level=int(level),
            title=title,
            description=description,
        ))

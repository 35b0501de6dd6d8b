"""Simulation Manager Client — posts scenario tasks to the simulation manager over httpx.

Invariants:
    - Transient failures (5xx, connection errors): retried with exponential backoff
    - Client errors (4xx) and timeouts: immediate failure, no retry
    - Every failure is raised as SimulationManagerError (core/errors.py)

Design Decisions:
    - Wrapper over raw httpx: services never see transport exceptions
    - transport is injectable so tests drive the client with httpx.MockTransport
"""

import asyncio
import logging
import random

import httpx

from farmdata.core.errors import ErrorContext, SimulationManagerError

logger = logging.getLogger(__name__)

SCENARIO_TASK_PATH = "/tasks/simulationScenario/"


class SimulationManagerClient:
    """Async client for the simulation manager's task endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        base_delay_ms: int = 500,
        max_delay_ms: int = 10_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._transport = transport

    async def launch_scenario(
        self, scenario_id: int, queue_suffix: str = "",
        context: ErrorContext | None = None,
    ) -> dict:
        """POST a scenario task; returns the manager's JSON answer (empty dict when none)."""
        url = f"{self.base_url}{SCENARIO_TASK_PATH}"
        payload = {"simulation_scenario_id": scenario_id, "queue_suffix": queue_suffix}
        for attempt in range(self.max_retries + 1):
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout_seconds, transport=self._transport,
                ) as client:
                    response = await client.post(url, json=payload)
                response.raise_for_status()
                logger.info(
                    "Scenario dispatched",
                    extra={"attempt": attempt + 1, "path": SCENARIO_TASK_PATH},
                )
                return response.json() if response.content else {}

            except httpx.TimeoutException:
                raise SimulationManagerError("request timed out", context=context)

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status < 500:
                    raise SimulationManagerError(
                        f"task rejected ({status})", status_code=status, context=context,
                    )
                await self._handle_transient_error(e, attempt, context, status)

            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)

            except ValueError as e:
                raise SimulationManagerError(f"invalid JSON answer: {e}", context=context)

    async def _handle_transient_error(
        self, e: Exception, attempt: int, context: ErrorContext | None,
        status: int | None = None,
    ) -> None:
        if attempt >= self.max_retries:
            raise SimulationManagerError(
                f"failed after {self.max_retries} retries: {e}",
                status_code=status, context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(f"Simulation manager unavailable, retry after {delay}ms: {e}")
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

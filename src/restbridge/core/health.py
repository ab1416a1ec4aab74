"""Health check primitives.

Provides:

- **Response models**: ``HealthResponse``, ``CheckResult``, ``LivenessResponse``
  used as the JSON envelope of the ``/health`` resource.
- **``HealthCheck``**: a declarative description of a single dependency check
  with ``required`` / ``timeout_s`` knobs.
- **``HealthMonitor``**: the application service that runs the checks; it
  lives in the service container and reaches the health resource through the
  container bridge.

Quick start::

    monitor = HealthMonitor(
        service_name="restbridge",
        version="0.1.0",
        checks=[HealthCheck("postgres", check_postgres)],
    )
    report = await monitor.report()
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

# Module-level start time: set when the service first imports this module.
_START_TIME = time.monotonic()

HealthStatus = Literal["healthy", "degraded", "unhealthy"]


# ── Response Models ──────────────────────────────────────────────────────


class CheckResult(BaseModel):
    """Result of a single dependency health check."""

    status: HealthStatus
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health response envelope returned from ``GET /health``.

    Fields
    ──────
    status    : ``healthy`` | ``degraded`` | ``unhealthy``
    service   : Human-readable service name
    version   : Semver string
    uptime_s  : Seconds since startup
    timestamp : ISO-8601 UTC
    checks    : Per-dependency breakdown (name → CheckResult)
    """

    status: HealthStatus = "healthy"
    service: str = ""
    version: str = ""
    uptime_s: float = Field(default_factory=lambda: round(time.monotonic() - _START_TIME, 1))
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    checks: dict[str, CheckResult] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Response for liveness probes: always returns ``{"status": "alive"}``."""

    status: str = "alive"


# ── Monitor ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HealthCheck:
    """A named async probe; ``False`` or an exception marks it unhealthy.

    A failing optional check (``required=False``) degrades the report
    instead of failing it.
    """

    name: str
    probe: Callable[[], Awaitable[bool]]
    required: bool = True
    timeout_s: float = 5.0


class HealthMonitor:
    """Runs the registered checks concurrently and folds them into a report."""

    def __init__(
        self,
        service_name: str,
        version: str,
        checks: Iterable[HealthCheck] = (),
    ) -> None:
        self.service_name = service_name
        self.version = version
        self.checks: dict[str, HealthCheck] = {}
        for check in checks:
            self.add_check(check)

    def add_check(self, check: HealthCheck) -> None:
        self.checks[check.name] = check

    async def probe(self, check: HealthCheck) -> CheckResult:
        started = time.monotonic()

        def elapsed_ms() -> float:
            return round((time.monotonic() - started) * 1000, 2)

        try:
            ok = await asyncio.wait_for(check.probe(), timeout=check.timeout_s)
        except TimeoutError:
            return CheckResult(status="unhealthy", error="timeout")
        except Exception as exc:  # noqa: BLE001
            return CheckResult(status="unhealthy", latency_ms=elapsed_ms(), error=str(exc)[:200])
        if ok is False:
            return CheckResult(status="unhealthy", latency_ms=elapsed_ms(), error="check failed")
        return CheckResult(status="healthy", latency_ms=elapsed_ms())

    def status_of(self, results: dict[str, CheckResult]) -> HealthStatus:
        down = [name for name, result in results.items() if result.status != "healthy"]
        if any(self.checks[name].required for name in down if name in self.checks):
            return "unhealthy"
        return "degraded" if down else "healthy"

    async def report(self) -> HealthResponse:
        checks = list(self.checks.values())
        outcomes = await asyncio.gather(*(self.probe(check) for check in checks))
        results = {check.name: outcome for check, outcome in zip(checks, outcomes)}
        return HealthResponse(
            status=self.status_of(results),
            service=self.service_name,
            version=self.version,
            checks=results,
        )

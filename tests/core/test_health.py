"""Tests for restbridge.core.health: models, check logic and the monitor."""

from __future__ import annotations

import asyncio

from restbridge.core.health import (
    CheckResult,
    HealthCheck,
    HealthMonitor,
    HealthResponse,
    LivenessResponse,
)


async def _ok() -> bool:
    return True


async def _fail() -> bool:
    raise ConnectionError("refused")


async def _false() -> bool:
    return False


async def _slow() -> bool:
    await asyncio.sleep(1)
    return True


class TestModels:
    def test_health_response_defaults(self):
        hr = HealthResponse(service="svc", version="1.0")
        assert hr.status == "healthy"
        assert hr.uptime_s >= 0
        assert hr.timestamp
        assert hr.checks == {}

    def test_liveness(self):
        assert LivenessResponse().status == "alive"


class TestProbe:
    def _probe(self, check: HealthCheck) -> CheckResult:
        return asyncio.run(HealthMonitor("svc", "1.0").probe(check))

    def test_healthy(self):
        result = self._probe(HealthCheck("db", _ok))
        assert result.status == "healthy"
        assert result.latency_ms is not None

    def test_exception_is_unhealthy(self):
        result = self._probe(HealthCheck("db", _fail))
        assert result.status == "unhealthy"
        assert "refused" in result.error

    def test_false_is_unhealthy(self):
        result = self._probe(HealthCheck("db", _false))
        assert result.status == "unhealthy"
        assert result.error == "check failed"

    def test_timeout(self):
        result = self._probe(HealthCheck("db", _slow, timeout_s=0.01))
        assert result.error == "timeout"


class TestStatus:
    def test_optional_failure_degrades(self):
        monitor = HealthMonitor("svc", "1.0", [HealthCheck("cache", _fail, required=False)])
        assert monitor.status_of({"cache": CheckResult(status="unhealthy")}) == "degraded"

    def test_required_failure_is_unhealthy(self):
        monitor = HealthMonitor(
            "svc", "1.0", [HealthCheck("db", _fail), HealthCheck("cache", _ok, required=False)]
        )
        results = {
            "db": CheckResult(status="unhealthy"),
            "cache": CheckResult(status="healthy"),
        }
        assert monitor.status_of(results) == "unhealthy"

    def test_all_healthy(self):
        assert HealthMonitor("svc", "1.0").status_of({}) == "healthy"


class TestHealthMonitor:
    def test_report_without_checks(self):
        report = asyncio.run(HealthMonitor("svc", "1.0").report())
        assert report.status == "healthy"
        assert report.service == "svc"
        assert report.version == "1.0"

    def test_report_with_failing_check(self):
        monitor = HealthMonitor("svc", "1.0", [HealthCheck("db", _fail)])
        report = asyncio.run(monitor.report())
        assert report.status == "unhealthy"
        assert report.checks["db"].status == "unhealthy"

    def test_add_check_replaces_by_name(self):
        monitor = HealthMonitor("svc", "1.0", [HealthCheck("db", _fail)])
        monitor.add_check(HealthCheck("db", _ok))
        report = asyncio.run(monitor.report())
        assert report.status == "healthy"
        assert list(report.checks) == ["db"]

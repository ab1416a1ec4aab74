"""
Tests for the restbridge CLI (Typer CliRunner).
"""

from __future__ import annotations

import json

import pytest
import yaml
from typer.testing import CliRunner

from restbridge import __version__
from restbridge.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def sample_namespace(monkeypatch):
    monkeypatch.setenv("RESTBRIDGE_RESOURCE_NAMESPACE", "sample_resources")
    monkeypatch.setenv("RESTBRIDGE_LOG_LEVEL", "WARNING")


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "serve" in result.output
        assert "openapi" in result.output


class TestOpenApiExport:
    def test_json_to_stdout(self):
        result = runner.invoke(app, ["openapi", "export"])
        assert result.exit_code == 0, result.output
        spec = json.loads(result.stdout)
        assert list(spec["paths"]) == ["/greetings/{name}"]

    def test_yaml_to_stdout(self):
        result = runner.invoke(app, ["openapi", "export", "--format", "yaml"])
        assert result.exit_code == 0, result.output
        assert "/greetings/{name}" in yaml.safe_load(result.stdout)["paths"]

    def test_namespace_override(self):
        result = runner.invoke(app, ["openapi", "export", "-n", "restbridge.rest"])
        assert result.exit_code == 0, result.output
        paths = json.loads(result.stdout)["paths"]
        assert "/info" in paths
        assert "/greetings/{name}" not in paths

    def test_output_file(self, tmp_path):
        target = tmp_path / "openapi.json"
        result = runner.invoke(app, ["openapi", "export", "-o", str(target)])
        assert result.exit_code == 0, result.output
        assert "Wrote 1 operations" in result.output
        assert json.loads(target.read_text(encoding="utf-8"))["info"]["title"]

    def test_broken_namespace_exits_1(self):
        result = runner.invoke(app, ["openapi", "export", "-n", "broken_resources"])
        assert result.exit_code == 1


class TestServe:
    def test_start_runs_uvicorn_factory(self, monkeypatch):
        calls = []
        monkeypatch.setattr("restbridge.cli.serve.uvicorn.run", lambda *a, **kw: calls.append((a, kw)))

        result = runner.invoke(app, ["serve", "start", "--port", "9001"])

        assert result.exit_code == 0, result.output
        (args, kwargs), = calls
        assert args == ("restbridge.api:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9001
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["log_config"] is None

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from cli.app import app
from cli.config import load_config


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.latest_calls: List[Optional[str]] = []
        self.readings: List[Dict[str, Any]] = [
            {"name": "aqius", "value": 55},
            {"name": "pm10", "value": 40},
            {"name": "pm25", "value": 12},
        ]
        self.closed = False

    def get_latest(self, city: Optional[str] = None) -> List[Dict[str, Any]]:
        self.latest_calls.append(city)
        return self.readings

    def get_cities(self) -> List[str]:
        return ["HongKong", "Bangkok"]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_latest_renders_table(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["latest", "--city", "Bangkok"])

    assert result.exit_code == 0
    assert "Air quality (Bangkok)" in result.stdout
    assert "aqius" in result.stdout
    assert stub.latest_calls == ["Bangkok"]
    assert stub.closed is True


def test_latest_json_output(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["latest", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == stub.readings
    assert stub.latest_calls == [None]


def test_cities_command(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["cities"])

    assert result.exit_code == 0
    assert "- HongKong" in result.stdout
    assert "- Bangkok" in result.stdout


def test_watch_polls_requested_number_of_times(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)
    sleeps: List[float] = []
    monkeypatch.setattr("cli.app.time.sleep", sleeps.append)

    result = runner.invoke(app, ["watch", "--city", "HongKong", "--interval", "5", "--count", "3"])

    assert result.exit_code == 0
    assert stub.latest_calls == ["HongKong"] * 3
    assert sleeps == [5.0, 5.0]


def test_global_options_reach_client_config(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--base-url", "http://relay:5000/", "--timeout", "3", "cities"])

    assert result.exit_code == 0
    assert stub.config.base_url == "http://relay:5000"
    assert stub.config.timeout == 3.0


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("AIRPHONIC_API_URL", "http://example.test/")
    monkeypatch.setenv("CLI_TIMEOUT", "not-a-number")

    config = load_config()

    assert config.base_url == "http://example.test"
    assert config.timeout == 30.0

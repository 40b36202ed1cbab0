"""
CLI tests using Typer CliRunner.
Covers: demo output order under both registration policies and both failure
policies, config (text and --json), version.
"""
import json

from typer.testing import CliRunner

from atexitreg.cli import app
from atexitreg.version import version

runner = CliRunner()


def _lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


def test_demo_default_ignores_registration_during_exit():
    result = runner.invoke(app, ["demo"])
    assert result.exit_code == 0, result.output
    lines = _lines(result.output)

    assert lines[0].startswith("first call to register() returned <CallbackEntry")
    assert lines[1].startswith("second call to register() returned <CallbackEntry")
    assert lines[2].startswith("third call to register() returned <CallbackEntry")
    assert lines[3:] == [
        "*** Now performing program-exit processing ***",
        "weird() executing: args = This call was registered third",
        "calling register() during exit processing:",
        "register() returned None",
        "cleanup() executing: args = This call was registered second",
        "cleanup() executing: args = This call was registered first",
    ]
    assert "unregistered by unregister" not in result.output


def test_demo_allow_during_drain_runs_late_registration_next():
    result = runner.invoke(app, ["demo", "--allow-during-drain"])
    assert result.exit_code == 0, result.output
    lines = _lines(result.output)

    start = lines.index("*** Now performing program-exit processing ***")
    tail = lines[start + 1:]
    assert tail[0] == "weird() executing: args = This call was registered third"
    assert tail[2].startswith("register() returned <CallbackEntry")
    assert tail[3:] == [
        "cleanup() executing: args = This call was registered during exit processing",
        "cleanup() executing: args = This call was registered second",
        "cleanup() executing: args = This call was registered first",
    ]


def test_demo_rejects_unknown_on_error():
    result = runner.invoke(app, ["demo", "--on-error", "ignore"])
    assert result.exit_code == 10


def test_config_text_defaults():
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "ignore_during_drain: True" in result.output
    assert "on_error: raise" in result.output


def test_config_json_reflects_env(monkeypatch):
    monkeypatch.setenv("ATEXITREG_ON_ERROR", "log")
    result = runner.invoke(app, ["config", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data == {"ignore_during_drain": True, "on_error": "log"}


def test_version_command():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == version


def test_demo_on_error_raise_stops_exit_processing_at_failure():
    result = runner.invoke(app, ["demo", "--on-error", "raise"])
    assert result.exit_code == 10
    lines = _lines(result.output)
    assert "failing() executing: args = This call raises during exit processing" in lines
    assert "cleanup() executing: args = This call was registered second" in lines
    assert "cleanup() executing: args = This call was registered first" not in lines


def test_demo_on_error_log_runs_remaining_callbacks():
    result = runner.invoke(app, ["demo", "--on-error", "log"])
    assert result.exit_code == 0, result.output
    lines = _lines(result.output)
    failing_at = lines.index("failing() executing: args = This call raises during exit processing")
    first_at = lines.index("cleanup() executing: args = This call was registered first")
    assert failing_at < first_at

"""Tests for the typer application."""

import pytest
from typer.testing import CliRunner

from uhf_tui.cli.app import create_app
from uhf_tui.net import discovery
from uhf_tui.net.discovery import HostPort


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(tmp_path):
    return {"UHF_TUI_STATE_DIR": str(tmp_path), "UHF_TUI_LOG_FILE": ""}


class TestApp:
    """Command wiring."""

    def test_help_lists_commands(self, runner) -> None:
        result = runner.invoke(create_app(), ["--help"])
        assert result.exit_code == 0
        for name in ("menu", "shell", "scan", "keys"):
            assert name in result.output

    def test_shell_ends_at_end_of_input(self, runner, env) -> None:
        result = runner.invoke(create_app(), ["shell"], env=env)
        assert result.exit_code == 0
        assert "Command shell. Type 'menu' to return." in result.output


class TestScanCommand:
    """LAN discovery report."""

    def test_found(self, runner, env, monkeypatch) -> None:
        seen = {}

        def fake_find(prefixes, ports, timeout):
            seen.update(prefixes=prefixes, ports=ports, timeout=timeout)
            return HostPort("10.0.0.9", 27011)

        monkeypatch.setattr(discovery, "find_target", fake_find)
        result = runner.invoke(
            create_app(),
            ["scan", "--prefix", "10.0.0", "--ports", "27011,2022", "--timeout", "0.5"],
            env=env,
        )
        assert result.exit_code == 0
        assert "10.0.0.9@27011" in result.output
        assert seen == {"prefixes": ["10.0.0"], "ports": [2022, 27011], "timeout": 0.5}

    def test_not_found(self, runner, env, monkeypatch) -> None:
        monkeypatch.setattr(discovery, "find_target", lambda prefixes, ports, timeout: None)
        result = runner.invoke(create_app(), ["scan", "--prefix", "10.0.0"], env=env)
        assert result.exit_code == 1
        assert "No reader found." in result.output

    def test_no_prefixes(self, runner, env, monkeypatch) -> None:
        monkeypatch.setattr(discovery, "detect_prefixes", lambda: [])
        result = runner.invoke(create_app(), ["scan"], env=env)
        assert result.exit_code == 1
        assert "No LAN prefixes found" in result.output

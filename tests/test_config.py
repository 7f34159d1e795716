"""Tests for settings, logging setup and the remembered connection."""

import logging
from pathlib import Path

from uhf_tui.config import (
    LastConnection,
    Settings,
    configure_logging,
    load_last_connection,
    remember_connection,
)


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.page_size == 12
        assert settings.log_level == "WARNING"
        assert settings.log_file is None
        assert settings.state_dir == Path.home() / ".config" / "uhf-tui"

    def test_environment(self, tmp_path: Path) -> None:
        settings = Settings.from_env({
            "UHF_TUI_PAGE_SIZE": "8",
            "UHF_TUI_LOG_LEVEL": "debug",
            "UHF_TUI_LOG_FILE": str(tmp_path / "uhf.log"),
            "UHF_TUI_STATE_DIR": str(tmp_path),
        })
        assert settings.page_size == 8
        assert settings.log_level == "DEBUG"
        assert settings.log_file == tmp_path / "uhf.log"
        assert settings.state_dir == tmp_path

    def test_invalid_page_size_ignored(self) -> None:
        assert Settings.from_env({"UHF_TUI_PAGE_SIZE": "lots"}).page_size == 12
        assert Settings.from_env({"UHF_TUI_PAGE_SIZE": "0"}).page_size == 1


class TestLogging:
    """Logs go to a file or nowhere."""

    def test_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "uhf.log"
        configure_logging(Settings(log_level="INFO", log_file=log_file))
        logging.getLogger("uhf_tui.test").info("hello log")
        for handler in logging.getLogger("uhf_tui").handlers:
            handler.flush()
        assert "hello log" in log_file.read_text()
        configure_logging(Settings())

    def test_null_handler_without_file(self) -> None:
        configure_logging(Settings())
        handlers = logging.getLogger("uhf_tui").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)


class TestLastConnection:
    """Remembered endpoint."""

    def test_round_trip(self, tmp_path: Path) -> None:
        settings = Settings(state_dir=tmp_path / "state")
        remember_connection(settings, LastConnection("10.0.0.5", 2022, 16, 1))
        assert load_last_connection(settings) == LastConnection("10.0.0.5", 2022, 16, 1)

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_last_connection(Settings(state_dir=tmp_path)) is None

    def test_corrupt_file(self, tmp_path: Path) -> None:
        (tmp_path / "last_connection.json").write_text("{not json")
        assert load_last_connection(Settings(state_dir=tmp_path)) is None

    def test_missing_fields(self, tmp_path: Path) -> None:
        (tmp_path / "last_connection.json").write_text('{"host": "x"}')
        assert load_last_connection(Settings(state_dir=tmp_path)) is None

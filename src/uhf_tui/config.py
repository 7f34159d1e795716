"""Settings, logging setup and the last successful connection."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "UHF_TUI_"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LAST_CONNECTION_FILE = "last_connection.json"


def _default_state_dir() -> Path:
    return Path.home() / ".config" / "uhf-tui"


@dataclass
class Settings:
    """
    Runtime settings.

    Values come from ``UHF_TUI_*`` environment variables; command-line
    options override them.
    """
    page_size: int = 12
    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    state_dir: Path = field(default_factory=_default_state_dir)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls()
        page_size = env.get(ENV_PREFIX + "PAGE_SIZE", "").strip()
        if page_size:
            try:
                settings.page_size = max(1, int(page_size))
            except ValueError:
                logger.warning("ignoring invalid %sPAGE_SIZE=%r", ENV_PREFIX, page_size)
        settings.log_level = env.get(ENV_PREFIX + "LOG_LEVEL", settings.log_level).upper()
        if env.get(ENV_PREFIX + "LOG_FILE"):
            settings.log_file = Path(env[ENV_PREFIX + "LOG_FILE"]).expanduser()
        if env.get(ENV_PREFIX + "STATE_DIR"):
            settings.state_dir = Path(env[ENV_PREFIX + "STATE_DIR"]).expanduser()
        return settings


def configure_logging(settings: Settings) -> None:
    """
    Route package logs to the configured file.

    The console owns the terminal, so without a log file records are dropped.
    """
    package_logger = logging.getLogger("uhf_tui")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    if settings.log_file is None:
        package_logger.addHandler(logging.NullHandler())
    else:
        handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, settings.log_level, logging.WARNING))
    package_logger.propagate = False


@dataclass(frozen=True)
class LastConnection:
    host: str
    port: int
    reader_type: int = 4
    log: int = 0


def remember_connection(settings: Settings, connection: LastConnection) -> None:
    path = settings.state_dir / LAST_CONNECTION_FILE
    try:
        settings.state_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(connection)), encoding="utf-8")
    except OSError as e:
        logger.warning("could not save last connection to %s: %s", path, e)


def load_last_connection(settings: Settings) -> Optional[LastConnection]:
    path = settings.state_dir / LAST_CONNECTION_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return LastConnection(
            host=str(data["host"]),
            port=int(data["port"]),
            reader_type=int(data.get("reader_type", 4)),
            log=int(data.get("log", 0)),
        )
    except FileNotFoundError:
        return None
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.warning("ignoring unreadable %s: %s", path, e)
        return None

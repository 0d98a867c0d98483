"""Configuration management for donext."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DONEXT_HOME = Path(os.environ.get("DONEXT_HOME", Path.home() / "donext"))
CONFIG_FILE = DONEXT_HOME / "config" / "donext.conf"
DATA_DIR = DONEXT_HOME / "data"

VIEWS = ("active", "today", "completed", "archived")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """donext configuration."""

    tasks_file: str = field(default_factory=lambda: str(DATA_DIR / "tasks.json"))
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_user_id: str = ""
    default_view: str = "active"
    log_level: str = "WARNING"


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from donext.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "tasks_file":
                config.tasks_file = value
            case "supabase_url":
                config.supabase_url = value
            case "supabase_key":
                config.supabase_key = value
            case "supabase_user_id":
                config.supabase_user_id = value
            case "default_view":
                if value.lower() in VIEWS:
                    config.default_view = value.lower()
                else:
                    logger.warning(f"Unknown DEFAULT_VIEW {value!r}, using {config.default_view}")
            case "log_level":
                if value.upper() in LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Unknown LOG_LEVEL {value!r}, using {config.log_level}")
            case _:
                logger.warning(f"Ignoring unknown config key {key!r}")

    return config

"""Centralized configuration loading.

Loads environment variables once and provides a typed Settings object
for the rest of the codebase. Entrypoints (CLI, watchers) call
get_settings() instead of reading os.environ directly.
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv


# Load .env once at import time
load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    # Remote source
    remote_url: str = os.getenv(
        "QUOTESYNC_REMOTE_URL", "https://jsonplaceholder.typicode.com/users"
    )
    http_timeout: Optional[float] = _float_env("QUOTESYNC_HTTP_TIMEOUT", 10.0)

    # Sync
    sync_interval: float = _float_env("QUOTESYNC_SYNC_INTERVAL", 30.0)
    merge_policy: str = os.getenv("QUOTESYNC_MERGE_POLICY", "server_wins")

    # Database (root-level data directory by default)
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(PROJECT_ROOT, "data", "quotes.db"),
    )

    # Logging
    log_level: str = os.getenv("QS_LOG_LEVEL", "INFO")
    verbose: bool = os.getenv("QS_VERBOSE", "0") == "1"


def get_settings() -> Settings:
    """Return a new Settings instance (cheap dataclass construction)."""
    return Settings()

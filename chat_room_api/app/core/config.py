"""
Simple configuration management.

A ``.env`` file is loaded into the process environment first: the
nearest one found from the working directory upwards, then the one at
the project root.  Variables already present in the environment win.
The ``Settings`` dataclass then reads its fields from the environment,
with defaults for all of them, so the service can be started with
nothing more than ``DATABASE_URL`` (and optionally ``PORT``) set.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import find_dotenv, load_dotenv

# The field defaults below are evaluated when the class is defined, so
# the .env file must be loaded before that point.
load_dotenv(find_dotenv(usecwd=True))
load_dotenv(Path(__file__).resolve().parents[3] / ".env")


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Chat Room API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite database holding the ``participants`` and
    # ``messages`` tables.  Relative paths are resolved against the
    # project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "chat_room.db")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # Routes are served at the root unless a prefix such as ``/api/v1``
    # is configured.
    api_prefix: str = os.getenv("API_PREFIX", "")

    # Liveness sweep: how often the sweeper runs and how long a
    # participant may stay silent before being evicted.
    sweep_interval_seconds: float = float(os.getenv("SWEEP_INTERVAL_SECONDS", "15"))
    inactivity_timeout_seconds: float = float(os.getenv("INACTIVITY_TIMEOUT_SECONDS", "10"))

    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "*"))
    )


# Instantiate settings once so entry points can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()

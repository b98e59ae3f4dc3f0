"""
Runtime configuration for learnpath.

Values come from the environment, after loading a ``.env`` file from the
working directory when one exists.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT = 10.0
DEFAULT_DATA_DIR = Path.home() / ".learnpath"
DEFAULT_STORAGE_DB = DEFAULT_DATA_DIR / "storage.db"
DEFAULT_MOCK_DELAY = 1.0

TUTOR_MODES = ("remote", "mock")


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class Settings:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    storage_db: Path = DEFAULT_STORAGE_DB
    tutor_mode: str = "remote"
    mock_delay: float = DEFAULT_MOCK_DELAY
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env_file: Optional explicit .env path (default: search from cwd)

        Raises:
            ValueError: If a numeric variable or the tutor mode is invalid
        """
        load_dotenv(env_file)

        tutor_mode = os.getenv("LEARNPATH_TUTOR_MODE", "remote").lower()
        if tutor_mode not in TUTOR_MODES:
            raise ValueError(f"LEARNPATH_TUTOR_MODE must be one of {TUTOR_MODES}, got {tutor_mode!r}")

        storage_db = os.getenv("LEARNPATH_STORAGE_DB")

        return cls(
            api_url=os.getenv("LEARNPATH_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout=_get_float("LEARNPATH_TIMEOUT", DEFAULT_TIMEOUT),
            storage_db=Path(storage_db).expanduser() if storage_db else DEFAULT_STORAGE_DB,
            tutor_mode=tutor_mode,
            mock_delay=_get_float("LEARNPATH_MOCK_DELAY", DEFAULT_MOCK_DELAY),
            log_level=os.getenv("LEARNPATH_LOG_LEVEL", "INFO").upper(),
        )

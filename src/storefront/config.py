"""Runtime settings, read from the environment.

A ``.env`` file in the working directory is honoured (python-dotenv);
real environment variables take precedence over it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

FIVE_DAYS = 5 * 24 * 60 * 60


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    session_secret: str = ""
    session_ttl_seconds: int = FIVE_DAYS
    log_level: str = "INFO"
    environment: str = "development"
    notification_timeout_seconds: float = 5.0

    @staticmethod
    def from_env() -> Settings:
        load_dotenv(find_dotenv(usecwd=True))
        ttl = os.getenv("STOREFRONT_SESSION_TTL")
        notify_timeout = os.getenv("STOREFRONT_NOTIFY_TIMEOUT")
        return Settings(
            data_dir=Path(os.getenv("STOREFRONT_DATA_DIR") or _DEFAULT_DATA_DIR),
            session_secret=os.getenv("STOREFRONT_SESSION_SECRET", ""),
            session_ttl_seconds=int(ttl) if ttl else FIVE_DAYS,
            log_level=os.getenv("STOREFRONT_LOG_LEVEL", "INFO").upper(),
            environment=os.getenv("STOREFRONT_ENV", "development").lower(),
            notification_timeout_seconds=float(notify_timeout) if notify_timeout else 5.0,
        )

    @property
    def session_file(self) -> Path:
        """Where the CLI keeps the current session token (its cookie jar)."""
        return self.data_dir / "session"

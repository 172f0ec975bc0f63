"""Runtime configuration for the Taskboard API.

Values are read from the environment after loading a local ``.env`` file.
Keyword overrides passed to ``Settings`` take precedence, which keeps
tests independent of the host environment.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


class Settings:
    """Application settings."""

    def __init__(self, **overrides):
        self.database_url: Optional[str] = os.getenv("DATABASE_URL") or None
        self.db_pool_size: int = _env_int("DB_POOL_SIZE", 10)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_file: Optional[str] = os.getenv("LOG_FILE") or None
        self.cors_origins: list[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _env_int("PORT", 3000)
        self.slow_request_ms: int = _env_int("SLOW_REQUEST_MS", 1000)

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

        # A pool must hold at least one connection
        self.db_pool_size = max(1, int(self.db_pool_size))

    def __repr__(self) -> str:
        return (
            f"<Settings database={'set' if self.database_url else 'unset'} "
            f"pool_size={self.db_pool_size} port={self.port}>"
        )


def get_settings() -> Settings:
    return Settings()

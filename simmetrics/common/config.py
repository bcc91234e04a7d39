from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass
class Settings:
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    SAMPLE_INTERVAL_SECONDS: float = 1.0
    DEFAULT_PROCESS_METRICS: bool = True
    LOG_LEVEL: str = "INFO"

    def __post_init__(self) -> None:
        if not (1 <= self.PORT <= 65535):
            raise ValueError("PORT must be between 1 and 65535.")
        if self.SAMPLE_INTERVAL_SECONDS <= 0:
            raise ValueError("SAMPLE_INTERVAL_SECONDS must be greater than zero.")
        self.LOG_LEVEL = self.LOG_LEVEL.upper()
        if self.LOG_LEVEL not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}.")

    @property
    def public_url(self) -> str:
        return f"http://{self.HOST}:{self.PORT}"

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            HOST=os.environ.get("HOST", cls.HOST),
            PORT=int(os.environ.get("PORT", cls.PORT)),
            SAMPLE_INTERVAL_SECONDS=float(
                os.environ.get("SAMPLE_INTERVAL_SECONDS", cls.SAMPLE_INTERVAL_SECONDS)
            ),
            DEFAULT_PROCESS_METRICS=_as_bool(
                os.environ.get("DEFAULT_PROCESS_METRICS"), cls.DEFAULT_PROCESS_METRICS
            ),
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass(frozen=True)
class Settings:
    service_url: Optional[str]
    service_key: Optional[str]
    cache_path: Path
    timeout: float
    log_level: str

    @staticmethod
    def _strip_env(key: str, default: str | None = None) -> str | None:
        """Get env var and strip whitespace/newlines."""
        val = os.getenv(key)
        if val is None:
            return default
        stripped = val.strip()
        return stripped if stripped else default

    @staticmethod
    def load() -> "Settings":
        load_dotenv()

        service_url = Settings._strip_env("CLASSCAL_SERVICE_URL")
        service_key = Settings._strip_env("CLASSCAL_SERVICE_KEY")

        cache_path_str = Settings._strip_env("CLASSCAL_CACHE_PATH")
        cache_path = Path(cache_path_str).expanduser() if cache_path_str else Path.home() / ".classcal" / "cache.json"

        timeout_str = Settings._strip_env("CLASSCAL_TIMEOUT") or str(DEFAULT_TIMEOUT)
        try:
            timeout = float(timeout_str)
        except ValueError:
            timeout = DEFAULT_TIMEOUT
        if timeout <= 0:
            timeout = DEFAULT_TIMEOUT

        log_level = (Settings._strip_env("CLASSCAL_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
        if log_level not in LOG_LEVELS:
            log_level = DEFAULT_LOG_LEVEL

        return Settings(
            service_url=service_url,
            service_key=service_key,
            cache_path=cache_path,
            timeout=timeout,
            log_level=log_level,
        )

"""Process configuration, read once from the environment."""

from dataclasses import dataclass
from functools import lru_cache
import os
from typing import Mapping, Optional


DEFAULT_MODEL = "google/flan-t5-large"
DEFAULT_API_URL = "https://api-inference.huggingface.co/models"


def _optional_float(value: Optional[str], default: Optional[float]) -> Optional[float]:
    if value is None:
        return default
    value = value.strip()
    if not value or float(value) <= 0:
        return None
    return float(value)


@dataclass(frozen=True)
class Settings:
    """Read-only settings shared by every request."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    # Seconds per outbound call; None waits indefinitely.
    timeout: Optional[float] = 120.0
    port: int = 3000
    log_level: str = "INFO"
    max_body_bytes: int = 1024 * 1024

    @property
    def endpoint(self) -> str:
        return f"{self.api_url.rstrip('/')}/{self.model}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("HF_API_KEY") or None,
            model=env.get("HF_MODEL") or DEFAULT_MODEL,
            api_url=env.get("HF_API_URL") or DEFAULT_API_URL,
            timeout=_optional_float(env.get("HF_TIMEOUT"), 120.0),
            port=int(env.get("PORT") or 3000),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            max_body_bytes=int(env.get("MAX_BODY_BYTES") or 1024 * 1024),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, built on first use."""
    return Settings.from_env()

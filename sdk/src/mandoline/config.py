from __future__ import annotations

from dataclasses import dataclass

from pydantic_settings import BaseSettings

MANDOLINE_API_BASE_URL = "https://mandoline-api.fly.dev/v1"

DEFAULT_GET_LIMIT = 100
MAX_GET_LIMIT = 1000

CONNECT_TIMEOUT = 300_000  # ms, 5 minutes
RWP_TIMEOUT = 300_000  # ms, 5 minutes


class MandolineSettings(BaseSettings):
    """Environment-derived client configuration (``MANDOLINE_*`` variables)."""

    api_key: str = ""
    api_base_url: str = MANDOLINE_API_BASE_URL

    # Timeouts, in milliseconds
    connect_timeout: int = CONNECT_TIMEOUT
    rwp_timeout: int = RWP_TIMEOUT

    model_config = {
        "env_prefix": "MANDOLINE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_ignore_empty": True,
        "extra": "ignore",
    }


@dataclass(frozen=True)
class RequestConfig:
    """Per-client transport settings, fixed at construction."""

    api_base_url: str = MANDOLINE_API_BASE_URL
    connect_timeout: int = CONNECT_TIMEOUT
    rwp_timeout: int = RWP_TIMEOUT

    @property
    def connect_timeout_seconds(self) -> float:
        return self.connect_timeout / 1000

    @property
    def rwp_timeout_seconds(self) -> float:
        return self.rwp_timeout / 1000


def resolve_config(
    api_key: str | None = None,
    api_base_url: str | None = None,
    connect_timeout: int | None = None,
    rwp_timeout: int | None = None,
) -> tuple[str, RequestConfig]:
    """Resolve the API key and request config: explicit > environment > default.

    The first non-empty value wins, so an explicit ``""`` or ``0`` falls through
    to the environment.
    """
    settings = MandolineSettings()
    config = RequestConfig(
        api_base_url=(api_base_url or settings.api_base_url or MANDOLINE_API_BASE_URL).rstrip("/"),
        connect_timeout=connect_timeout or settings.connect_timeout or CONNECT_TIMEOUT,
        rwp_timeout=rwp_timeout or settings.rwp_timeout or RWP_TIMEOUT,
    )
    return api_key or settings.api_key, config

"""
Runtime configuration read from the process environment.

Settings are built once by the composition root. A missing market data
credential raises ConfigurationError there, so the service never starts
without one.
"""

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from gift_valuation.infrastructure.market_data.massive_adapter import DEFAULT_BASE_URL

PROVIDERS = ("massive", "yfinance")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""


@dataclass(frozen=True)
class Settings:
    market_data_api_key: str | None
    market_data_provider: str = "massive"
    market_data_base_url: str = DEFAULT_BASE_URL
    market_data_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        provider = env.get("MARKET_DATA_PROVIDER", "massive").strip().lower()
        if provider not in PROVIDERS:
            raise ConfigurationError(
                f"MARKET_DATA_PROVIDER must be one of {', '.join(PROVIDERS)}; got {provider!r}."
            )

        api_key = (env.get("MASSIVE_API_KEY") or "").strip() or None
        if provider == "massive" and not api_key:
            raise ConfigurationError(
                "MASSIVE_API_KEY is not set. Export it or add it to .env before starting."
            )

        return cls(
            market_data_api_key=api_key,
            market_data_provider=provider,
            market_data_base_url=env.get("MASSIVE_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            market_data_timeout_seconds=_positive_float(
                env, "MARKET_DATA_TIMEOUT_SECONDS", 10.0
            ),
            log_level=_log_level(env),
            host=env.get("HOST", "0.0.0.0"),
            port=_port(env),
        )

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""
        values = asdict(self)
        if values["market_data_api_key"]:
            values["market_data_api_key"] = "***"
        return values


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number; got {raw!r}.") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be greater than zero; got {raw!r}.")
    return value


def _log_level(env: Mapping[str, str]) -> str:
    level = env.get("LOG_LEVEL", "INFO").strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}; got {level!r}.")
    return level


def _port(env: Mapping[str, str]) -> int:
    raw = env.get("PORT", "8000")
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"PORT must be an integer; got {raw!r}.") from exc
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT must be between 1 and 65535; got {port}.")
    return port

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping, Optional


def _env_bool(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(environ: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = (environ.get(name) or "").strip()
    try:
        value = int(raw) if raw else default
    except ValueError:
        value = default
    return max(minimum, value)


def _env_str(environ: Mapping[str, str], name: str, default: str) -> str:
    return (environ.get(name) or "").strip() or default


@dataclass(frozen=True)
class Settings:
    api_base: str = "https://api.coingecko.com/api/v3"
    refresh_seconds: int = 30
    http_timeout: int = 10
    default_symbol: str = "BINANCE:BTCUSDT"
    default_interval: str = "15"
    locale: str = "br"
    theme: str = "dark"
    log_level: str = "INFO"
    debug: bool = False


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        api_base=_env_str(env, "COINTAPE_API_BASE", Settings.api_base).rstrip("/"),
        refresh_seconds=_env_int(env, "COINTAPE_REFRESH_SECONDS", Settings.refresh_seconds, minimum=5),
        http_timeout=_env_int(env, "COINTAPE_HTTP_TIMEOUT", Settings.http_timeout, minimum=1),
        default_symbol=_env_str(env, "COINTAPE_DEFAULT_SYMBOL", Settings.default_symbol).upper(),
        default_interval=_env_str(env, "COINTAPE_DEFAULT_INTERVAL", Settings.default_interval).upper(),
        locale=_env_str(env, "COINTAPE_LOCALE", Settings.locale),
        theme=_env_str(env, "COINTAPE_THEME", Settings.theme),
        log_level=_env_str(env, "COINTAPE_LOG_LEVEL", Settings.log_level).upper(),
        debug=_env_bool(env, "COINTAPE_DEBUG", False),
    )


settings = load_settings()

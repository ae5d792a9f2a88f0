from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 0
    retry_backoff_seconds: float = 0.3
    max_connections: int = 10
    verify_ssl: bool = True

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_number(name: str, default: str, cast: type[float] | type[int]) -> float | int:
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        kind = "an integer" if cast is int else "a number"
        raise ConfigError(f"Invalid {name}: expected {kind}, got {raw!r}") from exc


def _check(condition: bool, name: str, expectation: str, value: object) -> None:
    if not condition:
        raise ConfigError(f"Invalid {name}: expected {expectation}, got {value}")


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build a ClientConfig from STORE_* environment variables.

    A ``.env`` file (explicit path or discovered by python-dotenv) is loaded
    first; variables already present in the environment win. The base URL may
    be set per environment as ``STORE_API_BASE_URL_<ENV>`` and falls back to
    ``STORE_API_BASE_URL``.
    """
    load_dotenv(env_file)

    env_name = (os.getenv("STORE_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"STORE_API_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("STORE_API_BASE_URL") or "").strip()
    )

    timeout_seconds = _read_number("STORE_TIMEOUT_SECONDS", "10", float)
    _check(timeout_seconds > 0, "STORE_TIMEOUT_SECONDS", "> 0", timeout_seconds)

    connect_timeout_seconds = _read_number(
        "STORE_CONNECT_TIMEOUT_SECONDS", str(min(timeout_seconds, 5.0)), float
    )
    _check(connect_timeout_seconds > 0, "STORE_CONNECT_TIMEOUT_SECONDS", "> 0", connect_timeout_seconds)

    read_timeout_seconds = _read_number(
        "STORE_READ_TIMEOUT_SECONDS",
        str(max(timeout_seconds, connect_timeout_seconds)),
        float,
    )
    _check(read_timeout_seconds > 0, "STORE_READ_TIMEOUT_SECONDS", "> 0", read_timeout_seconds)

    # Collections are not idempotent on the backend; keep retries opt-in.
    retries = _read_number("STORE_RETRIES", "0", int)
    _check(retries >= 0, "STORE_RETRIES", ">= 0", retries)

    retry_backoff_seconds = _read_number("STORE_RETRY_BACKOFF_SECONDS", "0.3", float)
    _check(retry_backoff_seconds >= 0, "STORE_RETRY_BACKOFF_SECONDS", ">= 0", retry_backoff_seconds)

    max_connections = _read_number("STORE_MAX_CONNECTIONS", "10", int)
    _check(max_connections >= 1, "STORE_MAX_CONNECTIONS", ">= 1", max_connections)

    verify_ssl = _coerce_bool(os.getenv("STORE_VERIFY_SSL"), True)

    _require({"STORE_API_BASE_URL": api_base_url}, ["STORE_API_BASE_URL"])

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        retries=retries,
        retry_backoff_seconds=retry_backoff_seconds,
        max_connections=max_connections,
        verify_ssl=verify_ssl,
    )

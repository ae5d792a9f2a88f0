from __future__ import annotations

import pytest

from store_credit_sdk.config import ConfigError, load_config


def test_load_config_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STORE_API_BASE_URL", raising=False)
    monkeypatch.delenv("STORE_API_BASE_URL_DEV", raising=False)
    monkeypatch.delenv("STORE_ENV", raising=False)
    with pytest.raises(ConfigError, match="STORE_API_BASE_URL"):
        load_config()


def test_load_config_defaults(store_env: str) -> None:
    cfg = load_config()
    assert cfg.api_base_url == store_env
    assert cfg.env_name == "dev"
    assert cfg.retries == 0
    assert cfg.verify_ssl is True


def test_load_config_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_ENV", "staging")
    monkeypatch.setenv("STORE_API_BASE_URL_STAGING", "https://staging.example.com/api/store/")
    cfg = load_config()
    assert cfg.api_base_url == "https://staging.example.com/api/store"
    assert cfg.normalized_env == "staging"


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("STORE_TIMEOUT_SECONDS", "0"),
        ("STORE_CONNECT_TIMEOUT_SECONDS", "0"),
        ("STORE_READ_TIMEOUT_SECONDS", "-1"),
        ("STORE_RETRIES", "-1"),
        ("STORE_RETRY_BACKOFF_SECONDS", "-0.1"),
        ("STORE_MAX_CONNECTIONS", "0"),
        ("STORE_RETRIES", "abc"),
        ("STORE_TIMEOUT_SECONDS", "abc"),
    ],
)
def test_load_config_rejects_invalid_values(
    store_env: str,
    monkeypatch: pytest.MonkeyPatch,
    key: str,
    value: str,
) -> None:
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigError, match=key):
        load_config()


def test_verify_ssl_can_be_disabled(store_env: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_VERIFY_SSL", "false")
    assert load_config().verify_ssl is False

from __future__ import annotations

from pathlib import Path

import pytest

from shop_admin_client.config import ConfigError, load_config


def test_load_config_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHOP_ADMIN_API_BASE_URL", raising=False)
    with pytest.raises(ConfigError, match="SHOP_ADMIN_API_BASE_URL"):
        load_config()


def test_load_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHOP_ADMIN_RETRIES", raising=False)
    monkeypatch.delenv("SHOP_ADMIN_RETRY_BACKOFF_SECONDS", raising=False)
    monkeypatch.delenv("SHOP_ADMIN_EXPORT_DIR", raising=False)
    cfg = load_config()
    assert cfg.env_name == "dev"
    assert cfg.connect_timeout_seconds == 5.0
    assert cfg.read_timeout_seconds == 15.0
    assert cfg.timeout == (5.0, 15.0)
    assert cfg.retries == 2
    assert cfg.retry_backoff_seconds == 0.3
    assert cfg.page_size == 20
    assert cfg.verify_ssl is True
    assert cfg.export_dir is None
    assert isinstance(cfg.resolved_export_dir(), Path)


def test_load_config_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOP_ADMIN_ENV", "staging")
    monkeypatch.setenv("SHOP_ADMIN_API_BASE_URL_STAGING", "https://staging.example.com/")
    cfg = load_config()
    assert cfg.api_base_url == "https://staging.example.com"
    assert cfg.normalized_env == "staging"


def test_load_config_reads_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SHOP_ADMIN_PAGE_SIZE", "50")
    monkeypatch.setenv("SHOP_ADMIN_VERIFY_SSL", "false")
    monkeypatch.setenv("SHOP_ADMIN_EXPORT_DIR", str(tmp_path))
    cfg = load_config()
    assert cfg.page_size == 50
    assert cfg.verify_ssl is False
    assert cfg.resolved_export_dir() == tmp_path


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("SHOP_ADMIN_CONNECT_TIMEOUT_SECONDS", "0"),
        ("SHOP_ADMIN_READ_TIMEOUT_SECONDS", "-1"),
        ("SHOP_ADMIN_RETRIES", "-1"),
        ("SHOP_ADMIN_RETRY_BACKOFF_SECONDS", "-0.1"),
        ("SHOP_ADMIN_PAGE_SIZE", "0"),
    ],
)
def test_load_config_rejects_invalid_ranges(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigError, match=key):
        load_config()


@pytest.mark.parametrize(
    "key",
    [
        "SHOP_ADMIN_CONNECT_TIMEOUT_SECONDS",
        "SHOP_ADMIN_RETRIES",
        "SHOP_ADMIN_PAGE_SIZE",
    ],
)
def test_load_config_rejects_invalid_types(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    monkeypatch.setenv(key, "abc")
    with pytest.raises(ConfigError, match=key):
        load_config()

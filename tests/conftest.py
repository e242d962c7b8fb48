from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = BASE_DIR / "src"

sys.path.insert(0, str(SRC_DIR))

BASE_URL = "https://shop.example.com"


@pytest.fixture(autouse=True)
def shop_admin_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in (
        "SHOP_ADMIN_ENV",
        "SHOP_ADMIN_API_BASE_URL_DEV",
        "SHOP_ADMIN_CONNECT_TIMEOUT_SECONDS",
        "SHOP_ADMIN_READ_TIMEOUT_SECONDS",
        "SHOP_ADMIN_PAGE_SIZE",
        "SHOP_ADMIN_VERIFY_SSL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SHOP_ADMIN_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("SHOP_ADMIN_RETRIES", "0")
    monkeypatch.setenv("SHOP_ADMIN_RETRY_BACKOFF_SECONDS", "0")
    monkeypatch.setenv("SHOP_ADMIN_EXPORT_DIR", str(tmp_path / "exports"))

"""Client settings read from ``SHOP_ADMIN_*`` environment variables.

A ``.env`` file is loaded first when present. ``SHOP_ADMIN_ENV`` picks a
profile; ``SHOP_ADMIN_API_BASE_URL_<PROFILE>`` wins over the plain base URL.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from dotenv import load_dotenv
from platformdirs import user_downloads_dir

ENV_PREFIX = "SHOP_ADMIN_"
BASE_URL_VAR = f"{ENV_PREFIX}API_BASE_URL"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    page_size: int = 20
    verify_ssl: bool = True
    export_dir: Path | None = None

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout_seconds, self.read_timeout_seconds)

    def resolved_export_dir(self) -> Path:
        return self.export_dir or Path(user_downloads_dir())


def _parse_bool(raw: str) -> bool:
    return raw.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class _Setting:
    field: str
    parse: Callable[[str], Any]
    default: str
    check: Callable[[Any], bool] | None = None
    expectation: str = ""

    @property
    def env_var(self) -> str:
        return f"{ENV_PREFIX}{self.field.upper()}"


_SETTINGS: tuple[_Setting, ...] = (
    _Setting("connect_timeout_seconds", float, "5", lambda value: value > 0, "> 0"),
    _Setting("read_timeout_seconds", float, "15", lambda value: value > 0, "> 0"),
    _Setting("retries", int, "2", lambda value: value >= 0, ">= 0"),
    _Setting("retry_backoff_seconds", float, "0.3", lambda value: value >= 0, ">= 0"),
    _Setting("page_size", int, "20", lambda value: value >= 1, ">= 1"),
    _Setting("verify_ssl", _parse_bool, "true"),
)


def _read(setting: _Setting) -> Any:
    raw = (os.getenv(setting.env_var) or "").strip() or setting.default
    try:
        value = setting.parse(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {setting.env_var}: cannot parse {raw!r}") from exc
    if setting.check is not None and not setting.check(value):
        raise ConfigError(f"Invalid {setting.env_var}: expected {setting.expectation}, got {value}")
    return value


def _base_url(env_name: str) -> str:
    for key in (f"{BASE_URL_VAR}_{env_name.upper()}", BASE_URL_VAR):
        value = (os.getenv(key) or "").strip()
        if value:
            return value.rstrip("/")
    raise ConfigError(f"Missing required config value: {BASE_URL_VAR}")


def load_config(env_file: str | None = None) -> ClientConfig:
    load_dotenv(env_file)
    env_name = (os.getenv(f"{ENV_PREFIX}ENV") or "").strip() or "dev"
    settings = {setting.field: _read(setting) for setting in _SETTINGS}
    export_dir = (os.getenv(f"{ENV_PREFIX}EXPORT_DIR") or "").strip()
    return ClientConfig(
        env_name=env_name,
        api_base_url=_base_url(env_name),
        export_dir=Path(export_dir).expanduser() if export_dir else None,
        **settings,
    )

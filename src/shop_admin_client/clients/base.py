from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..http_client import HttpClient


@dataclass
class BaseClient:
    """Attaches the session's bearer token to every call."""

    http: HttpClient
    access_token: str | None = None

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.access_token}"} if self.access_token else {}
        headers.update(extra or {})
        return headers

    def _request(self, method: str, path: str, *, headers: Mapping[str, str] | None = None, **kwargs: Any) -> Any:
        return self.http.request(method, path, headers=self._headers(headers), **kwargs)

    def _download(self, path: str, *, headers: Mapping[str, str] | None = None, **kwargs: Any) -> bytes:
        return self.http.download(path, headers=self._headers(headers), **kwargs)

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, TransportError
from .logger import get_logger
from .tracing import TraceContext

ResponseHook = Callable[[requests.Response], None]
JsonBody = dict[str, Any] | list[Any]

# Only reads are retried.
RETRYABLE_METHODS = frozenset({"GET", "HEAD"})

logger = get_logger(__name__)


def _pooled_session() -> requests.Session:
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=4, pool_maxsize=8)
    for scheme in ("http://", "https://"):
        session.mount(scheme, adapter)
    return session


@dataclass
class LastOperation:
    module: str
    operation: str
    method: str
    path: str
    status_code: int
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    """JSON-over-HTTP transport shared by every resource client.

    Each call gets the session trace id, connect/read timeouts from
    :class:`ClientConfig` and, for reads only, retries with exponential
    backoff on connection failures and 5xx answers. Non-2xx answers are
    raised as :class:`ApiError` subclasses; a call that never got an answer
    raises :class:`TransportError`.
    """

    config: ClientConfig
    trace: TraceContext = field(default_factory=TraceContext)
    session: requests.Session = field(default_factory=_pooled_session)
    last_operation: LastOperation | None = None

    def url_for(self, path: str) -> str:
        return urljoin(f"{self.config.api_base_url.rstrip('/')}/", path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: JsonBody | None = None,
        params: Mapping[str, Any] | None = None,
        response_hook: ResponseHook | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> Any:
        """Send a call and return its decoded JSON body, or ``None`` when empty."""
        response = self._exchange(
            method,
            path,
            accept="application/json",
            headers=headers,
            json_body=json_body,
            params=params,
            module=module,
            operation=operation,
        )
        if response_hook is not None:
            response_hook(response)
        if not response.content:
            return None
        return response.json()

    def download(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> bytes:
        response = self._exchange(
            "GET",
            path,
            accept="*/*",
            headers=headers,
            params=params,
            module=module,
            operation=operation,
        )
        return response.content

    def _exchange(
        self,
        method: str,
        path: str,
        *,
        accept: str,
        headers: Mapping[str, str] | None = None,
        json_body: JsonBody | None = None,
        params: Mapping[str, Any] | None = None,
        module: str,
        operation: str,
    ) -> requests.Response:
        verb = method.upper()
        url = self.url_for(path)
        request_headers = {"Accept": accept, **self.trace.header(), **(headers or {})}

        started = time.monotonic()
        try:
            response = self._send_with_retries(verb, url, request_headers, json_body, params)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", verb, url, exc)
            self._record(module, operation, verb, path, 0, started, "error")
            raise TransportError.from_exception(exc, trace_id=self.trace.trace_id, method=verb, path=path) from exc

        self.trace.adopt_from_headers(response.headers)
        logger.debug("%s %s -> %s", verb, response.url, response.status_code)
        if not response.ok:
            error = self._error_from(response, verb, path)
            self._record(module, operation, verb, path, response.status_code, started, "error")
            raise error
        self._record(module, operation, verb, path, response.status_code, started, "success")
        return response

    def _send_with_retries(
        self,
        verb: str,
        url: str,
        headers: dict[str, str],
        json_body: JsonBody | None,
        params: Mapping[str, Any] | None,
    ) -> requests.Response:
        attempts = self.config.retries + 1 if verb in RETRYABLE_METHODS else 1
        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                response = self.session.request(
                    method=verb,
                    url=url,
                    headers=headers,
                    json=json_body,
                    params=params,
                    timeout=self.config.timeout,
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException:
                if last_attempt:
                    raise
            else:
                if response.status_code < 500 or last_attempt:
                    return response
            delay = self.config.retry_backoff_seconds * (2**attempt)
            logger.info("retrying %s %s in %.2fs (attempt %d of %d)", verb, url, delay, attempt + 2, attempts)
            time.sleep(delay)
        raise RuntimeError("retry loop exited without a response")

    def _error_from(self, response: requests.Response, verb: str, path: str) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {"message": response.text} if response.text else {}
        self.trace.adopt_from_body(body)
        return map_error(response.status_code, body, self.trace.trace_id, method=verb, path=path)

    def _record(
        self,
        module: str,
        operation: str,
        verb: str,
        path: str,
        status_code: int,
        started: float,
        result: str,
    ) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            method=verb,
            path=path,
            status_code=status_code,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=self.trace.trace_id,
        )

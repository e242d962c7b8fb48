"""Request correlation ids.

Every call carries ``X-Trace-ID``. When the backend answers with its own id
(header or error body), later calls and error reports use that one.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Mapping

TRACE_HEADER = "X-Trace-ID"
BODY_TRACE_KEYS = ("traceId", "trace_id")


def new_trace_id() -> str:
    return uuid.uuid4().hex


@dataclass
class TraceContext:
    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = new_trace_id()
        return self.trace_id

    def header(self) -> dict[str, str]:
        return {TRACE_HEADER: self.ensure()}

    def adopt_from_headers(self, headers: Mapping[str, str]) -> None:
        # requests exposes response headers case-insensitively.
        value = headers.get(TRACE_HEADER)
        if value:
            self.trace_id = value

    def adopt_from_body(self, body: Mapping[str, object]) -> None:
        for key in BODY_TRACE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value:
                self.trace_id = value
                return

"""Logging for the admin client.

Every module logger hangs off the ``shop_admin_client`` logger, which owns the
only handler. Screen actions are written as one JSON object per line.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER = "shop_admin_client"


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return root


def get_logger(name: str) -> logging.Logger:
    root = _root()
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return root.getChild(name)


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    trace_id: str | None = None,
    **context: Any,
) -> None:
    failed = outcome == "error"
    record: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": "ERROR" if failed else "INFO",
        "module": module,
        "action": action,
        "outcome": outcome,
        "trace_id": trace_id,
    }
    if context:
        record["context"] = context
    logger.log(logging.ERROR if failed else logging.INFO, json.dumps(record, default=str))

from __future__ import annotations

import json
import os
import re
import time
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

_LEVELS = {"debug": 10, "info": 20, "warn": 30, "warning": 30, "error": 40}


def _level_value(level: str) -> int:
    return _LEVELS.get(str(level or "").strip().lower(), 20)


def _min_level_value() -> int:
    # Prefer explicit CONNECT_EXPORTER_LOG_LEVEL, fallback to LOG_LEVEL.
    raw = (os.getenv("CONNECT_EXPORTER_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "info").strip().lower()
    return _level_value(raw)


_SENSITIVE_KEYWORDS = ("secret", "password", "token", "private", "api_key", "apikey", "authorization")
_URI_USERINFO = re.compile(r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^/@\s]+@")


def redact_uri(uri: str) -> str:
    """Drop `user:pass@` from a URI before it reaches a log line."""
    return _URI_USERINFO.sub(r"\g<scheme>***REDACTED***@", uri)


def redact(value: Any) -> Any:
    """
    Best-effort redaction for logs. Connect URIs may carry basic-auth credentials.
    """
    if isinstance(value, dict):
        out: Dict[str, Any] = {}
        for k, v in value.items():
            ks = str(k).lower()
            if any(x in ks for x in _SENSITIVE_KEYWORDS):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, (list, tuple)):
        return [redact(x) for x in value]
    if isinstance(value, str) and "://" in value:
        return redact_uri(value)
    return value


def build_log_context(*, tool: str, request_id: str | None = None) -> Dict[str, Any]:
    """
    Build a per-invocation context object for structured logs.

    One context per scrape, so concurrent scrapes can be told apart by `request_id`.
    """
    return {
        "tool": tool,
        "request_id": str(request_id or uuid.uuid4()),
        "ts_ms": int(time.time() * 1000),
        "service": os.getenv("CONNECT_EXPORTER_SERVICE_NAME", "kafka-connect-exporter"),
    }


def log_event(event: str, *, ctx: Dict[str, Any], data: Optional[Dict[str, Any]] = None, level: str = "info") -> None:
    """
    Emit a single-line JSON log event to stdout.
    """
    if _level_value(level) < _min_level_value():
        return
    payload = dict(ctx)
    payload["date"] = datetime.now().strftime("%Y-%m-%dT%H:%M:%S.%f")
    payload["level"] = str(level).upper()
    payload["event"] = event
    if data:
        payload["data"] = redact(data)
    print(json.dumps(payload, sort_keys=True, default=str), flush=True)

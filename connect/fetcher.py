from __future__ import annotations

import json
from typing import Any, Dict, Optional
from urllib.parse import quote

from common.errors import TransportError, UpstreamFormatError
from connect.client import ConnectClient
from connect.retry import BackoffPolicy, Ok, Outcome, Retryable, Terminal, retry_with_backoff
from observability.logging import build_log_context, log_event


class ConnectFetcher:
    """
    GET + JSON decode against the Connect REST API, with backoff on transport errors.

    A non-200 answer whose body is JSON is still returned: Connect reports
    problems as `{"error_code": ..., "message": ...}` and the normalizer should see it.
    """

    def __init__(
        self,
        client: ConnectClient,
        policy: Optional[BackoffPolicy] = None,
        *,
        ctx: Optional[Dict[str, Any]] = None,
        sleep=None,
        clock=None,
    ) -> None:
        self.client = client
        self.policy = policy or BackoffPolicy()
        self.ctx = ctx or build_log_context(tool="fetcher")
        self._sleep = sleep
        self._clock = clock

    def _attempt(self, path: str) -> Outcome:
        try:
            raw = self.client.fetch_raw(path)
        except TransportError as e:
            log_event("upstream_transport_error", ctx=self.ctx, data={"path": path, "error": str(e)}, level="error")
            return Retryable(e)

        if raw.status_code != 200:
            log_event("upstream_non_200", ctx=self.ctx, data={"path": path, "status": raw.status_code}, level="error")

        try:
            value = json.loads(raw.body)
        except (ValueError, UnicodeDecodeError) as e:
            return Terminal(
                UpstreamFormatError(
                    f"Invalid JSON from {path} (status {raw.status_code}): {e}",
                    {"path": path, "status": raw.status_code},
                )
            )

        log_event("upstream_body", ctx=self.ctx, data={"path": path, "status": raw.status_code}, level="debug")
        return Ok(value)

    def fetch_json(self, path: str) -> Any:
        kwargs = {"name": f"GET {path}"}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        if self._clock is not None:
            kwargs["clock"] = self._clock
        return retry_with_backoff(lambda: self._attempt(path), self.policy, **kwargs)

    def list_connectors(self) -> Any:
        return self.fetch_json("/connectors")

    def connector_status(self, name: str) -> Any:
        return self.fetch_json(f"/connectors/{quote(name, safe='')}/status")

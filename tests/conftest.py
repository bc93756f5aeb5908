import json
import os
import sys
from typing import Any, Dict, List, Tuple

import pytest

# Add root directory to sys.path to allow imports from top-level modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Set environment variables BEFORE modules are imported
os.environ["CONNECT_URI"] = "http://connect.test:8083"
os.environ["CONNECT_EXPORTER_LOG_LEVEL"] = "error"

from common.errors import TransportError  # noqa: E402
from connect.client import RawResponse  # noqa: E402
from connect.fetcher import ConnectFetcher  # noqa: E402
from connect.retry import BackoffPolicy  # noqa: E402


class FakeClient:
    """
    Stand-in for ConnectClient. `routes` maps a path to a list of responses,
    consumed one per call; the last one repeats. An Exception entry is raised.
    """

    def __init__(self, routes: Dict[str, List[Any]]):
        self.routes = routes
        self.calls: List[str] = []

    def fetch_raw(self, path: str) -> RawResponse:
        self.calls.append(path)
        if path not in self.routes:
            raise TransportError(f"Error getting {path}: connection refused")
        queue = self.routes[path]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, RawResponse):
            return item
        status, body = item if isinstance(item, tuple) else (200, item)
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return RawResponse(status_code=status, body=body)


class FakeClock:
    """Monotonic clock that only moves when `sleep` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, sec: float) -> None:
        self.sleeps.append(sec)
        self.now += sec


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_fetcher(fake_clock):
    def _make(routes: Dict[str, List[Any]], policy: BackoffPolicy = None) -> Tuple[ConnectFetcher, FakeClient]:
        client = FakeClient(routes)
        fetcher = ConnectFetcher(client, policy or BackoffPolicy(), sleep=fake_clock.sleep, clock=fake_clock)
        return fetcher, client

    return _make


@pytest.fixture
def running_status():
    return {
        "name": "c",
        "connector": {"state": "RUNNING", "worker_id": "10.0.0.1:8083"},
        "tasks": [{"id": 0, "state": "PAUSED", "worker_id": "10.0.0.1:8083"}],
    }

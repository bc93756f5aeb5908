from .client import ConnectClient, RawResponse
from .collector import collect
from .fetcher import ConnectFetcher
from .models import ConnectorState, MetricsSnapshot, SnapshotBuilder, TaskState, normalize_state, state_value
from .normalize import normalize_connector, normalize_task
from .retry import BackoffPolicy, retry_with_backoff

__all__ = [
    "BackoffPolicy",
    "ConnectClient",
    "ConnectFetcher",
    "ConnectorState",
    "MetricsSnapshot",
    "RawResponse",
    "SnapshotBuilder",
    "TaskState",
    "collect",
    "normalize_connector",
    "normalize_state",
    "normalize_task",
    "retry_with_backoff",
    "state_value",
]

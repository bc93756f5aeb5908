from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

RUNNING = "running"
PAUSED = "paused"
UNASSIGNED = "unassigned"
FAILED = "failed"
UNKNOWN = "unknown"

KNOWN_STATES = frozenset({RUNNING, PAUSED, UNASSIGNED, FAILED, UNKNOWN})

# Gauge values exported for each state. Anything not listed is 0.
STATE_VALUES: Dict[str, int] = {
    RUNNING: 1,
    UNASSIGNED: 2,
    PAUSED: 3,
}


def normalize_state(raw_state: Any) -> str:
    """
    Normalize a Connect worker state string into a small stable set.

    Returns one of:
    - running
    - paused
    - unassigned
    - failed
    - unknown
    """
    if not isinstance(raw_state, str):
        return UNKNOWN
    s = raw_state.strip().lower()
    if s in KNOWN_STATES:
        return s
    return UNKNOWN


def state_value(state: Any) -> int:
    if not isinstance(state, str):
        return 0
    return STATE_VALUES.get(state.strip().lower(), 0)


@dataclass(frozen=True)
class ConnectorState:
    connector: str
    state: str
    worker: str
    task_count: int = 0

    @property
    def value(self) -> int:
        return state_value(self.state)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connector": self.connector,
            "state": self.state,
            "worker": self.worker,
            "task_count": self.task_count,
        }


@dataclass(frozen=True)
class TaskState:
    connector: str
    task_id: int
    state: str
    worker_id: str

    @property
    def value(self) -> int:
        return state_value(self.state)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connector": self.connector,
            "id": self.task_id,
            "state": self.state,
            "worker_id": self.worker_id,
        }


@dataclass(frozen=True)
class MetricsSnapshot:
    """
    Everything collected during one scrape.

    Built once by `SnapshotBuilder.build()` and never mutated afterwards.
    """

    connectors: Tuple[ConnectorState, ...] = ()
    tasks: Tuple[TaskState, ...] = ()

    @property
    def connector_count(self) -> int:
        return len(self.connectors)

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    @property
    def up(self) -> int:
        return 1 if self.connectors else 0


@dataclass
class SnapshotBuilder:
    connectors: List[ConnectorState] = field(default_factory=list)
    tasks: List[TaskState] = field(default_factory=list)

    def add_connector(self, state: ConnectorState) -> None:
        self.connectors.append(state)

    def add_task(self, task: TaskState) -> None:
        self.tasks.append(task)

    def build(self) -> MetricsSnapshot:
        return MetricsSnapshot(connectors=tuple(self.connectors), tasks=tuple(self.tasks))

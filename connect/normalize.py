"""
Turn raw `/connectors/{name}/status` documents into metric records.

Each function handles exactly one entity and raises a `NormalizeError` when that
entity is unusable; callers decide whether to skip it.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from common.errors import InvalidFieldError, MissingFieldError
from connect.models import ConnectorState, TaskState, normalize_state


def _require(doc: Mapping[str, Any], key: str, field: str) -> Any:
    if key not in doc or doc[key] is None:
        raise MissingFieldError(field)
    return doc[key]


def _require_str(doc: Mapping[str, Any], key: str, field: str) -> str:
    v = _require(doc, key, field)
    if not isinstance(v, str):
        raise InvalidFieldError(field, f"expected string, got {type(v).__name__}")
    return v


def _to_task_id(v: Any) -> int:
    if isinstance(v, bool):
        raise InvalidFieldError("id", "expected integer, got bool")
    if isinstance(v, int):
        return v
    if isinstance(v, str):
        s = v.strip()
        if s.isdigit():
            return int(s)
    raise InvalidFieldError("id", f"expected integer, got {v!r}")


def task_count(status_doc: Any) -> Optional[int]:
    """Length of the `tasks` array, or None when it is absent or not a list."""
    if not isinstance(status_doc, Mapping):
        return None
    tasks = status_doc.get("tasks")
    if not isinstance(tasks, list):
        return None
    return len(tasks)


def normalize_connector(name: str, status_doc: Any) -> ConnectorState:
    if not isinstance(status_doc, Mapping):
        raise InvalidFieldError("status", f"expected object, got {type(status_doc).__name__}")

    connector = _require(status_doc, "connector", "connector")
    if not isinstance(connector, Mapping):
        raise InvalidFieldError("connector", f"expected object, got {type(connector).__name__}")

    state = _require_str(connector, "state", "connector.state")
    worker = _require_str(connector, "worker_id", "connector.worker_id")

    return ConnectorState(
        connector=name,
        state=normalize_state(state),
        worker=worker,
        task_count=task_count(status_doc) or 0,
    )


def normalize_task(connector_name: str, task_doc: Any) -> TaskState:
    if not isinstance(task_doc, Mapping):
        raise InvalidFieldError("task", f"expected object, got {type(task_doc).__name__}")

    task_id = _to_task_id(_require(task_doc, "id", "id"))
    state = _require_str(task_doc, "state", "state")
    worker_id = _require_str(task_doc, "worker_id", "worker_id")

    return TaskState(
        connector=connector_name,
        task_id=task_id,
        state=normalize_state(state),
        worker_id=worker_id,
    )

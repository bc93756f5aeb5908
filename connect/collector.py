from __future__ import annotations

from typing import Any, Dict, Optional

from common.errors import AppError, ListUnavailableError, NormalizeError
from connect.fetcher import ConnectFetcher
from connect.models import MetricsSnapshot, SnapshotBuilder
from connect.normalize import normalize_connector, normalize_task
from observability.logging import build_log_context, log_event


def _list_connectors(fetcher: ConnectFetcher, ctx: Dict[str, Any]) -> list:
    try:
        names = fetcher.list_connectors()
    except AppError as e:
        log_event("connector_list_failed", ctx=ctx, data={"error": str(e), "code": e.code}, level="error")
        raise ListUnavailableError(f"Could not list connectors: {e}", {"cause": e.code}) from e

    if not isinstance(names, list):
        log_event("connector_list_malformed", ctx=ctx, data={"body": names}, level="error")
        raise ListUnavailableError(
            "Could not list connectors: expected a JSON array",
            {"cause": "not_an_array"},
        )
    return names


def collect(fetcher: ConnectFetcher, *, ctx: Optional[Dict[str, Any]] = None) -> MetricsSnapshot:
    """
    Run one scrape: list connectors, fetch each status, normalize, snapshot.

    Only a failed connector listing is fatal (ListUnavailableError). A connector or
    task that cannot be fetched or normalized is logged and left out.
    """
    ctx = ctx or build_log_context(tool="collector")
    builder = SnapshotBuilder()
    skipped_connectors = 0
    skipped_tasks = 0

    names = _list_connectors(fetcher, ctx)

    for name in names:
        if not isinstance(name, str):
            log_event("connector_name_invalid", ctx=ctx, data={"name": name}, level="error")
            skipped_connectors += 1
            continue

        try:
            status = fetcher.connector_status(name)
        except AppError as e:
            log_event(
                "connector_status_failed",
                ctx=ctx,
                data={"connector": name, "error": str(e), "code": e.code},
                level="error",
            )
            skipped_connectors += 1
            continue

        try:
            builder.add_connector(normalize_connector(name, status))
        except NormalizeError as e:
            log_event(
                "connector_state_invalid",
                ctx=ctx,
                data={"connector": name, "error": str(e), "field": e.field},
                level="error",
            )
            skipped_connectors += 1

        # Tasks are enumerated even when the connector record itself was unusable.
        tasks = status.get("tasks") if isinstance(status, dict) else None
        if not isinstance(tasks, list):
            log_event("connector_missing_tasks", ctx=ctx, data={"connector": name}, level="error")
            continue

        for task in tasks:
            try:
                builder.add_task(normalize_task(name, task))
            except NormalizeError as e:
                log_event(
                    "task_state_invalid",
                    ctx=ctx,
                    data={"connector": name, "error": str(e), "field": e.field},
                    level="error",
                )
                skipped_tasks += 1

    snapshot = builder.build()
    log_event(
        "scrape_collected",
        ctx=ctx,
        data={
            "connectors_listed": len(names),
            "connectors_collected": snapshot.connector_count,
            "connectors_skipped": skipped_connectors,
            "tasks_collected": snapshot.task_count,
            "tasks_skipped": skipped_tasks,
        },
    )
    return snapshot

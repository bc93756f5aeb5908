"""
Prometheus text-format exporter.

Renders one `MetricsSnapshot` into the exposition format served on `/metrics`.
Pure: no I/O, and the same snapshot always renders to the same bytes.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple

from connect.models import MetricsSnapshot

_re_non_ident = re.compile(r"[^a-zA-Z0-9_]")

Labels = Sequence[Tuple[str, object]]


def _name(s: str) -> str:
    s2 = _re_non_ident.sub("_", (s or "").strip())
    s2 = re.sub(r"_+", "_", s2)
    s2 = s2.strip("_")
    return s2.lower() or "unnamed"


def escape_label_value(v: object) -> str:
    return str(v).replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _sample(name: str, labels: Labels, value: int) -> str:
    if not labels:
        return f"{name} {value}"
    body = ",".join(f'{k}="{escape_label_value(v)}"' for k, v in labels)
    return f"{name}{{{body}}} {value}"


def _family(name: str, help_text: str, samples: Iterable[Tuple[Labels, int]]) -> List[str]:
    lines = [f"# HELP {name} {help_text}", f"# TYPE {name} gauge"]
    lines.extend(_sample(name, labels, value) for labels, value in samples)
    return lines


def render_prometheus(snapshot: MetricsSnapshot, *, namespace: str = "kafka_connect") -> str:
    """
    Render a MetricsSnapshot into Prometheus exposition format.

    Family order is fixed; each family gets its HELP/TYPE header even when empty.
    """
    ns = _name(namespace)
    lines: list[str] = []

    lines += _family(
        f"{ns}_connector_state_running",
        "is the connector running?",
        (
            ((("connector", c.connector), ("state", c.state), ("worker", c.worker)), c.value)
            for c in snapshot.connectors
        ),
    )
    lines += _family(
        f"{ns}_connector_tasks_state_running",
        "are connector tasks running?",
        (
            (
                (("connector", t.connector), ("id", t.task_id), ("state", t.state), ("worker_id", t.worker_id)),
                t.value,
            )
            for t in snapshot.tasks
        ),
    )
    lines += _family(f"{ns}_connectors_count", "number of deployed connectors", [((), snapshot.connector_count)])
    lines += _family(f"{ns}_tasks_count", "number of tasks", [((), snapshot.task_count)])
    lines += _family(
        f"{ns}_connector_tasks_count",
        "count of tasks per connector",
        (((("connector", c.connector),), c.task_count) for c in snapshot.connectors),
    )
    lines += _family(f"{ns}_up", "was the last scrape of kafka connect successful?", [((), snapshot.up)])

    return "\n".join(lines) + "\n"

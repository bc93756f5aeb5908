from connect.models import ConnectorState, MetricsSnapshot, TaskState
from observability.prometheus import escape_label_value, render_prometheus


def _snapshot():
    return MetricsSnapshot(
        connectors=(
            ConnectorState("sink", "running", "10.0.0.1:8083", 2),
            ConnectorState("source", "failed", "10.0.0.2:8083", 0),
        ),
        tasks=(
            TaskState("sink", 0, "running", "10.0.0.1:8083"),
            TaskState("sink", 1, "unassigned", "10.0.0.3:8083"),
        ),
    )


def test_render_empty_snapshot():
    out = render_prometheus(MetricsSnapshot())
    data_lines = [line for line in out.splitlines() if not line.startswith("#")]
    assert data_lines == [
        "kafka_connect_connectors_count 0",
        "kafka_connect_tasks_count 0",
        "kafka_connect_up 0",
    ]
    assert out.count("# HELP ") == 6
    assert out.count("# TYPE ") == 6


def test_render_prometheus_contains_expected_lines():
    out = render_prometheus(_snapshot())
    assert 'kafka_connect_connector_state_running{connector="sink",state="running",worker="10.0.0.1:8083"} 1' in out
    assert 'kafka_connect_connector_state_running{connector="source",state="failed",worker="10.0.0.2:8083"} 0' in out
    assert (
        'kafka_connect_connector_tasks_state_running{connector="sink",id="1",state="unassigned",worker_id="10.0.0.3:8083"} 2'
        in out
    )
    assert "kafka_connect_connectors_count 2" in out
    assert "kafka_connect_tasks_count 2" in out
    assert 'kafka_connect_connector_tasks_count{connector="sink"} 2' in out
    assert 'kafka_connect_connector_tasks_count{connector="source"} 0' in out
    assert out.endswith("kafka_connect_up 1\n")


def test_render_family_order_and_single_metadata():
    out = render_prometheus(_snapshot())
    types = [line.split()[2] for line in out.splitlines() if line.startswith("# TYPE")]
    assert types == [
        "kafka_connect_connector_state_running",
        "kafka_connect_connector_tasks_state_running",
        "kafka_connect_connectors_count",
        "kafka_connect_tasks_count",
        "kafka_connect_connector_tasks_count",
        "kafka_connect_up",
    ]
    lines = out.splitlines()
    first_sample = lines.index(next(line for line in lines if line.startswith("kafka_connect_connector_state_running{")))
    assert lines[first_sample - 2].startswith("# HELP kafka_connect_connector_state_running ")
    assert lines[first_sample - 1] == "# TYPE kafka_connect_connector_state_running gauge"


def test_render_is_deterministic():
    snap = _snapshot()
    assert render_prometheus(snap) == render_prometheus(snap)


def test_render_namespace():
    out = render_prometheus(MetricsSnapshot(), namespace="My Connect")
    assert "my_connect_up 0" in out


def test_label_values_are_escaped():
    assert escape_label_value('a"b\\c\nd') == 'a\\"b\\\\c\\nd'
    snap = MetricsSnapshot(connectors=(ConnectorState('we"ird', "running", "w:1", 0),))
    assert 'connector="we\\"ird"' in render_prometheus(snap)

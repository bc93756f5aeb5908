import pytest

from common.errors import FetchExhaustedError, TransportError, UpstreamFormatError
from connect.retry import BackoffPolicy, Ok, Retryable, Terminal, retry_with_backoff


def test_retry_retries_transient_and_then_succeeds(fake_clock):
    calls = {"n": 0}

    def op():
        calls["n"] += 1
        if calls["n"] < 3:
            return Retryable(TransportError("connection refused"))
        return Ok("ok")

    out = retry_with_backoff(op, BackoffPolicy(), sleep=fake_clock.sleep, clock=fake_clock)
    assert out == "ok"
    assert calls["n"] == 3
    assert len(fake_clock.sleeps) == 2


def test_retry_does_not_retry_terminal(fake_clock):
    calls = {"n": 0}

    def op():
        calls["n"] += 1
        return Terminal(UpstreamFormatError("not json"))

    with pytest.raises(UpstreamFormatError):
        retry_with_backoff(op, BackoffPolicy(), sleep=fake_clock.sleep, clock=fake_clock)
    assert calls["n"] == 1
    assert fake_clock.sleeps == []


def test_retry_exhausts_after_elapsed_ceiling(fake_clock):
    policy = BackoffPolicy(initial_interval_sec=0.5, multiplier=1.5, max_interval_sec=2.0, max_elapsed_sec=10.0)

    def op():
        return Retryable(TransportError("timed out"))

    with pytest.raises(FetchExhaustedError) as e:
        retry_with_backoff(op, policy, name="GET /connectors", sleep=fake_clock.sleep, clock=fake_clock)

    assert "GET /connectors failed after" in str(e.value)
    assert isinstance(e.value.__cause__, TransportError)
    assert fake_clock.now <= policy.max_elapsed_sec
    assert all(s <= policy.max_interval_sec for s in fake_clock.sleeps)
    assert e.value.data["attempts"] == len(fake_clock.sleeps) + 1


def test_intervals_grow_and_are_capped():
    policy = BackoffPolicy(initial_interval_sec=0.5, multiplier=2.0, max_interval_sec=2.0)
    assert policy.next_interval(0.5) == 1.0
    assert policy.next_interval(1.5) == 2.0
    # no jitter at the midpoint
    assert policy.jittered(1.0, 0.5) == pytest.approx(1.0)
    assert policy.jittered(2.0, 0.999) <= 2.0
    assert policy.jittered(1.0, 0.0) == pytest.approx(0.5)


def test_retry_rejects_unknown_outcome(fake_clock):
    with pytest.raises(TypeError):
        retry_with_backoff(lambda: "nope", BackoffPolicy(), sleep=fake_clock.sleep, clock=fake_clock)

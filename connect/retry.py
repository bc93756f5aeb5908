"""
Exponential backoff for idempotent reads against a flaky upstream.

`op` reports how an attempt went with a tagged outcome:
- Ok(value): done
- Retryable(error): wait and try again
- Terminal(error): give up now
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from common.errors import FetchExhaustedError

T = TypeVar("T")


@dataclass(frozen=True)
class BackoffPolicy:
    initial_interval_sec: float = 0.5
    multiplier: float = 1.5
    max_interval_sec: float = 2.0
    max_elapsed_sec: float = 10.0
    randomization_factor: float = 0.5

    def next_interval(self, current: float) -> float:
        return min(self.max_interval_sec, current * self.multiplier)

    def jittered(self, interval: float, rnd: float) -> float:
        # rnd in [0, 1): spread the wait over interval * (1 +/- randomization_factor)
        delta = self.randomization_factor * interval
        return min(self.max_interval_sec, max(0.0, interval - delta + rnd * 2 * delta))


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Retryable:
    error: Exception


@dataclass(frozen=True)
class Terminal:
    error: Exception


Outcome = Union[Ok, Retryable, Terminal]


def retry_with_backoff(
    op: Callable[[], Outcome],
    policy: BackoffPolicy,
    *,
    name: str = "op",
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    rand: Callable[[], float] = random.random,
):
    """
    Run `op` until it succeeds, fails terminally or the elapsed-time ceiling is hit.

    Terminal errors are re-raised unchanged. Exhaustion raises FetchExhaustedError
    chained to the last retryable error.
    """
    started = clock()
    interval = policy.initial_interval_sec
    attempt = 0
    while True:
        attempt += 1
        outcome = op()
        if isinstance(outcome, Ok):
            return outcome.value
        if isinstance(outcome, Terminal):
            raise outcome.error
        if not isinstance(outcome, Retryable):
            raise TypeError(f"{name} returned {outcome!r}, expected Ok/Retryable/Terminal")

        wait = policy.jittered(interval, rand())
        elapsed = clock() - started
        if elapsed + wait > policy.max_elapsed_sec:
            raise FetchExhaustedError(
                f"{name} failed after {attempt} attempt(s): {outcome.error}",
                {"attempts": attempt, "op": name, "elapsed_sec": round(elapsed, 3)},
            ) from outcome.error
        sleep(wait)
        interval = policy.next_interval(interval)

# uiauto_finders/waits.py
"""
@file waits.py
@brief Wait and retry utilities applied around complete find() calls.

Every loop evaluates its condition at least once, even with a zero
timeout, and never sleeps past the deadline.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, Tuple, TypeVar

from .exceptions import TimeoutError
from .timinglogger import TIMING_LOGGER

T = TypeVar("T")


class _Deadline:
    """Attempt counter and monotonic clock for one wait loop."""

    def __init__(self, description: str, timeout: float, interval: float, stage: Optional[str], kind: str):
        self.description = description
        self.timeout = timeout
        self.interval = interval
        self.stage = stage
        self.kind = kind
        self.attempts = 0
        self.start = time.monotonic()
        self._log("start", "info", timeout_s=timeout, interval_s=interval)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start

    def _log(self, phase: str, status: str, **metadata: Any) -> None:
        if TIMING_LOGGER.is_enabled():
            TIMING_LOGGER.log(f"{self.kind}_{phase}", self.description, status, stage=self.stage, **metadata)

    def succeeded(self) -> None:
        self._log("success", "success", attempts=self.attempts, elapsed_s=round(self.elapsed, 3))

    def pause(self) -> bool:
        """Sleep until the next attempt; False once the deadline has passed."""
        left = self.timeout - self.elapsed
        if left <= 0:
            return False
        self._log("sleep", "debug", attempt=self.attempts)
        time.sleep(min(self.interval, left))
        return True

    def expired(self, reason: str, last_error: Optional[BaseException] = None) -> TimeoutError:
        elapsed = self.elapsed
        self._log("timeout", "error", attempts=self.attempts, elapsed_s=round(elapsed, 3))
        return TimeoutError(
            f"Timed out waiting for {self.description} after {self.timeout}s: {reason}",
            description=self.description,
            timeout=self.timeout,
            attempts=self.attempts,
            elapsed=elapsed,
            stage=self.stage,
            last_error=last_error,
        )


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
    stage: Optional[str] = None,
) -> T:
    """
    Repeatedly runs predicate until it returns a truthy value, or until timeout.

    Exceptions from the predicate count as a failed attempt; the last one is
    kept on the TimeoutError.
    """
    deadline = _Deadline(description, timeout, interval, stage, "wait")
    last_error: Optional[BaseException] = None
    while True:
        deadline.attempts += 1
        try:
            result = predicate()
        except Exception as e:
            last_error = e
        else:
            if result:
                deadline.succeeded()
                return result
        if not deadline.pause():
            break

    if last_error is not None:
        reason = f"{type(last_error).__name__}: {last_error}"
    else:
        reason = "condition kept returning falsy"
    raise deadline.expired(reason, last_error)


def wait_until_passes(
    func: Callable[..., T],
    timeout: float,
    interval: float = 0.2,
    exceptions: Tuple[type, ...] = (Exception,),
    description: str = "operation",
    *args: Any,
    stage: Optional[str] = None,
    **kwargs: Any,
) -> T:
    """
    Wait until func(*args, **kwargs) succeeds without raising specified exceptions.

    Exceptions outside `exceptions` propagate immediately.
    """
    deadline = _Deadline(description, timeout, interval, stage, "retry")
    while True:
        deadline.attempts += 1
        try:
            result = func(*args, **kwargs)
        except exceptions as e:
            if not deadline.pause():
                raise deadline.expired(
                    f"{deadline.attempts} attempts, last error {type(e).__name__}: {e}", e
                ) from e
        else:
            deadline.succeeded()
            return result


def wait_until_not(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition to become false",
    stage: Optional[str] = None,
    exceptions: Tuple[type, ...] = (Exception,),
) -> None:
    """
    Wait until predicate returns a falsy value.

    A predicate raising one of `exceptions` counts as falsy (the thing
    waited on is gone); any other exception propagates.
    """
    deadline = _Deadline(description, timeout, interval, stage, "wait")
    while True:
        deadline.attempts += 1
        try:
            result = predicate()
        except exceptions:
            result = False
        if not result:
            deadline.succeeded()
            return
        if not deadline.pause():
            break
    raise deadline.expired("condition kept returning truthy")

"""Deadline and cancellation primitives for blocking completion calls.

LangChain chat models expose blocking `invoke()` calls with no uniform timeout knob,
so each call runs on a short-lived helper thread and the caller waits on it with a
deadline. A shared `CancellationToken` lets sibling calls of one plan give up early.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, TypeVar

from director.errors import InvocationCancelledError, InvocationTimeoutError

T = TypeVar("T")

_POLL_INTERVAL_S = 0.05


class CancellationToken:
    """A one-shot, thread-safe cancellation flag shared by the steps of one plan."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: str | None = None
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str) -> bool:
        """Cancel the token. Returns True only for the call that actually cancelled it."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
            return True


def call_with_deadline(
    fn: Callable[[], T],
    timeout_s: float | None,
    cancel_token: CancellationToken | None = None,
    worker_type: str | None = None,
) -> T:
    """Run `fn` and wait for it at most `timeout_s` seconds.

    Args:
        fn: Zero-argument blocking callable.
        timeout_s: Deadline in seconds. None waits indefinitely.
        cancel_token: Optional token; once cancelled the wait is abandoned.
        worker_type: Worker identifier attached to raised errors.

    Returns:
        Whatever `fn` returns. Exceptions raised by `fn` propagate unchanged.

    Raises:
        InvocationTimeoutError: The deadline passed before `fn` returned.
        InvocationCancelledError: The token was cancelled before `fn` returned.
    """
    if cancel_token is not None and cancel_token.cancelled:
        raise InvocationCancelledError(f"Cancelled before start: {cancel_token.reason}", worker_type=worker_type)
    if timeout_s is None and cancel_token is None:
        return fn()
    if timeout_s is not None and timeout_s <= 0:
        raise InvocationTimeoutError("No time left for invocation", worker_type=worker_type)

    # The helper thread is not joined on timeout: a hung call is abandoned, not awaited.
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="director-call")
    try:
        future = pool.submit(fn)
        deadline = None if timeout_s is None else time.monotonic() + timeout_s
        while True:
            wait_for = _POLL_INTERVAL_S if cancel_token is not None else None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise InvocationTimeoutError(
                        f"Invocation exceeded deadline of {timeout_s:.1f}s", worker_type=worker_type
                    )
                wait_for = remaining if wait_for is None else min(wait_for, remaining)
            done, _ = wait([future], timeout=wait_for)
            if done:
                return future.result()
            if cancel_token is not None and cancel_token.cancelled:
                raise InvocationCancelledError(f"Cancelled: {cancel_token.reason}", worker_type=worker_type)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

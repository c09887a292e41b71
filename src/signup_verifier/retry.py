"""Bounded retries for transient interaction failures."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, TypeVar

from .browser.base import Session
from .diagnostics import DiagnosticsHook, report_failure
from .errors import TransientInteractionFailure

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

Fallback = Callable[[Exception], T]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to invoke an operation and which failures warrant another try."""

    max_attempts: int = 3
    delay: float = 0.2
    transient_kinds: tuple[type[BaseException], ...] = field(
        default=(TransientInteractionFailure,)
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")

    def is_transient(self, error: BaseException) -> bool:
        return isinstance(error, self.transient_kinds)


@dataclass
class RetryResult(Generic[T]):
    value: T
    attempts: int


class RetryController:
    """Invoke operations under a :class:`RetryPolicy`.

    The attempt counter lives in each call, so one controller can serve any
    number of operations. Once attempts run out the last failure is re-raised
    as is, unless a ``fallback`` is given: it then receives that failure and
    either returns a value or raises.
    """

    def __init__(
        self,
        *,
        diagnostics: Optional[DiagnosticsHook] = None,
        session: Optional[Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._diagnostics = diagnostics
        self._session = session
        self._sleep = sleep

    def execute(
        self,
        operation: Callable[[], T],
        policy: RetryPolicy,
        fallback: Optional[Fallback[T]] = None,
    ) -> T:
        return self.execute_with_stats(operation, policy, fallback).value

    def execute_with_stats(
        self,
        operation: Callable[[], T],
        policy: RetryPolicy,
        fallback: Optional[Fallback[T]] = None,
    ) -> RetryResult[T]:
        attempt = 0
        while True:
            attempt += 1
            try:
                value = operation()
            except Exception as exc:
                if not policy.is_transient(exc):
                    report_failure(self._diagnostics, self._session, exc)
                    raise
                if attempt >= policy.max_attempts:
                    if fallback is None:
                        LOGGER.warning("Giving up after %d attempts: %s", attempt, exc)
                        report_failure(self._diagnostics, self._session, exc)
                        raise
                    try:
                        value = fallback(exc)
                    except Exception as final:
                        LOGGER.warning("Giving up after %d attempts: %s", attempt, final)
                        report_failure(self._diagnostics, self._session, final)
                        raise
                    return RetryResult(value=value, attempts=attempt)
                LOGGER.info(
                    "Transient failure on attempt %d/%d, retrying in %.2fs: %s",
                    attempt,
                    policy.max_attempts,
                    policy.delay,
                    exc,
                )
                if policy.delay:
                    self._sleep(policy.delay)
                continue
            if attempt > 1:
                LOGGER.debug("Operation succeeded on attempt %d", attempt)
            return RetryResult(value=value, attempts=attempt)

"""Bounded polling of wait conditions."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from ..browser.base import Session
from ..diagnostics import DiagnosticsHook, report_failure
from ..errors import SynchronizationTimeout, TransientInteractionFailure
from .conditions import Condition

LOGGER = logging.getLogger(__name__)


class Waiter:
    """Poll a condition until it holds or a timeout elapses.

    The polling interval is capped at a tenth of the timeout. A transient
    failure while evaluating the condition only ends that evaluation; the loop
    keeps polling. Timeouts surface as :class:`SynchronizationTimeout`.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        poll_interval: float = 0.5,
        *,
        diagnostics: Optional[DiagnosticsHook] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if timeout <= 0 or poll_interval <= 0:
            raise ValueError("timeout and poll_interval must be positive")
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._diagnostics = diagnostics
        self._clock = clock
        self._sleep = sleep

    @property
    def timeout(self) -> float:
        return self._timeout

    def interval_for(self, timeout: float) -> float:
        return min(self._poll_interval, timeout / 10)

    def wait_until(
        self,
        condition: Condition,
        session: Session,
        timeout: Optional[float] = None,
        *,
        capture: bool = True,
    ) -> Any:
        """Return the condition's value as soon as it is truthy.

        With ``capture=False`` a timeout is not reported to the diagnostics
        hook; callers that turn the timeout into an answer pass it.
        """

        def attempt() -> tuple[bool, Any]:
            value = condition.evaluate(session.page)
            return bool(value), value

        return self._poll(condition.description, attempt, session, timeout, capture)

    def wait_while(
        self,
        condition: Condition,
        session: Session,
        timeout: Optional[float] = None,
        *,
        capture: bool = True,
    ) -> bool:
        """Block until the condition stops holding."""

        def attempt() -> tuple[bool, Any]:
            return not condition.evaluate(session.page), True

        return self._poll(f"no longer {condition.description}", attempt, session, timeout, capture)

    def _poll(
        self,
        description: str,
        attempt: Callable[[], tuple[bool, Any]],
        session: Session,
        timeout: Optional[float],
        capture: bool,
    ) -> Any:
        limit = self._timeout if timeout is None else timeout
        if limit <= 0:
            raise ValueError("timeout must be positive")
        interval = self.interval_for(limit)
        start = self._clock()
        last_error: Optional[TransientInteractionFailure] = None
        LOGGER.debug("Waiting up to %.2fs for %s", limit, description)
        while True:
            try:
                done, value = attempt()
            except TransientInteractionFailure as exc:
                LOGGER.debug("Ignoring transient failure while waiting for %s: %s", description, exc)
                last_error = exc
                done, value = False, None
            except Exception as exc:
                report_failure(self._diagnostics, session, exc)
                raise
            elapsed = self._clock() - start
            if done:
                LOGGER.debug("Resolved %s after %.0fms", description, elapsed * 1000)
                return value
            if elapsed >= limit:
                error = SynchronizationTimeout(description, elapsed, limit, last_error)
                LOGGER.debug("%s", error)
                if capture:
                    report_failure(self._diagnostics, session, error)
                raise error
            self._sleep(min(interval, limit - elapsed))

"""Error taxonomy shared by the session, waiting and page layers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class FrameworkError(RuntimeError):
    """Base class for every failure raised by signup-verifier."""


class ConfigurationError(FrameworkError):
    """Raised when configuration or locator data is missing or invalid."""


class SessionCreationFailure(FrameworkError):
    """Raised when a browser session cannot be launched."""


class SessionTeardownFailure(FrameworkError):
    """Describes a handle that failed to close. Logged, never raised to callers."""


class SynchronizationTimeout(FrameworkError):
    """Raised when a wait condition does not resolve before its timeout."""

    def __init__(
        self,
        description: str,
        elapsed: float,
        timeout: float,
        last_error: Optional[BaseException] = None,
    ) -> None:
        self.description = description
        self.elapsed = elapsed
        self.timeout = timeout
        self.last_error = last_error
        message = f"Timed out after {elapsed:.2f}s (limit {timeout:.2f}s) waiting for {description}"
        if last_error is not None:
            message += f"; last error: {last_error}"
        super().__init__(message)


class InteractionFailure(FrameworkError):
    """Raised when interacting with the page fails."""


class TransientInteractionFailure(InteractionFailure):
    """Failure expected to clear up when the operation is retried shortly after."""


class NonTransientInteractionFailure(InteractionFailure):
    """Failure that must propagate without retrying."""


# Playwright reports these conditions while the DOM is re-rendering.
_TRANSIENT_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "element is not stable",
    "element is not visible",
    "element is not enabled",
    "element is outside of the viewport",
    "intercepts pointer events",
    "execution context was destroyed",
    "frame was detached",
    "cannot find context with specified id",
)

_SESSION_LOST_MARKERS = (
    "has been closed",
    "target closed",
    "browser has disconnected",
    "connection closed",
)

# The element exists but a trusted click cannot reach it.
_NOT_INTERACTABLE_MARKERS = (
    "intercepts pointer events",
    "element is not visible",
    "element is outside of the viewport",
)


def is_not_interactable(exc: BaseException) -> bool:
    """Whether ``exc`` is a transient failure of an element that is covered or hidden."""

    if not isinstance(exc, TransientInteractionFailure):
        return False
    lowered = str(exc).lower()
    return any(marker in lowered for marker in _NOT_INTERACTABLE_MARKERS)


def classify_error(exc: BaseException, description: str) -> InteractionFailure:
    """Map an automation-layer exception onto the interaction failure kinds."""

    if isinstance(exc, InteractionFailure):
        return exc
    message = str(exc)
    lowered = message.lower()
    if any(marker in lowered for marker in _SESSION_LOST_MARKERS):
        return NonTransientInteractionFailure(f"{description}: browser session lost ({message})")
    if isinstance(exc, PlaywrightTimeoutError):
        return TransientInteractionFailure(f"{description}: {message}")
    if any(marker in lowered for marker in _TRANSIENT_MARKERS):
        return TransientInteractionFailure(f"{description}: {message}")
    return NonTransientInteractionFailure(f"{description}: {message}")


@contextmanager
def translate_errors(description: str) -> Iterator[None]:
    """Re-raise Playwright errors raised inside the block as interaction failures."""

    try:
        yield
    except PlaywrightError as exc:
        raise classify_error(exc, description) from exc

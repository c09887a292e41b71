"""Browser session abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class SessionTimeouts:
    """Timeouts applied to a session for its whole lifetime, in seconds.

    Element lookups never wait implicitly; ``implicit`` stays at zero and every
    wait goes through the explicit synchronization engine.
    """

    page_load: float = 30.0
    script: float = 10.0
    action: float = 5.0
    implicit: float = 0.0


class BrowserSession(ABC):
    """Interface for an automation-capable browser handle."""

    @abstractmethod
    def start(self) -> None:
        """Launch the browser and open a page."""

    @abstractmethod
    def stop(self) -> None:
        """Terminate the browser."""

    @property
    @abstractmethod
    def page(self) -> Any:
        """Return the page object conditions and actions operate on."""

    @abstractmethod
    def ping(self) -> str:
        """Perform a cheap round trip (reads the page title)."""

    @abstractmethod
    def screenshot(self, path: Optional[Path] = None) -> bytes:
        """Capture the visible page."""

    @abstractmethod
    def page_source(self) -> str:
        """Return the current page markup."""


@dataclass
class Session:
    """A browser handle bound to exactly one execution thread."""

    handle: BrowserSession
    thread_id: int
    timeouts: SessionTimeouts = field(default_factory=SessionTimeouts)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    live: bool = True

    @property
    def page(self) -> Any:
        return self.handle.page

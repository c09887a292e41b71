"""Ownership of one browser session per execution thread."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..errors import SessionCreationFailure, SessionTeardownFailure
from .base import BrowserSession, Session, SessionTimeouts

LOGGER = logging.getLogger(__name__)

SessionFactory = Callable[[], BrowserSession]


class SessionManager:
    """Create, look up, reset and tear down the calling thread's session.

    Sessions are stored in a map keyed by thread id. The map is the only state
    shared between threads and every access to it holds ``_lock``; launching and
    closing browsers happens outside the lock so threads never wait on each
    other's browsers.
    """

    def __init__(
        self,
        factory: SessionFactory,
        *,
        timeouts: Optional[SessionTimeouts] = None,
        start_url: Optional[str] = None,
    ) -> None:
        self._factory = factory
        self._timeouts = timeouts or SessionTimeouts()
        self._start_url = start_url
        self._lock = threading.Lock()
        self._sessions: dict[int, Session] = {}

    def acquire(self) -> Session:
        """Return the calling thread's session, creating it on first access."""

        thread_id = threading.get_ident()
        with self._lock:
            session = self._sessions.get(thread_id)
        if session is not None:
            return session
        session = self._create(thread_id)
        with self._lock:
            self._sessions[thread_id] = session
        LOGGER.info("Created browser session for thread %s", thread_id)
        return session

    def release(self) -> None:
        """Tear down the calling thread's session, if it has one."""

        thread_id = threading.get_ident()
        with self._lock:
            session = self._sessions.pop(thread_id, None)
        if session is None:
            LOGGER.debug("No browser session to release for thread %s", thread_id)
            return
        session.live = False
        try:
            session.handle.stop()
        except Exception as exc:
            failure = SessionTeardownFailure(f"Browser session for thread {thread_id} failed to close: {exc}")
            LOGGER.warning("%s", failure, exc_info=exc)
        else:
            LOGGER.info("Released browser session for thread %s", thread_id)

    def reset(self) -> Session:
        """Replace the calling thread's session with a fresh one."""

        LOGGER.info("Resetting browser session for thread %s", threading.get_ident())
        self.release()
        return self.acquire()

    def is_live(self) -> bool:
        """Report whether the calling thread's session still answers. Never raises."""

        session = self.current()
        if session is None or not session.live:
            return False
        try:
            session.handle.ping()
        except Exception as exc:
            LOGGER.debug("Browser session is no longer valid: %s", exc)
            return False
        return True

    def current(self) -> Optional[Session]:
        """Return the calling thread's session without creating one."""

        with self._lock:
            return self._sessions.get(threading.get_ident())

    def active_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def release_all(self) -> None:
        """Drop every binding and close every handle left behind.

        Playwright handles are bound to the thread that created them, so only
        sessions owned by the calling thread can reliably be closed here. Worker
        threads are expected to :meth:`release` their own session before they
        exit. A leftover session from another thread is still dropped from the
        map and the close is attempted, but a refusal is only logged.
        """

        caller = threading.get_ident()
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.live = False
            if session.thread_id != caller:
                LOGGER.warning(
                    "Closing browser session of thread %s from thread %s; it should have been released by its owner",
                    session.thread_id,
                    caller,
                )
            try:
                session.handle.stop()
            except Exception as exc:
                LOGGER.warning(
                    "Browser session for thread %s failed to close: %s", session.thread_id, exc
                )

    def _create(self, thread_id: int) -> Session:
        handle = self._factory()
        try:
            handle.start()
        except SessionCreationFailure:
            raise
        except Exception as exc:
            raise SessionCreationFailure(f"Could not start browser session: {exc}") from exc
        if self._start_url:
            try:
                handle.page.goto(self._start_url)
            except Exception as exc:
                self._stop_quietly(handle)
                raise SessionCreationFailure(
                    f"Could not open {self._start_url} in new session: {exc}"
                ) from exc
        return Session(handle=handle, thread_id=thread_id, timeouts=self._timeouts)

    @staticmethod
    def _stop_quietly(handle: BrowserSession) -> None:
        try:
            handle.stop()
        except Exception:
            LOGGER.exception("Failed to stop partially created browser session")

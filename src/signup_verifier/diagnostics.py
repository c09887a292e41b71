"""Failure captures: screenshots and page source of the session that failed."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from .browser.base import Session

LOGGER = logging.getLogger(__name__)

_CAPTURED_FLAG = "_diagnostics_captured"


@dataclass
class Capture:
    """Files written for one failure."""

    reason: str
    screenshot_path: Optional[Path] = None
    source_path: Optional[Path] = None


class DiagnosticsHook(Protocol):
    """Receives the session handle whenever a failure propagates."""

    def capture(self, session: Session, error: BaseException) -> Optional[Capture]:
        """Record the state of ``session`` at the time ``error`` was raised."""


@dataclass
class NullDiagnostics:
    """No-op hook used when captures are disabled."""

    def capture(self, session: Session, error: BaseException) -> Optional[Capture]:  # noqa: D401
        return None


class ScreenshotDiagnostics:
    """Write a full-page screenshot and, optionally, the page markup."""

    def __init__(self, output_dir: Path, *, capture_page_source: bool = True) -> None:
        self._output_dir = output_dir
        self._capture_page_source = capture_page_source

    def capture(self, session: Session, error: BaseException) -> Optional[Capture]:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        stem = capture_filename(type(error).__name__)
        capture = Capture(reason=str(error))
        screenshot_path = self._output_dir / f"{stem}.png"
        session.handle.screenshot(screenshot_path)
        capture.screenshot_path = screenshot_path
        if self._capture_page_source:
            source_path = self._output_dir / f"{stem}.html"
            source_path.write_text(session.handle.page_source(), encoding="utf-8")
            capture.source_path = source_path
        LOGGER.info("Captured diagnostics for %s: %s", type(error).__name__, screenshot_path)
        return capture


def capture_filename(base_name: str, now: Optional[datetime] = None) -> str:
    """Return ``base_name`` made filesystem safe with a timestamp suffix."""

    clean = re.sub(r"[^a-zA-Z0-9.-]", "_", base_name)
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S_%f")
    return f"{clean}_{stamp}"


def report_failure(
    hook: Optional[DiagnosticsHook],
    session: Optional[Session],
    error: BaseException,
) -> Optional[Capture]:
    """Invoke ``hook`` once per error; the capture itself never raises."""

    if hook is None or session is None or getattr(error, _CAPTURED_FLAG, False):
        return None
    setattr(error, _CAPTURED_FLAG, True)
    try:
        return hook.capture(session, error)
    except Exception:
        LOGGER.exception("Failed to capture diagnostics for %s", type(error).__name__)
        return None

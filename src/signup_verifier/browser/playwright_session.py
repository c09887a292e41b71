"""Playwright-powered browser session implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from playwright.sync_api import Error, sync_playwright

from ..config import BrowserConfig, BrowserKind
from ..errors import SessionCreationFailure
from .base import BrowserSession, SessionTimeouts

LOGGER = logging.getLogger(__name__)

_CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-popup-blocking",
    "--disable-infobars",
]


def engine_for(kind: BrowserKind) -> tuple[str, Optional[str]]:
    """Return the Playwright engine name and release channel for ``kind``."""

    if kind == BrowserKind.FIREFOX:
        return "firefox", None
    if kind == BrowserKind.WEBKIT:
        return "webkit", None
    if kind == BrowserKind.EDGE:
        return "chromium", "msedge"
    return "chromium", None


def build_launch_options(config: BrowserConfig) -> dict[str, Any]:
    engine, channel = engine_for(config.kind)
    args: list[str] = []
    if engine == "chromium":
        args.extend(_CHROMIUM_ARGS)
        if config.maximize and not config.headless:
            args.append("--start-maximized")
    args.extend(config.args)
    options: dict[str, Any] = {"headless": config.headless, "args": args}
    if channel:
        options["channel"] = channel
    return options


def build_context_options(config: BrowserConfig) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if config.maximize and not config.headless:
        # The window size decides the viewport once the browser is maximised.
        options["no_viewport"] = True
    else:
        options["viewport"] = {"width": config.viewport_width, "height": config.viewport_height}
    if config.user_agent:
        options["user_agent"] = config.user_agent
    return options


class PlaywrightBrowserSession(BrowserSession):
    """Browser session backed by Playwright's synchronous API.

    The synchronous API is bound to the thread that started it, so an instance
    must be started, used and stopped on one thread.
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        timeouts: Optional[SessionTimeouts] = None,
    ) -> None:
        self._config = config or BrowserConfig()
        self._timeouts = timeouts or SessionTimeouts()
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    @property
    def page(self) -> Any:
        if self._page is None:
            raise RuntimeError("Browser session is not started")
        return self._page

    def start(self) -> None:
        engine, _ = engine_for(self._config.kind)
        LOGGER.debug("Starting Playwright %s session (headless=%s)", engine, self._config.headless)
        try:
            self._playwright = sync_playwright().start()
            browser_type = getattr(self._playwright, engine)
            self._browser = browser_type.launch(**build_launch_options(self._config))
            self._context = self._browser.new_context(**build_context_options(self._config))
            self._page = self._context.new_page()
            self._page.set_default_navigation_timeout(self._timeouts.page_load * 1000)
            self._page.set_default_timeout(self._timeouts.script * 1000)
        except Error as exc:
            self.stop()
            raise SessionCreationFailure(
                f"Could not launch {self._config.kind.value} browser: {exc}"
            ) from exc

    def stop(self) -> None:
        LOGGER.debug("Stopping Playwright browser session")
        try:
            if self._context:
                self._context.close()
        finally:
            try:
                if self._browser:
                    self._browser.close()
            finally:
                if self._playwright:
                    self._playwright.stop()
                self._context = None
                self._browser = None
                self._playwright = None
                self._page = None

    def ping(self) -> str:
        return self.page.title()

    def screenshot(self, path: Optional[Path] = None) -> bytes:
        return self.page.screenshot(path=path, full_page=True)

    def page_source(self) -> str:
        return self.page.content()

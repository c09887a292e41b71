"""Factories for constructing components from configuration."""

from __future__ import annotations

from rich.console import Console

from .browser.base import Session, SessionTimeouts
from .browser.manager import SessionManager
from .browser.playwright_session import PlaywrightBrowserSession
from .config import DiagnosticsConfig, RetryConfig, RunnerConfig, TimeoutConfig
from .diagnostics import DiagnosticsHook, NullDiagnostics, ScreenshotDiagnostics
from .locators import LocatorTable
from .notifications.base import CompositeNotifier, ConsoleNotifier, Notifier, SummaryNotifier
from .pages.context import PageContext
from .retry import RetryController, RetryPolicy
from .waiting.engine import Waiter


def build_timeouts(config: TimeoutConfig) -> SessionTimeouts:
    return SessionTimeouts(
        page_load=config.page_load,
        script=config.script,
        action=config.action,
    )


def build_browser(config: RunnerConfig) -> PlaywrightBrowserSession:
    return PlaywrightBrowserSession(config.browser, build_timeouts(config.timeouts))


def build_session_manager(config: RunnerConfig) -> SessionManager:
    return SessionManager(
        lambda: build_browser(config),
        timeouts=build_timeouts(config.timeouts),
        start_url=config.signup_url,
    )


def build_diagnostics(config: DiagnosticsConfig) -> DiagnosticsHook:
    if not config.enabled:
        return NullDiagnostics()
    return ScreenshotDiagnostics(config.output_dir, capture_page_source=config.capture_page_source)


def build_retry_policy(config: RetryConfig) -> RetryPolicy:
    return RetryPolicy(max_attempts=config.max_attempts, delay=config.delay)


def build_notifier() -> Notifier:
    """Stream events to the console and print a per-flow table when the run ends."""

    console = Console()
    return CompositeNotifier([ConsoleNotifier(console), SummaryNotifier(console)])


def build_page_context(
    config: RunnerConfig,
    session: Session,
    locators: LocatorTable,
    diagnostics: DiagnosticsHook,
) -> PageContext:
    """Bind waiting, retry and diagnostics to ``session`` for its page states."""

    waiter = Waiter(
        config.timeouts.default,
        config.timeouts.polling_interval,
        diagnostics=diagnostics,
    )
    return PageContext(
        session=session,
        locators=locators,
        waiter=waiter,
        retry=RetryController(diagnostics=diagnostics, session=session),
        policy=build_retry_policy(config.retry),
        base_url=config.base_url,
        signup_path=config.signup_path,
        diagnostics=diagnostics,
    )

"""Drive the signup flow across worker threads."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from .browser.base import Session
from .browser.manager import SessionManager
from .config import RunnerConfig
from .diagnostics import DiagnosticsHook, report_failure
from .errors import FrameworkError, NonTransientInteractionFailure
from .models import EventLevel, RunEvent, UserAccount
from .notifications.base import Notifier
from .pages.context import PageContext
from .pages.signup import SignupPage
from .testdata import generate_account

LOGGER = logging.getLogger(__name__)

ContextFactory = Callable[[Session], PageContext]
AccountFactory = Callable[[], UserAccount]


@dataclass
class FlowResult:
    """Outcome of one signup flow."""

    worker: int
    iteration: int
    email: Optional[str]
    success: bool
    message: str
    duration: float


class SignupFlowRunner:
    """Run the signup scenario on ``config.threads`` threads, each with its own session."""

    def __init__(
        self,
        config: RunnerConfig,
        sessions: SessionManager,
        context_factory: ContextFactory,
        notifier: Notifier,
        *,
        diagnostics: Optional[DiagnosticsHook] = None,
        account_factory: AccountFactory = generate_account,
    ) -> None:
        self._config = config
        self._sessions = sessions
        self._context_factory = context_factory
        self._notifier = notifier
        self._diagnostics = diagnostics
        self._account_factory = account_factory
        self.results: list[FlowResult] = []

    def run(self) -> bool:
        """Run every flow and return whether all of them succeeded."""

        LOGGER.info(
            "Starting signup verification against %s on %d thread(s)",
            self._config.signup_url,
            self._config.threads,
        )
        self._notifier.notify(
            RunEvent(
                type="run_started",
                message=f"Verifying signup at {self._config.signup_url}",
                data={"threads": self._config.threads, "iterations": self._config.iterations},
            )
        )
        try:
            with ThreadPoolExecutor(
                max_workers=self._config.threads,
                thread_name_prefix="signup-worker",
            ) as pool:
                futures = [pool.submit(self._work, worker) for worker in range(self._config.threads)]
                results = [result for future in futures for result in future.result()]
        finally:
            self._sessions.release_all()
        self.results = results
        passed = sum(result.success for result in results)
        succeeded = passed == len(results)
        self._notifier.notify(
            RunEvent(
                type="run_finished",
                message=f"{passed}/{len(results)} signup flow(s) passed",
                level=EventLevel.SUCCESS if succeeded else EventLevel.ERROR,
            )
        )
        return succeeded

    def _work(self, worker: int) -> list[FlowResult]:
        results: list[FlowResult] = []
        try:
            for iteration in range(self._config.iterations):
                result = self._run_once(worker, iteration)
                results.append(result)
                more_to_run = iteration + 1 < self._config.iterations
                if not result.success and more_to_run:
                    self._recover()
        finally:
            self._sessions.release()
        return results

    def _run_once(self, worker: int, iteration: int) -> FlowResult:
        started = time.monotonic()
        account: Optional[UserAccount] = None
        session: Optional[Session] = None
        try:
            session = self._sessions.acquire()
            context = self._context_factory(session)
            account = self._account_factory()
            signup = SignupPage(context).open().wait_until_loaded()
            success = signup.submit_account(account).wait_until_loaded()
            message = success.confirmation_message()
            expected = context.locators.text("success_message")
            if expected not in message:
                raise NonTransientInteractionFailure(
                    f"Confirmation message {message!r} does not contain {expected!r}"
                )
        except FrameworkError as exc:
            LOGGER.error("Signup flow %d.%d failed: %s", worker, iteration, exc)
            return self._failed(worker, iteration, account, session, exc, started)
        except Exception as exc:  # pragma: no cover - unexpected failure path
            LOGGER.exception("Unexpected error in signup flow %d.%d", worker, iteration)
            return self._failed(worker, iteration, account, session, exc, started)
        result = FlowResult(
            worker=worker,
            iteration=iteration,
            email=account.email,
            success=True,
            message=message,
            duration=time.monotonic() - started,
        )
        self._notifier.notify(
            RunEvent(
                type="flow_passed",
                message=f"Signed up {account.email}",
                level=EventLevel.SUCCESS,
                data={"worker": worker, "iteration": iteration, "duration": round(result.duration, 2)},
            )
        )
        return result

    def _failed(
        self,
        worker: int,
        iteration: int,
        account: Optional[UserAccount],
        session: Optional[Session],
        error: BaseException,
        started: float,
    ) -> FlowResult:
        capture = report_failure(self._diagnostics, session, error)
        data: dict[str, object] = {"worker": worker, "iteration": iteration, "error": type(error).__name__}
        if capture and capture.screenshot_path:
            data["screenshot"] = str(capture.screenshot_path)
        self._notifier.notify(
            RunEvent(type="flow_failed", message=str(error), level=EventLevel.ERROR, data=data)
        )
        return FlowResult(
            worker=worker,
            iteration=iteration,
            email=account.email if account else None,
            success=False,
            message=str(error),
            duration=time.monotonic() - started,
        )

    def _recover(self) -> None:
        try:
            self._sessions.reset()
        except FrameworkError as exc:
            LOGGER.error("Could not reset browser session: %s", exc)

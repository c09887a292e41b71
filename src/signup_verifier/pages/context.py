"""Collaborators shared by every page state bound to one session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from ..browser.base import Session
from ..diagnostics import DiagnosticsHook
from ..locators import LocatorTable
from ..models import Locator
from ..retry import RetryController, RetryPolicy
from ..waiting.engine import Waiter

T = TypeVar("T")


@dataclass
class PageContext:
    """Session plus the waiting, retry and locator services page actions use."""

    session: Session
    locators: LocatorTable
    waiter: Waiter
    retry: RetryController
    policy: RetryPolicy
    base_url: str
    signup_path: str = "/sign-up"
    diagnostics: Optional[DiagnosticsHook] = None

    @property
    def page(self) -> Any:
        return self.session.page

    @property
    def signup_url(self) -> str:
        return self.url(self.signup_path)

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def locator(self, page: str, name: str) -> Locator:
        return self.locators.get(page, name)

    def attempt(
        self,
        operation: Callable[[], T],
        fallback: Optional[Callable[[Exception], T]] = None,
    ) -> T:
        """Run ``operation`` under the context's retry policy."""

        return self.retry.execute(operation, self.policy, fallback)

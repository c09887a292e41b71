"""Screen reached after leaving the confirmation page."""

from __future__ import annotations

from typing import Optional

from ..waiting import conditions
from . import actions
from .context import PageContext


class WorkspacePage:
    def __init__(self, context: PageContext) -> None:
        self._ctx = context

    @property
    def context(self) -> PageContext:
        return self._ctx

    def is_loaded(self, timeout: Optional[float] = None) -> bool:
        header = self._ctx.locator("common", "header")
        return actions.holds_within(self._ctx, conditions.visible(header), timeout)

    def wait_until_loaded(self, timeout: Optional[float] = None) -> WorkspacePage:
        header = self._ctx.locator("common", "header")
        actions.wait_for(self._ctx, conditions.visible(header), timeout)
        return self

    def current_url(self) -> str:
        return actions.current_url(self._ctx)

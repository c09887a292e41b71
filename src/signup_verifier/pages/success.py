"""Confirmation screen shown after a successful signup."""

from __future__ import annotations

import logging
from typing import Optional

from ..models import Locator
from ..waiting import conditions
from . import actions
from .context import PageContext
from .workspace import WorkspacePage

LOGGER = logging.getLogger(__name__)


class SuccessPage:
    NAME = "success"

    def __init__(self, context: PageContext) -> None:
        self._ctx = context

    @property
    def context(self) -> PageContext:
        return self._ctx

    def _locator(self, name: str) -> Locator:
        return self._ctx.locator(self.NAME, name)

    def is_loaded(self, timeout: Optional[float] = None) -> bool:
        return actions.holds_within(
            self._ctx, conditions.visible(self._locator("success_message")), timeout
        )

    def wait_until_loaded(self, timeout: Optional[float] = None) -> SuccessPage:
        actions.wait_for(self._ctx, conditions.visible(self._locator("success_message")), timeout)
        return self

    def is_signup_successful(self) -> bool:
        successful = self.is_loaded()
        LOGGER.info("Signup successful: %s", successful)
        return successful

    def confirmation_message(self) -> str:
        return actions.read_text(self._ctx, self._locator("success_message"))

    def wait_for_success_message(self, timeout: Optional[float] = None) -> SuccessPage:
        expected = self._ctx.locators.text("success_message")
        actions.wait_for(
            self._ctx, conditions.text_present(self._locator("success_message"), expected), timeout
        )
        return self

    def has_welcome_header(self) -> bool:
        header = self._locator("welcome_header")
        if not actions.is_present(self._ctx, header):
            LOGGER.info("Welcome header not found")
            return False
        return self._ctx.locators.text("welcome_header") in actions.read_text(self._ctx, header)

    def is_verification_message_present(self) -> bool:
        return actions.is_present(self._ctx, self._locator("verification_message"))

    def click_continue(self) -> WorkspacePage:
        LOGGER.info("Clicking continue button")
        actions.click(self._ctx, self._locator("continue_button"))
        actions.wait_for_page_load(self._ctx)
        return WorkspacePage(self._ctx)

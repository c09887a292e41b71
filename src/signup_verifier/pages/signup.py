"""Signup screen."""

from __future__ import annotations

import logging
from typing import Optional

from ..models import Locator, UserAccount
from ..waiting import conditions
from . import actions
from .context import PageContext
from .success import SuccessPage

LOGGER = logging.getLogger(__name__)


class SignupPage:
    """The signup form: email, password, terms checkbox and submit button."""

    NAME = "signup"

    def __init__(self, context: PageContext) -> None:
        self._ctx = context

    @property
    def context(self) -> PageContext:
        return self._ctx

    def _locator(self, name: str) -> Locator:
        return self._ctx.locator(self.NAME, name)

    def open(self) -> SignupPage:
        """Navigate to the signup URL."""

        actions.navigate(self._ctx, self._ctx.signup_url)
        return self

    def is_loaded(self, timeout: Optional[float] = None) -> bool:
        return actions.holds_within(self._ctx, conditions.visible(self._locator("form")), timeout)

    def wait_until_loaded(self, timeout: Optional[float] = None) -> SignupPage:
        actions.wait_for(self._ctx, conditions.visible(self._locator("form")), timeout)
        return self

    def enter_email(self, email: str) -> SignupPage:
        LOGGER.info("Entering email: %s", email)
        actions.type_text(self._ctx, self._locator("email_field"), email)
        return self

    def enter_password(self, password: str) -> SignupPage:
        LOGGER.info("Entering password")
        actions.type_text(self._ctx, self._locator("password_field"), password)
        return self

    def accept_terms(self) -> SignupPage:
        LOGGER.info("Accepting terms and conditions")
        actions.check(self._ctx, self._locator("terms_checkbox"))
        return self

    def click_sign_up(self) -> SuccessPage:
        """Submit the form and wait out the loading spinner before the confirmation screen."""

        LOGGER.info("Clicking signup button")
        actions.click(self._ctx, self._locator("signup_button"))
        actions.wait_for_page_load(self._ctx)
        spinner = self._ctx.locator("common", "loading_spinner")
        actions.wait_gone(self._ctx, conditions.visible(spinner), self._ctx.session.timeouts.page_load)
        return SuccessPage(self._ctx)

    def submit_form(self, email: str, password: str) -> SuccessPage:
        return self.enter_email(email).enter_password(password).accept_terms().click_sign_up()

    def submit_account(self, account: UserAccount) -> SuccessPage:
        LOGGER.info("Submitting signup form for %s", account.email)
        self.enter_email(account.email)
        self.enter_password(account.password)
        if account.terms_accepted:
            self.accept_terms()
        return self.click_sign_up()

    def email(self) -> str:
        return actions.read_value(self._ctx, self._locator("email_field"))

    def email_field_attribute(self, name: str) -> Optional[str]:
        return actions.read_attribute(self._ctx, self._locator("email_field"), name)

    def password_field_attribute(self, name: str) -> Optional[str]:
        return actions.read_attribute(self._ctx, self._locator("password_field"), name)

    def has_email_error(self) -> bool:
        return actions.is_visible(self._ctx, self._locator("email_error"))

    def has_password_error(self) -> bool:
        return actions.is_visible(self._ctx, self._locator("password_error"))

    def email_error_message(self) -> Optional[str]:
        if not self.has_email_error():
            return None
        return actions.read_text(self._ctx, self._locator("email_error"))

    def password_error_message(self) -> Optional[str]:
        if not self.has_password_error():
            return None
        return actions.read_text(self._ctx, self._locator("password_error"))

    def is_terms_accepted(self) -> bool:
        return actions.is_selected(self._ctx, self._locator("terms_checkbox"))

    def is_sign_up_enabled(self) -> bool:
        return actions.is_enabled(self._ctx, self._locator("signup_button"))

    def heading(self) -> str:
        return actions.read_text(self._ctx, self._locator("heading"))

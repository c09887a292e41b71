"""Element helpers page states are composed from.

Every helper resolves its locator again on each call and each attempt; no
element reference outlives the operation that located it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..diagnostics import report_failure
from ..errors import (
    SynchronizationTimeout,
    TransientInteractionFailure,
    is_not_interactable,
    translate_errors,
)
from ..models import Locator
from ..waiting import conditions
from ..waiting.conditions import Condition
from .context import PageContext

LOGGER = logging.getLogger(__name__)


def _action_timeout_ms(ctx: PageContext) -> float:
    return ctx.session.timeouts.action * 1000


def wait_for(ctx: PageContext, condition: Condition, timeout: Optional[float] = None) -> Any:
    return ctx.waiter.wait_until(condition, ctx.session, timeout)


def wait_gone(ctx: PageContext, condition: Condition, timeout: Optional[float] = None) -> bool:
    return ctx.waiter.wait_while(condition, ctx.session, timeout)


def holds_within(ctx: PageContext, condition: Condition, timeout: Optional[float] = None) -> bool:
    """Answer whether ``condition`` holds before ``timeout``, as a bool.

    A negative answer is not a failure, so no diagnostics are captured for it.
    """

    try:
        ctx.waiter.wait_until(condition, ctx.session, timeout, capture=False)
    except SynchronizationTimeout:
        return False
    return True


def type_text(ctx: PageContext, locator: Locator, text: str) -> None:
    """Replace the content of a field with ``text``."""

    def operation() -> None:
        element = wait_for(ctx, conditions.visible(locator))
        with translate_errors(f"typing into {locator}"):
            element.fill(text, timeout=_action_timeout_ms(ctx))

    LOGGER.debug("Typing into %s", locator)
    ctx.attempt(operation)


def click(ctx: PageContext, locator: Locator) -> None:
    """Click ``locator``, dispatching a DOM click if the element stays covered or hidden."""

    def operation() -> None:
        element = wait_for(ctx, conditions.clickable(locator))
        with translate_errors(f"clicking {locator}"):
            element.click(timeout=_action_timeout_ms(ctx))

    def dispatch(error: Exception) -> None:
        if not is_not_interactable(error):
            raise error
        LOGGER.warning(
            "Element not interactable with a regular click, dispatching a DOM click: %s", locator
        )
        element = wait_for(ctx, conditions.present(locator))
        with translate_errors(f"dispatching a click on {locator}"):
            element.dispatch_event("click", timeout=_action_timeout_ms(ctx))

    LOGGER.debug("Clicking %s", locator)
    ctx.attempt(operation, fallback=dispatch)


def check(ctx: PageContext, locator: Locator) -> None:
    """Tick a checkbox unless it is already ticked."""

    def operation() -> None:
        element = wait_for(ctx, conditions.clickable(locator))
        with translate_errors(f"checking {locator}"):
            if not element.is_checked(timeout=_action_timeout_ms(ctx)):
                element.check(timeout=_action_timeout_ms(ctx))

    LOGGER.debug("Checking %s", locator)
    ctx.attempt(operation)


def select_option(
    ctx: PageContext,
    locator: Locator,
    *,
    label: Optional[str] = None,
    value: Optional[str] = None,
    index: Optional[int] = None,
) -> None:
    if sum(option is not None for option in (label, value, index)) != 1:
        raise ValueError("Pass exactly one of label, value or index")

    def operation() -> None:
        element = wait_for(ctx, conditions.visible(locator))
        with translate_errors(f"selecting an option of {locator}"):
            if label is not None:
                element.select_option(label=label, timeout=_action_timeout_ms(ctx))
            elif value is not None:
                element.select_option(value=value, timeout=_action_timeout_ms(ctx))
            else:
                element.select_option(index=index, timeout=_action_timeout_ms(ctx))

    ctx.attempt(operation)


def read_text(ctx: PageContext, locator: Locator) -> str:
    def operation() -> str:
        element = wait_for(ctx, conditions.visible(locator))
        with translate_errors(f"reading text of {locator}"):
            return element.inner_text(timeout=_action_timeout_ms(ctx))

    return ctx.attempt(operation)


def read_value(ctx: PageContext, locator: Locator) -> str:
    def operation() -> str:
        element = wait_for(ctx, conditions.visible(locator))
        with translate_errors(f"reading value of {locator}"):
            return element.input_value(timeout=_action_timeout_ms(ctx))

    return ctx.attempt(operation)


def read_attribute(ctx: PageContext, locator: Locator, name: str) -> Optional[str]:
    def operation() -> Optional[str]:
        element = wait_for(ctx, conditions.present(locator))
        with translate_errors(f"reading attribute {name} of {locator}"):
            return element.get_attribute(name, timeout=_action_timeout_ms(ctx))

    return ctx.attempt(operation)


def _probe(ctx: PageContext, condition: Condition) -> bool:
    # One evaluation, no waiting. A page mid re-render counts as "not yet".
    try:
        return bool(condition.evaluate(ctx.page))
    except TransientInteractionFailure as exc:
        LOGGER.debug("Treating transient failure as absent for %s: %s", condition.description, exc)
        return False


def is_present(ctx: PageContext, locator: Locator) -> bool:
    return _probe(ctx, conditions.present(locator))


def is_visible(ctx: PageContext, locator: Locator) -> bool:
    return _probe(ctx, conditions.visible(locator))


def is_enabled(ctx: PageContext, locator: Locator) -> bool:
    def probe(page: Any) -> bool:
        matches = page.locator(locator.selector())
        return matches.count() > 0 and matches.first.is_enabled(timeout=conditions.PROBE_TIMEOUT_MS)

    return _probe(ctx, conditions.custom(f"enabled state of {locator}", probe))


def is_selected(ctx: PageContext, locator: Locator) -> bool:
    def probe(page: Any) -> bool:
        matches = page.locator(locator.selector())
        return matches.count() > 0 and matches.first.is_checked(timeout=conditions.PROBE_TIMEOUT_MS)

    return _probe(ctx, conditions.custom(f"selected state of {locator}", probe))


def navigate(ctx: PageContext, url: str) -> None:
    """Load ``url`` and wait for the document to finish loading."""

    LOGGER.info("Navigating to %s", url)
    page_load = ctx.session.timeouts.page_load
    try:
        with translate_errors(f"navigating to {url}"):
            ctx.page.goto(url, wait_until="load", timeout=page_load * 1000)
    except Exception as exc:
        report_failure(ctx.diagnostics, ctx.session, exc)
        raise
    wait_for_page_load(ctx)


def refresh(ctx: PageContext) -> None:
    LOGGER.debug("Refreshing current page")
    page_load = ctx.session.timeouts.page_load
    try:
        with translate_errors("refreshing the page"):
            ctx.page.reload(wait_until="load", timeout=page_load * 1000)
    except Exception as exc:
        report_failure(ctx.diagnostics, ctx.session, exc)
        raise
    wait_for_page_load(ctx)


def wait_for_page_load(ctx: PageContext) -> None:
    wait_for(ctx, conditions.document_ready(), ctx.session.timeouts.page_load)


def current_url(ctx: PageContext) -> str:
    with translate_errors("reading the current URL"):
        return ctx.page.url


def title(ctx: PageContext) -> str:
    with translate_errors("reading the page title"):
        return ctx.page.title()

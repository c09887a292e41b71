"""Wait conditions: named, side-effect free probes of the current page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..errors import translate_errors
from ..models import Locator

# Probes must answer quickly; the engine does the waiting.
PROBE_TIMEOUT_MS = 500


@dataclass(frozen=True)
class Condition:
    """A description plus a probe returning a truthy value once satisfied."""

    description: str
    probe: Callable[[Any], Any]

    def evaluate(self, page: Any) -> Any:
        with translate_errors(f"evaluating {self.description}"):
            return self.probe(page)


def _first(page: Any, locator: Locator) -> Any:
    matches = page.locator(locator.selector())
    if matches.count() == 0:
        return None
    return matches.first


def present(locator: Locator) -> Condition:
    """Element attached to the DOM, visible or not."""

    return Condition(f"presence of {locator}", lambda page: _first(page, locator))


def visible(locator: Locator) -> Condition:
    def probe(page: Any) -> Any:
        element = _first(page, locator)
        if element is not None and element.is_visible():
            return element
        return None

    return Condition(f"visibility of {locator}", probe)


def clickable(locator: Locator) -> Condition:
    """Element visible and enabled."""

    def probe(page: Any) -> Any:
        element = _first(page, locator)
        if element is None or not element.is_visible():
            return None
        if not element.is_enabled(timeout=PROBE_TIMEOUT_MS):
            return None
        return element

    return Condition(f"clickability of {locator}", probe)


def invisible(locator: Locator) -> Condition:
    """Element absent or hidden."""

    def probe(page: Any) -> bool:
        element = _first(page, locator)
        return element is None or not element.is_visible()

    return Condition(f"invisibility of {locator}", probe)


def text_present(locator: Locator, text: str) -> Condition:
    def probe(page: Any) -> Any:
        element = _first(page, locator)
        if element is None:
            return None
        if text in element.inner_text(timeout=PROBE_TIMEOUT_MS):
            return element
        return None

    return Condition(f"text '{text}' in {locator}", probe)


def value_equals(locator: Locator, value: str) -> Condition:
    def probe(page: Any) -> Any:
        element = _first(page, locator)
        if element is None:
            return None
        if element.input_value(timeout=PROBE_TIMEOUT_MS) == value:
            return element
        return None

    return Condition(f"value of {locator} equal to '{value}'", probe)


def url_contains(fragment: str) -> Condition:
    def probe(page: Any) -> Any:
        url = page.url
        return url if fragment in url else None

    return Condition(f"URL containing '{fragment}'", probe)


def title_contains(fragment: str) -> Condition:
    def probe(page: Any) -> Any:
        title = page.title()
        return title if fragment in title else None

    return Condition(f"title containing '{fragment}'", probe)


def document_ready() -> Condition:
    return Condition(
        "document.readyState == 'complete'",
        lambda page: page.evaluate("document.readyState") == "complete",
    )


def custom(description: str, predicate: Callable[[Any], Any]) -> Condition:
    """Wrap an arbitrary side-effect free predicate."""

    return Condition(description, predicate)

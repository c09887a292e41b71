"""Locator tables loaded from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError
from .models import Locator

DEFAULT_LOCATORS_PATH = Path(__file__).with_name("locators.yaml")


class LocatorTable(BaseModel):
    """Locators grouped per screen, plus the texts the screens are expected to show."""

    pages: dict[str, dict[str, Locator]] = Field(default_factory=dict)
    texts: dict[str, str] = Field(default_factory=dict)

    def get(self, page: str, name: str) -> Locator:
        try:
            return self.pages[page][name]
        except KeyError:
            raise ConfigurationError(f"No locator '{name}' defined for page '{page}'") from None

    def text(self, name: str) -> str:
        try:
            return self.texts[name]
        except KeyError:
            raise ConfigurationError(f"No expected text '{name}' defined") from None


def load_locators(path: Optional[Path] = None) -> LocatorTable:
    """Load the locator table from ``path`` or the bundled defaults."""

    source = path or DEFAULT_LOCATORS_PATH
    try:
        raw = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigurationError(f"Cannot read locator file {source}: {exc}") from exc
    try:
        return LocatorTable.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid locator file {source}: {exc}") from exc

"""Shared models used across signup-verifier."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LocatorStrategy(str, enum.Enum):
    """How a locator value should be interpreted by the browser."""

    CSS = "css"
    XPATH = "xpath"
    TEXT = "text"
    ID = "id"
    NAME = "name"
    TEST_ID = "test_id"


class Locator(BaseModel):
    """An opaque (strategy, value) pair supplied by the locator tables."""

    model_config = ConfigDict(frozen=True)

    strategy: LocatorStrategy = LocatorStrategy.CSS
    value: str

    def selector(self) -> str:
        """Return the Playwright selector string for this locator."""

        if self.strategy == LocatorStrategy.CSS:
            return f"css={self.value}"
        if self.strategy == LocatorStrategy.XPATH:
            return f"xpath={self.value}"
        if self.strategy == LocatorStrategy.TEXT:
            return f"text={self.value}"
        if self.strategy == LocatorStrategy.ID:
            return f"id={self.value}"
        if self.strategy == LocatorStrategy.TEST_ID:
            return f"data-testid={self.value}"
        return f'css=[name="{self.value}"]'

    def __str__(self) -> str:
        return f"{self.strategy.value}:{self.value}"


class UserAccount(BaseModel):
    """Credentials submitted through the signup form."""

    email: str
    password: str
    terms_accepted: bool = True


class EventLevel(str, enum.Enum):
    """Severity of run events."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class RunEvent(BaseModel):
    """Event emitted by the flow runner to notify users."""

    type: str
    message: str
    level: EventLevel = EventLevel.INFO
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

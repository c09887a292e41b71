"""Configuration models for signup-verifier."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


class BrowserKind(str, enum.Enum):
    """Browsers a session can be launched with."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"
    WEBKIT = "webkit"


class EnvironmentType(str, enum.Enum):
    """Deployments a run can target; each may have its own YAML file."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"


class BrowserConfig(BaseModel):
    """Settings for launching the browser."""

    kind: BrowserKind = BrowserKind.CHROME
    headless: bool = False
    maximize: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080
    args: list[str] = Field(default_factory=list)
    user_agent: Optional[str] = None

    @field_validator("kind", mode="before")
    @classmethod
    def _normalise_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class TimeoutConfig(BaseModel):
    """Timeouts in seconds."""

    default: float = Field(default=10.0, gt=0, description="Explicit wait timeout for conditions.")
    page_load: float = Field(default=30.0, gt=0)
    script: float = Field(
        default=10.0,
        gt=0,
        description="Default timeout for browser-side operations without an explicit limit.",
    )
    action: float = Field(default=5.0, gt=0, description="Timeout for a single click or fill.")
    polling_interval: float = Field(default=0.5, gt=0)


class RetryConfig(BaseModel):
    """Settings for retrying transient interaction failures."""

    max_attempts: int = Field(default=3, ge=1)
    delay: float = Field(default=0.2, ge=0)


class DiagnosticsConfig(BaseModel):
    """Settings for failure captures."""

    enabled: bool = True
    output_dir: Path = Path("test-output/screenshots")
    capture_page_source: bool = True


class RunnerConfig(BaseSettings):
    """Top-level configuration for a verification run."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNUP_VERIFIER_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: EnvironmentType = EnvironmentType.STAGING
    config_dir: Path = Field(
        default=Path("config"),
        description="Directory holding the per-environment files, named <environment>.yaml.",
    )
    base_url: str = Field(default="https://editor-staging.storydoc.com")
    signup_path: str = Field(default="/sign-up")
    locators_path: Optional[Path] = Field(
        default=None,
        description="Optional YAML file replacing the bundled locator tables.",
    )
    threads: int = Field(default=1, ge=1)
    iterations: int = Field(default=1, ge=1, description="Signup flows run by each thread.")
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def signup_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.signup_path.lstrip('/')}"


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> RunnerConfig:
    """Load configuration from an optional file and overrides.

    Sources, lowest precedence first: field defaults, the file of the selected
    environment (``<config_dir>/<environment>.yaml``), the ``.env`` file,
    environment variables, ``path`` and finally ``overrides``.
    """

    data: dict[str, Any] = _read_yaml(path) if path else {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = RunnerConfig(**data, **settings_kwargs)
    environment_data = _environment_data(config)
    if not data and not environment_data:
        return config

    merged = environment_data
    from_env = RunnerConfig(**settings_kwargs).model_dump(mode="python", exclude_unset=True)
    _deep_update(merged, from_env)
    _deep_update(merged, data)
    return RunnerConfig.model_validate(merged)


def _environment_data(config: RunnerConfig) -> dict[str, Any]:
    source = config.config_dir / f"{config.environment.value}.yaml"
    if not source.is_file():
        LOGGER.debug("No configuration file for environment %s at %s", config.environment.value, source)
        return {}
    LOGGER.info("Loading %s environment configuration from %s", config.environment.value, source)
    return _read_yaml(source)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return raw


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value

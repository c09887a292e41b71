from pathlib import Path

import pytest
from pydantic import ValidationError

from signup_verifier.config import BrowserKind, EnvironmentType, RunnerConfig, load_config
from signup_verifier.errors import ConfigurationError


def test_defaults_target_the_staging_signup_page() -> None:
    config = RunnerConfig(_env_file=None)

    assert config.signup_url == "https://editor-staging.storydoc.com/sign-up"
    assert config.browser.kind is BrowserKind.CHROME
    assert config.timeouts.default == 10.0
    assert config.timeouts.polling_interval == 0.5
    assert config.retry.max_attempts == 3
    assert config.threads == 1


def test_load_config_reads_env_file(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "SIGNUP_VERIFIER_BASE_URL=https://qa.example.test/",
                "SIGNUP_VERIFIER_BROWSER__KIND=Firefox",
                "SIGNUP_VERIFIER_BROWSER__HEADLESS=true",
                "SIGNUP_VERIFIER_TIMEOUTS__DEFAULT=4",
                "SIGNUP_VERIFIER_THREADS=3",
            ]
        )
    )

    config = load_config(env_file=env_path)

    assert config.signup_url == "https://qa.example.test/sign-up"
    assert config.browser.kind is BrowserKind.FIREFOX
    assert config.browser.headless is True
    assert config.timeouts.default == 4.0
    assert config.threads == 3


def test_load_config_prioritises_overrides(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "SIGNUP_VERIFIER_BASE_URL=https://env.example.test",
                "SIGNUP_VERIFIER_RETRY__MAX_ATTEMPTS=5",
                "SIGNUP_VERIFIER_ITERATIONS=2",
            ]
        )
    )

    config_path = tmp_path / "run.yaml"
    config_path.write_text(
        "\n".join(
            [
                "base_url: https://file.example.test",
                "timeouts:",
                "  action: 2",
                "iterations: 4",
            ]
        )
    )

    config = load_config(config_path, env_file=env_path, iterations=6, browser={"kind": "edge"})

    assert config.base_url == "https://file.example.test"
    assert config.timeouts.action == 2.0
    assert config.timeouts.page_load == 30.0
    assert config.iterations == 6
    assert config.browser.kind is BrowserKind.EDGE
    assert config.retry.max_attempts == 5


def test_environment_variables_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIGNUP_VERIFIER_SIGNUP_PATH", "/register")
    monkeypatch.setenv("SIGNUP_VERIFIER_DIAGNOSTICS__ENABLED", "false")

    config = RunnerConfig(_env_file=None)

    assert config.signup_url.endswith("/register")
    assert config.diagnostics.enabled is False


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        RunnerConfig(_env_file=None, threads=0)
    with pytest.raises(ValidationError):
        RunnerConfig(_env_file=None, timeouts={"default": 0})
    with pytest.raises(ValidationError):
        RunnerConfig(_env_file=None, browser={"kind": "netscape"})


def _environment_dir(tmp_path: Path) -> Path:
    config_dir = tmp_path / "environments"
    config_dir.mkdir()
    (config_dir / "dev.yaml").write_text(
        "\n".join(
            [
                "base_url: https://dev.example.test",
                "retry:",
                "  max_attempts: 4",
            ]
        )
    )
    return config_dir


def test_selected_environment_file_is_applied(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config(config_dir=_environment_dir(tmp_path), environment="DEV")

    assert config.environment is EnvironmentType.DEV
    assert config.signup_url == "https://dev.example.test/sign-up"
    assert config.retry.max_attempts == 4


def test_environment_variables_outrank_the_environment_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SIGNUP_VERIFIER_ENVIRONMENT", "dev")
    monkeypatch.setenv("SIGNUP_VERIFIER_CONFIG_DIR", str(_environment_dir(tmp_path)))
    monkeypatch.setenv("SIGNUP_VERIFIER_BASE_URL", "https://override.example.test")

    config = load_config()

    assert config.environment is EnvironmentType.DEV
    assert config.base_url == "https://override.example.test"
    assert config.retry.max_attempts == 4


def test_missing_environment_file_keeps_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config(config_dir=tmp_path / "absent", environment="local")

    assert config.environment is EnvironmentType.LOCAL
    assert config.base_url == "https://editor-staging.storydoc.com"


def test_unknown_environment_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ValidationError):
        load_config(environment="production")


def test_unreadable_config_file_is_a_configuration_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("threads: [1\n")
    listing = tmp_path / "listing.yaml"
    listing.write_text("- threads\n")

    with pytest.raises(ConfigurationError):
        load_config(broken, env_file=None)
    with pytest.raises(ConfigurationError):
        load_config(listing, env_file=None)

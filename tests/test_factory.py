from pathlib import Path

import pytest

from fakes import FakeBrowserSession, FakePage
from signup_verifier import factory
from signup_verifier.config import RunnerConfig
from signup_verifier.diagnostics import NullDiagnostics, ScreenshotDiagnostics
from signup_verifier.notifications.base import CompositeNotifier


def _config(**overrides) -> RunnerConfig:
    return RunnerConfig(_env_file=None, base_url="https://app.test", **overrides)


def test_new_sessions_start_on_the_signup_page(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[FakeBrowserSession] = []

    def fake_browser(config: RunnerConfig) -> FakeBrowserSession:
        session = FakeBrowserSession(FakePage())
        created.append(session)
        return session

    monkeypatch.setattr(factory, "build_browser", fake_browser)
    config = _config(timeouts={"page_load": 12})

    manager = factory.build_session_manager(config)
    session = manager.acquire()

    assert session.page.visited == ["https://app.test/sign-up"]
    assert session.timeouts.page_load == 12
    assert created[0].started is True
    manager.release()


def test_diagnostics_follow_the_enabled_flag(tmp_path: Path) -> None:
    enabled = _config(diagnostics={"output_dir": str(tmp_path)})
    disabled = _config(diagnostics={"enabled": False})

    assert isinstance(factory.build_diagnostics(enabled.diagnostics), ScreenshotDiagnostics)
    assert isinstance(factory.build_diagnostics(disabled.diagnostics), NullDiagnostics)


def test_retry_policy_mirrors_configuration() -> None:
    policy = factory.build_retry_policy(_config(retry={"max_attempts": 5, "delay": 0}).retry)

    assert policy.max_attempts == 5
    assert policy.delay == 0


def test_notifier_streams_and_summarises() -> None:
    assert isinstance(factory.build_notifier(), CompositeNotifier)

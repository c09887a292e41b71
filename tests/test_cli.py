from __future__ import annotations

from typer.testing import CliRunner

from signup_verifier.cli import app
from signup_verifier.config import RunnerConfig
from signup_verifier.errors import ConfigurationError


def _base_config() -> RunnerConfig:
    return RunnerConfig.model_validate(
        {
            "base_url": "https://app.test",
            "browser": {"headless": True},
            "threads": 2,
        }
    )


def _make_runner(state: dict[str, object], result: bool):
    class DummyRunner:
        def __init__(self, **kwargs):
            state.update(kwargs)
            state["run_calls"] = 0

        def run(self) -> bool:
            state["run_calls"] += 1
            return result

    return DummyRunner


def _stub_builders(monkeypatch, calls: dict[str, list[object]]) -> None:
    def capture(name: str):
        def _factory(*args: object) -> str:
            calls.setdefault(name, []).append(args)
            return f"{name}-stub"

        return _factory

    monkeypatch.setattr("signup_verifier.cli.build_session_manager", capture("sessions"))
    monkeypatch.setattr("signup_verifier.cli.build_diagnostics", capture("diagnostics"))
    monkeypatch.setattr("signup_verifier.cli.build_notifier", capture("notifier"))
    monkeypatch.setattr("signup_verifier.cli.build_page_context", capture("context"))


def test_run_command_success(monkeypatch, tmp_path):
    runner = CliRunner()

    config_path = tmp_path / "config.yaml"
    config_path.write_text("threads: 1\n")
    env_file = tmp_path / "vars.env"
    env_file.write_text("SIGNUP_VERIFIER_ITERATIONS=2\n")
    shots = tmp_path / "shots"

    config = _base_config()
    load_args: dict[str, object] = {}

    def fake_load_config(path, *, env_file=None, **overrides):  # type: ignore[no-untyped-def]
        load_args["path"] = path
        load_args["env_file"] = env_file
        load_args["overrides"] = overrides
        return config

    monkeypatch.setattr("signup_verifier.cli.load_config", fake_load_config)
    builder_calls: dict[str, list[object]] = {}
    _stub_builders(monkeypatch, builder_calls)
    runner_state: dict[str, object] = {}
    monkeypatch.setattr("signup_verifier.cli.SignupFlowRunner", _make_runner(runner_state, result=True))

    result = runner.invoke(
        app,
        [
            "run",
            "--config",
            str(config_path),
            "--env-file",
            str(env_file),
            "--base-url",
            "https://qa.example.test",
            "--browser",
            "firefox",
            "--headless",
            "--threads",
            "4",
            "--iterations",
            "3",
            "--screenshots-dir",
            str(shots),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Loaded configuration for https://app.test/sign-up" in result.stdout
    assert "Signup flow verified successfully." in result.stdout

    assert load_args["path"] == config_path
    assert load_args["env_file"] == env_file
    assert load_args["overrides"] == {
        "base_url": "https://qa.example.test",
        "browser": {"kind": "firefox", "headless": True},
        "threads": 4,
        "iterations": 3,
        "diagnostics": {"output_dir": str(shots)},
    }

    assert builder_calls["sessions"] == [(config,)]
    assert builder_calls["diagnostics"] == [(config.diagnostics,)]
    assert builder_calls["notifier"] == [()]

    assert runner_state["config"] is config
    assert runner_state["sessions"] == "sessions-stub"
    assert runner_state["notifier"] == "notifier-stub"
    assert runner_state["diagnostics"] == "diagnostics-stub"
    assert runner_state["run_calls"] == 1
    assert runner_state["context_factory"]("session") == "context-stub"
    [context_args] = builder_calls["context"]
    assert context_args[0] is config
    assert context_args[1] == "session"
    assert context_args[3] == "diagnostics-stub"


def test_run_command_failure(monkeypatch):
    runner = CliRunner()
    config = _base_config()

    monkeypatch.setattr("signup_verifier.cli.load_config", lambda *_, **__: config)
    _stub_builders(monkeypatch, {})
    runner_state: dict[str, object] = {}
    monkeypatch.setattr("signup_verifier.cli.SignupFlowRunner", _make_runner(runner_state, result=False))

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 1
    assert "Signup flow verified successfully." not in result.stdout
    assert runner_state["run_calls"] == 1


def test_run_command_reports_configuration_errors(monkeypatch):
    runner = CliRunner()

    def broken_load_config(*_, **__):  # type: ignore[no-untyped-def]
        raise ConfigurationError("Cannot read locator file")

    monkeypatch.setattr("signup_verifier.cli.load_config", broken_load_config)
    runner_state: dict[str, object] = {}
    monkeypatch.setattr("signup_verifier.cli.SignupFlowRunner", _make_runner(runner_state, result=True))

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 2
    assert "Configuration error: Cannot read locator file" in result.output
    assert runner_state == {}


def test_run_command_rejects_invalid_option_values():
    result = CliRunner().invoke(app, ["run", "--threads", "0"])

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_version_command():
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.stdout.strip()


def test_run_command_selects_environment(monkeypatch):
    load_args: dict[str, object] = {}

    def fake_load_config(path, *, env_file=None, **overrides):  # type: ignore[no-untyped-def]
        load_args["overrides"] = overrides
        return _base_config()

    monkeypatch.setattr("signup_verifier.cli.load_config", fake_load_config)
    _stub_builders(monkeypatch, {})
    monkeypatch.setattr("signup_verifier.cli.SignupFlowRunner", _make_runner({}, result=True))

    result = CliRunner().invoke(app, ["run", "--env", "dev"])

    assert result.exit_code == 0, result.output
    assert load_args["overrides"] == {"environment": "dev"}

"""Command line interface for signup-verifier."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from pydantic import ValidationError

from .config import load_config
from .errors import ConfigurationError
from .factory import (
    build_diagnostics,
    build_notifier,
    build_page_context,
    build_session_manager,
)
from .locators import load_locators
from .runner import SignupFlowRunner

app = typer.Typer(help="Browser verification of the signup flow")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("signup-verifier"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def run(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    environment: Annotated[
        Optional[str],
        typer.Option("--env", help="Target environment: local, dev or staging."),
    ] = None,
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", help="Application base URL."),
    ] = None,
    browser: Annotated[
        Optional[str],
        typer.Option("--browser", help="Browser to use: chrome, firefox, edge or webkit."),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser in headless mode (or headed)."),
    ] = None,
    threads: Annotated[
        Optional[int],
        typer.Option("--threads", help="Number of parallel browser sessions."),
    ] = None,
    iterations: Annotated[
        Optional[int],
        typer.Option("--iterations", help="Signup flows to run per thread."),
    ] = None,
    screenshots_dir: Annotated[
        Optional[Path],
        typer.Option("--screenshots-dir", help="Directory for failure screenshots."),
    ] = None,
) -> None:
    """Run the signup flow and verify the confirmation screen."""

    overrides: dict[str, Any] = {}
    if environment is not None:
        overrides["environment"] = environment
    if base_url:
        overrides["base_url"] = base_url
    if browser is not None or headless is not None:
        overrides.setdefault("browser", {})
        if browser is not None:
            overrides["browser"]["kind"] = browser
        if headless is not None:
            overrides["browser"]["headless"] = headless
    if threads is not None:
        overrides["threads"] = threads
    if iterations is not None:
        overrides["iterations"] = iterations
    if screenshots_dir is not None:
        overrides["diagnostics"] = {"output_dir": str(screenshots_dir)}

    try:
        config = load_config(config_path, env_file=env_file, **overrides)
        locators = load_locators(config.locators_path)
    except (ConfigurationError, ValidationError) as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    typer.echo(f"Loaded configuration for {config.signup_url}")

    sessions = build_session_manager(config)
    diagnostics = build_diagnostics(config.diagnostics)
    notifier = build_notifier()

    runner = SignupFlowRunner(
        config=config,
        sessions=sessions,
        context_factory=lambda session: build_page_context(config, session, locators, diagnostics),
        notifier=notifier,
        diagnostics=diagnostics,
    )
    success = runner.run()
    if not success:
        raise typer.Exit(code=1)
    typer.echo("Signup flow verified successfully.")


if __name__ == "__main__":
    app()

"""Command-line entry point for the mrstat tool."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Annotated, NoReturn

import typer

from mrstat.config import AppSettings, load_settings
from mrstat.gitlab_client import GitLabClient
from mrstat.monitor import MergeRequestMonitor
from mrstat.render.service import RenderService, ReportFormat

app = typer.Typer(add_completion=False, help="Report open GitLab merge requests and what blocks them.")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable verbose logging output.")] = False,
) -> None:
    """Configure logging before executing a sub-command."""
    _configure_logging(verbose)


@app.command()
def report(
    branch: Annotated[
        str | None,
        typer.Option(
            "--branch",
            help="Override the configured target branch.",
        ),
    ] = None,
    fmt: Annotated[
        ReportFormat,
        typer.Option(
            "--format",
            help="Output format for the report.",
        ),
    ] = ReportFormat.SLACK,
) -> None:
    """Print open merge requests grouped into ready and blocked."""
    try:
        settings = load_settings()
    except ValueError as exc:
        _handle_settings_error(exc)
    monitor = MergeRequestMonitor(settings)
    result = asyncio.run(monitor.run(branch))
    output = RenderService().render(result, fmt)

    # Markers go to stderr so piped stdout stays clean.
    interactive = _stdout_is_terminal()
    if interactive:
        typer.echo("===== BEGIN REPORT =====", err=True)
    typer.echo(output)
    if interactive:
        typer.echo("===== END REPORT =====", err=True)


@app.command()
def doctor() -> None:
    """Validate configuration and verify GitLab API connectivity."""
    try:
        settings = load_settings()
    except ValueError as exc:
        _handle_settings_error(exc)
    typer.echo(f"Loaded configuration for project: {settings.project_id}")
    asyncio.run(_doctor(settings))


async def _doctor(settings: AppSettings) -> None:
    try:
        async with GitLabClient(settings) as client:
            response = await client.get("/user")
            payload = client.parse_json(response)
    except Exception as exc:  # pragma: no cover - direct user feedback
        typer.echo(f"Failed to reach GitLab API: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Authenticated as: {payload.get('username', 'unknown')}")


def _stdout_is_terminal() -> bool:
    return sys.stdout.isatty()


def _handle_settings_error(exc: ValueError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()

"""
Root Typer application for the cronspine CLI.

Commands:
    cronspine validate "*/15 9-17 * * 1-5"    parse and show the five fields
    cronspine run "* * * * *" --timezone Europe/London
                                              print every matching tick until Ctrl-C
"""

from __future__ import annotations

import json
import threading
from datetime import datetime
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from cronspine.errors import CronError
from cronspine.logging import LogContext, configure_logging, get_logger
from cronspine.scheduling import FIELD_BOUNDS, CronEngine, CronTick, parse_schedule
from cronspine.settings import get_settings
from cronspine.timestamps import to_iso8601

app = typer.Typer(
    name="cronspine",
    help="cronspine: minimal crontab-style scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("cronspine")
        except PackageNotFoundError:
            from cronspine import __version__ as v
        typer.echo(f"cronspine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """cronspine CLI: validate schedules and run them in the foreground."""


def _fail(error: CronError) -> NoReturn:
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
    raise typer.Exit(code=1)


@app.command("validate")
def validate(
    schedule: str = typer.Argument(..., help="Five-field cron schedule"),
    strict: bool | None = typer.Option(None, "--strict/--lenient", help="Reject out-of-bounds values"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Parse a schedule and show the values each field matches."""
    if strict is None:
        strict = get_settings().strict_bounds
    try:
        parsed = parse_schedule(schedule, strict=strict)
    except CronError as e:
        _fail(e)

    if json_out:
        console.print_json(json.dumps(parsed.to_dict()))
        return

    table = Table(title=f"Schedule: {schedule}", show_lines=False, pad_edge=False)
    table.add_column("field")
    table.add_column("bounds")
    table.add_column("values", overflow="fold")
    for name, low, high in FIELD_BOUNDS:
        values = getattr(parsed, name)
        table.add_row(name, f"{low}-{high}", ", ".join(str(v) for v in values) or "[dim](none)[/dim]")
    console.print(table)


def _print_tick(tick: CronTick, instant: datetime) -> None:
    console.print(
        f"[green]tick[/green] {to_iso8601(instant)}  "
        f"minute={tick.minute} hour={tick.hour} day={tick.day} "
        f"month={tick.month} dow={tick.dow}"
    )


def _wait_forever() -> None:
    stop = threading.Event()
    while not stop.wait(1.0):
        pass


@app.command("run")
def run(
    schedule: str = typer.Argument(..., help="Five-field cron schedule"),
    timezone: str | None = typer.Option(None, "--timezone", "-z", help="IANA timezone (default: settings or system local)"),
) -> None:
    """Run a schedule in the foreground, printing every matching tick."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    zone = timezone or settings.timezone

    try:
        engine = CronEngine(schedule, _print_tick, zone, settings=settings)
    except CronError as e:
        _fail(e)

    with LogContext(schedule=schedule, timezone=zone):
        engine.start()
        console.print(f"[bold]Running[/bold] {schedule!r} (Ctrl-C to stop)")
        try:
            _wait_forever()
        except KeyboardInterrupt:
            engine.cancel()
            logger.info("cli_run_interrupted")
            console.print("[dim]Cancelled.[/dim]")


if __name__ == "__main__":  # pragma: no cover
    app()

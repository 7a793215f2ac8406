from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import DEFAULT_WATCH_INTERVAL, CLIConfig, load_config
from cli.render import render_cities, render_readings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for querying the Airphonic air-quality relay.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Relay base URL (defaults to AIRPHONIC_API_URL env or http://localhost:5000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds for relay requests.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("latest")
def latest_command(
    ctx: typer.Context,
    city: Optional[str] = typer.Option(None, "--city", "-c", help="City key, e.g. HongKong or Bangkok."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload."),
) -> None:
    """Show the latest merged readings for a city."""
    state = _get_state(ctx)
    readings = state.client.get_latest(city)
    if as_json:
        typer.echo(json.dumps(readings))
        return
    render_readings(readings, city)


@app.command("cities")
def cities_command(ctx: typer.Context) -> None:
    """List the city keys the relay supports."""
    state = _get_state(ctx)
    render_cities(state.client.get_cities())


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    city: Optional[str] = typer.Option(None, "--city", "-c", help="City key to poll."),
    interval: float = typer.Option(DEFAULT_WATCH_INTERVAL, "--interval", min=0.0, help="Seconds between polls."),
    count: Optional[int] = typer.Option(None, "--count", "-n", min=1, help="Stop after this many polls."),
) -> None:
    """Poll the relay periodically and print each payload."""
    state = _get_state(ctx)
    polls = 0
    while True:
        readings = state.client.get_latest(city)
        polls += 1
        render_readings(readings, city)
        if count is not None and polls >= count:
            return
        typer.echo()
        time.sleep(interval)

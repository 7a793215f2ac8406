from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def render_readings(readings: Iterable[Dict[str, Any]], city: Optional[str] = None) -> None:
    echo_heading(f"Air quality ({city})" if city else "Air quality")
    rows = list(readings)
    if not rows:
        typer.echo("No readings available.")
        return
    width = max(len(str(row.get("name"))) for row in rows)
    for row in rows:
        typer.echo(f"  {str(row.get('name')).ljust(width)}  {row.get('value')}")


def render_cities(cities: Iterable[str]) -> None:
    echo_heading("Supported cities")
    for city in cities:
        typer.echo(f"  - {city}")

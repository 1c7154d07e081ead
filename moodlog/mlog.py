#!/usr/bin/env python3
# Moodlog - habit and mood correlation reports for the terminal
# Copyright (C) 2024 Zach McKinnon
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''
Moodlog CLI
Explore how tracked habits, mood check-ins and health metrics relate to each other.
'''
import logging

import typer
from rich.console import Console
from rich.table import Table

import moodlog.config.config_manager as cf
from moodlog.commands import report
from moodlog.utils import log_utils

app = typer.Typer(
    help="🧠 Moodlog CLI: correlations, trends and insights from your habit and mood log.")
app.add_typer(report.app, name="report",
              help="View correlations, trends, heatmaps and insights.")

console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
):
    """Set up logging before any command runs."""
    level = "DEBUG" if verbose else cf.get_config_value("logging", "level", "INFO")
    log_utils.setup_logging(level)


@app.command("config-show")
def config_show():
    """Show the effective engine settings."""
    settings = cf.get_engine_settings()
    table = Table(title=f"Engine settings ({cf.USER_CONFIG})")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for key, value in settings.__dict__.items():
        table.add_row(key, str(value))
    console.print(table)


@app.command("config-set")
def config_set(
    key: str = typer.Argument(..., help="Key in the [engine] section."),
    value: str = typer.Argument(..., help="New value."),
):
    """Change one [engine] setting."""
    defaults = cf.EngineSettings()
    if not hasattr(defaults, key):
        console.print(f"[red]Unknown engine setting '{key}'.[/red]")
        raise typer.Exit(code=1)
    current = getattr(defaults, key)
    try:
        if isinstance(current, bool):
            if value.lower() not in ("true", "false"):
                raise ValueError(f"expected true or false, got {value!r}")
            parsed = value.lower() == "true"
        else:
            parsed = type(current)(value)
    except ValueError as e:
        console.print(f"[red]Invalid value for {key}: {e}[/red]")
        raise typer.Exit(code=1)
    if not cf.set_config_value("engine", key, parsed):
        console.print(f"[red]Failed to save {key}.[/red]")
        raise typer.Exit(code=1)
    logger.info(f"Config [engine] {key} set to {parsed!r}")
    console.print(f"[green]✓ {key} = {parsed}[/green]")


if __name__ == "__main__":
    app()

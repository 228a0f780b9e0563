"""List command for destination-catalog CLI."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from destination_catalog.cli import RichCommand

console = Console()

# Long action lists (Xero accounting methods) are abbreviated unless --all
MAX_ACTIONS_SHOWN = 6


@click.command(cls=RichCommand, name="list")
@click.option("--all", "show_all", is_flag=True, help="Show every action name")
def list_destinations(show_all: bool) -> None:
    """List registered destinations and their actions.

    Examples:

        dc list

        dc list --all
    """
    from destination_catalog.destinations import DESTINATIONS

    table = Table(title="Destinations", show_lines=False)
    table.add_column("Name", style="bold")
    table.add_column("Driver")
    table.add_column("Actions")

    for name, factory in DESTINATIONS.items():
        proxy = factory({}, console=console)
        actions = proxy.actions
        shown = actions if show_all else actions[:MAX_ACTIONS_SHOWN]
        text = ", ".join(shown)
        if len(shown) < len(actions):
            text += f" [dim](+{len(actions) - len(shown)} more)[/dim]"
        table.add_row(name, proxy.destination, text)

    console.print(table)

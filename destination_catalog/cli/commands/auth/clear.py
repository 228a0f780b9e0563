"""Auth clear command for destination-catalog."""

from __future__ import annotations

import click
from rich.console import Console

from destination_catalog.cli import RichCommand

console = Console()


@click.command(cls=RichCommand)
@click.argument("destination")
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def clear(destination: str, force: bool) -> None:
    """Clear stored credentials.

    DESTINATION: Which destination's secrets to clear, or "all"

    Examples:

        # Clear Xero client credentials
        dc auth clear xero

        # Clear everything
        dc auth clear all --force
    """
    import destination_catalog.destinations  # noqa: F401 - registers credential env vars
    from destination_catalog.credentials import DESTINATION_CREDENTIALS, get_credential_store

    destination = destination.lower()
    if destination == "all":
        to_clear = [key for keys in DESTINATION_CREDENTIALS.values() for key in keys]
    elif destination in DESTINATION_CREDENTIALS:
        to_clear = list(DESTINATION_CREDENTIALS[destination])
    else:
        valid = ", ".join([*DESTINATION_CREDENTIALS, "all"])
        raise click.BadParameter(f"Unknown destination '{destination}'. Valid: {valid}")

    if not force:
        console.print()
        console.print("This will clear:")
        for key in to_clear:
            console.print(f"  • {key}")
        console.print()

        if not click.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            return

    store = get_credential_store(console)
    for key in to_clear:
        if store.delete(key):
            console.print(f"[green]✓[/green] Cleared {key}")
        else:
            console.print(f"[dim]○[/dim] {key} was not set")

"""Auth status command for destination-catalog."""

from __future__ import annotations

import os

import click
from rich.console import Console

from destination_catalog.cli import RichCommand

console = Console()


@click.command(cls=RichCommand)
def status() -> None:
    """Show configured credentials and their status."""
    import destination_catalog.destinations  # noqa: F401 - registers credential env vars
    from destination_catalog.credentials import (
        DESTINATION_CREDENTIALS,
        env_var_for,
        get_credential_store,
    )

    store = get_credential_store(console)

    console.print()
    console.print("[bold]Credential Status[/bold]")
    console.print()

    for destination, keys in DESTINATION_CREDENTIALS.items():
        console.print(f"[bold]{destination}[/bold]")
        for key in keys:
            env_var = env_var_for(key)
            if store.get(key):
                console.print(f"  [green]✓[/green] {key:<32} Configured")
                if os.environ.get(env_var):
                    console.print(
                        f"    [yellow]Note: {env_var} env var will override keychain[/yellow]"
                    )
            else:
                console.print(f"  [dim]○[/dim] {key:<32} Not configured")
        console.print()

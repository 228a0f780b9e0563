"""Auth command group for destination-catalog.

Manages destination secrets kept in the system keychain.
"""

from __future__ import annotations

import click
from rich.console import Console

from destination_catalog.cli import RichGroup
from destination_catalog.cli.commands.auth.clear import clear
from destination_catalog.cli.commands.auth.set_cmd import set_credential
from destination_catalog.cli.commands.auth.status import status

console = Console()


@click.group(cls=RichGroup, invoke_without_command=True)
@click.pass_context
def auth(ctx: click.Context) -> None:
    """Manage destination credentials.

    When called without a subcommand, displays credential status.

    ## Available Commands

    **status** - Show which destination secrets are configured
    **set** - Store a secret in the system keychain
    **clear** - Remove stored secrets

    ## Quick Examples

        $ dc auth status
        $ dc auth set xero-client-secret
        $ dc auth clear all --force
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(status)
        console.print("[dim]Available commands:[/dim]")
        console.print(ctx.get_help())


auth.add_command(status)
auth.add_command(set_credential)
auth.add_command(clear)

__all__ = [
    "auth",
    "clear",
    "set_credential",
    "status",
]

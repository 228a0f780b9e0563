"""Auth set command for destination-catalog."""

from __future__ import annotations

import click
from rich.console import Console

from destination_catalog.cli import RichCommand

console = Console()


@click.command(cls=RichCommand, name="set")
@click.argument("key")
@click.option(
    "--value",
    prompt=True,
    hide_input=True,
    help="Secret value (prompted with hidden input if omitted)",
)
def set_credential(key: str, value: str) -> None:
    """Store a destination secret in the system keychain.

    KEY: Credential key, e.g. xero-client-secret (see 'dc auth status')

    Examples:

        dc auth set bigquery-service-account-key
    """
    import destination_catalog.destinations  # noqa: F401 - registers credential env vars
    from destination_catalog.credentials import ENV_VAR_MAPPING, get_credential_store

    if key not in ENV_VAR_MAPPING:
        valid = ", ".join(sorted(ENV_VAR_MAPPING))
        raise click.BadParameter(f"Unknown credential '{key}'. Valid: {valid}")

    store = get_credential_store(console)
    if store.set(key, value):
        console.print(f"[green]✓[/green] Saved {key} to keychain")
    else:
        raise click.ClickException("Could not save to keychain (keychain unavailable)")

"""Command-line interface for destination-catalog."""

from __future__ import annotations

import click

from destination_catalog.cli import RichGroup
from destination_catalog.cli.commands import auth, call, list_destinations, test


@click.group(cls=RichGroup)
@click.version_option(package_name="destination-catalog")
def cli() -> None:
    """Invoke destination drivers (BigQuery, Xero, Elasticsearch).

    Settings are read from destinations.yml, secrets from the environment
    or the system keychain.

        $ dc list
        $ dc test bigquery
        $ dc call elasticsearch index -p '{"index": "quotes", "document": {}}'
    """


cli.add_command(list_destinations)
cli.add_command(test)
cli.add_command(call)
cli.add_command(auth)


if __name__ == "__main__":
    cli()

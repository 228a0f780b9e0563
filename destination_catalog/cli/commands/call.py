"""Call command for destination-catalog CLI."""

from __future__ import annotations

import traceback
from pathlib import Path

import click
import yaml
from rich.console import Console

from destination_catalog.cli import RichCommand, format_error
from destination_catalog.cli.formatting import format_result, format_warning
from destination_catalog.cli.utils import load_catalog, parse_payload
from destination_catalog.errors import DestinationError

console = Console()


@click.command(cls=RichCommand)
@click.argument("destination")
@click.argument("action")
@click.option("--payload", "-p", help="Action arguments as a JSON object")
@click.option(
    "--payload-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read action arguments from a JSON file",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to destinations.yml (auto-detected if not specified)",
)
@click.option("--debug", is_flag=True, help="Show full exception stacktraces")
def call(
    destination: str,
    action: str,
    payload: str | None,
    payload_file: Path | None,
    config: Path | None,
    debug: bool,
) -> None:
    """Invoke one destination action inside a scoped connection.

    DESTINATION: Registered destination name

    ACTION: Action name (e.g. insert_data, index, accounting.getAccounts)

    Examples:

        dc call bigquery delete_data -p '{"dataset": "d", "table": "t", "filters": "id = 1"}'

        dc call xero accounting.getAccounts -p '{"where": "Status==\\"ACTIVE\\""}'

        dc call elasticsearch bulk --payload-file ops.json
    """
    from destination_catalog.destinations import get_destination

    arguments = parse_payload(payload, payload_file)

    try:
        catalog, _ = load_catalog(config)
        proxy = get_destination(destination, catalog.settings_for(destination), console=console)
        result = proxy.call(action, **arguments)
    except yaml.YAMLError as e:
        if debug:
            console.print(traceback.format_exc())
        console.print(format_error("YAML parsing error", str(e)))
        raise click.ClickException(str(e))
    except DestinationError as e:
        if debug:
            console.print(traceback.format_exc())
        console.print(format_error(str(e)))
        raise click.ClickException(str(e))
    except TypeError as e:
        if debug:
            console.print(traceback.format_exc())
        console.print(format_error(f"Invalid arguments for {action}: {e}"))
        raise click.ClickException(str(e))
    except Exception as e:
        if debug:
            console.print(traceback.format_exc())
        console.print(format_error(f"{action} failed: {e}", "Re-run with --debug for details"))
        raise click.ClickException(str(e))

    if result is None:
        console.print(
            format_warning(
                f"{action} returned no result (not delivered)",
                "See the messages above for the cause",
            )
        )
        return

    console.print(format_result(result))

"""CLI commands for destination-catalog.

Commands are registered on the root group in __main__.py.
"""

from __future__ import annotations

from destination_catalog.cli.commands.auth import auth
from destination_catalog.cli.commands.call import call
from destination_catalog.cli.commands.list_cmd import list_destinations
from destination_catalog.cli.commands.test_cmd import test

__all__ = [
    "auth",
    "call",
    "list_destinations",
    "test",
]

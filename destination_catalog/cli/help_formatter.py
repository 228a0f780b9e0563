"""Custom Click command classes with wider help output."""

from __future__ import annotations

import click

HELP_WIDTH = 88


def _render_help(command: click.Command, ctx: click.Context) -> str:
    formatter = click.HelpFormatter(width=HELP_WIDTH)
    command.format_help(ctx, formatter)
    return formatter.getvalue()


class RichCommand(click.Command):
    """Click command rendering help at a fixed readable width."""

    def get_help(self, ctx: click.Context) -> str:
        return _render_help(self, ctx)


class RichGroup(click.Group):
    """Click group rendering help at a fixed readable width.

    Subcommands are listed in registration order rather than alphabetically.
    """

    def get_help(self, ctx: click.Context) -> str:
        return _render_help(self, ctx)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)

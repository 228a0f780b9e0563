"""CLI utilities for destination-catalog.

This package provides Rich-based formatting utilities and custom Click
help formatters shared by the command modules.
"""

from __future__ import annotations

from destination_catalog.cli.formatting import (
    format_error,
    format_warning,
)
from destination_catalog.cli.help_formatter import RichCommand, RichGroup

__all__ = [
    "format_error",
    "format_warning",
    "RichCommand",
    "RichGroup",
]

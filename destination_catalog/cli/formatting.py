"""Rich formatting utilities for CLI output.

Panels for error/warning/success messages and JSON rendering of action
results.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from pydantic import BaseModel
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax


def _panel(content: str, title: str, style: str) -> Panel:
    return Panel(
        content,
        title=f"[bold {style}]{title}[/bold {style}]",
        border_style=style,
        width=78,
        expand=False,
    )


def format_error(message: str, context: str | None = None) -> Panel:
    """Create formatted error panel.

    Args:
        message: Error message
        context: Optional context hint for resolution

    Returns:
        Panel with error formatting
    """
    content = f"[bold red]{escape(message)}[/bold red]"
    if context:
        content += f"\n\n[dim]{escape(context)}[/dim]"
    return _panel(content, "Error", "red")


def format_warning(message: str, context: str | None = None) -> Panel:
    content = f"[bold yellow]{escape(message)}[/bold yellow]"
    if context:
        content += f"\n\n[dim]{escape(context)}[/dim]"
    return _panel(content, "Warning", "yellow")


def to_jsonable(value: Any) -> Any:
    """Convert action results (dataclasses, pydantic models) into JSON data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return str(value)


def format_result(result: Any) -> Syntax:
    """Render an action result as highlighted JSON."""
    text = json.dumps(result, default=to_jsonable, indent=2)
    return Syntax(text, "json", theme="monokai", background_color="default", word_wrap=True)

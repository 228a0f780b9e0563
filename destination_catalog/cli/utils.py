"""CLI utility functions for destination-catalog."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from destination_catalog.config import CatalogConfig, find_config, load_config


def load_catalog(config: Path | None) -> tuple[CatalogConfig, Path | None]:
    """Load destinations.yml, or an empty catalog when none is found.

    Args:
        config: Explicit config path from --config

    Returns:
        Tuple of (catalog, path it was loaded from)
    """
    path = config or find_config()
    if path is None:
        return CatalogConfig(), None
    return load_config(path), path


def parse_payload(payload: str | None, payload_file: Path | None) -> dict[str, Any]:
    """Parse an action payload given inline or as a JSON file.

    Raises:
        click.BadParameter: If the payload is not a JSON object
    """
    if payload and payload_file:
        raise click.BadParameter("Use either --payload or --payload-file, not both")

    text = payload_file.read_text(encoding="utf-8") if payload_file else payload
    if not text:
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Payload is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise click.BadParameter("Payload must be a JSON object")
    return data

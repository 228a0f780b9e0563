"""Destination drivers for destination-catalog.

Each destination wraps a vendor SDK or REST API behind the same lifecycle:
- BigQuery: streaming inserts and schema-checked UPDATE/DELETE
- Xero: accounting calls fanned out across authorized tenants
- Elasticsearch: index/update/delete/bulk document writes

Callers obtain a DriverProxy from get_destination(); every action invoked
through it connects, runs, and disconnects on its own.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from rich.console import Console

from destination_catalog.destinations import bigquery, elasticsearch, xero
from destination_catalog.destinations.base import Driver, TestConnectionResult
from destination_catalog.destinations.lifecycle import DriverProxy, build_proxy
from destination_catalog.errors import ConfigurationError

ProxyFactory = Callable[..., DriverProxy]

DESTINATIONS: dict[str, ProxyFactory] = {
    "bigquery": bigquery.get_proxy_driver,
    "elasticsearch": elasticsearch.get_proxy_driver,
    "xero": xero.get_proxy_driver,
}


def get_destination(
    name: str,
    config: Mapping[str, Any] | None = None,
    console: Console | None = None,
) -> DriverProxy:
    """Build a proxied driver for a registered destination.

    Args:
        name: Destination name (case-insensitive)
        config: Static configuration mapping for the destination
        console: Rich console for diagnostics (optional)

    Returns:
        DriverProxy for the destination

    Raises:
        ConfigurationError: If the destination is not registered
    """
    factory = DESTINATIONS.get(name.lower())
    if factory is None:
        valid = ", ".join(sorted(DESTINATIONS))
        raise ConfigurationError(f"Unknown destination '{name}'. Valid: {valid}")
    return factory(config, console=console)


__all__ = [
    "DESTINATIONS",
    "Driver",
    "DriverProxy",
    "TestConnectionResult",
    "build_proxy",
    "get_destination",
]

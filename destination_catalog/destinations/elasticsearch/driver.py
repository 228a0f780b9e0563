"""Elasticsearch destination driver."""

from __future__ import annotations

import ssl
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

from elasticsearch import ApiError, Elasticsearch, TransportError
from rich.console import Console
from rich.markup import escape

from destination_catalog.config import DestinationSettings, ElasticsearchSettings
from destination_catalog.destinations.base import Driver, TestConnectionResult
from destination_catalog.destinations.lifecycle import DriverProxy, build_proxy


def _get_ssl_context(settings: ElasticsearchSettings) -> ssl.SSLContext | None:
    """Build an SSL context trusting the configured CA bundle.

    Returns:
        SSLContext, or None to use the client's default verification
    """
    if settings.tls_ca:
        return ssl.create_default_context(cadata=settings.tls_ca)
    if settings.tls_ca_path:
        return ssl.create_default_context(cafile=str(Path(settings.tls_ca_path).expanduser()))
    return None


class ElasticsearchDriver(Driver):
    """Index, update, delete and bulk-write documents in Elasticsearch."""

    name: ClassVar[str] = "Elasticsearch"
    settings_class: ClassVar[type[DestinationSettings]] = ElasticsearchSettings
    ACTIONS: ClassVar[tuple[str, ...]] = ("index", "update", "delete", "bulk")

    settings: ElasticsearchSettings
    client: Elasticsearch | None

    def connect(self, config: Mapping[str, Any] | None = None) -> None:
        """Open an Elasticsearch client.

        API key auth is used when configured, otherwise basic auth.

        Raises:
            ConfigurationError: If the node URI is missing
        """
        settings = self._resolve_settings(config)
        settings.require("uri")

        options: dict[str, Any] = {}
        if settings.api_key:
            options["api_key"] = settings.api_key
        elif settings.basic_user:
            options["basic_auth"] = (settings.basic_user, settings.basic_password)

        ssl_context = _get_ssl_context(settings)
        if ssl_context is not None:
            options["ssl_context"] = ssl_context

        self.client = Elasticsearch(settings.uri, **options)

    def disconnect(self) -> None:
        if self.client is not None:
            self.client.close()
        self.client = None

    def test_connection(self) -> TestConnectionResult:
        client = self._require_client()

        try:
            client.info()
        except (ApiError, TransportError) as e:
            self.console.print(f"[dim]Elasticsearch probe failed: {escape(str(e))}[/dim]")
            return TestConnectionResult(
                success=False,
                message="Could not establish connection to Elasticsearch",
            )

        return TestConnectionResult(
            success=True,
            message="Connection established successfully",
        )

    def index(
        self,
        index: str,
        document: Mapping[str, Any],
        id: str | None = None,  # noqa: A002 - Elasticsearch parameter name
        refresh: bool | str | None = None,
    ) -> dict[str, Any]:
        """Index a document; the response carries the assigned ``_id``."""
        client = self._require_client()
        response = client.index(index=index, document=document, id=id, refresh=refresh)
        return dict(response.body)

    def update(
        self,
        index: str,
        id: str,  # noqa: A002 - Elasticsearch parameter name
        doc: Mapping[str, Any],
        refresh: bool | str | None = None,
    ) -> dict[str, Any]:
        """Apply a partial document update."""
        client = self._require_client()
        response = client.update(index=index, id=id, doc=doc, refresh=refresh)
        return dict(response.body)

    def delete(
        self,
        index: str,
        id: str,  # noqa: A002 - Elasticsearch parameter name
        refresh: bool | str | None = None,
    ) -> dict[str, Any]:
        client = self._require_client()
        response = client.delete(index=index, id=id, refresh=refresh)
        return dict(response.body)

    def bulk(
        self,
        operations: list[Mapping[str, Any]],
        refresh: bool | str | None = None,
        index: str | None = None,
    ) -> dict[str, Any]:
        """Run a bulk request.

        Args:
            operations: Alternating action and source lines
            refresh: Refresh policy for the affected shards
            index: Default index for actions that do not name one

        Returns:
            Bulk response body; ``errors`` is True if any item failed
        """
        client = self._require_client()
        response = client.bulk(operations=operations, refresh=refresh, index=index)
        return dict(response.body)


def get_proxy_driver(
    config: Mapping[str, Any] | ElasticsearchSettings | None = None,
    console: Console | None = None,
) -> DriverProxy:
    """Build a lifecycle-proxied Elasticsearch driver from static configuration."""
    return build_proxy(ElasticsearchDriver, config, console)

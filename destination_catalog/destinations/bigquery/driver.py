"""BigQuery destination driver."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, ClassVar

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.auth.exceptions import GoogleAuthError
from google.cloud import bigquery
from google.oauth2 import service_account
from rich.console import Console
from rich.markup import escape

from destination_catalog.config import BigQuerySettings, DestinationSettings
from destination_catalog.destinations.base import Driver, TestConnectionResult
from destination_catalog.destinations.bigquery import dml
from destination_catalog.destinations.bigquery.types import (
    DmlResult,
    InsertOptions,
    InsertResult,
)
from destination_catalog.destinations.lifecycle import DriverProxy, build_proxy

# A sample query against a public dataset
SAMPLE_QUERY = """SELECT name
  FROM `bigquery-public-data.usa_names.usa_1910_2013`
  WHERE state = 'TX'
  LIMIT 1"""


class BigQueryDriver(Driver):
    """Insert, update and delete rows in BigQuery tables.

    UPDATE and DELETE are issued as DML text built by
    :mod:`destination_catalog.destinations.bigquery.dml`; both refuse to run
    without a WHERE clause.
    """

    name: ClassVar[str] = "BigQuery"
    settings_class: ClassVar[type[DestinationSettings]] = BigQuerySettings
    ACTIONS: ClassVar[tuple[str, ...]] = ("insert_data", "update_data", "delete_data")

    settings: BigQuerySettings
    client: bigquery.Client | None

    def __init__(self, settings: BigQuerySettings, console: Console | None = None) -> None:
        super().__init__(settings, console)
        self.project_id = settings.project_id

    def connect(self, config: Mapping[str, Any] | None = None) -> None:
        """Open a BigQuery client from the service-account key.

        Args:
            config: Optional override mapping (e.g. GOOGLE_SERVICE_ACCOUNT_KEY)

        Raises:
            ConfigurationError: If the key or project id is missing
            json.JSONDecodeError: If the service-account key is not valid JSON
        """
        settings = self._resolve_settings(config)
        settings.require("service_account_key", "project_id")

        sa_key = json.loads(settings.service_account_key)
        credentials = service_account.Credentials.from_service_account_info(sa_key)

        self.project_id = settings.project_id
        self.client = bigquery.Client(project=self.project_id, credentials=credentials)

    def disconnect(self) -> None:
        if self.client is not None:
            self.client.close()
        self.client = None

    def test_connection(self) -> TestConnectionResult:
        client = self._require_client()

        try:
            client.query(SAMPLE_QUERY).result()
        except (GoogleAPIError, GoogleAuthError) as e:
            self.console.print(f"[dim]BigQuery sample query failed: {escape(str(e))}[/dim]")
            return TestConnectionResult(
                success=False,
                message="Could not establish connection to BigQuery",
            )

        return TestConnectionResult(
            success=True,
            message="Connection established successfully",
        )

    def table_id(self, dataset: str, table: str) -> str:
        return f"{self.project_id}.{dataset}.{table}"

    def insert_data(
        self,
        dataset: str,
        table: str,
        data: list[dict[str, Any]] | dict[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> InsertResult | None:
        """Insert a chunk of rows into a BigQuery table.

        A missing table or rows rejected by the table schema are reported and
        yield None; the caller owns dead-lettering of undelivered rows.

        Args:
            dataset: Name of the dataset
            table: Name of the table to insert into
            data: Row or list of rows
            options: Insert options (skipInvalidRows, ignoreUnknownValues, ...)

        Returns:
            InsertResult, or None if the rows were not delivered

        Raises:
            ConfigurationError: If ``options`` holds an unknown or mistyped option
        """
        client = self._require_client()
        table_id = self.table_id(dataset, table)
        insert_options = InsertOptions.from_mapping(options)

        # check if the table exists
        try:
            bq_table = client.get_table(table_id)
        except NotFound:
            self.console.print(f"[yellow]table `{table_id}` not found[/yellow]")
            return None

        rows = [data] if isinstance(data, Mapping) else list(data)

        try:
            errors = client.insert_rows_json(bq_table, rows, **insert_options.as_kwargs())
        except GoogleAPIError as e:
            self.console.print(
                f"[yellow]Schema-altering action[/yellow] [dim]{escape(str(e))}[/dim]"
            )
            return None

        if errors:
            self.console.print(
                f"[yellow]Schema-altering action[/yellow] [dim]{escape(str(errors))}[/dim]"
            )
            return None

        return InsertResult(table=table_id, rows=len(rows))

    def update_data(
        self,
        dataset: str,
        table: str,
        filters: dml.Filters,
        set: dml.Changeset,  # noqa: A002 - payload key
    ) -> DmlResult:
        """Update rows matching ``filters`` in a BigQuery table.

        The table schema is fetched on every call so the changeset is checked
        against the current remote schema.

        Args:
            dataset: Name of the dataset
            table: Name of the table to update rows from
            filters: SQL WHERE clause body (or list of conditions)
            set: Raw SET clause, list of assignments, or column -> value mapping

        Raises:
            UnscopedMutationError: If filters is empty
            SchemaAlteringError: If ``set`` names an undeclared column
        """
        client = self._require_client()
        where = dml.require_filters(filters, "UPDATE")

        bq_table = client.get_table(self.table_id(dataset, table))
        assignments = dml.render_changeset(set, bq_table.schema)

        statement = dml.build_update_statement(
            dml.table_reference(self.project_id, dataset, table), assignments, where
        )
        return self._run_dml(statement)

    def delete_data(self, dataset: str, table: str, filters: dml.Filters) -> DmlResult:
        """Delete rows matching ``filters`` from a BigQuery table.

        Raises:
            UnscopedMutationError: If filters is empty
        """
        self._require_client()
        where = dml.require_filters(filters, "DELETE")

        statement = dml.build_delete_statement(
            dml.table_reference(self.project_id, dataset, table), where
        )
        return self._run_dml(statement)

    def _run_dml(self, statement: str) -> DmlResult:
        client = self._require_client()
        job = client.query(statement)
        job.result()
        return DmlResult(statement=statement, affected_rows=job.num_dml_affected_rows)


def get_proxy_driver(
    config: Mapping[str, Any] | BigQuerySettings | None = None,
    console: Console | None = None,
) -> DriverProxy:
    """Build a lifecycle-proxied BigQuery driver from static configuration."""
    return build_proxy(BigQueryDriver, config, console)

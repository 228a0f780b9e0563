"""Payload and result types for the BigQuery destination."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from destination_catalog.errors import ConfigurationError


class InsertOptions(BaseModel):
    """Streaming insert options.

    Accepts the host platform's camelCase keys or the client's keyword names.
    """

    skip_invalid_rows: bool | None = Field(None, alias="skipInvalidRows")
    ignore_unknown_values: bool | None = Field(None, alias="ignoreUnknownValues")
    template_suffix: str | None = Field(None, alias="templateSuffix")
    row_ids: list[str | None] | None = Field(None, alias="rowIds")

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> InsertOptions:
        """Validate insert options from a raw mapping.

        Raises:
            ConfigurationError: If an option is unknown or has the wrong type
        """
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid insert options: {e}", destination="BigQuery") from e

    def as_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``Client.insert_rows_json``."""
        return self.model_dump(exclude_none=True)


@dataclass
class InsertResult:
    """Result of a successful streaming insert.

    Attributes:
        table: Fully-qualified table id (project.dataset.table)
        rows: Number of rows sent
    """

    table: str
    rows: int


@dataclass
class DmlResult:
    """Result of an UPDATE or DELETE statement.

    Attributes:
        statement: DML text sent to BigQuery
        affected_rows: Rows modified, as reported by the query job
    """

    statement: str
    affected_rows: int | None = None

"""Schema-directed rendering of BigQuery DML text.

Values are rendered into SQL literals chosen by the declared type of their
target column. Rendering is plain string interpolation with no escaping, so
callers must only pass trusted values. All DML text is produced here so a
parameterized-query implementation can replace this module without touching
the driver.

Records render as ``STRUCT(value AS name, ...)`` in the key order of the
input mapping. BigQuery coerces a struct into a RECORD column by position,
not by member name, so record values must list their keys in the declared
schema order.

Field schemas are duck-typed: anything with ``name``, ``field_type``,
``mode`` and ``fields`` attributes works, which includes
``google.cloud.bigquery.SchemaField``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from destination_catalog.errors import (
    DestinationError,
    SchemaAlteringError,
    UnknownFieldTypeError,
    UnscopedMutationError,
)


class FieldSchema(Protocol):
    name: str
    field_type: str | None
    mode: str | None
    fields: Sequence[FieldSchema]


UNQUOTED_TYPES = frozenset(
    {"INTEGER", "INT64", "FLOAT", "FLOAT64", "NUMERIC", "BIGNUMERIC", "BOOLEAN", "BOOL"}
)
QUOTED_TYPES = frozenset({"STRING", "DATE", "TIME", "DATETIME", "GEOGRAPHY"})
RECORD_TYPES = frozenset({"RECORD", "STRUCT"})
SUPPORTED_TYPES = (
    UNQUOTED_TYPES | QUOTED_TYPES | RECORD_TYPES | {"TIMESTAMP", "JSON", "BYTES"}
)

Changeset = str | Sequence[str] | Mapping[str, Any]
Filters = str | Sequence[str] | None


def find_field(fields: Iterable[FieldSchema], name: str) -> FieldSchema | None:
    """Look up a field by name in one level of a schema tree."""
    for field in fields:
        if field.name == name:
            return field
    return None


def render_value(value: Any, field: FieldSchema) -> str:
    """Render a value as a DML literal according to its field schema.

    Args:
        value: Python value to render
        field: Declared schema of the target column

    Returns:
        SQL literal text

    Raises:
        UnknownFieldTypeError: If the field type is not supported
        SchemaAlteringError: If a record value has a key its schema lacks
    """
    field_type = (field.field_type or "").upper()
    if field_type not in SUPPORTED_TYPES:
        raise UnknownFieldTypeError(field.field_type)

    if value is None:
        return "NULL"

    if (field.mode or "").upper() == "REPEATED" and isinstance(value, (list, tuple)):
        return "[" + ",".join(_render_scalar(item, field, field_type) for item in value) + "]"

    return _render_scalar(value, field, field_type)


def _render_scalar(value: Any, field: FieldSchema, field_type: str) -> str:
    if value is None:
        return "NULL"

    if field_type in UNQUOTED_TYPES:
        if isinstance(value, bool):
            return "true" if value else "false"
        return f"{value}"

    if field_type in QUOTED_TYPES:
        return f'"{value}"'

    if field_type == "TIMESTAMP":
        return f'timestamp("{value}")'

    if field_type == "JSON":
        return f"JSON '{json.dumps(value, separators=(',', ':'), ensure_ascii=False)}'"

    if field_type == "BYTES":
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return f'CAST("{value}" AS BYTES)'

    # RECORD / STRUCT
    if not isinstance(value, Mapping):
        raise DestinationError(
            f"Value for record field '{field.name}' must be a mapping, "
            f"got {type(value).__name__}"
        )

    members = []
    for key, member in value.items():
        member_field = find_field(field.fields, key)
        if member_field is None:
            raise SchemaAlteringError(
                f"Schema-altering update: {field.name}.{key} is not declared"
            )
        members.append(f"{render_value(member, member_field)} AS {key}")

    return f"STRUCT({','.join(members)})"


def render_changeset(changes: Changeset, schema: Iterable[FieldSchema]) -> str:
    """Render the SET clause of an UPDATE statement.

    A string is used verbatim and a sequence of pre-formatted assignments
    is joined with commas. A mapping is rendered column by column, and
    every column must exist in ``schema``.

    Raises:
        SchemaAlteringError: If a mapping key is not a declared column
    """
    if isinstance(changes, str):
        return changes

    if not isinstance(changes, Mapping):
        return ",".join(changes)

    fields = list(schema)
    assignments = []
    for column, value in changes.items():
        field = find_field(fields, column)
        if field is None:
            raise SchemaAlteringError("Schema-altering update")
        assignments.append(f"{column}={render_value(value, field)}")

    if not assignments:
        raise DestinationError("BigQuery UPDATE must set at least one column")

    return ",".join(assignments)


def require_filters(filters: Filters, statement: str) -> str:
    """Return the WHERE clause body, refusing unscoped mutations.

    A sequence of conditions is joined with AND.

    Raises:
        UnscopedMutationError: If filters is empty or missing
    """
    if filters is not None and not isinstance(filters, str):
        filters = " AND ".join(f"({condition})" for condition in filters if condition)

    if not filters or not filters.strip():
        raise UnscopedMutationError(f"BigQuery {statement} must have a WHERE clause")

    return filters


def table_reference(project_id: str, dataset: str, table: str) -> str:
    """Backtick-quoted fully-qualified table name."""
    return f"`{project_id}.{dataset}.{table}`"


def build_update_statement(table_ref: str, assignments: str, filters: str) -> str:
    return f"UPDATE {table_ref} SET {assignments} WHERE {filters}"


def build_delete_statement(table_ref: str, filters: str) -> str:
    return f"DELETE FROM {table_ref} WHERE {filters}"

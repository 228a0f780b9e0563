"""BigQuery destination: streaming inserts and schema-checked DML.

This package handles:
- Streaming inserts with table existence checks
- UPDATE statements rendered against the live table schema
- DELETE statements scoped by a mandatory WHERE clause
"""

from destination_catalog.credentials import register_credential_env_var
from destination_catalog.destinations.bigquery.driver import (
    BigQueryDriver,
    get_proxy_driver,
)
from destination_catalog.destinations.bigquery.types import (
    DmlResult,
    InsertOptions,
    InsertResult,
)

# Register BigQuery credential environment variables
register_credential_env_var(
    "bigquery-service-account-key", "GOOGLE_SERVICE_ACCOUNT_KEY", destination="bigquery"
)

__all__ = [
    "BigQueryDriver",
    "DmlResult",
    "InsertOptions",
    "InsertResult",
    "get_proxy_driver",
]

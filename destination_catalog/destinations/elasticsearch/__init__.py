"""Elasticsearch destination for document writes."""

from destination_catalog.credentials import register_credential_env_var
from destination_catalog.destinations.elasticsearch.driver import (
    ElasticsearchDriver,
    get_proxy_driver,
)

# Register Elasticsearch credential environment variables
register_credential_env_var(
    "elasticsearch-password", "ELASTIC_SEARCH_BASIC_PASSWORD", destination="elasticsearch"
)
register_credential_env_var(
    "elasticsearch-api-key", "ELASTIC_SEARCH_API_KEY", destination="elasticsearch"
)

__all__ = [
    "ElasticsearchDriver",
    "get_proxy_driver",
]

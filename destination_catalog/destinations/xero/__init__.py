"""Xero destination for calling accounting endpoints across tenants.

This package handles:
- Installing a pre-resolved OAuth2 token set on the Xero SDK client
- Discovering every tenant the token is authorized for
- Fanning one accounting call out to each tenant
"""

from destination_catalog.credentials import register_credential_env_var
from destination_catalog.destinations.xero.driver import XeroDriver, get_proxy_driver
from destination_catalog.destinations.xero.methods import (
    ACCOUNTING_METHODS,
    AccountingMethod,
)

# Register Xero credential environment variables
register_credential_env_var("xero-client-id", "XERO_CLIENT_ID", destination="xero")
register_credential_env_var("xero-client-secret", "XERO_CLIENT_SECRET", destination="xero")

__all__ = [
    "ACCOUNTING_METHODS",
    "AccountingMethod",
    "XeroDriver",
    "get_proxy_driver",
]

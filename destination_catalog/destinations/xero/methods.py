"""Supported Xero accounting methods and their parameter names.

Each entry declares the ``AccountingApi`` method to call and its parameter
names in signature order. Callers pass parameters keyed by camelCase
(``ifModifiedSince``) or snake_case (``if_modified_since``); the tenant id
is always supplied by the driver.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

TENANT_PARAM = "xero_tenant_id"


def camel_case(name: str) -> str:
    """Convert an SDK parameter name to the camelCase form callers use.

    Identifier suffixes keep the upper-case spelling of the Xero API.

    >>> camel_case("contact_i_ds")
    'contactIDs'
    >>> camel_case("i_ds")
    'IDs'
    >>> camel_case("account_id")
    'accountID'
    """
    head, *rest = re.sub(r"(?:^|(?<=_))i_ds(?=_|$)", "IDs", name).split("_")
    return head + "".join(_capitalize(part) for part in rest)


def _capitalize(part: str) -> str:
    if part == "id":
        return "ID"
    if part == "IDs":
        return part
    return part.capitalize()


@dataclass(frozen=True)
class AccountingMethod:
    """One callable accounting endpoint.

    Attributes:
        name: Action name as exposed to callers (e.g. "getAccounts")
        python_name: ``AccountingApi`` attribute (e.g. "get_accounts")
        params: SDK parameter names in signature order
    """

    name: str
    python_name: str
    params: tuple[str, ...]

    def arguments(self, params: Mapping[str, Any], tenant_id: str) -> dict[str, Any]:
        """Build keyword arguments for one tenant's call.

        Parameters absent from ``params`` are left to the SDK defaults.
        """
        kwargs: dict[str, Any] = {}
        for param in self.params:
            if param == TENANT_PARAM:
                kwargs[param] = tenant_id
            elif param in params:
                kwargs[param] = params[param]
            elif camel_case(param) in params:
                kwargs[param] = params[camel_case(param)]
        return kwargs


def _method(name: str, python_name: str, *params: str) -> AccountingMethod:
    return AccountingMethod(name, python_name, (TENANT_PARAM, *params))


ACCOUNTING_METHODS: dict[str, AccountingMethod] = {
    m.name: m
    for m in [
        # Accounts
        _method("getAccounts", "get_accounts", "if_modified_since", "where", "order"),
        _method("getAccount", "get_account", "account_id"),
        _method("createAccount", "create_account", "account", "idempotency_key"),
        _method("updateAccount", "update_account", "account_id", "accounts", "idempotency_key"),
        _method("deleteAccount", "delete_account", "account_id"),
        # Contacts
        _method(
            "getContacts",
            "get_contacts",
            "if_modified_since",
            "where",
            "order",
            "i_ds",
            "page",
            "include_archived",
            "summary_only",
            "search_term",
            "page_size",
        ),
        _method("getContact", "get_contact", "contact_id"),
        _method("createContacts", "create_contacts", "contacts", "summarize_errors", "idempotency_key"),
        _method("updateContact", "update_contact", "contact_id", "contacts", "idempotency_key"),
        _method(
            "updateOrCreateContacts",
            "update_or_create_contacts",
            "contacts",
            "summarize_errors",
            "idempotency_key",
        ),
        _method("getContactGroups", "get_contact_groups", "where", "order"),
        # Invoices
        _method(
            "getInvoices",
            "get_invoices",
            "if_modified_since",
            "where",
            "order",
            "i_ds",
            "invoice_numbers",
            "contact_i_ds",
            "statuses",
            "page",
            "include_archived",
            "created_by_my_app",
            "unitdp",
            "summary_only",
            "page_size",
            "search_term",
        ),
        _method("getInvoice", "get_invoice", "invoice_id", "unitdp"),
        _method(
            "createInvoices",
            "create_invoices",
            "invoices",
            "summarize_errors",
            "unitdp",
            "idempotency_key",
        ),
        _method("updateInvoice", "update_invoice", "invoice_id", "invoices", "unitdp", "idempotency_key"),
        _method(
            "updateOrCreateInvoices",
            "update_or_create_invoices",
            "invoices",
            "summarize_errors",
            "unitdp",
            "idempotency_key",
        ),
        # Items
        _method("getItems", "get_items", "if_modified_since", "where", "order", "unitdp"),
        _method("getItem", "get_item", "item_id", "unitdp"),
        _method("createItems", "create_items", "items", "summarize_errors", "unitdp", "idempotency_key"),
        # Payments and bank transactions
        _method("getPayments", "get_payments", "if_modified_since", "where", "order", "page", "page_size"),
        _method("createPayment", "create_payment", "payment", "idempotency_key"),
        _method(
            "getBankTransactions",
            "get_bank_transactions",
            "if_modified_since",
            "where",
            "order",
            "page",
            "unitdp",
            "page_size",
        ),
        _method(
            "createBankTransactions",
            "create_bank_transactions",
            "bank_transactions",
            "summarize_errors",
            "unitdp",
            "idempotency_key",
        ),
        _method(
            "getCreditNotes",
            "get_credit_notes",
            "if_modified_since",
            "where",
            "order",
            "page",
            "unitdp",
            "page_size",
        ),
        _method(
            "getPurchaseOrders",
            "get_purchase_orders",
            "if_modified_since",
            "status",
            "date_from",
            "date_to",
            "order",
            "page",
            "page_size",
        ),
        # Reference data
        _method("getCurrencies", "get_currencies", "where", "order"),
        _method("getJournals", "get_journals", "if_modified_since", "offset", "payments_only"),
        _method("getOrganisations", "get_organisations"),
        _method("getTaxRates", "get_tax_rates", "where", "order"),
        _method("getTrackingCategories", "get_tracking_categories", "where", "order", "include_archived"),
        _method("getUsers", "get_users", "if_modified_since", "where", "order"),
    ]
}

"""Xero destination driver with per-tenant fan-out."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, ClassVar

import httpx
import urllib3
from rich.console import Console
from rich.markup import escape
from xero_python.accounting import AccountingApi
from xero_python.api_client import ApiClient, Configuration
from xero_python.api_client.oauth2 import OAuth2Token
from xero_python.exceptions import ApiException

from destination_catalog.config import DestinationSettings, XeroSettings
from destination_catalog.destinations.base import (
    ActionHandler,
    Driver,
    TestConnectionResult,
)
from destination_catalog.destinations.lifecycle import DriverProxy, build_proxy
from destination_catalog.destinations.xero.methods import ACCOUNTING_METHODS
from destination_catalog.errors import (
    MethodNotFoundError,
    NotConnectedError,
    UnsupportedApiError,
)

XERO_CONNECTIONS_URL = "https://api.xero.com/connections"

# Seconds, applied to tenant discovery and every accounting call
XERO_HTTP_TIMEOUT = 3.0


def _get_http_client(timeout: float | None = None) -> httpx.Client:
    """Create HTTP client for Xero identity endpoints.

    Respects standard proxy environment variables (HTTP_PROXY, HTTPS_PROXY).
    """
    return httpx.Client(timeout=timeout or XERO_HTTP_TIMEOUT)


def _response_body(result: Any) -> Any:
    """Convert an SDK model into plain data."""
    to_dict = getattr(result, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return result


def _error_body(error: ApiException) -> Any:
    """Parse the response body carried by an SDK exception."""
    body = error.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            return json.loads(body)
        except ValueError:
            return body
    if body is None:
        return {"status": error.status, "reason": error.reason}
    return body


def _accounting_handler(method_name: str) -> ActionHandler:
    action = f"accounting.{method_name}"

    def handler(
        driver: XeroDriver, params: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> dict[str, Any]:
        return driver.perform_action(action, {**(params or {}), **kwargs})

    handler.__name__ = method_name
    return handler


class XeroDriver(Driver):
    """Call Xero accounting endpoints for every tenant a token can access."""

    name: ClassVar[str] = "Xero"
    settings_class: ClassVar[type[DestinationSettings]] = XeroSettings
    ACTIONS: ClassVar[tuple[str, ...]] = ("perform_action",)
    STATE_FIELDS: ClassVar[tuple[str, ...]] = ("client", "tenant_ids")

    settings: XeroSettings
    client: ApiClient | None

    def __init__(self, settings: XeroSettings, console: Console | None = None) -> None:
        super().__init__(settings, console)
        self.tenant_ids: list[str] = []
        self.accounting_api: AccountingApi | None = None
        self._token_set: dict[str, Any] | None = None

    @classmethod
    def actions(cls) -> dict[str, ActionHandler]:
        """Expose ``perform_action`` plus one ``accounting.<method>`` per table entry."""
        handlers = super().actions()
        for method_name in ACCOUNTING_METHODS:
            handlers[f"accounting.{method_name}"] = _accounting_handler(method_name)
        return handlers

    def connect(self, config: Mapping[str, Any] | None = None) -> None:
        """Build the Xero API client and discover authorized tenants.

        The OAuth2 token set in ``oauth2.resolved`` must already be valid;
        refreshing it is the caller's responsibility.

        Raises:
            ConfigurationError: If client credentials or oauth2 are missing
            httpx.HTTPStatusError: If the connections endpoint rejects the token
        """
        settings = self._resolve_settings(config)
        settings.require("client_id", "client_secret", "oauth2")

        oauth2 = settings.oauth2
        self._token_set = oauth2.resolved.model_dump()

        api_client = ApiClient(
            Configuration(
                oauth2_token=OAuth2Token(
                    client_id=settings.client_id,
                    client_secret=settings.client_secret,
                ),
            ),
            pool_threads=1,
        )
        api_client.oauth2_token_getter(self._get_token_set)
        api_client.oauth2_token_saver(self._save_token_set)

        self.client = api_client
        self.accounting_api = AccountingApi(api_client)

        # get and save all registered tenants
        self.tenant_ids = self._discover_tenants(oauth2.resolved.access_token)

    def _get_token_set(self) -> dict[str, Any] | None:
        return self._token_set

    def _save_token_set(self, token_set: dict[str, Any]) -> None:
        self._token_set = token_set

    def _discover_tenants(self, access_token: str) -> list[str]:
        with _get_http_client() as client:
            response = client.get(
                XERO_CONNECTIONS_URL,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
            response.raise_for_status()
            connections: list[dict[str, Any]] = response.json()

        return [item["tenantId"] for item in connections]

    def disconnect(self) -> None:
        self.tenant_ids = []
        self.accounting_api = None
        self._token_set = None
        self.client = None

    def _require_accounting_api(self) -> AccountingApi:
        if self.client is None or self.accounting_api is None:
            raise NotConnectedError(self.name)
        return self.accounting_api

    def test_connection(self) -> TestConnectionResult:
        api = self._require_accounting_api()
        failure = TestConnectionResult(
            success=False,
            message="Could not establish connection to Xero",
        )

        if not self.tenant_ids:
            self.console.print("[yellow]Xero token is not authorized for any tenant[/yellow]")
            return failure

        try:
            api.get_accounts(self.tenant_ids[0], _request_timeout=XERO_HTTP_TIMEOUT)
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            self.console.print(f"[dim]Xero probe failed: {escape(str(e))}[/dim]")
            return failure

        return TestConnectionResult(
            success=True,
            message="Connection established successfully",
        )

    def perform_action(
        self, action: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Perform an action on the Xero API for every discovered tenant.

        Tenants are called one after another. An API or transport error for
        one tenant is stored as that tenant's entry and does not stop the
        others, so callers must inspect each entry.

        Args:
            action: API and method to call, e.g. "accounting.getAccounts"
            params: Parameters for the method, keyed by name

        Returns:
            Mapping of tenant id to response body (or error body)

        Raises:
            UnsupportedApiError: If the API namespace is not "accounting"
            MethodNotFoundError: If the method is not in ACCOUNTING_METHODS
        """
        api_name, _, method_name = action.partition(".")

        if api_name != "accounting":
            raise UnsupportedApiError(f"API {api_name} for Xero not found", destination=self.name)

        method = ACCOUNTING_METHODS.get(method_name)
        if method is None:
            raise MethodNotFoundError(f"Method {action}() for Xero not found", action)

        api = self._require_accounting_api()
        target = getattr(api, method.python_name)
        params = params or {}

        responses: dict[str, Any] = {}
        for tenant_id in self.tenant_ids:
            kwargs = method.arguments(params, tenant_id)
            try:
                result = target(**kwargs, _request_timeout=XERO_HTTP_TIMEOUT)
                responses[tenant_id] = _response_body(result)
            except ApiException as e:
                self.console.print(
                    f"[yellow]Xero {action} failed for tenant {tenant_id}[/yellow] "
                    f"(HTTP {e.status})"
                )
                responses[tenant_id] = _error_body(e)
            except urllib3.exceptions.HTTPError as e:
                self.console.print(
                    f"[yellow]Xero {action} failed for tenant {tenant_id}[/yellow] "
                    f"[dim]{escape(str(e))}[/dim]"
                )
                responses[tenant_id] = {"status": None, "reason": str(e)}

        return responses


def get_proxy_driver(
    config: Mapping[str, Any] | XeroSettings | None = None,
    console: Console | None = None,
) -> DriverProxy:
    """Build a lifecycle-proxied Xero driver from static configuration."""
    return build_proxy(XeroDriver, config, console)

"""Lifecycle proxy wrapping destination drivers.

Every domain action invoked through a DriverProxy runs inside its own
scoped connection:

1. a fresh driver is built and connected (static settings, or an override
   mapping passed at call time)
2. the action handler runs with the caller's arguments
3. the driver is disconnected, on success and on failure

Errors are reported once on the proxy console and re-raised unmodified.
Because each call owns its driver, concurrent calls through one proxy never
share a client handle or tenant list.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from rich.console import Console
from rich.markup import escape

from destination_catalog.config import DestinationSettings
from destination_catalog.destinations.base import (
    ActionHandler,
    Driver,
    TestConnectionResult,
)
from destination_catalog.errors import MethodNotFoundError

DriverFactory = Callable[[], Driver]


class DriverProxy:
    """Uniform connect/act/disconnect front for one destination.

    Example:
        proxy = get_destination("bigquery", {"GCP_PROJECT_ID": "my-project", ...})
        proxy.insert_data(dataset="events", table="clicks", data=rows)
        proxy.call("update_data", dataset="events", table="clicks",
                   filters="id = 1", set={"status": "seen"})
    """

    def __init__(self, driver_factory: DriverFactory, console: Console | None = None) -> None:
        """Initialize proxy.

        Args:
            driver_factory: Zero-argument callable building an unconnected driver
            console: Rich console for error reporting (optional)
        """
        self._factory = driver_factory
        self.console = console or Console(stderr=True)

        # Pinned driver for callers that manage connect/disconnect themselves
        self.driver = driver_factory()
        self._dispatch: dict[str, ActionHandler] = type(self.driver).actions()

    @property
    def actions(self) -> list[str]:
        """Names of the domain actions this proxy dispatches."""
        return list(self._dispatch)

    @property
    def destination(self) -> str:
        return self.driver.name

    # Lifecycle methods operate on the pinned driver

    def connect(self, config: Mapping[str, Any] | None = None) -> None:
        self.driver.connect(config)

    def disconnect(self) -> None:
        self.driver.disconnect()

    def test_connection(self, config: Mapping[str, Any] | None = None) -> TestConnectionResult:
        """Run the destination probe inside a scoped connection."""
        return self._with_connection(_test_connection, config)()

    @contextmanager
    def session(self, config: Mapping[str, Any] | None = None) -> Iterator[Driver]:
        """Yield a freshly connected driver, disconnecting it on exit."""
        driver = self._factory()
        try:
            driver.connect(config)
            yield driver
        finally:
            driver.disconnect()

    def call(
        self,
        action: str,
        *args: Any,
        config: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Invoke a domain action by name.

        Args:
            action: Action name (e.g. "insert_data", "accounting.getAccounts")
            *args: Positional arguments for the action
            config: Optional connect-time override of the static settings
            **kwargs: Keyword arguments for the action

        Returns:
            The action's return value, unchanged

        Raises:
            MethodNotFoundError: If the action is not in the dispatch table
        """
        handler = self._lookup(action)
        return self._with_connection(handler, config)(*args, **kwargs)

    def _lookup(self, action: str) -> ActionHandler:
        handler = self._dispatch.get(action)
        if handler is None:
            raise MethodNotFoundError(f"Method {action} not found", action)
        return handler

    def _with_connection(
        self,
        handler: ActionHandler,
        config: Mapping[str, Any] | None = None,
    ) -> Callable[..., Any]:
        @functools.wraps(handler)
        def invoke(*args: Any, **kwargs: Any) -> Any:
            try:
                with self.session(config) as driver:
                    return handler(driver, *args, **kwargs)
            except Exception as e:
                self.console.print(
                    f"[red]Error occurred ===>[/red] {escape(repr(e))}"
                )
                raise

        return invoke

    def __getitem__(self, action: str) -> Callable[..., Any]:
        return self._with_connection(self._lookup(action))

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not found through normal attribute lookup
        dispatch = self.__dict__.get("_dispatch")
        if dispatch is None or name.startswith("__"):
            raise AttributeError(name)

        if name in dispatch:
            return self._with_connection(dispatch[name])

        driver = self.__dict__["driver"]
        if name in driver.STATE_FIELDS:
            return getattr(driver, name)

        raise MethodNotFoundError(f"Method {name} not found", name)

    def __repr__(self) -> str:
        return f"<DriverProxy {self.destination} actions={self.actions}>"


def _test_connection(driver: Driver) -> TestConnectionResult:
    return driver.test_connection()


def build_proxy(
    driver_class: type[Driver],
    config: Mapping[str, Any] | DestinationSettings | None = None,
    console: Console | None = None,
) -> DriverProxy:
    """Validate static configuration and wrap a driver class in a proxy.

    Args:
        driver_class: Concrete driver class
        config: Raw settings mapping or an already-built settings model
        console: Rich console shared by the proxy and its drivers

    Returns:
        DriverProxy seeded with the validated settings
    """
    if isinstance(config, DestinationSettings):
        settings = config
    else:
        settings = driver_class.settings_class.from_mapping(config)

    return DriverProxy(lambda: driver_class(settings, console=console), console=console)

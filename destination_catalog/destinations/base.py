"""Base classes for destination drivers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from rich.console import Console

from destination_catalog.config import DestinationSettings
from destination_catalog.credentials import get_credential_store
from destination_catalog.errors import NotConnectedError

ActionHandler = Callable[..., Any]


@dataclass(frozen=True)
class TestConnectionResult:
    """Result of a destination connectivity check.

    Attributes:
        success: Whether the destination answered a probe request
        message: Human-readable summary message
    """

    __test__ = False

    success: bool
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}


class Driver(ABC):
    """Destination driver holding one vendor client handle.

    Subclasses implement connect/disconnect/test_connection and list their
    domain actions in ``ACTIONS``. The client handle is created by connect()
    and dropped by disconnect(); domain actions raise NotConnectedError
    when no client is held.
    """

    #: Display name used in messages ("BigQuery", "Xero", ...)
    name: ClassVar[str] = "Destination"

    #: Settings model used to validate the static configuration mapping
    settings_class: ClassVar[type[DestinationSettings]] = DestinationSettings

    #: Method names exposed through the lifecycle proxy
    ACTIONS: ClassVar[tuple[str, ...]] = ()

    #: Read-only attributes the proxy forwards from its pinned driver
    STATE_FIELDS: ClassVar[tuple[str, ...]] = ("client",)

    def __init__(
        self,
        settings: DestinationSettings,
        console: Console | None = None,
    ) -> None:
        """Initialize driver.

        Args:
            settings: Construction-time destination settings
            console: Rich console for diagnostics (optional)
        """
        self.settings = settings
        self.console = console or Console(stderr=True)
        self.client: Any = None

    @classmethod
    def actions(cls) -> dict[str, ActionHandler]:
        """Dispatch table mapping action names to unbound handlers.

        Each handler is called as ``handler(driver, *args, **kwargs)``.
        """
        return {action: getattr(cls, action) for action in cls.ACTIONS}

    @property
    def connected(self) -> bool:
        return self.client is not None

    def _resolve_settings(
        self, config: Mapping[str, Any] | None = None
    ) -> DestinationSettings:
        """Merge connect-time overrides over construction-time settings.

        Secrets still missing afterwards are looked up in the credential store.
        """
        settings = self.settings.with_overrides(config)
        return settings.with_credentials(get_credential_store(self.console))

    def _require_client(self) -> Any:
        if self.client is None:
            raise NotConnectedError(self.name)
        return self.client

    @abstractmethod
    def connect(self, config: Mapping[str, Any] | None = None) -> None:
        """Open the vendor client, preferring values from ``config``."""

    def disconnect(self) -> None:
        """Drop the vendor client."""
        self.client = None

    @abstractmethod
    def test_connection(self) -> TestConnectionResult:
        """Probe the destination.

        Raises:
            NotConnectedError: If connect() has not been called
        """

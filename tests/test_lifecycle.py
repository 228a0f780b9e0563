"""Tests for the lifecycle proxy and destination registry."""

from collections.abc import Mapping
from typing import Any, ClassVar
from unittest.mock import MagicMock

import pytest
from pydantic import Field

from destination_catalog.config import DestinationSettings
from destination_catalog.destinations import DESTINATIONS, get_destination
from destination_catalog.destinations.base import Driver, TestConnectionResult
from destination_catalog.destinations.lifecycle import DriverProxy, build_proxy
from destination_catalog.errors import (
    ConfigurationError,
    MethodNotFoundError,
    NotConnectedError,
)


class FakeSettings(DestinationSettings):
    token: str = Field("", alias="FAKE_TOKEN")
    limit: int = Field(10, alias="FAKE_LIMIT")


class FakeDriver(Driver):
    """Driver recording lifecycle events into a shared log."""

    name: ClassVar[str] = "Fake"
    settings_class: ClassVar[type[DestinationSettings]] = FakeSettings
    ACTIONS: ClassVar[tuple[str, ...]] = ("echo", "explode")

    events: ClassVar[list[str]] = []
    instances: ClassVar[list["FakeDriver"]] = []

    def __init__(self, settings: FakeSettings, console: Any = None) -> None:
        super().__init__(settings, console)
        FakeDriver.instances.append(self)

    def connect(self, config: Mapping[str, Any] | None = None) -> None:
        settings = self._resolve_settings(config)
        settings.require("token")
        self.events.append(f"connect:{settings.token}")
        self.client = object()

    def disconnect(self) -> None:
        self.events.append("disconnect")
        super().disconnect()

    def test_connection(self) -> TestConnectionResult:
        self._require_client()
        self.events.append("probe")
        return TestConnectionResult(success=True, message="ok")

    def echo(self, value: Any, suffix: str = "") -> Any:
        self._require_client()
        self.events.append("echo")
        return f"{value}{suffix}"

    def explode(self) -> None:
        self.events.append("explode")
        raise RuntimeError("boom")


@pytest.fixture(autouse=True)
def reset_fake() -> None:
    FakeDriver.events = []
    FakeDriver.instances = []


@pytest.fixture
def proxy(console) -> DriverProxy:
    return build_proxy(FakeDriver, {"FAKE_TOKEN": "static"}, console)


class TestScopedCalls:
    """Tests for connect -> act -> disconnect around every call."""

    def test_call_order(self, proxy: DriverProxy) -> None:
        """Test connect, action and disconnect run in order."""
        assert proxy.echo("hi", suffix="!") == "hi!"
        assert FakeDriver.events == ["connect:static", "echo", "disconnect"]

    def test_disconnect_on_failure(self, proxy: DriverProxy, console) -> None:
        """Test failures still disconnect and re-raise the original error."""
        with pytest.raises(RuntimeError, match="boom"):
            proxy.explode()

        assert FakeDriver.events == ["connect:static", "explode", "disconnect"]
        assert "Error occurred ===>" in console.file.getvalue()
        assert "boom" in console.file.getvalue()

    def test_connect_failure_reported(self, console) -> None:
        """Test a failing connect is reported, re-raised, and still disconnects."""
        proxy = build_proxy(FakeDriver, {}, console)

        with pytest.raises(ConfigurationError, match="FAKE_TOKEN"):
            proxy.echo("hi")

        assert FakeDriver.events == ["disconnect"]
        assert "Error occurred ===>" in console.file.getvalue()

    def test_fresh_driver_per_call(self, proxy: DriverProxy) -> None:
        """Test every call builds its own driver instance."""
        pinned = proxy.driver

        proxy.echo(1)
        proxy.echo(2)

        used = FakeDriver.instances[1:]
        assert len(used) == 2
        assert used[0] is not used[1]
        assert pinned not in used
        assert pinned.client is None

    def test_config_override(self, proxy: DriverProxy) -> None:
        """Test call-time config overrides the static settings."""
        proxy.call("echo", "x", config={"FAKE_TOKEN": "override"})
        assert FakeDriver.events[0] == "connect:override"

    def test_positional_and_keyword_args(self, proxy: DriverProxy) -> None:
        """Test arguments reach the handler unchanged."""
        assert proxy.call("echo", "a", suffix="b") == "ab"
        assert proxy["echo"]("c") == "c"

    def test_test_connection_scoped(self, proxy: DriverProxy) -> None:
        """Test the probe runs inside its own connection."""
        result = proxy.test_connection()

        assert result.success is True
        assert FakeDriver.events == ["connect:static", "probe", "disconnect"]

    def test_session(self, proxy: DriverProxy) -> None:
        """Test session() yields a connected driver and disconnects it."""
        with proxy.session() as driver:
            assert driver.connected

        assert not driver.connected
        assert FakeDriver.events == ["connect:static", "disconnect"]


class TestDispatch:
    """Tests for action lookup."""

    def test_actions(self, proxy: DriverProxy) -> None:
        """Test the proxy lists its driver's actions."""
        assert proxy.actions == ["echo", "explode"]
        assert proxy.destination == "Fake"

    @pytest.mark.parametrize("name", ["nope", "connectt", "insert_data"])
    def test_unknown_attribute(self, proxy: DriverProxy, name: str) -> None:
        """Test unknown members raise MethodNotFoundError."""
        with pytest.raises(MethodNotFoundError, match=f"Method {name} not found"):
            getattr(proxy, name)

    @pytest.mark.parametrize("name", ["nope", "test_connection", "_require_client"])
    def test_unknown_call(self, proxy: DriverProxy, name: str) -> None:
        """Test call() only dispatches declared actions."""
        with pytest.raises(MethodNotFoundError):
            proxy.call(name)

        assert FakeDriver.events == []

    def test_unknown_item(self, proxy: DriverProxy) -> None:
        """Test item access raises for unknown actions."""
        with pytest.raises(MethodNotFoundError):
            proxy["missing"]

    def test_method_not_found_is_attribute_error(self, proxy: DriverProxy) -> None:
        """Test hasattr() works on proxies."""
        assert hasattr(proxy, "echo")
        assert not hasattr(proxy, "missing")

    def test_state_fields_forwarded(self, proxy: DriverProxy) -> None:
        """Test state attributes come from the pinned driver."""
        assert proxy.client is None
        proxy.connect()
        assert proxy.client is not None
        proxy.disconnect()
        assert proxy.client is None

    def test_pinned_driver_actions_require_connect(self, proxy: DriverProxy) -> None:
        """Test the pinned driver refuses actions until connected."""
        with pytest.raises(NotConnectedError, match="Connection to Fake not established"):
            proxy.driver.echo("x")


class TestBuildProxy:
    """Tests for build_proxy and the registry."""

    def test_invalid_config(self, console) -> None:
        """Test invalid static config fails at build time."""
        with pytest.raises(ConfigurationError):
            build_proxy(FakeDriver, {"FAKE_LIMIT": "many"}, console)

    def test_settings_instance_accepted(self, console) -> None:
        """Test an already-built settings model is used as-is."""
        settings = FakeSettings.from_mapping({"FAKE_TOKEN": "t"})
        proxy = build_proxy(FakeDriver, settings, console)

        assert proxy.driver.settings is settings

    def test_registry(self) -> None:
        """Test all destinations are registered."""
        assert set(DESTINATIONS) == {"bigquery", "elasticsearch", "xero"}

    def test_get_destination_case_insensitive(self, console) -> None:
        """Test names are matched case-insensitively."""
        proxy = get_destination("BigQuery", {"GCP_PROJECT_ID": "p"}, console=console)
        assert proxy.destination == "BigQuery"

    def test_get_destination_unknown(self) -> None:
        """Test unknown destinations list the valid names."""
        with pytest.raises(ConfigurationError, match="Valid: bigquery, elasticsearch, xero"):
            get_destination("snowflake")

    def test_get_destination_uses_factory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_destination delegates to the registered factory."""
        factory = MagicMock()
        monkeypatch.setitem(DESTINATIONS, "bigquery", factory)

        result = get_destination("bigquery", {"a": 1})

        factory.assert_called_once_with({"a": 1}, console=None)
        assert result is factory.return_value

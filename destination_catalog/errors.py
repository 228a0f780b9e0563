"""Exceptions raised by destination drivers and the lifecycle proxy."""

from __future__ import annotations


class DestinationError(Exception):
    """Base error for all destination drivers."""

    def __init__(self, message: str, destination: str | None = None) -> None:
        super().__init__(message)
        self.destination = destination


class NotConnectedError(DestinationError):
    """A domain action was invoked before connect() established a client."""

    def __init__(self, destination: str) -> None:
        super().__init__(
            f"Connection to {destination} not established", destination=destination
        )


class ConfigurationError(DestinationError):
    """Destination settings are missing or invalid."""


class UnscopedMutationError(DestinationError):
    """An UPDATE or DELETE was requested without a WHERE clause."""


class SchemaAlteringError(DestinationError):
    """A changeset references a column the remote schema does not declare."""


class UnknownFieldTypeError(DestinationError):
    """A schema field carries a type the DML renderer does not support."""

    def __init__(self, field_type: str | None) -> None:
        super().__init__(f"Unknown type: {field_type}")
        self.field_type = field_type


class UnsupportedApiError(DestinationError):
    """The requested vendor API namespace is not supported."""


class MethodNotFoundError(DestinationError, AttributeError):
    """The requested driver member or vendor method does not exist."""

    def __init__(self, message: str, name: str) -> None:
        super().__init__(message)
        self.name = name

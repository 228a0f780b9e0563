"""Configuration schema for destination-catalog.

Defines the per-destination settings models and the destinations.yml
catalog file format using Pydantic models.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from typing_extensions import Self

from destination_catalog.credentials import CredentialStore
from destination_catalog.errors import ConfigurationError


class DestinationSettings(BaseModel):
    """Base class for static destination configuration.

    Fields accept either their snake_case name or the upper-case key the
    host platform uses (e.g. ``GCP_PROJECT_ID``).
    """

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    # Field name -> credential store key, for secrets that may live in the keychain
    CREDENTIAL_KEYS: ClassVar[dict[str, str]] = {}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Self:
        """Validate settings from a raw configuration mapping.

        Raises:
            ConfigurationError: If the mapping does not validate
        """
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {cls.__name__}: {e}") from e

    @classmethod
    def _field_for_key(cls, key: str) -> str | None:
        for name, info in cls.model_fields.items():
            if key == name or key == info.alias:
                return name
        return None

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> Self:
        """Return a copy where connect-time values replace construction-time ones.

        Unknown keys and empty values are ignored.

        Args:
            overrides: Raw mapping, keyed by field name or alias

        Returns:
            New settings instance
        """
        if not overrides:
            return self

        updates: dict[str, Any] = {}
        for key, value in overrides.items():
            name = self._field_for_key(key)
            if name is None or value is None or value == "":
                continue
            updates[name] = value

        if not updates:
            return self

        try:
            return type(self).model_validate({**self.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {type(self).__name__}: {e}") from e

    def with_credentials(self, store: CredentialStore) -> Self:
        """Fill secrets missing from config using the credential store."""
        updates: dict[str, Any] = {}
        for name, key in self.CREDENTIAL_KEYS.items():
            if getattr(self, name):
                continue
            value = store.get(key)
            if value:
                updates[name] = value

        if not updates:
            return self
        return self.model_copy(update=updates)

    def require(self, *names: str) -> None:
        """Raise ConfigurationError for any empty required field."""
        missing = [
            type(self).model_fields[name].alias or name
            for name in names
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"{type(self).__name__} is missing required values: {', '.join(missing)}"
            )


class BigQuerySettings(DestinationSettings):
    """BigQuery destination configuration.

    Example:
        bigquery:
          GCP_PROJECT_ID: my-gcp-project
          GOOGLE_SERVICE_ACCOUNT_KEY: '{"type": "service_account", ...}'
    """

    service_account_key: str = Field("", alias="GOOGLE_SERVICE_ACCOUNT_KEY")
    project_id: str = Field("", alias="GCP_PROJECT_ID")

    CREDENTIAL_KEYS: ClassVar[dict[str, str]] = {
        "service_account_key": "bigquery-service-account-key",
    }


class XeroTokenSet(BaseModel):
    """Pre-resolved OAuth2 token set (refresh is handled upstream)."""

    access_token: str
    refresh_token: str | None = None
    id_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int | None = None
    expires_at: float | None = None
    scope: list[str] | str | None = None

    model_config = {"frozen": True, "extra": "ignore"}


class XeroOAuth2Config(BaseModel):
    """OAuth2 block of the Xero configuration."""

    redirect_uri: str = Field("", alias="redirectUri")
    scopes: list[str] = Field(default_factory=list)
    resolved: XeroTokenSet

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("scopes", mode="before")
    @classmethod
    def split_scopes(cls, v: Any) -> Any:
        """Accept scopes as a space-separated string."""
        if isinstance(v, str):
            return v.split()
        return v


class XeroSettings(DestinationSettings):
    """Xero destination configuration.

    Example:
        xero:
          XERO_CLIENT_ID: abc
          XERO_CLIENT_SECRET: def
          oauth2:
            redirectUri: https://example.com/callback
            scopes: openid profile email accounting.transactions
            resolved:
              access_token: ...
    """

    client_id: str = Field("", alias="XERO_CLIENT_ID")
    client_secret: str = Field("", alias="XERO_CLIENT_SECRET")
    oauth2: XeroOAuth2Config | None = None

    CREDENTIAL_KEYS: ClassVar[dict[str, str]] = {
        "client_id": "xero-client-id",
        "client_secret": "xero-client-secret",
    }


class ElasticsearchSettings(DestinationSettings):
    """Elasticsearch destination configuration.

    ``tls_ca`` holds PEM content; ``tls_ca_path`` points at a PEM file.
    """

    uri: str = Field("", alias="ELASTIC_SEARCH_URI")
    basic_user: str = Field("", alias="ELASTIC_SEARCH_BASIC_USER")
    basic_password: str = Field("", alias="ELASTIC_SEARCH_BASIC_PASSWORD")
    api_key: str = Field("", alias="ELASTIC_SEARCH_API_KEY")
    tls_ca: str = Field("", alias="ELASTIC_SEARCH_TLS_CA")
    tls_ca_path: str = Field("", alias="ELASTIC_SEARCH_TLS_CA_PATH")

    CREDENTIAL_KEYS: ClassVar[dict[str, str]] = {
        "basic_password": "elasticsearch-password",
        "api_key": "elasticsearch-api-key",
    }

    @field_validator("tls_ca", mode="before")
    @classmethod
    def decode_ca(cls, v: Any) -> Any:
        """Accept the CA bundle as raw bytes."""
        if isinstance(v, bytes):
            return v.decode("utf-8")
        return v

    @field_validator("uri")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CatalogConfig(BaseModel):
    """
    Root configuration for destination-catalog.

    This is the schema for destinations.yml files. Each top-level key names
    a registered destination and holds its raw settings mapping.

    Example:
        bigquery:
          GCP_PROJECT_ID: my-gcp-project

        elasticsearch:
          ELASTIC_SEARCH_URI: https://localhost:9200
          ELASTIC_SEARCH_BASIC_USER: elastic
    """

    destinations: dict[str, dict[str, Any]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("destinations", mode="before")
    @classmethod
    def normalize_names(cls, v: Any) -> Any:
        """Lower-case destination names and treat empty sections as {}."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError(f"destinations must be a mapping, got {type(v).__name__}")
        return {str(name).lower(): section or {} for name, section in v.items()}

    def settings_for(self, name: str) -> dict[str, Any]:
        """Get the raw settings mapping for a destination (empty if absent)."""
        return dict(self.destinations.get(name.lower(), {}))

    @classmethod
    def from_yaml(cls, content: str) -> CatalogConfig:
        """Parse config from YAML string."""
        data = yaml.safe_load(content)
        return cls.model_validate({"destinations": data})

    @classmethod
    def from_file(cls, path: Path | str) -> CatalogConfig:
        """Load config from a YAML file."""
        path = Path(path)
        content = path.read_text(encoding="utf-8")
        return cls.from_yaml(content)


# Config file discovery
CONFIG_FILENAMES = [
    "destinations.yml",
    "destinations.yaml",
    ".destinations.yml",
    ".destinations.yaml",
]


def find_config(start_dir: Path | str | None = None) -> Path | None:
    """
    Find destinations.yml config file.

    Searches in:
    1. start_dir (if provided)
    2. Current working directory
    3. Parent directories up to root

    Args:
        start_dir: Directory to start search from

    Returns:
        Path to config file, or None if not found
    """
    if start_dir is None:
        start_dir = Path.cwd()
    else:
        start_dir = Path(start_dir)

    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Path | str | None = None) -> CatalogConfig:
    """
    Load configuration from file.

    If path is not provided, searches for destinations.yml in current
    and parent directories.

    Args:
        path: Explicit path to config file

    Returns:
        Parsed CatalogConfig

    Raises:
        FileNotFoundError: If no config file found
    """
    if path is None:
        path = find_config()
        if path is None:
            raise FileNotFoundError(
                "No destinations.yml found. Create one or specify path with --config"
            )
    else:
        path = Path(path)

    return CatalogConfig.from_file(path)

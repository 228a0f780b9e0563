"""Secure credential storage using system keychain.

Destination secrets (service-account keys, OAuth client secrets, basic-auth
passwords) can be kept out of destinations.yml. This module resolves them
from:
- Environment variables (for CI/automation and the host platform)
- System keychain storage (macOS Keychain, Windows Credential Locker,
  Linux Secret Service)

Usage:
    from destination_catalog.credentials import CredentialStore

    store = CredentialStore()

    # Get a credential (checks env → keychain)
    key = store.get("bigquery-service-account-key")

    # Store a credential
    store.set("xero-client-secret", secret)

    # Delete a credential
    store.delete("xero-client-secret")
"""

from __future__ import annotations

import os

import keyring
from rich.console import Console

# Service name used for all keychain entries
SERVICE_NAME = "destination-catalog"

# Environment variable mappings - destinations register their own on import
ENV_VAR_MAPPING: dict[str, str] = {}

# Credential keys grouped by destination, for status/clear commands
DESTINATION_CREDENTIALS: dict[str, list[str]] = {}


def register_credential_env_var(
    key: str, env_var: str, destination: str | None = None
) -> None:
    """Register an environment variable mapping for a credential key.

    Destinations should call this to register their credential env vars.

    Args:
        key: Credential key (e.g., "xero-client-id")
        env_var: Environment variable name (e.g., "XERO_CLIENT_ID")
        destination: Destination the credential belongs to
    """
    ENV_VAR_MAPPING[key] = env_var
    if destination:
        keys = DESTINATION_CREDENTIALS.setdefault(destination, [])
        if key not in keys:
            keys.append(key)


def env_var_for(key: str) -> str:
    """Environment variable consulted for a credential key."""
    return ENV_VAR_MAPPING.get(key, f"DC_{key.upper().replace('-', '_')}")


class CredentialStore:
    """Unified credential storage with keychain and environment fallback.

    Priority order for credential resolution:
    1. Environment variable
    2. System keychain
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize credential store.

        Args:
            console: Rich console for diagnostics. If None, creates one.
        """
        self.console = console or Console(stderr=True)

    def get(self, key: str) -> str | None:
        """Get a credential, checking env → keychain.

        Args:
            key: Credential key (e.g., "bigquery-service-account-key")

        Returns:
            The credential string, or None if not found
        """
        env_value = os.environ.get(env_var_for(key))
        if env_value:
            return env_value

        try:
            keychain_value = keyring.get_password(SERVICE_NAME, key)
            if keychain_value:
                return keychain_value
        except keyring.errors.KeyringError:
            # Keychain not available (e.g., headless CI without keychain)
            pass

        return None

    def set(self, key: str, value: str) -> bool:
        """Store a credential in the system keychain.

        Returns:
            True if stored successfully, False if keychain unavailable
        """
        try:
            keyring.set_password(SERVICE_NAME, key, value)
            return True
        except keyring.errors.KeyringError:
            self.console.print(
                "[yellow]Could not save to keychain (keychain unavailable)[/yellow]"
            )
            return False

    def delete(self, key: str) -> bool:
        """Delete a credential from the system keychain.

        Returns:
            True if deleted successfully, False otherwise
        """
        try:
            keyring.delete_password(SERVICE_NAME, key)
            return True
        except keyring.errors.PasswordDeleteError:
            # Password didn't exist
            return False
        except keyring.errors.KeyringError:
            return False

    def exists(self, key: str) -> bool:
        """Check if a credential exists in env or keychain."""
        return self.get(key) is not None


# Module-level convenience functions
_default_store: CredentialStore | None = None


def get_credential_store(console: Console | None = None) -> CredentialStore:
    """Get or create the default credential store.

    Args:
        console: Optional Rich console for diagnostics

    Returns:
        The credential store instance
    """
    global _default_store
    if _default_store is None:
        _default_store = CredentialStore(console)
    return _default_store

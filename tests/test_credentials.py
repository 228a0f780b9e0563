"""Tests for the env/keychain credential store."""

import os
from unittest.mock import patch

import keyring.errors

from destination_catalog.credentials import (
    CredentialStore,
    env_var_for,
    register_credential_env_var,
)


class TestCredentialStore:
    """Tests for CredentialStore lookup order."""

    def test_env_var_wins(self, console) -> None:
        """Test environment variables override the keychain."""
        register_credential_env_var("demo-secret", "DEMO_SECRET")
        store = CredentialStore(console)

        with patch.dict(os.environ, {"DEMO_SECRET": "from-env"}):
            with patch("keyring.get_password", return_value="from-keychain"):
                assert store.get("demo-secret") == "from-env"

    def test_keychain_fallback(self, console) -> None:
        """Test keychain is consulted when the env var is unset."""
        store = CredentialStore(console)

        with patch.dict(os.environ, {}, clear=True):
            with patch("keyring.get_password", return_value="from-keychain") as get:
                assert store.get("xero-client-secret") == "from-keychain"
                get.assert_called_once_with("destination-catalog", "xero-client-secret")

    def test_keychain_unavailable(self, console) -> None:
        """Test a missing keychain backend is treated as not found."""
        store = CredentialStore(console)

        with patch.dict(os.environ, {}, clear=True):
            with patch("keyring.get_password", side_effect=keyring.errors.KeyringError):
                assert store.get("xero-client-secret") is None
                assert store.exists("xero-client-secret") is False

    def test_set_and_delete(self, console) -> None:
        """Test set/delete report keychain success."""
        store = CredentialStore(console)

        with patch("keyring.set_password") as set_password:
            assert store.set("xero-client-id", "abc") is True
            set_password.assert_called_once_with("destination-catalog", "xero-client-id", "abc")

        with patch("keyring.delete_password", side_effect=keyring.errors.PasswordDeleteError):
            assert store.delete("xero-client-id") is False

    def test_set_without_keychain(self, console) -> None:
        """Test set() returns False and explains when the keychain is unavailable."""
        store = CredentialStore(console)

        with patch("keyring.set_password", side_effect=keyring.errors.KeyringError):
            assert store.set("xero-client-id", "abc") is False

        assert "keychain unavailable" in console.file.getvalue()

    def test_default_env_var_name(self) -> None:
        """Test unregistered keys map to DC_-prefixed env vars."""
        assert env_var_for("some-new-key") == "DC_SOME_NEW_KEY"

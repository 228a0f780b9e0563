"""Shared fixtures for destination-catalog tests."""

from __future__ import annotations

import io
from collections.abc import Iterator
from unittest.mock import patch

import pytest
from rich.console import Console

import destination_catalog.credentials as credentials


@pytest.fixture
def console() -> Console:
    """Console writing to an in-memory buffer (read with console.file.getvalue())."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture(autouse=True)
def no_keychain() -> Iterator[None]:
    """Keep tests away from the real system keychain."""
    credentials._default_store = None
    with patch("keyring.get_password", return_value=None):
        yield
    credentials._default_store = None

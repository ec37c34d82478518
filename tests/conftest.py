"""Shared pytest fixtures for aptmirror tests."""

import pytest

from tests.helpers import PACKAGES_TEXT, RELEASE_TEXT


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def release_text() -> str:
    return RELEASE_TEXT


@pytest.fixture
def packages_text() -> str:
    return PACKAGES_TEXT

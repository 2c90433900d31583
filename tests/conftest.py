# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (mocked AsyncSession)
- Integration tests (SQLite engine)
- API tests (FastAPI TestClient)
"""

import os

# Rate limiting is configured at import time of the API package.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import Generator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402

from courseflow.core.config import clear_settings_cache  # noqa: E402
from courseflow.domains.access.policy import Principal, Role  # noqa: E402
from courseflow.infrastructure.events import reset_event_bus, reset_event_notifier  # noqa: E402


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (SQLite engine)"
    )
    config.addinivalue_line("markers", "api: mark test as an HTTP-level test")


# =============================================================================
# Global state
# =============================================================================


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached settings and event singletons around every test."""
    yield
    clear_settings_cache()
    reset_event_notifier()
    reset_event_bus()


# =============================================================================
# Principals
# =============================================================================


@pytest.fixture
def admin() -> Principal:
    """Provide an admin principal."""
    return Principal(id=str(uuid4()), role=Role.ADMIN)


@pytest.fixture
def instructor() -> Principal:
    """Provide an instructor principal."""
    return Principal(id=str(uuid4()), role=Role.INSTRUCTOR)


@pytest.fixture
def other_instructor() -> Principal:
    """Provide a second instructor principal."""
    return Principal(id=str(uuid4()), role=Role.INSTRUCTOR)


@pytest.fixture
def student() -> Principal:
    """Provide a student principal."""
    return Principal(id=str(uuid4()), role=Role.STUDENT)


@pytest.fixture
def other_student() -> Principal:
    """Provide a second student principal."""
    return Principal(id=str(uuid4()), role=Role.STUDENT)


# =============================================================================
# Mocked collaborators
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def mock_notifier() -> MagicMock:
    """Create mock event notifier."""
    notifier = MagicMock()
    notifier.emit = MagicMock(return_value=True)
    return notifier

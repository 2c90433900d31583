# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for HTTP-level tests.

The application runs with its real lifespan against a throwaway SQLite file
whose schema and users are prepared before the client starts.
"""

import asyncio
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from courseflow.api.app import create_app
from courseflow.core.config import clear_settings_cache
from courseflow.domains.access.policy import Role
from courseflow.infrastructure.database import create_engine_from_url, create_schema
from courseflow.infrastructure.database.models import User

USERS = {
    "admin": ("Alice Admin", Role.ADMIN),
    "i1": ("Ian Instructor", Role.INSTRUCTOR),
    "i2": ("Irene Instructor", Role.INSTRUCTOR),
    "s1": ("Sam Student", Role.STUDENT),
    "s2": ("Sara Student", Role.STUDENT),
}


async def _prepare_database(url: str) -> None:
    engine = create_engine_from_url(url)
    try:
        await create_schema(engine)
        async with engine.begin() as conn:
            await conn.execute(
                User.__table__.insert(),
                [
                    {"id": key, "name": name, "email": f"{key}@example.com", "role": role.value}
                    for key, (name, role) in USERS.items()
                ],
            )
    finally:
        await engine.dispose()


@pytest.fixture
def client(tmp_path, monkeypatch) -> Generator[TestClient, None, None]:
    """Create a test client for the full application."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"
    monkeypatch.setenv("DB_URL", url)
    monkeypatch.setenv("EVENTS_LOG_BROADCAST", "false")
    clear_settings_cache()
    asyncio.run(_prepare_database(url))

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def headers() -> dict[str, dict[str, str]]:
    """Gateway identity headers per seeded user."""
    return {
        key: {"X-Principal-Id": key, "X-Principal-Role": role.value}
        for key, (_, role) in USERS.items()
    }

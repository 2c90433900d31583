# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for integration tests against a real SQLAlchemy engine.

Each test gets a fresh aiosqlite file database. Every store operation runs
in its own short-lived session, the way a request would.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from courseflow.domains.access.policy import Principal, Role
from courseflow.infrastructure.database import (
    create_engine_from_url,
    create_schema,
    create_sessionmaker,
)
from courseflow.infrastructure.database.models import User
from courseflow.infrastructure.events import EventBus, EventData, EventNotifier, EventPatterns


def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
    dbapi_connection.isolation_level = None


def _begin_immediate(conn: Any) -> None:
    # Take the write lock up front so concurrent sessions queue instead of deadlocking.
    conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a file-backed SQLite engine with the schema in place."""
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'courseflow.db'}")
    event.listen(engine.sync_engine, "connect", _disable_driver_transactions)
    event.listen(engine.sync_engine, "begin", _begin_immediate)

    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def users(sessionmaker) -> dict[str, Principal]:
    """Seed one admin, two instructors and two students."""
    seed = {
        "admin": ("Alice Admin", Role.ADMIN),
        "i1": ("Ian Instructor", Role.INSTRUCTOR),
        "i2": ("Irene Instructor", Role.INSTRUCTOR),
        "s1": ("Sam Student", Role.STUDENT),
        "s2": ("Sara Student", Role.STUDENT),
    }
    principals: dict[str, Principal] = {}

    async with sessionmaker() as session:
        for key, (name, role) in seed.items():
            user = User(name=name, email=f"{key}@example.com", role=role.value)
            session.add(user)
            await session.flush()
            principals[key] = Principal(id=user.id, role=role)
        await session.commit()

    return principals


@pytest.fixture
def events() -> list[EventData]:
    """Events delivered to the bus, in delivery order."""
    return []


@pytest.fixture
def notifier(events: list[EventData]) -> EventNotifier:
    """Notifier on a private bus that records every delivered event."""
    bus = EventBus()

    async def record(event: EventData) -> None:
        events.append(event)

    bus.subscribe(EventPatterns.ALL, record)
    return EventNotifier(bus=bus)


@pytest.fixture
def run(sessionmaker, notifier) -> Callable[..., Awaitable[Any]]:
    """Call a service method inside a fresh session.

    Usage: ``await run(EnrollmentService, "enroll", principal, course_id)``
    """

    async def _run(service_cls: type, method: str, *args: Any, **kwargs: Any) -> Any:
        async with sessionmaker() as session:
            service = service_cls(session, notifier)
            return await getattr(service, method)(*args, **kwargs)

    return _run

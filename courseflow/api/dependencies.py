# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Dependencies are used to:
- Get database sessions
- Get the authenticated principal
- Get service instances

Example:
    @router.get("/courses")
    async def list_courses(
        principal: Principal = Depends(require_principal),
        service: CourseService = Depends(get_course_service),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from courseflow.api.middleware.principal import get_current_principal
from courseflow.core.config import get_settings
from courseflow.domains.access.policy import Principal
from courseflow.domains.assignment.service import AssignmentService
from courseflow.domains.course.service import CourseService
from courseflow.domains.enrollment.service import EnrollmentService
from courseflow.domains.errors import UnauthorizedError
from courseflow.domains.submission.service import SubmissionService
from courseflow.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the database connection pool."""
    await init_database(get_settings())


async def close_db() -> None:
    """Close the database connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for one request.

    Yields:
        AsyncSession, committed on success and rolled back on error.
    """
    async with get_session() as session:
        yield session


def require_principal(request: Request) -> Principal:
    """Require an authenticated principal.

    Args:
        request: HTTP request.

    Returns:
        Principal.

    Raises:
        UnauthorizedError: If no principal is attached to the request.
    """
    principal = get_current_principal(request)
    if principal is None:
        raise UnauthorizedError("Not authenticated")
    return principal


def get_course_service(db: AsyncSession = Depends(get_db)) -> CourseService:
    """Get course service instance."""
    return CourseService(db)


def get_enrollment_service(db: AsyncSession = Depends(get_db)) -> EnrollmentService:
    """Get enrollment service instance."""
    return EnrollmentService(db)


def get_assignment_service(db: AsyncSession = Depends(get_db)) -> AssignmentService:
    """Get assignment service instance."""
    return AssignmentService(db)


def get_submission_service(db: AsyncSession = Depends(get_db)) -> SubmissionService:
    """Get submission service instance."""
    return SubmissionService(db)

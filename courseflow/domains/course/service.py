# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service for managing the course catalog.

This module provides the CourseService class for:
- Role-scoped course listing (admin all, instructor own, student published)
- Course creation and deletion by admins
- Course updates by admins or the owning instructor
"""

from __future__ import annotations

import logging

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from courseflow.domains import projections
from courseflow.domains.access.policy import (
    Action,
    Principal,
    Resource,
    ResourceContext,
    Role,
    Scope,
    authorize,
    require_scope,
)
from courseflow.domains.errors import ForbiddenError, NotFoundError, ValidationError
from courseflow.infrastructure.database.models import Course, User
from courseflow.infrastructure.events import EventNotifier, EventTypes, get_event_notifier
from courseflow.models.course import CourseCreateRequest, CourseResponse, CourseUpdateRequest
from courseflow.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class CourseNotFoundError(NotFoundError):
    """Raised when course is not found."""

    pass


class InvalidInstructorError(ValidationError):
    """Raised when the referenced user is missing or not an instructor."""

    pass


class InstructorReassignmentError(ForbiddenError):
    """Raised when a non-admin tries to change a course's instructor."""

    pass


class CourseService:
    """Service for managing courses.

    Attributes:
        db: Async database session.
        notifier: Outbound domain event queue.
    """

    def __init__(self, db: AsyncSession, notifier: EventNotifier | None = None) -> None:
        """Initialize course service.

        Args:
            db: Async database session.
            notifier: Event notifier. Defaults to the process-wide notifier.
        """
        self.db = db
        self.notifier = notifier or get_event_notifier()

    async def list_visible(self, principal: Principal) -> list[CourseResponse]:
        """List the courses a principal may read.

        Args:
            principal: The caller.

        Returns:
            Courses, newest first.
        """
        scope = require_scope(principal, Action.READ, Resource.COURSE)
        query = self._apply_read_scope(select(Course), principal, scope)
        result = await self.db.execute(query.order_by(Course.created_at.desc()))
        return await projections.project_courses(self.db, result.scalars().all())

    async def get_by_id(self, principal: Principal, course_id: str) -> CourseResponse:
        """Get a course.

        Args:
            principal: The caller.
            course_id: Course identifier.

        Returns:
            Course response.

        Raises:
            ForbiddenError: If the principal may not read the course.
            CourseNotFoundError: If course not found.
        """
        require_scope(principal, Action.READ, Resource.COURSE)
        course = await self._get_course(course_id)
        authorize(principal, Action.READ, Resource.COURSE, self._context(course))
        return await self._to_response(course)

    async def create(self, principal: Principal, request: CourseCreateRequest) -> CourseResponse:
        """Create a course.

        Args:
            principal: The caller. Must be an admin.
            request: Course data.

        Returns:
            Created course.

        Raises:
            ForbiddenError: If the principal is not an admin.
            InvalidInstructorError: If instructor_id is not an instructor.
        """
        authorize(principal, Action.CREATE, Resource.COURSE)
        await self._get_instructor(request.instructor_id)

        course = Course(
            title=request.title,
            description=request.description,
            instructor_id=request.instructor_id,
            category=request.category,
            duration=request.duration or "Self-paced",
            content=[lesson.model_dump() for lesson in request.content],
            is_published=request.is_published,
        )

        self.db.add(course)
        await self.db.commit()
        await self.db.refresh(course)

        logger.info(
            "Created course: id=%s, instructor=%s, by=%s",
            course.id,
            course.instructor_id,
            principal.id,
        )

        response = await self._to_response(course)
        self.notifier.emit(EventTypes.Course.CREATED, response.model_dump(mode="json"))
        return response

    async def update(
        self,
        principal: Principal,
        course_id: str,
        request: CourseUpdateRequest,
    ) -> CourseResponse:
        """Update a course.

        Empty fields are left unchanged; is_published is applied whenever
        supplied.

        Args:
            principal: The caller. Admin or the owning instructor.
            course_id: Course identifier.
            request: Fields to change.

        Returns:
            Updated course.

        Raises:
            ForbiddenError: If the principal may not update the course.
            CourseNotFoundError: If course not found.
            InstructorReassignmentError: If a non-admin changes instructor_id.
            InvalidInstructorError: If the new instructor is not an instructor.
        """
        require_scope(principal, Action.UPDATE, Resource.COURSE)
        course = await self._get_course(course_id)
        authorize(principal, Action.UPDATE, Resource.COURSE, self._context(course))

        if request.instructor_id and request.instructor_id != course.instructor_id:
            if not principal.is_admin:
                raise InstructorReassignmentError("Only admins can reassign a course instructor")
            await self._get_instructor(request.instructor_id)
            course.instructor_id = request.instructor_id

        if request.title:
            course.title = request.title
        if request.description:
            course.description = request.description
        if request.category:
            course.category = request.category
        if request.duration:
            course.duration = request.duration
        if request.content is not None:
            course.content = [lesson.model_dump() for lesson in request.content]
        if request.is_published is not None:
            course.is_published = request.is_published
        course.updated_at = utc_now()

        await self.db.commit()
        await self.db.refresh(course)

        logger.info("Updated course: id=%s, by=%s", course.id, principal.id)

        response = await self._to_response(course)
        self.notifier.emit(EventTypes.Course.UPDATED, response.model_dump(mode="json"))
        return response

    async def delete(self, principal: Principal, course_id: str) -> None:
        """Delete a course with its enrollments, assignments and submissions.

        Args:
            principal: The caller. Must be an admin.
            course_id: Course identifier.

        Raises:
            ForbiddenError: If the principal is not an admin.
            CourseNotFoundError: If course not found.
        """
        authorize(principal, Action.DELETE, Resource.COURSE)
        course = await self._get_course(course_id)

        await self.db.delete(course)
        await self.db.commit()

        logger.info("Deleted course: id=%s, by=%s", course_id, principal.id)
        self.notifier.emit(EventTypes.Course.DELETED, {"id": course_id})

    @staticmethod
    def _context(course: Course) -> ResourceContext:
        return ResourceContext(owner_id=course.instructor_id, is_published=course.is_published)

    @staticmethod
    def _apply_read_scope(query: Select, principal: Principal, scope: Scope) -> Select:
        if scope == Scope.OWN:
            return query.where(Course.instructor_id == principal.id)
        if scope == Scope.PUBLISHED:
            return query.where(Course.is_published.is_(True))
        return query

    async def _get_course(self, course_id: str) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If not found.
        """
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        course = result.scalar_one_or_none()

        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")

        return course

    async def _get_instructor(self, user_id: str) -> User:
        """Get a user that must hold the instructor role.

        Raises:
            InvalidInstructorError: If missing or not an instructor.
        """
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            raise InvalidInstructorError(f"Instructor {user_id} not found")
        if user.role != Role.INSTRUCTOR.value:
            raise InvalidInstructorError(f"User {user_id} is not an instructor")

        return user

    async def _to_response(self, course: Course) -> CourseResponse:
        responses = await projections.project_courses(self.db, [course])
        return responses[0]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student course enrollments.

This module provides the EnrollmentService class for:
- Student enrollment in published courses
- Role-scoped enrollment queries
- Progress and status updates by the course instructor
- Enrollment removal by admins

At most one enrollment exists per (student, course). The service checks
for an existing row first, and the store's unique constraint settles
concurrent enrollments that both pass that check.
"""

from __future__ import annotations

import logging

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
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
from courseflow.domains.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from courseflow.infrastructure.database import is_unique_violation
from courseflow.infrastructure.database.models import Course, Enrollment, User
from courseflow.infrastructure.events import EventNotifier, EventTypes, get_event_notifier
from courseflow.models.common import EnrollmentStatus
from courseflow.models.enrollment import EnrollmentResponse, EnrollmentUpdateRequest
from courseflow.utils.datetime import utc_now

logger = logging.getLogger(__name__)

UNIQUE_ENROLLMENT = "uq_enrollments_student_course"


class CourseNotFoundError(NotFoundError):
    """Raised when course is not found."""

    pass


class StudentNotFoundError(NotFoundError):
    """Raised when student is not found."""

    pass


class EnrollmentNotFoundError(NotFoundError):
    """Raised when enrollment is not found."""

    pass


class CourseNotPublishedError(InvalidStateError):
    """Raised when enrolling in an unpublished course."""

    pass


class AlreadyEnrolledError(ConflictError):
    """Raised when student is already enrolled in course."""

    pass


class InvalidProgressError(ValidationError):
    """Raised when progress falls outside 0-100."""

    pass


class EnrollmentService:
    """Service for managing course enrollments.

    Attributes:
        db: Async database session.
        notifier: Outbound domain event queue.
    """

    def __init__(self, db: AsyncSession, notifier: EventNotifier | None = None) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
            notifier: Event notifier. Defaults to the process-wide notifier.
        """
        self.db = db
        self.notifier = notifier or get_event_notifier()

    async def enroll(
        self,
        principal: Principal,
        course_id: str,
        student_id: str | None = None,
    ) -> EnrollmentResponse:
        """Enroll a student in a course.

        Args:
            principal: The caller. Students enroll themselves; admins may
                enroll any student.
            course_id: Course identifier.
            student_id: Student to enroll. Defaults to the caller.

        Returns:
            Enrollment response.

        Raises:
            ForbiddenError: If the principal may not create this enrollment.
            CourseNotFoundError: If course not found.
            StudentNotFoundError: If an explicitly given student is not found.
            CourseNotPublishedError: If the course is not published.
            AlreadyEnrolledError: If the student is already enrolled.
        """
        target_id = student_id or principal.id
        authorize(
            principal,
            Action.CREATE,
            Resource.ENROLLMENT,
            ResourceContext(owner_id=target_id),
        )

        course = await self._get_course(course_id)
        if target_id != principal.id:
            await self._get_student(target_id)

        if not course.is_published:
            raise CourseNotPublishedError("Cannot enroll in unpublished course")

        if await self._find_enrollment(target_id, course_id):
            raise AlreadyEnrolledError("Already enrolled in this course")

        enrollment = Enrollment(
            student_id=target_id,
            course_id=course_id,
            enrolled_at=utc_now(),
            progress=0,
            status=EnrollmentStatus.ACTIVE.value,
        )

        self.db.add(enrollment)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not is_unique_violation(e, Enrollment.__table__, UNIQUE_ENROLLMENT):
                # The course was deleted after it was looked up.
                raise CourseNotFoundError(f"Course {course_id} not found") from e
            logger.warning(
                "Rejected concurrent duplicate enrollment: student=%s, course=%s",
                target_id,
                course_id,
            )
            raise AlreadyEnrolledError("Already enrolled in this course") from e
        await self.db.refresh(enrollment)

        logger.info(
            "Enrolled student: student=%s, course=%s, by=%s",
            target_id,
            course_id,
            principal.id,
        )

        response = await self._to_response(enrollment)
        self.notifier.emit(EventTypes.Enrollment.CREATED, response.model_dump(mode="json"))
        return response

    async def list_visible(self, principal: Principal) -> list[EnrollmentResponse]:
        """List every enrollment the principal may read."""
        return await self._list(principal, self._visible_query(principal))

    async def list_for_student(
        self,
        principal: Principal,
        student_id: str,
    ) -> list[EnrollmentResponse]:
        """List a student's enrollments, filtered to what the principal may read.

        Args:
            principal: The caller.
            student_id: Student identifier.

        Returns:
            Enrollments, newest first.
        """
        query = self._visible_query(principal).where(Enrollment.student_id == student_id)
        return await self._list(principal, query)

    async def list_for_course(
        self,
        principal: Principal,
        course_id: str,
    ) -> list[EnrollmentResponse]:
        """List a course's enrollments, filtered to what the principal may read.

        Raises:
            CourseNotFoundError: If course not found.
        """
        require_scope(principal, Action.READ, Resource.ENROLLMENT)
        await self._get_course(course_id)
        query = self._visible_query(principal).where(Enrollment.course_id == course_id)
        return await self._list(principal, query)

    async def get_by_id(self, principal: Principal, enrollment_id: str) -> EnrollmentResponse:
        """Get an enrollment.

        Raises:
            ForbiddenError: If the principal may not read it.
            EnrollmentNotFoundError: If enrollment not found.
        """
        require_scope(principal, Action.READ, Resource.ENROLLMENT)
        enrollment = await self._get_enrollment(enrollment_id)
        context = await self._context(principal, enrollment)
        authorize(principal, Action.READ, Resource.ENROLLMENT, context)
        return await self._to_response(enrollment)

    async def update(
        self,
        principal: Principal,
        enrollment_id: str,
        request: EnrollmentUpdateRequest,
    ) -> EnrollmentResponse:
        """Update progress or status of an enrollment.

        Moving to completed stamps completed_at; moving away clears it.

        Args:
            principal: The caller. Admin or the course's instructor.
            enrollment_id: Enrollment identifier.
            request: Fields to change.

        Returns:
            Updated enrollment.

        Raises:
            ForbiddenError: If the principal may not update it.
            EnrollmentNotFoundError: If enrollment not found.
            InvalidProgressError: If progress is outside 0-100.
        """
        require_scope(principal, Action.UPDATE, Resource.ENROLLMENT)
        enrollment = await self._get_enrollment(enrollment_id)
        course = await self._get_course(enrollment.course_id)
        authorize(
            principal,
            Action.UPDATE,
            Resource.ENROLLMENT,
            ResourceContext(owner_id=course.instructor_id),
        )

        if request.progress is not None:
            if not 0 <= request.progress <= 100:
                raise InvalidProgressError("Progress must be between 0 and 100")
            enrollment.progress = request.progress

        if request.status is not None:
            if request.status == EnrollmentStatus.COMPLETED:
                if enrollment.status != EnrollmentStatus.COMPLETED.value:
                    enrollment.completed_at = utc_now()
            else:
                enrollment.completed_at = None
            enrollment.status = request.status.value

        await self.db.commit()
        await self.db.refresh(enrollment)

        logger.info(
            "Updated enrollment: id=%s, status=%s, progress=%s, by=%s",
            enrollment.id,
            enrollment.status,
            enrollment.progress,
            principal.id,
        )

        response = await self._to_response(enrollment)
        self.notifier.emit(EventTypes.Enrollment.UPDATED, response.model_dump(mode="json"))
        return response

    async def delete(self, principal: Principal, enrollment_id: str) -> None:
        """Remove an enrollment record.

        Raises:
            ForbiddenError: If the principal is not an admin.
            EnrollmentNotFoundError: If enrollment not found.
        """
        authorize(principal, Action.DELETE, Resource.ENROLLMENT)
        enrollment = await self._get_enrollment(enrollment_id)

        await self.db.delete(enrollment)
        await self.db.commit()

        logger.info("Removed enrollment: id=%s, by=%s", enrollment_id, principal.id)
        self.notifier.emit(EventTypes.Enrollment.DELETED, {"id": enrollment_id})

    def _visible_query(self, principal: Principal) -> Select:
        scope = require_scope(principal, Action.READ, Resource.ENROLLMENT)
        query = select(Enrollment)
        if scope == Scope.OWN:
            if principal.role == Role.INSTRUCTOR:
                query = query.join(Course, Course.id == Enrollment.course_id).where(
                    Course.instructor_id == principal.id
                )
            else:
                query = query.where(Enrollment.student_id == principal.id)
        return query

    async def _list(self, principal: Principal, query: Select) -> list[EnrollmentResponse]:
        result = await self.db.execute(query.order_by(Enrollment.enrolled_at.desc()))
        return await projections.project_enrollments(self.db, result.scalars().all())

    async def _context(self, principal: Principal, enrollment: Enrollment) -> ResourceContext:
        """Build the ownership facts for a single enrollment.

        Instructors own enrollments through the course; students own their own.
        """
        if principal.role == Role.INSTRUCTOR:
            course = await self._get_course(enrollment.course_id)
            return ResourceContext(owner_id=course.instructor_id)
        return ResourceContext(owner_id=enrollment.student_id)

    async def _find_enrollment(self, student_id: str, course_id: str) -> Enrollment | None:
        query = select(Enrollment).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _get_enrollment(self, enrollment_id: str) -> Enrollment:
        """Get enrollment by ID.

        Raises:
            EnrollmentNotFoundError: If not found.
        """
        result = await self.db.execute(select(Enrollment).where(Enrollment.id == enrollment_id))
        enrollment = result.scalar_one_or_none()

        if not enrollment:
            raise EnrollmentNotFoundError(f"Enrollment {enrollment_id} not found")

        return enrollment

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

    async def _get_student(self, student_id: str) -> User:
        """Get student user by ID.

        Raises:
            StudentNotFoundError: If not found or not a student.
        """
        result = await self.db.execute(select(User).where(User.id == student_id))
        user = result.scalar_one_or_none()

        if not user or user.role != Role.STUDENT.value:
            raise StudentNotFoundError(f"Student {student_id} not found")

        return user

    async def _to_response(self, enrollment: Enrollment) -> EnrollmentResponse:
        responses = await projections.project_enrollments(self.db, [enrollment])
        return responses[0]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment service for managing course assignments.

This module provides the AssignmentService class for:
- Assignment creation by the course's instructor or an admin
- Updates and deletion by the assignment's instructor or an admin
- Role-scoped listing (admin all, instructor own, student enrolled courses)
"""

from __future__ import annotations

import logging
import math

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from courseflow.domains import projections
from courseflow.domains.access.policy import (
    Action,
    Principal,
    Resource,
    ResourceContext,
    Scope,
    authorize,
    require_scope,
)
from courseflow.domains.errors import NotFoundError, ValidationError
from courseflow.infrastructure.database.models import Assignment, Course, Enrollment
from courseflow.infrastructure.events import EventNotifier, EventTypes, get_event_notifier
from courseflow.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentUpdateRequest,
)
from courseflow.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AssignmentNotFoundError(NotFoundError):
    """Raised when assignment is not found."""

    pass


class CourseNotFoundError(NotFoundError):
    """Raised when course is not found."""

    pass


class InvalidPointsError(ValidationError):
    """Raised when total_points is not positive."""

    pass


class AssignmentService:
    """Service for managing assignments.

    Attributes:
        db: Async database session.
        notifier: Outbound domain event queue.
    """

    def __init__(self, db: AsyncSession, notifier: EventNotifier | None = None) -> None:
        """Initialize assignment service.

        Args:
            db: Async database session.
            notifier: Event notifier. Defaults to the process-wide notifier.
        """
        self.db = db
        self.notifier = notifier or get_event_notifier()

    async def list_visible(self, principal: Principal) -> list[AssignmentResponse]:
        """List every assignment the principal may read."""
        return await self._list(self._visible_query(principal))

    async def list_for_course(
        self,
        principal: Principal,
        course_id: str,
    ) -> list[AssignmentResponse]:
        """List a course's assignments, filtered to what the principal may read.

        Raises:
            CourseNotFoundError: If course not found.
        """
        query = self._visible_query(principal)
        await self._get_course(course_id)
        return await self._list(query.where(Assignment.course_id == course_id))

    async def get_by_id(self, principal: Principal, assignment_id: str) -> AssignmentResponse:
        """Get an assignment.

        Raises:
            ForbiddenError: If the principal may not read it.
            AssignmentNotFoundError: If assignment not found.
        """
        scope = require_scope(principal, Action.READ, Resource.ASSIGNMENT)
        assignment = await self._get_assignment(assignment_id)

        is_enrolled = False
        if scope == Scope.ENROLLED:
            is_enrolled = await self._is_enrolled(principal.id, assignment.course_id)

        authorize(
            principal,
            Action.READ,
            Resource.ASSIGNMENT,
            ResourceContext(owner_id=assignment.instructor_id, is_enrolled=is_enrolled),
        )
        return await self._to_response(assignment)

    async def create(
        self,
        principal: Principal,
        request: AssignmentCreateRequest,
    ) -> AssignmentResponse:
        """Create an assignment.

        The course's instructor is recorded as the assignment's instructor,
        even when an admin creates it.

        Args:
            principal: The caller. Admin or the course's instructor.
            request: Assignment data.

        Returns:
            Created assignment.

        Raises:
            ForbiddenError: If the principal does not own the course.
            CourseNotFoundError: If course not found.
            InvalidPointsError: If total_points is not a positive finite number.
        """
        require_scope(principal, Action.CREATE, Resource.ASSIGNMENT)
        course = await self._get_course(request.course_id)
        authorize(
            principal,
            Action.CREATE,
            Resource.ASSIGNMENT,
            ResourceContext(owner_id=course.instructor_id),
            message="Not authorized to add assignments to this course",
        )

        if not math.isfinite(request.total_points) or request.total_points <= 0:
            raise InvalidPointsError("Total points must be greater than 0")

        assignment = Assignment(
            title=request.title,
            description=request.description,
            course_id=request.course_id,
            instructor_id=course.instructor_id,
            due_date=request.due_date,
            total_points=request.total_points,
            attachments=[a.model_dump() for a in request.attachments],
        )

        self.db.add(assignment)
        await self.db.commit()
        await self.db.refresh(assignment)

        logger.info(
            "Created assignment: id=%s, course=%s, by=%s",
            assignment.id,
            assignment.course_id,
            principal.id,
        )

        response = await self._to_response(assignment)
        self.notifier.emit(EventTypes.Assignment.CREATED, response.model_dump(mode="json"))
        return response

    async def update(
        self,
        principal: Principal,
        assignment_id: str,
        request: AssignmentUpdateRequest,
    ) -> AssignmentResponse:
        """Update an assignment. Empty fields are left unchanged.

        Raises:
            ForbiddenError: If the principal is not the assignment's instructor.
            AssignmentNotFoundError: If assignment not found.
            InvalidPointsError: If a supplied total_points is negative or not finite.
        """
        require_scope(principal, Action.UPDATE, Resource.ASSIGNMENT)
        assignment = await self._get_assignment(assignment_id)
        authorize(
            principal,
            Action.UPDATE,
            Resource.ASSIGNMENT,
            ResourceContext(owner_id=assignment.instructor_id),
        )

        if request.total_points is not None and (
            not math.isfinite(request.total_points) or request.total_points < 0
        ):
            raise InvalidPointsError("Total points must be greater than 0")

        if request.title:
            assignment.title = request.title
        if request.description:
            assignment.description = request.description
        if request.due_date:
            assignment.due_date = request.due_date
        if request.total_points:
            assignment.total_points = request.total_points
        if request.attachments is not None:
            assignment.attachments = [a.model_dump() for a in request.attachments]
        assignment.updated_at = utc_now()

        await self.db.commit()
        await self.db.refresh(assignment)

        logger.info("Updated assignment: id=%s, by=%s", assignment.id, principal.id)

        response = await self._to_response(assignment)
        self.notifier.emit(EventTypes.Assignment.UPDATED, response.model_dump(mode="json"))
        return response

    async def delete(self, principal: Principal, assignment_id: str) -> None:
        """Delete an assignment and its submissions.

        Raises:
            ForbiddenError: If the principal is not the assignment's instructor.
            AssignmentNotFoundError: If assignment not found.
        """
        require_scope(principal, Action.DELETE, Resource.ASSIGNMENT)
        assignment = await self._get_assignment(assignment_id)
        authorize(
            principal,
            Action.DELETE,
            Resource.ASSIGNMENT,
            ResourceContext(owner_id=assignment.instructor_id),
        )

        await self.db.delete(assignment)
        await self.db.commit()

        logger.info("Deleted assignment: id=%s, by=%s", assignment_id, principal.id)
        self.notifier.emit(EventTypes.Assignment.DELETED, {"id": assignment_id})

    def _visible_query(self, principal: Principal) -> Select:
        scope = require_scope(principal, Action.READ, Resource.ASSIGNMENT)
        query = select(Assignment)
        if scope == Scope.OWN:
            query = query.where(Assignment.instructor_id == principal.id)
        elif scope == Scope.ENROLLED:
            enrolled_courses = select(Enrollment.course_id).where(
                Enrollment.student_id == principal.id
            )
            query = query.where(Assignment.course_id.in_(enrolled_courses))
        return query

    async def _list(self, query: Select) -> list[AssignmentResponse]:
        result = await self.db.execute(query.order_by(Assignment.due_date.asc()))
        return await projections.project_assignments(self.db, result.scalars().all())

    async def _is_enrolled(self, student_id: str, course_id: str) -> bool:
        query = select(Enrollment.id).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none() is not None

    async def _get_assignment(self, assignment_id: str) -> Assignment:
        """Get assignment by ID.

        Raises:
            AssignmentNotFoundError: If not found.
        """
        result = await self.db.execute(select(Assignment).where(Assignment.id == assignment_id))
        assignment = result.scalar_one_or_none()

        if not assignment:
            raise AssignmentNotFoundError(f"Assignment {assignment_id} not found")

        return assignment

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

    async def _to_response(self, assignment: Assignment) -> AssignmentResponse:
        responses = await projections.project_assignments(self.db, [assignment])
        return responses[0]

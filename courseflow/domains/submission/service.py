# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission service implementing the submit / revise / grade workflow.

States:
    submitted -> graded (grade)
    graded -> graded (re-grade overwrites)
    returned: reserved; no operation currently enters it.

There is no way back from graded to submitted. A revise racing a grade is
last-writer-wins at the row level.

At most one submission exists per (assignment, student). As with
enrollments, the store's unique constraint settles concurrent submits.
"""

from __future__ import annotations

import logging

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from courseflow.domains import projections
from courseflow.domains.access.policy import (
    Action,
    Decision,
    Principal,
    Resource,
    ResourceContext,
    Role,
    Scope,
    authorize,
    decide,
    require_scope,
)
from courseflow.domains.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from courseflow.infrastructure.database import is_unique_violation
from courseflow.infrastructure.database.models import Assignment, Enrollment, Submission
from courseflow.infrastructure.events import EventNotifier, EventTypes, get_event_notifier
from courseflow.models.common import SubmissionStatus
from courseflow.models.submission import (
    GradeRequest,
    SubmissionCreateRequest,
    SubmissionResponse,
    SubmissionReviseRequest,
)
from courseflow.utils.datetime import utc_now

logger = logging.getLogger(__name__)

UNIQUE_SUBMISSION = "uq_submissions_assignment_student"
GRADABLE_STATES = frozenset({SubmissionStatus.SUBMITTED.value, SubmissionStatus.GRADED.value})


class SubmissionNotFoundError(NotFoundError):
    """Raised when submission is not found."""

    pass


class AssignmentNotFoundError(NotFoundError):
    """Raised when assignment is not found."""

    pass


class NotEnrolledError(ForbiddenError):
    """Raised when the student is not enrolled in the assignment's course."""

    pass


class NotSubmissionOwnerError(ForbiddenError):
    """Raised when someone other than the submitting student revises."""

    pass


class DuplicateSubmissionError(ConflictError):
    """Raised when the student already submitted this assignment."""

    pass


class SubmissionLockedError(InvalidStateError):
    """Raised when revising a graded or returned submission."""

    pass


class SubmissionNotGradableError(InvalidStateError):
    """Raised when grading a submission outside submitted/graded."""

    pass


class EmptyContentError(ValidationError):
    """Raised when submission content is empty."""

    pass


class GradeOutOfRangeError(ValidationError):
    """Raised when a grade falls outside 0..total_points."""

    pass


class SubmissionService:
    """Service for the submission workflow.

    Attributes:
        db: Async database session.
        notifier: Outbound domain event queue.
    """

    def __init__(self, db: AsyncSession, notifier: EventNotifier | None = None) -> None:
        """Initialize submission service.

        Args:
            db: Async database session.
            notifier: Event notifier. Defaults to the process-wide notifier.
        """
        self.db = db
        self.notifier = notifier or get_event_notifier()

    async def create(
        self,
        principal: Principal,
        request: SubmissionCreateRequest,
    ) -> SubmissionResponse:
        """Submit an answer to an assignment.

        Args:
            principal: The submitting student.
            request: Submission data.

        Returns:
            Created submission in the submitted state.

        Raises:
            ForbiddenError: If the principal's role cannot submit.
            AssignmentNotFoundError: If assignment not found.
            EmptyContentError: If content is empty.
            NotEnrolledError: If the caller is not enrolled in the course.
            DuplicateSubmissionError: If the caller already submitted.
        """
        require_scope(principal, Action.CREATE, Resource.SUBMISSION)
        assignment = await self._get_assignment(request.assignment_id)
        if not request.content or not request.content.strip():
            raise EmptyContentError("Submission content is required")

        # Every submission needs an enrollment, admins included.
        context = ResourceContext(
            is_enrolled=await self._is_enrolled(principal.id, assignment.course_id)
        )
        decision = decide(principal, Action.CREATE, Resource.SUBMISSION, context)
        if decision == Decision.DENY or not context.is_enrolled:
            raise NotEnrolledError("You must be enrolled in this course to submit")

        if await self._find_submission(assignment.id, principal.id):
            raise DuplicateSubmissionError("You have already submitted this assignment")

        submission = Submission(
            assignment_id=assignment.id,
            student_id=principal.id,
            content=request.content,
            attachments=[a.model_dump() for a in request.attachments],
            submitted_at=utc_now(),
            status=SubmissionStatus.SUBMITTED.value,
        )

        # Rollback expires loaded rows.
        assignment_id = assignment.id
        self.db.add(submission)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not is_unique_violation(e, Submission.__table__, UNIQUE_SUBMISSION):
                # The assignment was deleted after it was looked up.
                raise AssignmentNotFoundError(f"Assignment {assignment_id} not found") from e
            logger.warning(
                "Rejected concurrent duplicate submission: assignment=%s, student=%s",
                assignment_id,
                principal.id,
            )
            raise DuplicateSubmissionError("You have already submitted this assignment") from e
        await self.db.refresh(submission)

        logger.info(
            "Created submission: id=%s, assignment=%s, student=%s",
            submission.id,
            assignment.id,
            principal.id,
        )

        response = await self._to_response(submission)
        self.notifier.emit(EventTypes.Submission.CREATED, response.model_dump(mode="json"))
        return response

    async def revise_content(
        self,
        principal: Principal,
        submission_id: str,
        request: SubmissionReviseRequest,
    ) -> SubmissionResponse:
        """Replace the content of a submission that is not yet graded.

        Only the submitting student may revise, whatever their role.
        Empty fields are left unchanged. submitted_at is refreshed.

        Args:
            principal: The caller.
            submission_id: Submission identifier.
            request: New content and/or attachments.

        Returns:
            Revised submission.

        Raises:
            ForbiddenError: If the principal's role cannot revise.
            SubmissionNotFoundError: If submission not found.
            NotSubmissionOwnerError: If the caller did not submit it.
            SubmissionLockedError: If the submission is graded or returned.
        """
        require_scope(principal, Action.REVISE, Resource.SUBMISSION)
        submission = await self._get_submission(submission_id)

        authorize(
            principal,
            Action.REVISE,
            Resource.SUBMISSION,
            ResourceContext(owner_id=submission.student_id),
        )
        if submission.student_id != principal.id:
            raise NotSubmissionOwnerError("Only the submitting student can revise a submission")

        if submission.status != SubmissionStatus.SUBMITTED.value:
            raise SubmissionLockedError("Cannot update a graded submission")

        if request.content:
            submission.content = request.content
        if request.attachments:
            submission.attachments = [a.model_dump() for a in request.attachments]
        submission.submitted_at = utc_now()

        await self.db.commit()
        await self.db.refresh(submission)

        logger.info("Revised submission: id=%s, by=%s", submission.id, principal.id)

        response = await self._to_response(submission)
        self.notifier.emit(EventTypes.Submission.UPDATED, response.model_dump(mode="json"))
        return response

    async def grade(
        self,
        principal: Principal,
        submission_id: str,
        request: GradeRequest,
    ) -> SubmissionResponse:
        """Grade or re-grade a submission.

        Args:
            principal: The assignment's instructor or an admin.
            submission_id: Submission identifier.
            request: Grade and optional feedback.

        Returns:
            Graded submission.

        Raises:
            ForbiddenError: If the caller does not own the assignment.
            SubmissionNotFoundError: If submission not found.
            SubmissionNotGradableError: If the submission is returned.
            GradeOutOfRangeError: If grade is outside 0..total_points.
        """
        require_scope(principal, Action.GRADE, Resource.SUBMISSION)
        submission = await self._get_submission(submission_id)
        assignment = await self._get_assignment(submission.assignment_id)
        authorize(
            principal,
            Action.GRADE,
            Resource.SUBMISSION,
            ResourceContext(owner_id=assignment.instructor_id),
            message="Not authorized to grade this submission",
        )

        if submission.status not in GRADABLE_STATES:
            raise SubmissionNotGradableError(
                f"Cannot grade a submission in state {submission.status}"
            )

        if not 0 <= request.grade <= assignment.total_points:
            raise GradeOutOfRangeError(
                f"Grade must be between 0 and {assignment.total_points:g}"
            )

        submission.grade = request.grade
        submission.feedback = request.feedback or ""
        submission.graded_at = utc_now()
        submission.graded_by_id = principal.id
        submission.status = SubmissionStatus.GRADED.value

        await self.db.commit()
        await self.db.refresh(submission)

        logger.info(
            "Graded submission: id=%s, grade=%s, by=%s",
            submission.id,
            submission.grade,
            principal.id,
        )

        response = await self._to_response(submission)
        self.notifier.emit(EventTypes.Submission.GRADED, response.model_dump(mode="json"))
        return response

    async def list_visible(self, principal: Principal) -> list[SubmissionResponse]:
        """List every submission the principal may read."""
        return await self._list(self._visible_query(principal))

    async def list_for_assignment(
        self,
        principal: Principal,
        assignment_id: str,
    ) -> list[SubmissionResponse]:
        """List all submissions of an assignment.

        Raises:
            ForbiddenError: If the caller is not the assignment's instructor
                or an admin.
            AssignmentNotFoundError: If assignment not found.
        """
        require_scope(principal, Action.READ, Resource.SUBMISSION)
        assignment = await self._get_assignment(assignment_id)
        authorize(
            principal,
            Action.READ,
            Resource.SUBMISSION,
            ResourceContext(owner_id=assignment.instructor_id),
        )
        query = select(Submission).where(Submission.assignment_id == assignment_id)
        return await self._list(query)

    async def list_for_student(
        self,
        principal: Principal,
        student_id: str,
    ) -> list[SubmissionResponse]:
        """List a student's submissions, filtered to what the principal may read."""
        query = self._visible_query(principal).where(Submission.student_id == student_id)
        return await self._list(query)

    async def get_by_id(self, principal: Principal, submission_id: str) -> SubmissionResponse:
        """Get a submission.

        Raises:
            ForbiddenError: If the principal may not read it.
            SubmissionNotFoundError: If submission not found.
        """
        require_scope(principal, Action.READ, Resource.SUBMISSION)
        submission = await self._get_submission(submission_id)

        if principal.role == Role.INSTRUCTOR:
            assignment = await self._get_assignment(submission.assignment_id)
            context = ResourceContext(owner_id=assignment.instructor_id)
        else:
            context = ResourceContext(owner_id=submission.student_id)

        authorize(
            principal,
            Action.READ,
            Resource.SUBMISSION,
            context,
            message="Not authorized to view this submission",
        )
        return await self._to_response(submission)

    async def delete(self, principal: Principal, submission_id: str) -> None:
        """Remove a submission.

        Raises:
            ForbiddenError: If the principal is not an admin.
            SubmissionNotFoundError: If submission not found.
        """
        authorize(principal, Action.DELETE, Resource.SUBMISSION)
        submission = await self._get_submission(submission_id)

        await self.db.delete(submission)
        await self.db.commit()

        logger.info("Deleted submission: id=%s, by=%s", submission_id, principal.id)
        self.notifier.emit(EventTypes.Submission.DELETED, {"id": submission_id})

    def _visible_query(self, principal: Principal) -> Select:
        scope = require_scope(principal, Action.READ, Resource.SUBMISSION)
        query = select(Submission)
        if scope == Scope.OWN:
            if principal.role == Role.INSTRUCTOR:
                query = query.join(Assignment, Assignment.id == Submission.assignment_id).where(
                    Assignment.instructor_id == principal.id
                )
            else:
                query = query.where(Submission.student_id == principal.id)
        return query

    async def _list(self, query: Select) -> list[SubmissionResponse]:
        result = await self.db.execute(query.order_by(Submission.submitted_at.desc()))
        return await projections.project_submissions(self.db, result.scalars().all())

    async def _is_enrolled(self, student_id: str, course_id: str) -> bool:
        query = select(Enrollment.id).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none() is not None

    async def _find_submission(self, assignment_id: str, student_id: str) -> Submission | None:
        query = select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _get_submission(self, submission_id: str) -> Submission:
        """Get submission by ID.

        Raises:
            SubmissionNotFoundError: If not found.
        """
        result = await self.db.execute(select(Submission).where(Submission.id == submission_id))
        submission = result.scalar_one_or_none()

        if not submission:
            raise SubmissionNotFoundError(f"Submission {submission_id} not found")

        return submission

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

    async def _to_response(self, submission: Submission) -> SubmissionResponse:
        responses = await projections.project_submissions(self.db, [submission])
        return responses[0]

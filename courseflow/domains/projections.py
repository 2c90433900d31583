# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-side projection of store rows into response models.

Services first fetch the authorized rows, then call one of the
``project_*`` helpers, which batch-load every referenced user, course
and assignment with one query per table and resolve them into display
refs. Nothing here makes authorization decisions.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courseflow.infrastructure.database.models import (
    Assignment,
    Course,
    Enrollment,
    Submission,
    User,
)
from courseflow.models.assignment import AssignmentResponse
from courseflow.models.common import (
    AssignmentRef,
    Attachment,
    CourseRef,
    EnrollmentStatus,
    SubmissionStatus,
    UserRef,
)
from courseflow.models.course import CourseResponse, Lesson
from courseflow.models.enrollment import EnrollmentResponse
from courseflow.models.submission import SubmissionResponse
from courseflow.utils.datetime import ensure_utc

UNKNOWN_NAME = "Unknown"


def _user_ref(users: dict[str, User], user_id: str) -> UserRef:
    user = users.get(user_id)
    if user is None:
        return UserRef(id=user_id, name=UNKNOWN_NAME, email="")
    return UserRef(id=user.id, name=user.name, email=user.email)


def _course_ref(courses: dict[str, Course], course_id: str) -> CourseRef:
    course = courses.get(course_id)
    return CourseRef(id=course_id, title=course.title if course else UNKNOWN_NAME)


def _assignment_ref(assignment: Assignment) -> AssignmentRef:
    return AssignmentRef(
        id=assignment.id,
        title=assignment.title,
        due_date=ensure_utc(assignment.due_date),
        total_points=assignment.total_points,
    )


async def load_users(db: AsyncSession, user_ids: Iterable[str | None]) -> dict[str, User]:
    """Batch-load users by id."""
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {user.id: user for user in result.scalars().all()}


async def load_courses(db: AsyncSession, course_ids: Iterable[str]) -> dict[str, Course]:
    """Batch-load courses by id."""
    ids = set(course_ids)
    if not ids:
        return {}
    result = await db.execute(select(Course).where(Course.id.in_(ids)))
    return {course.id: course for course in result.scalars().all()}


async def load_assignments(
    db: AsyncSession, assignment_ids: Iterable[str]
) -> dict[str, Assignment]:
    """Batch-load assignments by id."""
    ids = set(assignment_ids)
    if not ids:
        return {}
    result = await db.execute(select(Assignment).where(Assignment.id.in_(ids)))
    return {assignment.id: assignment for assignment in result.scalars().all()}


def course_to_response(course: Course, users: dict[str, User]) -> CourseResponse:
    """Build a CourseResponse from a row and preloaded users."""
    return CourseResponse(
        id=course.id,
        title=course.title,
        description=course.description,
        instructor=_user_ref(users, course.instructor_id),
        category=course.category,
        duration=course.duration,
        content=[Lesson.model_validate(entry) for entry in course.content or []],
        is_published=course.is_published,
        created_at=ensure_utc(course.created_at),
        updated_at=ensure_utc(course.updated_at),
    )


async def project_courses(db: AsyncSession, courses: Sequence[Course]) -> list[CourseResponse]:
    """Resolve instructors for a list of courses."""
    users = await load_users(db, (c.instructor_id for c in courses))
    return [course_to_response(course, users) for course in courses]


async def project_enrollments(
    db: AsyncSession, enrollments: Sequence[Enrollment]
) -> list[EnrollmentResponse]:
    """Resolve students and courses for a list of enrollments."""
    users = await load_users(db, (e.student_id for e in enrollments))
    courses = await load_courses(db, (e.course_id for e in enrollments))
    return [
        EnrollmentResponse(
            id=enrollment.id,
            student=_user_ref(users, enrollment.student_id),
            course=_course_ref(courses, enrollment.course_id),
            enrolled_at=ensure_utc(enrollment.enrolled_at),
            progress=enrollment.progress,
            status=EnrollmentStatus(enrollment.status),
            completed_at=ensure_utc(enrollment.completed_at),
        )
        for enrollment in enrollments
    ]


async def project_assignments(
    db: AsyncSession, assignments: Sequence[Assignment]
) -> list[AssignmentResponse]:
    """Resolve courses and instructors for a list of assignments."""
    users = await load_users(db, (a.instructor_id for a in assignments))
    courses = await load_courses(db, (a.course_id for a in assignments))
    return [
        AssignmentResponse(
            id=assignment.id,
            title=assignment.title,
            description=assignment.description,
            course=_course_ref(courses, assignment.course_id),
            instructor=_user_ref(users, assignment.instructor_id),
            due_date=ensure_utc(assignment.due_date),
            total_points=assignment.total_points,
            attachments=[Attachment.model_validate(a) for a in assignment.attachments or []],
            created_at=ensure_utc(assignment.created_at),
            updated_at=ensure_utc(assignment.updated_at),
        )
        for assignment in assignments
    ]


async def project_submissions(
    db: AsyncSession, submissions: Sequence[Submission]
) -> list[SubmissionResponse]:
    """Resolve assignments, students and graders for a list of submissions."""
    assignments = await load_assignments(db, (s.assignment_id for s in submissions))
    user_ids: list[str | None] = []
    for submission in submissions:
        user_ids.append(submission.student_id)
        user_ids.append(submission.graded_by_id)
    users = await load_users(db, user_ids)

    responses = []
    for submission in submissions:
        assignment = assignments.get(submission.assignment_id)
        if assignment is not None:
            assignment_ref = _assignment_ref(assignment)
        else:
            assignment_ref = AssignmentRef(
                id=submission.assignment_id,
                title=UNKNOWN_NAME,
                due_date=ensure_utc(submission.submitted_at),
                total_points=0,
            )
        responses.append(
            SubmissionResponse(
                id=submission.id,
                assignment=assignment_ref,
                student=_user_ref(users, submission.student_id),
                content=submission.content,
                attachments=[Attachment.model_validate(a) for a in submission.attachments or []],
                submitted_at=ensure_utc(submission.submitted_at),
                grade=submission.grade,
                feedback=submission.feedback,
                graded_at=ensure_utc(submission.graded_at),
                graded_by=(
                    _user_ref(users, submission.graded_by_id) if submission.graded_by_id else None
                ),
                status=SubmissionStatus(submission.status),
            )
        )
    return responses

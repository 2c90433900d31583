# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    courses: Course catalog and enrollment entry points.
    enrollments: Enrollment queries and updates.
    assignments: Assignment management.
    submissions: Submission workflow (submit, revise, grade).
"""

from fastapi import APIRouter

from courseflow.api.v1 import assignments, courses, enrollments, submissions

router = APIRouter(prefix="/api/v1")

router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
router.include_router(submissions.router, prefix="/submissions", tags=["Submissions"])

__all__ = ["router"]

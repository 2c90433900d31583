# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment request and response models."""

from datetime import datetime

from pydantic import BaseModel

from courseflow.models.common import CourseRef, EnrollmentStatus, UserRef


class EnrollRequest(BaseModel):
    """Optional body for an enroll call.

    Admins may enroll a given student; students always enroll themselves.
    """

    student_id: str | None = None


class EnrollmentUpdateRequest(BaseModel):
    """Partial enrollment update."""

    progress: int | None = None
    status: EnrollmentStatus | None = None


class EnrollmentResponse(BaseModel):
    """Enrollment with student and course resolved."""

    id: str
    student: UserRef
    course: CourseRef
    enrolled_at: datetime
    progress: int
    status: EnrollmentStatus
    completed_at: datetime | None = None

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response models."""

from courseflow.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentUpdateRequest,
)
from courseflow.models.common import (
    AssignmentRef,
    Attachment,
    CourseRef,
    EnrollmentStatus,
    SubmissionStatus,
    UserRef,
)
from courseflow.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
    Lesson,
)
from courseflow.models.enrollment import (
    EnrollmentResponse,
    EnrollmentUpdateRequest,
    EnrollRequest,
)
from courseflow.models.submission import (
    GradeRequest,
    SubmissionCreateRequest,
    SubmissionResponse,
    SubmissionReviseRequest,
)

__all__ = [
    "AssignmentCreateRequest",
    "AssignmentRef",
    "AssignmentResponse",
    "AssignmentUpdateRequest",
    "Attachment",
    "CourseCreateRequest",
    "CourseRef",
    "CourseResponse",
    "CourseUpdateRequest",
    "EnrollRequest",
    "EnrollmentResponse",
    "EnrollmentStatus",
    "EnrollmentUpdateRequest",
    "GradeRequest",
    "Lesson",
    "SubmissionCreateRequest",
    "SubmissionResponse",
    "SubmissionReviseRequest",
    "SubmissionStatus",
    "UserRef",
]

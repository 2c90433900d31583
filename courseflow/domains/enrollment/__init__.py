# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain.

Provides the enrollment ledger: one enrollment per (student, course).
"""

from courseflow.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    CourseNotPublishedError,
    EnrollmentNotFoundError,
    EnrollmentService,
    InvalidProgressError,
    StudentNotFoundError,
)

__all__ = [
    "AlreadyEnrolledError",
    "CourseNotFoundError",
    "CourseNotPublishedError",
    "EnrollmentNotFoundError",
    "EnrollmentService",
    "InvalidProgressError",
    "StudentNotFoundError",
]

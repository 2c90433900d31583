# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain.

Provides course catalog management with role-scoped visibility.
"""

from courseflow.domains.course.service import (
    CourseNotFoundError,
    CourseService,
    InstructorReassignmentError,
    InvalidInstructorError,
)

__all__ = [
    "CourseNotFoundError",
    "CourseService",
    "InstructorReassignmentError",
    "InvalidInstructorError",
]

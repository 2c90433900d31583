# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment domain.

Provides ownership-scoped assignment management.
"""

from courseflow.domains.assignment.service import (
    AssignmentNotFoundError,
    AssignmentService,
    CourseNotFoundError,
    InvalidPointsError,
)

__all__ = [
    "AssignmentNotFoundError",
    "AssignmentService",
    "CourseNotFoundError",
    "InvalidPointsError",
]

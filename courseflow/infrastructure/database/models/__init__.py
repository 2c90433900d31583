# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models for the course store."""

from courseflow.infrastructure.database.models.base import Base, IdMixin, TimestampMixin, new_id
from courseflow.infrastructure.database.models.tables import (
    Assignment,
    Course,
    Enrollment,
    Submission,
    User,
)

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "new_id",
    "User",
    "Course",
    "Enrollment",
    "Assignment",
    "Submission",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared response fragments and status enums."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class EnrollmentStatus(str, Enum):
    """Enrollment lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"


class SubmissionStatus(str, Enum):
    """Submission lifecycle status.

    RETURNED is reserved: no operation currently transitions into it.
    """

    SUBMITTED = "submitted"
    GRADED = "graded"
    RETURNED = "returned"


class Attachment(BaseModel):
    """File reference attached to an assignment or submission."""

    name: str
    url: str


class UserRef(BaseModel):
    """Display projection of a user."""

    id: str
    name: str
    email: str


class CourseRef(BaseModel):
    """Display projection of a course."""

    id: str
    title: str


class AssignmentRef(BaseModel):
    """Display projection of an assignment."""

    id: str
    title: str
    due_date: datetime
    total_points: float

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment request and response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from courseflow.models.common import Attachment, CourseRef, UserRef


class AssignmentCreateRequest(BaseModel):
    """Request to create an assignment."""

    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    course_id: str
    due_date: datetime
    total_points: float = 100
    attachments: list[Attachment] = Field(default_factory=list)


class AssignmentUpdateRequest(BaseModel):
    """Partial assignment update. Empty values mean "no change"."""

    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    total_points: float | None = None
    attachments: list[Attachment] | None = None


class AssignmentResponse(BaseModel):
    """Assignment with course and instructor resolved."""

    id: str
    title: str
    description: str
    course: CourseRef
    instructor: UserRef
    due_date: datetime
    total_points: float
    attachments: list[Attachment]
    created_at: datetime
    updated_at: datetime

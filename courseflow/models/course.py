# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course request and response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from courseflow.models.common import UserRef


class Lesson(BaseModel):
    """One ordered lesson entry of a course."""

    title: str
    description: str = ""
    video_url: str | None = None
    order: int = 0


class CourseCreateRequest(BaseModel):
    """Request to create a course."""

    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    instructor_id: str
    category: str = Field(min_length=1, max_length=100)
    duration: str = "Self-paced"
    content: list[Lesson] = Field(default_factory=list)
    is_published: bool = False


class CourseUpdateRequest(BaseModel):
    """Partial course update.

    Empty values mean "no change", except is_published which is applied
    whenever it is supplied.
    """

    title: str | None = None
    description: str | None = None
    instructor_id: str | None = None
    category: str | None = None
    duration: str | None = None
    content: list[Lesson] | None = None
    is_published: bool | None = None


class CourseResponse(BaseModel):
    """Course with its instructor resolved."""

    id: str
    title: str
    description: str
    instructor: UserRef
    category: str
    duration: str
    content: list[Lesson]
    is_published: bool
    created_at: datetime
    updated_at: datetime

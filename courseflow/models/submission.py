# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission request and response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from courseflow.models.common import AssignmentRef, Attachment, SubmissionStatus, UserRef


class SubmissionCreateRequest(BaseModel):
    """Request to submit an answer to an assignment."""

    assignment_id: str
    content: str
    attachments: list[Attachment] = Field(default_factory=list)


class SubmissionReviseRequest(BaseModel):
    """Content revision by the owning student. Empty values mean "no change"."""

    content: str | None = None
    attachments: list[Attachment] | None = None


class GradeRequest(BaseModel):
    """Grade assignment request."""

    grade: float
    feedback: str | None = None


class SubmissionResponse(BaseModel):
    """Submission with assignment, student and grader resolved."""

    id: str
    assignment: AssignmentRef
    student: UserRef
    content: str
    attachments: list[Attachment]
    submitted_at: datetime
    grade: float | None = None
    feedback: str | None = None
    graded_at: datetime | None = None
    graded_by: UserRef | None = None
    status: SubmissionStatus

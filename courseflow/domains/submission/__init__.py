# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission domain.

Provides the submit / revise / grade workflow.
"""

from courseflow.domains.submission.service import (
    AssignmentNotFoundError,
    DuplicateSubmissionError,
    EmptyContentError,
    GradeOutOfRangeError,
    NotEnrolledError,
    NotSubmissionOwnerError,
    SubmissionLockedError,
    SubmissionNotFoundError,
    SubmissionNotGradableError,
    SubmissionService,
)

__all__ = [
    "AssignmentNotFoundError",
    "DuplicateSubmissionError",
    "EmptyContentError",
    "GradeOutOfRangeError",
    "NotEnrolledError",
    "NotSubmissionOwnerError",
    "SubmissionLockedError",
    "SubmissionNotFoundError",
    "SubmissionNotGradableError",
    "SubmissionService",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission API endpoints.

Provides endpoints for:
- Submitting and revising answers (students)
- Grading (assignment instructor or admin)
- Role-scoped submission queries
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from courseflow.api.dependencies import get_submission_service, require_principal
from courseflow.api.middleware.rate_limit import mutation_limit
from courseflow.domains.access.policy import Principal
from courseflow.domains.submission.service import SubmissionService
from courseflow.models.submission import (
    GradeRequest,
    SubmissionCreateRequest,
    SubmissionResponse,
    SubmissionReviseRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[SubmissionResponse], summary="List submissions")
async def list_submissions(
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionResponse]:
    """List the submissions visible to the caller."""
    return await service.list_visible(principal)


@router.get("/my/all", response_model=list[SubmissionResponse], summary="List my submissions")
async def list_my_submissions(
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionResponse]:
    """List the caller's own submissions."""
    return await service.list_for_student(principal, principal.id)


@router.get(
    "/assignment/{assignment_id}",
    response_model=list[SubmissionResponse],
    summary="List assignment submissions",
    description="Requires admin access or ownership of the assignment.",
)
async def list_assignment_submissions(
    assignment_id: str,
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionResponse]:
    """List all submissions of one assignment."""
    return await service.list_for_assignment(principal, assignment_id)


@router.get("/{submission_id}", response_model=SubmissionResponse, summary="Get submission")
async def get_submission(
    submission_id: str,
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Get a single submission."""
    return await service.get_by_id(principal, submission_id)


@router.post(
    "",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit assignment",
)
@mutation_limit
async def create_submission(
    request: Request,
    data: SubmissionCreateRequest,
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Submit an answer to an assignment."""
    return await service.create(principal, data)


@router.put(
    "/{submission_id}",
    response_model=SubmissionResponse,
    summary="Revise submission",
    description="Replace content of a submission that has not been graded yet.",
)
@mutation_limit
async def revise_submission(
    request: Request,
    submission_id: str,
    data: SubmissionReviseRequest,
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Revise a submission."""
    return await service.revise_content(principal, submission_id, data)


@router.put(
    "/{submission_id}/grade",
    response_model=SubmissionResponse,
    summary="Grade submission",
    description="Requires admin access or ownership of the assignment.",
)
@mutation_limit
async def grade_submission(
    request: Request,
    submission_id: str,
    data: GradeRequest,
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Grade or re-grade a submission."""
    logger.info("Grading submission: %s by %s", submission_id, principal.id)
    return await service.grade(principal, submission_id, data)


@router.delete(
    "/{submission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete submission",
    description="Requires admin access.",
)
async def delete_submission(
    submission_id: str,
    principal: Principal = Depends(require_principal),
    service: SubmissionService = Depends(get_submission_service),
) -> None:
    """Delete a submission."""
    await service.delete(principal, submission_id)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, status

from courseflow.api.dependencies import get_assignment_service, require_principal
from courseflow.api.middleware.rate_limit import mutation_limit
from courseflow.domains.access.policy import Principal
from courseflow.domains.assignment.service import AssignmentService
from courseflow.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[AssignmentResponse],
    summary="List assignments",
    description="Admins see all, instructors their own, students those of enrolled courses.",
)
async def list_assignments(
    principal: Principal = Depends(require_principal),
    service: AssignmentService = Depends(get_assignment_service),
) -> list[AssignmentResponse]:
    """List the assignments visible to the caller."""
    return await service.list_visible(principal)


@router.get(
    "/course/{course_id}",
    response_model=list[AssignmentResponse],
    summary="List course assignments",
)
async def list_course_assignments(
    course_id: str,
    principal: Principal = Depends(require_principal),
    service: AssignmentService = Depends(get_assignment_service),
) -> list[AssignmentResponse]:
    """List the visible assignments of one course."""
    return await service.list_for_course(principal, course_id)


@router.get("/{assignment_id}", response_model=AssignmentResponse, summary="Get assignment")
async def get_assignment(
    assignment_id: str,
    principal: Principal = Depends(require_principal),
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    """Get a single assignment."""
    return await service.get_by_id(principal, assignment_id)


@router.post(
    "",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create assignment",
    description="Requires admin access or ownership of the course.",
)
@mutation_limit
async def create_assignment(
    request: Request,
    data: AssignmentCreateRequest,
    principal: Principal = Depends(require_principal),
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    """Create an assignment."""
    logger.info(
        "Creating assignment: %s in course %s by %s", data.title, data.course_id, principal.id
    )
    return await service.create(principal, data)


@router.put(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    summary="Update assignment",
)
@mutation_limit
async def update_assignment(
    request: Request,
    assignment_id: str,
    data: AssignmentUpdateRequest,
    principal: Principal = Depends(require_principal),
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    """Update an assignment."""
    return await service.update(principal, assignment_id, data)


@router.delete(
    "/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete assignment",
)
async def delete_assignment(
    assignment_id: str,
    principal: Principal = Depends(require_principal),
    service: AssignmentService = Depends(get_assignment_service),
) -> None:
    """Delete an assignment."""
    await service.delete(principal, assignment_id)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, status

from courseflow.api.dependencies import get_enrollment_service, require_principal
from courseflow.api.middleware.rate_limit import mutation_limit
from courseflow.domains.access.policy import Principal
from courseflow.domains.enrollment.service import EnrollmentService
from courseflow.models.enrollment import EnrollmentResponse, EnrollmentUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[EnrollmentResponse], summary="List enrollments")
async def list_enrollments(
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[EnrollmentResponse]:
    """List the enrollments visible to the caller."""
    return await service.list_visible(principal)


@router.get(
    "/course/{course_id}",
    response_model=list[EnrollmentResponse],
    summary="List course enrollments",
)
async def list_course_enrollments(
    course_id: str,
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[EnrollmentResponse]:
    """List the visible enrollments of one course."""
    return await service.list_for_course(principal, course_id)


@router.get(
    "/student/{student_id}",
    response_model=list[EnrollmentResponse],
    summary="List student enrollments",
)
async def list_student_enrollments(
    student_id: str,
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[EnrollmentResponse]:
    """List the visible enrollments of one student."""
    return await service.list_for_student(principal, student_id)


@router.get("/{enrollment_id}", response_model=EnrollmentResponse, summary="Get enrollment")
async def get_enrollment(
    enrollment_id: str,
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentResponse:
    """Get a single enrollment."""
    return await service.get_by_id(principal, enrollment_id)


@router.put(
    "/{enrollment_id}",
    response_model=EnrollmentResponse,
    summary="Update enrollment",
    description="Update progress or status. Requires admin access or course ownership.",
)
@mutation_limit
async def update_enrollment(
    request: Request,
    enrollment_id: str,
    data: EnrollmentUpdateRequest,
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentResponse:
    """Update an enrollment."""
    return await service.update(principal, enrollment_id, data)


@router.delete(
    "/{enrollment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove enrollment",
    description="Permanently remove an enrollment record. Requires admin access.",
)
async def remove_enrollment(
    enrollment_id: str,
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> None:
    """Remove an enrollment."""
    logger.info("Removing enrollment: %s by %s", enrollment_id, principal.id)
    await service.delete(principal, enrollment_id)

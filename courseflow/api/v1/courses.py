# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

Provides endpoints for:
- Listing and reading courses (role-scoped)
- Course creation, update and deletion
- Enrolling in a course and listing the caller's enrollments
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from courseflow.api.dependencies import (
    get_course_service,
    get_enrollment_service,
    require_principal,
)
from courseflow.api.middleware.rate_limit import mutation_limit
from courseflow.domains.access.policy import Principal
from courseflow.domains.course.service import CourseService
from courseflow.domains.enrollment.service import EnrollmentService
from courseflow.models.course import CourseCreateRequest, CourseResponse, CourseUpdateRequest
from courseflow.models.enrollment import EnrollmentResponse, EnrollRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[CourseResponse],
    summary="List courses",
    description="Admins see all courses, instructors their own, students published ones.",
)
async def list_courses(
    principal: Principal = Depends(require_principal),
    service: CourseService = Depends(get_course_service),
) -> list[CourseResponse]:
    """List the courses visible to the caller."""
    return await service.list_visible(principal)


@router.get(
    "/enrolled/my",
    response_model=list[EnrollmentResponse],
    summary="List my enrollments",
)
async def list_my_enrollments(
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[EnrollmentResponse]:
    """List the caller's own enrollments."""
    return await service.list_for_student(principal, principal.id)


@router.get(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Get course",
)
async def get_course(
    course_id: str,
    principal: Principal = Depends(require_principal),
    service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """Get a single course."""
    return await service.get_by_id(principal, course_id)


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    description="Create a course for an instructor. Requires admin access.",
)
@mutation_limit
async def create_course(
    request: Request,
    data: CourseCreateRequest,
    principal: Principal = Depends(require_principal),
    service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """Create a new course.

    Args:
        request: HTTP request (used for rate limiting).
        data: Course creation request.
        principal: Authenticated caller.
        service: Course service.

    Returns:
        Created course.
    """
    logger.info("Creating course: %s by %s", data.title, principal.id)
    return await service.create(principal, data)


@router.put(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Update course",
    description="Update a course. Requires admin access or course ownership.",
)
@mutation_limit
async def update_course(
    request: Request,
    course_id: str,
    data: CourseUpdateRequest,
    principal: Principal = Depends(require_principal),
    service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """Update a course."""
    return await service.update(principal, course_id, data)


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete course",
    description="Delete a course and everything attached to it. Requires admin access.",
)
async def delete_course(
    course_id: str,
    principal: Principal = Depends(require_principal),
    service: CourseService = Depends(get_course_service),
) -> None:
    """Delete a course."""
    logger.info("Deleting course: %s by %s", course_id, principal.id)
    await service.delete(principal, course_id)


@router.post(
    "/{course_id}/enroll",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in course",
    description="Students enroll themselves; admins may pass a student_id.",
)
@mutation_limit
async def enroll_in_course(
    request: Request,
    course_id: str,
    data: EnrollRequest | None = None,
    principal: Principal = Depends(require_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentResponse:
    """Enroll in a published course."""
    student_id = data.student_id if data else None
    return await service.enroll(principal, course_id, student_id=student_id)

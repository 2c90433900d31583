# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Assignment service."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from courseflow.domains.assignment.service import (
    AssignmentNotFoundError,
    AssignmentService,
    CourseNotFoundError,
    InvalidPointsError,
)
from courseflow.domains.errors import ForbiddenError
from courseflow.infrastructure.events import EventTypes
from courseflow.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentUpdateRequest,
)
from courseflow.models.common import Attachment, CourseRef, UserRef

PROJECT_ASSIGNMENTS = "courseflow.domains.projections.project_assignments"


def _result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _rows(values):
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


@pytest.fixture
def assignment_service(mock_db, mock_notifier):
    """Create assignment service with mock database."""
    return AssignmentService(db=mock_db, notifier=mock_notifier)


@pytest.fixture
def due_date():
    """A due date one week out."""
    return datetime.now(timezone.utc) + timedelta(days=7)


@pytest.fixture
def sample_course(instructor):
    """Create a course taught by the instructor fixture."""
    course = MagicMock()
    course.id = str(uuid4())
    course.title = "Intro to Python"
    course.instructor_id = instructor.id
    course.is_published = True
    return course


@pytest.fixture
def sample_assignment(instructor, sample_course, due_date):
    """Create an assignment authored by the instructor fixture."""
    assignment = MagicMock()
    assignment.id = str(uuid4())
    assignment.title = "Homework 1"
    assignment.description = "Loops"
    assignment.course_id = sample_course.id
    assignment.instructor_id = instructor.id
    assignment.due_date = due_date
    assignment.total_points = 100.0
    assignment.attachments = []
    return assignment


@pytest.fixture
def assignment_response(sample_assignment, sample_course, due_date):
    """Create a projected assignment response."""
    now = datetime.now(timezone.utc)
    return AssignmentResponse(
        id=sample_assignment.id,
        title=sample_assignment.title,
        description=sample_assignment.description,
        course=CourseRef(id=sample_course.id, title=sample_course.title),
        instructor=UserRef(id=sample_assignment.instructor_id, name="Ada", email="ada@example.com"),
        due_date=due_date,
        total_points=100.0,
        attachments=[],
        created_at=now,
        updated_at=now,
    )


class TestCreateAssignment:
    """Tests for assignment creation."""

    @pytest.mark.asyncio
    async def test_course_instructor_creates(
        self,
        assignment_service,
        mock_db,
        mock_notifier,
        instructor,
        sample_course,
        due_date,
        assignment_response,
    ):
        """Test the course's instructor adding an assignment."""
        mock_db.execute.return_value = _result(sample_course)
        request = AssignmentCreateRequest(
            title="Homework 1",
            description="Loops",
            course_id=sample_course.id,
            due_date=due_date,
            attachments=[Attachment(name="brief.pdf", url="https://files/brief.pdf")],
        )

        with patch(PROJECT_ASSIGNMENTS, new=AsyncMock(return_value=[assignment_response])):
            result = await assignment_service.create(instructor, request)

        assert result is assignment_response
        added = mock_db.add.call_args[0][0]
        assert added.instructor_id == instructor.id
        assert added.total_points == 100
        assert added.attachments == [{"name": "brief.pdf", "url": "https://files/brief.pdf"}]
        mock_notifier.emit.assert_called_once_with(
            EventTypes.Assignment.CREATED, assignment_response.model_dump(mode="json")
        )

    @pytest.mark.asyncio
    async def test_other_instructor_forbidden(
        self, assignment_service, mock_db, other_instructor, sample_course, due_date
    ):
        """Test that instructors cannot add assignments to others' courses."""
        mock_db.execute.return_value = _result(sample_course)
        request = AssignmentCreateRequest(
            title="T", description="D", course_id=sample_course.id, due_date=due_date
        )

        with pytest.raises(ForbiddenError, match="add assignments"):
            await assignment_service.create(other_instructor, request)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_admin_creates_on_behalf_of_course_instructor(
        self,
        assignment_service,
        mock_db,
        admin,
        sample_course,
        due_date,
        assignment_response,
    ):
        """Test that an admin-created assignment belongs to the course's instructor."""
        mock_db.execute.return_value = _result(sample_course)
        request = AssignmentCreateRequest(
            title="Homework 2",
            description="Recursion",
            course_id=sample_course.id,
            due_date=due_date,
        )

        with patch(PROJECT_ASSIGNMENTS, new=AsyncMock(return_value=[assignment_response])):
            await assignment_service.create(admin, request)

        added = mock_db.add.call_args[0][0]
        assert added.instructor_id == sample_course.instructor_id
        assert added.instructor_id != admin.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("points", [0, -5, float("inf"), float("nan")])
    async def test_invalid_points(
        self, assignment_service, mock_db, instructor, sample_course, due_date, points
    ):
        """Test that total_points must be a positive finite number on create."""
        mock_db.execute.return_value = _result(sample_course)
        request = AssignmentCreateRequest(
            title="T",
            description="D",
            course_id=sample_course.id,
            due_date=due_date,
            total_points=points,
        )

        with pytest.raises(InvalidPointsError):
            await assignment_service.create(instructor, request)

    @pytest.mark.asyncio
    async def test_missing_course(self, assignment_service, mock_db, admin, due_date):
        """Test creating an assignment for a missing course."""
        mock_db.execute.return_value = _result(None)
        request = AssignmentCreateRequest(
            title="T", description="D", course_id="missing", due_date=due_date
        )

        with pytest.raises(CourseNotFoundError):
            await assignment_service.create(admin, request)

    @pytest.mark.asyncio
    async def test_student_rejected_before_lookup(
        self, assignment_service, mock_db, student, due_date
    ):
        """Test that students never reach the store."""
        request = AssignmentCreateRequest(
            title="T", description="D", course_id="c1", due_date=due_date
        )

        with pytest.raises(ForbiddenError):
            await assignment_service.create(student, request)

        mock_db.execute.assert_not_called()


class TestReadAssignment:
    """Tests for reading assignments."""

    @pytest.mark.asyncio
    async def test_enrolled_student_reads(
        self, assignment_service, mock_db, student, sample_assignment, assignment_response
    ):
        """Test that an enrolled student can read the assignment."""
        mock_db.execute.side_effect = [_result(sample_assignment), _result("enrollment-id")]

        with patch(PROJECT_ASSIGNMENTS, new=AsyncMock(return_value=[assignment_response])):
            result = await assignment_service.get_by_id(student, sample_assignment.id)

        assert result.id == sample_assignment.id

    @pytest.mark.asyncio
    async def test_unenrolled_student_forbidden(
        self, assignment_service, mock_db, student, sample_assignment
    ):
        """Test that an unenrolled student cannot read it."""
        mock_db.execute.side_effect = [_result(sample_assignment), _result(None)]

        with pytest.raises(ForbiddenError):
            await assignment_service.get_by_id(student, sample_assignment.id)

    @pytest.mark.asyncio
    async def test_instructor_reads_without_enrollment_check(
        self, assignment_service, mock_db, instructor, sample_assignment, assignment_response
    ):
        """Test that instructors are checked on ownership alone."""
        mock_db.execute.return_value = _result(sample_assignment)

        with patch(PROJECT_ASSIGNMENTS, new=AsyncMock(return_value=[assignment_response])):
            await assignment_service.get_by_id(instructor, sample_assignment.id)

        assert mock_db.execute.call_count == 1

    @pytest.mark.asyncio
    async def test_not_found(self, assignment_service, mock_db, admin):
        """Test missing assignment."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(AssignmentNotFoundError):
            await assignment_service.get_by_id(admin, "missing")

    @pytest.mark.asyncio
    async def test_student_list_filters_on_enrollments(
        self, assignment_service, mock_db, student
    ):
        """Test that students list assignments of enrolled courses only."""
        mock_db.execute.return_value = _rows([])

        with patch(PROJECT_ASSIGNMENTS, new=AsyncMock(return_value=[])):
            result = await assignment_service.list_visible(student)

        assert result == []
        query = str(mock_db.execute.call_args[0][0])
        assert "FROM enrollments" in query
        assert "ORDER BY assignments.due_date ASC" in query

    @pytest.mark.asyncio
    async def test_list_for_course_checks_course(self, assignment_service, mock_db, admin):
        """Test listing a missing course's assignments."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(CourseNotFoundError):
            await assignment_service.list_for_course(admin, "missing")


class TestUpdateAssignment:
    """Tests for assignment updates."""

    @pytest.mark.asyncio
    async def test_zero_points_means_no_change(
        self,
        assignment_service,
        mock_db,
        mock_notifier,
        instructor,
        sample_assignment,
        assignment_response,
    ):
        """Test that empty fields are left unchanged."""
        mock_db.execute.return_value = _result(sample_assignment)
        request = AssignmentUpdateRequest(title="Homework 1b", description="", total_points=0)

        with patch(PROJECT_ASSIGNMENTS, new=AsyncMock(return_value=[assignment_response])):
            await assignment_service.update(instructor, sample_assignment.id, request)

        assert sample_assignment.title == "Homework 1b"
        assert sample_assignment.description == "Loops"
        assert sample_assignment.total_points == 100.0
        assert mock_notifier.emit.call_args[0][0] == EventTypes.Assignment.UPDATED

    @pytest.mark.asyncio
    async def test_negative_points_rejected(
        self, assignment_service, mock_db, instructor, sample_assignment
    ):
        """Test that negative total_points is rejected on update."""
        mock_db.execute.return_value = _result(sample_assignment)

        with pytest.raises(InvalidPointsError):
            await assignment_service.update(
                instructor, sample_assignment.id, AssignmentUpdateRequest(total_points=-1)
            )

        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("points", [float("inf"), float("-inf"), float("nan")])
    async def test_non_finite_points_rejected(
        self, assignment_service, mock_db, instructor, sample_assignment, points
    ):
        """Test that non-finite total_points is rejected on update."""
        mock_db.execute.return_value = _result(sample_assignment)

        with pytest.raises(InvalidPointsError):
            await assignment_service.update(
                instructor, sample_assignment.id, AssignmentUpdateRequest(total_points=points)
            )

        assert sample_assignment.total_points == 100.0
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_instructor_forbidden(
        self, assignment_service, mock_db, other_instructor, sample_assignment
    ):
        """Test that only the authoring instructor may update."""
        mock_db.execute.return_value = _result(sample_assignment)

        with pytest.raises(ForbiddenError):
            await assignment_service.update(
                other_instructor, sample_assignment.id, AssignmentUpdateRequest(title="X")
            )


class TestDeleteAssignment:
    """Tests for assignment deletion."""

    @pytest.mark.asyncio
    async def test_author_deletes(
        self, assignment_service, mock_db, mock_notifier, instructor, sample_assignment
    ):
        """Test the authoring instructor deleting."""
        mock_db.execute.return_value = _result(sample_assignment)

        await assignment_service.delete(instructor, sample_assignment.id)

        mock_db.delete.assert_called_once_with(sample_assignment)
        mock_notifier.emit.assert_called_once_with(
            EventTypes.Assignment.DELETED, {"id": sample_assignment.id}
        )

    @pytest.mark.asyncio
    async def test_student_cannot_delete(self, assignment_service, mock_db, student):
        """Test that students cannot delete assignments."""
        with pytest.raises(ForbiddenError):
            await assignment_service.delete(student, "a1")

        mock_db.execute.assert_not_called()

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the role-scoped access policy."""

import pytest

from courseflow.domains.access import (
    Action,
    Decision,
    Principal,
    Resource,
    ResourceContext,
    Role,
    Scope,
    authorize,
    decide,
    require_scope,
    scope_for,
)
from courseflow.domains.errors import ForbiddenError

ADMIN = Principal(id="admin-1", role=Role.ADMIN)
INSTRUCTOR = Principal(id="inst-1", role=Role.INSTRUCTOR)
STUDENT = Principal(id="stud-1", role=Role.STUDENT)


class TestScopeTable:
    """Tests for scope_for()."""

    @pytest.mark.parametrize("resource", list(Resource))
    @pytest.mark.parametrize("action", list(Action))
    def test_admin_has_any_scope_everywhere(self, resource, action):
        """Admins get ANY for every resource and action."""
        assert scope_for(ADMIN, resource, action) == Scope.ANY

    @pytest.mark.parametrize(
        "role,resource,action,expected",
        [
            (Role.INSTRUCTOR, Resource.COURSE, Action.READ, Scope.OWN),
            (Role.INSTRUCTOR, Resource.COURSE, Action.UPDATE, Scope.OWN),
            (Role.INSTRUCTOR, Resource.COURSE, Action.CREATE, Scope.NONE),
            (Role.INSTRUCTOR, Resource.COURSE, Action.DELETE, Scope.NONE),
            (Role.INSTRUCTOR, Resource.ASSIGNMENT, Action.CREATE, Scope.OWN),
            (Role.INSTRUCTOR, Resource.ASSIGNMENT, Action.DELETE, Scope.OWN),
            (Role.INSTRUCTOR, Resource.SUBMISSION, Action.GRADE, Scope.OWN),
            (Role.INSTRUCTOR, Resource.SUBMISSION, Action.CREATE, Scope.NONE),
            (Role.INSTRUCTOR, Resource.SUBMISSION, Action.REVISE, Scope.NONE),
            (Role.INSTRUCTOR, Resource.ENROLLMENT, Action.UPDATE, Scope.OWN),
            (Role.INSTRUCTOR, Resource.ENROLLMENT, Action.CREATE, Scope.NONE),
            (Role.STUDENT, Resource.COURSE, Action.READ, Scope.PUBLISHED),
            (Role.STUDENT, Resource.COURSE, Action.UPDATE, Scope.NONE),
            (Role.STUDENT, Resource.ENROLLMENT, Action.CREATE, Scope.OWN),
            (Role.STUDENT, Resource.ENROLLMENT, Action.UPDATE, Scope.NONE),
            (Role.STUDENT, Resource.ASSIGNMENT, Action.READ, Scope.ENROLLED),
            (Role.STUDENT, Resource.ASSIGNMENT, Action.CREATE, Scope.NONE),
            (Role.STUDENT, Resource.SUBMISSION, Action.CREATE, Scope.ENROLLED),
            (Role.STUDENT, Resource.SUBMISSION, Action.REVISE, Scope.OWN),
            (Role.STUDENT, Resource.SUBMISSION, Action.GRADE, Scope.NONE),
            (Role.STUDENT, Resource.SUBMISSION, Action.DELETE, Scope.NONE),
        ],
    )
    def test_role_scopes(self, role, resource, action, expected):
        """Non-admin roles follow the policy table; gaps are NONE."""
        principal = Principal(id="u", role=role)
        assert scope_for(principal, resource, action) == expected


class TestDecide:
    """Tests for decide()."""

    def test_own_scope_allows_owner(self):
        """OWN allows when the owner anchor matches the caller."""
        ctx = ResourceContext(owner_id=INSTRUCTOR.id)
        assert decide(INSTRUCTOR, Action.UPDATE, Resource.COURSE, ctx) == Decision.ALLOW

    def test_own_scope_denies_other_owner(self):
        """OWN denies when someone else owns the record."""
        ctx = ResourceContext(owner_id="inst-2")
        assert decide(INSTRUCTOR, Action.UPDATE, Resource.COURSE, ctx) == Decision.DENY

    def test_own_scope_denies_without_owner(self):
        """OWN denies when no owner fact is supplied."""
        assert decide(INSTRUCTOR, Action.UPDATE, Resource.COURSE) == Decision.DENY

    def test_published_scope(self):
        """Students can read published courses only."""
        published = ResourceContext(is_published=True)
        draft = ResourceContext(is_published=False)

        assert decide(STUDENT, Action.READ, Resource.COURSE, published) == Decision.ALLOW
        assert decide(STUDENT, Action.READ, Resource.COURSE, draft) == Decision.DENY

    def test_enrolled_scope(self):
        """Students read assignments of courses they are enrolled in."""
        enrolled = ResourceContext(is_enrolled=True)

        assert decide(STUDENT, Action.READ, Resource.ASSIGNMENT, enrolled) == Decision.ALLOW
        assert decide(STUDENT, Action.READ, Resource.ASSIGNMENT) == Decision.DENY

    def test_none_scope_denies_regardless_of_context(self):
        """NONE denies even with favourable facts."""
        ctx = ResourceContext(owner_id=STUDENT.id, is_published=True, is_enrolled=True)
        assert decide(STUDENT, Action.GRADE, Resource.SUBMISSION, ctx) == Decision.DENY

    def test_admin_allowed_without_context(self):
        """ANY needs no context."""
        assert decide(ADMIN, Action.DELETE, Resource.COURSE) == Decision.ALLOW


class TestAuthorize:
    """Tests for authorize() and require_scope()."""

    def test_authorize_raises_forbidden_on_deny(self):
        """A denied decision raises ForbiddenError."""
        with pytest.raises(ForbiddenError) as exc_info:
            authorize(STUDENT, Action.CREATE, Resource.COURSE)

        assert exc_info.value.code == "forbidden"
        assert "create" in exc_info.value.message

    def test_authorize_uses_message_override(self):
        """A custom message replaces the generated one."""
        with pytest.raises(ForbiddenError, match="custom"):
            authorize(INSTRUCTOR, Action.DELETE, Resource.COURSE, message="custom")

    def test_authorize_passes_on_allow(self):
        """An allowed decision returns None."""
        ctx = ResourceContext(owner_id=STUDENT.id)
        assert authorize(STUDENT, Action.REVISE, Resource.SUBMISSION, ctx) is None

    def test_require_scope_returns_scope(self):
        """require_scope returns the scope when one exists."""
        assert require_scope(STUDENT, Action.READ, Resource.ASSIGNMENT) == Scope.ENROLLED

    def test_require_scope_rejects_none(self):
        """require_scope raises when the role has no scope at all."""
        with pytest.raises(ForbiddenError):
            require_scope(STUDENT, Action.GRADE, Resource.SUBMISSION)

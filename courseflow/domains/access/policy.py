# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-scoped access policy.

A single table maps (role, resource, action) to a Scope. Every
authorization decision and every list filter is derived from it:

- decide() evaluates a Scope against the facts in a ResourceContext.
- scope_for() exposes the raw Scope so list queries can translate it into
  a WHERE clause instead of re-implementing role checks.
- authorize() raises ForbiddenError when decide() denies.
- require_scope() raises ForbiddenError when the role has no scope at all.

The policy is pure. It never touches the store; callers fetch whatever
ownership facts the decision needs and pass them in.

Example:
    >>> principal = Principal(id="u1", role=Role.STUDENT)
    >>> decide(principal, Action.READ, Resource.COURSE, ResourceContext(is_published=True))
    <Decision.ALLOW: 'allow'>
"""

from dataclasses import dataclass
from enum import Enum

from courseflow.domains.errors import ForbiddenError


class Role(str, Enum):
    """Principal role."""

    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"


class Resource(str, Enum):
    """Entity family an action targets."""

    COURSE = "course"
    ENROLLMENT = "enrollment"
    ASSIGNMENT = "assignment"
    SUBMISSION = "submission"


class Action(str, Enum):
    """Intent of a request."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    GRADE = "grade"
    REVISE = "revise"


class Scope(str, Enum):
    """Which records of a resource a role may act on.

    ANY: every record.
    OWN: records whose owner anchor equals the principal id.
    PUBLISHED: published courses only.
    ENROLLED: records in a course the principal is enrolled in.
    NONE: nothing.
    """

    ANY = "any"
    OWN = "own"
    PUBLISHED = "published"
    ENROLLED = "enrolled"
    NONE = "none"


class Decision(str, Enum):
    """Outcome of a policy evaluation."""

    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller identity.

    Attributes:
        id: User id.
        role: User role.
    """

    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        """Check if the principal is an admin."""
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class ResourceContext:
    """Facts about the target record needed to evaluate a Scope.

    Attributes:
        owner_id: Ownership anchor. Course instructor for courses and for
            enrollments/assignments when the actor is an instructor, the
            assignment's instructor_id for submissions graded by an
            instructor, the student id for student-owned records.
        is_published: Whether the course is published.
        is_enrolled: Whether the principal is enrolled in the course.
    """

    owner_id: str | None = None
    is_published: bool = False
    is_enrolled: bool = False


_POLICY_TABLE: dict[Role, dict[Resource, dict[Action, Scope]]] = {
    Role.INSTRUCTOR: {
        Resource.COURSE: {
            Action.READ: Scope.OWN,
            Action.UPDATE: Scope.OWN,
        },
        Resource.ASSIGNMENT: {
            Action.READ: Scope.OWN,
            Action.CREATE: Scope.OWN,
            Action.UPDATE: Scope.OWN,
            Action.DELETE: Scope.OWN,
        },
        Resource.SUBMISSION: {
            Action.READ: Scope.OWN,
            Action.GRADE: Scope.OWN,
        },
        Resource.ENROLLMENT: {
            Action.READ: Scope.OWN,
            Action.UPDATE: Scope.OWN,
        },
    },
    Role.STUDENT: {
        Resource.COURSE: {
            Action.READ: Scope.PUBLISHED,
        },
        Resource.ENROLLMENT: {
            Action.READ: Scope.OWN,
            Action.CREATE: Scope.OWN,
        },
        Resource.ASSIGNMENT: {
            Action.READ: Scope.ENROLLED,
        },
        Resource.SUBMISSION: {
            Action.CREATE: Scope.ENROLLED,
            Action.READ: Scope.OWN,
            Action.REVISE: Scope.OWN,
        },
    },
}


def scope_for(principal: Principal, resource: Resource, action: Action) -> Scope:
    """Look up the scope a principal has for an action on a resource.

    Args:
        principal: The caller.
        resource: Targeted entity family.
        action: Requested action.

    Returns:
        The Scope from the policy table. Admins always get ANY; anything
        absent from the table is NONE.
    """
    if principal.is_admin:
        return Scope.ANY
    return _POLICY_TABLE.get(principal.role, {}).get(resource, {}).get(action, Scope.NONE)


def decide(
    principal: Principal,
    action: Action,
    resource: Resource,
    context: ResourceContext | None = None,
) -> Decision:
    """Evaluate the policy for one request.

    Args:
        principal: The caller.
        action: Requested action.
        resource: Targeted entity family.
        context: Facts about the target record. Only needed for scopes
            other than ANY and NONE.

    Returns:
        Decision.ALLOW or Decision.DENY.
    """
    scope = scope_for(principal, resource, action)
    ctx = context or ResourceContext()

    if scope == Scope.ANY:
        allowed = True
    elif scope == Scope.OWN:
        allowed = ctx.owner_id is not None and ctx.owner_id == principal.id
    elif scope == Scope.PUBLISHED:
        allowed = ctx.is_published
    elif scope == Scope.ENROLLED:
        allowed = ctx.is_enrolled
    else:
        allowed = False

    return Decision.ALLOW if allowed else Decision.DENY


def authorize(
    principal: Principal,
    action: Action,
    resource: Resource,
    context: ResourceContext | None = None,
    message: str | None = None,
) -> None:
    """Raise unless the policy allows the request.

    Args:
        principal: The caller.
        action: Requested action.
        resource: Targeted entity family.
        context: Facts about the target record.
        message: Error message override.

    Raises:
        ForbiddenError: If the decision is DENY.
    """
    if decide(principal, action, resource, context) == Decision.DENY:
        raise ForbiddenError(message or f"Not authorized to {action.value} this {resource.value}")


def require_scope(principal: Principal, action: Action, resource: Resource) -> Scope:
    """Reject up front when the role has no scope at all for the action.

    Lets services deny a request before touching the store when no record
    could ever be allowed.

    Args:
        principal: The caller.
        action: Requested action.
        resource: Targeted entity family.

    Returns:
        The principal's Scope, never Scope.NONE.

    Raises:
        ForbiddenError: If the scope is NONE.
    """
    scope = scope_for(principal, resource, action)
    if scope == Scope.NONE:
        raise ForbiddenError(f"Not authorized to {action.value} this {resource.value}")
    return scope

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error taxonomy.

Every error raised by a domain service derives from DomainError and carries
a stable ``code``. The transport layer maps codes to status codes; services
define narrower subclasses for their own failure modes.

Example:
    >>> try:
    ...     await service.enroll(principal, course_id)
    ... except ConflictError as e:
    ...     print(e.code)
    'conflict'
"""


class DomainError(Exception):
    """Base exception for domain rule violations.

    Attributes:
        message: Human-readable error description.
        code: Stable machine-readable error kind.
    """

    code = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """A referenced entity is absent."""

    code = "not_found"


class ForbiddenError(DomainError):
    """Principal lacks rights for the action."""

    code = "forbidden"


class UnauthorizedError(DomainError):
    """No principal was supplied."""

    code = "unauthorized"


class ConflictError(DomainError):
    """Uniqueness violation."""

    code = "conflict"


class InvalidStateError(DomainError):
    """Entity exists but is in a state that disallows the action."""

    code = "invalid_state"


class ValidationError(DomainError):
    """Input is outside allowed bounds."""

    code = "validation_error"

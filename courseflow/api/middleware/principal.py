# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gateway principal middleware.

Credentials are verified upstream by the gateway, which forwards the
resolved identity as headers. This middleware only turns those headers
into a Principal on request.state; it never parses tokens.

Example:
    GET /api/v1/courses
    X-Principal-Id: 6f1c...
    X-Principal-Role: instructor
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from courseflow.domains.access.policy import Principal, Role
from courseflow.utils.logging import bind_principal, clear_context

logger = logging.getLogger(__name__)

PRINCIPAL_ID_HEADER = "X-Principal-Id"
PRINCIPAL_ROLE_HEADER = "X-Principal-Role"


def principal_from_headers(request: Request) -> Principal | None:
    """Build a Principal from gateway headers.

    Args:
        request: HTTP request.

    Returns:
        Principal, or None if headers are missing or the role is unknown.
    """
    principal_id = request.headers.get(PRINCIPAL_ID_HEADER, "").strip()
    role_value = request.headers.get(PRINCIPAL_ROLE_HEADER, "").strip().lower()
    if not principal_id or not role_value:
        return None

    try:
        role = Role(role_value)
    except ValueError:
        logger.debug("Unknown principal role header: %s", role_value)
        return None

    return Principal(id=principal_id, role=role)


class PrincipalMiddleware(BaseHTTPMiddleware):
    """Populate request.state.principal from gateway headers.

    Requests without a valid identity continue with principal = None;
    endpoints decide whether one is required.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request and attach the principal."""
        principal = principal_from_headers(request)
        request.state.principal = principal

        if principal is not None:
            bind_principal(principal.id, principal.role.value)
        try:
            return await call_next(request)
        finally:
            clear_context()


def get_current_principal(request: Request) -> Principal | None:
    """Get the principal from request state."""
    return getattr(request.state, "principal", None)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Every endpoint gets the general API limit; create/update endpoints are
additionally decorated with the stricter mutation limit. Clients are
keyed by principal id when known, otherwise by IP address.

Example:
    @router.post("")
    @mutation_limit
    async def create_course(request: Request, ...):
        ...
"""

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from courseflow.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Args:
        request: HTTP request.

    Returns:
        "principal:<id>" when a principal is attached, else "ip:<address>".
    """
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return f"principal:{principal.id}"
    return f"ip:{get_remote_address(request)}"


settings = get_settings()
limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[settings.rate_limit.api],
    storage_uri=settings.rate_limit.storage_uri,
    enabled=settings.rate_limit.enabled,
)

mutation_limit = limiter.limit(settings.rate_limit.mutation)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Return 429 Too Many Requests.

    Args:
        request: HTTP request.
        exc: Rate limit exceeded exception.

    Returns:
        JSON response with error details.
    """
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )

    return JSONResponse(
        status_code=429,
        content={
            "code": "rate_limited",
            "detail": "Too many requests from this client, please try again later.",
        },
    )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware."""

from courseflow.api.middleware.principal import (
    PRINCIPAL_ID_HEADER,
    PRINCIPAL_ROLE_HEADER,
    PrincipalMiddleware,
    get_current_principal,
    principal_from_headers,
)
from courseflow.api.middleware.rate_limit import (
    limiter,
    mutation_limit,
    rate_limit_exceeded_handler,
)

__all__ = [
    "PRINCIPAL_ID_HEADER",
    "PRINCIPAL_ROLE_HEADER",
    "PrincipalMiddleware",
    "get_current_principal",
    "principal_from_headers",
    "limiter",
    "mutation_limit",
    "rate_limit_exceeded_handler",
]

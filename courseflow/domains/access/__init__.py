# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-scoped access policy."""

from courseflow.domains.access.policy import (
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

__all__ = [
    "Action",
    "Decision",
    "Principal",
    "Resource",
    "ResourceContext",
    "Role",
    "Scope",
    "authorize",
    "decide",
    "require_scope",
    "scope_for",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for courseflow.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from courseflow.utils.datetime import ensure_utc, utc_now
from courseflow.utils.logging import bind_principal, clear_context, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "bind_principal",
    "clear_context",
    "utc_now",
    "ensure_utc",
]

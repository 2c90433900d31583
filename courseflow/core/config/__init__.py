# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for courseflow.

Example:
    >>> from courseflow.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.database.async_url)
"""

from courseflow.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    EventSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "EventSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]

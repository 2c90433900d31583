"""courseflow backend.

Role-scoped authorization and lifecycle engine for a course platform:
courses, enrollments, assignments, submissions and grading.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain event type definitions.

Events are named ``<entity>.<verb>`` and emitted once per committed
mutation. Payloads carry the JSON-dumped response model, or just
``{"id": ...}`` for deletions.
"""


class EventTypes:
    """All event types in courseflow organized by entity."""

    class Course:
        """Course events."""

        CREATED = "course.created"
        UPDATED = "course.updated"
        DELETED = "course.deleted"

    class Enrollment:
        """Enrollment events."""

        CREATED = "enrollment.created"
        UPDATED = "enrollment.updated"
        DELETED = "enrollment.deleted"

    class Assignment:
        """Assignment events."""

        CREATED = "assignment.created"
        UPDATED = "assignment.updated"
        DELETED = "assignment.deleted"

    class Submission:
        """Submission events."""

        CREATED = "submission.created"
        UPDATED = "submission.updated"
        GRADED = "submission.graded"
        DELETED = "submission.deleted"


class EventPatterns:
    """Wildcard patterns for subscribing to groups of events."""

    ALL = "*"

    ALL_COURSE = "course.*"
    ALL_ENROLLMENT = "enrollment.*"
    ALL_ASSIGNMENT = "assignment.*"
    ALL_SUBMISSION = "submission.*"

    ALL_CREATED = "*.created"
    ALL_DELETED = "*.deleted"

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Server entry point."""

import uvicorn

from courseflow.core.config import get_settings
from courseflow.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def run() -> None:
    """Run the API server with uvicorn."""
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting server",
        host=settings.api.host,
        port=settings.api.port,
        environment=settings.environment,
    )
    uvicorn.run(
        "courseflow.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=1 if settings.debug else settings.api.workers,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()

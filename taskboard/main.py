"""
Task board - server entry point.

    python -m taskboard.main
    taskboard-api
"""

from __future__ import annotations

import uvicorn

from taskboard.config import get_settings


def main():
    """Run the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "taskboard.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

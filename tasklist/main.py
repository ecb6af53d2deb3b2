"""
Task list service - main entry point.

Validates configuration, sets up logging and serves the API with uvicorn.
"""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from tasklist.config import get_settings
from tasklist.core.errors import ConfigError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run the task list API server")
    parser.add_argument("--host", default=settings.api_host)
    parser.add_argument("--port", type=int, default=settings.api_port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings.validate_required()
    except ConfigError as e:
        logger.error(f"Refusing to start: {e.message}")
        return 1

    logger.info(f"Serving on http://{args.host}:{args.port}{settings.api_prefix}")
    uvicorn.run(
        "tasklist.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

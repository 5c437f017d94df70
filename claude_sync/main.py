"""
Claude Sync - Project Context Sync API

Long-running server entry point.
"""
import argparse
import logging

from .application import configure_logging, create_app
from .config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings)
app = create_app(settings)


def run() -> None:
    """Run the long-running server with uvicorn."""
    parser = argparse.ArgumentParser(description="Run the Claude Sync API server.")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (dev only)")
    args = parser.parse_args()

    import uvicorn

    logger.info(f"Claude Sync API running on port {args.port}")
    uvicorn.run("claude_sync.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    run()

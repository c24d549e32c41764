"""FastAPI application entry point."""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from build_hook.config import Settings, get_settings
from build_hook.webhook import GitHubWebhook
from build_hook.webhook import router as webhook_router
from build_hook.webhook.dispatcher import Callback

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def setup_logging(level: str) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan handler."""
    logger.info("Build hook starting up")
    yield
    logger.info("Build hook shutting down")


def create_app(
    settings: Settings | None = None,
    push_callback: Callback | None = None,
    release_callback: Callback | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Build Hook",
        description="Authenticated GitHub webhook receiver",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.webhook = GitHubWebhook(
        settings.webhook,
        push_callback=push_callback,
        release_callback=release_callback,
    )

    # Include routers
    app.include_router(webhook_router, prefix="/webhook", tags=["webhook"])

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "healthy", "version": VERSION}

    return app


def cli() -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Build Hook - GitHub webhook receiver")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the webhook server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to (env: BUILDER_HOST)")
    serve_parser.add_argument(
        "--port", type=int, default=None, help="Port to bind to (env: BUILDER_PORT)"
    )
    serve_parser.add_argument(
        "--webhook",
        "--secret",
        dest="secret",
        default=None,
        help="Mandatory webhook secret (env: BUILDER_WEBHOOK)",
    )

    args = parser.parse_args()

    if args.command != "serve":
        parser.print_help()
        return 0

    overrides = {"webhook": args.secret} if args.secret else {}
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        print(f"Error: invalid configuration\n{e}", file=sys.stderr)
        serve_parser.print_usage(sys.stderr)
        return 1

    setup_logging(settings.log_level)
    app = create_app(settings)

    host = args.host if args.host is not None else settings.host
    port = args.port if args.port is not None else settings.port
    logger.info(f"Listening on {host}:{port}")
    uvicorn.run(app, host=host, port=port)
    return 0


if __name__ == "__main__":
    sys.exit(cli())

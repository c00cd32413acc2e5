"""FastAPI application entry point."""

import argparse
import asyncio
import json
import logging
import os
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from review_bridge.config import get_settings
from review_bridge.github import GitHubAPIError, GitHubClient
from review_bridge.review import ReviewError, ReviewRequest, run_review
from review_bridge.webhook import router as webhook_router

logger = logging.getLogger(__name__)


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
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(
        f"Review bridge starting up: secret={bool(settings.github_webhook_secret)}, "
        f"app_id={bool(settings.app_id)}"
    )
    yield
    logger.info("Review bridge shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Review Bridge",
        description="GitHub App webhook that dispatches AI pull request reviews",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(webhook_router, tags=["webhook"])

    @app.get("/healthz", response_class=PlainTextResponse)
    async def health_check() -> str:
        """Health check endpoint."""
        return "ok"

    return app


app = create_app()


async def _review_from_event(event_path: str) -> int:
    settings = get_settings()

    try:
        with open(event_path, encoding="utf-8") as f:
            event = json.load(f)
        request = ReviewRequest.from_dispatch_event(event)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read dispatch event from {event_path}: {e}")
        return 1
    except ReviewError as e:
        logger.error(str(e))
        return 1

    if not settings.github_token:
        logger.error("GITHUB_TOKEN is not configured")
        return 1

    async with GitHubClient(settings.github_token, api_url=settings.github_api_url) as client:
        try:
            await run_review(request, client, settings)
        except (ReviewError, GitHubAPIError) as e:
            target = f"{request.owner}/{request.repo}#{request.pr_number}"
            logger.error(f"Review failed for {target}: {e}")
            return 1
    return 0


def cli() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Review Bridge - AI pull request reviews")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the webhook server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # Review command
    review_parser = subparsers.add_parser(
        "review", help="Post a review for a repository_dispatch event (run inside CI)"
    )
    review_parser.add_argument(
        "--event-path",
        default=os.environ.get("GITHUB_EVENT_PATH"),
        help="Path to the dispatch event JSON (defaults to GITHUB_EVENT_PATH)",
    )

    args = parser.parse_args()
    settings = get_settings()

    if args.command == "serve":
        setup_logging(settings.log_level)
        uvicorn.run(
            "review_bridge.main:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
            reload=args.reload,
        )
    elif args.command == "review":
        setup_logging(settings.log_level)
        if not args.event_path:
            parser.error("--event-path or GITHUB_EVENT_PATH is required")
        sys.exit(asyncio.run(_review_from_event(args.event_path)))
    else:
        parser.print_help()


if __name__ == "__main__":
    cli()

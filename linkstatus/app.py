"""Web application wiring and the service entry point."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Protocol

from aiohttp import web

from linkstatus.checker import SchemeFallbackChecker
from linkstatus.client import HTTPLinkClient
from linkstatus.config import get_app_port
from linkstatus.handlers import LinkHandler
from linkstatus.pdf import build_pdf
from linkstatus.repository import LinkRepository
from linkstatus.service import LinkService

GRACEFUL_SHUTDOWN_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


class LinkHandlerProtocol(Protocol):
    async def get_status(self, request: web.Request) -> web.StreamResponse: ...

    async def build_pdf(self, request: web.Request) -> web.StreamResponse: ...


def create_app(handler: LinkHandlerProtocol) -> web.Application:
    """Build the web application with the link routes."""
    app = web.Application()
    app.router.add_post("/links/get_status", handler.get_status)
    app.router.add_post("/links/pdf", handler.build_pdf)
    return app


def run(data_dir: str | Path = "data", port: int | None = None) -> None:
    """Load stored link sets, serve until a termination signal, then persist the data.

    Raises ValueError when the stored data cannot be loaded.
    """
    repo = LinkRepository(data_dir)
    repo.load_data_from_json()

    checker = SchemeFallbackChecker(HTTPLinkClient())
    service = LinkService(repo, checker)
    handler = LinkHandler(service, build_pdf)
    app = create_app(handler)

    web.run_app(
        app,
        port=get_app_port() if port is None else port,
        shutdown_timeout=GRACEFUL_SHUTDOWN_TIMEOUT,
    )
    logger.info("All active requests finished processing.")

    logger.info("Persisting data to JSON files...")
    try:
        repo.store_data_to_json()
    except OSError as exc:
        logger.error("Error storing data to JSON: %s", exc)
    else:
        logger.info("Data persistence complete.")
    logger.info("Server gracefully stopped.")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="linkstatus", description="Serve link availability checks and reports."
    )
    parser.add_argument(
        "--data-dir", default="data", help="directory of the persisted link sets"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    try:
        run(args.data_dir)
    except ValueError as exc:
        logger.error("error during loading data from JSON file(s): %s", exc)
        return 1
    return 0
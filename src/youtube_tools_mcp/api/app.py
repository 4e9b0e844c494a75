"""FastAPI application exposing the YouTube adapters over HTTP."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from ..config import configure_logging, get_config
from .routes import router

logger = logging.getLogger(__name__)


def health_check() -> dict[str, str]:
    return {"status": "ok"}


def create_app() -> FastAPI:
    app = FastAPI(title="YouTube Tools API", version="0.1.0")
    app.add_api_route("/health", health_check, methods=["GET"], tags=["meta"])
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    """Entry-point for ``youtube-tools-api`` console script."""
    configure_logging()
    cfg = get_config()
    logger.info("Serving YouTube tools API on %s:%d", cfg.http_host, cfg.http_port)
    uvicorn.run(app, host=cfg.http_host, port=cfg.http_port, log_level=cfg.log_level.lower())


if __name__ == "__main__":
    main()

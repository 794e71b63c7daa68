"""
Site Timeline API Server - Gantt layout service for the project dashboard.
"""
# ruff: noqa: S104
# S104: Development server binding (guarded by __name__ check)

import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.timeline_router import timeline_router
from timeline.observability import CorrelationIdMiddleware, configure_logging_from_env

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Site Timeline API",
        description="Timeline/Gantt positioning and navigation for construction project tasks",
        version="1.0.0",
    )

    # CORS middleware - configurable via CORS_ORIGINS env var
    # Dev default: allow all origins; Production: set CORS_ORIGINS to comma-separated list
    cors_origins_env = os.getenv("CORS_ORIGINS", "*")
    cors_origins = (
        ["*"] if cors_origins_env == "*" else [o.strip() for o in cors_origins_env.split(",")]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(timeline_router, prefix="/api/timeline")
    return app


app = create_app()


# ==== Main ====


def main():
    """Run the server."""
    configure_logging_from_env()
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", 8420))
    logger.info(f"Starting Site Timeline API on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()

"""
FastAPI application for the Harbourmaster ingestion service.

Endpoints:
- Ingesting transcripts into the harbour knowledge base
- Re-triggering embeddings for stored rows (internal)
- Working the human-review queue and the error log

Architecture Decision:
- All collaborators live in one IngestContext on app.state, built at startup
  from settings; tests pass their own context to create_app()
- Every IngestError is rendered by one handler into the uniform error body
"""

# Load .env BEFORE any application imports that read os.environ
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from harbourmaster import __version__
from harbourmaster.api.routes import embed, errors, ingest, review
from harbourmaster.api.schemas import HealthResponse
from harbourmaster.config.logging import configure_logging
from harbourmaster.config.settings import get_settings
from harbourmaster.errors import IngestError
from harbourmaster.pipeline.context import IngestContext, build_context

logger = structlog.get_logger(__name__)


def create_app(context: Optional[IngestContext] = None) -> FastAPI:
    """Build the application.

    Args:
        context: Pre-built collaborators. When omitted, one is built from
            settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is None:
            settings = get_settings()
            configure_logging(settings.log_level, settings.log_json)
            app.state.context = build_context(settings)
            logger.info("service_started", database_url=settings.database_url)
        yield

    app = FastAPI(
        title="Harbourmaster Ingestion API",
        description="Turns spoken harbour transcripts into validated knowledge-base records",
        version=__version__,
        lifespan=lifespan,
    )
    if context is not None:
        app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(IngestError)
    async def ingest_error_handler(request: Request, exc: IngestError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    # =========================================================================
    # API routes - mounted under /api
    # =========================================================================

    app.include_router(ingest.router, prefix="/api", tags=["Ingest"])
    app.include_router(embed.router, prefix="/api", tags=["Embed"])
    app.include_router(review.router, prefix="/api", tags=["Review"])
    app.include_router(errors.router, prefix="/api", tags=["Errors"])

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(version=__version__)

    return app


app = create_app()


def main(host: str = "0.0.0.0", port: int = 8000) -> None:
    import uvicorn

    uvicorn.run("harbourmaster.api.main:app", host=host, port=port)


if __name__ == "__main__":
    main()

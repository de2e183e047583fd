"""
Concrete Mix Intake API

A FastAPI service behind the laboratory's client intake form: stores mix
designs in an append-only row store, allocates sequential application
numbers and derives w/c and mix ratios.

Main application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mixintake.api import routes_derive, routes_health, routes_lookup, routes_submit
from mixintake.core.config import get_settings
from mixintake.core.database import close_db, init_db
from mixintake.core.errors import IntakeError
from mixintake.core.logging import get_logger, setup_logging
from mixintake.core.middleware import RequestLoggingMiddleware

# Initialize application settings
settings = get_settings()

# Setup structured logging
setup_logging(settings.log_level, settings.log_format)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup creates the engine and the ``sheet_rows`` table; shutdown
    disposes the engine.
    """
    await init_db()
    logger.info(
        "Mix intake API starting",
        host=settings.api_host,
        port=settings.api_port,
        database=settings.database_url.split("@")[-1],  # hide credentials
        record_id_scheme=settings.record_id_scheme,
        record_id_prefix=settings.record_id_prefix,
    )

    yield

    await close_db()
    logger.info("Mix intake API shutting down")


app = FastAPI(
    title="Concrete Mix Intake API",
    description="""
    ## Client intake for the concrete testing laboratory

    - **Submit**: store a mix design and receive an application number
      (e.g. `UNILAG-CL-K000001`)
    - **Lookup**: read a submission back by application number
    - **Derive**: live w/c ratio and mix ratio string for the form

    ### Input modes
    - **kgm3**: cement, water, fine, (medium,) coarse aggregate in kg/m³
    - **ratio**: parts relative to cement plus the w/c ratio
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time", "X-Request-ID"],
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(IntakeError)
async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    """Client and storage errors of a single submission."""
    if exc.status_code >= 500:
        logger.error("Request failed", code=exc.code, error=exc.message)
    else:
        logger.info("Request rejected", code=exc.code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters, rendered like other client errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid":
        message = "Request body is not valid JSON"
    elif tuple(first.get("loc", ())) == ("body",):
        message = "Request body must be a JSON object"
    else:
        field = ".".join(str(part) for part in tuple(first.get("loc", ()))[1:]) or "body"
        message = f"Invalid value for field: {field}"
    logger.info("Request rejected", code="E_INVALID_BODY", error=message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled errors."""
    logger.error("Unhandled error", error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": getattr(request.state, "request_id", "unknown"),
        }
    )


# Include API routers
app.include_router(
    routes_health.router,
    prefix="/healthz",
    tags=["Health Check"]
)

app.include_router(
    routes_submit.router,
    prefix="/api",
    tags=["Submission"]
)

app.include_router(
    routes_lookup.router,
    prefix="/api",
    tags=["Lookup"]
)

app.include_router(
    routes_derive.router,
    prefix="/api",
    tags=["Derivation"]
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with basic API information."""
    return {
        "message": "Concrete Mix Intake API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
        "health": "/healthz"
    }


def run() -> None:
    """Run the application directly (for development)."""
    uvicorn.run(
        "mixintake.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gentlytold.api.deps import get_settings
from gentlytold.app_shell.config import validate_ops_rules
from gentlytold.domain.errors import GentlyToldError
from gentlytold.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError) as e:
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)
    logger.info("Rules loaded from %s", settings.rules_path)
    validate_ops_rules(rules, settings.data_dir, settings.master_key)

    yield


app = FastAPI(
    title="GentlyTold Memorials API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from gentlytold.api.routes import admin, drafts, memories, moderation, photos  # noqa: E402

app.include_router(memories.router, prefix="/api", tags=["Memories"])
app.include_router(moderation.router, prefix="/api", tags=["Moderation"])
app.include_router(admin.router, prefix="/api", tags=["Admin"])
app.include_router(photos.router, prefix="/api", tags=["Photos"])
app.include_router(drafts.router, prefix="/api", tags=["Drafts"])
app.include_router(drafts.published_router, prefix="", tags=["Published"])


# CORS is open: memorial pages are static sites on other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Master-Key"],
    max_age=86400,
)


# --- Error handling: every error body is {"error": message} ---


@app.exception_handler(GentlyToldError)
async def handle_domain_error(request: Request, exc: GentlyToldError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
        message = f"Invalid {location}: {first.get('msg')}" if location else str(first.get("msg"))
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/api/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "gentlytold-api",
        "timestamp": datetime.now(UTC).isoformat(),
    }

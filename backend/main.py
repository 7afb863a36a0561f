import logging
from contextlib import asynccontextmanager
from typing import Any

from api.routes import generate
from config import AppMode, get_settings
from fastapi import APIRouter, FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from middleware.security import SecurityHeadersMiddleware
from services.size_lock import TargetRange
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# The SDK logs every HTTP call at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("google_genai").setLevel(logging.WARNING)

SERVICE_NAME = "Model Studio API"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown"""
    logger.info("Starting %s in %s mode...", SERVICE_NAME, settings.APP_MODE.value)
    logger.info(
        "Size lock target: %s (start %dpx @ q%d, %d attempts max)",
        TargetRange(settings.SIZE_LOCK_MIN_BYTES, settings.SIZE_LOCK_MAX_BYTES).describe_mb(),
        settings.SIZE_LOCK_START_WIDTH,
        settings.SIZE_LOCK_START_QUALITY,
        settings.SIZE_LOCK_MAX_ITERATIONS,
    )

    try:
        if settings.GEMINI_API_KEY:
            from services.gemini_generator import GeminiImageGenerator

            GeminiImageGenerator.get_instance()
            logger.info("Google Gemini image generator initialized")
        else:
            logger.warning("No GEMINI_API_KEY configured. Set it in .env")
    except Exception as e:
        logger.warning("Failed to initialize AI generator: %s", e)
        logger.warning("AI generation will not be available")

    yield

    logger.info("Shutting down %s...", SERVICE_NAME)


app = FastAPI(
    title=SERVICE_NAME,
    description="Catalog photo generation for saree listings, backed by Google Gemini",
    version=SERVICE_VERSION,
    lifespan=lifespan,
    debug=(settings.APP_MODE == AppMode.DEV),
)

MAX_ERROR_STRING_CHARS = 400
MAX_ERROR_CONTAINER_ITEMS = 50
MAX_ERROR_DEPTH = 8


def _truncate_string(value: str, max_chars: int = MAX_ERROR_STRING_CHARS) -> str:
    if len(value) <= max_chars:
        return value
    return f"{value[:max_chars]}…(truncated)"


def _sanitize_for_json(value: Any, *, _depth: int = 0) -> Any:
    """
    Make sure error payloads are always UTF-8 encodable.

    RequestValidationError details echo user-provided form values. Unpaired
    surrogates would crash the JSON encoder and turn a 422 into a 500, and a
    long free-text note would be reflected in full, so strings are repaired
    and truncated.
    """
    if _depth > MAX_ERROR_DEPTH:
        return "<max depth reached>"
    if value is None:
        return None
    if isinstance(value, (int, float, bool)):
        return value
    if isinstance(value, str):
        safe = value.encode("utf-8", errors="replace").decode("utf-8", errors="replace")
        return _truncate_string(safe)
    if isinstance(value, bytes):
        return _truncate_string(value.decode("utf-8", errors="replace"))
    if isinstance(value, (list, tuple, set)):
        items = list(value)
        out = [_sanitize_for_json(v, _depth=_depth + 1) for v in items[:MAX_ERROR_CONTAINER_ITEMS]]
        if len(items) > MAX_ERROR_CONTAINER_ITEMS:
            out.append(f"... ({len(items) - MAX_ERROR_CONTAINER_ITEMS} more items truncated)")
        return out
    if isinstance(value, dict):
        pairs = list(value.items())
        result: dict[str, Any] = {}
        for k, v in pairs[:MAX_ERROR_CONTAINER_ITEMS]:
            result[str(_sanitize_for_json(k, _depth=_depth + 1))] = _sanitize_for_json(
                v, _depth=_depth + 1
            )
        if len(pairs) > MAX_ERROR_CONTAINER_ITEMS:
            result["__truncated__"] = f"{len(pairs) - MAX_ERROR_CONTAINER_ITEMS} more keys truncated"
        return result
    # Validation contexts can carry exception instances
    return _sanitize_for_json(str(value), _depth=_depth + 1)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Studio clients read failures from the `error` key."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": _sanitize_for_json(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Invalid request.", "details": _sanitize_for_json(exc.errors())},
    )


# Middlewares (first added = last executed)
# 1. Security headers on every response
app.add_middleware(SecurityHeadersMiddleware)

# 2. Request logging (development only)
if settings.APP_MODE == AppMode.DEV:
    from middleware.logging import RequestLoggingMiddleware, configure_request_logging

    configure_request_logging(settings.LOG_LEVEL)
    app.add_middleware(RequestLoggingMiddleware)

# 3. CORS - must be last (first to process incoming requests)
allow_credentials = "*" not in settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# The studio frontend calls /api/generate-image; /api/v1 is the versioned alias.
api_router = APIRouter(prefix="/api")
api_router.include_router(generate.router)
app.include_router(api_router)

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(generate.router)
app.include_router(api_v1_router)


@app.get("/")
async def root():
    """Service banner"""
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "Model Studio backend is running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    target = TargetRange(settings.SIZE_LOCK_MIN_BYTES, settings.SIZE_LOCK_MAX_BYTES)
    return {
        "status": "healthy",
        "mode": settings.APP_MODE.value,
        "ai_enabled": bool(settings.GEMINI_API_KEY),
        "ai_provider": "google_gemini" if settings.GEMINI_API_KEY else None,
        "image_model": settings.GEMINI_IMAGE_MODEL,
        "size_lock": {
            "min_bytes": target.min_bytes,
            "max_bytes": target.max_bytes,
            "range": target.describe_mb(),
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=(settings.APP_MODE == AppMode.DEV),
    )

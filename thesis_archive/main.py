from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from thesis_archive.core.config import settings
from thesis_archive.core.database import get_engine, get_session_local, Base, close_db
from thesis_archive.core.exceptions import ArchiveError
from thesis_archive.core.logging_config import logger
from thesis_archive.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from thesis_archive.core.rate_limiter import limiter, rate_limit_exceeded_handler
from thesis_archive.api.v1.router import api_router
from thesis_archive.schemas.common import first_error_message
import thesis_archive.models  # noqa: F401  (registers tables on Base.metadata)

# Multipart framing on top of the largest allowed PDF
REQUEST_BODY_OVERHEAD = 1024 * 1024


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")
    elif len(settings.JWT_SECRET_KEY) < 32:
        warnings.append("JWT_SECRET_KEY is shorter than 32 characters")

    if settings.STORAGE_MODE not in ("local", "s3"):
        errors.append(f"STORAGE_MODE must be 'local' or 's3', got '{settings.STORAGE_MODE}'")
    elif settings.STORAGE_MODE == "s3" and not settings.S3_BUCKET_NAME:
        errors.append("S3_BUCKET_NAME is required when STORAGE_MODE=s3")

    if settings.ENVIRONMENT == "production" and settings.DEFAULT_ADMIN_PASSWORD == "admin123":
        warnings.append("DEFAULT_ADMIN_PASSWORD still has its default value")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


async def ensure_database_ready():
    """Create the schema on first start when migrations have not been run"""
    from sqlalchemy import text

    try:
        async with get_session_local()() as session:
            try:
                await session.execute(text("SELECT 1 FROM users LIMIT 1"))
                logger.info("[Startup] Database tables already exist")
                return True
            except Exception:
                logger.warning("[Startup] Database tables not found, creating...")

        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("[Startup] Database tables created successfully")
        return True

    except Exception as e:
        logger.log_error_with_context(e, "ensure_database_ready")
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT}, API {settings.API_VERSION})")

    await validate_critical_config()

    if not await ensure_database_ready():
        logger.warning("[Startup] Database not ready - requests will fail until it is reachable")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Searchable archive of student theses with a review workflow for submissions",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Middleware (last added runs first)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_UPLOAD_SIZE + REQUEST_BODY_OVERHEAD)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(ArchiveError)
async def archive_error_handler(request: Request, exc: ArchiveError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, f"{request.method} {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": first_error_message(exc),
            "code": "VALIDATION_ERROR",
            "details": {"errors": jsonable_errors(exc)},
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": f"HTTP_{exc.status_code}", "details": {}},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.log_error_with_context(exc, f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": str(exc) if settings.DEBUG else "Internal server error",
            "code": "INTERNAL_ERROR",
            "details": {},
        }
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"/api/{settings.API_VERSION}/health"
    }


app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")

if settings.STORAGE_MODE == "local":
    app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=str(settings.UPLOAD_DIR)), name="uploads")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "thesis_archive.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )

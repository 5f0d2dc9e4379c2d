from fastapi import FastAPI, Request, Depends
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import uuid
from contextlib import asynccontextmanager

from app.routers import moderation
from app.core.logger import logger
from app.core.exceptions import SentinelException, status_code_for
from app.core.config import Settings, settings, get_settings

VERSION = "1.0.0"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


# Application lifespan management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management for startup and shutdown events."""
    logger.info("Starting AI Sentinel moderation API", extra={"version": VERSION})

    if settings.report_store_backend == "database":
        try:
            from app.db.session import init_db, get_engine
            init_db(get_engine(settings.database_url))
            logger.info("Report tables verified/created successfully")
        except Exception as e:
            logger.error(f"Database initialization failed: {str(e)}", exc_info=True)

    yield

    logger.info("Shutting down AI Sentinel moderation API")


app = FastAPI(
    title="AI Sentinel Moderation API",
    description="""
    Automatic content moderation for community posts and comments.

    Each request is classified with the OpenAI moderation endpoint. Flagged content
    produces a pending system report (reporter = null) in the community reports table,
    with `critical` priority for violence and self-harm categories and `high` otherwise.

    ## Error Handling

    Errors return JSON with an `error` field. Server-side failures also carry
    `message` and a machine-readable `error_code`.
    """,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Attach permissive cross-origin headers to every response."""
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to all requests for tracing."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        extra={
            "request_id": request_id,
            "method": request.method,
            "url": str(request.url),
            "client_ip": request.client.host if request.client else "unknown"
        }
    )

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        "Request completed",
        extra={
            "request_id": request_id,
            "status_code": response.status_code,
            "process_time": process_time
        }
    )

    return response


@app.exception_handler(SentinelException)
async def sentinel_exception_handler(request: Request, exc: SentinelException):
    """Render moderation relay exceptions as JSON error bodies."""
    status_code = status_code_for(exc)
    log = logger.warning if status_code < 500 else logger.error
    log(
        f"Moderation request failed: {exc.message}",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "error_code": exc.error_code,
            "details": exc.details
        }
    )

    return JSONResponse(status_code=status_code, content=exc.response_body())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors use the same ``{"error": ...}`` body shape."""
    if exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


app.include_router(moderation.router)


@app.get("/health", tags=["monitoring"])
async def health_check(current: Settings = Depends(get_settings)):
    """
    Health check endpoint for monitoring and load balancers.

    Reports whether the credentials the moderation flow needs are present.
    """
    missing = current.missing_settings()
    return JSONResponse(
        status_code=200 if not missing else 503,
        content={
            "status": "healthy" if not missing else "unhealthy",
            "timestamp": time.time(),
            "version": VERSION,
            "report_store": current.report_store_backend,
            "missing_configuration": missing
        }
    )


@app.get("/", tags=["general"])
async def root():
    """Basic API information and links."""
    return {
        "message": "AI Sentinel Moderation API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "moderate_content": "/api/v1/moderate-content"
        }
    }

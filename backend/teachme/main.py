"""FastAPI application entry point"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from teachme import __version__
from teachme.api import admin, auth, health
from teachme.config import settings
from teachme.errors import AuthServiceError, ForbiddenError, UnauthorizedError
from teachme.middleware.monitoring import MonitoringMiddleware, record_auth_failure
from teachme.middleware.rate_limit import limiter
from teachme.utils.logger import logger, setup_logging

# Setup logging
setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("teachme auth backend starting up", extra={"action": "startup"})
    yield
    logger.info("teachme auth backend shutting down", extra={"action": "shutdown"})


# Create FastAPI app
app = FastAPI(
    title="LLM Teach Me - Auth",
    description="Accounts, token issuance, refresh-token ledger and session security for the AI tutor",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ===== Middleware Setup =====

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Monitoring middleware
if settings.METRICS_ENABLED:
    app.add_middleware(MonitoringMiddleware)

    # Prometheus metrics
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        excluded_handlers=["/metrics", "/health", "/health/ready", "/health/live"],
    )
    instrumentator.instrument(app)
    instrumentator.expose(app, endpoint=settings.METRICS_PATH, include_in_schema=False)

# Rate limiting (the limiter no-ops when RATE_LIMIT_ENABLED is false)
app.state.limiter = limiter

# ===== Route Setup =====

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(admin.router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "service": "teachme-auth",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "health": "/health",
    }


# ===== Error Handlers =====

@app.exception_handler(AuthServiceError)
async def auth_service_error_handler(request: Request, exc: AuthServiceError):
    """Render the error envelope; 401 reasons stay in the log"""
    headers = None
    if isinstance(exc, UnauthorizedError):
        record_auth_failure("unauthorized")
        headers = {"WWW-Authenticate": "Bearer"}
        logger.info(
            f"Unauthorized: {exc.reason}",
            extra={"path": request.url.path, "method": request.method, "reason": exc.reason},
        )
    elif isinstance(exc, ForbiddenError):
        record_auth_failure("forbidden")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with field-level details"""
    details = [
        {"field": ".".join(str(part) for part in error["loc"] if part != "body"), "msg": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"error": "validation_error", "message": "Invalid input", "details": details}),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors"""
    logger.warning(
        "Rate limit exceeded",
        extra={"path": request.url.path, "method": request.method}
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please try again later.",
            "detail": str(exc.detail)
        }
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Database failures never leak driver details"""
    logger.error(
        f"Database error: {exc.__class__.__name__}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for uncaught errors"""
    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )

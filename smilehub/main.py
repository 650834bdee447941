"""SmileHub - Dental Practice Patient Management

Main FastAPI application entry point.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, make_asgi_app

from smilehub.api.v1.router import api_router
from smilehub.core.config import settings
from smilehub.core.exceptions import register_exception_handlers
from smilehub.core.logging import get_logger, setup_logging
from smilehub.core.middleware import BodySizeLimitMiddleware

# Initialize logging
setup_logging(
    log_level="DEBUG" if settings.debug else "INFO",
    json_logs=settings.environment == "production",
)

logger = get_logger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "smilehub_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "smilehub_request_latency_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}


def _safe_request_path(request: Request) -> str:
    """Return a route template path to avoid logging patient ids in URLs."""
    route = request.scope.get("route")
    if route and hasattr(route, "path"):
        return route.path
    return request.url.path


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    logger.info(
        "Starting SmileHub",
        version=settings.app_version,
        environment=settings.environment,
    )

    from smilehub.models.base import async_session_maker, engine, init_db

    app.state.db_engine = engine
    app.state.db_session_maker = async_session_maker

    # Create missing tables
    await init_db(engine)
    logger.info("Database schema initialized")

    # Optional demo data seeding (development only)
    if settings.enable_demo_data:
        try:
            from smilehub.api.v1.endpoints.auth import security
            from smilehub.services.demo_data import seed_demo_tenant

            async with async_session_maker() as session:
                inserted = await seed_demo_tenant(session, security)
                logger.warning("Demo data enabled", patients_seeded=inserted)
        except Exception as e:
            logger.warning(f"Could not seed demo data: {e}")

    logger.info("SmileHub started successfully")

    yield

    # Shutdown
    logger.info("Shutting down SmileHub")

    if hasattr(app.state, "db_engine"):
        await app.state.db_engine.dispose()
        logger.info("Database connections closed")

    logger.info("SmileHub shutdown complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="""
        SmileHub is a patient management backend for dental practices.

        ## Features

        - **Practice accounts**: registration and token-based login
        - **Patient records**: demographics, clinical notes, treatment plans
        - **Payments**: installment history with due-amount ledger
        - **Images**: ordered image references with in-place replace and delete
        """,
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )

    # Add GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Reject oversized bodies before they are parsed
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_request_body_bytes)

    # Add request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests with timing."""
        import time
        import uuid

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        response = await call_next(request)
        process_time = time.time() - start_time
        safe_path = _safe_request_path(request)

        # Update metrics
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=safe_path,
            status=response.status_code,
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=safe_path,
        ).observe(process_time)

        # Add custom headers
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        if settings.environment == "production":
            response.headers.update(SECURITY_HEADERS)

        logger.info(
            "request_completed",
            request_id=request_id,
            method=request.method,
            path=safe_path,
            status_code=response.status_code,
            process_time=f"{process_time:.4f}s",
        )

        return response

    # Mount Prometheus metrics endpoint
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    # Readiness check endpoint
    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request):
        """Readiness probe: the database must answer."""
        checks = {"database": False}

        if hasattr(request.app.state, "db_session_maker"):
            try:
                async with request.app.state.db_session_maker() as session:
                    from sqlalchemy import text

                    await session.execute(text("SELECT 1"))
                    checks["database"] = True
            except Exception:
                checks["database"] = False

        all_ready = all(checks.values())
        return JSONResponse(
            status_code=200 if all_ready else 503,
            content={
                "ready": all_ready,
                "checks": checks,
            },
        )

    # Domain errors, validation errors and the catch-all handler
    register_exception_handlers(app, debug=settings.debug)

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "smilehub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
        log_level="debug" if settings.debug else "info",
    )

"""
app/main.py

Purpose: Application entry point

- Builds the FastAPI app (create_app)
- Loads configuration and logging
- Ordered middleware: access log, security headers, CORS, unhandled-error guard
- Registers API routes (auth, users, posts) and static assets
- No business logic should be written here
- Manages client lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from typing import Optional
import time
import uuid

from app.core.config import Settings, settings as default_settings, validate_settings
from app.core.errors import add_exception_handlers, internal_error_response
from app.core.logging import get_logger, reset_log_context, setup_logging, start_log_context
from app.db.mongo import MongoDatabase
from app.db.indexes import create_indexes
from app.services.storage_service import build_object_store
from app.api import auth, posts, users

logger = get_logger(__name__)

VERSION = "1.0.0"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "cross-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Opens the database and object store clients, closes them on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info("🚀 Starting Sociopedia API...")

    try:
        logger.info("Validating configuration...")
        validate_settings(settings)
        logger.info("✅ Configuration validated")

        database = MongoDatabase(settings)
        await database.connect()
        app.state.database = database
        logger.info("✅ MongoDB connected")

        await create_indexes(database)
        logger.info("✅ Database indexes created")

        app.state.object_store = build_object_store(settings)
        logger.info("✅ Object store ready")

        logger.info(f"🎉 Sociopedia API started on port {settings.PORT}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down Sociopedia API...")

    try:
        await app.state.database.close()
        app.state.database = None
        app.state.object_store = None
        logger.info("👋 Sociopedia API shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings)

    app = FastAPI(
        title="Sociopedia API",
        description="Social media backend: accounts, profiles, follows and posts",
        version=VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
        docs_url="/docs" if settings.is_development else None,  # Disable docs in production
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.database = None
    app.state.object_store = None

    # Middleware runs outermost-last: access log -> security headers -> CORS -> error guard -> routes

    @app.middleware("http")
    async def catch_unhandled(request: Request, call_next):
        """Turns uncaught exceptions into the generic 500 inside the pipeline."""
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled exception: {str(e)}",
                extra={"method": request.method, "path": request.url.path},
                exc_info=True,
            )
            return internal_error_response()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=15552000; includeSubDomains"
            )
        return response

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        """Logs one line per request and adds the processing time header."""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        token = start_log_context(request_id=request_id)
        start_time = time.time()
        try:
            response = await call_next(request)
        finally:
            reset_log_context(token)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(process_time * 1000, 2),
        }
        identity = getattr(request.state, "identity", None)
        if identity is not None:
            context["user_id"] = identity.user_id

        client = request.client.host if request.client else "-"
        logger.info(
            f'{client} "{request.method} {request.url.path}" {response.status_code}',
            extra=context,
        )

        # Log slow requests
        if process_time > 5.0:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path}",
                extra=context,
            )

        return response

    add_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(posts.router)

    app.mount("/assets", StaticFiles(directory=settings.ASSETS_DIR, check_dir=False), name="assets")

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint - basic info."""
        return {
            "name": "Sociopedia API",
            "version": VERSION,
            "status": "running",
            "environment": settings.ENVIRONMENT
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint.
        Checks database connectivity.
        """
        database = request.app.state.database
        db_healthy = database is not None and await database.ping()

        health_status = {
            "status": "healthy" if db_healthy else "degraded",
            "timestamp": time.time(),
            "environment": settings.ENVIRONMENT,
            "version": VERSION,
            "checks": {
                "database": "healthy" if db_healthy else "unhealthy",
                "object_store": "configured" if request.app.state.object_store is not None else "missing",
            }
        }

        status_code = 200 if db_healthy else 503
        return JSONResponse(content=health_status, status_code=status_code)

    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request):
        """
        Readiness probe - indicates if app is ready to receive traffic.
        """
        database = request.app.state.database
        if database is not None and await database.ping():
            return {"status": "ready"}
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "database_unavailable"}
        )

    @app.get("/live", tags=["Health"])
    async def liveness_check():
        """
        Liveness probe - indicates if app is alive.
        """
        return {"status": "alive"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=default_settings.PORT,
        reload=default_settings.is_development,
        log_level=default_settings.LOG_LEVEL.lower()
    )

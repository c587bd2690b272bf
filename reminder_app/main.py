from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, JSONResponse
from contextlib import asynccontextmanager
import uvicorn
import logging
import sys

from reminder_app.core.config import settings
from reminder_app.core.database_utils import get_db_session, get_missing_tables, ping_database
from reminder_app.db.base import Base
from reminder_app.db.session import engine
from reminder_app.reminders.sweeper import ExpirySweeper
import reminder_app.models  # noqa: F401  registers tables on Base.metadata

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def ensure_tables() -> None:
    """Create missing tables in development setups, otherwise point at the migrations."""
    try:
        with get_db_session() as db:
            required_tables = [table.name for table in Base.metadata.tables.values()]
            missing_tables = get_missing_tables(db, required_tables)
    except Exception as e:
        logger.warning(f"Could not check database tables: {e}")
        return

    if not missing_tables:
        logger.info("All required database tables exist")
    elif settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info(f"Created missing database tables: {missing_tables}")
    else:
        logger.warning(f"Missing database tables: {missing_tables}")
        logger.warning("Run `alembic upgrade head` before starting the server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting up {settings.PROJECT_NAME}...")
    ensure_tables()

    sweeper = ExpirySweeper()
    app.state.sweeper = sweeper
    if settings.SWEEPER_ENABLED:
        await sweeper.start()
    else:
        logger.info("⏸️ [Startup] Expiry sweeper disabled by configuration")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    try:
        await sweeper.stop()
    except Exception as e:
        logger.error(f"Error stopping expiry sweeper: {e}")
    logger.info("✅ Shutdown complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Personal reminders with expiry sweeps and push notifications",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"CORS configured for {settings.ENVIRONMENT.value} environment with origins: {settings.CORS_ORIGINS}")

    from reminder_app.api.v1.api import api_router
    app.include_router(api_router, prefix=settings.API_V1_STR)

    if settings.METRICS_ENABLED:
        from prometheus_fastapi_instrumentator import Instrumentator
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
        logger.info("Prometheus metrics exposed at /metrics")

    return app

# Create the FastAPI app instance
app = create_application()

@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint that redirects to API documentation"""
    return RedirectResponse(url=f"{settings.API_V1_STR}/docs")

@app.get("/health", tags=["Health Check"])
def health_check():
    """Health check endpoint"""
    try:
        with get_db_session() as db:
            ping_database(db)
        db_status = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"

    sweeper = getattr(app.state, "sweeper", None)
    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "version": settings.VERSION,
        "project": settings.PROJECT_NAME,
        "database": db_status,
        "sweeper": "running" if sweeper and sweeper.running else "stopped",
    }

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Global HTTP exception handler"""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.detail,
            "status_code": exc.status_code
        },
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc!r} - {request.url}")
    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "message": "Internal server error",
            "status_code": 500
        }
    )

if __name__ == "__main__":
    uvicorn.run(
        "reminder_app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.is_development,
        log_level="info"
    )

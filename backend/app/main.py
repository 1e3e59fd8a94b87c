from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy import text
import logging

from app.config import settings
from app.database import init_db, engine, SessionLocal
from app.errors import TrackerError, http_error_body
from app.routers import (
    equipment,
    maintenance_schedules,
    maintenance_logs,
    work_orders,
    dashboard
)
from app.security import get_auth_user
from app.validation import translate_validation_error

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting Biomedical Maintenance Tracker API...")

    try:
        init_db()
        logger.info("Database initialized successfully")

        yield

    finally:
        # Shutdown
        logger.info("Shutting down Biomedical Maintenance Tracker API...")
        engine.dispose()
        logger.info("Shutdown complete")


# Initialize FastAPI application
app = FastAPI(
    title="Biomedical Maintenance Tracker",
    description=(
        "Maintenance tracking API for biomedical equipment\n\n"
        "Keeps the equipment inventory, recurring maintenance schedules, "
        "logs of performed maintenance and work orders.\n\n"
        "**Features:**\n"
        "- Filtered, searchable, paginated listings\n"
        "- Overdue and upcoming maintenance views\n"
        "- Dashboard statistics\n"
    ),
    version=API_VERSION,
    lifespan=lifespan
)


# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------------------------------------
# Exception handlers
# ----------------------------------------------------
@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    """Typed errors carry their own status and code"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation failures in the same shape as every other error"""
    error = translate_validation_error(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: {error.code}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Auth and routing failures use the same body shape as typed errors"""
    return JSONResponse(
        status_code=exc.status_code,
        content=http_error_body(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_ERROR"
        }
    )

# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(
    equipment.router,
    prefix="/api/equipment",
    tags=["Equipment"],
    dependencies=[Depends(get_auth_user)]
)

app.include_router(
    maintenance_schedules.router,
    prefix="/api/maintenance-schedules",
    tags=["Maintenance Schedules"],
    dependencies=[Depends(get_auth_user)]
)

app.include_router(
    maintenance_logs.router,
    prefix="/api/maintenance-logs",
    tags=["Maintenance Logs"],
    dependencies=[Depends(get_auth_user)]
)

app.include_router(
    work_orders.router,
    prefix="/api/work-orders",
    tags=["Work Orders"],
    dependencies=[Depends(get_auth_user)]
)

app.include_router(
    dashboard.router,
    prefix="/api/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(get_auth_user)]
)

# ----------------------------------------------------
# Root endpoints
# ----------------------------------------------------
@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - API information
    """
    return {
        "message": "Biomedical Maintenance Tracker API is running",
        "version": API_VERSION,
        "features": [
            "Equipment Inventory",
            "Maintenance Schedules",
            "Maintenance Logs",
            "Work Orders",
            "Dashboard Statistics"
        ],
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health", tags=["Root"])
def health_check():
    """
    Health check endpoint for monitoring
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected",
            "version": API_VERSION
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "error": str(e)
            }
        )
    finally:
        db.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.LOG_LEVEL.lower()
    )

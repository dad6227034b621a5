"""
Main FastAPI application
Quiz authoring, attempt taking and result analytics
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging
import time

from app.config import settings
from app.database import init_db, SessionLocal
from app.exceptions import QuizServiceError
from app.api import questions, quizzes, attempts, analytics, system_settings
from app.models.enums import UserRole
from app.services.settings_service import settings_service

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Backend for authoring quizzes, taking scored attempts and reviewing results",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

MAINTENANCE_EXEMPT_PATHS = {"/", "/health", "/docs", "/redoc", "/openapi.json", "/api/settings"}


def is_maintenance_exempt(path: str) -> bool:
    return path in MAINTENANCE_EXEMPT_PATHS or path.startswith("/api/admin")


def read_maintenance_flag() -> bool:
    db = SessionLocal()
    try:
        return settings_service.is_maintenance_mode(db)
    finally:
        db.close()


# Maintenance mode middleware
@app.middleware("http")
async def maintenance_middleware(request: Request, call_next):
    """Turn away non-admin traffic while maintenance mode is on"""

    if is_maintenance_exempt(request.url.path):
        return await call_next(request)

    if (request.headers.get("x-user-role") or "").upper() == UserRole.ADMIN.value:
        return await call_next(request)

    try:
        maintenance = await run_in_threadpool(read_maintenance_flag)
    except SQLAlchemyError as e:
        # Flag unreadable: let the request through
        logger.error(f"Error checking maintenance mode: {str(e)}")
        maintenance = False

    if maintenance:
        return JSONResponse(
            status_code=503,
            content={
                "error": "maintenance",
                "message": "The site is under maintenance. Please try again later.",
                "status_code": 503
            }
        )

    return await call_next(request)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing"""

    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration:.3f}s"
    )

    return response


# Domain error handler
@app.exception_handler(QuizServiceError)
async def quiz_service_exception_handler(request: Request, exc: QuizServiceError):
    """Render service-layer errors with their stable kind"""

    if exc.status_code >= 409:
        logger.warning(f"{exc.error} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors gracefully"""

    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "detail": str(exc) if settings.DEBUG else None
        }
    )


# HTTP exception handler
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Format HTTP exceptions consistently"""

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "http_error",
            "message": exc.detail,
            "status_code": exc.status_code
        }
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring

    Returns service status
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": time.time()
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Quiz Assessment Platform API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


# Include routers
app.include_router(questions.router)
app.include_router(quizzes.router)
app.include_router(attempts.router)
app.include_router(analytics.router)
app.include_router(system_settings.router)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize database on startup"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    logger.info("Application startup complete")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down application")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )

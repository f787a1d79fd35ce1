from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

# Import database components
from app.database.database import engine, Base

# Import middleware
from app.common.middleware import SecurityHeadersMiddleware

# Import routers
from app.modules.reports.routers import (
    inventory_router as inventory_reports_router,
    requests_router as requests_reports_router,
    donors_router as donors_reports_router,
    health_entities_router as health_entities_reports_router
)

# Import models for table creation
import app.modules.donations.models

from app.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Blood bank operational reports API built with FastAPI and SQLAlchemy",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Add your frontend URLs
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(inventory_reports_router, prefix="/api/v1")
app.include_router(requests_reports_router, prefix="/api/v1")
app.include_router(donors_reports_router, prefix="/api/v1")
app.include_router(health_entities_reports_router, prefix="/api/v1")

@app.get("/")
async def read_root():
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

@app.on_event("startup")
async def startup_event():
    logger.info(f"{settings.APP_NAME} starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # Create database tables (only for development - use migrations in production)
    if settings.ENVIRONMENT == "development":
        try:
            Base.metadata.create_all(bind=engine)
        except Exception as e:
            logger.warning(f"Table creation skipped or failed: {e}")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"{settings.APP_NAME} shutting down...")

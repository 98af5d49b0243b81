"""
Image Crop Flow - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))

from api.exceptions import register_exception_handlers  # noqa: E402
from api.routers import crop, crops, system  # noqa: E402
from config import get_settings  # noqa: E402
from core.constants import SystemConstants  # noqa: E402
from core.crop_store import CropStore  # noqa: E402

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Suppress watchfiles debug messages
logging.getLogger("watchfiles").setLevel(logging.WARNING)
# Pillow logs every PNG chunk at DEBUG
logging.getLogger("PIL").setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    logger.info("Starting Image Crop Flow server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")
    logger.info(f"Codec backend: {settings.image.codec_backend}")

    app.state.crop_store = CropStore(max_size=settings.storage.max_records)
    app.state.config = settings.to_dict()

    yield

    logger.info("Shutting down Image Crop Flow server...")
    app.state.crop_store.clear()
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Image Crop Flow",
    description="In-memory image cropping over a base64 REST boundary",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(crop.router, prefix="/api/crop", tags=["Crop"])
app.include_router(crops.router, prefix="/api/crops", tags=["Crops"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Image Crop Flow",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "crop": "/api/crop",
            "crops": "/api/crops",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "crop_store": getattr(app.state, "crop_store", None) is not None,
        },
    }


# Error handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": f"Internal server error: {str(exc)}"})


if __name__ == "__main__":
    reload_excludes = (
        ["*.log", "*.pyc", "__pycache__", ".git", ".venv", "venv"]
        if settings.system.debug
        else None
    )

    server_config = uvicorn.Config(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        reload_excludes=reload_excludes,
        log_level="info",
        loop="asyncio",
    )

    server = uvicorn.Server(server_config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        logger.info("Server exiting...")

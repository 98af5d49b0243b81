"""
System API Router - Status and performance monitoring
"""

import logging
import time
from datetime import datetime

import psutil
from fastapi import APIRouter, Depends, Request

from api.dependencies import get_config, get_crop_store
from api.exceptions import safe_endpoint
from schemas import PerformanceMetrics, SystemStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
@safe_endpoint
async def get_status(
    crop_store=Depends(get_crop_store),
    config: dict = Depends(get_config),
) -> SystemStatus:
    """Get system status"""
    process = psutil.Process()
    memory_info = process.memory_info()
    virtual_memory = psutil.virtual_memory()

    return SystemStatus(
        status="healthy",
        uptime=time.time() - START_TIME,
        memory_usage={
            "process_mb": memory_info.rss / 1024 / 1024,
            "system_percent": virtual_memory.percent,
            "available_mb": virtual_memory.available / 1024 / 1024,
        },
        store_usage=crop_store.get_statistics(),
        codec_backend=config.get("image", {}).get("codec_backend", "pillow"),
    )


@router.get("/performance")
@safe_endpoint
async def get_performance(crop_store=Depends(get_crop_store)) -> PerformanceMetrics:
    """Get performance metrics"""
    stats = crop_store.get_statistics()

    uptime_minutes = (time.time() - START_TIME) / 60
    ops_per_minute = stats["total"] / uptime_minutes if uptime_minutes > 0 else 0

    return PerformanceMetrics(
        avg_processing_time=stats["avg_time_ms"],
        total_crops=stats["total"],
        operations_per_minute=round(ops_per_minute, 2),
    )


@router.post("/debug/{enable}")
@safe_endpoint
async def set_debug_mode(enable: bool, request: Request) -> dict:
    """Enable or disable debug logging"""
    config = request.app.state.config
    config.setdefault("system", {})["debug"] = enable

    log_level = logging.DEBUG if enable else logging.INFO
    logging.getLogger().setLevel(log_level)

    logger.info(f"Debug mode {'enabled' if enable else 'disabled'}")

    return {"enabled": enable, "log_level": logging.getLevelName(log_level)}


@router.get("/config")
@safe_endpoint
async def get_current_config(config: dict = Depends(get_config)) -> dict:
    """Get current configuration"""
    return config


@router.get("/health")
async def health_check() -> dict:
    """Simple health check"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}

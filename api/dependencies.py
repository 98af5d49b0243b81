"""
Shared FastAPI dependencies for the Image Crop Flow system.
Centralizes common dependencies to eliminate code duplication.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Request

from core.constants import ImageConstants
from core.crop_store import CropStore
from services.crop_service import CropService

logger = logging.getLogger(__name__)


def get_crop_store(request: Request) -> CropStore:
    """
    Get CropStore instance from app state.

    Raises:
        HTTPException: If store not initialized
    """
    try:
        return request.app.state.crop_store
    except AttributeError as e:
        logger.error(f"Crop store not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Crop store not initialized"
        )


def get_config(request: Request) -> Dict[str, Any]:
    """
    Get application configuration dictionary.

    Args:
        request: FastAPI request object

    Returns:
        Configuration dictionary
    """
    try:
        return request.app.state.config
    except AttributeError:
        logger.warning("Config not found in app state, using defaults")
        return {}


def get_crop_service(
    crop_store: CropStore = Depends(get_crop_store),
    config: Dict[str, Any] = Depends(get_config),
) -> CropService:
    """
    Get crop service instance.

    Args:
        crop_store: Crop store dependency
        config: Configuration dependency

    Returns:
        CropService instance
    """
    image_config = config.get("image", {})
    return CropService(
        crop_store=crop_store,
        codec_backend=image_config.get("codec_backend", ImageConstants.DEFAULT_CODEC_BACKEND),
        output_format=image_config.get("output_format", ImageConstants.DEFAULT_OUTPUT_FORMAT),
        jpeg_quality=image_config.get("jpeg_quality", ImageConstants.DEFAULT_JPEG_QUALITY),
    )


def get_max_payload_mb(config: Dict[str, Any] = Depends(get_config)) -> float:
    """Maximum accepted decoded image size in megabytes."""
    return config.get("image", {}).get("max_payload_mb", ImageConstants.MAX_PAYLOAD_MB)

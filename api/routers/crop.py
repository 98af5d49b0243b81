"""
Crop API Router - Crop base64 encoded images
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_crop_service, get_max_payload_mb
from api.exceptions import PayloadTooLargeException, safe_endpoint
from schemas import CropRequest, CropResponse, Rectangle, ROICropRequest
from services.crop_service import CropResult, CropService

logger = logging.getLogger(__name__)

router = APIRouter()


def check_payload_size(image_base64: str, max_payload_mb: float) -> None:
    """Reject payloads whose decoded size exceeds the limit."""
    # 4 base64 characters carry 3 bytes
    size_mb = len(image_base64) * 3 / 4 / (1024 * 1024)
    if size_mb > max_payload_mb:
        raise PayloadTooLargeException(size_mb, max_payload_mb)


def to_response(result: CropResult) -> CropResponse:
    return CropResponse(
        image_base64=result.image_base64,
        width=result.width,
        height=result.height,
        source_format=result.source_format,
        output_format=result.output_format,
        mode=result.mode,
        region=Rectangle.from_dict(result.region),
        size_bytes=result.size_bytes,
        processing_time_ms=result.processing_time_ms,
        record_id=result.record_id,
    )


@router.post("")
@safe_endpoint
async def crop_image(
    request: CropRequest,
    crop_service: CropService = Depends(get_crop_service),
    max_payload_mb: float = Depends(get_max_payload_mb),
) -> CropResponse:
    """
    Crop a rectangular region out of a base64 encoded image.

    The region is half-open: x0 <= x < x1, y0 <= y < y1. Regions that are
    empty or not fully inside the image are rejected, never clamped.

    Args:
        request: Crop request with image and region corners
        crop_service: Crop service dependency

    Returns:
        CropResponse with the base64 encoded cropped image
    """
    check_payload_size(request.image_base64, max_payload_mb)

    result = crop_service.crop_base64(
        request.image_base64,
        request.region,
        output_format=request.output_format,
        store=request.store,
        metadata=request.metadata,
    )

    return to_response(result)


@router.post("/roi")
@safe_endpoint
async def crop_image_roi(
    request: ROICropRequest,
    crop_service: CropService = Depends(get_crop_service),
    max_payload_mb: float = Depends(get_max_payload_mb),
) -> CropResponse:
    """Crop a region given as origin and size (x, y, width, height)."""
    check_payload_size(request.image_base64, max_payload_mb)

    result = crop_service.crop_base64(
        request.image_base64,
        request.roi.to_rectangle(),
        output_format=request.output_format,
        store=request.store,
        metadata=request.metadata,
    )

    return to_response(result)

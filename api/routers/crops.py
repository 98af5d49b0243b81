"""
Crops API Router - Stored crop management
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_crop_store
from api.exceptions import CropNotFoundException, safe_endpoint
from core.constants import APIConstants
from core.crop_store import CropRecord
from schemas import CropHistoryResponse, CropRecordResponse, Rectangle

logger = logging.getLogger(__name__)

router = APIRouter()


def to_record_response(record: CropRecord, include_image: bool = True) -> CropRecordResponse:
    return CropRecordResponse(
        id=record.id,
        timestamp=record.timestamp,
        source_format=record.source_format,
        output_format=record.output_format,
        region=Rectangle.from_dict(record.region),
        width=record.width,
        height=record.height,
        image_base64=record.image_base64 if include_image else None,
        size_bytes=record.size_bytes,
        processing_time_ms=record.processing_time_ms,
        metadata=record.metadata,
    )


@router.get("/recent")
@safe_endpoint
async def get_recent_crops(
    limit: int = Query(
        APIConstants.DEFAULT_LIMIT, ge=APIConstants.MIN_LIMIT, le=APIConstants.MAX_LIMIT
    ),
    format_filter: Optional[str] = Query(None, pattern="^[A-Za-z]+$"),
    include_images: bool = Query(False),
    crop_store=Depends(get_crop_store),
) -> CropHistoryResponse:
    """Get recently stored crops"""
    records = crop_store.get_recent(limit, format_filter)

    crops = [to_record_response(r, include_image=include_images) for r in records]

    return CropHistoryResponse(crops=crops, statistics=crop_store.get_statistics())


@router.post("/clear")
@safe_endpoint
async def clear_crops(crop_store=Depends(get_crop_store)) -> dict:
    """Clear all stored crops"""
    crop_store.clear()

    return {"success": True, "message": "Crop store cleared"}


@router.get("/statistics")
@safe_endpoint
async def get_statistics(crop_store=Depends(get_crop_store)) -> dict:
    """Get crop store statistics"""
    return crop_store.get_statistics()


@router.get("/{crop_id}")
@safe_endpoint
async def get_crop(crop_id: str, crop_store=Depends(get_crop_store)) -> CropRecordResponse:
    """Get a stored crop including its base64 image"""
    record = crop_store.get_crop(crop_id)
    if record is None:
        raise CropNotFoundException(crop_id)

    return to_record_response(record)


@router.delete("/{crop_id}")
@safe_endpoint
async def delete_crop(crop_id: str, crop_store=Depends(get_crop_store)) -> dict:
    """Delete a stored crop"""
    if not crop_store.delete_crop(crop_id):
        raise CropNotFoundException(crop_id)

    logger.info(f"Deleted crop {crop_id}")
    return {"success": True, "message": f"Crop {crop_id} deleted"}

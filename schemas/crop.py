"""
Crop API models.

This module contains request and response models for crop operations:
- Crop requests (corner rectangle or origin/size ROI)
- Crop responses
- Stored crop records and history
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .common import ROI, Rectangle


class CropRequest(BaseModel):
    """Request to crop a base64 encoded image"""

    image_base64: str = Field(..., min_length=1, description="Base64 encoded image (data URI allowed)")
    region: Rectangle = Field(..., description="Half-open region to extract")
    output_format: Optional[str] = Field(None, description="Output format (default: PNG)")
    store: bool = Field(False, description="Save the crop in the crop store")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ROICropRequest(BaseModel):
    """Request to crop a base64 encoded image by origin and size"""

    image_base64: str = Field(..., min_length=1, description="Base64 encoded image (data URI allowed)")
    roi: ROI = Field(..., description="Region of interest to extract")
    output_format: Optional[str] = Field(None, description="Output format (default: PNG)")
    store: bool = Field(False, description="Save the crop in the crop store")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CropResponse(BaseModel):
    """Response from a crop operation"""

    image_base64: str
    width: int
    height: int
    source_format: str
    output_format: str
    mode: str
    region: Rectangle
    size_bytes: int
    processing_time_ms: int
    record_id: Optional[str] = None


class CropRecordResponse(BaseModel):
    """Stored crop"""

    id: str
    timestamp: datetime
    source_format: str
    output_format: str
    region: Rectangle
    width: int
    height: int
    image_base64: Optional[str] = None
    size_bytes: int
    processing_time_ms: int
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CropHistoryResponse(BaseModel):
    """Recent stored crops with statistics"""

    crops: List[CropRecordResponse]
    statistics: Dict[str, Any]

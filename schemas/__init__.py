"""
Schemas Package

Pydantic schemas for data validation and serialization, shared across all
application layers:
- API (routers, dependencies)
- Services (business logic)
- Core (crop extraction, storage)
"""

# Common models (core data structures)
from .common import ROI, Rectangle

# Crop models
from .crop import (
    CropHistoryResponse,
    CropRecordResponse,
    CropRequest,
    CropResponse,
    ROICropRequest,
)

# System models
from .system import PerformanceMetrics, SystemStatus

# Explicitly declare public API for re-export
__all__ = [
    # Common models
    "Rectangle",
    "ROI",
    # Crop models
    "CropRequest",
    "ROICropRequest",
    "CropResponse",
    "CropRecordResponse",
    "CropHistoryResponse",
    # System models
    "SystemStatus",
    "PerformanceMetrics",
]

"""
Core modules for Image Crop Flow
"""

from .crop_store import CropRecord, CropStore

__all__ = [
    "CropStore",
    "CropRecord",
]

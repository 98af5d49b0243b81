"""
Business logic services
"""

from .crop_service import CropResult, CropService

__all__ = ["CropService", "CropResult"]

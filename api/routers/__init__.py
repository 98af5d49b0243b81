"""
API Routers for Image Crop Flow
"""

from . import crop, crops, system

__all__ = ["crop", "crops", "system"]

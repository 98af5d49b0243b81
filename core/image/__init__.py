"""
Image utilities for the crop pipeline.

- converters: base64 transport and container codec (Pillow / OpenCV)
- crop: rectangular pixel-region extraction
"""

from core.image.converters import DecodedImage, ImageConverters
from core.image.crop import crop

__all__ = ["DecodedImage", "ImageConverters", "crop"]

"""
Pytest configuration and fixtures for Image Crop Flow tests
"""

import io

import cv2
import numpy as np
import pytest
from PIL import Image

from core.crop_store import CropStore
from core.image.converters import ImageConverters
from services.crop_service import CropService


def make_rgba_image(width: int, height: int) -> np.ndarray:
    """RGBA uint8 buffer where every pixel has a distinct color"""
    ys, xs = np.mgrid[0:height, 0:width]
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., 0] = xs & 0xFF
    image[..., 1] = ys & 0xFF
    image[..., 2] = ((xs >> 8) << 4) | (ys >> 8)
    image[..., 3] = 200
    return image


def encode_png(pixels: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def decode_png(data: bytes) -> np.ndarray:
    return np.array(Image.open(io.BytesIO(data)))


@pytest.fixture
def rgba_image():
    """600x600 RGBA source image"""
    return make_rgba_image(600, 600)


@pytest.fixture
def small_image():
    """40x30 RGBA source image"""
    return make_rgba_image(40, 30)


@pytest.fixture
def test_image():
    """BGR test image with some drawn content"""
    image = np.zeros((480, 640, 3), dtype=np.uint8)
    cv2.rectangle(image, (100, 100), (300, 300), (255, 255, 255), -1)
    cv2.circle(image, (450, 350), 50, (128, 128, 128), -1)
    return image


@pytest.fixture
def gray16_image():
    """16-bit grayscale image"""
    ys, xs = np.mgrid[0:64, 0:80]
    return (xs * 700 + ys * 3).astype(np.uint16)


@pytest.fixture
def png_bytes(rgba_image):
    """600x600 RGBA image encoded as PNG"""
    return encode_png(rgba_image)


@pytest.fixture
def png_base64(png_bytes):
    """600x600 RGBA PNG as base64 text"""
    return ImageConverters.encode_text(png_bytes)


@pytest.fixture
def crop_store():
    """Create CropStore instance for testing"""
    return CropStore(max_size=100)


@pytest.fixture
def crop_service(crop_store):
    """Create CropService instance for testing"""
    return CropService(crop_store=crop_store)


@pytest.fixture
def image_factory():
    """Build distinct-color RGBA images of any size"""
    return make_rgba_image


@pytest.fixture
def png_codec():
    """(encode, decode) helpers working directly with Pillow"""
    return encode_png, decode_png

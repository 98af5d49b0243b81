"""
Constants and configuration values for Image Crop Flow.
Centralizes all magic numbers and configuration constants.
"""


# Image Constants
class ImageConstants:
    """Constants related to image decoding, encoding and cropping."""

    # Output formats
    DEFAULT_OUTPUT_FORMAT = "PNG"
    SUPPORTED_OUTPUT_FORMATS = ["PNG", "JPEG", "WEBP", "BMP", "TIFF", "GIF"]
    OPENCV_OUTPUT_FORMATS = ["PNG", "JPEG", "WEBP", "BMP", "TIFF"]
    FORMAT_ALIASES = {"JPG": "JPEG", "TIF": "TIFF"}
    FORMAT_EXTENSIONS = {
        "PNG": ".png",
        "JPEG": ".jpg",
        "WEBP": ".webp",
        "BMP": ".bmp",
        "TIFF": ".tiff",
        "GIF": ".gif",
    }
    FORMAT_MIME_TYPES = {
        "PNG": "image/png",
        "JPEG": "image/jpeg",
        "WEBP": "image/webp",
        "BMP": "image/bmp",
        "TIFF": "image/tiff",
        "GIF": "image/gif",
    }

    # Encoding quality
    DEFAULT_JPEG_QUALITY = 85
    MIN_JPEG_QUALITY = 1
    MAX_JPEG_QUALITY = 100

    # Codec backends
    CODEC_BACKENDS = ["pillow", "opencv"]
    DEFAULT_CODEC_BACKEND = "pillow"

    # Payload limits
    MAX_PAYLOAD_MB = 50

    # Log previews of raw bytes and base64 text
    PREVIEW_LENGTH = 127


# Crop Store Constants
class StoreConstants:
    """Constants for the in-memory crop document store."""

    DEFAULT_MAX_RECORDS = 100
    MIN_RECORDS = 1
    MAX_RECORDS = 10000
    RECORD_ID_PREFIX = "crop_"
    RECENT_WINDOW_HOURS = 1


# Demo Constants
class DemoConstants:
    """Defaults for the command line demo."""

    DEFAULT_REGION = (50, 50, 550, 550)
    TMP_PREFIX = "crop-tmp-"


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 8000

    # Pagination
    DEFAULT_LIMIT = 10
    MAX_LIMIT = 100
    MIN_LIMIT = 1


# System Constants
class SystemConstants:
    """Constants for system operations."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ENV_PREFIX = "CROP_FLOW_"


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    CROP_NOT_FOUND = "Crop {crop_id} not found"
    PAYLOAD_TOO_LARGE = "Payload of {size_mb:.1f} MB exceeds limit of {limit_mb} MB"
    STORE_NOT_CONFIGURED = "Crop store is not configured"

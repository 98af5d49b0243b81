"""
Image format conversion utilities.

Handles conversions at the edges of the crop pipeline:
- Base64 text <-> raw bytes (REST transport and document storage)
- Encoded container bytes (PNG, JPEG, ...) <-> NumPy pixel buffers

Two codec backends are available. "pillow" keeps the decoded buffer in the
container's native Pillow mode (RGB order). "opencv" decodes with
IMREAD_UNCHANGED and keeps OpenCV's BGR(A) order; a buffer must be encoded
with the same backend that decoded it.
"""

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.constants import ImageConstants
from core.exceptions import ImageDecodeError, ImageEncodeError, TranscodingError

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:[\w.+/-]*(;[\w-]+=[\w.+-]+)*;base64,", re.IGNORECASE)

# Pillow's message when a format cannot hold the buffer's mode
_CANNOT_WRITE_MODE_RE = re.compile(r"^cannot write mode \S+ as \w+")

# Pillow modes whose pixels a NumPy array cannot carry back into Pillow
_EXPANDED_MODES = {
    "1": "L",
    "P": "RGBA",
    "PA": "RGBA",
    "CMYK": "RGB",
    "YCbCr": "RGB",
    "LAB": "RGB",
    "HSV": "RGB",
}


@dataclass
class DecodedImage:
    """Pixel buffer plus what the codec learned about it."""

    pixels: np.ndarray
    format: str
    mode: str

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


def preview(data, length: int = ImageConstants.PREVIEW_LENGTH) -> str:
    """Short printable prefix of bytes or text for log messages."""
    if isinstance(data, (bytes, bytearray)):
        data = data[:length].decode("latin-1")
    text = data[:length]
    return text.encode("unicode_escape").decode("ascii")


def normalize_format(format: str) -> str:
    """
    Normalize an output format name (case-insensitive, JPG -> JPEG).

    Raises:
        ImageEncodeError: If format is not supported
    """
    name = (format or "").strip().lstrip(".").upper()
    name = ImageConstants.FORMAT_ALIASES.get(name, name)
    if name not in ImageConstants.SUPPORTED_OUTPUT_FORMATS:
        raise ImageEncodeError(
            f"Unsupported output format: {format!r} "
            f"(supported: {', '.join(ImageConstants.SUPPORTED_OUTPUT_FORMATS)})",
            unsupported_format=True,
        )
    return name


class ImageConverters:
    """Utilities for converting between image representations."""

    @staticmethod
    def encode_text(data: bytes) -> str:
        """
        Encode bytes as standard base64 text.

        Args:
            data: Raw bytes

        Returns:
            Base64 encoded string (ASCII, padded)
        """
        return base64.b64encode(data).decode("ascii")

    @staticmethod
    def decode_text(text: str) -> bytes:
        """
        Decode base64 text to bytes.

        Accepts surrounding whitespace and an optional data URI prefix
        ("data:image/png;base64,"). Characters outside the base64 alphabet
        are rejected.

        Args:
            text: Base64 encoded string

        Returns:
            Decoded bytes

        Raises:
            TranscodingError: If text is not valid base64 or decodes to nothing
        """
        if not isinstance(text, str):
            raise TranscodingError(f"Expected base64 text, got {type(text).__name__}")

        payload = _DATA_URI_RE.sub("", text.strip(), count=1)
        payload = "".join(payload.split())

        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise TranscodingError(f"Invalid base64 data: {e}") from e

        if not data:
            raise TranscodingError("Base64 data is empty")

        return data

    @staticmethod
    def to_data_uri(data: bytes, format: str = "PNG") -> str:
        """Wrap encoded image bytes in a data URI."""
        mime = ImageConstants.FORMAT_MIME_TYPES[normalize_format(format)]
        return f"data:{mime};base64,{ImageConverters.encode_text(data)}"

    @staticmethod
    def decode_image(data: bytes, backend: str = "pillow") -> DecodedImage:
        """
        Decode container bytes into a pixel buffer.

        Args:
            data: Encoded image (PNG, JPEG, GIF, BMP, TIFF, WEBP, ...)
            backend: "pillow" or "opencv"

        Returns:
            DecodedImage with pixels, container format and pixel mode

        Raises:
            ImageDecodeError: If data is empty or not a decodable image
        """
        if not data:
            raise ImageDecodeError("Image data is empty")

        if backend == "opencv":
            return ImageConverters._decode_opencv(data)
        return ImageConverters._decode_pillow(data)

    @staticmethod
    def _decode_pillow(data: bytes) -> DecodedImage:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageDecodeError(f"Decoding image failed: {e}") from e

        format_name = image.format or "UNKNOWN"
        mode = image.mode

        if mode in _EXPANDED_MODES:
            target = _EXPANDED_MODES[mode]
            if mode == "P" and "transparency" not in image.info:
                target = "RGB"
            logger.debug(f"Expanding {mode} image to {target}")
            image = image.convert(target)
            mode = target

        pixels = np.array(image)
        return DecodedImage(pixels=pixels, format=format_name, mode=mode)

    @staticmethod
    def _decode_opencv(data: bytes) -> DecodedImage:
        buffer = np.frombuffer(data, np.uint8)
        try:
            pixels = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
        except cv2.error as e:
            raise ImageDecodeError(f"Decoding image failed: {e}") from e
        if pixels is None:
            raise ImageDecodeError("Decoding image failed: OpenCV could not decode data")

        # Header only, pixels already decoded above
        try:
            format_name = Image.open(io.BytesIO(data)).format or "UNKNOWN"
        except (UnidentifiedImageError, OSError):
            format_name = "UNKNOWN"

        if pixels.ndim == 2:
            mode = "L" if pixels.dtype == np.uint8 else "I;16"
        elif pixels.shape[2] == 4:
            mode = "BGRA"
        else:
            mode = "BGR"

        return DecodedImage(pixels=pixels, format=format_name, mode=mode)

    @staticmethod
    def encode_image(
        pixels: np.ndarray,
        format: str = ImageConstants.DEFAULT_OUTPUT_FORMAT,
        mode: Optional[str] = None,
        quality: int = ImageConstants.DEFAULT_JPEG_QUALITY,
        backend: str = "pillow",
    ) -> bytes:
        """
        Encode a pixel buffer into container bytes.

        Args:
            pixels: Pixel buffer (H, W) or (H, W, C)
            format: Output format (PNG, JPEG, WEBP, BMP, TIFF, GIF)
            mode: Pixel mode reported at decode time, if known
            quality: JPEG/WEBP quality (1-100, ignored for lossless formats)
            backend: "pillow" or "opencv"

        Returns:
            Encoded image bytes

        Raises:
            ImageEncodeError: If format is unsupported, cannot hold the buffer's
                pixel mode, or encoding fails
        """
        format_name = normalize_format(format)

        if backend == "opencv":
            return ImageConverters._encode_opencv(pixels, format_name, quality)
        return ImageConverters._encode_pillow(pixels, format_name, mode, quality)

    @staticmethod
    def _encode_pillow(
        pixels: np.ndarray, format_name: str, mode: Optional[str], quality: int
    ) -> bytes:
        pixels = np.ascontiguousarray(pixels)
        if format_name == "PNG" and pixels.dtype == np.int32:
            # PNG gray samples are at most 16 bits
            if pixels.size and (pixels.min() < 0 or pixels.max() > 0xFFFF):
                raise ImageEncodeError(
                    f"32-bit pixel values do not fit in {format_name}", unsupported_format=True
                )
            pixels = pixels.astype(np.uint16)

        try:
            # uint16 gray arrays come back as I;16, uint8 ones as L/LA/RGB/RGBA
            image = Image.fromarray(pixels)
            if mode and mode != image.mode:
                logger.debug(f"Encoding {mode} buffer as Pillow mode {image.mode}")

            save_kwargs = {"format": format_name}
            if format_name in ("JPEG", "WEBP"):
                save_kwargs["quality"] = quality
            if format_name == "JPEG":
                save_kwargs["optimize"] = True
                # JPEG has no alpha channel
                if image.mode in ("RGBA", "LA"):
                    image = image.convert(image.mode[:-1])
                elif image.mode not in ("RGB", "L", "CMYK"):
                    image = image.convert("RGB")

            buffer = io.BytesIO()
            image.save(buffer, **save_kwargs)
            return buffer.getvalue()

        except OSError as e:
            if _CANNOT_WRITE_MODE_RE.match(str(e)):
                raise ImageEncodeError(
                    f"Encoding image as {format_name} failed: {e}", unsupported_format=True
                ) from e
            raise ImageEncodeError(f"Encoding image as {format_name} failed: {e}") from e
        except (TypeError, ValueError, KeyError) as e:
            raise ImageEncodeError(f"Encoding image as {format_name} failed: {e}") from e

    @staticmethod
    def _encode_opencv(pixels: np.ndarray, format_name: str, quality: int) -> bytes:
        if format_name not in ImageConstants.OPENCV_OUTPUT_FORMATS:
            raise ImageEncodeError(
                f"Output format {format_name} is not supported by the opencv backend",
                unsupported_format=True,
            )

        extension = ImageConstants.FORMAT_EXTENSIONS[format_name]
        params = []
        if format_name == "JPEG":
            params = [cv2.IMWRITE_JPEG_QUALITY, quality]
            if pixels.ndim == 3 and pixels.shape[2] == 4:
                pixels = cv2.cvtColor(pixels, cv2.COLOR_BGRA2BGR)
        elif format_name == "WEBP":
            params = [cv2.IMWRITE_WEBP_QUALITY, quality]

        try:
            success, buffer = cv2.imencode(extension, pixels, params)
        except cv2.error as e:
            raise ImageEncodeError(f"Encoding image as {format_name} failed: {e}") from e

        if not success:
            raise ImageEncodeError(f"Encoding image as {format_name} failed")

        return buffer.tobytes()

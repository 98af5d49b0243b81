"""
Crop Service - Business logic for the image crop pipeline.

Chains the pipeline steps:

    base64 text -> bytes -> pixel buffer -> crop -> bytes -> base64 text

Each step raises its own error kind and the first failure stops the chain.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from core.constants import ErrorMessages, ImageConstants
from core.crop_store import CropStore
from core.image.converters import ImageConverters, normalize_format, preview
from core.image.crop import crop
from core.utils.decorators import timer
from schemas import Rectangle

logger = logging.getLogger(__name__)


@dataclass
class CropResult:
    """Outcome of one pipeline run"""

    image_base64: str
    width: int
    height: int
    source_format: str
    output_format: str
    mode: str
    region: Dict[str, int]
    size_bytes: int
    processing_time_ms: int
    record_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CropService:
    """
    Service for cropping encoded images.

    Stateless apart from the optional crop store, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        crop_store: Optional[CropStore] = None,
        codec_backend: str = ImageConstants.DEFAULT_CODEC_BACKEND,
        output_format: str = ImageConstants.DEFAULT_OUTPUT_FORMAT,
        jpeg_quality: int = ImageConstants.DEFAULT_JPEG_QUALITY,
    ):
        """
        Initialize crop service.

        Args:
            crop_store: Store receiving crops when requested
            codec_backend: "pillow" or "opencv"
            output_format: Default output container format
            jpeg_quality: Quality for lossy output formats
        """
        if codec_backend not in ImageConstants.CODEC_BACKENDS:
            raise ValueError(f"Unknown codec backend: {codec_backend}")

        self.crop_store = crop_store
        self.codec_backend = codec_backend
        self.output_format = normalize_format(output_format)
        self.jpeg_quality = jpeg_quality

    def crop_bytes(
        self,
        data: bytes,
        region: Rectangle,
        output_format: Optional[str] = None,
    ) -> Tuple[bytes, CropResult]:
        """
        Crop an encoded image held in memory.

        Args:
            data: Encoded source image
            region: Region to extract
            output_format: Output container format (service default if None)

        Returns:
            Tuple of (encoded cropped image, result without base64 payload)

        Raises:
            ImageEncodeError: If output format is unsupported or encoding fails
            ImageDecodeError: If data is not a decodable image
            CropError: If region is invalid for the decoded image
        """
        format_name = normalize_format(output_format or self.output_format)

        with timer() as t:
            decoded = ImageConverters.decode_image(data, backend=self.codec_backend)
            logger.debug(
                f"Image type is '{decoded.format}' ({decoded.mode}, "
                f"{decoded.width}x{decoded.height})"
            )

            cropped = crop(decoded.pixels, region)

            encoded = ImageConverters.encode_image(
                cropped,
                format=format_name,
                mode=decoded.mode,
                quality=self.jpeg_quality,
                backend=self.codec_backend,
            )
            logger.debug(f"Contents of cropped image (unencoded): {preview(encoded)} ...")

        result = CropResult(
            image_base64="",
            width=cropped.shape[1],
            height=cropped.shape[0],
            source_format=decoded.format,
            output_format=format_name,
            mode=decoded.mode,
            region=region.to_dict(),
            size_bytes=len(encoded),
            processing_time_ms=t["ms"],
        )
        return encoded, result

    def crop_base64(
        self,
        image_base64: str,
        region: Rectangle,
        output_format: Optional[str] = None,
        store: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> CropResult:
        """
        Crop a base64 encoded image and return the crop base64 encoded.

        Args:
            image_base64: Base64 encoded source image (data URI allowed)
            region: Region to extract
            output_format: Output container format (service default if None)
            store: If True, save the result in the crop store
            metadata: Extra metadata saved with the stored crop

        Returns:
            CropResult with the base64 encoded cropped image

        Raises:
            TranscodingError: If image_base64 is not valid base64
            ImageDecodeError: If the decoded bytes are not an image
            CropError: If region is invalid for the decoded image
            ImageEncodeError: If output format is unsupported or encoding fails
            RuntimeError: If store is requested but no store is configured
        """
        logger.debug(f"Contents of request (encoded): {preview(image_base64)} ...")

        with timer() as t:
            data = ImageConverters.decode_text(image_base64)
            encoded, result = self.crop_bytes(data, region, output_format)
            result.image_base64 = ImageConverters.encode_text(encoded)

        result.processing_time_ms = t["ms"]
        logger.debug(f"Contents of cropped image (encoded): {preview(result.image_base64)} ...")

        if store:
            if self.crop_store is None:
                raise RuntimeError(ErrorMessages.STORE_NOT_CONFIGURED)
            result.record_id = self.crop_store.add_crop(
                source_format=result.source_format,
                output_format=result.output_format,
                region=result.region,
                width=result.width,
                height=result.height,
                image_base64=result.image_base64,
                size_bytes=result.size_bytes,
                processing_time_ms=result.processing_time_ms,
                metadata=metadata,
            )

        logger.info(
            f"Cropped {result.source_format} image to {result.width}x{result.height} "
            f"{result.output_format} at ({region.x0},{region.y0}) in {result.processing_time_ms} ms"
        )
        return result

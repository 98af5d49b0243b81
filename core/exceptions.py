"""
Exceptions raised by the image crop pipeline.

Every fallible step of the pipeline raises its own error kind so callers
can stop at the first failure and report exactly what went wrong:

- CropError and subclasses: local validation of the crop inputs
- TranscodingError: base64 text could not be turned into bytes
- ImageDecodeError / ImageEncodeError: container codec failures
"""

from typing import Optional, Tuple


class ImagePipelineError(Exception):
    """Base class for all pipeline errors."""

    kind = "pipeline_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class CropError(ImagePipelineError, ValueError):
    """
    Invalid input to the crop operation.

    Carries the offending region and source size (width, height) when known.
    """

    kind = "crop_error"

    def __init__(
        self,
        message: str,
        region: Optional[Tuple[int, int, int, int]] = None,
        source_size: Optional[Tuple[int, int]] = None,
    ):
        super().__init__(message)
        self.region = region
        self.source_size = source_size


class InvalidSourceError(CropError):
    """Source buffer is not an image or has zero width or height."""

    kind = "invalid_source"


class InvalidRegionError(CropError):
    """Region is degenerate (x0 >= x1 or y0 >= y1)."""

    kind = "invalid_region"


class OutOfBoundsError(CropError):
    """Region lies partially or fully outside the source buffer."""

    kind = "out_of_bounds"


class TranscodingError(ImagePipelineError):
    """Base64 text could not be decoded."""

    kind = "transcoding_error"


class ImageDecodeError(ImagePipelineError):
    """Bytes could not be decoded into a pixel buffer."""

    kind = "image_decode_error"


class ImageEncodeError(ImagePipelineError):
    """Pixel buffer could not be encoded into the requested format."""

    kind = "image_encode_error"

    def __init__(self, message: str, unsupported_format: bool = False):
        super().__init__(message)
        self.unsupported_format = unsupported_format

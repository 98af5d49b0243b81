"""
Rectangular pixel-region extraction.

Works on decoded pixel buffers held as NumPy arrays of shape (H, W) or
(H, W, C) with any dtype, so every bit depth and channel count the codec
produces is cropped the same way.
"""

import logging
from typing import Tuple

import numpy as np

from core.exceptions import InvalidRegionError, InvalidSourceError, OutOfBoundsError
from schemas import Rectangle

logger = logging.getLogger(__name__)


def buffer_size(source: np.ndarray) -> Tuple[int, int]:
    """
    Get (width, height) of a pixel buffer.

    Raises:
        InvalidSourceError: If source is not a 2-D or 3-D array or is empty
    """
    if not isinstance(source, np.ndarray) or source.ndim not in (2, 3):
        shape = getattr(source, "shape", None)
        raise InvalidSourceError(f"Source is not a pixel buffer (shape: {shape})")

    height, width = source.shape[:2]
    if width == 0 or height == 0:
        raise InvalidSourceError(
            f"Source has zero size: {width}x{height}", source_size=(width, height)
        )
    if source.ndim == 3 and source.shape[2] == 0:
        raise InvalidSourceError("Source has no color channels", source_size=(width, height))

    return width, height


def validate_region(region: Rectangle, width: int, height: int) -> None:
    """
    Validate region against a source of the given size.

    Raises:
        InvalidRegionError: If region is degenerate
        OutOfBoundsError: If region exceeds the source bounds
    """
    if region.is_degenerate:
        raise InvalidRegionError(
            f"Region {region.as_tuple()} is empty: requires x0 < x1 and y0 < y1",
            region=region.as_tuple(),
            source_size=(width, height),
        )

    if not region.fits_within(width, height):
        raise OutOfBoundsError(
            f"Region {region.as_tuple()} exceeds source bounds {width}x{height}",
            region=region.as_tuple(),
            source_size=(width, height),
        )


def crop(source: np.ndarray, region: Rectangle) -> np.ndarray:
    """
    Extract a rectangular region from a pixel buffer.

    The result is a newly allocated C-contiguous buffer of shape
    (y1 - y0, x1 - x0[, C]) with the source dtype. Pixels are copied
    verbatim; the source is never modified and the result never aliases it.

    Args:
        source: Decoded pixel buffer (rows first)
        region: Half-open region to extract

    Returns:
        Cropped pixel buffer

    Raises:
        InvalidSourceError: If source is not a non-empty 2-D/3-D array
        InvalidRegionError: If region is degenerate
        OutOfBoundsError: If region is not fully inside the source
    """
    width, height = buffer_size(source)
    validate_region(region, width, height)

    out_height = region.height
    out_width = region.width
    cropped = np.empty((out_height, out_width) + source.shape[2:], dtype=source.dtype)

    # One contiguous run per row
    for j in range(out_height):
        cropped[j] = source[region.y0 + j, region.x0 : region.x1]

    logger.debug(
        f"Cropped {width}x{height} buffer to {out_width}x{out_height} at ({region.x0},{region.y0})"
    )
    return cropped

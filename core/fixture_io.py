"""
File helpers for local testing and the demo.

The pipeline itself works on in-memory bytes only; these helpers are the
single place where image bytes touch the filesystem.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from core.image.converters import preview

logger = logging.getLogger(__name__)


def read_bytes(path: Union[str, Path]) -> bytes:
    """
    Read an existing file.

    Raises:
        OSError: If the file cannot be read
    """
    data = Path(path).read_bytes()
    logger.debug(f"Read {len(data)} bytes from {path}: {preview(data)} ...")
    return data


def write_temp_bytes(
    data: bytes,
    directory: Optional[Union[str, Path]] = None,
    prefix: str = "crop-tmp-",
    suffix: str = ".png",
) -> str:
    """
    Write bytes to a new uniquely named file.

    The file is kept after writing so it can be inspected.

    Args:
        data: Bytes to write
        directory: Target directory (OS temp directory if None)
        prefix: Start of the file name
        suffix: End of the file name

    Returns:
        Path of the written file

    Raises:
        OSError: If the file cannot be created or written
    """
    fd, filename = tempfile.mkstemp(
        suffix=suffix, prefix=prefix, dir=str(directory) if directory else None
    )
    with os.fdopen(fd, "wb") as f:
        f.write(data)

    logger.debug(f"Wrote {len(data)} bytes to {filename}")
    return filename

"""
Command line demo of the in-memory crop pipeline.

Reads an image file, passes it through the same base64 boundary the REST
API uses, crops it, writes the cropped image to a temp file for inspection
and prints the base64 text that would be stored.

    python demo.py image-600x600.png --region 50 50 550 550
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.constants import DemoConstants, ImageConstants, SystemConstants
from core.exceptions import ImagePipelineError
from core.fixture_io import read_bytes, write_temp_bytes
from core.image.converters import ImageConverters, preview
from schemas import Rectangle
from services.crop_service import CropService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crop an image in memory and print the base64 encoded result."
    )
    parser.add_argument("image_path", help="Path to the source image")
    parser.add_argument(
        "--region",
        type=int,
        nargs=4,
        metavar=("X0", "Y0", "X1", "Y1"),
        default=list(DemoConstants.DEFAULT_REGION),
        help="Half-open crop region (default: %(default)s)",
    )
    parser.add_argument(
        "--format",
        "-f",
        default=ImageConstants.DEFAULT_OUTPUT_FORMAT,
        help="Output image format (default: %(default)s)",
    )
    parser.add_argument(
        "--backend",
        choices=ImageConstants.CODEC_BACKENDS,
        default=ImageConstants.DEFAULT_CODEC_BACKEND,
        help="Image codec backend (default: %(default)s)",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the cropped image file (default: OS temp directory)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every pipeline step")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=SystemConstants.LOG_FORMAT,
    )
    logging.getLogger("PIL").setLevel(logging.INFO)

    try:
        data = read_bytes(args.image_path)
    except OSError as e:
        print(f"Crop failed. Could not read test image: {e}", file=sys.stderr)
        return 1

    # What a client would send in the REST call
    request_base64 = ImageConverters.encode_text(data)
    print(f"Contents of file (encoded): {preview(request_base64)} ...")

    region = Rectangle.from_coords(*args.region)

    try:
        service = CropService(codec_backend=args.backend, output_format=args.format)
        result = service.crop_base64(request_base64, region)
    except ImagePipelineError as e:
        print(f"Crop failed: {e.kind}: {e.message}", file=sys.stderr)
        return 1

    print(f"Image type is '{result.source_format}'.")

    cropped = ImageConverters.decode_text(result.image_base64)
    suffix = ImageConstants.FORMAT_EXTENSIONS[result.output_format]
    try:
        filename = write_temp_bytes(
            cropped, directory=args.output_dir, prefix=DemoConstants.TMP_PREFIX, suffix=suffix
        )
    except OSError as e:
        print(f"Write cropped image to file for testing failed: {e}", file=sys.stderr)
        return 1

    print(f"Final result for testing is in file {filename}.")
    # What would be stored in the document database
    print(f"Contents of cropped {result.output_format} image (encoded): {preview(result.image_base64)} ...")
    print(f"Crop completed successfully: {result.width}x{result.height} in {result.processing_time_ms} ms.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

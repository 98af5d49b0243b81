"""
Tests for the crop pipeline service
"""

import io

import numpy as np
import pytest
from PIL import Image

from core.exceptions import (
    ImageDecodeError,
    ImageEncodeError,
    InvalidRegionError,
    OutOfBoundsError,
    TranscodingError,
)
from core.image.converters import ImageConverters
from schemas import Rectangle
from services.crop_service import CropService


class TestCropService:
    """Test the base64 -> crop -> base64 pipeline"""

    @pytest.fixture
    def region(self):
        return Rectangle.from_coords(50, 50, 550, 550)

    def test_crop_base64(self, crop_service, png_base64, rgba_image, region, png_codec):
        """Full pipeline on the 600x600 scenario"""
        _, decode_png = png_codec

        result = crop_service.crop_base64(png_base64, region)

        assert result.width == 500
        assert result.height == 500
        assert result.source_format == "PNG"
        assert result.output_format == "PNG"
        assert result.mode == "RGBA"
        assert result.region == {"x0": 50, "y0": 50, "x1": 550, "y1": 550}
        assert result.record_id is None

        pixels = decode_png(ImageConverters.decode_text(result.image_base64))
        assert pixels.shape == (500, 500, 4)
        assert np.array_equal(pixels[0, 0], rgba_image[50, 50])
        assert np.array_equal(pixels[499, 499], rgba_image[549, 549])
        assert np.array_equal(pixels, rgba_image[50:550, 50:550])

    def test_size_bytes_matches_payload(self, crop_service, png_base64, region):
        result = crop_service.crop_base64(png_base64, region)

        assert result.size_bytes == len(ImageConverters.decode_text(result.image_base64))

    def test_crop_bytes(self, crop_service, small_image, png_codec):
        encode_png, decode_png = png_codec

        encoded, result = crop_service.crop_bytes(
            encode_png(small_image), Rectangle.from_coords(0, 0, 40, 30)
        )

        assert result.image_base64 == ""
        assert np.array_equal(decode_png(encoded), small_image)

    def test_data_uri_input(self, crop_service, png_base64, region):
        result = crop_service.crop_base64("data:image/png;base64," + png_base64, region)
        assert result.width == 500

    def test_jpeg_output(self, crop_service, png_base64, region):
        result = crop_service.crop_base64(png_base64, region, output_format="jpg")

        assert result.output_format == "JPEG"
        image = Image.open(io.BytesIO(ImageConverters.decode_text(result.image_base64)))
        assert image.format == "JPEG"
        assert image.size == (500, 500)

    def test_service_default_format(self, png_base64, region):
        service = CropService(output_format="webp")

        result = service.crop_base64(png_base64, region)

        assert result.output_format == "WEBP"

    def test_opencv_backend(self, png_base64, rgba_image, region, png_codec):
        """OpenCV backend crops BGRA and writes it back as the same colors"""
        _, decode_png = png_codec
        service = CropService(codec_backend="opencv")

        result = service.crop_base64(png_base64, region)

        assert result.mode == "BGRA"
        pixels = decode_png(ImageConverters.decode_text(result.image_base64))
        assert np.array_equal(pixels, rgba_image[50:550, 50:550])

    def test_store_result(self, crop_service, crop_store, png_base64, region):
        result = crop_service.crop_base64(png_base64, region, store=True, metadata={"doc": 1})

        assert result.record_id is not None
        record = crop_store.get_crop(result.record_id)
        assert record.image_base64 == result.image_base64
        assert record.width == 500
        assert record.metadata == {"doc": 1}

    def test_store_without_store_configured(self, png_base64, region):
        service = CropService()

        with pytest.raises(RuntimeError):
            service.crop_base64(png_base64, region, store=True)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            CropService(codec_backend="imagemagick")


class TestCropServiceErrors:
    """Each step stops the chain with its own error kind"""

    def test_invalid_base64(self, crop_service, crop_store):
        with pytest.raises(TranscodingError):
            crop_service.crop_base64("%%%not-base64%%%", Rectangle.from_coords(0, 0, 1, 1), store=True)

        assert crop_store.total_crops == 0

    def test_not_an_image(self, crop_service):
        text = ImageConverters.encode_text(b"plain text, not an image")

        with pytest.raises(ImageDecodeError):
            crop_service.crop_base64(text, Rectangle.from_coords(0, 0, 1, 1))

    def test_out_of_bounds(self, crop_service, png_base64):
        with pytest.raises(OutOfBoundsError):
            crop_service.crop_base64(png_base64, Rectangle.from_coords(0, 0, 601, 600))

    def test_degenerate(self, crop_service, png_base64):
        with pytest.raises(InvalidRegionError):
            crop_service.crop_base64(png_base64, Rectangle.from_coords(10, 10, 10, 20))

    def test_unsupported_format(self, crop_service, png_base64):
        with pytest.raises(ImageEncodeError):
            crop_service.crop_base64(
                png_base64, Rectangle.from_coords(0, 0, 10, 10), output_format="heic"
            )

    def test_failed_crop_not_stored(self, crop_service, crop_store, png_base64):
        with pytest.raises(OutOfBoundsError):
            crop_service.crop_base64(png_base64, Rectangle.from_coords(0, 0, 700, 700), store=True)

        assert crop_store.get_statistics()["total"] == 0

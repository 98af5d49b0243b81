"""
API Integration Tests for Crop Endpoints
"""

import io

import numpy as np
from PIL import Image

from core.exceptions import ImageEncodeError
from core.image.converters import ImageConverters


class TestCropAPI:
    """Integration tests for crop API endpoints"""

    def test_crop_basic(self, client, crop_request, rgba_image, png_codec):
        """Test cropping the 600x600 scenario"""
        _, decode_png = png_codec

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 200
        data = response.json()

        assert data["width"] == 500
        assert data["height"] == 500
        assert data["source_format"] == "PNG"
        assert data["output_format"] == "PNG"
        assert data["region"] == {"x0": 50, "y0": 50, "x1": 550, "y1": 550}
        assert data["record_id"] is None
        assert "processing_time_ms" in data

        pixels = decode_png(ImageConverters.decode_text(data["image_base64"]))
        assert np.array_equal(pixels[0, 0], rgba_image[50, 50])
        assert np.array_equal(pixels[499, 499], rgba_image[549, 549])

    def test_crop_jpeg_output(self, client, crop_request):
        """Test requesting a different output format"""
        crop_request["output_format"] = "jpeg"

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 200
        data = response.json()
        assert data["output_format"] == "JPEG"
        image = Image.open(io.BytesIO(ImageConverters.decode_text(data["image_base64"])))
        assert image.format == "JPEG"

    def test_crop_and_store(self, client, crop_request):
        """Test storing the crop"""
        crop_request["store"] = True
        crop_request["metadata"] = {"document": "abc"}

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 200
        record_id = response.json()["record_id"]
        assert record_id.startswith("crop_")

        stored = client.get(f"/api/crops/{record_id}")
        assert stored.status_code == 200
        assert stored.json()["metadata"] == {"document": "abc"}

    def test_crop_roi(self, client, png_base64):
        """Test cropping by origin and size"""
        request_data = {
            "image_base64": png_base64,
            "roi": {"x": 100, "y": 200, "width": 50, "height": 25},
        }

        response = client.post("/api/crop/roi", json=request_data)

        assert response.status_code == 200
        data = response.json()
        assert data["width"] == 50
        assert data["height"] == 25
        assert data["region"] == {"x0": 100, "y0": 200, "x1": 150, "y1": 225}

    def test_crop_edge_inclusive(self, client, crop_request):
        """Region ending exactly at the image edge succeeds"""
        crop_request["region"] = {"x0": 500, "y0": 500, "x1": 600, "y1": 600}

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 200
        assert response.json()["width"] == 100

    def test_crop_out_of_bounds(self, client, crop_request):
        """Region past the image edge is rejected, not clamped"""
        crop_request["region"] = {"x0": 0, "y0": 0, "x1": 601, "y1": 600}

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 400
        assert response.json()["error"] == "out_of_bounds"

    def test_crop_negative_origin(self, client, crop_request):
        crop_request["region"] = {"x0": -1, "y0": 0, "x1": 10, "y1": 10}

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 400
        assert response.json()["error"] == "out_of_bounds"

    def test_crop_degenerate(self, client, crop_request):
        """Empty region is rejected"""
        crop_request["region"] = {"x0": 10, "y0": 10, "x1": 10, "y1": 20}

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_region"

    def test_crop_invalid_base64(self, client, crop_request):
        crop_request["image_base64"] = "definitely not base64!"

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 400
        assert response.json()["error"] == "transcoding_error"

    def test_crop_not_an_image(self, client, crop_request):
        crop_request["image_base64"] = ImageConverters.encode_text(b"hello world")

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 400
        assert response.json()["error"] == "image_decode_error"

    def test_crop_unsupported_format(self, client, crop_request):
        crop_request["output_format"] = "heic"

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "image_encode_error"
        assert "heic" in data["detail"]

    def test_crop_missing_region(self, client, png_base64):
        """Request validation errors keep FastAPI's 422"""
        response = client.post("/api/crop", json={"image_base64": png_base64})

        assert response.status_code == 422

    def test_crop_payload_too_large(self, client, crop_request):
        """Payload over the configured limit is rejected before decoding"""
        crop_request["image_base64"] = "A" * (4 * 1024 * 1024)

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 413
        assert response.json()["error"] == "payload_too_large"

    def test_failed_crop_not_stored(self, client, crop_request):
        crop_request["region"] = {"x0": 0, "y0": 0, "x1": 700, "y1": 700}
        crop_request["store"] = True

        client.post("/api/crop", json=crop_request)

        stats = client.get("/api/crops/statistics").json()
        assert stats["total"] == 0

    def test_crop_mode_not_writable_in_format(self, client, png_codec):
        """Gray plus alpha cannot be saved as BMP; the client picked the format"""
        encode_png, _ = png_codec
        gray_alpha = np.full((40, 40, 2), 128, dtype=np.uint8)
        request_data = {
            "image_base64": ImageConverters.encode_text(encode_png(gray_alpha)),
            "region": {"x0": 0, "y0": 0, "x1": 20, "y1": 20},
            "output_format": "BMP",
        }

        response = client.post("/api/crop", json=request_data)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "image_encode_error"
        assert "cannot write mode LA as BMP" in data["detail"]

    def test_crop_encoder_failure(self, client, crop_request, monkeypatch):
        """Encoder failing on a supported format is a server error"""

        def failing_encode(*args, **kwargs):
            raise ImageEncodeError("Encoding image as PNG failed: encoder crashed")

        monkeypatch.setattr(ImageConverters, "encode_image", staticmethod(failing_encode))

        response = client.post("/api/crop", json=crop_request)

        assert response.status_code == 500
        assert response.json() == {
            "error": "image_encode_error",
            "detail": "Encoding image as PNG failed: encoder crashed",
        }

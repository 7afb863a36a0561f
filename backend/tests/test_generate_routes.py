"""
Tests for the catalog image generation endpoint.
"""

import base64
from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import Image

from services.gemini_generator import ImageGenerationError, NoImageReturnedError
from services.size_lock import ConvergenceError, ImageDecodeError, TargetRange

ENDPOINT = "/api/generate-image"


def png_file(data: bytes, name: str = "front.png"):
    return (name, data, "image/png")


class TestReferenceRequirements:
    """Validation that happens before Gemini is ever called."""

    @pytest.mark.asyncio
    async def test_missing_reference_image(self, client):
        response = await client.post(ENDPOINT, data={"pose": "Standing"})
        assert response.status_code == 400
        assert response.json()["error"] == "Reference image is required."

    @pytest.mark.asyncio
    async def test_model_reference_mode_requires_second_image(self, client, sample_image_bytes):
        response = await client.post(
            ENDPOINT,
            files={"referenceImage": png_file(sample_image_bytes)},
            data={"generationMode": "MODEL_REFERENCE_BASED"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Model reference image is required for this mode."

    @pytest.mark.asyncio
    async def test_mode_check_runs_before_primary_check(self, client):
        response = await client.post(ENDPOINT, data={"generationMode": "MODEL_REFERENCE_BASED"})
        assert response.status_code == 400
        assert response.json()["error"] == "Model reference image is required for this mode."

    @pytest.mark.asyncio
    async def test_back_pose_requires_second_image(self, client, sample_image_bytes):
        response = await client.post(
            ENDPOINT,
            files={"referenceImage": png_file(sample_image_bytes)},
            data={"pose": "Back view"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == (
            "Back pose requires SECOND reference image of same saree."
        )

    @pytest.mark.asyncio
    async def test_unknown_generation_mode_falls_back_to_pose_based(
        self, client, mock_gemini_generator, mock_reencode, sample_image_bytes
    ):
        response = await client.post(
            ENDPOINT,
            files={"referenceImage": png_file(sample_image_bytes)},
            data={"generationMode": "TEXT_ONLY"},
        )
        assert response.status_code == 200
        assert response.json()["debugInfo"]["generationMode"] == "POSE_BASED"

    @pytest.mark.asyncio
    async def test_error_body_uses_error_key(self, client):
        response = await client.post(ENDPOINT, data={"pose": "Standing"})
        assert response.json() == {"error": "Reference image is required."}

    @pytest.mark.asyncio
    async def test_overlong_attribute(self, client, sample_image_bytes):
        response = await client.post(
            ENDPOINT,
            files={"referenceImage": png_file(sample_image_bytes)},
            data={"pose": "x" * 501},
        )
        assert response.status_code == 422
        assert response.json()["error"].startswith("Invalid value for pose")

    @pytest.mark.asyncio
    async def test_not_configured(self, client, sample_image_bytes):
        with patch("api.routes.generate.GeminiImageGenerator") as mock_gen:
            mock_gen.is_available.return_value = False
            response = await client.post(
                ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
            )
        assert response.status_code == 503


class TestUploadValidation:
    @pytest.mark.asyncio
    async def test_rejects_non_image(self, client, mock_gemini_generator):
        response = await client.post(
            ENDPOINT, files={"referenceImage": ("front.png", b"definitely not a png", "image/png")}
        )
        assert response.status_code == 400
        mock_gemini_generator.generate_catalog_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_empty_upload(self, client, mock_gemini_generator):
        response = await client.post(
            ENDPOINT, files={"referenceImage": ("front.png", b"", "image/png")}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_rejects_oversized_upload(
        self, client, mock_gemini_generator, sample_image_bytes, monkeypatch
    ):
        monkeypatch.setenv("MAX_UPLOAD_SIZE_BYTES", "10")
        response = await client.post(
            ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
        )
        assert response.status_code == 413

    @pytest.mark.asyncio
    async def test_validates_second_image(self, client, mock_gemini_generator, sample_image_bytes):
        response = await client.post(
            ENDPOINT,
            files={
                "referenceImage": png_file(sample_image_bytes),
                "referenceImage2": ("back.png", b"garbage", "image/png"),
            },
        )
        assert response.status_code == 400
        assert "Second reference image" in response.json()["error"]


class TestGenerateImageSuccess:
    @pytest.mark.asyncio
    async def test_returns_size_locked_jpeg(
        self,
        client,
        mock_gemini_generator,
        mock_reencode,
        locked_result,
        sample_image_bytes,
        generated_image_bytes,
    ):
        response = await client.post(
            ENDPOINT,
            files={"referenceImage": png_file(sample_image_bytes)},
            data={"pose": "Standing", "location": "Garden"},
        )

        assert response.status_code == 200
        body = response.json()
        assert base64.b64decode(body["imageBase64"]) == locked_result.data
        assert body["mimeType"] == "image/jpeg"
        assert body["provider"] == "gemini"

        debug = body["debugInfo"]
        assert debug["originalSizeKB"] == round(len(generated_image_bytes) / 1024)
        assert debug["finalSizeMB"] == locked_result.size_mb
        assert debug["finalWidth"] == 2800
        assert debug["finalQuality"] == 94
        assert debug["hasSecondaryImage"] is False
        assert debug["generationMode"] == "POSE_BASED"
        assert debug["isPalluSpread"] is False
        assert debug["isNonIndianModel"] is False
        assert debug["strictMode"] is False
        assert debug["modelType"].startswith("Indian woman")

        source, target, _config = mock_reencode.call_args.args
        assert source == generated_image_bytes
        assert target == TargetRange(1024 * 1024, 3 * 1024 * 1024)

    @pytest.mark.asyncio
    async def test_images_sent_in_order(
        self, client, mock_gemini_generator, mock_reencode, sample_image_bytes, sample_jpeg_bytes
    ):
        response = await client.post(
            "/api/v1/generate-image",
            files={
                "referenceImage": png_file(sample_image_bytes),
                "referenceImage2": ("back.jpg", sample_jpeg_bytes, "image/jpeg"),
            },
            data={"pose": "Back view", "modelExpression": ["Smiling", "Soft"]},
        )

        assert response.status_code == 200
        assert response.json()["debugInfo"]["hasSecondaryImage"] is True

        prompt, references = mock_gemini_generator.generate_catalog_image.call_args.args
        assert [ref.mime_type for ref in references] == ["image/png", "image/jpeg"]
        assert references[0].data == sample_image_bytes
        assert "Smiling, Soft" in prompt
        assert "[SECONDARY_IMAGE_USAGE" in prompt

    @pytest.mark.asyncio
    async def test_model_reference_mode(
        self, client, mock_gemini_generator, mock_reencode, sample_image_bytes, sample_jpeg_bytes
    ):
        response = await client.post(
            ENDPOINT,
            files={
                "referenceImage": png_file(sample_image_bytes),
                "referenceImage2": ("model.jpg", sample_jpeg_bytes, "image/jpeg"),
            },
            data={"generationMode": "MODEL_REFERENCE_BASED", "modelType": "African woman"},
        )

        assert response.status_code == 200
        debug = response.json()["debugInfo"]
        assert debug["generationMode"] == "MODEL_REFERENCE_BASED"
        assert debug["isAfricanModel"] is True
        assert debug["isNonIndianModel"] is True
        prompt, _ = mock_gemini_generator.generate_catalog_image.call_args.args
        assert "[MODEL_REFERENCE_LOCK]" in prompt

    @pytest.mark.asyncio
    async def test_strict_mode_from_settings(
        self, client, mock_gemini_generator, mock_reencode, sample_image_bytes, monkeypatch
    ):
        monkeypatch.setenv("HARD_STRICT_MODE", "true")
        response = await client.post(
            ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
        )
        assert response.status_code == 200
        assert response.json()["debugInfo"]["strictMode"] is True

    @pytest.mark.asyncio
    async def test_real_size_lock(self, client, mock_gemini_generator, sample_image_bytes, monkeypatch):
        monkeypatch.setenv("SIZE_LOCK_MIN_BYTES", "1")
        monkeypatch.setenv("SIZE_LOCK_MAX_BYTES", str(50 * 1024 * 1024))
        monkeypatch.setenv("SIZE_LOCK_START_WIDTH", "400")
        monkeypatch.setenv("SIZE_LOCK_WIDTH_FLOOR", "200")

        response = await client.post(
            ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["debugInfo"]["finalWidth"] == 400
        with Image.open(BytesIO(base64.b64decode(body["imageBase64"]))) as image:
            assert image.format == "JPEG"
            assert image.size == (400, 533)


class TestGenerateImageFailures:
    @pytest.mark.asyncio
    async def test_no_image_returned(self, client, mock_gemini_generator, sample_image_bytes):
        mock_gemini_generator.generate_catalog_image.side_effect = NoImageReturnedError()
        response = await client.post(
            ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
        )
        assert response.status_code == 500
        assert response.json()["error"] == "No image returned from Gemini."

    @pytest.mark.asyncio
    async def test_gemini_error_is_sanitized(self, client, mock_gemini_generator, sample_image_bytes):
        mock_gemini_generator.generate_catalog_image.side_effect = ImageGenerationError(
            "POST https://generativelanguage.googleapis.com/v1beta?key=AIzaSyA1234567890abcdefghij failed"
        )
        response = await client.post(
            ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
        )
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to generate image."

    @pytest.mark.asyncio
    async def test_generated_image_not_decodable(
        self, client, mock_gemini_generator, sample_image_bytes
    ):
        with patch("services.catalog_generation.reencode", side_effect=ImageDecodeError()):
            response = await client.post(
                ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
            )
        assert response.status_code == 500
        assert response.json()["error"] == "Generated image could not be decoded."

    @pytest.mark.asyncio
    async def test_size_lock_convergence_failure(
        self, client, mock_gemini_generator, sample_image_bytes
    ):
        error = ConvergenceError(TargetRange(1024 * 1024, 3 * 1024 * 1024), attempts=25)
        with patch("services.catalog_generation.reencode", side_effect=error):
            response = await client.post(
                ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
            )
        assert response.status_code == 500
        assert response.json()["error"] == (
            "Failed to generate image within 1–3 MB size constraints"
        )

    @pytest.mark.asyncio
    async def test_unexpected_error(self, client, mock_gemini_generator, sample_image_bytes):
        mock_gemini_generator.generate_catalog_image.side_effect = RuntimeError("boom")
        response = await client.post(
            ENDPOINT, files={"referenceImage": png_file(sample_image_bytes)}
        )
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to generate image."


class TestServiceEndpoints:
    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "Model Studio backend is running"

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["size_lock"]["range"] == "1–3 MB"

    @pytest.mark.asyncio
    async def test_security_headers(self, client):
        response = await client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_key(self, client):
        response = await client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

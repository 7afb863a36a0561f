"""
Test fixtures and configuration for pytest.
"""

import os
import random
import sys
from io import BytesIO
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import get_settings  # noqa: E402


def _image_bytes(image: Image.Image, fmt: str, **save_kwargs) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


def make_noise_image(width: int, height: int, seed: int = 7) -> Image.Image:
    """Random RGB noise; compresses badly, so JPEG size tracks width and quality."""
    rng = random.Random(seed)
    return Image.frombytes(
        "RGB", (width, height), bytes(rng.getrandbits(8) for _ in range(width * height * 3))
    )


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env patches in one test never leak into another."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def noise_image_factory():
    return make_noise_image


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Sample PNG reference photo."""
    return _image_bytes(Image.new("RGB", (128, 160), color="red"), "PNG")


@pytest.fixture
def sample_jpeg_bytes() -> bytes:
    """Sample JPEG reference photo."""
    return _image_bytes(Image.new("RGB", (128, 160), color="blue"), "JPEG")


@pytest.fixture
def transparent_png_bytes() -> bytes:
    return _image_bytes(Image.new("RGBA", (96, 96), color=(0, 128, 0, 0)), "PNG")


@pytest.fixture
def generated_image_bytes() -> bytes:
    """What a Gemini response image looks like: a small 3:4 PNG."""
    return _image_bytes(make_noise_image(96, 128), "PNG")


@pytest.fixture
def mock_gemini_generator(generated_image_bytes):
    """Patch the Gemini generator used by the route and the pipeline."""
    from services.gemini_generator import GeneratedImage

    mock_instance = MagicMock()
    mock_instance.generate_catalog_image = AsyncMock(
        return_value=GeneratedImage(data=generated_image_bytes, mime_type="image/png")
    )
    with patch("api.routes.generate.GeminiImageGenerator") as route_gen, patch(
        "services.catalog_generation.GeminiImageGenerator"
    ) as pipeline_gen:
        route_gen.is_available.return_value = True
        pipeline_gen.get_instance.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def locked_result():
    """Size-lock result returned by a patched reencode."""
    from services.size_lock import EncodeResult

    return EncodeResult(data=b"\xff\xd8\xff" + b"\x00" * (1536 * 1024), width=2800, quality=94)


@pytest.fixture
def mock_reencode(locked_result):
    with patch("services.catalog_generation.reencode", return_value=locked_result) as mock:
        yield mock


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Test client talking to the ASGI app in-process."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

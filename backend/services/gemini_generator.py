"""
Google Gemini image generation service.

Sends the reference photo(s) and the catalog prompt to the Gemini image model
and returns the first inline image of the response.
"""

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from config import get_settings
from services.image_validation import ReferenceImage

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    """Gemini could not produce an image for the request."""


class NoImageReturnedError(ImageGenerationError):
    def __init__(self, message: str = "No image returned from Gemini."):
        super().__init__(message)


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    mime_type: str
    finish_reason: Optional[str] = None

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024


def _is_rate_limit_error(error: Exception) -> bool:
    message = str(error)
    return "429" in message or "RESOURCE_EXHAUSTED" in message


class GeminiImageGenerator:
    """
    Image generator backed by the Google Gemini API.

    A single client is shared by all requests (singleton); blocking SDK calls
    run in a worker thread with a timeout.
    """

    _instance: Optional["GeminiImageGenerator"] = None
    _client: Optional["genai.Client"] = None  # type: ignore
    _initialized: bool = False

    IMAGE_MODALITIES = ["TEXT", "IMAGE"]
    # Linear back-off unit for rate-limited attempts (10s, 20s, ...)
    RATE_LIMIT_BACKOFF_SECONDS = 10

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "GeminiImageGenerator":
        if cls._instance is None:
            cls._instance = cls()
        if not cls._initialized:
            cls._instance._initialize()
        return cls._instance

    @classmethod
    def is_available(cls) -> bool:
        """Check if the Gemini SDK is installed and an API key is configured"""
        try:
            from google import genai  # noqa: F401
        except ImportError:
            return False
        return bool(get_settings().GEMINI_API_KEY)

    def _initialize(self):
        """Initialize Google Gemini client"""
        if self._initialized:
            return

        if not self.is_available():
            raise RuntimeError(
                "Google Gemini API not available! "
                "Install: pip install google-genai "
                "And set GEMINI_API_KEY in .env"
            )

        from google import genai

        settings = get_settings()
        try:
            type(self)._client = genai.Client(api_key=settings.GEMINI_API_KEY)
        except Exception as e:
            logger.error(f"Failed to initialize Google Gemini: {e}")
            raise
        type(self)._initialized = True
        logger.info(
            "Gemini generator ready: model=%s aspect_ratio=%s timeout=%ss retries=%d",
            settings.GEMINI_IMAGE_MODEL,
            settings.GEMINI_ASPECT_RATIO,
            settings.GEMINI_TIMEOUT_SECONDS,
            settings.GEMINI_MAX_RETRIES,
        )

    @staticmethod
    async def _run_with_timeout(call: Callable[[], object], timeout: float) -> object:
        """Run a blocking SDK call in a worker thread with timeout."""
        return await asyncio.wait_for(asyncio.to_thread(call), timeout=timeout)

    @staticmethod
    def _build_generation_config(types_module: object, aspect_ratio: str) -> object:
        config_kwargs: dict[str, object] = {
            "response_modalities": GeminiImageGenerator.IMAGE_MODALITIES
        }
        image_config_cls = getattr(types_module, "ImageConfig", None)
        if image_config_cls is not None:
            config_kwargs["image_config"] = image_config_cls(aspect_ratio=aspect_ratio)
        else:
            logger.warning(
                "Installed google-genai has no ImageConfig; aspect ratio %s not enforced",
                aspect_ratio,
            )
        return types_module.GenerateContentConfig(**config_kwargs)

    @staticmethod
    def _build_contents(
        types_module: object, references: Sequence[ReferenceImage], prompt: str
    ) -> list[object]:
        # Images first (front, then back/model reference), prompt text last.
        contents: list[object] = [
            types_module.Part.from_bytes(data=ref.data, mime_type=ref.mime_type)
            for ref in references
        ]
        contents.append(prompt)
        return contents

    @staticmethod
    def _iter_response_parts(response: object) -> Iterable[object]:
        """Yield candidate parts across SDK response layouts."""
        direct_parts = getattr(response, "parts", None)
        if direct_parts:
            yield from direct_parts
            return

        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                yield part

    @classmethod
    def _extract_image(cls, response: object) -> Optional[tuple[bytes, str]]:
        """Return (bytes, mime_type) of the first inline image in the response."""
        for part in cls._iter_response_parts(response):
            inline_data = getattr(part, "inline_data", None)
            data = getattr(inline_data, "data", None) if inline_data is not None else None
            if not data:
                continue
            if isinstance(data, str):
                data = base64.b64decode(data)
            mime_type = getattr(inline_data, "mime_type", None) or "image/png"
            return bytes(data), mime_type
        return None

    @staticmethod
    def _finish_reason(response: object) -> Optional[str]:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None
        reason = getattr(candidates[0], "finish_reason", None)
        if reason is None:
            return None
        return getattr(reason, "name", None) or str(reason)

    @classmethod
    def _log_response_summary(cls, response: object) -> None:
        candidates = getattr(response, "candidates", None) or []
        logger.info(
            "Gemini response: candidates=%d finish_reason=%s",
            len(candidates),
            cls._finish_reason(response) or "Unknown",
        )
        if not candidates:
            return
        content = getattr(candidates[0], "content", None)
        logger.debug(
            "Gemini response content parts: %d",
            len(getattr(content, "parts", None) or []),
        )
        for rating in getattr(candidates[0], "safety_ratings", None) or []:
            logger.info(
                "Safety rating: %s=%s",
                getattr(rating, "category", "?"),
                getattr(rating, "probability", "?"),
            )

    async def generate_catalog_image(
        self, prompt: str, references: Sequence[ReferenceImage]
    ) -> GeneratedImage:
        """
        Generate one catalog photo from the reference image(s) and prompt.

        Rate-limited calls are retried with linear back-off up to
        GEMINI_MAX_RETRIES attempts. Raises ImageGenerationError on any other
        failure and NoImageReturnedError when the response carries no image.
        """
        from google.genai import types
        from google.genai.errors import ClientError

        if self._client is None:
            raise RuntimeError("Google Gemini client not initialized")

        settings = get_settings()
        contents = self._build_contents(types, references, prompt)
        config = self._build_generation_config(types, settings.GEMINI_ASPECT_RATIO)
        max_retries = max(1, settings.GEMINI_MAX_RETRIES)

        response = None
        for attempt in range(max_retries):
            try:
                response = await self._run_with_timeout(
                    lambda: self._client.models.generate_content(
                        model=settings.GEMINI_IMAGE_MODEL,
                        contents=contents,
                        config=config,
                    ),
                    timeout=settings.GEMINI_TIMEOUT_SECONDS,
                )
                break
            except asyncio.TimeoutError:
                logger.warning(
                    "Gemini call timed out after %ss (attempt %d/%d)",
                    settings.GEMINI_TIMEOUT_SECONDS,
                    attempt + 1,
                    max_retries,
                )
                raise ImageGenerationError("Image generation timed out.")
            except ClientError as e:
                if _is_rate_limit_error(e) and attempt < max_retries - 1:
                    wait_time = (attempt + 1) * self.RATE_LIMIT_BACKOFF_SECONDS
                    logger.warning(
                        "Rate limited (attempt %d/%d), waiting %ss...",
                        attempt + 1,
                        max_retries,
                        wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    continue
                logger.warning("Gemini API error: %s", e)
                if _is_rate_limit_error(e):
                    raise ImageGenerationError(
                        "Image generation quota exhausted. Please try again later."
                    ) from e
                raise ImageGenerationError("Image generation request was rejected.") from e

        self._log_response_summary(response)
        extracted = self._extract_image(response)
        if extracted is None:
            logger.error(
                "No image data returned from Gemini (finish_reason=%s)",
                self._finish_reason(response) or "Unknown",
            )
            raise NoImageReturnedError()

        data, mime_type = extracted
        image = GeneratedImage(
            data=data,
            mime_type=mime_type,
            finish_reason=self._finish_reason(response),
        )
        logger.info("Image data received from Gemini: %.1fKB (%s)", image.size_kb, mime_type)
        return image

import logging
from enum import Enum
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


logger = logging.getLogger(__name__)


class AppMode(str, Enum):
    DEV = "dev"
    PROD = "prod"


class Settings(BaseSettings):
    # Application mode - defaults to DEV
    APP_MODE: AppMode = AppMode.DEV

    # Debug mode - MUST be False in production
    DEBUG: bool = False

    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Google Gemini API
    GEMINI_API_KEY: str = ""
    GEMINI_IMAGE_MODEL: str = "gemini-2.5-flash-image"
    GEMINI_ASPECT_RATIO: str = "3:4"
    GEMINI_TIMEOUT_SECONDS: int = 120
    # Attempts per request; only rate-limit errors are retried
    GEMINI_MAX_RETRIES: int = 2

    # Prompt behaviour
    HARD_STRICT_MODE: bool = False
    DEBUG_FULL_PROMPT: bool = False

    # Uploads
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024  # 10MB

    # Size lock for the returned JPEG (1MB - 3MB by default)
    SIZE_LOCK_MIN_BYTES: int = 1 * 1024 * 1024
    SIZE_LOCK_MAX_BYTES: int = 3 * 1024 * 1024
    SIZE_LOCK_START_WIDTH: int = 2800  # catalog-safe starting width
    SIZE_LOCK_START_QUALITY: int = 94
    SIZE_LOCK_MAX_ITERATIONS: int = 25
    SIZE_LOCK_WIDTH_STEP: int = 250
    SIZE_LOCK_QUALITY_STEP_UP: int = 2
    SIZE_LOCK_QUALITY_STEP_DOWN: int = 4
    SIZE_LOCK_QUALITY_SHRINK_THRESHOLD: int = 85
    SIZE_LOCK_QUALITY_FLOOR: int = 80
    SIZE_LOCK_QUALITY_CEILING: int = 98
    SIZE_LOCK_WIDTH_FLOOR: int = 2000

    # CORS - comma-separated list of allowed origins, "*" allows any origin
    CORS_ALLOWED_ORIGINS: str = "*"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """
        Get allowed CORS origins.

        The studio frontend is hosted on a separate domain, so any origin is
        allowed unless CORS_ALLOWED_ORIGINS narrows it down.
        """
        origins = [
            o.strip() for o in self.CORS_ALLOWED_ORIGINS.split(",") if o.strip()
        ]
        if not origins:
            if self.APP_MODE == AppMode.PROD:
                logger.warning(
                    "No CORS_ALLOWED_ORIGINS configured in production. "
                    "Cross-origin requests will be blocked."
                )
                return []
            return ["http://localhost:3000", "http://localhost:5173"]
        return origins

    @property
    def LOG_LEVEL(self) -> str:
        return "DEBUG" if self.DEBUG else "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env variables


def _validate_settings(settings: Settings) -> Settings:
    """
    Validate settings and fail fast on unusable configuration.

    The size-lock range is checked in every mode; the remaining checks only
    apply to production.
    """
    if settings.SIZE_LOCK_MIN_BYTES <= 0 or settings.SIZE_LOCK_MAX_BYTES <= 0:
        raise ValueError("SIZE_LOCK_MIN_BYTES and SIZE_LOCK_MAX_BYTES must be positive")
    if settings.SIZE_LOCK_MIN_BYTES > settings.SIZE_LOCK_MAX_BYTES:
        raise ValueError(
            "SIZE_LOCK_MIN_BYTES must not exceed SIZE_LOCK_MAX_BYTES "
            f"({settings.SIZE_LOCK_MIN_BYTES} > {settings.SIZE_LOCK_MAX_BYTES})"
        )

    if settings.APP_MODE == AppMode.PROD:
        if settings.DEBUG:
            error_msg = (
                "CRITICAL: DEBUG=True in production! "
                "Debug mode exposes prompts and internal details in logs. "
                "Set DEBUG=False or remove the DEBUG environment variable."
            )
            logger.critical(error_msg)
            raise ValueError(error_msg)

        if not settings.GEMINI_API_KEY:
            logger.warning(
                "GEMINI_API_KEY is not set in production. "
                "Image generation requests will be rejected."
            )

    return settings


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Settings are validated on first access.
    """
    settings = Settings()
    return _validate_settings(settings)

"""
Catalog image generation pipeline.

Checks which reference images the request needs, builds the prompt, calls
Gemini and size-locks the returned image into the configured byte range.
"""

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Optional

from config import Settings, get_settings
from schemas.generate import (
    CatalogAttributes,
    GenerateImageResponse,
    GenerationDebugInfo,
    GenerationMode,
)
from services.gemini_generator import GeminiImageGenerator
from services.image_validation import ReferenceImage
from services.prompt_builder import (
    BACK_VIEW_KEYWORDS,
    CatalogPrompt,
    adjusted_defaults,
    build_catalog_prompt,
    pose_text,
)
from services.size_lock import (
    ConvergenceError,
    EncodeResult,
    SizeLockConfig,
    TargetRange,
    reencode,
)

logger = logging.getLogger(__name__)


class ReferenceImageError(ValueError):
    """The request does not carry the reference images its mode or pose needs."""


def check_reference_requirements(
    mode: GenerationMode,
    attributes: CatalogAttributes,
    *,
    has_primary: bool,
    has_secondary: bool,
) -> None:
    if mode == GenerationMode.MODEL_REFERENCE_BASED and not has_secondary:
        raise ReferenceImageError("Model reference image is required for this mode.")
    if not has_primary:
        raise ReferenceImageError("Reference image is required.")

    pose = pose_text(attributes).lower()
    if any(keyword in pose for keyword in BACK_VIEW_KEYWORDS) and not has_secondary:
        raise ReferenceImageError(
            "Back pose requires SECOND reference image of same saree."
        )


def size_lock_target(settings: Settings) -> TargetRange:
    return TargetRange(
        min_bytes=settings.SIZE_LOCK_MIN_BYTES,
        max_bytes=settings.SIZE_LOCK_MAX_BYTES,
    )


@dataclass
class CatalogGenerationResult:
    image: EncodeResult
    prompt: CatalogPrompt
    original_size_bytes: int
    mode: GenerationMode
    strict_mode: bool
    has_secondary_image: bool

    def debug_info(self) -> GenerationDebugInfo:
        flags = self.prompt.flags
        return GenerationDebugInfo(
            original_size_kb=round(self.original_size_bytes / 1024),
            final_size_mb=self.image.size_mb,
            final_width=self.image.width,
            final_quality=self.image.quality,
            is_pallu_spread=flags.pallu_spread,
            is_blouse_zoom=flags.blouse_zoom,
            has_secondary_image=self.has_secondary_image,
            generation_mode=self.mode,
            strict_mode=self.strict_mode,
            is_european_model=flags.european_model,
            is_african_model=flags.african_model,
            is_non_indian_model=flags.non_indian_model,
            model_type=self.prompt.phrases.model_type,
        )

    def to_response(self) -> GenerateImageResponse:
        return GenerateImageResponse(
            image_base64=base64.b64encode(self.image.data).decode("ascii"),
            mime_type="image/jpeg",
            provider="gemini",
            debug_info=self.debug_info(),
        )


def log_generation_request(
    prompt: CatalogPrompt,
    primary: ReferenceImage,
    secondary: Optional[ReferenceImage],
    mode: GenerationMode,
    strict_mode: bool,
    *,
    full_prompt: bool = False,
) -> None:
    flags = prompt.flags
    logger.info(
        "Catalog request: mode=%s strict=%s primary=%s (%.1fKB) secondary=%s",
        mode.value,
        strict_mode,
        primary.mime_type,
        primary.size_kb,
        f"{secondary.mime_type} ({secondary.size_kb:.1f}KB)" if secondary else "none",
    )
    logger.info(
        "Pose detection: pose=%r back=%s blouse_zoom=%s zoom=%s mirror=%s pallu_spread=%s",
        prompt.phrases.pose,
        flags.back_view,
        flags.blouse_zoom,
        flags.zoom,
        flags.mirror,
        flags.pallu_spread,
    )
    logger.info(
        "Kitchen detection: coffee=%s laptop=%s cooking=%s",
        flags.kitchen_coffee,
        flags.kitchen_laptop,
        flags.kitchen_cooking,
    )
    logger.info(
        "Model type: %s (origin=%s)",
        prompt.phrases.model_type,
        flags.model_origin or "Indian",
    )
    if flags.non_indian_model:
        defaults = adjusted_defaults(flags)
        logger.info(
            "Non-Indian defaults: hair=%r accessories=%r",
            defaults["hair"],
            defaults["accessories"],
        )
    logger.info(
        "Prompt structure: %d sections, %d chars; first: %s",
        len(prompt.parts),
        len(prompt.text),
        " | ".join(prompt.section_titles()),
    )
    logger.info("Changed fields: %s", ", ".join(prompt.changed_fields) or "none")
    if full_prompt:
        logger.info("Full prompt:\n%s", prompt.text)


async def run_catalog_generation(
    primary: ReferenceImage,
    secondary: Optional[ReferenceImage],
    attributes: CatalogAttributes,
    mode: GenerationMode = GenerationMode.POSE_BASED,
    *,
    settings: Optional[Settings] = None,
    generator: Optional[GeminiImageGenerator] = None,
) -> CatalogGenerationResult:
    """
    Generate one size-locked catalog JPEG.

    Raises ImageGenerationError for Gemini failures and the SizeLockError
    family when the returned image cannot be decoded or locked.
    """
    settings = settings or get_settings()
    strict_mode = settings.HARD_STRICT_MODE
    has_secondary = secondary is not None

    prompt = build_catalog_prompt(
        attributes,
        mode=mode,
        has_secondary_image=has_secondary,
        strict_mode=strict_mode,
    )
    log_generation_request(
        prompt,
        primary,
        secondary,
        mode,
        strict_mode,
        full_prompt=settings.DEBUG_FULL_PROMPT,
    )

    references = [primary] + ([secondary] if secondary else [])
    generator = generator or GeminiImageGenerator.get_instance()
    generated = await generator.generate_catalog_image(prompt.text, references)

    target = size_lock_target(settings)
    config = SizeLockConfig.from_settings(settings)
    try:
        image = await asyncio.to_thread(reencode, generated.data, target, config)
    except ConvergenceError as e:
        last = e.last_result
        logger.error(
            "Size lock failed after %d attempt(s): last=%s",
            e.attempts,
            f"{last.size_mb}MB width={last.width}px quality={last.quality}" if last else "none",
        )
        raise

    logger.info(
        "Catalog image ready: %.1fKB -> %.2fMB (width=%dpx quality=%d)",
        len(generated.data) / 1024,
        image.size_mb,
        image.width,
        image.quality,
    )
    return CatalogGenerationResult(
        image=image,
        prompt=prompt,
        original_size_bytes=len(generated.data),
        mode=mode,
        strict_mode=strict_mode,
        has_secondary_image=has_secondary,
    )

import logging
from typing import List, Optional

import config
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from schemas.generate import CatalogAttributes, GenerateImageResponse, GenerationMode
from services.catalog_generation import (
    ReferenceImageError,
    check_reference_requirements,
    run_catalog_generation,
)
from services.error_sanitizer import sanitize_public_error_message
from services.gemini_generator import GeminiImageGenerator, ImageGenerationError
from services.image_validation import ReferenceImage, validate_reference_image
from services.size_lock import ConvergenceError, ImageDecodeError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])

GENERIC_FAILURE_DETAIL = "Failed to generate image."


def catalog_attributes_form(
    model_type: Optional[str] = Form(None, alias="modelType"),
    model_type_note: Optional[str] = Form(None, alias="modelTypeNote"),
    model_expression: Optional[List[str]] = Form(None, alias="modelExpression"),
    model_expression_note: Optional[str] = Form(None, alias="modelExpressionNote"),
    hair: Optional[str] = Form(None),
    hair_note: Optional[str] = Form(None, alias="hairNote"),
    pose: Optional[str] = Form(None),
    pose_note: Optional[str] = Form(None, alias="poseNote"),
    location: Optional[str] = Form(None),
    location_note: Optional[str] = Form(None, alias="locationNote"),
    accessories: Optional[str] = Form(None),
    accessories_note: Optional[str] = Form(None, alias="accessoriesNote"),
    other_option: Optional[str] = Form(None, alias="otherOption"),
    other_option_note: Optional[str] = Form(None, alias="otherOptionNote"),
    other_details: Optional[str] = Form(None, alias="otherDetails"),
) -> CatalogAttributes:
    """Collect the studio form fields into validated attributes."""
    try:
        return CatalogAttributes(
            model_type=model_type,
            model_type_note=model_type_note,
            model_expression=model_expression,
            model_expression_note=model_expression_note,
            hair=hair,
            hair_note=hair_note,
            pose=pose,
            pose_note=pose_note,
            location=location,
            location_note=location_note,
            accessories=accessories,
            accessories_note=accessories_note,
            other_option=other_option,
            other_option_note=other_option_note,
            other_details=other_details,
        )
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or "form"
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid value for {field}: {first.get('msg', 'invalid input')}",
        )


def _ensure_ai_generation_configured() -> None:
    if not GeminiImageGenerator.is_available():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI generation is not configured. Please set GEMINI_API_KEY in .env",
        )


async def _read_reference_upload(upload: UploadFile, label: str) -> ReferenceImage:
    try:
        content = await upload.read()
    except Exception:
        logger.exception("Failed to read uploaded %s", label.lower())
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to read uploaded file",
        )

    return validate_reference_image(
        content,
        upload.content_type,
        filename=upload.filename or "",
        label=label,
        max_size_bytes=config.get_settings().MAX_UPLOAD_SIZE_BYTES,
    )


@router.post("/generate-image", response_model=GenerateImageResponse, response_model_by_alias=True)
async def generate_image(
    reference_image: Optional[UploadFile] = File(
        None, alias="referenceImage", description="Front saree reference (PNG, JPG, WEBP)"
    ),
    reference_image_2: Optional[UploadFile] = File(
        None,
        alias="referenceImage2",
        description="Back view of the same saree, or the model reference photo",
    ),
    generation_mode: Optional[str] = Form(None, alias="generationMode"),
    attributes: CatalogAttributes = Depends(catalog_attributes_form),
):
    """
    Generate one catalog photo of the saree worn by a model.

    The returned JPEG is size-locked into the configured byte range
    (1-3 MB by default).
    """
    mode = GenerationMode.from_form(generation_mode)

    try:
        check_reference_requirements(
            mode,
            attributes,
            has_primary=reference_image is not None,
            has_secondary=reference_image_2 is not None,
        )
    except ReferenceImageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    _ensure_ai_generation_configured()

    primary = await _read_reference_upload(reference_image, "Reference image")
    secondary = None
    if reference_image_2 is not None:
        secondary = await _read_reference_upload(reference_image_2, "Second reference image")

    try:
        result = await run_catalog_generation(primary, secondary, attributes, mode)
    except ImageGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=sanitize_public_error_message(str(e), fallback=GENERIC_FAILURE_DETAIL)
            or GENERIC_FAILURE_DETAIL,
        )
    except ImageDecodeError:
        logger.error("Gemini returned bytes that could not be decoded as an image")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Generated image could not be decoded.",
        )
    except ConvergenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate image within {e.target.describe_mb()} size constraints",
        )
    except Exception:
        logger.exception("Catalog image generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_FAILURE_DETAIL,
        )

    return result.to_response()

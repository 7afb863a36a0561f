from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import normalize_optional_text, normalize_text_list


ATTRIBUTE_TEXT_MAX_LENGTH = 500


class GenerationMode(str, Enum):
    POSE_BASED = "POSE_BASED"
    MODEL_REFERENCE_BASED = "MODEL_REFERENCE_BASED"

    @classmethod
    def from_form(cls, value: Optional[str]) -> "GenerationMode":
        """Anything other than MODEL_REFERENCE_BASED is treated as POSE_BASED."""
        if value is not None and value.strip() == cls.MODEL_REFERENCE_BASED.value:
            return cls.MODEL_REFERENCE_BASED
        return cls.POSE_BASED


class CatalogAttributes(BaseModel):
    """Form-selected attributes for a catalog photo (wire names are camelCase)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_type: Optional[str] = Field(None, alias="modelType", max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    model_type_note: Optional[str] = Field(None, alias="modelTypeNote", max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    model_expression: Optional[List[str]] = Field(None, alias="modelExpression")
    model_expression_note: Optional[str] = Field(
        None, alias="modelExpressionNote", max_length=ATTRIBUTE_TEXT_MAX_LENGTH
    )
    hair: Optional[str] = Field(None, max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    hair_note: Optional[str] = Field(None, alias="hairNote", max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    pose: Optional[str] = Field(None, max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    pose_note: Optional[str] = Field(None, alias="poseNote", max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    location: Optional[str] = Field(None, max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    location_note: Optional[str] = Field(None, alias="locationNote", max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    accessories: Optional[str] = Field(None, max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    accessories_note: Optional[str] = Field(
        None, alias="accessoriesNote", max_length=ATTRIBUTE_TEXT_MAX_LENGTH
    )
    other_option: Optional[str] = Field(None, alias="otherOption", max_length=ATTRIBUTE_TEXT_MAX_LENGTH)
    other_option_note: Optional[str] = Field(
        None, alias="otherOptionNote", max_length=ATTRIBUTE_TEXT_MAX_LENGTH
    )
    other_details: Optional[str] = Field(None, alias="otherDetails", max_length=2000)

    @field_validator(
        "model_type",
        "model_type_note",
        "model_expression_note",
        "hair",
        "hair_note",
        "pose",
        "pose_note",
        "location",
        "location_note",
        "accessories",
        "accessories_note",
        "other_option",
        "other_option_note",
        "other_details",
        mode="before",
    )
    @classmethod
    def normalize_text(cls, value):
        return normalize_optional_text(value)

    @field_validator("model_expression", mode="before")
    @classmethod
    def normalize_expression(cls, value):
        return normalize_text_list(value)

    def changed_fields(self) -> list[str]:
        """Wire names of the non-note attributes the user actually set."""
        changed = []
        for name, field in type(self).model_fields.items():
            if name.endswith("_note"):
                continue
            if getattr(self, name) is not None:
                changed.append(field.alias or name)
        return changed


class GenerationDebugInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    original_size_kb: int = Field(alias="originalSizeKB")
    final_size_mb: float = Field(alias="finalSizeMB")
    final_width: int = Field(alias="finalWidth")
    final_quality: int = Field(alias="finalQuality", ge=0, le=100)
    is_pallu_spread: bool = Field(alias="isPalluSpread")
    is_blouse_zoom: bool = Field(alias="isBlouseZoom")
    has_secondary_image: bool = Field(alias="hasSecondaryImage")
    generation_mode: GenerationMode = Field(alias="generationMode")
    strict_mode: bool = Field(alias="strictMode")
    is_european_model: bool = Field(alias="isEuropeanModel")
    is_african_model: bool = Field(alias="isAfricanModel")
    is_non_indian_model: bool = Field(alias="isNonIndianModel")
    model_type: str = Field(alias="modelType")


class GenerateImageResponse(BaseModel):
    """Size-locked JPEG returned to the studio frontend"""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    image_base64: str = Field(alias="imageBase64")
    mime_type: str = Field("image/jpeg", alias="mimeType")
    provider: str = "gemini"
    debug_info: GenerationDebugInfo = Field(alias="debugInfo")

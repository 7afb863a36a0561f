from .generate import (
    CatalogAttributes,
    GenerateImageResponse,
    GenerationDebugInfo,
    GenerationMode,
)

__all__ = [
    "CatalogAttributes",
    "GenerateImageResponse",
    "GenerationDebugInfo",
    "GenerationMode",
]

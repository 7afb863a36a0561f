import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from fastapi import HTTPException, status
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
MAX_UPLOAD_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
MIN_REFERENCE_SIDE = 64
MAX_REFERENCE_SIDE = 8192
MAX_REFERENCE_PIXELS = 40_000_000  # 40 MP, high-end phone photos

IMAGE_MIME_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "image/x-jpeg": "image/jpeg",
    "image/jfif": "image/jpeg",
    "image/x-png": "image/png",
    "image/apng": "image/png",
    "image/x-webp": "image/webp",
}


@dataclass(frozen=True)
class ReferenceImage:
    """A validated reference upload, ready to be sent to the image model."""

    data: bytes
    mime_type: str
    width: int
    height: int
    filename: str = ""

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024


def normalize_image_mime_type(claimed_mime_type: Optional[str]) -> str:
    """Lower-case a Content-Type, drop parameters and map legacy aliases."""
    mime_type = (claimed_mime_type or "").strip().strip("\"'")
    mime_type = mime_type.split(",", 1)[0].split(";", 1)[0].strip().lower()
    return IMAGE_MIME_ALIASES.get(mime_type, mime_type)


def sniff_image_mime_type(content: bytes) -> Optional[str]:
    """
    Detect PNG, JPEG or WEBP by magic bytes.

    Returns the normalized MIME type or None when the signature is unknown.
    """
    if not content:
        return None
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if len(content) >= 12 and content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def validate_reference_image(
    content: bytes,
    claimed_mime_type: Optional[str] = None,
    *,
    filename: str = "",
    label: str = "Reference image",
    max_size_bytes: int = MAX_UPLOAD_SIZE_BYTES,
) -> ReferenceImage:
    """
    Validate an uploaded reference photo and return it with canonical metadata.

    The actual bytes decide the MIME type; a wrong or generic client
    Content-Type (e.g. application/octet-stream) is tolerated as long as the
    payload is a real PNG, JPEG or WEBP image.
    """
    if not content:
        raise _bad_request(f"{label} is empty. Please select a valid image file.")

    if len(content) > max_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"{label} is too large. Max size is {max_size_bytes // (1024 * 1024)}MB",
        )

    sniffed_mime = sniff_image_mime_type(content)
    if sniffed_mime not in ALLOWED_IMAGE_MIME_TYPES:
        raise _bad_request(f"{label} has an invalid file type. Allowed: PNG, JPG, WEBP")

    claimed = normalize_image_mime_type(claimed_mime_type)
    if claimed in ALLOWED_IMAGE_MIME_TYPES and claimed != sniffed_mime:
        logger.warning(
            "Claimed MIME type mismatch for %s (claimed=%s, sniffed=%s); using sniffed MIME",
            label,
            claimed,
            sniffed_mime,
        )

    try:
        with Image.open(BytesIO(content)) as image:
            image.load()
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError):
        raise _bad_request(f"{label} is corrupted or unsupported. Please upload PNG, JPG, or WEBP.")

    if width < MIN_REFERENCE_SIDE or height < MIN_REFERENCE_SIDE:
        raise _bad_request(
            f"{label} is too small ({width}x{height}). "
            f"Minimum supported size is {MIN_REFERENCE_SIDE}x{MIN_REFERENCE_SIDE}."
        )
    if width > MAX_REFERENCE_SIDE or height > MAX_REFERENCE_SIDE:
        raise _bad_request(
            f"{label} is too large ({width}x{height}). "
            f"Maximum supported size is {MAX_REFERENCE_SIDE}x{MAX_REFERENCE_SIDE}."
        )
    if width * height > MAX_REFERENCE_PIXELS:
        raise _bad_request(
            f"{label} has too many pixels ({width * height}). "
            f"Maximum supported pixel count is {MAX_REFERENCE_PIXELS}."
        )

    return ReferenceImage(
        data=content,
        mime_type=sniffed_mime,
        width=width,
        height=height,
        filename=filename,
    )

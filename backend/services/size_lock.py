"""
Size-locked JPEG re-encoding.

Searches over (width, quality) pairs until the encoded JPEG lands inside a
target byte range. The search is a bounded directional walk:

- too small: grow width and nudge quality up (capped at the ceiling)
- too big: drop quality first, then width once quality reaches the
  shrink threshold

Both parameters are clamped to hard floors after every adjustment. If the
budget runs out the caller gets a ConvergenceError, never a best-effort image.
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Callable, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

# encode(image, width, quality) -> encoded bytes
Encoder = Callable[[Any, int, int], bytes]


class SizeLockError(Exception):
    """Base error for size-locked re-encoding."""


class ImageDecodeError(SizeLockError):
    """Source bytes could not be decoded as a raster image."""

    def __init__(self, message: str = "invalid source image"):
        super().__init__(message)


@dataclass(frozen=True)
class TargetRange:
    """Inclusive byte-size window for the encoded output."""

    min_bytes: int
    max_bytes: int

    def __post_init__(self):
        if self.min_bytes <= 0 or self.max_bytes <= 0:
            raise ValueError("Target range bounds must be positive")
        if self.min_bytes > self.max_bytes:
            raise ValueError(
                f"Target range is inverted ({self.min_bytes} > {self.max_bytes})"
            )

    def contains(self, size_bytes: int) -> bool:
        return self.min_bytes <= size_bytes <= self.max_bytes

    def describe_mb(self) -> str:
        return f"{self.min_bytes / MIB:g}–{self.max_bytes / MIB:g} MB"


@dataclass(frozen=True)
class EncodeAttempt:
    width: int
    quality: int


@dataclass(frozen=True)
class EncodeResult:
    data: bytes
    width: int
    quality: int

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def size_mb(self) -> float:
        return round(self.size_bytes / MIB, 2)


class ConvergenceError(SizeLockError):
    """The search exhausted its budget without reaching the target range."""

    def __init__(
        self,
        target: TargetRange,
        attempts: int,
        last_result: Optional[EncodeResult] = None,
    ):
        self.target = target
        self.attempts = attempts
        self.last_result = last_result
        if last_result is None:
            detail = "no encode attempted"
        else:
            detail = (
                f"last size={last_result.size_bytes} bytes "
                f"width={last_result.width}px quality={last_result.quality}"
            )
        super().__init__(
            f"size lock failed after {attempts} attempt(s) "
            f"(target {target.min_bytes}-{target.max_bytes} bytes; {detail})"
        )


@dataclass(frozen=True)
class SizeLockConfig:
    """Tuning constants for the size-lock search."""

    start_width: int = 2800
    start_quality: int = 94
    max_iterations: int = 25
    width_step: int = 250
    quality_step_up: int = 2
    quality_step_down: int = 4
    # Quality is reduced first while it is above this value; width after.
    quality_shrink_threshold: int = 85
    quality_floor: int = 80
    quality_ceiling: int = 98
    width_floor: int = 2000

    def __post_init__(self):
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be >= 0")
        if self.width_step <= 0:
            raise ValueError("width_step must be positive")
        if self.quality_step_up <= 0 or self.quality_step_down <= 0:
            raise ValueError("quality steps must be positive")
        if not 0 <= self.quality_floor <= self.quality_ceiling <= 100:
            raise ValueError(
                "quality bounds must satisfy 0 <= floor <= ceiling <= 100"
            )
        if not self.quality_floor <= self.start_quality <= self.quality_ceiling:
            raise ValueError("start_quality must lie between floor and ceiling")
        if self.width_floor <= 0:
            raise ValueError("width_floor must be positive")
        if self.start_width < self.width_floor:
            raise ValueError("start_width must be >= width_floor")

    @classmethod
    def from_settings(cls, settings) -> "SizeLockConfig":
        return cls(
            start_width=settings.SIZE_LOCK_START_WIDTH,
            start_quality=settings.SIZE_LOCK_START_QUALITY,
            max_iterations=settings.SIZE_LOCK_MAX_ITERATIONS,
            width_step=settings.SIZE_LOCK_WIDTH_STEP,
            quality_step_up=settings.SIZE_LOCK_QUALITY_STEP_UP,
            quality_step_down=settings.SIZE_LOCK_QUALITY_STEP_DOWN,
            quality_shrink_threshold=settings.SIZE_LOCK_QUALITY_SHRINK_THRESHOLD,
            quality_floor=settings.SIZE_LOCK_QUALITY_FLOOR,
            quality_ceiling=settings.SIZE_LOCK_QUALITY_CEILING,
            width_floor=settings.SIZE_LOCK_WIDTH_FLOOR,
        )


def next_attempt(
    attempt: EncodeAttempt,
    size_bytes: int,
    target: TargetRange,
    config: SizeLockConfig,
) -> EncodeAttempt:
    """Adjust parameters after an out-of-range encode."""
    width, quality = attempt.width, attempt.quality

    if size_bytes < target.min_bytes:
        # Width has a near-linear effect on size, so grow it first.
        width += config.width_step
        quality = min(quality + config.quality_step_up, config.quality_ceiling)
    elif size_bytes > target.max_bytes:
        if quality > config.quality_shrink_threshold:
            quality -= config.quality_step_down
        else:
            width -= config.width_step

    quality = min(max(quality, config.quality_floor), config.quality_ceiling)
    width = max(width, config.width_floor)
    return EncodeAttempt(width=width, quality=quality)


def search_encoding(
    image: Any,
    target: TargetRange,
    encode: Encoder,
    config: Optional[SizeLockConfig] = None,
) -> EncodeResult:
    """
    Run the size-lock search against an arbitrary encoder.

    `image` is passed through to `encode` untouched, so tests can drive the
    search with a synthetic size model. Raises ConvergenceError when the
    budget is spent; with max_iterations=0 no encode is attempted.
    """
    config = config or SizeLockConfig()
    attempt = EncodeAttempt(width=config.start_width, quality=config.start_quality)
    result: Optional[EncodeResult] = None
    attempts = 0

    for _ in range(config.max_iterations):
        data = encode(image, attempt.width, attempt.quality)
        attempts += 1
        result = EncodeResult(data=data, width=attempt.width, quality=attempt.quality)
        logger.debug(
            "Size lock iteration %d: %.2fMB (width=%dpx quality=%d)",
            attempts,
            result.size_bytes / MIB,
            result.width,
            result.quality,
        )
        if target.contains(result.size_bytes):
            break
        attempt = next_attempt(attempt, result.size_bytes, target, config)

    if result is None or not target.contains(result.size_bytes):
        raise ConvergenceError(target, attempts, result)

    logger.info(
        "Size lock converged in %d attempt(s): %.2fMB (width=%dpx quality=%d)",
        attempts,
        result.size_bytes / MIB,
        result.width,
        result.quality,
    )
    return result


def decode_source_image(data: bytes) -> Image.Image:
    """Decode source bytes into an RGB image, flattening alpha onto white."""
    if not data:
        raise ImageDecodeError()
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
            if img.mode in {"RGBA", "LA", "PA"} or (
                img.mode == "P" and "transparency" in img.info
            ):
                rgba = img.convert("RGBA")
                rgb = Image.new("RGB", rgba.size, (255, 255, 255))
                rgb.paste(rgba, mask=rgba.getchannel("A"))
                return rgb
            return img.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError() from e


def encode_jpeg(image: Image.Image, width: int, quality: int) -> bytes:
    """Resize to `width` (aspect preserved, enlarging allowed) and encode 4:4:4 JPEG."""
    src_width, src_height = image.size
    height = max(1, int(round(src_height * width / float(src_width))))
    resized = image
    if (width, height) != image.size:
        resized = image.resize((width, height), Image.Resampling.LANCZOS)

    buffer = BytesIO()
    resized.save(
        buffer,
        format="JPEG",
        quality=quality,
        subsampling=0,
    )
    return buffer.getvalue()


def reencode(
    source: bytes,
    target: TargetRange,
    config: Optional[SizeLockConfig] = None,
    encode: Encoder = encode_jpeg,
) -> EncodeResult:
    """Decode `source` and size-lock it into `target` as a JPEG."""
    image = decode_source_image(source)
    return search_encoding(image, target, encode, config)

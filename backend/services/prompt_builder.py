"""
Catalog prompt assembly.

Turns the studio form attributes into attribute phrases, detects special
scenes from keywords in the free text, and stitches the prompt sections from
services.prompt_templates in a fixed order.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from schemas.generate import CatalogAttributes, GenerationMode
from services import prompt_templates as templates


DEFAULT_EXPRESSION = "natural expression, age 20–40"

DEFAULTS = {
    "model_type": "Indian woman, medium height, average build, realistic proportions",
    "model_expression": "natural relaxed expression, age 20–40",
    "hair": "classic Indian hairstyle, neat bun or braid",
    "pose": "full body front pose, standing naturally, weight balanced",
    "location": "modern living room interior, home environment",
    "accessories": "light traditional jewellery only",
    "other_option": (
        "match saree design, border, motifs, and colours exactly from primary reference image"
    ),
}

# Default styling for non-Indian models (reported in request logs)
NON_INDIAN_DEFAULT_OVERRIDES = {
    "European": {
        "hair": "elegant European hairstyle, styled naturally",
        "accessories": "minimal elegant jewelry, contemporary style",
    },
    "African": {
        "hair": "natural African hairstyle, beautifully styled",
        "accessories": "elegant jewelry that complements skin tone",
    },
}

BACK_VIEW_KEYWORDS = ("back", "rear")
ZOOM_KEYWORDS = ("zoom", "close up", "close-up", "head to knees", "closeup")
KITCHEN_LAPTOP_KEYWORDS = ("laptop", "working on laptop")
KITCHEN_COOKING_KEYWORDS = ("kitchen cooking", "chopping", "cutting vegetables")
KITCHEN_COFFEE_KEYWORDS = ("coffee", "tea", "holding cup", "kitchen coffee")
PALLU_SPREAD_KEYWORDS = (
    "pallu spread",
    "palldu spread",
    "pallu display",
    "showing pallu",
    "pallu visible",
    "dupatta spread",
    "holding dupatta",
)
LIVING_ROOM_KEYWORDS = ("living room", "home")
INDOOR_NO_CEILING_KEYWORDS = ("living room", "home", "office")


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def merge_choice(
    choice: Union[str, Sequence[str], None],
    note: Optional[str],
    fallback: str,
) -> str:
    """Combine a dropdown choice with its free-text note, or fall back."""
    if choice:
        values = [choice] if isinstance(choice, str) else list(choice)
        merged = ", ".join(values)
        return f"{merged}. Extra note: {note}" if note else merged
    if note:
        return note
    return fallback


def format_expression(selected: Optional[Sequence[str]], note: Optional[str]) -> str:
    parts = []
    if selected:
        values = [selected] if isinstance(selected, str) else list(selected)
        parts.append(", ".join(values))
    if note:
        parts.append(note)
    if not parts:
        return DEFAULT_EXPRESSION
    return " and ".join(parts)


@dataclass(frozen=True)
class AttributePhrases:
    """Prompt-ready text for every form attribute."""

    model_type: str
    model_expression: str
    hair: str
    pose: str
    location: str
    accessories: str
    other_option: str
    other_details: str = ""


def build_attribute_phrases(attributes: CatalogAttributes) -> AttributePhrases:
    return AttributePhrases(
        model_type=merge_choice(
            attributes.model_type, attributes.model_type_note, DEFAULTS["model_type"]
        ),
        model_expression=format_expression(
            attributes.model_expression, attributes.model_expression_note
        ),
        hair=merge_choice(attributes.hair, attributes.hair_note, DEFAULTS["hair"]),
        pose=merge_choice(attributes.pose, attributes.pose_note, DEFAULTS["pose"]),
        location=merge_choice(
            attributes.location, attributes.location_note, DEFAULTS["location"]
        ),
        accessories=merge_choice(
            attributes.accessories, attributes.accessories_note, DEFAULTS["accessories"]
        ),
        other_option=merge_choice(
            attributes.other_option,
            attributes.other_option_note,
            DEFAULTS["other_option"],
        ),
        other_details=attributes.other_details or "",
    )


@dataclass(frozen=True)
class SceneFlags:
    """Keyword-detected scene traits that switch prompt sections on."""

    back_view: bool = False
    blouse_zoom: bool = False
    zoom: bool = False
    mirror: bool = False
    kitchen_laptop: bool = False
    kitchen_cooking: bool = False
    kitchen_coffee: bool = False
    pallu_spread: bool = False
    european_model: bool = False
    african_model: bool = False
    living_room: bool = False
    indoor_no_ceiling: bool = False

    @property
    def non_indian_model(self) -> bool:
        return self.european_model or self.african_model

    @property
    def model_origin(self) -> Optional[str]:
        if self.european_model:
            return "European"
        if self.african_model:
            return "African"
        return None


def pose_text(attributes: CatalogAttributes) -> str:
    return f"{attributes.pose or ''} {attributes.pose_note or ''}"


def detect_scene(attributes: CatalogAttributes, phrases: AttributePhrases) -> SceneFlags:
    pose = pose_text(attributes).lower()
    model_type = phrases.model_type.lower()
    location = phrases.location.lower()
    return SceneFlags(
        back_view=_contains_any(pose, BACK_VIEW_KEYWORDS),
        blouse_zoom="blouse" in pose and "zoom" in pose,
        zoom=_contains_any(pose, ZOOM_KEYWORDS),
        mirror="mirror" in pose,
        kitchen_laptop=_contains_any(pose, KITCHEN_LAPTOP_KEYWORDS),
        kitchen_cooking=_contains_any(pose, KITCHEN_COOKING_KEYWORDS),
        kitchen_coffee=_contains_any(pose, KITCHEN_COFFEE_KEYWORDS),
        pallu_spread=_contains_any(pose, PALLU_SPREAD_KEYWORDS),
        european_model="european" in model_type,
        african_model="african" in model_type,
        living_room=_contains_any(location, LIVING_ROOM_KEYWORDS),
        indoor_no_ceiling=_contains_any(location, INDOOR_NO_CEILING_KEYWORDS),
    )


def adjusted_defaults(flags: SceneFlags) -> dict[str, str]:
    defaults = dict(DEFAULTS)
    if flags.model_origin:
        defaults.update(NON_INDIAN_DEFAULT_OVERRIDES[flags.model_origin])
    return defaults


@dataclass
class CatalogPrompt:
    parts: list[str]
    phrases: AttributePhrases
    flags: SceneFlags
    changed_fields: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.parts)

    def section_titles(self, limit: int = 5) -> list[str]:
        titles = []
        for part in self.parts[:limit]:
            first_line = next(
                (line.strip() for line in part.splitlines() if line.strip()), ""
            )
            titles.append(first_line)
        return titles


def _hard_rules(changed_fields: list[str], strict_mode: bool) -> str:
    rules = list(templates.HARD_RULES)
    rules.append(
        templates.HARD_RULE_CHANGED_FIELDS.format(
            changed_fields=", ".join(changed_fields) or templates.NO_CHANGED_FIELDS
        )
    )
    if strict_mode:
        rules.extend(templates.STRICT_MODE_HARD_RULES)
    body = "\n- ".join(rules)
    return f"[ENHANCED_HARD_RULES]\n- {body}\n[/ENHANCED_HARD_RULES]"


def _non_indian_section(phrases: AttributePhrases, origin: str) -> str:
    origin_block = (
        templates.EUROPEAN_MODEL_BLOCK
        if origin == "European"
        else templates.AFRICAN_MODEL_BLOCK
    )
    return templates.NON_INDIAN_MODEL.format(
        model_type=phrases.model_type,
        origin_upper=origin.upper(),
        origin_block=origin_block,
    )


def build_catalog_prompt(
    attributes: CatalogAttributes,
    *,
    mode: GenerationMode = GenerationMode.POSE_BASED,
    has_secondary_image: bool = False,
    strict_mode: bool = False,
) -> CatalogPrompt:
    """Assemble the full instruction prompt for one catalog image."""
    phrases = build_attribute_phrases(attributes)
    flags = detect_scene(attributes, phrases)
    changed_fields = attributes.changed_fields()
    origin = flags.model_origin
    parts: list[str] = []

    if flags.pallu_spread:
        parts.append(templates.PALLU_SPREAD_OVERRIDE)

    parts.append(templates.DESIGN_PRESERVATION)
    if strict_mode:
        parts.append(templates.STRICT_MODE_BANNER)
    parts.append(templates.DESIGN_CONSISTENCY)
    parts.append(templates.POSE_LOCK.format(pose=phrases.pose))

    photographer = templates.PHOTOGRAPHER
    if origin:
        photographer += templates.PHOTOGRAPHER_NON_INDIAN.format(origin=origin)
    parts.append(photographer)

    parts.append(_hard_rules(changed_fields, strict_mode))
    parts.append(templates.REFERENCE_LOCK)
    parts.append(templates.NEGATIVE_PROMPT)
    parts.append(templates.PRODUCT_CLONE)
    parts.append(templates.PRIORITY_HIERARCHY)
    parts.append(
        templates.USER_FORM_COMPLIANCE.format(
            model_type=phrases.model_type,
            model_expression=phrases.model_expression,
            hair=phrases.hair,
            pose=phrases.pose,
            location=phrases.location,
            accessories=phrases.accessories,
            other_option=phrases.other_option,
            other_details=phrases.other_details or "None specified",
        )
    )
    if origin:
        parts.append(_non_indian_section(phrases, origin))

    parts.append(templates.CAMERA_AND_LENS)

    if flags.blouse_zoom:
        parts.append(templates.BLOUSE_ZOOM_FRAMING)
        parts.append(templates.SAREE_DRAPE_OVERRIDE)
    if flags.pallu_spread:
        parts.append(templates.PALLU_SPREAD_LOCK)
    if flags.mirror:
        parts.append(templates.MIRROR_ADJUSTMENT_LOCK)
    if flags.kitchen_coffee:
        parts.append(templates.KITCHEN_COFFEE_FRAMING)
    if flags.kitchen_laptop:
        parts.append(templates.KITCHEN_LAPTOP_FRAMING)
    if flags.kitchen_cooking:
        parts.append(templates.KITCHEN_COOKING_FRAMING)

    parts.append(templates.ANTI_WIDE_SHOT)
    parts.append(templates.POSE_LOCK_AND_CAMERA)
    parts.append(templates.SCENE_INTEGRATION.format(location=phrases.location))
    parts.append(templates.BACKGROUND_STYLE)
    parts.append(templates.ACCESSORIES.format(accessories=phrases.accessories))
    parts.append(
        templates.DESIGN_CHANGE.format(
            other_option=phrases.other_option,
            other_details=phrases.other_details,
        )
    )

    if has_secondary_image and mode != GenerationMode.MODEL_REFERENCE_BASED:
        parts.append(templates.SECONDARY_IMAGE_USAGE)
    else:
        parts.append(templates.SINGLE_IMAGE_PRESERVATION)

    parts.append(
        templates.QUALITY_AND_REALISM.format(
            non_indian_notes=templates.QUALITY_NON_INDIAN_NOTES if origin else ""
        )
    )
    if origin:
        parts.append(templates.GENERATION_RELIABILITY.format(origin=origin))

    parts.append(
        templates.FINAL_VALIDATION_CHECKLIST.format(
            non_indian_note=templates.FINAL_VALIDATION_NON_INDIAN_NOTE if origin else ""
        )
    )

    if mode == GenerationMode.MODEL_REFERENCE_BASED:
        parts.append(templates.MODEL_REFERENCE_LOCK)
    if flags.indoor_no_ceiling:
        parts.append(templates.NO_CEILING_ENFORCEMENT)

    return CatalogPrompt(
        parts=parts,
        phrases=phrases,
        flags=flags,
        changed_fields=changed_fields,
    )

"""
Prompt sections for saree catalog generation.

Each constant is one bracketed section of the instruction prompt. Sections
with `{placeholders}` are filled by services.prompt_builder; everything else
is sent verbatim.
"""

PALLU_SPREAD_OVERRIDE = """
🚨 EMERGENCY OVERRIDE: PALLU SPREAD POSE DETECTED 🚨

This pose exists to showcase the PALLU (decorative end) of the user's saree.
The pallu is the hero element of the image.

ABSOLUTE REQUIREMENTS:
1. The pallu design is the single most important element in this image
2. The pallu MUST match the reference image design EXACTLY
3. Copy pallu patterns from the reference only, never invent new ones
4. Do NOT simplify, clean up or "improve" the pallu

COMMON FAILURES TO AVOID:
❌ Pallu patterns that are not in the reference
❌ A prettier or cleaner pallu than the reference
❌ Generic pallu designs
❌ Changed pallu colours or motifs
❌ Simplified pallu embroidery

✅ SUCCESS: pallu design, colours and motifs identical to the reference, border continuing consistently.
"""

DESIGN_PRESERVATION = """
[ULTRA_STRICT_DESIGN_PRESERVATION — HIGHEST PRIORITY]

⚠️ This is a PRODUCT CATALOG task, NOT creative design.

ABSOLUTE REQUIREMENTS:
1. The saree design in the reference image is FINAL and UNCHANGEABLE
2. Every pattern, motif, border and colour MUST be identical to the reference
3. You are COPYING the design, not interpreting it
4. Any change to any design element makes the result INVALID

PALLU HANDLING:
- Partial pallu in reference: extrapolate consistently from the visible elements
- No pallu in reference: derive it from the border and main pattern
- A simple saree gets a simple pallu; never use generic pallu patterns

FORBIDDEN:
❌ Changing pattern density, spacing, motif shapes or sizes
❌ Modifying border width or design
❌ Adjusting colour saturation or hue
❌ Adding, removing, simplifying or "modernizing" design elements

REQUIRED:
✅ Exact colour match, pattern complexity, border design and fabric texture
✅ Pallu consistent with the overall saree aesthetic

[/ULTRA_STRICT_DESIGN_PRESERVATION]
"""

STRICT_MODE_BANNER = "!!! STRICT MODE ENABLED. FOLLOW ALL RULES EXACTLY."

DESIGN_CONSISTENCY = """
[DESIGN_CONSISTENCY_ENFORCEMENT — CRITICAL]

PRIMARY RULE: The saree design is READ-ONLY. You are performing EXACT REPLICATION.

Study the reference image: pattern, colours, motifs, border design and width, fabric texture and sheen.
Pattern density, motif shapes, colour palette, border design and fabric texture must all be EXACTLY as shown.

QUALITY CHECK:
- Does the generated saree look identical to the reference? If NO → INVALID
- Are all patterns preserved exactly? If NO → INVALID
- Are colours matching perfectly? If NO → INVALID

[/DESIGN_CONSISTENCY_ENFORCEMENT]
"""

POSE_LOCK = """
[POSE_LOCK — CRITICAL]
- Use the EXACT pose described below
- Do NOT invent a new pose
- Do NOT alter body angle, limb position, or stance

POSE TO FOLLOW EXACTLY:
{pose}

If the pose does not match, the image is INVALID.
[/POSE_LOCK]
"""

PHOTOGRAPHER = (
    "You are a world-class commercial lifestyle photographer specializing in EXACT "
    "PRODUCT REPLICATION. Create ONE photorealistic photograph that preserves the "
    "reference saree design with 100% accuracy. The final image must look like a real "
    "indoor photograph, never a studio cutout."
)

PHOTOGRAPHER_NON_INDIAN = (
    "\n\nYou are photographing a {origin} model wearing an Indian saree. This is a "
    "normal and beautiful combination. Generate the image with the SAME RELIABILITY and "
    "QUALITY as for any other model. The model should look natural, confident and "
    "elegant in the saree."
)

HARD_RULES = [
    "FIRST image is the MASTER REFERENCE. Copy design, border, and colours with pixel-perfect accuracy.",
    "ZERO creative license - this is EXACT REPLICATION only.",
    "Every pattern, motif, and design element must be IDENTICAL to the reference.",
    "Colour matching must be EXACT - no variations or improvements.",
    "Pattern density and spacing must match the reference EXACTLY.",
    "Border width, design, and placement must be IDENTICAL.",
    "SECOND image (if provided) is the BACK view of the SAME product.",
    "Do NOT add text, logos, watermarks, or extra people.",
    "Do NOT distort anatomy or fabric geometry.",
]

HARD_RULE_CHANGED_FIELDS = "User-allowed changes: {changed_fields}."

NO_CHANGED_FIELDS = "NONE - preserve everything exactly"

STRICT_MODE_HARD_RULES = [
    "STRICT MODE: ABSOLUTE ZERO TOLERANCE for any design changes.",
    "STRICT MODE: If ANY design element differs from reference, the result is FAILED.",
]

REFERENCE_LOCK = """
[REFERENCE_LOCK_MODE — ABSOLUTE MAXIMUM ENFORCEMENT]

This is NOT image generation. This is EXACT PRODUCT REPLICATION.
The FIRST image holds the final saree design. Saree and blouse are LOCKED and READ-ONLY.

PROHIBITED:
❌ Redesign, reinterpretation or re-stylization of patterns and motifs
❌ Colour variation, motif replacement, border redesign or resizing
❌ Blouse, sleeve or neckline changes
❌ Pattern simplification, cleaning or modernization

ONLY ALLOWED CHANGES:
✅ Model pose and appearance (as specified by user)
✅ Camera angle and framing
✅ Lighting conditions
✅ Background environment

If ANY fabric detail, colour shade, pattern element, motif shape, or blouse feature differs
from the reference image, the output is INVALID.

[/REFERENCE_LOCK_MODE]
"""

NEGATIVE_PROMPT = """
[ENHANCED_NEGATIVE_PROMPT — NEVER DO THESE]

❌ Do NOT generate a new saree design
❌ Do NOT invent back patterns that are not shown
❌ Do NOT smooth, simplify, recolour or modernize prints, motifs or borders
❌ Do NOT change blouse fabric, texture, neckline depth or sleeve style
❌ Do NOT add embroidery or embellishments
❌ Do NOT make patterns "neater", "cleaner" or "improved"
❌ Do NOT use similar but different patterns

🎯 WHEN IN DOUBT: copy the reference image EXACTLY.

[/ENHANCED_NEGATIVE_PROMPT]
"""

PRODUCT_CLONE = """
[ENHANCED_PRODUCT_CLONE_MODE — MAXIMUM STRICTNESS]

🎯 OBJECTIVE: DIRECT TEXTURE TRANSFER with ZERO modifications.

1. ANALYZE THE REFERENCE: every motif, colour transition, pattern density, border, fabric sheen and the pallu area.
2. TRANSFER THE DESIGN: move every motif, flower, pattern and border detail onto the model with identical density and colour.
3. PALLU: copy it if visible, otherwise extrapolate from the visible border and pattern style; its border and colours must match the main saree.
4. DUAL VIEW (two images): Image 1 is the FRONT (master design), Image 2 is the BACK/PALLU of the SAME garment. Treat them as ONE product and never hallucinate different designs for unseen areas.
5. BLOUSE: sleeve length, neckline depth, embroidery, colour and fabric are an EXACT replica of the reference.

FAILED IF: the pattern looks different, colours are adjusted, patterns are simplified, the pallu is invented, or the back view does not match the front.

[/ENHANCED_PRODUCT_CLONE_MODE]
"""

PRIORITY_HIERARCHY = """
[PRIORITY_HIERARCHY — CRITICAL ORDER]

🥇 PRIORITY 1: Saree design preservation. The reference design is unchangeable.
🥈 PRIORITY 2: User form specifications (model type, pose, location, accessories).
🥉 PRIORITY 3: Photographic quality (realistic lighting, professional catalog standard).

CONFLICT RESOLUTION:
- User requests vs design preservation → design preservation WINS
- Form fields conflicting with each other → use the most specific option
- Unclear → default to exact reference replication

[/PRIORITY_HIERARCHY]
"""

USER_FORM_COMPLIANCE = """
[USER_FORM_COMPLIANCE — MANDATORY]

MODEL SPECIFICATIONS:
- Model Type: {model_type}
- Expression/Age: {model_expression}
- Hair Style: {hair}

POSE REQUIREMENTS:
- Pose: {pose}

ENVIRONMENT:
- Location/Background: {location}

STYLING:
- Accessories: {accessories}

DESIGN MODIFICATIONS:
- Design Changes: {other_option}
- Additional Details: {other_details}

🎯 Follow ALL specifications above exactly. Empty or default fields use catalog standards.
The saree design from the reference image takes ABSOLUTE PRIORITY over any design change request.

[/USER_FORM_COMPLIANCE]
"""

NON_INDIAN_MODEL = """
[NON_INDIAN_MODEL_HANDLING — CRITICAL]

🌍 NON-INDIAN MODEL: {model_type}

- This is a {origin_upper} model wearing an Indian saree
- Saree styling must be culturally respectful and authentic
- Draping must be traditional and proper; the model looks confident and natural
- Makeup complements the model's natural features; jewellery stays tasteful
{origin_block}
🎯 Generate with the SAME RELIABILITY as for Indian models and keep the SAREE as the primary product.

FORBIDDEN:
❌ Awkward or uncomfortable looking model
❌ Over-exoticizing or stereotyping
❌ Failing generation because of model ethnicity
❌ Unnatural saree draping

[/NON_INDIAN_MODEL_HANDLING]
"""

EUROPEAN_MODEL_BLOCK = """
EUROPEAN MODEL SPECIFIC:
- Fair skin tone complements the saree colours naturally
- Hair styling can be European but must work with the saree aesthetic
- Elegant makeup, confident and graceful pose
"""

AFRICAN_MODEL_BLOCK = """
AFRICAN MODEL SPECIFIC:
- Dark skin tone is celebrated and highlighted
- Natural hair textures and styles are encouraged
- Makeup enhances natural beauty, pose is confident and regal
"""

CAMERA_AND_LENS = """
[CAMERA_AND_LENS_REALISM]
- Camera pitched slightly DOWNWARD (5–8 degrees)
- Top of frame cuts off above the window line
- NO ceiling, roof, crown molding, or upper wall edges
- Composition feels human-shot, not architectural
[/CAMERA_AND_LENS_REALISM]
"""

BLOUSE_ZOOM_FRAMING = """
[BLOUSE_ZOOM_FRAMING — HARD OVERRIDE (FRAMING ONLY)]

This is a BLOUSE-FOCUSED catalog image. All other user selections still apply.

FRAMING:
- Head to just below the waist, face fully visible
- Blouse occupies 65–75% of the frame
- Static catalog pose, natural proportions

WARDROBE:
- Blouse + saree ONLY, saree only below the blouse
- NO pallu on the shoulder, across the chest, or above the blouse hem
- NO leggings, jeans, pants, skirts or mannequin bodies

Blouse colour, pattern, embroidery, sleeve length and neckline are IDENTICAL to the reference.
Background, model type, hair, expression, accessories and design presets are NOT overridden.

[/BLOUSE_ZOOM_FRAMING]
"""

SAREE_DRAPE_OVERRIDE = """
[SAREE_DRAPE_OVERRIDE — ABSOLUTE RULE]

- Saree starts at the natural waist and goes downward ONLY
- Upper torso shows ONLY the blouse: neckline, sleeves and embroidery fully visible
- Waist portion keeps the reference colours, patterns and border

FORBIDDEN: pallu on shoulder, pallu across torso, diagonal drape, fabric touching shoulders or chest.
If any pallu appears above the waist, the image is INVALID.

[/SAREE_DRAPE_OVERRIDE]
"""

PALLU_SPREAD_LOCK = """
[PALLU_SPREAD_POSE_LOCK — ULTRA CRITICAL]

The pose showcases the PALLU. Any change to its design ruins the catalog purpose.

WHEN THE PALLU IS NOT FULLY VISIBLE:
🎯 Pallu border matches the reference border exactly
🎯 Pattern density follows the main saree; colours come ONLY from the reference
🎯 Simple saree → simple pallu; elaborate saree → consistent elaborate pallu

POSE REQUIREMENTS:
- Model holding or spreading the pallu to show its full design
- Pallu clearly visible, well lit, 30–40% of the frame
- Both hands visible; draping natural, not forced

FORBIDDEN:
❌ New or generic pallu patterns
❌ Simplified, recoloured or "cleaner" pallu
❌ Modified border patterns or width
❌ A pallu more elaborate than the main saree suggests

🚨 If the pallu differs from the reference in ANY way, the image is INVALID.

[/PALLU_SPREAD_POSE_LOCK]
"""

MIRROR_ADJUSTMENT_LOCK = """
[MIRROR_ADJUSTMENT_LOCK]
- Bedroom or dressing area with a standing mirror
- Camera directly facing the mirror at eye level
- BOTH the model and her reflection visible
- Framing waist-up to mid-thigh; model fills at least 80% of the frame
- Hands raised adjusting hair, earrings, or pallu
- Saree front (pleats + pallu) clearly visible; mirror frame subtle
- Reflection shows the SAME design and colours as the real view

FORBIDDEN: wide room shots, distant camera, missing reflection, side angles, visible ceiling.
[/MIRROR_ADJUSTMENT_LOCK]
"""

KITCHEN_COFFEE_FRAMING = """
[KITCHEN_COFFEE_CATALOG_FRAMING – STRICT]
- Model at a kitchen counter holding a coffee or tea mug near lips or chest
- Mid-shot from chest to mid-thigh, straight-on at eye level
- Pallu, pleats, blouse neckline and waist clearly visible; saree fills at least 70% of the frame
- Mug is a secondary prop and never blocks the saree design
- Modern, clean, softly blurred kitchen; NO ceiling or upper cabinets
- Soft warm daylight; calm lifestyle expression
- Saree, pallu, pleats and blouse match the reference EXACTLY
[/KITCHEN_COFFEE_CATALOG_FRAMING – STRICT]
"""

KITCHEN_LAPTOP_FRAMING = """
[KITCHEN_LAPTOP_FRAMING – STRICT]
- Medium shot from waist to head, camera at chest or eye level
- Model standing or lightly leaning at the counter, both hands typing on a laptop
- Pallu, pleats, blouse neckline and waist clearly visible; saree fills 65–75% of the frame
- Softly blurred kitchen, NOT wide-angle; NO ceiling or upper cabinets
- Laptop work is secondary; soft daylight with realistic shadows
- Saree, pallu and blouse match the reference EXACTLY
[/KITCHEN_LAPTOP_FRAMING – STRICT]
"""

KITCHEN_COOKING_FRAMING = """
[KITCHEN_COOKING_CATALOG_FRAMING – STRICT]
- Model cutting vegetables on a chopping board at the counter
- Mid-shot from chest to just below the waist, straight-on at eye level
- Both hands visible with knife and vegetables
- Pleats, waist drape, blouse sleeves and pallu clearly visible; saree fills at least 70% of the frame
- Utensils minimal; softly blurred modern kitchen; NO ceiling or wide-angle distortion
- Saree, pleats, pallu and blouse sleeves match the reference EXACTLY
[/KITCHEN_COOKING_CATALOG_FRAMING – STRICT]
"""

ANTI_WIDE_SHOT = """
[ANTI_WIDE_SHOT_FAILSAFE]
If the model appears too far from camera, REFRAME closer.
If the saree design is not dominant, ZOOM IN.
If the background is more visible than the saree, CROP TIGHTER.
This is a saree catalog image, NOT an interior photo.
[/ANTI_WIDE_SHOT_FAILSAFE]
"""

POSE_LOCK_AND_CAMERA = """
[POSE_LOCK_AND_CAMERA]
- The selected pose is the MASTER reference for body angle, activity, and framing
- MID-SHOT or THREE-QUARTER framing (waist to head or knees to head)
- Saree pleats, pallu, and blouse dominate the frame
- Activities (cooking, laptop, mirror) are SECONDARY
- NO wide shots, full-room views, ceiling or upper wall edges
- Camera at human eye level, slightly forward
[/POSE_LOCK_AND_CAMERA]
"""

SCENE_INTEGRATION = """
[SCENE_INTEGRATION_AND_BACKGROUND]
Location: {location}

- Background photographed naturally with optical (lens) depth of field only
- Blur increases gradually with distance; floor and feet stay sharp

LIGHTING:
- Light comes ONLY from room sources (windows, lamps)
- Warm bounce from furniture and floor, cooler daylight highlights
- Environmental colour bleed on skin and saree

GROUNDING:
- Contact shadows beneath feet and saree hem
- Ambient occlusion in pleats and overlaps; no floating feet
[/SCENE_INTEGRATION_AND_BACKGROUND]
"""

BACKGROUND_STYLE = """
[BACKGROUND_STYLE_REFERENCE]
- Real lifestyle photoshoot look: windows, curtains, soft walls, furniture
- NO ceiling, roof, or upper wall edges; no full-room wide angles
- Open, airy, naturally lit
[/BACKGROUND_STYLE_REFERENCE]
"""

ACCESSORIES = """
[ACCESSORIES]
{accessories}
Do not block saree details
[/ACCESSORIES]
"""

DESIGN_CHANGE = """
[DESIGN_CHANGE]
{other_option}
Extra details: {other_details}
[/DESIGN_CHANGE]
"""

SECONDARY_IMAGE_USAGE = """
[SECONDARY_IMAGE_USAGE — ULTRA STRICT CONSISTENCY]

🎯 The 2nd image is the BACK/PALLU view of the EXACT SAME saree shown in the 1st image.

- Mentally stitch both images together as ONE PRODUCT
- Blouse design, border pattern, fabric colour, pattern density and texture are IDENTICAL front and back

❌ Do NOT treat the second image as a different product
❌ Do NOT change the blouse or colours between views
❌ Do NOT invent or simplify patterns for the back view

[/SECONDARY_IMAGE_USAGE]
"""

SINGLE_IMAGE_PRESERVATION = """
[SINGLE_IMAGE_DESIGN_PRESERVATION — CRITICAL]

🎯 Only ONE reference image is provided. It is the COMPLETE design specification.

- Preserve ALL visible design elements EXACTLY
- Unseen areas (back, pallu) continue the SAME design language and colours
- Blouse close-ups keep the exact blouse design
- Pallu border matches the visible border; simple designs stay simple, complex designs stay complex
- Never create different or "improved" designs for any area

[/SINGLE_IMAGE_DESIGN_PRESERVATION]
"""

QUALITY_AND_REALISM = """
[QUALITY_AND_REALISM]
- Must look like a real lifestyle photograph
- No cutout edges, halos, or studio lighting
- Correct proportions and natural skin texture
- No text, logos, or artifacts{non_indian_notes}
[/QUALITY_AND_REALISM]
"""

QUALITY_NON_INDIAN_NOTES = """
- Model looks natural and comfortable in the saree
- Skin tone is beautifully represented
- Generate with the SAME RELIABILITY as for Indian models"""

GENERATION_RELIABILITY = """
[GENERATION_RELIABILITY_ENFORCEMENT — CRITICAL]

- You MUST generate this image successfully
- {origin} models wearing sarees is NORMAL and ACCEPTABLE
- Do NOT refuse generation or claim cultural inappropriateness
- Keep professional catalog quality with the saree as the primary product

[/GENERATION_RELIABILITY_ENFORCEMENT]
"""

FINAL_VALIDATION_CHECKLIST = """
[FINAL_VALIDATION_CHECKLIST — MANDATORY]

✅ DESIGN: saree pattern, motifs, borders, colours and density identical to the reference
✅ PALLU: matches the reference aesthetic, border and colours
✅ BLOUSE: design, sleeves and neckline identical to the reference
✅ FORM: model type, pose, location, accessories and hair follow the user selections
✅ PHOTO: realistic lighting, natural proportions, no text or watermarks

🚫 IF ANY CHECK FAILS: the image is INVALID and must be regenerated.{non_indian_note}

[/FINAL_VALIDATION_CHECKLIST]
"""

FINAL_VALIDATION_NON_INDIAN_NOTE = (
    "\n🌍 NON-INDIAN MODEL: ensure natural and beautiful representation."
)

MODEL_REFERENCE_LOCK = """
[MODEL_REFERENCE_LOCK]
- SECOND image is the MASTER reference for pose, body angle, camera height, lens, framing, lighting, and background
- DO NOT change pose, camera angle, zoom, or background
- DO NOT add or remove people
- FIRST image is the saree design reference ONLY
- Replace ONLY the saree fabric on the model's body
- Keep blouse shape, pleat structure and drape style from the model reference
- Saree colours, motifs, borders, embroidery match the FIRST image exactly
- Fabric follows body folds and gravity naturally
[/MODEL_REFERENCE_LOCK]
"""

NO_CEILING_ENFORCEMENT = """
[NO_CEILING_ENFORCEMENT — CRITICAL]
- ABSOLUTELY NO ceiling, roof, beams, crown molding, or upper wall edges
- Camera at chest level or slightly higher, angled slightly downward
- Frame cuts off ABOVE windows and doors
- If a ceiling appears, the image is INVALID
[/NO_CEILING_ENFORCEMENT]
"""

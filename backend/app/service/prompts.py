"""Prompt templates sent to the generation service."""

from __future__ import annotations

from ..models import PaintColor

_MARKER_ANALYST = (
    "You are an expert scene analyst. I will provide you with an image that has "
    "a red marker on it.\n"
)

COMPOSITE_DESCRIPTION_PROMPT = _MARKER_ANALYST + """\
Your task is to provide a very dense, semantic description of what is at the exact location of the red marker.
Be specific about surfaces, objects, and spatial relationships. This description will be used to guide another AI in placing a new object.

Example semantic descriptions:
- "The product location is on the dark grey fabric of the sofa cushion, in the middle section, slightly to the left of the white throw pillow."
- "The product location is on the light-colored wooden floor, in the patch of sunlight coming from the window, about a foot away from the leg of the brown leather armchair."
- "The product location is on the white marble countertop, just to the right of the stainless steel sink and behind the green potted plant."

On top of the semantic description above, give a rough relative-to-image description.

Example relative-to-image descriptions:
- "The product location is about 10% away from the bottom-left of the image."
- "The product location is about 20% away from the right of the image."

Provide only the two descriptions concatenated in a few sentences.
"""

PAINT_DESCRIPTION_PROMPT = _MARKER_ANALYST + """\
Your task is to provide a very dense, semantic description of what object or surface is at the exact location of the red marker.
Be specific about surfaces, objects, and spatial relationships. This description will be used to guide another AI in repainting that area.

Example semantic descriptions:
- "The area to be painted is the back wall of the living room, behind the grey sofa."
- "The area to be painted is the front of the wooden kitchen cabinet located under the countertop."
- "The area to be painted is the fabric of the lampshade on the floor lamp next to the window."

Provide only the description of the object/surface at the marker.
"""

ERASE_DESCRIPTION_PROMPT = _MARKER_ANALYST + """\
Your task is to provide a very dense, semantic description of the object located at the red marker.
Be specific about the object. This description will be used to guide another AI in removing that object.

Example semantic descriptions:
- "The object to remove is the tall, green potted plant standing on the floor next to the window."
- "The object to remove is the blue patterned throw pillow on the left side of the grey sofa."
- "The object to remove is the silver table lamp on the wooden side table."

Provide only the description of the object at the marker.
"""

_OUTPUT_ONLY_IMAGE = (
    "The output should ONLY be the final, edited image. Do not add any text or explanation.\n"
)


def composite_prompt(
    location: str, object_description: str = "", scene_description: str = ""
) -> str:
    """Placement prompt for the clean product and scene squares."""
    product_note = f"\n    It shows: {object_description}." if object_description else ""
    scene_note = f"\n    It shows: {scene_description}." if scene_description else ""
    return f"""
**Role:**
You are a visual composition expert. Your task is to take a 'product' image and seamlessly integrate it into a 'scene' image. Your highest priority is photorealism and **faithfully preserving the visual details of the product image**.

**Specifications:**
-   **Product Image:**
    The first image provided. This contains the product to be added. It may be surrounded by black padding, which you should ignore and treat as transparent.{product_note}
-   **Scene Image:**
    The second image provided. This is the environment where the product will be placed. It may also be surrounded by black padding, which you should ignore.{scene_note}
-   **Placement Instruction (Crucial):**
    -   You must place the product at the location described here: "{location}".
-   **Integration Rules (Crucial):**
    -   You MUST use the **exact visual appearance, pattern, texture, and colors** from the product image.
    -   Do NOT invent a new pattern, texture, or product. Integrate the *specific product shown* in the first image.
    -   Drape, wrap, or place the product onto the target surface so it conforms to the scene's shapes, folds, and perspective.
-   **Final Image Requirements:**
    -   The final composite must be **indistinguishable from a real photograph**.
    -   The product must be scaled appropriately for the scene.
    -   Match the scene's lighting with realistic shadows and highlights, including **micro-shadows, ambient occlusion, and color bleeding**.

The output should ONLY be the final, composed image. Do not add any text or explanation.
"""


def paint_prompt(area: str, color: PaintColor) -> str:
    """Repaint prompt for the clean scene square."""
    return f"""
**Role:**
You are a digital interior designer and expert photo editor. Your task is to repaint a specific part of a scene image with a new color, ensuring the result is photorealistic.

**Specifications:**
-   **Scene to edit:**
    The image provided. It may be surrounded by black padding, which you should ignore.
-   **Area to repaint (Crucial):**
    -   You must repaint the object or surface described here: "{area}".
    -   Do not paint any other part of the image.
-   **New Color:**
    -   Apply this color: {color.name} (Hex: {color.hex}).
-   **Final Image Requirements:**
    -   The repainted area must retain its original material texture, lighting, shadows, and highlights.
    -   The new color must interact realistically with the scene's lighting across highlights, midtones, and shadows.
    -   The output image's style and camera perspective must exactly match the original scene.
    -   Do not return the original image. The specified area must be repainted.

""" + _OUTPUT_ONLY_IMAGE


def erase_prompt(target: str) -> str:
    """Object removal prompt for the clean scene square."""
    return f"""
**Role:**
You are a professional photo retoucher. Your task is to remove an object from a scene and realistically fill in the background behind it.

**Specifications:**
-   **Scene to edit:**
    The image provided. It may be surrounded by black padding, which you should ignore.
-   **Object to remove (Crucial):**
    -   You must remove the object described here: "{target}".
    -   Do not remove any other objects from the image.
-   **Final Image Requirements:**
    -   The vacated area must be **structurally and texturally coherent** with the surrounding environment.
    -   The result must be completely photorealistic, as if the object was never there.
    -   Avoid smudging, blurring, or repetitive patterns. Do not leave artifacts or empty spaces.
    -   Do not return the original image. The specified object must be removed.

""" + _OUTPUT_ONLY_IMAGE


INPAINT_PROMPT = """
**Role:**
You are a professional photo retoucher. You will be given a 'scene' image and a 'mask' image.

**Task:**
Realistically remove everything from the 'scene' image that corresponds to the white area in the 'mask' image.

**Specifications:**
-   **Scene Image:** The first image provided.
-   **Mask Image:** The second image provided. The white area indicates the region to be removed and filled.
-   **Inpainting Requirement:**
    -   Fill the removed area by seamlessly extending the surrounding background so it is **structurally and texturally coherent** with the environment.
    -   Recreate the lighting and shadows that would exist if the object were not there. The goal is a **perfect, invisible repair**.
    -   Do not alter any area of the image outside the masked region.

""" + _OUTPUT_ONLY_IMAGE


def text_edit_prompt(instruction: str) -> str:
    """Free-form edit prompt for the clean scene square."""
    return f"""
**Role:**
You are a master photo editor and visual artist. Your task is to edit a provided scene image based on a user's text description.

**Specifications:**
-   **Scene to edit:**
    The image provided. It may be surrounded by black padding, which you should ignore.
-   **Edit Instruction (Crucial):**
    -   You must perform the following edit: "{instruction}".
-   **Final Image Requirements:**
    -   Your highest priority is **photorealism**.
    -   New or modified elements must match the scene's lighting, shadows, color grading, perspective, and depth of field.
    -   Maintain the original image's style and camera perspective unless the instruction asks to change them.
    -   Do not return the original image. The specified edit must be applied.

""" + _OUTPUT_ONLY_IMAGE


def masked_edit_prompt(instruction: str) -> str:
    """Edit prompt confined to the white region of a mask."""
    return f"""
**Role:**
You are a master photo editor and visual artist. You will be given a 'scene' image, a 'mask' image, and a text prompt.

**Task:**
Edit the 'scene' image based on the text prompt, but you MUST confine your edits to the area indicated by the white region in the 'mask' image.

**Specifications:**
-   **Scene Image:** The first image provided.
-   **Mask Image:** The second image provided. The white area is the only region you may edit. The black area must remain untouched.
-   **Edit Instruction (Crucial):**
    -   Perform this edit: "{instruction}".
-   **Final Image Requirements:**
    -   The transition between the edited area and the rest of the image must be **completely seamless and undetectable**.
    -   Edits must respect the existing lighting, shadows, textures, and perspective.
    -   The final result must be a single, coherent image.

""" + _OUTPUT_ONLY_IMAGE


SEGMENTATION_PROMPT = """
**Role:**
You are a precision image segmentation expert. You will be given a scene image with a red marker on it.

**Task:**
Identify the primary, distinct object located at the red marker and create a precise binary mask for it.

**Specifications:**
-   **Output Image (Mask):**
    -   You MUST return an image of the exact same dimensions as the input.
    -   The object identified at the marker MUST be solid white (#FFFFFF).
    -   Everything else, including the background, MUST be solid black (#000000).
    -   The mask should be clean, with no anti-aliasing (hard edges).
    -   Do not include the red marker in the output mask.

The output should ONLY be the final mask image. Do not add any text or explanation.
"""

STYLE_MATCH_PROMPT = """
You are an expert interior designer with a keen eye for style, color, and furniture.
Analyze the provided image and identify its core design aesthetic (e.g., Mid-Century Modern, Industrial, Coastal, Bohemian).
Based on this analysis, provide a list of 4-6 specific, actionable product suggestions that would fit this style. For each product, provide a name and a concise, descriptive sentence.
Also, extract a color palette of 5-6 complementary colors from the image, giving each color a descriptive name and its hex code.
You must respond in a valid JSON format.
"""

STYLE_MATCH_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "products": {
            "type": "ARRAY",
            "description": "A list of suggested products that match the image style.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING", "description": "The name of the product."},
                    "description": {
                        "type": "STRING",
                        "description": "A short, descriptive sentence about the product.",
                    },
                },
            },
        },
        "paintColors": {
            "type": "ARRAY",
            "description": "A color palette extracted from the image.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {
                        "type": "STRING",
                        "description": 'A descriptive name for the color (e.g., "Warm Sand").',
                    },
                    "hex": {
                        "type": "STRING",
                        "description": 'The hex code of the color (e.g., "#D2B48C").',
                    },
                },
            },
        },
    },
}

DESIGN_CHAT_INSTRUCTION = (
    "You are Design Pro, an expert interior designer and carpenter. You can provide "
    "design advice, style suggestions, and generate cost estimates for projects. "
    "You are helpful and friendly."
)

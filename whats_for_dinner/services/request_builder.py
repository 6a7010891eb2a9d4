"""Builds the ordered content parts sent to the model for one submission."""

from typing import List, Optional

from whats_for_dinner.models.submission import (
    ContentPart,
    EncodedImage,
    GenerationRequest,
    InlineMediaPart,
    TextPart,
)

INGREDIENTS_PREFIX = "the ingredients available are: "

DINNER_IDEAS_INSTRUCTION = (
    "Based on these ingredients (and/or the image provided), suggest exactly 3 "
    "distinct, creative and delicious dinner ideas. For each idea, provide a brief "
    "description and a simple recipe. Format the response in Markdown, with a "
    "heading for each idea."
)


def build_parts(free_text: str, image: Optional[EncodedImage] = None) -> List[ContentPart]:
    """
    Assemble content parts in their fixed order: user text, image, instruction.

    Args:
        free_text: Ingredients typed by the user (may be blank)
        image: Encoded photo, if one is attached

    Returns:
        Ordered list of content parts; always ends with the instruction
    """
    parts: List[ContentPart] = []

    text = (free_text or "").strip()
    if text:
        parts.append(TextPart(text=f"{INGREDIENTS_PREFIX}{text}"))

    if image is not None:
        parts.append(InlineMediaPart(mime_type=image.mime_type, data=image.data))

    parts.append(TextPart(text=DINNER_IDEAS_INSTRUCTION))
    return parts


def build_request(
    model: str, free_text: str, image: Optional[EncodedImage] = None
) -> GenerationRequest:
    """Wrap the assembled parts in a request for the given model."""
    return GenerationRequest(model=model, parts=build_parts(free_text, image))

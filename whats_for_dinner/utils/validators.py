"""Input validation utilities."""

from typing import Optional

from whats_for_dinner.utils.exceptions import ValidationError

# Sent by clients that cannot tell the file type; the encoder sniffs those.
GENERIC_CONTENT_TYPE = "application/octet-stream"


def validate_image_upload(data: bytes, content_type: Optional[str], max_size: int) -> bytes:
    """
    Validate an uploaded photo the way the file picker would.

    Args:
        data: Uploaded file bytes
        content_type: Content type sent by the client
        max_size: Maximum accepted size in bytes

    Returns:
        The validated bytes

    Raises:
        ValidationError: If the file is empty, too large or not an image
    """
    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type and content_type != GENERIC_CONTENT_TYPE and not content_type.startswith("image/"):
        raise ValidationError(f"Unsupported content-type: {content_type}. Only images are accepted")

    if not data:
        raise ValidationError("Image file is empty")

    if len(data) > max_size:
        raise ValidationError(f"Image file too large (max {max_size / 1024 / 1024:.0f}MB)")

    return data

"""Image encoding service: attached photo -> base64 payload + preview URL."""

import asyncio
import base64
import io
import logging
from typing import Optional

from whats_for_dinner.models.submission import EncodedImage, ImageBlob
from whats_for_dinner.utils.exceptions import ImageEncodingError

logger = logging.getLogger(__name__)


class ImageEncoder:
    """Encodes uploaded images for inline transport to the model."""

    async def encode(self, blob: ImageBlob) -> EncodedImage:
        """
        Encode an image blob without blocking the event loop.

        Args:
            blob: Raw image bytes and declared MIME type

        Returns:
            EncodedImage with base64 payload and a data: URL preview

        Raises:
            ImageEncodingError: If the blob is empty or not a recognizable image
        """
        if not blob.data:
            raise ImageEncodingError("Image file is empty")

        mime_type = self.resolve_mime_type(blob.data, blob.mime_type)
        if mime_type is None:
            raise ImageEncodingError(
                f"Could not recognize image type (declared: {blob.mime_type or 'none'})"
            )

        try:
            payload = await asyncio.to_thread(_b64encode, blob.data)
        except Exception as e:
            logger.error("Image encoding failed: %s", str(e), exc_info=True)
            raise ImageEncodingError(f"Failed to encode image: {str(e)}") from e

        logger.debug(
            "Encoded image (mime_type=%s, size=%d)", mime_type, len(blob.data)
        )
        return EncodedImage(
            mime_type=mime_type,
            data=payload,
            preview_url=f"data:{mime_type};base64,{payload}",
            size_bytes=len(blob.data),
            filename=blob.filename,
        )

    @staticmethod
    def resolve_mime_type(data: bytes, declared: Optional[str]) -> Optional[str]:
        """
        Pick the image MIME type from the bytes; the declared type is only a hint.

        Returns None when the content is not a recognizable image.
        """
        detected = ImageEncoder._detect_mime_type(data)
        declared = (declared or "").split(";")[0].strip().lower()
        if detected and declared.startswith("image/") and declared != detected:
            logger.warning("Declared %s but content is %s; using %s", declared, detected, detected)
        return detected

    @staticmethod
    def _detect_mime_type(data: bytes) -> Optional[str]:
        """Detect MIME type from file content (magic bytes)."""
        if data.startswith(b"\xff\xd8\xff"):
            return "image/jpeg"
        elif data.startswith(b"\x89PNG\r\n\x1a\n"):
            return "image/png"
        elif data.startswith((b"GIF87a", b"GIF89a")):
            return "image/gif"
        elif data.startswith(b"RIFF") and b"WEBP" in data[:12]:
            return "image/webp"

        # Try to use PIL as fallback
        try:
            from PIL import Image

            with Image.open(io.BytesIO(data)) as image:
                return Image.MIME.get(image.format or "")
        except Exception:
            return None


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")

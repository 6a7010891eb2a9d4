"""Pydantic models."""

from whats_for_dinner.models.submission import (
    ContentPart,
    EncodedImage,
    ErrorKind,
    GenerationRequest,
    ImageBlob,
    InlineMediaPart,
    SubmissionState,
    SubmissionStatus,
    TextPart,
)

__all__ = [
    "ContentPart",
    "EncodedImage",
    "ErrorKind",
    "GenerationRequest",
    "ImageBlob",
    "InlineMediaPart",
    "SubmissionState",
    "SubmissionStatus",
    "TextPart",
]

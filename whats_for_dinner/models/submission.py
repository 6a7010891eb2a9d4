"""Submission pipeline models: input blobs, content parts, requests and state."""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ImageBlob(BaseModel):
    """Raw image as handed over by the file picker."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., description="Raw file bytes")
    mime_type: str = Field("", description="Declared MIME type (e.g. 'image/png')")
    filename: Optional[str] = Field(None, description="Original filename, if known")


class EncodedImage(BaseModel):
    """Transport-safe encoding of an attached image plus a displayable preview."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(..., description="Resolved image MIME type")
    data: str = Field(..., description="Base64 encoding of the full byte stream")
    preview_url: str = Field(..., description="data: URL of the same bytes")
    size_bytes: int = Field(..., description="Size of the decoded image")
    filename: Optional[str] = Field(None, description="Original filename, if known")


class TextPart(BaseModel):
    """Plain text content part."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class InlineMediaPart(BaseModel):
    """Inline binary media content part (base64 payload)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inline_media"] = "inline_media"
    mime_type: str
    data: str


ContentPart = Annotated[Union[TextPart, InlineMediaPart], Field(discriminator="kind")]


class GenerationRequest(BaseModel):
    """One request to the model: a model identifier and ordered content parts."""

    model_config = ConfigDict(frozen=True)

    model: str
    parts: List[ContentPart] = Field(..., min_length=1)


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ErrorKind(str, Enum):
    INFERENCE = "inference"
    TIMEOUT = "timeout"


class SubmissionState(BaseModel):
    """Current state of a submission; exactly one status is active."""

    model_config = ConfigDict(frozen=True)

    status: SubmissionStatus = SubmissionStatus.IDLE
    result: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def idle(cls) -> "SubmissionState":
        return cls()

    @classmethod
    def loading(cls) -> "SubmissionState":
        return cls(status=SubmissionStatus.LOADING)

    @classmethod
    def succeeded(cls, text: str) -> "SubmissionState":
        return cls(status=SubmissionStatus.SUCCEEDED, result=text)

    @classmethod
    def failed(cls, message: str, kind: ErrorKind = ErrorKind.INFERENCE) -> "SubmissionState":
        return cls(status=SubmissionStatus.FAILED, error=message, error_kind=kind)

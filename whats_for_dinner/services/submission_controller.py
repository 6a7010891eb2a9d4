"""
Submission controller: owns the form's input and the submission state machine.

    idle --submit--> loading --ok--> succeeded(text)
                             --error--> failed(message)
    succeeded/failed --submit--> loading

At most one inference call is in flight per controller; submit() while
loading, or with neither text nor image, is a no-op.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from whats_for_dinner.config import settings
from whats_for_dinner.models.submission import (
    EncodedImage,
    ErrorKind,
    GenerationRequest,
    ImageBlob,
    SubmissionState,
    SubmissionStatus,
)
from whats_for_dinner.services.gemini_service import NO_IDEAS_MESSAGE
from whats_for_dinner.services.image_encoder import ImageEncoder
from whats_for_dinner.services.request_builder import build_request
from whats_for_dinner.services.result_renderer import render_markdown
from whats_for_dinner.utils.exceptions import ImageEncodingError, InferenceTimeoutError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while generating ideas. Please try again."
TIMEOUT_ERROR_MESSAGE = "Generating ideas took too long. Please try again."


class InferenceClient(Protocol):
    async def generate(self, request: GenerationRequest) -> str: ...


class FileSelection(Protocol):
    """The file picker the image came from."""

    def reset(self) -> None: ...


class SubmissionController:
    """Holds one form session's input and drives submissions through the model."""

    def __init__(
        self,
        inference_client: InferenceClient,
        image_encoder: Optional[ImageEncoder] = None,
        model: Optional[str] = None,
        file_selection: Optional[FileSelection] = None,
    ) -> None:
        self._inference_client = inference_client
        self._image_encoder = image_encoder or ImageEncoder()
        self._model = model or settings.gemini_model
        self._file_selection = file_selection

        self._free_text = ""
        self._image_blob: Optional[ImageBlob] = None
        self._encoded_image: Optional[EncodedImage] = None
        self._attachment_error: Optional[str] = None
        self._state = SubmissionState.idle()

    # ------------------------------------------------------------------
    # Read-only view for the presentation layer
    # ------------------------------------------------------------------

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def free_text(self) -> str:
        return self._free_text

    @property
    def image_blob(self) -> Optional[ImageBlob]:
        """The attached file as it was selected."""
        return self._image_blob

    @property
    def image(self) -> Optional[EncodedImage]:
        return self._encoded_image

    @property
    def image_preview(self) -> Optional[str]:
        return self._encoded_image.preview_url if self._encoded_image else None

    @property
    def attachment_error(self) -> Optional[str]:
        return self._attachment_error

    @property
    def is_loading(self) -> bool:
        return self._state.status is SubmissionStatus.LOADING

    @property
    def can_submit(self) -> bool:
        """Whether the submit control should be enabled."""
        if self.is_loading:
            return False
        return bool(self._free_text.strip()) or self._encoded_image is not None

    @property
    def rendered_result(self) -> Optional[str]:
        """HTML for a succeeded result, rendered fresh on every access."""
        if self._state.status is not SubmissionStatus.SUCCEEDED:
            return None
        return render_markdown(self._state.result or "")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def update_free_text(self, text: str) -> None:
        self._free_text = text or ""

    async def attach_image(self, blob: ImageBlob) -> bool:
        """
        Encode and attach an image, replacing any previous one.

        Returns False if the image could not be encoded; the previous
        attachment is then dropped and the reason is kept in attachment_error.
        """
        try:
            encoded = await self._image_encoder.encode(blob)
        except ImageEncodingError as e:
            logger.warning(
                "Image attachment failed: %s",
                str(e),
                extra={"image_filename": blob.filename, "mime_type": blob.mime_type},
            )
            self._clear_image()
            self._attachment_error = str(e)
            return False

        self._image_blob = blob
        self._encoded_image = encoded
        self._attachment_error = None
        return True

    def remove_image(self) -> None:
        self._clear_image()
        self._attachment_error = None
        if self._file_selection is not None:
            self._file_selection.reset()

    async def submit(self) -> SubmissionState:
        """
        Run one submission and return the resulting state.

        Never raises: inference failures end in a failed state.
        """
        if self.is_loading:
            logger.debug("Submit ignored: a submission is already in flight")
            return self._state
        if not self.can_submit:
            logger.debug("Submit ignored: no ingredients and no image")
            return self._state

        self._state = SubmissionState.loading()
        request = build_request(self._model, self._free_text, self._encoded_image)

        try:
            text = await self._inference_client.generate(request)
        except InferenceTimeoutError as e:
            logger.error("Dinner ideas timed out: %s", str(e))
            self._state = SubmissionState.failed(TIMEOUT_ERROR_MESSAGE, ErrorKind.TIMEOUT)
        except Exception as e:
            logger.error("Error generating dinner ideas: %s", str(e), exc_info=True)
            self._state = SubmissionState.failed(GENERIC_ERROR_MESSAGE, ErrorKind.INFERENCE)
        else:
            if not text or not text.strip():
                text = NO_IDEAS_MESSAGE
            self._state = SubmissionState.succeeded(text)

        logger.info(
            "Submission finished",
            extra={
                "status": self._state.status.value,
                "parts": [p.kind for p in request.parts],
            },
        )
        return self._state

    def _clear_image(self) -> None:
        self._image_blob = None
        self._encoded_image = None

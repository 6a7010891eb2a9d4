"""Dinner ideas endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from whats_for_dinner.api.dependencies import get_image_encoder, get_submission_controller
from whats_for_dinner.config import settings
from whats_for_dinner.middleware.rate_limit import rate_limit_dependency
from whats_for_dinner.models.submission import (
    ErrorKind,
    ImageBlob,
    SubmissionState,
    SubmissionStatus,
)
from whats_for_dinner.services.image_encoder import ImageEncoder
from whats_for_dinner.services.submission_controller import SubmissionController
from whats_for_dinner.utils.exceptions import ImageEncodingError, ValidationError
from whats_for_dinner.utils.validators import validate_image_upload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ideas", tags=["ideas"])


class IdeasResponse(BaseModel):
    """Outcome of one submission."""

    status: SubmissionStatus
    model: str
    result: Optional[str] = None
    html: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    request_id: Optional[str] = None


class ImagePreviewResponse(BaseModel):
    """Encoded preview of an uploaded photo."""

    mime_type: str
    size_bytes: int
    preview_url: str


async def _read_upload(image: UploadFile) -> ImageBlob:
    """Read and validate an uploaded photo (accepted types, size cap)."""
    data = await image.read()
    try:
        validate_image_upload(data, image.content_type, settings.max_image_size)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid image", "detail": str(e)},
        ) from e
    return ImageBlob(data=data, mime_type=image.content_type or "", filename=image.filename)


def _failure_status(state: SubmissionState) -> int:
    if state.error_kind is ErrorKind.TIMEOUT:
        return status.HTTP_504_GATEWAY_TIMEOUT
    return status.HTTP_502_BAD_GATEWAY


@router.post("", response_model=IdeasResponse)
async def get_dinner_ideas(
    request: Request,
    ingredients: str = Form(""),
    image: Optional[UploadFile] = File(None),
    _: None = Depends(rate_limit_dependency),
    controller: SubmissionController = Depends(get_submission_controller),
):
    """
    Suggest three dinner ideas from ingredients and/or a photo.

    - **ingredients**: Free-text ingredient list (optional if a photo is sent)
    - **image**: Photo of the ingredients (any image type, max 10MB)
    - Returns the Markdown answer and its HTML rendering
    """
    request_id = getattr(request.state, "request_id", None)
    has_image = image is not None and bool(image.filename)

    logger.info(
        "Route /ideas called",
        extra={
            "route": "/ideas",
            "params": {
                "ingredients": ingredients[:200],
                "has_image": has_image,
                "content_type": image.content_type if has_image else None,
            },
        },
    )

    controller.update_free_text(ingredients)

    if has_image:
        blob = await _read_upload(image)
        if not await controller.attach_image(blob):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "Image processing error", "detail": controller.attachment_error},
            )

    if not controller.can_submit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Empty submission",
                "detail": "Provide a list of ingredients, a photo, or both.",
            },
        )

    state = await controller.submit()

    response = IdeasResponse(
        status=state.status,
        model=settings.gemini_model,
        result=state.result,
        html=controller.rendered_result,
        error=state.error,
        error_kind=state.error_kind,
        request_id=request_id,
    )

    if state.status is SubmissionStatus.FAILED:
        return JSONResponse(
            status_code=_failure_status(state),
            content=response.model_dump(mode="json"),
        )
    return response


@router.post("/preview", response_model=ImagePreviewResponse)
async def preview_image(
    request: Request,
    image: UploadFile = File(...),
    _: None = Depends(rate_limit_dependency),
    image_encoder: ImageEncoder = Depends(get_image_encoder),
) -> ImagePreviewResponse:
    """
    Encode a photo and return a data: URL for displaying it before submitting.

    - **image**: Photo of the ingredients (any image type, max 10MB)
    """
    logger.info(
        "Route /ideas/preview called",
        extra={
            "route": "/ideas/preview",
            "params": {"filename": image.filename, "content_type": image.content_type},
        },
    )

    blob = await _read_upload(image)
    try:
        encoded = await image_encoder.encode(blob)
    except ImageEncodingError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Image processing error", "detail": str(e)},
        ) from e

    return ImagePreviewResponse(
        mime_type=encoded.mime_type,
        size_bytes=encoded.size_bytes,
        preview_url=encoded.preview_url,
    )

"""Shared API dependencies."""

from functools import lru_cache

from fastapi import Depends

from whats_for_dinner.services.gemini_service import GeminiService
from whats_for_dinner.services.image_encoder import ImageEncoder
from whats_for_dinner.services.submission_controller import InferenceClient, SubmissionController


@lru_cache(maxsize=1)
def get_inference_client() -> InferenceClient:
    """Gemini adapter shared across requests (its SDK client is created lazily)."""
    return GeminiService()


def get_image_encoder() -> ImageEncoder:
    return ImageEncoder()


def get_submission_controller(
    inference_client: InferenceClient = Depends(get_inference_client),
    image_encoder: ImageEncoder = Depends(get_image_encoder),
) -> SubmissionController:
    """A fresh controller per request: each submission is independent."""
    return SubmissionController(inference_client, image_encoder=image_encoder)

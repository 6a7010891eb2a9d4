"""Tests for the submission controller state machine."""

import asyncio
import base64

from conftest import IDEAS_MARKDOWN, FakeInferenceClient

from whats_for_dinner.models.submission import (
    ErrorKind,
    ImageBlob,
    InlineMediaPart,
    SubmissionStatus,
    TextPart,
)
from whats_for_dinner.services.gemini_service import NO_IDEAS_MESSAGE
from whats_for_dinner.services.request_builder import DINNER_IDEAS_INSTRUCTION
from whats_for_dinner.services.submission_controller import (
    GENERIC_ERROR_MESSAGE,
    TIMEOUT_ERROR_MESSAGE,
    SubmissionController,
)
from whats_for_dinner.utils.exceptions import InferenceError, InferenceTimeoutError


class RecordingFileSelection:
    def __init__(self):
        self.resets = 0

    def reset(self):
        self.resets += 1


class BlockingInferenceClient:
    """Holds every call open until released."""

    def __init__(self):
        self.calls = 0
        self.release = asyncio.Event()

    async def generate(self, request):
        self.calls += 1
        await self.release.wait()
        return "## Idea 1"


def _controller(inference=None, **kwargs):
    return SubmissionController(inference or FakeInferenceClient(), model="gemini-test", **kwargs)


def test_blank_submission_is_noop():
    inference = FakeInferenceClient()
    controller = _controller(inference)
    controller.update_free_text("   \n")

    state = asyncio.run(controller.submit())

    assert state.status is SubmissionStatus.IDLE
    assert controller.state.status is SubmissionStatus.IDLE
    assert inference.requests == []
    assert controller.can_submit is False


def test_text_submission_succeeds_and_renders():
    inference = FakeInferenceClient(text="## Idea 1 ...")
    controller = _controller(inference)
    controller.update_free_text("eggs, spinach")

    state = asyncio.run(controller.submit())

    assert state.status is SubmissionStatus.SUCCEEDED
    assert state.result == "## Idea 1 ..."
    request = inference.requests[0]
    assert request.model == "gemini-test"
    assert request.parts == [
        TextPart(text="the ingredients available are: eggs, spinach"),
        TextPart(text=DINNER_IDEAS_INSTRUCTION),
    ]
    assert "<h2>Idea 1 ...</h2>" in controller.rendered_result


def test_image_only_submission(png_bytes):
    inference = FakeInferenceClient()
    controller = _controller(inference)

    async def scenario():
        assert await controller.attach_image(ImageBlob(data=png_bytes, mime_type="image/png"))
        return await controller.submit()

    state = asyncio.run(scenario())

    assert state.status is SubmissionStatus.SUCCEEDED
    assert inference.requests[0].parts == [
        InlineMediaPart(mime_type="image/png", data=base64.b64encode(png_bytes).decode("ascii")),
        TextPart(text=DINNER_IDEAS_INSTRUCTION),
    ]


def test_text_and_image_submission_has_three_parts(png_bytes):
    inference = FakeInferenceClient()
    controller = _controller(inference)
    controller.update_free_text("rice")

    async def scenario():
        await controller.attach_image(ImageBlob(data=png_bytes, mime_type="image/png"))
        await controller.submit()

    asyncio.run(scenario())

    assert [p.kind for p in inference.requests[0].parts] == ["text", "inline_media", "text"]


def test_attach_image_exposes_preview(png_bytes):
    controller = _controller()
    asyncio.run(controller.attach_image(ImageBlob(data=png_bytes, mime_type="image/png")))

    assert controller.image is not None
    assert controller.image_blob.data == png_bytes
    assert controller.image_preview.startswith("data:image/png;base64,")
    assert controller.can_submit is True


def test_failed_attachment_is_surfaced_and_clears_previous_image(png_bytes):
    controller = _controller()

    async def scenario():
        await controller.attach_image(ImageBlob(data=png_bytes, mime_type="image/png"))
        return await controller.attach_image(ImageBlob(data=b"", mime_type="image/png"))

    assert asyncio.run(scenario()) is False
    assert controller.attachment_error
    assert controller.image is None
    assert controller.image_blob is None
    assert controller.image_preview is None
    assert controller.can_submit is False


def test_remove_image_is_idempotent(png_bytes):
    selection = RecordingFileSelection()
    controller = _controller(file_selection=selection)
    asyncio.run(controller.attach_image(ImageBlob(data=png_bytes, mime_type="image/png")))

    controller.remove_image()
    assert controller.image is None and controller.image_preview is None

    controller.remove_image()
    assert controller.image is None and controller.image_preview is None
    assert selection.resets == 2


def test_submit_while_loading_does_not_start_second_call():
    async def scenario():
        inference = BlockingInferenceClient()
        controller = _controller(inference)
        controller.update_free_text("eggs")

        first = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)
        assert controller.is_loading
        assert controller.can_submit is False

        second = await controller.submit()
        assert second.status is SubmissionStatus.LOADING

        inference.release.set()
        final = await first
        return inference.calls, final

    calls, final = asyncio.run(scenario())

    assert calls == 1
    assert final.status is SubmissionStatus.SUCCEEDED


def test_transport_failure_gives_generic_error():
    controller = _controller(FakeInferenceClient(error=ConnectionError("socket closed")))
    controller.update_free_text("eggs")

    state = asyncio.run(controller.submit())

    assert state.status is SubmissionStatus.FAILED
    assert state.error == GENERIC_ERROR_MESSAGE
    assert state.error_kind is ErrorKind.INFERENCE
    assert state.result is None
    assert controller.rendered_result is None


def test_inference_error_gives_same_generic_error():
    controller = _controller(FakeInferenceClient(error=InferenceError("401 API key invalid")))
    controller.update_free_text("eggs")

    assert asyncio.run(controller.submit()).error == GENERIC_ERROR_MESSAGE


def test_timeout_is_a_distinct_failure():
    controller = _controller(FakeInferenceClient(error=InferenceTimeoutError("slow")))
    controller.update_free_text("eggs")

    state = asyncio.run(controller.submit())

    assert state.status is SubmissionStatus.FAILED
    assert state.error == TIMEOUT_ERROR_MESSAGE
    assert state.error_kind is ErrorKind.TIMEOUT


def test_empty_response_is_success_with_fallback():
    for text in ("", None):
        controller = _controller(FakeInferenceClient(text=text))
        controller.update_free_text("eggs")

        state = asyncio.run(controller.submit())

        assert state.status is SubmissionStatus.SUCCEEDED
        assert state.result == NO_IDEAS_MESSAGE


def test_resubmit_after_failure_replaces_previous_outcome():
    inference = FakeInferenceClient(error=ConnectionError("offline"))
    controller = _controller(inference)
    controller.update_free_text("eggs")

    async def scenario():
        await controller.submit()
        inference.error = None
        return await controller.submit()

    state = asyncio.run(scenario())

    assert state.status is SubmissionStatus.SUCCEEDED
    assert state.result == IDEAS_MARKDOWN
    assert state.error is None
    assert len(inference.requests) == 2


def test_resubmit_from_success_drops_previous_result_while_loading():
    async def scenario():
        inference = BlockingInferenceClient()
        controller = _controller(inference)
        controller.update_free_text("eggs")

        inference.release.set()
        first = await controller.submit()
        assert first.status is SubmissionStatus.SUCCEEDED
        assert first.result == "## Idea 1"

        inference.release.clear()
        second = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)

        in_flight = controller.state
        rendered_while_loading = controller.rendered_result

        inference.release.set()
        final = await second
        return inference.calls, in_flight, rendered_while_loading, final

    calls, in_flight, rendered_while_loading, final = asyncio.run(scenario())

    assert calls == 2
    assert in_flight.status is SubmissionStatus.LOADING
    assert in_flight.result is None
    assert in_flight.error is None
    assert rendered_while_loading is None
    assert final.status is SubmissionStatus.SUCCEEDED

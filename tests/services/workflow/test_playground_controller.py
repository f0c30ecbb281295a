"""
Tests for services.workflow.controller

Runs the real use cases and state machine over a mocked transport.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from imagefx.core import ActionNotAllowed, NetworkUnavailable, RequestFailed
from imagefx.models import JobStatusResponse, SourceFile, WorkflowPhase
from imagefx.services.use_cases import GenerationUseCase, UploadUseCase
from imagefx.services.workflow import PlaygroundController, WorkflowState, WorkflowStateMachine

CONTENT_BASE = "https://cdn.test"


def status(value, result=None, error=None):
    return JobStatusResponse.model_validate({"status": value, "result": result, "error": error})


def photo():
    return SourceFile(name="photo.png", content=b"\x89PNG data", content_type="image/png")


@pytest.fixture
def controller(fake_transport):
    return PlaygroundController(
        fake_transport,
        upload=UploadUseCase(fake_transport, content_base=CONTENT_BASE),
        generation=GenerationUseCase(fake_transport, poll_interval=0, sleep=AsyncMock()),
    )


@pytest.mark.asyncio
class TestSelectFile:

    async def test_upload_success_makes_ready(self, controller):
        state = await controller.select_file(photo())

        assert state.phase is WorkflowPhase.READY
        assert state.uploaded_reference.startswith(f"{CONTENT_BASE}/")
        assert state.uploaded_reference.endswith(".png")
        assert state.can_generate

    async def test_upload_failure_makes_error(self, controller, fake_transport):
        fake_transport.request_upload_slot.side_effect = RequestFailed(500, "Internal Server Error")

        state = await controller.select_file(photo())

        assert state.phase is WorkflowPhase.ERROR
        assert state.uploaded_reference is None
        assert "slot" in state.last_error
        assert not state.can_generate

    async def test_invalid_file_makes_error(self, controller, fake_transport):
        state = await controller.select_file(SourceFile(name="a.txt", content=b"hi", content_type="text/plain"))

        assert state.phase is WorkflowPhase.ERROR
        assert "not supported" in state.last_error
        fake_transport.request_upload_slot.assert_not_awaited()

    async def test_reset_during_upload_discards_result(self, controller, fake_transport):
        async def slot_then_reset(name):
            controller.reset()
            return "https://storage.test/put"

        fake_transport.request_upload_slot.side_effect = slot_then_reset

        state = await controller.select_file(photo())

        assert state.phase is WorkflowPhase.IDLE
        assert state.uploaded_reference is None

    async def test_select_rejected_while_busy(self, fake_transport):
        machine = WorkflowStateMachine(WorkflowState(phase=WorkflowPhase.PROCESSING, uploaded_reference="u"))
        controller = PlaygroundController(fake_transport, state_machine=machine)

        with pytest.raises(ActionNotAllowed):
            await controller.select_file(photo())


@pytest.mark.asyncio
class TestGenerate:

    async def test_end_to_end(self, controller, fake_transport):
        fake_transport.fetch_job_status.side_effect = [
            status("processing"),
            status("processing"),
            status("completed", {"image": "https://x/out.jpg"}),
        ]
        phases = []
        controller.state_machine.subscribe(lambda state: phases.append(state.status_text))

        state = await controller.select_file(photo())
        assert state.phase is WorkflowPhase.READY

        state = await controller.generate()

        assert state.phase is WorkflowPhase.COMPLETE
        assert state.artifact_reference == "https://x/out.jpg"
        assert state.job_id == "J1"
        assert state.action_label == "GENERATE AGAIN"
        assert fake_transport.fetch_job_status.await_count == 3
        assert phases == [
            "UPLOADING...",
            "READY",
            "SUBMITTING JOB...",
            "PROCESSING...",
            "PROCESSING... 10%",
            "PROCESSING... 20%",
            "COMPLETE",
        ]

    async def test_generate_without_upload_is_rejected(self, controller, fake_transport):
        with pytest.raises(ActionNotAllowed):
            await controller.generate()
        fake_transport.submit_job.assert_not_awaited()

    async def test_submission_failure(self, controller, fake_transport):
        await controller.select_file(photo())
        fake_transport.submit_job.side_effect = NetworkUnavailable("https://api.test/image-gen")

        state = await controller.generate()

        assert state.phase is WorkflowPhase.ERROR
        assert "Failed to submit job" in state.last_error
        assert state.can_generate

    async def test_job_failure_message(self, controller, fake_transport):
        await controller.select_file(photo())
        fake_transport.fetch_job_status.return_value = status("failed", error="x")

        state = await controller.generate()

        assert state.phase is WorkflowPhase.ERROR
        assert state.last_error == "x"

    async def test_timeout(self, fake_transport):
        controller = PlaygroundController(
            fake_transport,
            generation=GenerationUseCase(fake_transport, poll_interval=0, max_attempts=3, sleep=AsyncMock()),
        )
        await controller.select_file(photo())
        fake_transport.fetch_job_status.return_value = status("processing")

        state = await controller.generate()

        assert state.phase is WorkflowPhase.ERROR
        assert "timed out" in state.last_error
        assert fake_transport.fetch_job_status.await_count == 3

    async def test_regenerate_after_complete(self, controller, fake_transport):
        await controller.select_file(photo())
        await controller.generate()
        fake_transport.fetch_job_status.return_value = status("completed", {"image": "https://x/second.jpg"})

        state = await controller.generate()

        assert state.phase is WorkflowPhase.COMPLETE
        assert state.artifact_reference == "https://x/second.jpg"
        assert fake_transport.submit_job.await_count == 2

    async def test_reset_during_poll_stops_and_discards(self, controller, fake_transport):
        await controller.select_file(photo())

        async def processing_then_reset(job_id):
            controller.reset()
            return status("completed", {"image": "https://x/stale.jpg"})

        fake_transport.fetch_job_status.side_effect = processing_then_reset

        state = await controller.generate()

        assert state.phase is WorkflowPhase.IDLE
        assert state.artifact_reference is None
        assert state.uploaded_reference is None
        fake_transport.fetch_job_status.assert_awaited_once()

    async def test_start_generate_runs_in_background(self, controller, fake_transport):
        await controller.select_file(photo())

        task = controller.start_generate()
        assert controller.state.phase is WorkflowPhase.SUBMITTING
        with pytest.raises(ActionNotAllowed):
            controller.start_generate()

        await task
        assert controller.state.phase is WorkflowPhase.COMPLETE

    async def test_shutdown_cancels_background_work(self, controller, fake_transport):
        await controller.select_file(photo())
        started = asyncio.Event()

        async def hang(job_id):
            started.set()
            await asyncio.Event().wait()

        fake_transport.fetch_job_status.side_effect = hang
        task = controller.start_generate()
        await started.wait()

        await controller.shutdown()

        assert task.cancelled()


@pytest.mark.asyncio
class TestDownload:

    async def test_download_after_complete(self, controller, fake_transport):
        await controller.select_file(photo())
        await controller.generate()

        result = await controller.download()

        assert result.fallback is False
        assert result.content == b"jpeg-bytes"
        assert controller.state.phase is WorkflowPhase.COMPLETE

    async def test_download_falls_back(self, controller, fake_transport):
        await controller.select_file(photo())
        await controller.generate()
        fake_transport.fetch_bytes.side_effect = NetworkUnavailable("https://x/out.jpg")

        result = await controller.download()

        assert result.fallback is True
        assert result.url == "https://x/out.jpg"

    async def test_download_requires_artifact(self, controller):
        with pytest.raises(ActionNotAllowed):
            await controller.download()

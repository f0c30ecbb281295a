"""
Playground controller - the commands a front end invokes.

    select_file(source)  upload the image, then ready | error
    generate()           submit + poll, then complete | error
    start_generate()     same as generate(), scheduled as a background task
    reset()              back to idle; in-flight results are discarded
    download()           fetch the artifact, falling back to the remote URL

All workflow failures end up in the state machine as `error` with a message;
only ActionNotAllowed propagates to the caller.
"""

import asyncio
from typing import Optional, Set

from imagefx.core import (
    get_logger,
    set_generation,
    set_job_id,
    ActionNotAllowed,
    ImageFxError,
    JobSuperseded,
)
from imagefx.models import SourceFile
from ..transport import ApiTransport
from ..use_cases import DownloadResult, DownloadUseCase, GenerationUseCase, UploadUseCase
from .state import WorkflowState, WorkflowStateMachine

logger = get_logger(__name__, component="controller")


class PlaygroundController:

    def __init__(
        self,
        transport: ApiTransport,
        state_machine: Optional[WorkflowStateMachine] = None,
        upload: Optional[UploadUseCase] = None,
        generation: Optional[GenerationUseCase] = None,
        download: Optional[DownloadUseCase] = None,
    ):
        self.state_machine = state_machine or WorkflowStateMachine()
        self.upload_use_case = upload or UploadUseCase(transport)
        self.generation_use_case = generation or GenerationUseCase(transport)
        self.download_use_case = download or DownloadUseCase(transport)
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> WorkflowState:
        return self.state_machine.state

    def _record_failure(self, token: int, error: Exception) -> None:
        if isinstance(error, ImageFxError):
            message = error.user_message
            logger.warning("Workflow step failed", extra={"error_type": type(error).__name__, "error": message})
        else:
            message = str(error) or type(error).__name__
            logger.error("Unexpected workflow failure", extra={"error": message}, exc_info=error)
        self.state_machine.fail(token, message)

    async def select_file(self, source: SourceFile) -> WorkflowState:
        token = self.state_machine.begin_upload()
        set_generation(token)
        try:
            task = await self.upload_use_case.execute(source)
        except Exception as e:
            self._record_failure(token, e)
        else:
            self.state_machine.upload_succeeded(token, task.public_reference)
        return self.state

    async def _run_generation(self, token: int, source_reference: str) -> None:
        set_generation(token)
        machine = self.state_machine
        try:
            job = await self.generation_use_case.submit(source_reference)
            set_job_id(job.job_id)
            if not machine.job_submitted(token, job.job_id):
                return
            artifact = await self.generation_use_case.poll(
                job.job_id,
                on_progress=lambda percent: machine.report_progress(token, percent),
                is_current=lambda: machine.is_current(token),
            )
            machine.job_completed(token, artifact)
        except JobSuperseded:
            logger.info("Stopped polling superseded job", extra={"superseded_generation": token})
        except Exception as e:
            self._record_failure(token, e)

    async def generate(self) -> WorkflowState:
        """Run submit + poll to completion and return the resulting state."""
        token, source_reference = self.state_machine.begin_generate()
        await self._run_generation(token, source_reference)
        return self.state

    def start_generate(self) -> asyncio.Task:
        """Validate and enter `submitting` now; poll in the background.

        Must be called from a running event loop.
        """
        token, source_reference = self.state_machine.begin_generate()
        task = asyncio.get_running_loop().create_task(self._run_generation(token, source_reference))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def reset(self) -> WorkflowState:
        return self.state_machine.reset()

    async def download(self) -> DownloadResult:
        artifact = self.state.artifact_reference
        if artifact is None:
            raise ActionNotAllowed("download", self.state.phase.value)
        return await self.download_use_case.execute(artifact)

    async def shutdown(self) -> None:
        """Cancel background generate tasks still polling."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

"""
Generation use case.

Submits an effect job for an uploaded image and polls it until it resolves.

Polling contract:
    - one status request per attempt, attempts strictly sequential
    - `completed` returns the artifact URL, `failed`/`error` raises JobFailed
    - anything else reports progress, waits one interval and retries
    - after `max_attempts` non-terminal answers JobTimedOut is raised
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from imagefx.config import (
    EFFECT_ID,
    MAX_POLL_ATTEMPTS,
    MODEL,
    POLL_INTERVAL_SECONDS,
    RESULT_IMAGE_KEYS,
    TOOL_TYPE,
)
from imagefx.core import (
    get_logger,
    set_job_id,
    JobFailed,
    JobSuperseded,
    JobTimedOut,
    LogTimer,
    MissingArtifact,
    SubmissionFailed,
    TransportError,
)
from imagefx.models import GenerationJob, JobStatus, JobStatusResponse, SubmitJobRequest
from ..transport import ApiTransport
from .base import UseCase

logger = get_logger(__name__, component="generation")

ProgressCallback = Callable[[int], None]
CurrentCheck = Callable[[], bool]

_VIDEO_URL = re.compile(r"\.(mp4|webm)", re.IGNORECASE)


def progress_percent(attempt: int) -> int:
    """Progress shown after the zero-based `attempt`: 10% per poll, capped at 99."""
    return min(99, (attempt + 1) * 100 // 10)


def extract_artifact(payload: JobStatusResponse) -> str:
    """Image URL of a completed job.

    `result` is either one object or a list whose first element is used. The
    URL lives under `image`, or under `mediaUrl` for older responses.
    """
    result: Any = payload.result
    if isinstance(result, list):
        result = result[0] if result else None
    if not isinstance(result, dict):
        raise MissingArtifact()

    for key in RESULT_IMAGE_KEYS:
        url = result.get(key)
        if isinstance(url, str) and url:
            if _VIDEO_URL.search(url):
                logger.warning("Received video URL for image effect", extra={"url": url})
            return url
    raise MissingArtifact()


@dataclass
class GenerationRequest:
    """Input for a full submit + poll run."""
    source_reference: str
    on_progress: Optional[ProgressCallback] = None
    is_current: Optional[CurrentCheck] = None


class GenerationUseCase(UseCase[GenerationRequest, GenerationJob]):
    """
    Job workflow: submit, then poll.

    `poll_interval`, `max_attempts` and `sleep` are injectable so tests can run
    the full attempt budget without waiting.
    """

    def __init__(
        self,
        transport: ApiTransport,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.transport = transport
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    def build_payload(self, source_reference: str) -> SubmitJobRequest:
        return SubmitJobRequest(
            model=MODEL,
            toolType=TOOL_TYPE,
            effectId=EFFECT_ID,
            imageUrl=source_reference,
            userId=self.transport.user_id,
            removeWatermark=True,
            isPrivate=True,
        )

    async def submit(self, source_reference: str) -> GenerationJob:
        """Submit one job; raises SubmissionFailed on any transport error."""
        try:
            with LogTimer(logger, "submit job"):
                response = await self.transport.submit_job(self.build_payload(source_reference))
        except TransportError as e:
            raise SubmissionFailed(f"Failed to submit job: {e.user_message}", cause=e) from e

        logger.info("Job submitted", extra={"remote_job_id": response.job_id})
        return GenerationJob(job_id=response.job_id, source_reference=source_reference)

    @staticmethod
    def _ensure_current(job_id: str, is_current: Optional[CurrentCheck]) -> None:
        if is_current is not None and not is_current():
            raise JobSuperseded(f"Job {job_id} was superseded")

    async def poll(
        self,
        job_id: str,
        on_progress: Optional[ProgressCallback] = None,
        is_current: Optional[CurrentCheck] = None,
    ) -> str:
        """Poll `job_id` until it resolves; returns the artifact URL."""
        set_job_id(job_id)
        for attempt in range(self.max_attempts):
            self._ensure_current(job_id, is_current)
            try:
                payload = await self.transport.fetch_job_status(job_id)
            except TransportError as e:
                raise JobFailed(f"Failed to check status: {e.user_message}") from e
            self._ensure_current(job_id, is_current)

            status = payload.job_status
            logger.debug(f"Poll {attempt + 1} - Status: {payload.status}")

            if status is JobStatus.COMPLETED:
                artifact = extract_artifact(payload)
                logger.info("Job completed", extra={"attempts": attempt + 1, "artifact": artifact})
                return artifact

            if status is JobStatus.FAILED:
                raise JobFailed(payload.error_message or "Job processing failed")

            if on_progress is not None:
                on_progress(progress_percent(attempt))
            await self._sleep(self.poll_interval)

        logger.warning("Job timed out", extra={"attempts": self.max_attempts})
        raise JobTimedOut(self.max_attempts)

    async def execute(self, request: GenerationRequest) -> GenerationJob:
        job = await self.submit(request.source_reference)
        job.status = JobStatus.PROCESSING
        try:
            job.result_reference = await self.poll(job.job_id, request.on_progress, request.is_current)
        except (JobFailed, JobTimedOut, MissingArtifact):
            job.status = JobStatus.FAILED
            raise
        job.status = JobStatus.COMPLETED
        return job

"""
Core Exceptions
Error taxonomy for the upload -> submit -> poll -> download workflow.

Transport errors describe what went wrong on the wire. Workflow errors wrap them
with the step that failed; their `user_message` is what the state machine shows.
"""

from typing import Optional


class ImageFxError(Exception):
    """Base exception for all application errors."""

    @property
    def user_message(self) -> str:
        return str(self) or self.__class__.__name__


# --- Transport -----------------------------------------------------------

class TransportError(ImageFxError):
    """Base exception for remote call failures."""


class NetworkUnavailable(TransportError):
    """The request never produced a response (DNS, connect, read timeout...)."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        super().__init__(f"Network unavailable for {url}" + (f": {reason}" if reason else ""))


class RequestFailed(TransportError):
    """The server answered with a non-2xx status."""

    def __init__(self, status: int, status_text: str = "", url: str = ""):
        self.status = status
        self.status_text = status_text
        self.url = url
        super().__init__(f"Request failed: {status} {status_text}".rstrip())


class MalformedResponse(TransportError):
    """The body could not be interpreted (bad JSON, missing job id...)."""


class DownloadFailed(TransportError):
    """Fetching the finished artifact failed."""


# --- Workflow ------------------------------------------------------------

class WorkflowError(ImageFxError):
    """Base exception for workflow step failures."""


class InvalidSourceFile(WorkflowError):
    """The selected file cannot be uploaded (empty or not an image)."""


class UploadFailed(WorkflowError):
    """Upload aborted at `stage` ('slot' or 'transfer')."""

    def __init__(self, stage: str, cause: Optional[Exception] = None):
        self.stage = stage
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Upload failed during {stage}{detail}")


class SubmissionFailed(WorkflowError):
    """Job submission failed or returned no job id."""

    def __init__(self, message: str = "Failed to submit job", cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class MissingArtifact(WorkflowError):
    """A completed job carried no image location."""

    def __init__(self, message: str = "No image URL in response"):
        super().__init__(message)


class JobFailed(WorkflowError):
    """The remote job reported failure."""

    def __init__(self, message: str = "Job processing failed"):
        self.message = message
        super().__init__(message)


class JobTimedOut(WorkflowError):
    """The job did not reach a terminal status within the attempt ceiling."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Job timed out after {attempts} status checks")


class JobSuperseded(WorkflowError):
    """A newer workflow action made this job's result irrelevant."""


class ActionNotAllowed(WorkflowError):
    """A command was issued in a phase that does not permit it."""

    def __init__(self, action: str, phase: str):
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} while {phase}")

"""
Job status and workflow phase enumerations.
"""

from enum import Enum


class JobStatus(Enum):
    """Status of a remote generation job as seen by the client."""

    SUBMITTED = "submitted"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_remote(cls, value: str) -> "JobStatus":
        """Map the server's status string; unknown values count as still processing."""
        normalized = (value or "").strip().lower()
        if normalized == "completed":
            return cls.COMPLETED
        if normalized in ("failed", "error"):
            return cls.FAILED
        if normalized == "submitted":
            return cls.SUBMITTED
        return cls.PROCESSING

    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class WorkflowPhase(Enum):
    """User-visible phase of the playground workflow."""

    IDLE = "idle"
    UPLOADING = "uploading"
    READY = "ready"
    SUBMITTING = "submitting"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    def is_busy(self) -> bool:
        """A remote call is in flight; generate and file selection are locked."""
        return self in (WorkflowPhase.UPLOADING, WorkflowPhase.SUBMITTING, WorkflowPhase.PROCESSING)

    def is_terminal(self) -> bool:
        return self in (WorkflowPhase.COMPLETE, WorkflowPhase.ERROR)


# Status line shown for each phase; PROCESSING gains a percentage once polling reports one
PHASE_STATUS_TEXT = {
    WorkflowPhase.IDLE: "",
    WorkflowPhase.UPLOADING: "UPLOADING...",
    WorkflowPhase.READY: "READY",
    WorkflowPhase.SUBMITTING: "SUBMITTING JOB...",
    WorkflowPhase.PROCESSING: "PROCESSING...",
    WorkflowPhase.COMPLETE: "COMPLETE",
    WorkflowPhase.ERROR: "ERROR",
}


__all__ = [
    "JobStatus",
    "WorkflowPhase",
    "PHASE_STATUS_TEXT",
]

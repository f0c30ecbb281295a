"""
Data models: enums, value objects and API schemas
"""

from .status import JobStatus, WorkflowPhase, PHASE_STATUS_TEXT
from .upload import SourceFile, UploadTask
from .jobs import (
    SubmitJobRequest,
    SubmitJobResponse,
    JobStatusResponse,
    GenerationJob,
)
from .state import WorkflowStateResponse

__all__ = [
    "JobStatus",
    "WorkflowPhase",
    "PHASE_STATUS_TEXT",
    "SourceFile",
    "UploadTask",
    "SubmitJobRequest",
    "SubmitJobResponse",
    "JobStatusResponse",
    "GenerationJob",
    "WorkflowStateResponse",
]

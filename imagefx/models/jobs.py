"""
Generation job models

Dataclasses for the client's view of a job plus pydantic schemas for the
remote API's JSON bodies.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .status import JobStatus


class SubmitJobRequest(BaseModel):
    """Body of POST /image-gen"""
    model: str
    toolType: str
    effectId: str
    imageUrl: str
    userId: str
    removeWatermark: bool = True
    isPrivate: bool = True


class SubmitJobResponse(BaseModel):
    """Reply to a submission; only the job id is relied on"""
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    job_id: str = Field(alias="jobId", min_length=1)


class JobStatusResponse(BaseModel):
    """Reply to GET .../status

    Fields are left untyped: a null or unknown status still means "keep
    polling", and a completed result of the wrong shape is reported by the
    artifact extraction, not rejected here.
    """
    model_config = ConfigDict(extra="allow")

    status: Optional[Any] = None
    result: Optional[Any] = None
    error: Optional[Any] = None

    @property
    def job_status(self) -> JobStatus:
        return JobStatus.from_remote("" if self.status is None else str(self.status))

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None or self.error == "":
            return None
        return self.error if isinstance(self.error, str) else str(self.error)


@dataclass
class GenerationJob:
    """A submitted job; `result_reference` is set once it completes."""
    job_id: str
    source_reference: str
    status: JobStatus = JobStatus.SUBMITTED
    result_reference: Optional[str] = None

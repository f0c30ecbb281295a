"""
API schema for the workflow state snapshot
"""

from typing import Optional

from pydantic import BaseModel


class WorkflowStateResponse(BaseModel):
    """What a front end needs to render the playground"""
    phase: str
    status_text: str
    action_label: str
    can_generate: bool
    can_reset: bool
    can_download: bool
    progress: Optional[int] = None  # percent, only while processing
    uploaded_reference: Optional[str] = None
    artifact_reference: Optional[str] = None
    last_error: Optional[str] = None
    job_id: Optional[str] = None

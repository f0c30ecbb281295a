"""
Workflow state machine

`WorkflowState` is an immutable snapshot; every transition builds a new one and
swaps it in, so observers never see a half-applied change.

Phases:
    idle -> uploading -> ready -> submitting -> processing -> complete | error
    complete | error -> submitting (generate again) or uploading (new file)
    any -> idle (reset)

Every operation that starts remote work (file selection, generate) and every
reset bumps `generation`. Results are committed with the generation they were
started under; a stale generation is discarded, which keeps a late response
from a superseded job from overwriting newer state.
"""

from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from imagefx.core import get_logger, ActionNotAllowed
from imagefx.models import PHASE_STATUS_TEXT, WorkflowPhase, WorkflowStateResponse

logger = get_logger(__name__, component="workflow_state")

GENERATE_LABEL = "GENERATE MUGSHOT"
GENERATE_AGAIN_LABEL = "GENERATE AGAIN"

StateListener = Callable[["WorkflowState"], None]


@dataclass(frozen=True)
class WorkflowState:
    phase: WorkflowPhase = WorkflowPhase.IDLE
    uploaded_reference: Optional[str] = None
    artifact_reference: Optional[str] = None
    last_error: Optional[str] = None
    progress: Optional[int] = None
    job_id: Optional[str] = None
    generation: int = 0

    def __post_init__(self):
        if self.phase is WorkflowPhase.READY and (self.uploaded_reference is None or self.artifact_reference is not None):
            raise ValueError("ready requires an uploaded reference and no artifact")
        if (self.phase is WorkflowPhase.COMPLETE) != (self.artifact_reference is not None):
            raise ValueError("artifact reference is set exactly when complete")

    @property
    def status_text(self) -> str:
        if self.phase is WorkflowPhase.PROCESSING and self.progress is not None:
            return f"PROCESSING... {self.progress}%"
        return PHASE_STATUS_TEXT[self.phase]

    @property
    def can_generate(self) -> bool:
        return self.uploaded_reference is not None and self.phase in (
            WorkflowPhase.READY,
            WorkflowPhase.COMPLETE,
            WorkflowPhase.ERROR,
        )

    @property
    def can_select_file(self) -> bool:
        return not self.phase.is_busy()

    @property
    def can_download(self) -> bool:
        return self.artifact_reference is not None

    @property
    def can_reset(self) -> bool:
        return self.phase is not WorkflowPhase.IDLE

    @property
    def action_label(self) -> str:
        if self.phase.is_busy():
            return self.status_text
        if self.phase is WorkflowPhase.COMPLETE:
            return GENERATE_AGAIN_LABEL
        return GENERATE_LABEL

    def to_response(self) -> WorkflowStateResponse:
        return WorkflowStateResponse(
            phase=self.phase.value,
            status_text=self.status_text,
            action_label=self.action_label,
            can_generate=self.can_generate,
            can_reset=self.can_reset,
            can_download=self.can_download,
            progress=self.progress,
            uploaded_reference=self.uploaded_reference,
            artifact_reference=self.artifact_reference,
            last_error=self.last_error,
            job_id=self.job_id,
        )


class WorkflowStateMachine:
    """Single source of truth for the playground phase.

    `begin_*` methods validate and start a step, returning its generation
    token. Commit methods take that token and return False (leaving state
    untouched) when the token is stale or the phase no longer matches.
    """

    def __init__(self, initial: Optional[WorkflowState] = None):
        self._state = initial or WorkflowState()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> WorkflowState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` with every new snapshot; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_current(self, generation: int) -> bool:
        return self._state.generation == generation

    def _commit(self, new_state: WorkflowState) -> WorkflowState:
        previous = self._state
        self._state = new_state
        if previous.phase is not new_state.phase:
            logger.info(f"Phase {previous.phase.value} -> {new_state.phase.value}", extra={
                "state_generation": new_state.generation,
            })
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.error("State listener failed", exc_info=True)
        return new_state

    def _accepts(self, generation: int, *phases: WorkflowPhase) -> bool:
        if not self.is_current(generation):
            logger.info("Discarding stale result", extra={
                "stale_generation": generation,
                "current_generation": self._state.generation,
            })
            return False
        return self._state.phase in phases

    # --- file selection ---------------------------------------------------

    def begin_upload(self) -> int:
        state = self._state
        if not state.can_select_file:
            raise ActionNotAllowed("select a file", state.phase.value)
        generation = state.generation + 1
        self._commit(WorkflowState(phase=WorkflowPhase.UPLOADING, generation=generation))
        return generation

    def upload_succeeded(self, generation: int, uploaded_reference: str) -> bool:
        if not self._accepts(generation, WorkflowPhase.UPLOADING):
            return False
        self._commit(replace(
            self._state,
            phase=WorkflowPhase.READY,
            uploaded_reference=uploaded_reference,
        ))
        return True

    # --- generation -------------------------------------------------------

    def begin_generate(self) -> Tuple[int, str]:
        """Start a generate run; returns (generation, uploaded reference)."""
        state = self._state
        if not state.can_generate:
            raise ActionNotAllowed("generate", state.phase.value)
        generation = state.generation + 1
        self._commit(WorkflowState(
            phase=WorkflowPhase.SUBMITTING,
            uploaded_reference=state.uploaded_reference,
            generation=generation,
        ))
        return generation, state.uploaded_reference

    def job_submitted(self, generation: int, job_id: str) -> bool:
        if not self._accepts(generation, WorkflowPhase.SUBMITTING):
            return False
        self._commit(replace(self._state, phase=WorkflowPhase.PROCESSING, job_id=job_id))
        return True

    def report_progress(self, generation: int, percent: int) -> bool:
        """Progress updates never change the phase."""
        if not self._accepts(generation, WorkflowPhase.PROCESSING):
            return False
        self._commit(replace(self._state, progress=percent))
        return True

    def job_completed(self, generation: int, artifact_reference: str) -> bool:
        if not self._accepts(generation, WorkflowPhase.PROCESSING):
            return False
        self._commit(replace(
            self._state,
            phase=WorkflowPhase.COMPLETE,
            artifact_reference=artifact_reference,
            progress=None,
        ))
        return True

    # --- failure / reset --------------------------------------------------

    def fail(self, generation: int, message: str) -> bool:
        """Move a busy step to error. The uploaded reference survives a failed generate."""
        if not self._accepts(generation, WorkflowPhase.UPLOADING, WorkflowPhase.SUBMITTING, WorkflowPhase.PROCESSING):
            return False
        self._commit(replace(
            self._state,
            phase=WorkflowPhase.ERROR,
            last_error=message,
            artifact_reference=None,
            progress=None,
        ))
        return True

    def reset(self) -> WorkflowState:
        return self._commit(WorkflowState(generation=self._state.generation + 1))

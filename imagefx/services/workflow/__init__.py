"""
Workflow package - the state machine and the commands that drive it
"""

from .state import WorkflowState, WorkflowStateMachine, GENERATE_LABEL, GENERATE_AGAIN_LABEL
from .controller import PlaygroundController

__all__ = [
    "WorkflowState",
    "WorkflowStateMachine",
    "GENERATE_LABEL",
    "GENERATE_AGAIN_LABEL",
    "PlaygroundController",
]

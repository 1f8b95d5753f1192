"""
Runner module - orchestrates the before/after capture workflow.

- StateMachine: valid workflow transitions and history
- CaptureSession: capture, diff and command generation for one run
"""

from .state import StateMachine, State, StateEvent
from .session import CaptureSession

__all__ = [
    "StateMachine",
    "State",
    "StateEvent",
    "CaptureSession",
]

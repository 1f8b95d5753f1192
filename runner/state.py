"""
StateMachine - Manages the before/after capture workflow.

INITIAL → CAPTURING_BEFORE → WAITING_FOR_CHANGES → CAPTURING_AFTER → DIFF_READY
                 ↓                                        ↓
               FAILED                                   FAILED

reset() returns to INITIAL from any state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from ..protocol.errors import InvalidTransition

log = get_logger("workflow")


class State(Enum):
    """Capture workflow states."""
    INITIAL = auto()
    CAPTURING_BEFORE = auto()
    WAITING_FOR_CHANGES = auto()
    CAPTURING_AFTER = auto()
    DIFF_READY = auto()
    FAILED = auto()


# Valid state transitions
TRANSITIONS: Dict[State, List[State]] = {
    State.INITIAL: [State.CAPTURING_BEFORE],
    State.CAPTURING_BEFORE: [State.WAITING_FOR_CHANGES, State.FAILED],
    State.WAITING_FOR_CHANGES: [State.CAPTURING_AFTER],
    State.CAPTURING_AFTER: [State.DIFF_READY, State.FAILED],
    State.DIFF_READY: [],
    State.FAILED: [],
}


@dataclass
class StateEvent:
    """Record of a state transition."""
    from_state: State
    to_state: State
    timestamp: datetime
    duration_ms: int
    metadata: Dict[str, Any] = field(default_factory=dict)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StateMachine:
    """
    Manages state transitions for the capture workflow.

    Ensures valid transitions and tracks history.
    """

    def __init__(self, initial_state: State = State.INITIAL):
        self._state = initial_state
        self._history: List[StateEvent] = []
        self._state_entered_at = _now()

    @property
    def state(self) -> State:
        """Get current state."""
        return self._state

    @property
    def history(self) -> List[StateEvent]:
        """Get state transition history."""
        return self._history.copy()

    def can_transition(self, to_state: State) -> bool:
        """Check if transition to target state is valid."""
        return to_state in TRANSITIONS.get(self._state, [])

    def transition(self, to_state: State, metadata: Optional[Dict[str, Any]] = None) -> StateEvent:
        """
        Transition to a new state.

        Args:
            to_state: Target state
            metadata: Optional data about the transition

        Raises:
            InvalidTransition: If transition is not valid
        """
        if not self.can_transition(to_state):
            raise InvalidTransition(
                f"Invalid transition: {self._state.name} → {to_state.name}. "
                f"Valid transitions: {[s.name for s in TRANSITIONS.get(self._state, [])]}"
            )

        now = _now()
        event = StateEvent(
            from_state=self._state,
            to_state=to_state,
            timestamp=now,
            duration_ms=int((now - self._state_entered_at).total_seconds() * 1000),
            metadata=metadata or {},
        )
        self._history.append(event)
        self._state = to_state
        self._state_entered_at = now
        log.debug("{} → {}", event.from_state.name, to_state.name)

        return event

    def is_terminal(self) -> bool:
        """Check if in terminal state (DIFF_READY or FAILED)."""
        return self._state in (State.DIFF_READY, State.FAILED)

    def is_capturing(self) -> bool:
        return self._state in (State.CAPTURING_BEFORE, State.CAPTURING_AFTER)

    def reset(self):
        """Reset state machine to initial state."""
        self._state = State.INITIAL
        self._history = []
        self._state_entered_at = _now()

    def format_history(self) -> str:
        """Format history as human-readable string."""
        return '\n'.join(
            f"{event.from_state.name} → {event.to_state.name} ({event.duration_ms}ms)"
            for event in self._history
        )

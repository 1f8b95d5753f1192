"""
CaptureSession - drives one before/after capture and produces commands.
"""

from typing import Callable, List, Optional

from ..command.generator import DEFAULT_EXECUTABLE, generate
from ..command.models import CommandLine
from ..differ.engine import diff
from ..logging_utils import get_logger
from ..protocol.changes import ChangeSet
from ..protocol.errors import CaptureError
from ..snapshot.models import Snapshot
from .state import State, StateMachine

log = get_logger("session")


class CaptureSession:
    """
    Before/after capture workflow.

    Usage:
        session = CaptureSession(SnapshotCapture(config.capture))
        session.capture_before()
        # ... user changes settings ...
        change_set = session.capture_after()
        for command in session.commands:
            print(command.text)
    """

    def __init__(self, capture, executable: str = DEFAULT_EXECUTABLE):
        """
        Args:
            capture: Object with capture(progress=None) -> Snapshot
            executable: Command name used in generated lines
        """
        self.capture = capture
        self.executable = executable
        self.machine = StateMachine()
        self.before: Optional[Snapshot] = None
        self.after: Optional[Snapshot] = None
        self.change_set: Optional[ChangeSet] = None
        self.commands: List[CommandLine] = []
        self.error: Optional[str] = None

    @property
    def state(self) -> State:
        return self.machine.state

    def capture_before(self, progress: Optional[Callable[[str], None]] = None) -> Snapshot:
        """
        Take the "before" snapshot.

        Raises:
            InvalidTransition: not in INITIAL state
            CaptureError: capture failed (session moves to FAILED)
        """
        self.machine.transition(State.CAPTURING_BEFORE)
        self.before = self._capture(progress)
        self.machine.transition(
            State.WAITING_FOR_CHANGES,
            {"domains": self.before.domain_count, "keys": self.before.key_count},
        )
        return self.before

    def capture_after(self, progress: Optional[Callable[[str], None]] = None) -> ChangeSet:
        """
        Take the "after" snapshot, diff it and generate commands.

        Raises:
            InvalidTransition: before snapshot not taken yet
            CaptureError: capture failed (session moves to FAILED)
        """
        self.machine.transition(State.CAPTURING_AFTER)
        self.after = self._capture(progress)

        self.change_set = diff(self.before, self.after)
        self.commands = generate(self.change_set, executable=self.executable)
        self.machine.transition(
            State.DIFF_READY,
            {"changes": self.change_set.total_changes, "commands": len(self.commands)},
        )
        log.info(
            "{} changes in {} domains",
            self.change_set.total_changes,
            len(self.change_set),
        )
        self._log_history()
        return self.change_set

    def reset(self):
        """Discard snapshots and results and start over."""
        self.machine.reset()
        self.before = None
        self.after = None
        self.change_set = None
        self.commands = []
        self.error = None

    def status_message(self) -> str:
        """One-line status for the current state."""
        state = self.state
        if self.machine.is_capturing():
            return "Capturing..."
        if state == State.INITIAL:
            return "Ready to capture the before snapshot"
        if state == State.WAITING_FOR_CHANGES:
            return f"Captured {self.before.domain_count} domains; make your changes now"
        if state == State.DIFF_READY:
            total = self.change_set.total_changes
            if total == 0:
                return "No changes detected"
            return f"Found {total} change{'' if total == 1 else 's'}"
        return f"Capture failed: {self.error}"

    def _capture(self, progress: Optional[Callable[[str], None]]) -> Snapshot:
        try:
            return self.capture.capture(progress=progress)
        except CaptureError as e:
            self.error = str(e)
            self.machine.transition(State.FAILED, {"error": self.error})
            log.error("Capture failed: {}", e)
            self._log_history()
            raise

    def _log_history(self):
        if self.machine.is_terminal():
            log.debug("Workflow finished:\n{}", self.machine.format_history())

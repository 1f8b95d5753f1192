"""
Clipboard export through an external command (pbcopy by default).
"""

import shlex
import subprocess
from typing import Callable, Optional

from ..logging_utils import get_logger
from ..protocol.errors import ClipboardError

log = get_logger("clipboard")


def copy_to_clipboard(
    text: str,
    command: str = "pbcopy",
    runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
) -> None:
    """
    Pipe text into the clipboard command.

    Raises:
        ClipboardError: command missing, failed or timed out
    """
    run = runner or subprocess.run
    args = shlex.split(command)
    try:
        result = run(args, input=text.encode("utf-8"), capture_output=True, timeout=10)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise ClipboardError(f"Cannot run clipboard command {command!r}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip() if result.stderr else ""
        raise ClipboardError(f"{command} exited with {result.returncode}: {stderr}")

    log.debug("Copied {} characters to clipboard", len(text))

"""
CLI - Command-line interface for prefdiff.

Workflow: capture a "before" snapshot, let the user change settings,
capture an "after" snapshot, then print the changes as `defaults`
commands. The rich display goes to stderr; stdout only carries the
script or JSON output so it can be redirected.
"""

import argparse
import json
import sys
import time
from typing import List, Optional

from rich.console import Console

from . import __version__
from .command.models import render_script
from .config import Config, create_example_config
from .logging_utils import configure_logging, get_logger
from .protocol.errors import CaptureError, ClipboardError
from .runner.session import CaptureSession
from .snapshot.capture import SnapshotCapture
from .ui.clipboard import copy_to_clipboard
from .ui.display import ChangeSetDisplay

log = get_logger("cli")

EXIT_OK = 0
EXIT_CAPTURE_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="prefdiff",
        description="Capture preference changes as replayable defaults commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    prefdiff                          # interactive before/after capture
    prefdiff --script > settings.sh   # write commands as a shell script
    prefdiff -d 'com.apple.dock' -d 'com.apple.finder' --copy
    prefdiff --json --wait 30         # non-interactive, 30s to make changes

Environment Variables:
    PREFDIFF_EXECUTABLE    defaults tool to run (default: defaults)
    PREFDIFF_MAX_WORKERS   parallel domain exports
    PREFDIFF_TIMEOUT       seconds per defaults invocation
    PREFDIFF_LOG_LEVEL     log level (default: WARNING)
    PREFDIFF_LOG_DIR       directory for log files
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="Path to TOML config file")
    parser.add_argument(
        "--init-config",
        nargs="?",
        const="prefdiff.toml",
        metavar="PATH",
        help="Write an example config file and exit",
    )

    capture_group = parser.add_argument_group("Capture")
    capture_group.add_argument(
        "-d", "--domain",
        action="append",
        metavar="PATTERN",
        help="Only capture domains matching PATTERN (repeatable, fnmatch syntax)",
    )
    capture_group.add_argument(
        "-x", "--exclude",
        action="append",
        metavar="PATTERN",
        help="Skip domains matching PATTERN (repeatable)",
    )
    capture_group.add_argument(
        "--no-global",
        action="store_true",
        help="Do not capture NSGlobalDomain",
    )
    capture_group.add_argument("--workers", type=int, help="Parallel domain exports")
    capture_group.add_argument("--timeout", type=int, help="Seconds per defaults invocation")
    capture_group.add_argument("--executable", help="defaults tool to run")
    capture_group.add_argument(
        "--wait",
        type=float,
        metavar="SECONDS",
        help="Wait SECONDS between snapshots instead of prompting",
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument(
        "--script",
        action="store_true",
        help="Print commands as a shell script on stdout",
    )
    output_group.add_argument("--json", action="store_true", help="Print JSON on stdout")
    output_group.add_argument("--copy", action="store_true", help="Copy commands to the clipboard")
    output_group.add_argument("-q", "--quiet", action="store_true", help="Suppress the display")
    output_group.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    output_group.add_argument("--log-dir", help="Directory for log files")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, capture=None, console: Optional[Console] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments (defaults to sys.argv[1:])
        capture: Snapshot source overriding SnapshotCapture (used by tests)
        console: Console for the display (defaults to stderr)

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    console = console or Console(stderr=True)

    if args.init_config:
        try:
            path = create_example_config(args.init_config)
        except FileExistsError as e:
            console.print(f"[red]{e}[/]")
            return EXIT_CONFIG_ERROR
        console.print(f"[green]Wrote {path}[/]")
        return EXIT_OK

    try:
        config = Config.load(args.config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error:[/] {e}")
        return EXIT_CONFIG_ERROR
    config.override_from_args(args)

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Configuration error:[/] {error}")
        return EXIT_CONFIG_ERROR

    configure_logging(config.output.log_level, config.output.log_dir)
    log.debug("Configuration:\n{}", config.summary())

    display = ChangeSetDisplay(console=console, quiet=config.output.quiet)
    session = CaptureSession(
        capture or SnapshotCapture(config.capture),
        executable=config.capture.executable,
    )

    try:
        return _run(session, display, config, args)
    except KeyboardInterrupt:
        display.print_status("Interrupted", style="yellow")
        return EXIT_INTERRUPTED


def _run(session: CaptureSession, display: ChangeSetDisplay, config: Config, args) -> int:
    display.print_banner(__version__)

    try:
        before = _capture(session.capture_before, display, "Capturing before snapshot")
    except CaptureError as e:
        display.print_error(str(e))
        return EXIT_CAPTURE_FAILED
    display.print_status(f"Before: {before.summary()}", style="green")

    if args.wait is not None:
        display.print_status(f"Waiting {args.wait:g}s for changes...")
        time.sleep(args.wait)
    else:
        display.console.input(
            "[bold cyan]Change your settings, then press Enter to capture the after snapshot[/] "
        )

    try:
        change_set = _capture(session.capture_after, display, "Capturing after snapshot")
    except CaptureError as e:
        display.print_error(str(e))
        return EXIT_CAPTURE_FAILED
    display.print_status(f"After: {session.after.summary()}", style="green")

    display.show_change_set(change_set)
    display.show_commands(session.commands)
    display.print_status(session.status_message())

    if config.output.json:
        payload = {
            "before": session.before.summary(),
            "after": session.after.summary(),
            "changes": change_set.to_dict(),
            "commands": [c.to_dict() for c in session.commands],
        }
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    elif config.output.script:
        sys.stdout.write(render_script(session.commands))

    if args.copy and session.commands:
        try:
            copy_to_clipboard(
                render_script(session.commands, header=False),
                command=config.clipboard.command,
            )
            display.print_status(f"Copied {len(session.commands)} command(s) to clipboard", style="green")
        except ClipboardError as e:
            display.print_error(str(e))

    return EXIT_OK


def _capture(step, display: ChangeSetDisplay, label: str):
    if display.quiet:
        return step()

    count = 0
    with display.console.status(f"{label}...") as status:
        def progress(domain: str):
            nonlocal count
            count += 1
            status.update(f"{label}... {count} domains")

        return step(progress=progress)

import io
import subprocess

import pytest
from rich.console import Console

from prefdiff.command import generate
from prefdiff.differ import diff
from prefdiff.protocol.changes import Added, Modified, Removed
from prefdiff.protocol.errors import ClipboardError
from prefdiff.protocol.values import Integer, String, array
from prefdiff.ui import ChangeSetDisplay, copy_to_clipboard, format_change

from mocks import make_snapshot


def _display(quiet: bool = False) -> ChangeSetDisplay:
    return ChangeSetDisplay(console=Console(file=io.StringIO(), width=120), quiet=quiet)


def test_format_change() -> None:
    assert format_change(Added("tilesize", Integer(48))) == "+ tilesize: 48"
    assert format_change(Removed("style", String("Dark"))) == '- style: "Dark"'
    assert format_change(Modified("apps", array([1]), array([1, 2]))) == "~ apps: [1 items] → [2 items]"


def test_show_change_set(before_snapshot, after_snapshot) -> None:
    display = _display()
    change_set = diff(before_snapshot, after_snapshot)

    display.show_change_set(change_set)
    display.show_commands(generate(change_set))

    output = display.console.file.getvalue()
    assert "7 change(s) in 3 domain(s)" in output
    assert "new domain" in output
    assert "~ tilesize: 36 → 48" in output
    assert "nested array written as a plist literal" in output


def test_show_warnings() -> None:
    display = _display()
    before = make_snapshot({"com.example.locked": {"k": 1}})
    after = make_snapshot({}, unreadable=["com.example.locked"])

    display.show_change_set(diff(before, after))

    output = display.console.file.getvalue()
    assert "No changes detected" in output
    assert "com.example.locked: unreadable in after snapshot" in output


def test_markup_in_values_is_escaped() -> None:
    display = _display()
    before = make_snapshot({})
    after = make_snapshot({"d": {"k": "[bold]x[/bold]"}})

    display.show_change_set(diff(before, after))

    assert "[bold]x[/bold]" in display.console.file.getvalue()


def test_quiet_display_only_shows_errors() -> None:
    display = _display(quiet=True)

    display.print_banner("0.0.0")
    display.print_status("hidden")
    display.print_error("visible")

    output = display.console.file.getvalue()
    assert "hidden" not in output
    assert "visible" in output


def test_copy_to_clipboard() -> None:
    calls = []

    def runner(args, input=None, capture_output=True, timeout=None):
        calls.append((args, input))
        return subprocess.CompletedProcess(args, 0, b"", b"")

    copy_to_clipboard("defaults delete d k\n", command="xclip -selection clipboard", runner=runner)

    assert calls == [(["xclip", "-selection", "clipboard"], b"defaults delete d k\n")]


def test_copy_to_clipboard_failure() -> None:
    def runner(args, **kwargs):
        return subprocess.CompletedProcess(args, 1, b"", b"no pasteboard")

    with pytest.raises(ClipboardError, match="no pasteboard"):
        copy_to_clipboard("text", runner=runner)


def test_copy_to_clipboard_missing_command() -> None:
    def runner(args, **kwargs):
        raise FileNotFoundError(args[0])

    with pytest.raises(ClipboardError):
        copy_to_clipboard("text", runner=runner)

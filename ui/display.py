"""
ChangeSetDisplay - Rich console rendering of diffs and commands.

Shows:
- Changed domains as a tree (+ added, - removed, ~ modified keys)
- Generated commands, with degraded ones flagged
- Unreadable-domain warnings
"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ..command.models import CommandKind, CommandLine
from ..protocol.changes import (
    Added,
    ChangeSet,
    DomainChange,
    DomainChangeKind,
    KeyChange,
    Modified,
    Removed,
)
from ..protocol.values import describe

DOMAIN_STYLES = {
    DomainChangeKind.ADDED: ("new domain", "green"),
    DomainChangeKind.REMOVED: ("domain removed", "red"),
    DomainChangeKind.MODIFIED: ("modified", "yellow"),
}


def format_change(change: KeyChange) -> str:
    """Plain one-line description of a key change."""
    if isinstance(change, Added):
        return f"+ {change.key}: {describe(change.new_value)}"
    if isinstance(change, Removed):
        return f"- {change.key}: {describe(change.old_value)}"
    if isinstance(change, Modified):
        return (
            f"~ {change.key}: {describe(change.old_value)} → {describe(change.new_value)}"
        )
    raise TypeError(f"Not a key change: {change!r}")


class ChangeSetDisplay:
    """
    Rich console output for a capture run.
    """

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or Console(stderr=True)
        self.quiet = quiet

    def print(self, *args, **kwargs):
        """Print to console."""
        if self.quiet:
            return
        self.console.print(*args, **kwargs)

    def print_banner(self, version: str):
        if self.quiet:
            return
        banner = (
            f"[bold cyan]prefdiff[/] [dim]v{version}[/]\n"
            "[dim]Capture preference changes as defaults commands[/]"
        )
        self.console.print(Panel(banner, border_style="cyan"))

    def print_status(self, message: str, style: str = "cyan"):
        self.print(f"[{style}]{escape(message)}[/]")

    def print_error(self, message: str):
        # Errors are shown even in quiet mode
        self.console.print(Panel(escape(message), title="Error", border_style="red"))

    def show_change_set(self, change_set: ChangeSet):
        """Tree of changed domains and keys."""
        if self.quiet:
            return

        if not change_set.domain_changes:
            self.console.print("[yellow]No changes detected[/]")
        else:
            tree = Tree(
                f"[bold]{change_set.total_changes} change(s) in {len(change_set)} domain(s)[/]"
            )
            for domain_change in change_set:
                self._add_domain(tree, domain_change)
            self.console.print(tree)

        self.show_warnings(change_set)

    def _add_domain(self, tree: Tree, domain_change: DomainChange):
        label, color = DOMAIN_STYLES[domain_change.kind]
        node = tree.add(f"[bold {color}]{escape(domain_change.domain)}[/] [dim]({label})[/]")
        for change in domain_change:
            if isinstance(change, Added):
                style = "green"
            elif isinstance(change, Removed):
                style = "red"
            else:
                style = "yellow"
            node.add(f"[{style}]{escape(format_change(change))}[/]")

    def show_warnings(self, change_set: ChangeSet):
        if self.quiet or not change_set.warnings:
            return
        body = "\n".join(escape(w.message) for w in change_set.warnings)
        self.console.print(Panel(
            body,
            title=f"{len(change_set.warnings)} domain(s) not compared",
            border_style="yellow",
        ))

    def show_commands(self, commands: List[CommandLine]):
        """Table of generated commands."""
        if self.quiet or not commands:
            return

        table = Table(title="Commands", box=box.ROUNDED, show_lines=False)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Kind", width=6)
        table.add_column("Command", overflow="fold")

        for i, command in enumerate(commands, 1):
            kind_style = "green" if command.kind == CommandKind.WRITE else "red"
            text = escape(command.text)
            if command.degraded:
                text += f"\n[yellow]⚠ {escape(command.note or 'degraded')}[/]"
            table.add_row(str(i), f"[{kind_style}]{command.kind.value.lower()}[/]", text)

        self.console.print(table)

        degraded = sum(1 for c in commands if c.degraded)
        if degraded:
            self.console.print(
                f"[yellow]{degraded} command(s) could not be expressed exactly; review before use[/]"
            )

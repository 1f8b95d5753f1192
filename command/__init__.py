"""
Command generation - turns a ChangeSet into replayable `defaults` commands.

Commands are generated as text only; nothing here executes them.
"""

from .models import CommandKind, CommandLine, render_script
from .generator import generate, generate_command, encode_value, format_float

__all__ = [
    'CommandKind',
    'CommandLine',
    'render_script',
    'generate',
    'generate_command',
    'encode_value',
    'format_float',
]

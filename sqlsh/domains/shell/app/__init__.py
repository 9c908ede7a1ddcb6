"""Shell application layer."""

from .commands import ShellState, command_names, run_command
from .shell import Shell, ready_to_submit

__all__ = ["Shell", "ShellState", "command_names", "ready_to_submit", "run_command"]

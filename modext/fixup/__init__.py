"""Reconciliation of reported direct dependencies with ``use_repo`` imports."""

from .commands import emit_commands, make_use_repo_command
from .diff import ImportDiff, compute_diff
from .reconcile import DEFAULT_FIX_COMMAND, compose_message, generate_fixup

__all__ = [
    "DEFAULT_FIX_COMMAND",
    "ImportDiff",
    "compose_message",
    "compute_diff",
    "emit_commands",
    "generate_fixup",
    "make_use_repo_command",
]

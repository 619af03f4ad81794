"""Cached command - format changes in git staging."""

from __future__ import annotations

from branchfmt.commands.context import CommandContext
from branchfmt.errors import ExternalToolFailure


def cmd_cached(context: CommandContext, force: bool = False) -> int:
    """Format the staged changes, leaving the result unstaged.

    Args:
        context: Wired services
        force: Allow changes to files with unstaged changes

    Returns:
        Exit code (0 for success)
    """
    try:
        result = context.formatter.format_staged(allow_unstaged=force)
    except ExternalToolFailure as e:
        raise ExternalToolFailure(f"Cannot reformat staging. git clang-format failed\n{e}") from e

    if result.raw_output.strip():
        print(result.raw_output.rstrip())
    return 0

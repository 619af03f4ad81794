"""Branch command - format all branch changes for an additional commit.

Thin command that wires services together. The formatted code is left
unstaged; this command never commits.
"""

from __future__ import annotations

from branchfmt.commands.context import CommandContext
from branchfmt.errors import ExternalToolFailure, NoBranchDivergence


def cmd_branch(context: CommandContext, force: bool = False) -> int:
    """Format every line changed on the branch since its fork point.

    Args:
        context: Wired services
        force: Allow changes to files with unstaged changes

    Returns:
        Exit code (0 for success)

    Raises:
        UnstagedChangesPresent: If unstaged files would be touched without force
        ExternalToolFailure: If the formatter fails
    """
    try:
        baseline, result = context.formatter.format_branch(allow_unstaged=force)
    except NoBranchDivergence as e:
        print(e)
        return 0
    except ExternalToolFailure as e:
        raise ExternalToolFailure(f"Cannot reformat branch. git clang-format failed\n{e}") from e

    print(f"First commit on branch: {baseline}")
    if result.raw_output.strip():
        print(result.raw_output.rstrip())
    return 0

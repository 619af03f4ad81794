"""Rewrite-branch command - format every branch commit and rewrite history."""

from __future__ import annotations

from branchfmt.commands.context import CommandContext
from branchfmt.domain.rewrite import RewriteState


def cmd_rewrite_branch(context: CommandContext) -> int:
    """Rewrite the current branch with every commit formatted.

    Args:
        context: Wired services

    Returns:
        Exit code (0 for success)

    Raises:
        ProtectedBranchRewrite: On the protected branch
        ExternalToolFailure: If rewriting any commit fails
    """
    outcome = context.rewriter.rewrite()

    if outcome.state is RewriteState.ALREADY_COMPLIANT:
        print("no modified files to format")
        return 0

    print(f"First commit on branch: {outcome.baseline}")
    if not outcome.changed_history:
        print("Formatting did not change any commit")
        return 0

    print(f"Rewrote {outcome.rewritten} commits: {outcome.old_tip[:12]} -> {outcome.new_tip[:12]}")
    print(f"Previous history saved as {outcome.backup_ref}")
    return 0

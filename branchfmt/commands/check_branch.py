"""Check-branch command - verify formatting of the branch changes.

Output order matters: the diff or diffstat body comes first and the branch
commits after it, so piping through tail still shows the commits. Error
messages come last.
"""

from __future__ import annotations

import logging
import sys

from branchfmt.commands.context import CommandContext
from branchfmt.help_text import PROG
from branchfmt.infrastructure.terminal import print_error
from branchfmt.services.compliance_checker import ComplianceChecker

LOG = logging.getLogger(__name__)


def cmd_check_branch(
    context: CommandContext,
    diff: bool = False,
    diffstat: bool = False,
    show_commits: bool = False,
    make: bool = False,
    quiet: bool = False,
) -> int:
    """Check if the branch changes are correctly formatted.

    Args:
        context: Wired services
        diff: Print the formatting diff of each file
        diffstat: Print the files needing formatting
        show_commits: Print the branch commits
        make: Suggest make targets instead of branch-format commands
        quiet: Print nothing about the verdict; only the exit code tells

    Returns:
        Exit code (0 if compliant, 1 if formatting is off)

    Raises:
        UsageError: If both diff and diffstat are requested
    """
    output = ComplianceChecker.output_for(diff=diff, diffstat=diffstat)
    verdict = context.checker.check(output, show_commits=show_commits)
    style = context.style

    if output.shows_body and verdict.has_branch_commits:
        print(verdict.evidence.rstrip("\n"))
        print()

    if verdict.commits_log is not None:
        print("Commits on branch:")
        print(verdict.commits_log.rstrip("\n"))
        print()
    elif not quiet and verdict.baseline:
        print(f"First commit on branch: {verdict.baseline}")

    if verdict.compliant:
        if not quiet:
            print("no modified files to format")
        return 0

    if quiet:
        return 1

    sys.stdout.flush()
    print_error("Branch requires formatting", style)
    if make:
        print_error(f"View required changes with: {style.i('make diff-style-branch')}", style)
        print_error(
            f"Use {style.i('make style-rewrite-branch')} or {style.i('make style-branch')} "
            "to fix formatting",
            style,
        )
    else:
        print_error(
            f"View required changes with: {style.i(f'{PROG} check-branch --diff')}", style
        )
        print_error(
            f"Use {style.i(f'{PROG} rewrite-branch')} or {style.i(f'{PROG} branch')} "
            "to fix formatting",
            style,
        )
    return 1

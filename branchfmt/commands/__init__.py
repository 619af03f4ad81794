"""CLI command implementations."""

from branchfmt.commands.branch import cmd_branch
from branchfmt.commands.cached import cmd_cached
from branchfmt.commands.check_branch import cmd_check_branch
from branchfmt.commands.context import CommandContext, create_context
from branchfmt.commands.help import cmd_help
from branchfmt.commands.rewrite_branch import cmd_rewrite_branch

__all__ = [
    "CommandContext",
    "cmd_branch",
    "cmd_cached",
    "cmd_check_branch",
    "cmd_help",
    "cmd_rewrite_branch",
    "create_context",
]

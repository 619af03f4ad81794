"""Exception hierarchy for branch-format.

Commands and the CLI dispatcher distinguish between user-facing failures
(bad arguments, unmet preconditions, failing external tools) and the
"nothing to do" signal raised when a branch has no commits of its own.
"""

from __future__ import annotations


class BranchFormatError(Exception):
    """Base class for all branch-format specific errors."""


# ============================================================
# Usage and configuration
# ============================================================


class UsageError(BranchFormatError):
    """Raised for invalid command-line arguments.

    Attributes:
        command: Subcommand whose help text should accompany the error
    """

    def __init__(self, message: str, command: str | None = None):
        super().__init__(message)
        self.command = command


class ConfigError(BranchFormatError):
    """Raised when a configuration file cannot be read or is invalid."""


# ============================================================
# Preconditions
# ============================================================


class PreconditionError(BranchFormatError):
    """Raised when the repository is not in a state the command requires."""


class NotAGitRepository(PreconditionError):
    """Raised when the working directory is not inside a git repository."""


class UnstagedChangesPresent(PreconditionError):
    """Raised when unstaged changes would be touched without --force."""


class DirtyWorkingTree(PreconditionError):
    """Raised when history rewriting is requested with uncommitted changes."""


class ProtectedBranchRewrite(PreconditionError):
    """Raised when rewriting the history of the protected branch."""


class RootCommitBaseline(PreconditionError):
    """Raised when the branch's first commit has no parent to diff against."""


# ============================================================
# External tools
# ============================================================


class ExternalToolFailure(BranchFormatError):
    """Raised when git or the formatter fails or cannot be executed."""


class GitCommandError(ExternalToolFailure):
    """Raised when a git command exits non-zero."""


# ============================================================
# Signals
# ============================================================


class NoBranchDivergence(BranchFormatError):
    """Raised when the current branch has no commits absent from upstream.

    Not a failure: every command treats it as "nothing to do".
    """

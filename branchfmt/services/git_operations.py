"""Git operations service.

Core service for git command operations. Encapsulates all git invocations
and returns domain models where relevant.
"""

from __future__ import annotations

import logging
from typing import Mapping

from branchfmt.domain.rewrite import CommitRecord
from branchfmt.errors import GitCommandError, NotAGitRepository
from branchfmt.infrastructure.runner import CommandResult, CommandRunner, SubprocessCommandRunner

LOG = logging.getLogger(__name__)


class GitOperationsService:
    """Core service for git command operations.

    Encapsulates all calls to the git executable.
    Returns domain models where relevant.
    Reusable across every command.
    """

    def __init__(
        self,
        repo_path: str = ".",
        runner: CommandRunner | None = None,
        git: str = "git",
    ):
        """Initialize with repository path.

        Args:
            repo_path: Path inside the git repository (default: current directory)
            runner: Command runner (default: SubprocessCommandRunner)
            git: Git executable
        """
        self.repo_path = repo_path
        self.runner = runner or SubprocessCommandRunner()
        self.git = git

    # --------------------------------------------------------
    # Repository state
    # --------------------------------------------------------

    def is_git_repository(self) -> bool:
        """Check if repo_path is inside a git work tree."""
        return self._run(["rev-parse", "--is-inside-work-tree"], check=False).ok

    def top_level(self) -> str:
        """Return the top-level directory of the working tree.

        Raises:
            NotAGitRepository: If repo_path is not inside a git repository
        """
        result = self._run(["rev-parse", "--show-toplevel"], check=False)
        if not result.ok:
            raise NotAGitRepository(
                f"Not a git repository: {self.repo_path}\n"
                "Make sure you're running from within a git repository."
            )
        return result.stdout.strip()

    def current_branch(self) -> str:
        """Return the checked out branch name ("HEAD" when detached)."""
        return self._output(["rev-parse", "--abbrev-ref", "HEAD"])

    def rev_parse(self, rev: str) -> str:
        """Resolve a revision to its full object id."""
        return self._output(["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"])

    def try_rev_parse(self, rev: str) -> str | None:
        """Resolve a revision, returning None if it does not exist."""
        result = self._run(
            ["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], check=False
        )
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def unstaged_files(self) -> list[str]:
        """Tracked files with modifications not yet added to the index."""
        output = self._output(["diff", "--name-only"])
        return [line for line in output.splitlines() if line]

    def has_unstaged_changes(self) -> bool:
        return bool(self.unstaged_files())

    def has_uncommitted_changes(self) -> bool:
        """Whether tracked files differ from HEAD in the index or work tree."""
        output = self._output(["status", "--porcelain", "--untracked-files=no"])
        return bool(output.strip())

    # --------------------------------------------------------
    # History queries
    # --------------------------------------------------------

    def rev_list(self, rev_range: str, reverse: bool = False, topo_order: bool = False) -> list[str]:
        """List commits in a range.

        Args:
            rev_range: Range such as "origin/master..HEAD"
            reverse: Oldest first instead of newest first
            topo_order: Never show a parent before all of its children
                (before its children when reversed)

        Returns:
            Commit ids
        """
        args = ["rev-list"]
        if topo_order:
            args.append("--topo-order")
        if reverse:
            args.append("--reverse")
        args.append(rev_range)
        return [line for line in self._output(args).splitlines() if line]

    def log_oneline(self, rev_range: str) -> str:
        return self._output(["log", "--oneline", rev_range], strip=False)

    def read_commit(self, sha: str) -> CommitRecord:
        """Read a commit's tree, parents and metadata."""
        raw = self._output(["cat-file", "commit", sha], strip=False)
        try:
            return CommitRecord.from_cat_file(sha, raw)
        except ValueError as e:
            raise GitCommandError(str(e)) from e

    # --------------------------------------------------------
    # Rewrite primitives
    # --------------------------------------------------------

    def add_worktree(self, path: str, rev: str) -> None:
        """Create a detached worktree at path checked out at rev."""
        self._output(["worktree", "add", "--detach", "--quiet", path, rev])

    def remove_worktree(self, path: str) -> None:
        self._output(["worktree", "remove", "--force", path])

    def checkout_detached(self, rev: str, cwd: str) -> None:
        """Check out rev in the worktree at cwd, discarding local changes."""
        self._output(["checkout", "--quiet", "--force", "--detach", rev], cwd=cwd)

    def stage_tracked(self, cwd: str) -> None:
        """Add modifications of tracked files in cwd to its index."""
        self._output(["add", "--update"], cwd=cwd)

    def write_tree(self, cwd: str) -> str:
        """Write the index of the worktree at cwd and return the tree id."""
        return self._output(["write-tree"], cwd=cwd)

    def commit_tree(self, commit: CommitRecord) -> str:
        """Write a commit object for the given record and return its id.

        Identities, dates and message are taken from the record, so an
        unchanged record reproduces the original commit id.
        """
        args = ["commit-tree", commit.tree]
        for parent in commit.parents:
            args.extend(["-p", parent])
        return self._output(
            args,
            env=commit.identity_environment(),
            input_text=commit.message,
        )

    def update_ref(self, ref: str, new: str, old: str | None = None, message: str | None = None) -> None:
        """Point ref at new, optionally only if it currently points at old."""
        args = ["update-ref"]
        if message:
            args.extend(["-m", message])
        args.extend([ref, new])
        if old:
            args.append(old)
        self._output(args)

    def reset_keep(self, rev: str) -> None:
        """Move the current branch to rev, keeping local changes safe."""
        self._output(["reset", "--quiet", "--keep", rev])

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _run(
        self,
        args: list[str],
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
        check: bool = True,
    ) -> CommandResult:
        result = self.runner.run(
            [self.git, *args],
            cwd=cwd or self.repo_path,
            env=env,
            input_text=input_text,
        )
        if check and not result.ok:
            raise GitCommandError(
                f"Git command failed: {result.command_line}\n{result.stderr.strip()}".rstrip()
            )
        return result

    def _output(
        self,
        args: list[str],
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
        strip: bool = True,
    ) -> str:
        stdout = self._run(args, cwd=cwd, env=env, input_text=input_text).stdout
        return stdout.strip() if strip else stdout

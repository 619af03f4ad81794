"""History rewriter service.

Reformats every commit of the branch one by one and rewrites the branch
with the formatted commits, keeping each commit's author, committer, dates
and message. This is handy when all branch commits should stay separate, or
when files touched by the branch were reformatted upstream and a rebase
would conflict over and over again.

Commits are replayed in a temporary worktree and written with commit-tree;
the branch ref is moved once, after every commit succeeded. A failure at
any point leaves the branch exactly as it was.
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Callable, ContextManager

from branchfmt.domain.formatting import FormatMode, FormatRequest
from branchfmt.domain.rewrite import (
    RewriteOutcome,
    RewritePlan,
    RewriteState,
    map_parents,
    rewrite_commit,
)
from branchfmt.errors import (
    BranchFormatError,
    DirtyWorkingTree,
    ExternalToolFailure,
    GitCommandError,
    NoBranchDivergence,
    PreconditionError,
    ProtectedBranchRewrite,
)
from branchfmt.services.baseline_resolver import BaselineResolver
from branchfmt.services.compliance_checker import ComplianceChecker
from branchfmt.services.format_invoker import FormattingInvoker
from branchfmt.services.git_operations import GitOperationsService

LOG = logging.getLogger(__name__)

BACKUP_REF_PREFIX = "refs/original/refs/heads/"

WorkdirFactory = Callable[..., ContextManager[str]]


class HistoryRewriter:
    """Rewrites branch history with every commit formatted.

    State machine:
        IDLE -> CHECKING -> ALREADY_COMPLIANT
                         -> REWRITING -> DONE
        (any non-terminal state) -> ABORTED
    """

    def __init__(
        self,
        git: GitOperationsService,
        resolver: BaselineResolver,
        checker: ComplianceChecker,
        invoker: FormattingInvoker,
        protected_branch: str,
        extensions: tuple[str, ...],
        style: str = "file",
        workdir_factory: WorkdirFactory = tempfile.TemporaryDirectory,
    ):
        """Initialize with dependencies.

        Args:
            git: Git operations service (injected)
            resolver: Baseline resolver (injected)
            checker: Compliance checker guarding the rewrite (injected)
            invoker: Formatting invoker (injected)
            protected_branch: Branch whose history must never be rewritten
            extensions: File extensions to format
            style: Style source for the formatter
            workdir_factory: Context manager factory yielding a scratch
                directory for the temporary worktree
        """
        self.git = git
        self.resolver = resolver
        self.checker = checker
        self.invoker = invoker
        self.protected_branch = protected_branch
        self.extensions = extensions
        self.style = style
        self.workdir_factory = workdir_factory
        self.state = RewriteState.IDLE

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def rewrite(self) -> RewriteOutcome:
        """Format every commit of the current branch and rewrite its history.

        Returns:
            RewriteOutcome in state ALREADY_COMPLIANT or DONE

        Raises:
            ProtectedBranchRewrite: On the protected branch
            PreconditionError: On a detached HEAD or uncommitted changes
            ExternalToolFailure: If any commit cannot be rewritten; the
                branch is left untouched
        """
        self.state = RewriteState.IDLE
        try:
            branch = self._check_preconditions()

            self._transition(RewriteState.CHECKING)
            if self.checker.is_compliant():
                self._transition(RewriteState.ALREADY_COMPLIANT)
                return RewriteOutcome(state=self.state)

            try:
                plan = self.build_plan()
            except NoBranchDivergence:
                self._transition(RewriteState.ALREADY_COMPLIANT)
                return RewriteOutcome(state=self.state)

            self._transition(RewriteState.REWRITING)
            rewritten = self._replay(plan)
            outcome = self._publish(branch, plan, rewritten)
        except BranchFormatError:
            self._transition(RewriteState.ABORTED)
            raise

        self._transition(RewriteState.DONE)
        return outcome

    def build_plan(self) -> RewritePlan:
        """Collect the branch commits to rewrite, parents before children.

        Raises:
            NoBranchDivergence: If the branch has no commits of its own
        """
        baseline = self.resolver.resolve()
        revisions = self.resolver.branch_revisions()
        if not revisions:
            raise NoBranchDivergence("No commits to rewrite")
        return RewritePlan(
            baseline=baseline,
            fork_point=self.resolver.fork_point(baseline),
            revisions=tuple(revisions),
            original_tip=self.git.rev_parse("HEAD"),
        )

    # --------------------------------------------------------
    # Steps
    # --------------------------------------------------------

    def _check_preconditions(self) -> str:
        branch = self.git.current_branch()
        if branch == self.protected_branch:
            raise ProtectedBranchRewrite(
                f"Must not rewrite {self.protected_branch} branch history."
            )
        if branch == "HEAD":
            raise PreconditionError(
                "HEAD is detached. Check out the branch to rewrite first."
            )
        if self.git.has_uncommitted_changes():
            raise DirtyWorkingTree(
                "Cannot rewrite branch: uncommitted changes detected. "
                "Commit or stash your changes first."
            )
        return branch

    def _replay(self, plan: RewritePlan) -> dict[str, str]:
        """Fold the per-commit rewrite over the plan.

        Returns:
            Mapping of original commit ids to their replacements
        """
        rewritten: dict[str, str] = {}
        total = len(plan)

        with self.workdir_factory(prefix="branch-format-rewrite.") as scratch:
            worktree = os.path.join(scratch, "worktree")
            self.git.add_worktree(worktree, plan.revisions[0])
            try:
                for index, sha in enumerate(plan, start=1):
                    try:
                        rewritten[sha] = self._rewrite_one(sha, plan, worktree, rewritten)
                    except BranchFormatError as e:
                        raise ExternalToolFailure(
                            f"Cannot rewrite branch: commit {sha[:12]} ({index}/{total}) "
                            f"failed after {index - 1} commits. The branch was not changed.\n{e}"
                        ) from e
                    LOG.info("Rewrote %d/%d: %s -> %s", index, total, sha[:12], rewritten[sha][:12])
            finally:
                self._remove_worktree(worktree)

        return rewritten

    def _rewrite_one(
        self, sha: str, plan: RewritePlan, worktree: str, rewritten: dict[str, str]
    ) -> str:
        original = self.git.read_commit(sha)
        self.git.checkout_detached(sha, cwd=worktree)
        self.invoker.invoke(
            FormatRequest(
                revision=plan.fork_point,
                extensions=self.extensions,
                style=self.style,
                allow_unstaged=True,
                mode=FormatMode.APPLY,
            ),
            cwd=worktree,
        )
        self.git.stage_tracked(worktree)
        tree = self.git.write_tree(worktree)

        replacement = rewrite_commit(original, tree, map_parents(original.parents, rewritten))
        if replacement.tree == original.tree and replacement.parents == original.parents:
            return sha
        return self.git.commit_tree(replacement)

    def _publish(
        self, branch: str, plan: RewritePlan, rewritten: dict[str, str]
    ) -> RewriteOutcome:
        """Move the branch to the rewritten tip, keeping a backup ref."""
        new_tip = rewritten[plan.original_tip]
        if new_tip == plan.original_tip:
            LOG.info("Rewritten history is identical to %s", branch)
            return RewriteOutcome(
                state=RewriteState.DONE,
                baseline=plan.baseline,
                old_tip=plan.original_tip,
                new_tip=new_tip,
                rewritten=0,
            )

        backup_ref = f"{BACKUP_REF_PREFIX}{branch}"
        self.git.update_ref(
            backup_ref, plan.original_tip, message="branch-format: rewrite-branch backup"
        )
        self.git.reset_keep(new_tip)
        return RewriteOutcome(
            state=RewriteState.DONE,
            baseline=plan.baseline,
            old_tip=plan.original_tip,
            new_tip=new_tip,
            rewritten=sum(1 for old, new in rewritten.items() if old != new),
            backup_ref=backup_ref,
        )

    def _remove_worktree(self, worktree: str) -> None:
        try:
            self.git.remove_worktree(worktree)
        except GitCommandError as e:
            LOG.error("Failed to remove temporary worktree %s: %s", worktree, e)

    def _transition(self, state: RewriteState) -> None:
        LOG.debug("rewrite-branch: %s -> %s", self.state.value, state.value)
        self.state = state

"""Baseline resolution for branch-scoped formatting.

The baseline is the first commit unique to the current branch. Its parent
(the fork point) is what the formatter diffs against. Comparing with the
upstream tip directly would pull in every commit that landed upstream
after the branch was cut, unless the branch had been rebased.
"""

from __future__ import annotations

import logging

from branchfmt.errors import NoBranchDivergence, RootCommitBaseline
from branchfmt.services.git_operations import GitOperationsService

LOG = logging.getLogger(__name__)


class BaselineResolver:
    """Finds where the current branch diverged from its upstream.

    Nothing is cached: the upstream tip may move between invocations.
    """

    def __init__(self, git: GitOperationsService, upstream: str):
        """Initialize with dependencies.

        Args:
            git: Git operations service (injected)
            upstream: Upstream ref, e.g. "origin/master"
        """
        self.git = git
        self.upstream = upstream

    @property
    def branch_range(self) -> str:
        return f"{self.upstream}..HEAD"

    def branch_revisions(self) -> list[str]:
        """Commits reachable from HEAD but not from upstream, oldest first.

        An empty list is a valid result.
        """
        return self.git.rev_list(self.branch_range, reverse=True, topo_order=True)

    def resolve(self) -> str:
        """Return the first commit unique to the current branch.

        Raises:
            NoBranchDivergence: If HEAD has no commits absent from upstream
        """
        revisions = self.git.rev_list(self.branch_range)
        if not revisions:
            raise NoBranchDivergence(
                f"No commits on branch {self.git.current_branch()} compared with {self.upstream}"
            )
        baseline = revisions[-1]
        LOG.debug("Baseline of %s: %s (%d commits)", self.branch_range, baseline, len(revisions))
        return baseline

    def fork_point(self, baseline: str) -> str:
        """Return the revision formatting is restricted against.

        This is the baseline's parent.

        Raises:
            RootCommitBaseline: If the baseline is a root commit;
                git-clang-format only diffs against commits
        """
        parent = self.git.try_rev_parse(f"{baseline}^")
        if parent is None:
            raise RootCommitBaseline(
                f"First commit on branch {baseline} has no parent to compare against. "
                f"Branches starting at a root commit cannot be formatted; "
                f"check that {self.upstream} shares history with HEAD."
            )
        return parent

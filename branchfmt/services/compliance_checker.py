"""Compliance checker service.

Checks whether the overall diff between the branch's fork point and HEAD
is correctly formatted. Individual commits are not checked.
"""

from __future__ import annotations

import logging

from branchfmt.domain.compliance import CheckOutput, ComplianceVerdict
from branchfmt.domain.formatting import FormatRequest
from branchfmt.errors import NoBranchDivergence, UsageError
from branchfmt.services.baseline_resolver import BaselineResolver
from branchfmt.services.format_invoker import FormattingInvoker
from branchfmt.services.git_operations import GitOperationsService

LOG = logging.getLogger(__name__)


class ComplianceChecker:
    """Reduces a read-only formatter run to a compliance verdict."""

    def __init__(
        self,
        git: GitOperationsService,
        resolver: BaselineResolver,
        invoker: FormattingInvoker,
        extensions: tuple[str, ...],
        style: str = "file",
    ):
        """Initialize with dependencies.

        Args:
            git: Git operations service (injected)
            resolver: Baseline resolver (injected)
            invoker: Formatting invoker (injected)
            extensions: File extensions to check
            style: Style source for the formatter
        """
        self.git = git
        self.resolver = resolver
        self.invoker = invoker
        self.extensions = extensions
        self.style = style

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @staticmethod
    def output_for(diff: bool = False, diffstat: bool = False) -> CheckOutput:
        """Map the --diff/--diffstat flags to a CheckOutput.

        Raises:
            UsageError: If both are requested
        """
        if diff and diffstat:
            raise UsageError(
                "Cannot combine check-branch options --diffstat with --diff",
                command="check-branch",
            )
        if diff:
            return CheckOutput.DIFF
        if diffstat:
            return CheckOutput.DIFFSTAT
        return CheckOutput.PLAIN

    def check(
        self, output: CheckOutput = CheckOutput.PLAIN, show_commits: bool = False
    ) -> ComplianceVerdict:
        """Check the branch changes' formatting.

        A branch without commits of its own is compliant: there is nothing
        to format.

        Args:
            output: Evidence to collect alongside the verdict
            show_commits: Also collect the branch's one-line commit log

        Returns:
            ComplianceVerdict

        Raises:
            ExternalToolFailure: If git or the formatter fails
        """
        try:
            baseline = self.resolver.resolve()
        except NoBranchDivergence as e:
            LOG.debug("%s", e)
            return ComplianceVerdict.nothing_to_check()

        fork_point = self.resolver.fork_point(baseline)
        request = FormatRequest(
            revision=fork_point,
            extensions=self.extensions,
            style=self.style,
            allow_unstaged=True,
            mode=output.format_mode,
        )
        result = self.invoker.invoke(request)

        commits_log = None
        if show_commits:
            commits_log = self.git.log_oneline(f"{fork_point}..HEAD")

        return ComplianceVerdict(
            compliant=not result.changed,
            baseline=baseline,
            evidence=result.raw_output if output.shows_body else "",
            commits_log=commits_log,
            result=result,
        )

    def is_compliant(self) -> bool:
        """Quiet check: verdict only."""
        return self.check().compliant

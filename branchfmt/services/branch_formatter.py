"""Branch and staged formatting services.

Both leave their changes in the working tree for review; committing the
result is up to the user.
"""

from __future__ import annotations

from branchfmt.domain.formatting import FormatMode, FormatRequest, FormatResult
from branchfmt.services.baseline_resolver import BaselineResolver
from branchfmt.services.format_invoker import FormattingInvoker


class BranchFormatter:
    """Applies the formatter to branch changes or to the staged changes."""

    def __init__(
        self,
        resolver: BaselineResolver,
        invoker: FormattingInvoker,
        extensions: tuple[str, ...],
        style: str = "file",
    ):
        self.resolver = resolver
        self.invoker = invoker
        self.extensions = extensions
        self.style = style

    def format_branch(self, allow_unstaged: bool = False) -> tuple[str, FormatResult]:
        """Format every line changed since the branch's fork point.

        Returns:
            Tuple of (baseline commit, formatter result)

        Raises:
            NoBranchDivergence: If the branch has no commits of its own
            UnstagedChangesPresent: If unstaged files would be touched
            ExternalToolFailure: If the formatter fails
        """
        baseline = self.resolver.resolve()
        request = FormatRequest(
            revision=self.resolver.fork_point(baseline),
            extensions=self.extensions,
            style=self.style,
            allow_unstaged=allow_unstaged,
            mode=FormatMode.APPLY,
        )
        return baseline, self.invoker.invoke(request)

    def format_staged(self, allow_unstaged: bool = False) -> FormatResult:
        """Format the lines changed in the index relative to HEAD."""
        request = FormatRequest(
            revision=None,
            extensions=self.extensions,
            style=self.style,
            allow_unstaged=allow_unstaged,
            mode=FormatMode.APPLY,
        )
        return self.invoker.invoke(request)

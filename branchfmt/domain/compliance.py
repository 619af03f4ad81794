"""Domain models for branch formatting compliance checks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from branchfmt.domain.formatting import FormatMode, FormatResult


class CheckOutput(Enum):
    """Evidence requested from a compliance check.

    Attributes:
        PLAIN: Verdict only
        DIFF: Include the formatting diff of each file
        DIFFSTAT: Include the list of files needing formatting
    """

    PLAIN = "plain"
    DIFF = "diff"
    DIFFSTAT = "diffstat"

    @property
    def format_mode(self) -> FormatMode:
        """Formatter mode producing this kind of evidence."""
        if self is CheckOutput.DIFF:
            return FormatMode.DIFF
        if self is CheckOutput.DIFFSTAT:
            return FormatMode.DIFFSTAT
        return FormatMode.CHECK

    @property
    def shows_body(self) -> bool:
        return self is not CheckOutput.PLAIN


@dataclass(frozen=True)
class ComplianceVerdict:
    """Result of checking a branch's formatting.

    Attributes:
        compliant: True if no file in the branch diff needs formatting
        baseline: First commit of the branch, None if the branch has none
        evidence: Diff or diffstat body (empty for plain checks)
        commits_log: One-line log of the branch commits, if requested
        result: Formatter result the verdict was derived from
    """

    compliant: bool
    baseline: str | None = None
    evidence: str = ""
    commits_log: str | None = None
    result: FormatResult | None = None

    @classmethod
    def nothing_to_check(cls) -> ComplianceVerdict:
        """Verdict for a branch without commits of its own."""
        return cls(compliant=True)

    @property
    def has_branch_commits(self) -> bool:
        return self.baseline is not None

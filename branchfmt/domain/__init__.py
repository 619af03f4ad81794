"""Domain models for branch-format."""

from branchfmt.domain.compliance import CheckOutput, ComplianceVerdict
from branchfmt.domain.formatting import (
    NO_CHANGE_SENTINELS,
    FileChange,
    FormatMode,
    FormatRequest,
    FormatResult,
    classify_output,
)
from branchfmt.domain.rewrite import (
    CommitRecord,
    RewriteOutcome,
    RewritePlan,
    RewriteState,
    rewrite_commit,
)

__all__ = [
    "CheckOutput",
    "ComplianceVerdict",
    "NO_CHANGE_SENTINELS",
    "FileChange",
    "FormatMode",
    "FormatRequest",
    "FormatResult",
    "classify_output",
    "CommitRecord",
    "RewriteOutcome",
    "RewritePlan",
    "RewriteState",
    "rewrite_commit",
]

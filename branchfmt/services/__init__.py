"""Business logic services for branch-format."""

from branchfmt.services.baseline_resolver import BaselineResolver
from branchfmt.services.branch_formatter import BranchFormatter
from branchfmt.services.compliance_checker import ComplianceChecker
from branchfmt.services.format_invoker import FormattingInvoker
from branchfmt.services.git_operations import GitOperationsService
from branchfmt.services.history_rewriter import HistoryRewriter

__all__ = [
    "BaselineResolver",
    "BranchFormatter",
    "ComplianceChecker",
    "FormattingInvoker",
    "GitOperationsService",
    "HistoryRewriter",
]

"""Tests for the command implementations.

Commands are called with a CommandContext of mocked services; assertions
are made on exit codes and on what reaches stdout and stderr.
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import MagicMock

from branchfmt.commands import (
    CommandContext,
    cmd_branch,
    cmd_cached,
    cmd_check_branch,
    cmd_help,
    cmd_rewrite_branch,
)
from branchfmt.config import Config
from branchfmt.domain.compliance import CheckOutput, ComplianceVerdict
from branchfmt.domain.formatting import FormatMode, FormatResult
from branchfmt.domain.rewrite import RewriteOutcome, RewriteState
from branchfmt.errors import ExternalToolFailure, NoBranchDivergence, UsageError
from branchfmt.infrastructure.terminal import TextStyle
from branchfmt.services.branch_formatter import BranchFormatter
from branchfmt.services.compliance_checker import ComplianceChecker
from branchfmt.services.git_operations import GitOperationsService
from branchfmt.services.history_rewriter import HistoryRewriter


DIFF_OUTPUT = """\
diff --git a/src/a.c b/src/a.c
--- a/src/a.c
+++ b/src/a.c
@@ -1 +1 @@
-int  x;
+int x;
"""


def make_context() -> CommandContext:
    """Create a CommandContext of mocked services."""
    return CommandContext(
        config=Config(),
        git=MagicMock(spec=GitOperationsService),
        formatter=MagicMock(spec=BranchFormatter),
        checker=MagicMock(spec=ComplianceChecker),
        rewriter=MagicMock(spec=HistoryRewriter),
        style=TextStyle.plain(),
    )


def run_command(func, *args, **kwargs):
    """Run a command, returning (exit code, stdout, stderr)."""
    stdout, stderr = io.StringIO(), io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        code = func(*args, **kwargs)
    return code, stdout.getvalue(), stderr.getvalue()


# ============================================================
# check-branch
# ============================================================


class TestCheckBranchCommand(unittest.TestCase):
    """Tests for cmd_check_branch."""

    def setUp(self):
        self.context = make_context()

    def test_compliant(self):
        self.context.checker.check.return_value = ComplianceVerdict(compliant=True, baseline="c1")

        code, out, err = run_command(cmd_check_branch, self.context)

        self.assertEqual(code, 0)
        self.assertEqual(out, "First commit on branch: c1\nno modified files to format\n")
        self.assertEqual(err, "")
        self.context.checker.check.assert_called_once_with(CheckOutput.PLAIN, show_commits=False)

    def test_compliant_quiet_prints_nothing(self):
        self.context.checker.check.return_value = ComplianceVerdict(compliant=True, baseline="c1")

        code, out, err = run_command(cmd_check_branch, self.context, quiet=True)

        self.assertEqual(code, 0)
        self.assertEqual(out, "")
        self.assertEqual(err, "")

    def test_non_compliant(self):
        self.context.checker.check.return_value = ComplianceVerdict(compliant=False, baseline="c1")

        code, out, err = run_command(cmd_check_branch, self.context)

        self.assertEqual(code, 1)
        self.assertIn("First commit on branch: c1", out)
        self.assertTrue(err.startswith("ERROR: Branch requires formatting\n"))
        self.assertIn("branch-format check-branch --diff", err)
        self.assertIn("branch-format rewrite-branch", err)

    def test_non_compliant_make_hints(self):
        self.context.checker.check.return_value = ComplianceVerdict(compliant=False, baseline="c1")

        code, _, err = run_command(cmd_check_branch, self.context, make=True)

        self.assertEqual(code, 1)
        self.assertIn("make diff-style-branch", err)
        self.assertIn("make style-rewrite-branch", err)
        self.assertIn("make style-branch", err)

    def test_non_compliant_quiet(self):
        self.context.checker.check.return_value = ComplianceVerdict(compliant=False, baseline="c1")

        code, out, err = run_command(cmd_check_branch, self.context, quiet=True)

        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertEqual(err, "")

    def test_diff_body_before_commits(self):
        self.context.checker.check.return_value = ComplianceVerdict(
            compliant=False,
            baseline="c1",
            evidence=DIFF_OUTPUT,
            commits_log="c2 second\nc1 first\n",
            result=FormatResult.from_output(FormatMode.DIFF, DIFF_OUTPUT),
        )

        code, out, _ = run_command(
            cmd_check_branch, self.context, diff=True, show_commits=True
        )

        self.assertEqual(code, 1)
        self.assertLess(out.index("+int x;"), out.index("Commits on branch:"))
        self.assertIn("c2 second\nc1 first\n", out)
        self.assertNotIn("First commit on branch", out)
        self.context.checker.check.assert_called_once_with(CheckOutput.DIFF, show_commits=True)

    def test_no_branch_commits_is_compliant(self):
        self.context.checker.check.return_value = ComplianceVerdict.nothing_to_check()

        code, out, _ = run_command(cmd_check_branch, self.context, diffstat=True)

        self.assertEqual(code, 0)
        self.assertEqual(out, "no modified files to format\n")

    def test_diff_with_diffstat_rejected(self):
        with self.assertRaises(UsageError):
            run_command(cmd_check_branch, self.context, diff=True, diffstat=True)

        self.context.checker.check.assert_not_called()


# ============================================================
# branch / cached
# ============================================================


class TestBranchCommand(unittest.TestCase):
    """Tests for cmd_branch."""

    def setUp(self):
        self.context = make_context()

    def test_formats_branch(self):
        self.context.formatter.format_branch.return_value = (
            "c1",
            FormatResult.from_output(FormatMode.APPLY, "changed files:\n    src/a.c\n"),
        )

        code, out, _ = run_command(cmd_branch, self.context, force=True)

        self.assertEqual(code, 0)
        self.assertEqual(out, "First commit on branch: c1\nchanged files:\n    src/a.c\n")
        self.context.formatter.format_branch.assert_called_once_with(allow_unstaged=True)

    def test_no_divergence(self):
        self.context.formatter.format_branch.side_effect = NoBranchDivergence(
            "No commits on branch topic compared with origin/master"
        )

        code, out, _ = run_command(cmd_branch, self.context)

        self.assertEqual(code, 0)
        self.assertIn("No commits on branch topic", out)

    def test_formatter_failure(self):
        self.context.formatter.format_branch.side_effect = ExternalToolFailure("boom")

        with self.assertRaises(ExternalToolFailure) as ctx:
            run_command(cmd_branch, self.context)

        self.assertIn("Cannot reformat branch", str(ctx.exception))
        self.assertIn("boom", str(ctx.exception))


class TestCachedCommand(unittest.TestCase):
    """Tests for cmd_cached."""

    def setUp(self):
        self.context = make_context()

    def test_formats_staged(self):
        self.context.formatter.format_staged.return_value = FormatResult.from_output(
            FormatMode.APPLY, "no modified files to format\n"
        )

        code, out, _ = run_command(cmd_cached, self.context)

        self.assertEqual(code, 0)
        self.assertEqual(out, "no modified files to format\n")
        self.context.formatter.format_staged.assert_called_once_with(allow_unstaged=False)

    def test_formatter_failure(self):
        self.context.formatter.format_staged.side_effect = ExternalToolFailure("boom")

        with self.assertRaises(ExternalToolFailure) as ctx:
            run_command(cmd_cached, self.context)

        self.assertIn("Cannot reformat staging", str(ctx.exception))


# ============================================================
# rewrite-branch
# ============================================================


class TestRewriteBranchCommand(unittest.TestCase):
    """Tests for cmd_rewrite_branch."""

    def setUp(self):
        self.context = make_context()

    def test_already_compliant(self):
        self.context.rewriter.rewrite.return_value = RewriteOutcome(
            state=RewriteState.ALREADY_COMPLIANT
        )

        code, out, _ = run_command(cmd_rewrite_branch, self.context)

        self.assertEqual(code, 0)
        self.assertEqual(out, "no modified files to format\n")

    def test_rewritten(self):
        self.context.rewriter.rewrite.return_value = RewriteOutcome(
            state=RewriteState.DONE,
            baseline="c1",
            old_tip="a" * 40,
            new_tip="b" * 40,
            rewritten=2,
            backup_ref="refs/original/refs/heads/topic",
        )

        code, out, _ = run_command(cmd_rewrite_branch, self.context)

        self.assertEqual(code, 0)
        self.assertIn("First commit on branch: c1", out)
        self.assertIn(f"Rewrote 2 commits: {'a' * 12} -> {'b' * 12}", out)
        self.assertIn("refs/original/refs/heads/topic", out)

    def test_identical_history(self):
        self.context.rewriter.rewrite.return_value = RewriteOutcome(
            state=RewriteState.DONE, baseline="c1", old_tip="c2", new_tip="c2"
        )

        code, out, _ = run_command(cmd_rewrite_branch, self.context)

        self.assertEqual(code, 0)
        self.assertIn("Formatting did not change any commit", out)
        self.assertNotIn("Rewrote", out)


# ============================================================
# help
# ============================================================


class TestHelpCommand(unittest.TestCase):
    """Tests for cmd_help."""

    def test_no_topic_prints_usage(self):
        code, out, _ = run_command(cmd_help, None, TextStyle.plain())

        self.assertEqual(code, 0)
        self.assertIn("usage: branch-format", out)

    def test_known_topic(self):
        code, out, _ = run_command(cmd_help, "rewrite-branch", TextStyle.plain())

        self.assertEqual(code, 0)
        self.assertIn("branch-format rewrite-branch - Format every commit", out)

    def test_unknown_topic(self):
        with self.assertRaises(UsageError) as ctx:
            run_command(cmd_help, "frobnicate", TextStyle.plain())

        self.assertEqual(str(ctx.exception), "No manual entry for frobnicate")


if __name__ == "__main__":
    unittest.main()

"""Formatting invoker service.

Wraps git-clang-format. The formatter exits 0 whether or not it changed
anything, so results are classified from its output text; that brittleness
stays inside FormatResult.from_output().
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from branchfmt.domain.formatting import FormatMode, FormatRequest, FormatResult
from branchfmt.errors import ExternalToolFailure, UnstagedChangesPresent
from branchfmt.infrastructure.runner import CommandRunner, SubprocessCommandRunner
from branchfmt.services.git_operations import GitOperationsService

LOG = logging.getLogger(__name__)

# git-clang-format refuses to touch files with unstaged changes and says so
# on stderr with this phrase.
_UNSTAGED_REFUSAL = "have unstaged changes"


class FormattingInvoker:
    """Runs the external line-level formatter for a FormatRequest."""

    def __init__(
        self,
        git: GitOperationsService,
        formatter: str,
        diffstat_formatter: str | None = None,
        clang_format_binary: str | None = None,
        runner: CommandRunner | None = None,
    ):
        """Initialize with dependencies.

        Args:
            git: Git operations service (injected)
            formatter: Path of git-clang-format
            diffstat_formatter: Path of a git-clang-format variant that
                supports --diffstat
            clang_format_binary: clang-format executable passed as --binary
            runner: Command runner (default: SubprocessCommandRunner)
        """
        self.git = git
        self.formatter = formatter
        self.diffstat_formatter = diffstat_formatter
        self.clang_format_binary = clang_format_binary
        self.runner = runner or SubprocessCommandRunner()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def build_command(self, request: FormatRequest) -> list[str]:
        """Build the formatter command line for a request.

        Raises:
            ExternalToolFailure: If diffstat is requested without a
                diffstat-capable formatter
        """
        if request.mode is FormatMode.DIFFSTAT:
            if not self.diffstat_formatter:
                raise ExternalToolFailure(
                    "No formatter with --diffstat support found. "
                    "Set diffstat_formatter in .branch-format.yaml."
                )
            cmd = [self.diffstat_formatter]
        else:
            cmd = [self.formatter]

        if self.clang_format_binary:
            cmd.extend(["--binary", self.clang_format_binary])
        cmd.extend(["--style", request.style])
        cmd.extend(["--extensions", ",".join(request.extensions)])

        if request.mode is FormatMode.APPLY:
            if request.allow_unstaged:
                cmd.append("--force")
        elif request.mode is FormatMode.DIFFSTAT:
            cmd.append("--diffstat")
        else:
            # CHECK reads the diff only to classify it; never apply.
            cmd.append("--diff")

        if request.revision:
            cmd.append(request.revision)
        return cmd

    def invoke(self, request: FormatRequest, cwd: str | None = None) -> FormatResult:
        """Run the formatter and classify its output.

        Args:
            request: What to format and how to report it
            cwd: Working tree to run in (default: the git service's repo path)

        Returns:
            FormatResult; read-only modes never modify the working tree

        Raises:
            UnstagedChangesPresent: If apply mode would touch files with
                unstaged changes and allow_unstaged is false
            ExternalToolFailure: If the formatter fails or cannot be started
        """
        if request.mode is FormatMode.APPLY and not request.allow_unstaged:
            self._ensure_no_unstaged_changes(request)

        cmd = self.build_command(request)
        result = self.runner.run(cmd, cwd=cwd or self.git.repo_path)

        if not result.ok:
            if _UNSTAGED_REFUSAL in result.stderr or _UNSTAGED_REFUSAL in result.stdout:
                raise UnstagedChangesPresent(
                    f"{(result.stderr or result.stdout).strip()}\n"
                    "Commit or stash them, or use --force."
                )
            raise ExternalToolFailure(
                f"Formatter failed ({result.returncode}): {result.command_line}\n"
                f"{result.stderr.strip()}".rstrip()
            )

        format_result = FormatResult.from_output(request.mode, result.stdout)
        LOG.debug(
            "Formatter %s mode: changed=%s files=%s",
            request.mode.value,
            format_result.changed,
            format_result.file_paths,
        )
        return format_result

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _ensure_no_unstaged_changes(self, request: FormatRequest) -> None:
        extensions = {ext.lower() for ext in request.extensions}
        affected = [
            path
            for path in self.git.unstaged_files()
            if PurePosixPath(path).suffix.lstrip(".").lower() in extensions
        ]
        if affected:
            listing = "\n".join(f"    {path}" for path in affected)
            raise UnstagedChangesPresent(
                "Unstaged changes present in:\n"
                f"{listing}\n"
                "Commit or stash them, or use --force."
            )

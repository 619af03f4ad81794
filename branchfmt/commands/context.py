"""Service wiring for the commands.

Builds every service from an explicit Config so commands never look up the
environment themselves. Tests construct CommandContext directly with mocks.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass

from branchfmt.config import Config
from branchfmt.errors import ExternalToolFailure
from branchfmt.infrastructure.programs import (
    Which,
    clang_format_binary_for,
    require_program,
    resolve_repo_program,
)
from branchfmt.infrastructure.runner import CommandRunner, SubprocessCommandRunner
from branchfmt.infrastructure.terminal import TextStyle
from branchfmt.services.baseline_resolver import BaselineResolver
from branchfmt.services.branch_formatter import BranchFormatter
from branchfmt.services.compliance_checker import ComplianceChecker
from branchfmt.services.format_invoker import FormattingInvoker
from branchfmt.services.git_operations import GitOperationsService
from branchfmt.services.history_rewriter import HistoryRewriter

LOG = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Services and settings shared by all commands."""

    config: Config
    git: GitOperationsService
    formatter: BranchFormatter
    checker: ComplianceChecker
    rewriter: HistoryRewriter
    style: TextStyle


def create_context(
    config: Config,
    runner: CommandRunner | None = None,
    style: TextStyle | None = None,
    which: Which = shutil.which,
) -> CommandContext:
    """Create the services for a command run.

    Args:
        config: Run configuration; config.repo_path must be the repository
            top level
        runner: Command runner (default: SubprocessCommandRunner)
        style: Terminal text style (default: plain)
        which: Program lookup function

    Returns:
        Wired CommandContext

    Raises:
        ExternalToolFailure: If no git-clang-format executable is installed
    """
    runner = runner or SubprocessCommandRunner()
    git = GitOperationsService(config.repo_path, runner=runner)

    formatter_path = require_program(config.formatter_candidates, which=which)
    binary = config.clang_format_binary or clang_format_binary_for(formatter_path)

    # Only --diffstat needs this; its absence must not break other commands.
    diffstat_path: str | None
    try:
        diffstat_path = resolve_repo_program(config.diffstat_formatter, config.repo_path)
    except ExternalToolFailure as e:
        LOG.debug("No diffstat formatter: %s", e)
        diffstat_path = None

    invoker = FormattingInvoker(
        git,
        formatter=formatter_path,
        diffstat_formatter=diffstat_path,
        clang_format_binary=binary,
        runner=runner,
    )
    resolver = BaselineResolver(git, upstream=config.upstream)
    checker = ComplianceChecker(
        git, resolver, invoker, extensions=config.extensions, style=config.style
    )

    return CommandContext(
        config=config,
        git=git,
        formatter=BranchFormatter(
            resolver, invoker, extensions=config.extensions, style=config.style
        ),
        checker=checker,
        rewriter=HistoryRewriter(
            git,
            resolver,
            checker,
            invoker,
            protected_branch=config.protected_branch,
            extensions=config.extensions,
            style=config.style,
        ),
        style=style or TextStyle.plain(),
    )

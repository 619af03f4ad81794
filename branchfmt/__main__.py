#!/usr/bin/env python3
"""CLI entry point for branch-format.

Usage:
    branch-format <command> [options]
    python -m branchfmt <command> [options]

Commands:
    branch          Format all changes in branch for an additional commit
    rewrite-branch  Format every commit in branch and rewrite history
    cached          Format changes in git staging
    check-branch    Check if formatting of branch changes is correct
    help            Display more info for a particular command
"""

from __future__ import annotations

import argparse
import sys

from branchfmt.commands import (
    cmd_branch,
    cmd_cached,
    cmd_check_branch,
    cmd_help,
    cmd_rewrite_branch,
    create_context,
)
from branchfmt.config import Config
from branchfmt.errors import BranchFormatError, UsageError
from branchfmt.help_text import COMMANDS, PROG, command_help, usage
from branchfmt.infrastructure.runner import CommandRunner
from branchfmt.infrastructure.terminal import TextStyle, pass_through_undecodable, print_error
from branchfmt.logging_utils import configure_logging
from branchfmt.services.compliance_checker import ComplianceChecker
from branchfmt.services.git_operations import GitOperationsService


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser reporting errors as UsageError instead of exiting 2."""

    def error(self, message: str):
        command = self.prog.split()[-1]
        raise UsageError(message, command=command if command in COMMANDS else None)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=PROG, add_help=False)
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    parser.add_argument("-C", dest="directory", default=".", metavar="DIR")
    parser.add_argument("--config", dest="config_file", metavar="FILE")
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", parser_class=_ArgumentParser)

    # branch command
    parser_branch = subparsers.add_parser("branch", add_help=False)
    parser_branch.add_argument("-f", "--force", action="store_true")

    # cached command
    parser_cached = subparsers.add_parser("cached", add_help=False)
    parser_cached.add_argument("-f", "--force", action="store_true")

    # check-branch command; --diff/--diffstat exclusivity is checked by the
    # checker so the error carries the command's help text
    parser_check = subparsers.add_parser("check-branch", add_help=False)
    parser_check.add_argument("-d", "--diff", action="store_true")
    parser_check.add_argument("-s", "--diffstat", action="store_true")
    parser_check.add_argument("-c", "--show-commits", action="store_true")
    parser_check.add_argument("-m", "--make", action="store_true")
    parser_check.add_argument("-q", "--quiet", action="store_true")

    # rewrite-branch command
    subparsers.add_parser("rewrite-branch", add_help=False)

    # help command
    parser_help = subparsers.add_parser("help", add_help=False)
    parser_help.add_argument("topic", nargs="?")

    for name in COMMANDS:
        subparsers.choices[name].add_argument(
            "-h", "--help", action="store_true", dest="show_command_help"
        )

    return parser


def load_config(
    directory: str,
    config_file: str | None,
    verbosity: int,
    runner: CommandRunner | None = None,
) -> Config:
    """Load configuration for the repository containing directory.

    Commands run from the repository top level, wherever they were started.
    """
    top_level = GitOperationsService(directory, runner=runner).top_level()
    config = Config.load(repo_top_level=top_level, config_file=config_file)
    return config.with_overrides(repo_path=top_level, verbosity=verbosity or None)


def main(argv: list[str] | None = None, runner: CommandRunner | None = None) -> int:
    pass_through_undecodable(sys.stdout, sys.stderr)
    style = TextStyle.detect()
    parser = build_arg_parser()

    try:
        args = parser.parse_args(argv)

        if args.show_help:
            print(usage(style))
            return 0
        if not args.command:
            print(usage(style))
            raise UsageError("Missing arguments. Call with one argument")

        if args.command == "help":
            return cmd_help(args.topic, style)
        if getattr(args, "show_command_help", False):
            print(command_help(args.command, style))
            return 0

        if args.command == "check-branch":
            ComplianceChecker.output_for(diff=args.diff, diffstat=args.diffstat)

        # Before load_config so -vv also traces the repository lookup.
        configure_logging(verbosity=args.verbose)
        config = load_config(args.directory, args.config_file, args.verbose, runner=runner)
        if config.verbosity != args.verbose:
            configure_logging(verbosity=config.verbosity)
        context = create_context(config, runner=runner, style=style)

        # Route to command implementations with explicit parameters
        if args.command == "branch":
            return cmd_branch(context, force=args.force)
        elif args.command == "cached":
            return cmd_cached(context, force=args.force)
        elif args.command == "check-branch":
            return cmd_check_branch(
                context,
                diff=args.diff,
                diffstat=args.diffstat,
                show_commits=args.show_commits,
                make=args.make,
                quiet=args.quiet,
            )
        elif args.command == "rewrite-branch":
            return cmd_rewrite_branch(context)
        else:
            raise UsageError(f"'{args.command}' is not a command. See '{PROG} --help'")

    except UsageError as e:
        if e.command:
            print(command_help(e.command, style))
            print()
        sys.stdout.flush()
        print_error(str(e), style)
        return 1
    except BranchFormatError as e:
        sys.stdout.flush()
        print_error(str(e), style)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())

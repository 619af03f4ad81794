"""Help texts for the branch-format commands."""

from __future__ import annotations

from branchfmt.infrastructure.terminal import TextStyle

PROG = "branch-format"

COMMANDS = ("branch", "cached", "check-branch", "rewrite-branch")


def usage(style: TextStyle, prog: str = PROG) -> str:
    return f"""\
usage: {prog} --help
       {prog} help <command>
       {prog} [-C <dir>] [--config <file>] [-v] <command> [<args>]

Format selected changes using git-clang-format.

Only the changed lines are formatted, never whole files. Use
{style.i("clang-format -i <file>")} to format whole files.

Formatting branch changes (compared to the upstream branch):
    branch          Format all changes in branch for an additional commit
    rewrite-branch  Format every commit in branch and rewrite history

Formatting staged changes:
    cached          Format changes in git staging

Checking formatting:
    check-branch    Check if formatting of branch changes is correct

More info on a command:
    help            Display more info for a particular <command>

Global options:
    -C <dir>         Run as if started in <dir>
    --config <file>  Read configuration from <file> instead of .branch-format.yaml
    -v, --verbose    Log progress (-v) and every external command (-vv)"""


def _branch(style: TextStyle, prog: str) -> str:
    return f"""\
{style.b("NAME")}
        {prog} branch - Format all changes in branch for an additional commit

{style.b("SYNOPSIS")}
        {prog} branch [--force]

{style.b("DESCRIPTION")}
        Format every line changed on your branch since it forked from the
        upstream branch. The result is left unstaged so you can review it and
        add it as a separate formatting commit.

        Requires that all changes are committed unless --force is given.

{style.b("OPTIONS")}
        -f, --force
            Allow changes to files with unstaged changes.

{style.b("EXAMPLES")}
        On the branch whose changes you want to format:

            $ {prog} branch"""


def _cached(style: TextStyle, prog: str) -> str:
    return f"""\
{style.b("NAME")}
        {prog} cached - Format changes in git staging

{style.b("SYNOPSIS")}
        {prog} cached [--force]

{style.b("DESCRIPTION")}
        Format the staged changes. The result is left unstaged; you still
        need to add and commit it.

{style.b("OPTIONS")}
        -f, --force
            Allow changes to files with unstaged changes.

{style.b("EXAMPLES")}
        Format the changes of files added with {style.i("git add <file>")}:

            $ {prog} cached"""


def _check_branch(style: TextStyle, prog: str) -> str:
    return f"""\
{style.b("NAME")}
        {prog} check-branch - Check if formatting of branch changes is correct

{style.b("SYNOPSIS")}
        {prog} check-branch [--show-commits] [--make] [--quiet]
        {prog} check-branch --diff [--show-commits] [--make] [--quiet]
        {prog} check-branch --diffstat [--show-commits] [--make] [--quiet]

{style.b("DESCRIPTION")}
        Check if all branch changes are correctly formatted. This checks the
        overall diff between the fork point and HEAD, not every single commit.

        Exits with 1 if formatting is off, 0 if it is correct.

{style.b("OPTIONS")}
        -d, --diff
            Print the formatting diff of each file.
        -s, --diffstat
            Print the files with wrong formatting.
        -c, --show-commits
            Print the branch commits.
        -m, --make
            Suggest fixes as make targets instead of {prog} commands.
        -q, --quiet
            Do not print an error if formatting is off, only set the exit code."""


def _rewrite_branch(style: TextStyle, prog: str) -> str:
    return f"""\
{style.b("NAME")}
        {prog} rewrite-branch - Format every commit in branch and rewrite history

{style.b("SYNOPSIS")}
        {prog} rewrite-branch

{style.b("DESCRIPTION")}
        Format all commits of the branch one by one.
        This {style.b("rewrites the branch history")}, keeping each commit's
        author, committer, dates and message.

        Useful to format a branch while keeping its commits, or when files
        changed by the branch were reformatted upstream and a rebase would
        conflict over and over again.

        The previous tip is saved as refs/original/refs/heads/<branch>. If any
        commit fails to format, the branch is left unchanged.

{style.b("OPTIONS")}
        None

{style.b("EXAMPLES")}
        Commit all your changes, then on the branch to format:

            $ {prog} rewrite-branch"""


_HELP_BUILDERS = {
    "branch": _branch,
    "cached": _cached,
    "check-branch": _check_branch,
    "rewrite-branch": _rewrite_branch,
}


def command_help(command: str, style: TextStyle, prog: str = PROG) -> str | None:
    """Return the manual page of a command, or None for unknown commands."""
    builder = _HELP_BUILDERS.get(command)
    if builder is None:
        return None
    return builder(style, prog)

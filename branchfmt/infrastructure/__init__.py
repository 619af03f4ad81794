"""Infrastructure components for branch-format.

This layer handles external system interactions:
- Running git and formatter processes
- Locating the formatter executables
- Terminal capabilities
"""

from .programs import clang_format_binary_for, require_program, resolve_repo_program
from .runner import CommandResult, CommandRunner, SubprocessCommandRunner
from .terminal import TextStyle, pass_through_undecodable, print_error

__all__ = [
    "CommandResult",
    "CommandRunner",
    "SubprocessCommandRunner",
    "TextStyle",
    "pass_through_undecodable",
    "print_error",
    "clang_format_binary_for",
    "require_program",
    "resolve_repo_program",
]

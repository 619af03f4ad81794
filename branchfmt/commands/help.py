"""Help command - print the manual of a command."""

from __future__ import annotations

from branchfmt.errors import UsageError
from branchfmt.help_text import command_help, usage
from branchfmt.infrastructure.terminal import TextStyle


def cmd_help(topic: str | None, style: TextStyle) -> int:
    """Print help for a command, or the general usage without a topic.

    Raises:
        UsageError: For an unknown topic, after printing the usage
    """
    if not topic:
        print(usage(style))
        return 0

    text = command_help(topic, style)
    if text is None:
        print(usage(style))
        print()
        raise UsageError(f"No manual entry for {topic}")

    print(text)
    return 0

"""Terminal text styling for help texts and error labels."""

from __future__ import annotations

import io
import os
import sys
from dataclasses import dataclass
from typing import Mapping, TextIO


@dataclass(frozen=True)
class TextStyle:
    """ANSI escape sequences, or empty strings when styling is disabled."""

    bold: str = ""
    italic: str = ""
    normal: str = ""

    @classmethod
    def plain(cls) -> TextStyle:
        return cls()

    @classmethod
    def detect(
        cls, stream: TextIO | None = None, environ: Mapping[str, str] | None = None
    ) -> TextStyle:
        """Enable styling only for a real terminal.

        TERM is unset or "dumb" in CI runners such as GitHub Actions.
        """
        env = os.environ if environ is None else environ
        stream = stream or sys.stdout
        term = env.get("TERM", "")
        if not term or term == "dumb" or not stream.isatty():
            return cls.plain()
        return cls(bold="\033[1m", italic="\033[3m", normal="\033[0m")

    def b(self, text: str) -> str:
        return f"{self.bold}{text}{self.normal}"

    def i(self, text: str) -> str:
        return f"{self.italic}{text}{self.normal}"


def print_error(message: str, style: TextStyle | None = None, file: TextIO | None = None) -> None:
    """Print a labelled error message to stderr."""
    style = style or TextStyle.plain()
    print(f"{style.b('ERROR')}: {message}", file=file or sys.stderr)


def pass_through_undecodable(*streams: TextIO) -> None:
    """Let real text streams write back bytes that were not valid UTF-8.

    Formatter diffs of legacy-encoded sources are decoded with
    surrogateescape; printing them must reproduce the original bytes.
    """
    for stream in streams:
        if isinstance(stream, io.TextIOWrapper):
            stream.reconfigure(errors="surrogateescape")

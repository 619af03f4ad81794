"""Domain models for formatter requests and results.

Parse-once pattern: raw formatter output is classified and parsed into a
FormatResult at the boundary. Services branch on FormatResult.changed and
never inspect the formatter's text themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

# The formatter exits 0 whether or not it changed anything. These phrases,
# as the first line of its output, are the only reliable "nothing to do".
NO_CHANGE_SENTINELS = (
    "no modified files to format",
    "clang-format did not modify any files",
)

_DIFF_HEADER_RE = re.compile(r'^diff --git "?a/(?P<old>.+?)"? "?b/(?P<new>.+?)"?$')
_DIFFSTAT_LINE_RE = re.compile(r"^\s*(?P<path>.+?)\s+\|\s+(?P<count>\d+)\s*(?P<graph>[+-]*)\s*$")


# ============================================================
# Domain Models
# ============================================================


class FormatMode(Enum):
    """How the formatter is asked to report or apply changes."""

    APPLY = "apply"
    CHECK = "check"
    DIFF = "diff"
    DIFFSTAT = "diffstat"

    @property
    def is_read_only(self) -> bool:
        """Whether this mode leaves the working tree and index untouched."""
        return self is not FormatMode.APPLY


@dataclass(frozen=True)
class FormatRequest:
    """A single formatter invocation.

    Attributes:
        revision: Base revision to format changes against, or None to
            format the staged changes only
        extensions: File extensions the formatter may touch
        style: Style source passed to the formatter
        allow_unstaged: Whether files with unstaged changes may be modified
        mode: Output mode
    """

    revision: str | None
    extensions: tuple[str, ...]
    style: str = "file"
    allow_unstaged: bool = False
    mode: FormatMode = FormatMode.APPLY


@dataclass(frozen=True)
class FileChange:
    """Formatting change for one file, parsed from diff or diffstat output."""

    path: str
    insertions: int = 0
    deletions: int = 0
    body: str = ""

    @property
    def lines_changed(self) -> int:
        return self.insertions + self.deletions


@dataclass(frozen=True)
class FormatResult:
    """Outcome of one formatter invocation."""

    mode: FormatMode
    changed: bool
    raw_output: str
    files: tuple[FileChange, ...] = field(default_factory=tuple)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_output(cls, mode: FormatMode, output: str) -> FormatResult:
        """Classify and parse captured formatter output.

        Args:
            mode: Mode the formatter was run in
            output: Full captured stdout

        Returns:
            Typed FormatResult
        """
        changed = classify_output(output)
        files: tuple[FileChange, ...] = ()
        if changed and mode is FormatMode.DIFF:
            files = parse_diff_files(output)
        elif changed and mode is FormatMode.DIFFSTAT:
            files = parse_diffstat_files(output)
        return cls(mode=mode, changed=changed, raw_output=output, files=files)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]


# ============================================================
# Output Parsing
# ============================================================


def classify_output(output: str) -> bool:
    """Return True if formatter output means changes were made or needed.

    Only the first non-blank line is considered. Any output other than a
    known sentinel phrase, including empty output, counts as changed.
    """
    for line in output.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped not in NO_CHANGE_SENTINELS
    return True


def parse_diff_files(output: str) -> tuple[FileChange, ...]:
    """Split unified diff output into per-file records."""
    files: list[FileChange] = []
    current_path: str | None = None
    current_lines: list[str] = []

    def flush() -> None:
        if current_path is None:
            return
        insertions = sum(
            1 for ln in current_lines if ln.startswith("+") and not ln.startswith("+++")
        )
        deletions = sum(
            1 for ln in current_lines if ln.startswith("-") and not ln.startswith("---")
        )
        files.append(
            FileChange(
                path=current_path,
                insertions=insertions,
                deletions=deletions,
                body="\n".join(current_lines),
            )
        )

    for line in output.splitlines():
        match = _DIFF_HEADER_RE.match(line)
        if match:
            flush()
            current_path = match.group("new")
            current_lines = [line]
        elif current_path is not None:
            current_lines.append(line)
    flush()

    return tuple(files)


def parse_diffstat_files(output: str) -> tuple[FileChange, ...]:
    """Parse `path | N +++--` lines of diffstat output.

    The trailing "N files changed" summary line is skipped.
    """
    files: list[FileChange] = []
    for line in output.splitlines():
        match = _DIFFSTAT_LINE_RE.match(line)
        if not match:
            continue
        graph = match.group("graph")
        files.append(
            FileChange(
                path=match.group("path"),
                insertions=graph.count("+"),
                deletions=graph.count("-"),
                body=line.strip(),
            )
        )
    return tuple(files)

"""Discovery of the external programs branch-format drives."""

from __future__ import annotations

import logging
import os
import re
import shutil
from pathlib import Path
from typing import Callable, Optional, Sequence

from branchfmt.errors import ExternalToolFailure

LOG = logging.getLogger(__name__)

_VERSIONED_FORMATTER_RE = re.compile(r"git-clang-format-(?P<version>\d+)$")

Which = Callable[[str], Optional[str]]


def require_program(candidates: Sequence[str], which: Which = shutil.which) -> str:
    """Return the full path of the first candidate program found.

    Args:
        candidates: Alternative program names, in order of preference
        which: Lookup function (default: shutil.which)

    Returns:
        Path of the first program found

    Raises:
        ExternalToolFailure: If none of the candidates is installed
    """
    if not candidates:
        raise ExternalToolFailure("No program candidates configured")

    for candidate in candidates:
        found = which(candidate)
        if found:
            LOG.debug("Using %s", found)
            return found

    if len(candidates) == 1:
        raise ExternalToolFailure(f"{candidates[0]} not found")
    raise ExternalToolFailure(f"None of {' '.join(candidates)} found")


def clang_format_binary_for(formatter_path: str) -> str | None:
    """Return the clang-format binary matching a versioned git-clang-format.

    git-clang-format-14 defaults to running plain clang-format, which may be
    a different release; pair it with clang-format-14 explicitly.
    """
    match = _VERSIONED_FORMATTER_RE.search(Path(formatter_path).name)
    if match:
        return f"clang-format-{match.group('version')}"
    return None


def resolve_repo_program(program: str, top_level: str) -> str:
    """Resolve a program shipped inside the repository.

    Relative paths are taken from the repository top level; bare names are
    looked up on PATH.

    Raises:
        ExternalToolFailure: If the program does not exist or is not executable
    """
    if os.sep not in program and "/" not in program:
        return require_program([program])

    path = Path(program)
    if not path.is_absolute():
        path = Path(top_level) / path
    if not path.is_file() or not os.access(path, os.X_OK):
        raise ExternalToolFailure(f"{program} not found")
    return str(path)

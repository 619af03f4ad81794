"""External command runner.

Infrastructure component that wraps subprocess calls to git and the
formatter. This abstraction allows services to be tested without actually
running either program.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from branchfmt.errors import ExternalToolFailure

LOG = logging.getLogger(__name__)

# git stores commit messages and file contents as bytes; UTF-8 is only the
# common case.
OUTPUT_ENCODING = "utf-8"


@dataclass(frozen=True)
class CommandResult:
    """Completed external command with fully captured output."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


class CommandRunner(Protocol):
    """Protocol for running external commands."""

    def run(
        self,
        cmd: Sequence[str],
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
    ) -> CommandResult:
        """Run a command to completion and return its captured output."""
        ...


@dataclass
class SubprocessCommandRunner:
    """Runs commands via subprocess.

    This is the production implementation of CommandRunner. stdout goes to
    an anonymous temporary file rather than a pipe: git-clang-format is a
    Python script that misbehaves when its output pipe closes early, and the
    whole output is needed before it can be classified anyway.
    """

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def run(
        self,
        cmd: Sequence[str],
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
    ) -> CommandResult:
        """Run a command.

        Args:
            cmd: Command and arguments
            cwd: Working directory (default: current directory)
            env: Variables added to the inherited environment
            input_text: Text written to the command's stdin

        Returns:
            CommandResult with exit code and captured output

        Raises:
            ExternalToolFailure: If the command cannot be started
        """
        args = tuple(cmd)
        LOG.debug("Running: %s (cwd=%s)", " ".join(args), cwd or ".")

        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)

        with tempfile.TemporaryFile(mode="w+b", prefix="branch-format.") as buffer:
            try:
                completed = subprocess.run(
                    args,
                    cwd=cwd,
                    env=full_env,
                    input=encode_output(input_text) if input_text is not None else None,
                    stdout=buffer,
                    stderr=subprocess.PIPE,
                    check=False,
                )
            except OSError as e:
                raise ExternalToolFailure(f"Failed to execute {args[0]}: {e}") from e

            buffer.seek(0)
            stdout = decode_output(buffer.read())

        stderr = (completed.stderr or b"").decode(OUTPUT_ENCODING, errors="replace")
        if completed.returncode != 0:
            LOG.debug("Exit code %d, stderr: %s", completed.returncode, stderr.strip())

        return CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=stdout,
            stderr=stderr,
        )


def decode_output(data: bytes) -> str:
    """Decode captured stdout without altering it.

    Line endings are kept as they are, and bytes that are not valid UTF-8
    are carried as surrogates, so encode_output() restores the exact bytes.
    """
    return data.decode(OUTPUT_ENCODING, errors="surrogateescape")


def encode_output(text: str) -> bytes:
    return text.encode(OUTPUT_ENCODING, errors="surrogateescape")

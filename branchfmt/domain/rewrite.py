"""Domain models for rewriting branch history.

A rewrite replays each commit of the branch through the formatter. The
per-commit step is the pure function rewrite_commit(); the history rewriter
folds it over a RewritePlan while mapping old parents to their rewritten
counterparts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

_IDENT_RE = re.compile(r"^(?P<name>.*) <(?P<email>[^>]*)> (?P<date>\d+ [+-]\d{4})$")


# ============================================================
# Domain Models
# ============================================================


class RewriteState(Enum):
    """States of a history rewrite.

    IDLE -> CHECKING -> ALREADY_COMPLIANT
                     -> REWRITING -> DONE
    Any state before a terminal one may move to ABORTED.
    """

    IDLE = "idle"
    CHECKING = "checking"
    ALREADY_COMPLIANT = "already-compliant"
    REWRITING = "rewriting"
    DONE = "done"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (RewriteState.ALREADY_COMPLIANT, RewriteState.DONE, RewriteState.ABORTED)


@dataclass(frozen=True)
class CommitRecord:
    """A commit's content pointer and metadata, as stored by git."""

    sha: str
    tree: str
    parents: tuple[str, ...]
    author_name: str
    author_email: str
    author_date: str
    committer_name: str
    committer_email: str
    committer_date: str
    message: str

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_cat_file(cls, sha: str, raw: str) -> CommitRecord:
        """Parse `git cat-file commit <sha>` output.

        Args:
            sha: Commit id the raw object belongs to
            raw: Raw commit object text

        Returns:
            Parsed CommitRecord

        Raises:
            ValueError: If a required header is missing or malformed
        """
        header, _, message = raw.partition("\n\n")
        tree = ""
        parents: list[str] = []
        author: re.Match[str] | None = None
        committer: re.Match[str] | None = None

        for line in header.splitlines():
            # Continuation lines of multi-line headers (gpgsig, mergetag).
            if line.startswith(" "):
                continue
            key, _, value = line.partition(" ")
            if key == "tree":
                tree = value
            elif key == "parent":
                parents.append(value)
            elif key == "author":
                author = _IDENT_RE.match(value)
            elif key == "committer":
                committer = _IDENT_RE.match(value)

        if not tree or author is None or committer is None:
            raise ValueError(f"Malformed commit object {sha}")

        return cls(
            sha=sha,
            tree=tree,
            parents=tuple(parents),
            author_name=author.group("name"),
            author_email=author.group("email"),
            author_date=author.group("date"),
            committer_name=committer.group("name"),
            committer_email=committer.group("email"),
            committer_date=committer.group("date"),
            message=message,
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def identity_environment(self) -> dict[str, str]:
        """Environment that makes git reuse this commit's identities and dates."""
        return {
            "GIT_AUTHOR_NAME": self.author_name,
            "GIT_AUTHOR_EMAIL": self.author_email,
            "GIT_AUTHOR_DATE": self.author_date,
            "GIT_COMMITTER_NAME": self.committer_name,
            "GIT_COMMITTER_EMAIL": self.committer_email,
            "GIT_COMMITTER_DATE": self.committer_date,
        }

    @property
    def short_sha(self) -> str:
        return self.sha[:12]

    @property
    def subject(self) -> str:
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class RewritePlan:
    """Ordered commits of a branch segment to reformat and recommit.

    Attributes:
        baseline: First commit unique to the branch
        fork_point: Parent of the baseline; formatting is restricted to
            changes since this point
        revisions: Commits from the fork point (exclusive) to the tip
            (inclusive), oldest first, parents before children
        original_tip: Tip of the branch when the plan was built
    """

    baseline: str
    fork_point: str
    revisions: tuple[str, ...]
    original_tip: str

    def __len__(self) -> int:
        return len(self.revisions)

    def __iter__(self):
        return iter(self.revisions)


@dataclass(frozen=True)
class RewriteOutcome:
    """Final result of a history rewrite."""

    state: RewriteState
    baseline: str | None = None
    old_tip: str | None = None
    new_tip: str | None = None
    rewritten: int = 0
    backup_ref: str | None = None

    @property
    def changed_history(self) -> bool:
        return self.state is RewriteState.DONE and self.old_tip != self.new_tip


# ============================================================
# Pure Rewrite Step
# ============================================================


def rewrite_commit(
    original: CommitRecord, formatted_tree: str, parents: tuple[str, ...]
) -> CommitRecord:
    """Return the commit that replaces `original` after formatting.

    Content comes from `formatted_tree` and ancestry from `parents`; author,
    committer, dates and message are carried over unchanged. The result has
    no sha until it is written to the object database.
    """
    return replace(original, sha="", tree=formatted_tree, parents=parents)


def map_parents(parents: tuple[str, ...], rewritten: dict[str, str]) -> tuple[str, ...]:
    """Substitute rewritten commits for original parents.

    Parents outside the branch segment are kept as they are.
    """
    return tuple(rewritten.get(parent, parent) for parent in parents)

"""Commit records and the append-only table that owns them.

// [LAW:one-source-of-truth] CommitStore is the sole owner of Commit records.
//   DisplayRow refers to commits by integer index only (arena + index).

This module is STABLE: pure data, safe for `from` imports everywhere.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime

# Sentinel commit index for connector-only rows.
NO_COMMIT = -1

SHORT_HASH_LEN = 7


def shorten_hash(full_hash: str) -> str:
    return full_hash[:SHORT_HASH_LEN]


class CommitIndexError(IndexError):
    """A commit index outside [0, count) was used for lookup."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"commit index {index} out of range (count={count})")


@dataclass(frozen=True)
class DiffPayload:
    """Stat summary and patch body fetched for one commit."""

    summary: str = ""
    body: str = ""
    truncated: bool = False


@dataclass(frozen=True)
class Commit:
    short_hash: str
    full_hash: str
    author: str
    authored_at: datetime
    subject: str
    parent_short_hashes: tuple[str, ...] = ()
    refs: str = ""
    diff: DiffPayload | None = None

    @property
    def diff_loaded(self) -> bool:
        return self.diff is not None

    @property
    def diff_summary(self) -> str:
        return self.diff.summary if self.diff is not None else ""

    @property
    def diff_body(self) -> str:
        return self.diff.body if self.diff is not None else ""

    @property
    def is_root(self) -> bool:
        return not self.parent_short_hashes

    @property
    def is_merge(self) -> bool:
        return len(self.parent_short_hashes) >= 2


@dataclass(frozen=True)
class DisplayRow:
    """One line of the rendered graph.

    connector_glyphs is already transliterated; visual_width counts the
    columns of the source connector text.
    """

    connector_glyphs: str
    visual_width: int
    commit_index: int = NO_COMMIT

    @property
    def has_commit(self) -> bool:
        return self.commit_index != NO_COMMIT


@dataclass
class CommitStore:
    """Append-only, index-addressed table of parsed commits."""

    _commits: list[Commit] = field(default_factory=list)
    _first_rows: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._commits)

    def __iter__(self) -> Iterator[Commit]:
        return iter(self._commits)

    def append(self, commit: Commit, row_index: int) -> int:
        """Add a commit first seen at display row `row_index`; return its index."""
        self._commits.append(commit)
        self._first_rows.append(row_index)
        return len(self._commits) - 1

    def _check(self, index: int) -> None:
        if index < 0 or index >= len(self._commits):
            raise CommitIndexError(index, len(self._commits))

    def get(self, index: int) -> Commit:
        self._check(index)
        return self._commits[index]

    def first_row_of_commit(self, index: int) -> int:
        self._check(index)
        return self._first_rows[index]

    def attach_diff(self, index: int, payload: DiffPayload) -> Commit:
        """Store diff data on a commit. Re-attaching an equal payload is a no-op."""
        self._check(index)
        current = self._commits[index]
        if current.diff == payload:
            return current
        updated = dataclasses.replace(current, diff=payload)
        self._commits[index] = updated
        return updated

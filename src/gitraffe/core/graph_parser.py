"""Graph-stream parsing: `git log --graph` text → DisplayRows + CommitStore.

Pure functions, no I/O. The data source (gitraffe.io.git_source) hands us
lines; we hand back a ParsedGraph.

// [LAW:one-source-of-truth] Rows are the unit of truth for rendering. Graph
//   mode and simple mode both produce a ParsedGraph the compositor consumes
//   identically.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from gitraffe.core.commit_store import (
    NO_COMMIT,
    Commit,
    CommitStore,
    DisplayRow,
    shorten_hash,
)

logger = logging.getLogger(__name__)

FIELD_SEP = "\x00"
SIMPLE_FIELD_SEP = "|"
MAX_RECORD_FIELDS = 6
MIN_RECORD_FIELDS = 4

HASH_PATTERN = re.compile(r"[0-9a-f]{40}")

# Source glyph → display glyph. Anything not listed passes through.
GLYPH_TABLE = str.maketrans({
    "*": "●",  # ●
    "|": "│",  # │
})

ROOT_GLYPH = "◉"  # ◉
NODE_GLYPH = "●"  # ●
MERGE_GLYPH = "◆"  # ◆

MODE_GRAPH = "graph"
MODE_SIMPLE = "simple"

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class SourceUnavailable(RuntimeError):
    """The upstream data source cannot be used at all."""


class GraphUnavailable(SourceUnavailable):
    """Graph-formatted output could not be produced; fall back to simple mode."""


@dataclass
class ParsedGraph:
    store: CommitStore = field(default_factory=CommitStore)
    rows: list[DisplayRow] = field(default_factory=list)
    max_graph_width: int = 0
    mode: str = MODE_GRAPH
    skipped: int = 0

    @property
    def commit_count(self) -> int:
        return len(self.store)

    def row_of_commit(self, commit_index: int) -> int:
        return self.store.first_row_of_commit(commit_index)


def find_commit_start(line: str) -> int:
    """Return the index where a commit record begins in `line`, or -1."""
    match = HASH_PATTERN.search(line)
    return match.start() if match else -1


def transliterate_graph(text: str) -> str:
    return text.translate(GLYPH_TABLE)


def _parse_parents(raw: str) -> tuple[str, ...]:
    return tuple(shorten_hash(p) for p in raw.split())


def _parse_timestamp(raw: str, fallback: datetime | None = None) -> datetime:
    try:
        return datetime.fromtimestamp(int(raw.strip()), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        if fallback is None:
            return _EPOCH
        logger.warning("failed to parse timestamp %r, using current time", raw)
        return fallback


def parse_record(record: str) -> Commit | None:
    """Parse a NUL-separated commit record. Returns None when too short."""
    parts = record.split(FIELD_SEP, MAX_RECORD_FIELDS - 1)
    if len(parts) < MIN_RECORD_FIELDS:
        return None
    full_hash = parts[0]
    return Commit(
        short_hash=shorten_hash(full_hash),
        full_hash=full_hash,
        author=parts[1],
        authored_at=_parse_timestamp(parts[2]),
        subject=parts[3],
        parent_short_hashes=_parse_parents(parts[4]) if len(parts) > 4 else (),
        refs=parts[5].strip() if len(parts) > 5 else "",
    )


def parse_graph_lines(lines: Iterable[str]) -> ParsedGraph:
    """Parse `git log --graph` output into rows and commits.

    Raises GraphUnavailable when the stream has content but not a single
    commit hash in it.
    """
    parsed = ParsedGraph(mode=MODE_GRAPH)
    saw_content = False

    for line in lines:
        line = line.rstrip("\r\n")
        if not line:
            continue
        saw_content = True

        start = find_commit_start(line)
        if start >= 0:
            connector = line[:start]
            commit = parse_record(line[start:])
            if commit is None:
                # ParseSkip: malformed record, drop the row
                parsed.skipped += 1
                logger.debug("dropping malformed record line: %r", line)
                continue
            commit_index = parsed.store.append(commit, len(parsed.rows))
        else:
            connector = line
            commit_index = NO_COMMIT

        width = len(connector)
        parsed.max_graph_width = max(parsed.max_graph_width, width)
        parsed.rows.append(DisplayRow(
            connector_glyphs=transliterate_graph(connector),
            visual_width=width,
            commit_index=commit_index,
        ))

    if saw_content and parsed.commit_count == 0:
        raise GraphUnavailable("graph output contained no commit records")

    logger.info(
        "parsed %d commits, %d display rows, max graph width %d (%d skipped)",
        parsed.commit_count, len(parsed.rows), parsed.max_graph_width, parsed.skipped,
    )
    return parsed


def simple_glyph(commit: Commit) -> str:
    if commit.is_root:
        return ROOT_GLYPH
    if commit.is_merge:
        return MERGE_GLYPH
    return NODE_GLYPH


def parse_simple_lines(lines: Iterable[str]) -> ParsedGraph:
    """Parse pipe-separated `%H|%an|%at|%s|%P` records: one row per commit."""
    parsed = ParsedGraph(mode=MODE_SIMPLE)
    now = datetime.now(tz=timezone.utc)

    for line in lines:
        line = line.rstrip("\r\n")
        if not line:
            continue
        parts = line.split(SIMPLE_FIELD_SEP)
        if len(parts) < MIN_RECORD_FIELDS:
            parsed.skipped += 1
            continue
        # Subjects may contain the separator; parents are always last.
        if len(parts) > 5:
            parts = parts[:3] + [SIMPLE_FIELD_SEP.join(parts[3:-1]), parts[-1]]
        full_hash = parts[0]
        commit = Commit(
            short_hash=shorten_hash(full_hash),
            full_hash=full_hash,
            author=parts[1],
            authored_at=_parse_timestamp(parts[2], fallback=now),
            subject=parts[3],
            parent_short_hashes=_parse_parents(parts[4]) if len(parts) > 4 else (),
        )
        row_index = len(parsed.rows)
        commit_index = parsed.store.append(commit, row_index)
        # No connector width tracking in simple mode
        parsed.rows.append(DisplayRow(
            connector_glyphs=simple_glyph(commit),
            visual_width=0,
            commit_index=commit_index,
        ))

    logger.info("parsed %d commits in simple mode (%d skipped)", parsed.commit_count, parsed.skipped)
    return parsed

"""Events delivered to the render loop and tasks it asks to have run.

// [LAW:one-source-of-truth] The class IS the type; `kind` only keys the
//   dispatch table in gitraffe.tui.event_handlers.

This module is STABLE. Safe for `from` imports everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from gitraffe.core.commit_store import DiffPayload
from gitraffe.core.graph_parser import ParsedGraph


class EventKind(Enum):
    RESIZED = "resized"
    KEY = "key"
    REPO_LOADED = "repo_loaded"
    REPO_FAILED = "repo_failed"
    DIFF_LOADED = "diff_loaded"


@dataclass(frozen=True)
class RepoInfo:
    """What the header strip shows about the repository."""

    name: str = ""
    branch: str = "unknown"
    head_short: str = "unknown"


# ─── Events ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LoopEvent:
    kind: ClassVar[EventKind]


@dataclass(frozen=True)
class Resized(LoopEvent):
    kind: ClassVar[EventKind] = EventKind.RESIZED

    width: int
    height: int


@dataclass(frozen=True)
class KeyPressed(LoopEvent):
    kind: ClassVar[EventKind] = EventKind.KEY

    key: str


@dataclass(frozen=True)
class RepoLoaded(LoopEvent):
    kind: ClassVar[EventKind] = EventKind.REPO_LOADED

    info: RepoInfo
    parsed: ParsedGraph


@dataclass(frozen=True)
class RepoFailed(LoopEvent):
    kind: ClassVar[EventKind] = EventKind.REPO_FAILED

    info: RepoInfo
    error: str


@dataclass(frozen=True)
class DiffLoaded(LoopEvent):
    kind: ClassVar[EventKind] = EventKind.DIFF_LOADED

    commit_index: int
    payload: DiffPayload


# ─── Tasks (run off the render loop, answered with an event) ────────────


@dataclass(frozen=True)
class LoadRepoTask:
    repo_path: str


@dataclass(frozen=True)
class LoadDiffTask:
    commit_index: int
    full_hash: str


Task = Union[LoadRepoTask, LoadDiffTask]

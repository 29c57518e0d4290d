"""Immutable state of the viewer between events.

Handlers never mutate a ViewState; they return a new one via
dataclasses.replace. The one exception is the
CommitStore inside `parsed`, which only the render loop writes to (diff
attachment).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gitraffe.core.commit_store import Commit
from gitraffe.core.graph_parser import ParsedGraph
from gitraffe.event_types import RepoInfo
from gitraffe.tui.input_modes import Panel


@dataclass(frozen=True)
class ViewState:
    repo_path: str = "."
    width: int = 0
    height: int = 0
    ready: bool = False
    error: str = ""
    repo_info: RepoInfo = field(default_factory=RepoInfo)
    parsed: ParsedGraph | None = None
    selected_commit_index: int = 0
    focused_panel: Panel = Panel.COMMITS
    detail_scroll_offset: int = 0
    pending_diffs: frozenset[int] = frozenset()
    # Bumped whenever stored commit data changes without a field change here.
    revision: int = 0
    quit_requested: bool = False

    @property
    def commit_count(self) -> int:
        return self.parsed.commit_count if self.parsed is not None else 0

    @property
    def has_commits(self) -> bool:
        return self.commit_count > 0

    def selected_commit(self) -> Commit | None:
        if not self.has_commits:
            return None
        return self.parsed.store.get(self.selected_commit_index)

    def selected_row_index(self) -> int:
        if not self.has_commits:
            return 0
        return self.parsed.row_of_commit(self.selected_commit_index)

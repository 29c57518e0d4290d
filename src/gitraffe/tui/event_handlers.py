"""Event handling logic - pure functions from (state, event) to a transition.

Each handler returns a new ViewState plus at most one task for the app to
run off the render loop. Handlers never block and never do I/O.

// [LAW:dataflow-not-control-flow] The dispatch table picks the handler by
//   event kind; key handling is driven by the per-panel keymap.
"""

import dataclasses
import logging
from collections.abc import Callable
from typing import NamedTuple

from gitraffe.event_types import (
    DiffLoaded,
    EventKind,
    KeyPressed,
    LoadDiffTask,
    LoopEvent,
    RepoFailed,
    RepoLoaded,
    Resized,
    Task,
)
from gitraffe.tui import compositor, panel_renderers
from gitraffe.tui.input_modes import PAGE_STEP, Panel, resolve_action
from gitraffe.tui.theme import PLAIN
from gitraffe.tui.view_state import ViewState

logger = logging.getLogger(__name__)

# Vertical padding inside the detail panel (top + bottom).
DETAIL_V_PADDING = 1


class Transition(NamedTuple):
    state: ViewState
    task: Task | None = None


def _no_change(state: ViewState) -> Transition:
    return Transition(state, None)


def detail_viewport_height(state: ViewState) -> int:
    max_graph = state.parsed.max_graph_width if state.parsed is not None else 0
    layout = compositor.compute_layout(state.width, state.height, max_graph)
    return max(1, layout.content_height - 2 * DETAIL_V_PADDING)


def detail_line_count(state: ViewState) -> int:
    commit = state.selected_commit()
    if commit is None:
        return 0
    return len(panel_renderers.detail_lines(commit, PLAIN))


def maybe_load_diff(state: ViewState) -> Transition:
    """Request the selected commit's diff unless it is loaded or in flight."""
    commit = state.selected_commit()
    index = state.selected_commit_index
    if commit is None or commit.diff_loaded or index in state.pending_diffs:
        return Transition(state, None)
    state = dataclasses.replace(state, pending_diffs=state.pending_diffs | {index})
    return Transition(state, LoadDiffTask(commit_index=index, full_hash=commit.full_hash))


# ─── selection / scrolling ──────────────────────────────────────────────


def _step_target(action: str, current: int, last: int, page: int) -> int | None:
    targets = {
        "down": current + 1,
        "up": current - 1,
        "page_down": current + page,
        "page_up": current - page,
        "top": 0,
        "bottom": last,
    }
    target = targets.get(action)
    if target is None:
        return None
    return min(max(0, target), max(0, last))


def _move_selection(state: ViewState, action: str) -> Transition:
    target = _step_target(action, state.selected_commit_index, state.commit_count - 1, PAGE_STEP)
    if target is None:
        return _no_change(state)
    if target != state.selected_commit_index:
        state = dataclasses.replace(state, selected_commit_index=target, detail_scroll_offset=0)
    return maybe_load_diff(state)


def _scroll_details(state: ViewState, action: str) -> Transition:
    line_count = detail_line_count(state)
    last = max(0, line_count - detail_viewport_height(state))
    target = _step_target(action, state.detail_scroll_offset, max(0, line_count - 1), PAGE_STEP)
    if target is None:
        return _no_change(state)
    if action == "bottom":
        target = last
    return Transition(dataclasses.replace(state, detail_scroll_offset=target), None)


_PANEL_NAVIGATION: dict[Panel, Callable[[ViewState, str], Transition]] = {
    Panel.COMMITS: _move_selection,
    Panel.DETAILS: _scroll_details,
}


# ─── handlers ───────────────────────────────────────────────────────────


def handle_resized(state: ViewState, event: Resized) -> Transition:
    return Transition(dataclasses.replace(state, width=event.width, height=event.height), None)


def handle_key(state: ViewState, event: KeyPressed) -> Transition:
    action = resolve_action(state.focused_panel, event.key)
    if action is None:
        return _no_change(state)

    if action == "quit":
        return Transition(dataclasses.replace(state, quit_requested=True), None)
    if action.startswith("focus("):
        panel = Panel(int(action[len("focus("):-1]))
        return Transition(dataclasses.replace(state, focused_panel=panel), None)
    if action == "focus_next":
        return Transition(dataclasses.replace(state, focused_panel=state.focused_panel.next()), None)
    if action == "focus_prev":
        return Transition(dataclasses.replace(state, focused_panel=state.focused_panel.next(-1)), None)

    # Navigation needs data
    if not state.ready or not state.has_commits:
        return _no_change(state)
    navigate = _PANEL_NAVIGATION.get(state.focused_panel)
    if navigate is None:
        return _no_change(state)
    return navigate(state, action)


def handle_repo_loaded(state: ViewState, event: RepoLoaded) -> Transition:
    logger.info(
        "repository ready: %d commits, %d rows, mode=%s",
        event.parsed.commit_count, len(event.parsed.rows), event.parsed.mode,
    )
    state = dataclasses.replace(
        state,
        ready=True,
        error="",
        repo_info=event.info,
        parsed=event.parsed,
        selected_commit_index=0,
        detail_scroll_offset=0,
        pending_diffs=frozenset(),
    )
    return maybe_load_diff(state)


def handle_repo_failed(state: ViewState, event: RepoFailed) -> Transition:
    return Transition(
        dataclasses.replace(state, ready=True, error=event.error, repo_info=event.info),
        None,
    )


def handle_diff_loaded(state: ViewState, event: DiffLoaded) -> Transition:
    """Cache the diff on its commit, selected or not."""
    pending = state.pending_diffs - {event.commit_index}
    if state.parsed is None or not 0 <= event.commit_index < state.commit_count:
        logger.warning("discarding diff for unknown commit index %d", event.commit_index)
        return Transition(dataclasses.replace(state, pending_diffs=pending), None)
    state.parsed.store.attach_diff(event.commit_index, event.payload)
    return Transition(
        dataclasses.replace(state, pending_diffs=pending, revision=state.revision + 1),
        None,
    )


HANDLERS: dict[EventKind, Callable[[ViewState, LoopEvent], Transition]] = {
    EventKind.RESIZED: handle_resized,
    EventKind.KEY: handle_key,
    EventKind.REPO_LOADED: handle_repo_loaded,
    EventKind.REPO_FAILED: handle_repo_failed,
    EventKind.DIFF_LOADED: handle_diff_loaded,
}


def dispatch(state: ViewState, event: LoopEvent) -> Transition:
    handler = HANDLERS.get(event.kind)
    if handler is None:
        logger.warning("no handler for event kind %s", event.kind)
        return _no_change(state)
    return handler(state, event)

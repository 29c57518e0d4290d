"""Tests for full-frame rendering and its fault path."""

import dataclasses

import pytest

from gitraffe.event_types import RepoInfo, RepoLoaded
from gitraffe.tui import rendering
from gitraffe.tui.ansi import strip_ansi, visible_width
from gitraffe.tui.event_handlers import dispatch
from gitraffe.tui.input_modes import Panel
from gitraffe.tui.theme import DEFAULT_THEME, PLAIN
from gitraffe.tui.view_state import ViewState
from tests.harness import make_diff, make_parsed, make_parsed_simple

INFO = RepoInfo(name="demo", branch="main", head_short="abc1234")


def ready_state(parsed=None, width=100, height=30):
    state = ViewState(width=width, height=height)
    return dispatch(state, RepoLoaded(info=INFO, parsed=parsed or make_parsed(40))).state


def frame_lines(state, theme=PLAIN):
    result = rendering.render_frame(state, theme)
    assert isinstance(result, rendering.RenderOk)
    return result.frame.split("\n")


class TestExactFrame:
    @pytest.mark.parametrize("size", [(100, 30), (80, 24), (40, 12), (233, 61), (20, 10)])
    def test_exact_dimensions(self, size):
        width, height = size
        lines = frame_lines(ready_state(width=width, height=height), DEFAULT_THEME)
        assert len(lines) == height
        assert all(visible_width(line) == width for line in lines)

    def test_exact_with_long_diff(self):
        state = ready_state()
        state.parsed.store.attach_diff(0, make_diff(n_lines=500))
        lines = frame_lines(state, DEFAULT_THEME)
        assert len(lines) == 30
        assert all(visible_width(line) == 100 for line in lines)

    def test_exact_in_simple_mode(self):
        lines = frame_lines(ready_state(parsed=make_parsed_simple(60)))
        assert len(lines) == 30
        assert all(visible_width(line) == 100 for line in lines)

    def test_layout(self):
        state = ready_state()
        lines = frame_lines(state)
        assert lines[0].startswith("╭[0]")
        assert "Repository: demo" in lines[1]
        assert lines[3].startswith("╭[1]")
        assert lines[3][25] == "╭"
        assert lines[3][26:29] == "[2]"
        assert lines[-2].startswith("╰")
        assert lines[-1].startswith("0/1/2: focus box")

    def test_selected_commit_shown(self):
        state = ready_state()
        text = "\n".join(frame_lines(state))
        commit = state.parsed.store.get(0)
        assert "> ◉" in text
        assert commit.full_hash in text

    def test_focused_border_styled_differently(self):
        state = ready_state()
        before = rendering.render_frame(state, DEFAULT_THEME).frame
        after = rendering.render_frame(dataclasses.replace(state, focused_panel=Panel.DETAILS), DEFAULT_THEME).frame
        assert before != after
        assert strip_ansi(before) == strip_ansi(after)


class TestPlaceholders:
    def test_initializing(self):
        lines = frame_lines(ViewState(width=50, height=12))
        assert len(lines) == 12
        assert "Initializing..." in lines[1]

    def test_too_small_still_fills_terminal(self):
        lines = frame_lines(ready_state(width=15, height=5))
        assert len(lines) == 5
        assert all(visible_width(line) == 15 for line in lines)
        assert lines[1].startswith("  Waiting")

    def test_too_short(self):
        lines = frame_lines(ready_state(width=60, height=5))
        assert len(lines) == 5
        assert all(visible_width(line) == 60 for line in lines)
        assert "Waiting for terminal size..." in lines[1]

    def test_error_frame(self):
        state = dataclasses.replace(ViewState(width=80, height=20), ready=True, error="no git")
        text = "\n".join(frame_lines(state))
        assert "Error loading repository" in text
        assert "Error: no git" in text
        assert "Press q to quit" in text

    def test_empty_repository(self):
        lines = frame_lines(ready_state(parsed=make_parsed(0)))
        assert len(lines) == 30
        assert any("No commits found" in line for line in lines)


class TestRenderFault:
    def test_bad_selection_becomes_fault(self):
        state = dataclasses.replace(ready_state(parsed=make_parsed(3)), selected_commit_index=7)
        result = rendering.render_frame(state, PLAIN)
        assert isinstance(result, rendering.RenderFault)
        assert isinstance(result.error, IndexError)
        assert "Render error: CommitIndexError" in result.frame
        assert "Press q to quit." in result.frame
        assert len(result.frame.split("\n")) == 30

    def test_fault_frame_names_log(self):
        frame = rendering.fault_frame(ValueError("boom"), 80, 20)
        assert "Render error: ValueError: boom" in frame
        assert "gitraffe.log" in frame

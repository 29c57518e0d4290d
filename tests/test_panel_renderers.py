"""Tests for panel_renderers - pure text builders for each panel."""

import dataclasses
from datetime import datetime, timezone

from gitraffe.core.commit_store import Commit, DiffPayload
from gitraffe.event_types import RepoInfo
from gitraffe.tui import panel_renderers
from gitraffe.tui.ansi import strip_ansi, visible_width
from gitraffe.tui.theme import DEFAULT_THEME, PLAIN
from tests.harness import make_diff, make_hash, make_parsed, make_parsed_simple


def _commit(diff=None, parents=(), refs=""):
    full = make_hash(42)
    return Commit(
        short_hash=full[:7],
        full_hash=full,
        author="Alice",
        authored_at=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        subject="Add the thing",
        parent_short_hashes=parents,
        refs=refs,
        diff=diff,
    )


class TestRepoInfo:
    def test_contains_fields(self):
        info = RepoInfo(name="demo", branch="main", head_short="abc1234")
        text = panel_renderers.render_repo_info(info, PLAIN, 100)
        assert "Repository: demo" in text
        assert "Branch: main" in text
        assert "Commit: abc1234" in text
        assert "Gitraffe" in text

    def test_title_right_aligned(self):
        info = RepoInfo(name="demo", branch="main", head_short="abc1234")
        text = panel_renderers.render_repo_info(info, DEFAULT_THEME, 100)
        assert visible_width(text) == 100
        assert strip_ansi(text).endswith(panel_renderers.TITLE)

    def test_narrow_keeps_one_space(self):
        info = RepoInfo(name="a-very-long-repository-name", branch="main", head_short="abc1234")
        text = strip_ansi(panel_renderers.render_repo_info(info, PLAIN, 10))
        assert "abc1234 " + panel_renderers.TITLE in text


class TestCommitList:
    def test_exact_height(self):
        parsed = make_parsed(30)
        for height in (1, 5, 12, 100):
            text = panel_renderers.render_commit_list(parsed, 0, height, PLAIN)
            assert len(text.split("\n")) == height

    def test_selected_row_marked(self):
        parsed = make_parsed(3)
        lines = panel_renderers.render_commit_list(parsed, 0, 5, PLAIN).split("\n")
        short = parsed.store.get(0).short_hash
        assert lines[0] == "> " + panel_renderers.SELECTED_NODE_GLYPH + "  " + short
        assert lines[1] == "  │ "
        assert lines[2] == "  ●  " + parsed.store.get(1).short_hash

    def test_connectors_padded_to_max_width(self):
        parsed = make_parsed(3)
        lines = panel_renderers.render_commit_list(parsed, 1, 5, PLAIN).split("\n")
        hash_columns = {line.index(parsed.store.get(i).short_hash)
                        for i, line in zip((0, 1, 2), lines[0::2])}
        assert hash_columns == {5}

    def test_selection_scrolls_into_view(self):
        parsed = make_parsed(50)
        selected = 40
        text = panel_renderers.render_commit_list(parsed, selected, 10, PLAIN)
        assert parsed.store.get(selected).short_hash in text
        assert text.count(panel_renderers.SELECTION_MARKER) == 1

    def test_simple_mode_one_line_per_commit(self):
        parsed = make_parsed_simple(3)
        lines = panel_renderers.render_commit_list(parsed, 2, 3, PLAIN).split("\n")
        assert [line[-7:] for line in lines] == [parsed.store.get(i).short_hash for i in range(3)]
        assert lines[2].startswith("> ")

    def test_no_commits(self):
        parsed = make_parsed(0)
        assert panel_renderers.render_commit_list(parsed, 0, 5, PLAIN) == panel_renderers.NO_COMMITS


class TestDetails:
    def test_header_fields(self):
        commit = _commit(parents=("1111111", "2222222"), refs="HEAD -> main")
        lines = panel_renderers.detail_lines(commit, PLAIN)
        assert lines[0] == "SHA:     " + commit.full_hash
        assert lines[1].startswith("Date:    ")
        assert lines[2] == "Author:  Alice"
        assert "Parents: 1111111, 2222222" in lines
        assert "Refs:    HEAD -> main" in lines
        assert "Add the thing" in lines

    def test_root_commit_has_no_parent_line(self):
        lines = panel_renderers.detail_lines(_commit(), PLAIN)
        assert not any(line.startswith("Parents:") for line in lines)

    def test_loading_note_until_diff_arrives(self):
        lines = panel_renderers.detail_lines(_commit(), PLAIN)
        assert lines[-1] == panel_renderers.LOADING_NOTE

    def test_stats_and_diff_sections(self):
        lines = panel_renderers.detail_lines(_commit(diff=make_diff(n_lines=2)), PLAIN)
        text = "\n".join(lines)
        assert "Stats" in text
        assert "Diff" in text
        assert "+added line 1" in lines
        assert panel_renderers.LOADING_NOTE not in text
        assert panel_renderers.TRUNCATION_NOTE not in text

    def test_truncation_note(self):
        lines = panel_renderers.detail_lines(_commit(diff=make_diff(truncated=True)), PLAIN)
        assert lines[-1] == panel_renderers.TRUNCATION_NOTE

    def test_empty_diff_has_no_sections(self):
        lines = panel_renderers.detail_lines(_commit(diff=DiffPayload()), PLAIN)
        text = "\n".join(lines)
        assert "Stats" not in text
        assert panel_renderers.LOADING_NOTE not in text

    def test_tabs_expanded(self):
        diff = DiffPayload(summary="", body="+\tindented")
        lines = panel_renderers.detail_lines(_commit(diff=diff), PLAIN)
        assert "+   indented" in lines

    def test_diff_lines_styled(self):
        lines = panel_renderers.detail_lines(_commit(diff=make_diff(n_lines=1)), DEFAULT_THEME)
        added = [line for line in lines if strip_ansi(line) == "+added line 0"]
        assert added and "\x1b[" in added[0]

    def test_scrolled_window(self):
        commit = _commit(diff=make_diff(n_lines=40))
        all_lines = panel_renderers.detail_lines(commit, PLAIN)
        text = panel_renderers.render_commit_details(commit, 3, 5, PLAIN)
        assert text.split("\n") == all_lines[3:8]

    def test_no_commit(self):
        assert panel_renderers.render_commit_details(None, 0, 5, PLAIN) == ""

    def test_raw_escapes_in_commit_text_shown_as_plain(self):
        diff = DiffPayload(summary="", body="+\x1b[31mred\x1b[0m\n+\x1b[é")
        commit = dataclasses.replace(_commit(diff=diff), subject="Fix \x1b[1mbold\x1b[0m", author="Bob\x1b[")
        lines = panel_renderers.detail_lines(commit, PLAIN)
        assert not any("\x1b" in line for line in lines)
        assert "Fix [1mbold[0m" in lines
        assert "Author:  Bob[" in lines
        assert "+[31mred[0m" in lines
        assert "+[é" in lines

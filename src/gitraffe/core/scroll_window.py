"""Visible-range computation for the commit list and the detail panel."""

from __future__ import annotations


def visible_range(total_rows: int, selected_row: int, viewport_height: int) -> tuple[int, int]:
    """Return the [start, end) slice of rows to show.

    The selection is anchored about a third of the way down the viewport so
    it is neither glued to the top nor to the bottom while paging. Near the
    end of the list the window slides back so it stays full.
    """
    if total_rows <= 0:
        return (0, 0)
    height = max(1, viewport_height)
    selected = min(max(0, selected_row), total_rows - 1)

    start = max(0, selected - height // 3)
    end = start + height
    if end > total_rows:
        end = total_rows
        start = max(0, end - height)
    return (start, end)


def clamp_detail_offset(offset: int, line_count: int) -> int:
    return min(max(0, offset), max(0, line_count - 1))


def detail_slice(lines: list[str], offset: int, viewport_height: int) -> list[str]:
    """Flat (non-anchored) window over a text buffer, always viewport_height long."""
    height = max(1, viewport_height)
    offset = clamp_detail_offset(offset, len(lines))
    window = lines[offset:offset + height]
    window.extend([""] * (height - len(window)))
    return window

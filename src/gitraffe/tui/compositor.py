"""Exact-size panel compositing.

Every function here returns text whose line count and per-line visible
width are exactly what the caller asked for, regardless of how much content
went in or how many escape sequences it carries.

// [LAW:single-enforcer] Frame dimensions are enforced here and nowhere else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.style import Style

from gitraffe.tui.ansi import (
    fit_width,
    line_height,
    overlay_label,
    pad_visible,
    visible_width,
    wrap_visible,
)

logger = logging.getLogger(__name__)

# Rounded border glyphs
TOP_LEFT = "╭"
TOP_RIGHT = "╮"
BOTTOM_LEFT = "╰"
BOTTOM_RIGHT = "╯"
HORIZONTAL = "─"
VERTICAL = "│"

# Layout constants for the commit list panel:
# "> " + graph + " " + 7-char hash + borders (2) + padding (2)
GRAPH_PANEL_CHROME = 14
MIN_LEFT_WIDTH = 25
MAX_LEFT_FRACTION = (3, 5)
MIN_RIGHT_WIDTH = 30
MIN_LEFT_FLOOR = 15
MIN_RIGHT_FLOOR = 10
MIN_CONTENT_HEIGHT = 3


def split_lines(text: str) -> list[str]:
    """Split into lines, ignoring one trailing newline."""
    lines = text.split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def trim_to_height(text: str, height: int) -> str:
    """Make `text` exactly `height` lines.

    Excess lines come out of the middle-bottom so the first and last lines
    (a frame's top and bottom border) survive. Short text is padded with
    empty lines.
    """
    if height <= 0:
        return ""
    lines = split_lines(text)
    if len(lines) > height:
        if height == 1:
            lines = [lines[0]]
        else:
            lines = [lines[0]] + lines[1:height - 1] + [lines[-1]]
    lines.extend([""] * (height - len(lines)))
    return "\n".join(lines)


def fit_frame(text: str, width: int, height: int) -> str:
    """Force a full frame to exactly width x height.

    Overflowing lines are dropped from the bottom; every line is cut or
    padded to `width` visible cells.
    """
    if height <= 0:
        return ""
    actual = line_height(text)
    lines = text.split("\n")
    if actual > height:
        logger.debug("frame overflow: %d lines > %d, trimming", actual, height)
        lines = lines[:height]
    lines.extend([""] * (height - len(lines)))
    return "\n".join(fit_width(line, width) for line in lines)


def _paint(style: Style | None, text: str, color_system) -> str:
    if style is None:
        return text
    return style.render(text, color_system=color_system)


def render_box(
    content: str,
    width: int,
    height: int,
    *,
    border: Style | None = None,
    padding: tuple[int, int] = (0, 1),
    label: str = "",
    wrap: bool = True,
    color_system=None,
) -> str:
    """Draw `content` in a rounded border exactly `width` x `height` cells.

    Long content lines are wrapped to the inner width, or cut when `wrap`
    is false. Content taller than the box is cut by trim_to_height, which
    keeps both borders.
    """
    if width < 2 or height < 2:
        return "\n".join(" " * max(0, width) for _ in range(max(0, height)))

    v_pad, h_pad = padding
    h_pad = max(0, min(h_pad, (width - 2) // 2))
    inner_width = max(0, width - 2 - 2 * h_pad)
    body_height = max(0, height - 2)

    body: list[str] = [""] * v_pad
    for line in split_lines(content) if content else []:
        body.extend(wrap_visible(line, inner_width) if wrap else [line])
    body.extend([""] * v_pad)
    body.extend([""] * (body_height - len(body)))

    side = _paint(border, VERTICAL, color_system)
    gutter = " " * h_pad
    out = [_paint(border, TOP_LEFT + HORIZONTAL * (width - 2) + TOP_RIGHT, color_system)]
    for line in body:
        out.append(side + gutter + fit_width(line, inner_width) + gutter + side)
    out.append(_paint(border, BOTTOM_LEFT + HORIZONTAL * (width - 2) + BOTTOM_RIGHT, color_system))

    framed = "\n".join(out)
    if label:
        framed = overlay_label(framed, label)
    return trim_to_height(framed, height)


def join_horizontal(*blocks: str) -> str:
    """Place blocks side by side, top-aligned, each padded to its own width."""
    columns = [split_lines(b) for b in blocks]
    height = max((len(c) for c in columns), default=0)
    widths = [max((visible_width(line) for line in c), default=0) for c in columns]
    rows = []
    for i in range(height):
        parts = []
        for col, w in zip(columns, widths):
            parts.append(pad_visible(col[i] if i < len(col) else "", w))
        rows.append("".join(parts))
    return "\n".join(rows)


@dataclass(frozen=True)
class Layout:
    left_width: int
    right_width: int
    # Lines inside a panel's border
    content_height: int

    @property
    def panel_height(self) -> int:
        return self.content_height + 2


def compute_layout(width: int, height: int, max_graph_width: int,
                   header_height: int = 3, footer_height: int = 1) -> Layout:
    """Split the terminal between the commit list and the detail panel.

    The commit list grows with the graph, but never past 3/5 of the width;
    a wider graph stays cut inside its panel.
    """
    content_height = max(MIN_CONTENT_HEIGHT, height - header_height - footer_height - 2)

    left = max(MIN_LEFT_WIDTH, max_graph_width + GRAPH_PANEL_CHROME)
    num, den = MAX_LEFT_FRACTION
    left = min(left, width * num // den)
    right = width - left

    if right < MIN_RIGHT_WIDTH:
        right = MIN_RIGHT_WIDTH
        left = width - right
        if left < MIN_LEFT_FLOOR:
            left = MIN_LEFT_FLOOR
            right = width - left

    if left + right > width:
        logger.warning("width overflow: left=%d + right=%d > %d, adjusting", left, right, width)
        right = width - left
        if right < MIN_RIGHT_FLOOR:
            right = width // 3
            left = width - right

    return Layout(left_width=left, right_width=right, content_height=content_height)


def compose_frame(header: str, panels: list[str], footer: str, width: int, height: int) -> str:
    """Stack header, the joined panels and footer; fit to the terminal."""
    body = join_horizontal(*panels) if panels else ""
    return fit_frame("\n".join([header, body, footer]), width, height)

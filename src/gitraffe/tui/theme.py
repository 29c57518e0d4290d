"""Immutable style set for every panel.

A Theme value is threaded explicitly into the render functions; there is no
process-wide style state.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.color import ColorSystem
from rich.style import Style

ORANGE = "#FFA500"
PURPLE = "#7D56F4"
SKY = "#7DD3FC"
SAGE = "#A3BE8C"
SNOW = "#E5E9F0"
FROST = "#88C0D0"
GREY = "#626262"
RED = "#BF616A"
STEEL = "#5E81AC"


@dataclass(frozen=True)
class Theme:
    focused_border: Style = Style(color=ORANGE)
    unfocused_border: Style = Style(color=PURPLE)
    title: Style = Style(color=PURPLE, bold=True)
    hash: Style = Style(color=ORANGE, bold=True)
    selected_hash: Style = Style(color=ORANGE, bold=True, bgcolor="#3C3C3C")
    author: Style = Style(color=SKY)
    date: Style = Style(color=SAGE)
    message: Style = Style(color=SNOW)
    branch: Style = Style(color=FROST, bold=True)
    help: Style = Style(color=GREY)
    graph: Style = Style(color=ORANGE)
    selected_graph: Style = Style(color="#FFFFFF", bold=True)
    label_repo: Style = Style(color=PURPLE, bold=True)
    label_branch: Style = Style(color=FROST, bold=True)
    label_commit: Style = Style(color=ORANGE, bold=True)
    label_date: Style = Style(color=SAGE, bold=True)
    label_author: Style = Style(color=SKY, bold=True)
    label_plain: Style = Style(bold=True)
    heading: Style = Style(color=PURPLE, bold=True)
    diff_add: Style = Style(color=SAGE)
    diff_del: Style = Style(color=RED)
    diff_hunk: Style = Style(color=STEEL)
    diff_header: Style = Style(color=SNOW, bold=True)
    error: Style = Style(color="#FF0000", bold=True)
    color_system: ColorSystem | None = ColorSystem.TRUECOLOR

    def paint(self, name: str, text: str) -> str:
        """Render `text` with the named style as an ANSI string."""
        style: Style = getattr(self, name)
        return style.render(text, color_system=self.color_system)

    def border(self, focused: bool) -> Style:
        return self.focused_border if focused else self.unfocused_border


# No colour at all; used by tests that compare plain layouts.
PLAIN = Theme(color_system=None)

DEFAULT_THEME = Theme()

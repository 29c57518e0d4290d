"""One render pass: ViewState + Theme → a complete terminal frame.

render_frame() never raises. It returns RenderOk with the frame, or
RenderFault carrying the exception and a diagnostic frame the app shows
instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from gitraffe.io.logging_setup import log_file_name
from gitraffe.tui import compositor, panel_renderers
from gitraffe.tui.event_handlers import DETAIL_V_PADDING
from gitraffe.tui.input_modes import Panel, footer_text
from gitraffe.tui.theme import Theme
from gitraffe.tui.view_state import ViewState

logger = logging.getLogger(__name__)

MIN_WIDTH = 20
MIN_HEIGHT = 10
HEADER_HEIGHT = 3
FOOTER_HEIGHT = 1


@dataclass(frozen=True)
class RenderOk:
    frame: str


@dataclass(frozen=True)
class RenderFault:
    error: BaseException
    frame: str


RenderResult = Union[RenderOk, RenderFault]


def placeholder(message: str, width: int, height: int) -> str:
    """A plain message frame; fitted to the terminal when its size is usable."""
    text = "\n" + "\n".join("  " + line if line else "" for line in message.split("\n"))
    if width <= 0 or height <= 0:
        return text
    return compositor.fit_frame(text, width, height)


def _error_frame(state: ViewState, theme: Theme) -> str:
    message = "{}\n\nError: {}\n\nPress q to quit. Check {} for details.".format(
        theme.paint("error", "❌ Error loading repository"),
        state.error,
        log_file_name(),
    )
    return placeholder(message, state.width, state.height)


def fault_frame(error: BaseException, width: int, height: int) -> str:
    message = "Render error: {}: {}\n\nCheck {} for details.\nPress q to quit.".format(
        type(error).__name__, error, log_file_name(),
    )
    return placeholder(message, width, height)


def build_frame(state: ViewState, theme: Theme) -> str:
    """Compose the full frame. May raise; callers use render_frame()."""
    if not state.ready:
        return placeholder("Initializing...", state.width, state.height)
    if state.width < MIN_WIDTH or state.height < MIN_HEIGHT:
        logger.debug("window too small (%dx%d), waiting for resize", state.width, state.height)
        return placeholder("Waiting for terminal size...", state.width, state.height)
    if state.error:
        return _error_frame(state, theme)

    width, height = state.width, state.height
    focused = state.focused_panel
    parsed = state.parsed
    max_graph = parsed.max_graph_width if parsed is not None else 0

    header = compositor.render_box(
        panel_renderers.render_repo_info(state.repo_info, theme, width - 4),
        width,
        HEADER_HEIGHT,
        border=theme.border(focused is Panel.REPO_INFO),
        padding=(0, 1),
        label=Panel.REPO_INFO.label,
        color_system=theme.color_system,
    )

    layout = compositor.compute_layout(width, height, max_graph, HEADER_HEIGHT, FOOTER_HEIGHT)

    if parsed is not None and parsed.commit_count:
        commit_list = panel_renderers.render_commit_list(
            parsed, state.selected_commit_index, layout.content_height, theme,
        )
    else:
        commit_list = panel_renderers.NO_COMMITS
    left = compositor.render_box(
        commit_list,
        layout.left_width,
        layout.panel_height,
        border=theme.border(focused is Panel.COMMITS),
        padding=(0, 1),
        label=Panel.COMMITS.label,
        wrap=False,
        color_system=theme.color_system,
    )

    details = panel_renderers.render_commit_details(
        state.selected_commit(),
        state.detail_scroll_offset,
        layout.content_height - 2 * DETAIL_V_PADDING,
        theme,
    )
    right = compositor.render_box(
        details,
        layout.right_width,
        layout.panel_height,
        border=theme.border(focused is Panel.DETAILS),
        padding=(DETAIL_V_PADDING, 2),
        label=Panel.DETAILS.label,
        color_system=theme.color_system,
    )

    footer = theme.paint("help", footer_text())
    return compositor.compose_frame(header, [left, right], footer, width, height)


def render_frame(state: ViewState, theme: Theme) -> RenderResult:
    try:
        return RenderOk(build_frame(state, theme))
    except Exception as e:
        logger.exception("render pass failed")
        return RenderFault(e, fault_frame(e, state.width, state.height))

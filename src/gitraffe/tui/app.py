"""Main TUI application using Textual.

// [LAW:locality-or-seam] Thin coordinator. State transitions live in
//   event_handlers, frame composition in rendering; this module only feeds
//   events in, starts worker tasks and shows the resulting frame.
// [LAW:single-enforcer] Only the app thread mutates ViewState or the
//   CommitStore. Workers return data as _DataReady messages.
"""

import logging
import traceback
from typing import Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Static

from gitraffe.event_types import KeyPressed, LoadRepoTask, LoopEvent, Resized, Task
from gitraffe.io.git_source import execute_task
from gitraffe.tui import event_handlers, rendering
from gitraffe.tui.theme import DEFAULT_THEME, Theme
from gitraffe.tui.view_state import ViewState

logger = logging.getLogger(__name__)


class _DataReady(Message, bubble=False):
    """Thread-safe bridge: worker thread → app message pump."""

    def __init__(self, event: LoopEvent) -> None:
        self.event = event
        super().__init__()


class FrameView(Static):
    """Shows one pre-composited frame. Never wraps or scrolls."""

    can_focus = False

    DEFAULT_CSS = """
    FrameView {
        width: 100%;
        height: 100%;
        padding: 0;
        border: none;
    }
    """


class GitraffeApp(App):
    """TUI application for browsing a repository's commit graph."""

    CSS = """
    Screen {
        overflow: hidden;
    }
    """

    # ctrl+c quits outright instead of showing Textual's "press ctrl+q" notice.
    BINDINGS = [Binding("ctrl+c", "quit", show=False, priority=True)]

    def __init__(self, source, repo_path: str = ".", theme: Optional[Theme] = None):
        super().__init__()
        self._source = source
        self._theme_value = theme or DEFAULT_THEME
        self._state = ViewState(repo_path=repo_path)
        self._last_result: Optional[rendering.RenderResult] = None
        # Buffered error log, dumped to stderr after the TUI exits
        self.error_log: list[str] = []

    # ─── Derived state ─────────────────────────────────────────────────

    @property
    def view_state(self) -> ViewState:
        return self._state

    @property
    def last_frame(self) -> str:
        return self._last_result.frame if self._last_result is not None else ""

    @property
    def last_result(self) -> Optional[rendering.RenderResult]:
        return self._last_result

    # ─── Lifecycle ─────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield FrameView("", id="frame")

    def on_mount(self) -> None:
        logger.info("starting gitraffe for %s", self._state.repo_path)
        self._apply(Resized(width=self.size.width, height=self.size.height))
        self._start_task(LoadRepoTask(repo_path=self._state.repo_path))

    def on_resize(self, event: events.Resize) -> None:
        self._apply(Resized(width=event.size.width, height=event.size.height))

    def on_key(self, event: events.Key) -> None:
        """// [LAW:single-enforcer] on_key is the sole key dispatcher."""
        event.prevent_default()
        event.stop()
        self._apply(KeyPressed(key=event.key))

    def on__data_ready(self, message: _DataReady) -> None:
        self._apply(message.event)

    # ─── Event loop plumbing ───────────────────────────────────────────

    def _start_task(self, task: Optional[Task]) -> None:
        """Run a task in a worker thread; its result comes back as a message."""
        if task is None:
            return
        source = self._source

        def _work():
            event = execute_task(source, task)
            self.post_message(_DataReady(event))

        self.run_worker(_work, thread=True, exclusive=False, group="git")

    def _apply(self, event: LoopEvent) -> None:
        try:
            transition = event_handlers.dispatch(self._state, event)
        except Exception as e:
            self._handle_exception(e)
            return
        self._state = transition.state
        self._start_task(transition.task)
        if self._state.quit_requested:
            self.exit()
            return
        self._refresh_frame()

    def _refresh_frame(self) -> None:
        result = rendering.render_frame(self._state, self._theme_value)
        if isinstance(result, rendering.RenderFault):
            self.error_log.append(f"RENDER FAULT: {result.error!r}")
        self._show(result)

    def _show(self, result: rendering.RenderResult) -> None:
        self._last_result = result
        try:
            frame = self.query_one("#frame", FrameView)
        except NoMatches:
            return
        frame.update(Text.from_ansi(result.frame, no_wrap=True, overflow="crop"))

    def _handle_exception(self, error: Exception) -> None:
        """Keep the loop alive: log, then show the diagnostic frame."""
        tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self.error_log.append(f"EXCEPTION: {error}")
        self.error_log.append(tb)
        logger.error("unhandled exception in event loop: %s\n%s", error, tb)
        fault = rendering.RenderFault(
            error, rendering.fault_frame(error, self._state.width, self._state.height),
        )
        self._show(fault)

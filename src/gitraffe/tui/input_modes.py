"""Key → action mapping, keyed by the focused panel.

All keyboard input routes through event_handlers.handle_key; Textual
BINDINGS are not used.
"""

from enum import Enum


class Panel(Enum):
    """Focusable panels, numbered as on screen."""

    REPO_INFO = 0
    COMMITS = 1
    DETAILS = 2

    @property
    def label(self) -> str:
        return "[{}]".format(self.value)

    def next(self, step: int = 1) -> "Panel":
        members = list(Panel)
        return members[(members.index(self) + step) % len(members)]


PAGE_STEP = 10

# Handled regardless of focus and load state.
GLOBAL_KEYMAP: dict[str, str] = {
    "q": "quit",
    "ctrl+c": "quit",
    "escape": "quit",
    "0": "focus(0)",
    "1": "focus(1)",
    "2": "focus(2)",
    "tab": "focus_next",
    "shift+tab": "focus_prev",
}

_NAVIGATION: dict[str, str] = {
    "j": "down",
    "down": "down",
    "k": "up",
    "up": "up",
    "d": "page_down",
    "ctrl+d": "page_down",
    "pagedown": "page_down",
    "u": "page_up",
    "ctrl+u": "page_up",
    "pageup": "page_up",
    "g": "top",
    "home": "top",
    "G": "bottom",
    "shift+g": "bottom",
    "end": "bottom",
}

# [LAW:one-source-of-truth] Per-panel navigation. The repo info strip has none.
PANEL_KEYMAP: dict[Panel, dict[str, str]] = {
    Panel.REPO_INFO: {},
    Panel.COMMITS: dict(_NAVIGATION),
    Panel.DETAILS: dict(_NAVIGATION),
}


def resolve_action(panel: Panel, key: str) -> str | None:
    """Action name for `key` with `panel` focused, or None if unbound."""
    action = GLOBAL_KEYMAP.get(key)
    if action is not None:
        return action
    return PANEL_KEYMAP.get(panel, {}).get(key)


# Footer help, one line.
FOOTER_KEYS: list[tuple[str, str]] = [
    ("0/1/2", "focus box"),
    ("↑/↓/j/k", "scroll"),
    ("d/u", "half page"),
    ("g/G", "top/bottom"),
    ("q/esc", "quit"),
]


def footer_text() -> str:
    return " • ".join("{}: {}".format(k, d) for k, d in FOOTER_KEYS)

"""Panel rendering logic - pure functions for building panel text.

Each function takes plain data plus a Theme and returns an ANSI string.
Sizing of the surrounding box is the compositor's job; the commit list and
detail renderers do return exactly the number of lines they are asked for.
"""

from gitraffe.core.commit_store import Commit
from gitraffe.core.graph_parser import NODE_GLYPH, ParsedGraph
from gitraffe.core.scroll_window import detail_slice, visible_range
from gitraffe.event_types import RepoInfo
from gitraffe.tui.ansi import neutralize_escapes, visible_width
from gitraffe.tui.theme import Theme

TITLE = " 🦒 Gitraffe - Git Graph Viewer "
SELECTED_NODE_GLYPH = "◉"
SELECTION_MARKER = "> "
NO_MARKER = "  "
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
TRUNCATION_NOTE = "... (truncated)"
LOADING_NOTE = "Loading diff..."
NO_COMMITS = "No commits found"
TAB_WIDTH = 4

_SECTION_WIDTH = 35


def _heading(title: str, theme: Theme) -> str:
    text = "─── {} ".format(title)
    return theme.paint("heading", text + "─" * max(3, _SECTION_WIDTH - len(text)))


def render_repo_info(info: RepoInfo, theme: Theme, inner_width: int) -> str:
    """One line: repository, branch and HEAD on the left, title on the right."""
    left = "".join([
        theme.paint("label_repo", "Repository: "),
        info.name,
        "  ",
        theme.paint("label_branch", "Branch: "),
        theme.paint("branch", info.branch),
        "  ",
        theme.paint("label_commit", "Commit: "),
        theme.paint("hash", info.head_short),
    ])
    title = theme.paint("title", TITLE)
    spacing = max(1, inner_width - visible_width(left) - visible_width(title))
    return left + " " * spacing + title


def render_commit_list(parsed: ParsedGraph, selected: int, visible_height: int, theme: Theme) -> str:
    """The graph column and short hashes, exactly `visible_height` lines.

    Connector columns are padded to the widest connector in the whole parse
    so nodes line up vertically.
    """
    if parsed.commit_count == 0:
        return NO_COMMITS

    height = max(1, visible_height)
    rows = parsed.rows
    start, end = visible_range(len(rows), parsed.row_of_commit(selected), height)

    lines = []
    for row in rows[start:end]:
        pad = max(0, parsed.max_graph_width - row.visual_width)
        graph = row.connector_glyphs + " " * pad
        if not row.has_commit:
            lines.append(NO_MARKER + theme.paint("graph", graph))
            continue
        commit = parsed.store.get(row.commit_index)
        if row.commit_index == selected:
            highlighted = graph.replace(NODE_GLYPH, SELECTED_NODE_GLYPH)
            lines.append(
                SELECTION_MARKER
                + theme.paint("selected_graph", highlighted)
                + " "
                + theme.paint("selected_hash", commit.short_hash)
            )
        else:
            lines.append(
                NO_MARKER
                + theme.paint("graph", graph)
                + " "
                + theme.paint("hash", commit.short_hash)
            )

    lines.extend([""] * (height - len(lines)))
    return "\n".join(lines)


def _diff_line(line: str, theme: Theme) -> str:
    if line.startswith("+") and not line.startswith("+++"):
        return theme.paint("diff_add", line)
    if line.startswith("-") and not line.startswith("---"):
        return theme.paint("diff_del", line)
    if line.startswith("@@"):
        return theme.paint("diff_hunk", line)
    if line.startswith("diff "):
        return theme.paint("diff_header", line)
    return line


def _clean(text: str) -> list[str]:
    return [line.rstrip("\r").expandtabs(TAB_WIDTH) for line in neutralize_escapes(text).split("\n")]


def detail_lines(commit: Commit, theme: Theme) -> list[str]:
    """All lines of the detail panel for one commit, before scrolling."""
    lines = [
        theme.paint("label_commit", "SHA:     ") + theme.paint("hash", commit.full_hash),
        theme.paint("label_date", "Date:    ")
        + theme.paint("date", commit.authored_at.astimezone().strftime(DATE_FORMAT)),
        theme.paint("label_author", "Author:  ") + theme.paint("author", neutralize_escapes(commit.author)),
    ]
    if commit.parent_short_hashes:
        lines.append(theme.paint("label_plain", "Parents: ") + ", ".join(commit.parent_short_hashes))
    if commit.refs:
        lines.append(theme.paint("label_branch", "Refs:    ") + theme.paint("branch", neutralize_escapes(commit.refs)))

    lines.append("")
    lines.append(_heading("Message", theme))
    lines.append(theme.paint("message", neutralize_escapes(commit.subject)))

    if not commit.diff_loaded:
        lines.append("")
        lines.append(theme.paint("help", LOADING_NOTE))
        return lines

    if commit.diff_summary:
        lines.append("")
        lines.append(_heading("Stats", theme))
        lines.extend(_clean(commit.diff_summary))

    if commit.diff_body:
        lines.append("")
        lines.append(_heading("Diff", theme))
        lines.extend(_diff_line(line, theme) for line in _clean(commit.diff_body))
        if commit.diff.truncated:
            lines.append(theme.paint("help", TRUNCATION_NOTE))
    return lines


def render_commit_details(commit: Commit | None, offset: int, visible_height: int, theme: Theme) -> str:
    """Detail panel text scrolled by `offset`, exactly `visible_height` lines."""
    if commit is None:
        return ""
    return "\n".join(detail_slice(detail_lines(commit, theme), offset, visible_height))

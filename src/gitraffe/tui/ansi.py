"""ANSI-aware text measurement and editing.

Every transform here treats a CSI escape sequence (ESC '[' parameter and
intermediate bytes, one final byte in 0x40-0x7E) as an opaque unit: it is
copied verbatim, never split, and never counted as a visible column. A
malformed `ESC [` ends at the first byte that cannot belong to it.

// [LAW:single-enforcer] All escape-sequence scanning goes through tokenize().
"""

from __future__ import annotations

from collections.abc import Iterator

from rich.cells import cell_len, get_character_cell_size

ESC = "\x1b"
CSI = ESC + "["
RESET = "\x1b[0m"

_PARAM_BYTES = (0x30, 0x3F)
_INTERMEDIATE_BYTES = (0x20, 0x2F)
_FINAL_BYTES = (0x40, 0x7E)


def _in(byte_range: tuple[int, int], ch: str) -> bool:
    return byte_range[0] <= ord(ch) <= byte_range[1]


def _escape_end(text: str, start: int) -> int:
    """Index one past the escape sequence beginning at `start`.

    A well-formed sequence is parameter bytes, then intermediate bytes, then
    one final byte. Any other byte ends a malformed sequence just before it,
    so visible text (and newlines) after a stray `ESC [` are never swallowed.
    """
    i = start + 2
    n = len(text)
    while i < n and _in(_PARAM_BYTES, text[i]):
        i += 1
    while i < n and _in(_INTERMEDIATE_BYTES, text[i]):
        i += 1
    if i < n and _in(_FINAL_BYTES, text[i]):
        return i + 1
    # Unterminated or malformed: opaque up to here only
    return i


def tokenize(text: str) -> Iterator[tuple[bool, str]]:
    """Yield (is_escape, chunk) pairs covering `text` exactly, in order."""
    i = 0
    plain_start = 0
    n = len(text)
    while i < n:
        if text[i] == ESC and i + 1 < n and text[i + 1] == "[":
            if plain_start < i:
                yield (False, text[plain_start:i])
            end = _escape_end(text, i)
            yield (True, text[i:end])
            i = plain_start = end
            continue
        i += 1
    if plain_start < n:
        yield (False, text[plain_start:])


def neutralize_escapes(text: str) -> str:
    """Drop ESC characters from untrusted text (commit messages, patch bodies).

    Raw content then shows as plain characters instead of reaching the
    terminal as styling.
    """
    return text.replace(ESC, "")


def strip_ansi(text: str) -> str:
    return "".join(chunk for is_escape, chunk in tokenize(text) if not is_escape)


def visible_width(text: str) -> int:
    """Terminal cells occupied by `text`, escape sequences excluded."""
    return cell_len(strip_ansi(text))


def line_height(text: str) -> int:
    """Number of display lines in `text`.

    Escape sequences never contain newlines, so only real line breaks count.
    """
    return strip_ansi(text).count("\n") + 1


def _is_reset(seq: str) -> bool:
    return seq in (RESET, "\x1b[m")


def _is_sgr(seq: str) -> bool:
    return seq.endswith("m")


def truncate_visible(text: str, width: int) -> str:
    """Drop visible characters past `width` cells.

    All escape sequences are kept, including those after the cut, so a
    trailing reset still closes any style opened before it.
    """
    out: list[str] = []
    used = 0
    full = False
    for is_escape, chunk in tokenize(text):
        if is_escape:
            out.append(chunk)
            continue
        if full:
            continue
        for ch in chunk:
            size = get_character_cell_size(ch)
            if used + size > width:
                full = True
                break
            out.append(ch)
            used += size
    return "".join(out)


def pad_visible(text: str, width: int) -> str:
    gap = width - visible_width(text)
    return text + " " * gap if gap > 0 else text


def fit_width(text: str, width: int) -> str:
    """Exactly `width` visible cells: truncate, then pad."""
    return pad_visible(truncate_visible(text, width), width)


def wrap_visible(text: str, width: int) -> list[str]:
    """Hard-wrap a single line into chunks of at most `width` cells.

    Active SGR styling is closed at each break and reopened on the next
    line so styles never bleed into neighbouring panels.
    """
    if width <= 0:
        return [text]
    lines: list[str] = []
    current: list[str] = []
    active: list[str] = []
    used = 0
    for is_escape, chunk in tokenize(text):
        if is_escape:
            current.append(chunk)
            if _is_reset(chunk):
                active = []
            elif _is_sgr(chunk):
                active.append(chunk)
            continue
        for ch in chunk:
            size = get_character_cell_size(ch)
            if used + size > width and used > 0:
                if active:
                    current.append(RESET)
                lines.append("".join(current))
                current = list(active)
                used = 0
            current.append(ch)
            used += size
    lines.append("".join(current))
    return lines


def overlay_label(frame: str, label: str) -> str:
    """Write `label` over the top border, just after the corner glyph.

    Visible characters are replaced one-for-one; escape sequences and the
    rest of the frame are untouched. The label is cut to the space available.
    """
    if not label:
        return frame
    top, sep, rest = frame.partition("\n")
    out: list[str] = []
    visible_index = 0
    label_index = 0
    for is_escape, chunk in tokenize(top):
        if is_escape:
            out.append(chunk)
            continue
        for ch in chunk:
            if visible_index >= 1 and label_index < len(label):
                out.append(label[label_index])
                label_index += 1
            else:
                out.append(ch)
            visible_index += 1
    return "".join(out) + sep + rest

"""Terminal rendering of the application state."""

from __future__ import annotations

import curses
import json
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Iterator

from .app import App

_I64_MIN = -(2**63)
_U64_MAX = 2**64 - 1


class Color(Enum):
    GREEN = "green"
    RED = "red"
    BLUE = "blue"
    CYAN = "cyan"
    MAGENTA = "magenta"
    YELLOW = "yellow"
    DARK_GRAY = "dark_gray"


@dataclass
class Span:
    """A run of text drawn in one colour; ``None`` means the default colour."""

    text: str
    color: Color | None = None


@dataclass
class Line:
    """One display line made of spans."""

    spans: list[Span] = field(default_factory=list)

    @classmethod
    def raw(cls, text: str) -> Line:
        return cls([Span(text)])

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


def _format_number(value: int | float) -> str:
    if isinstance(value, int) and _I64_MIN <= value <= _U64_MAX:
        return str(value)
    text = repr(float(value))
    if "e" in text:
        mantissa, exponent = text.split("e")
        text = f"{mantissa}e{int(exponent)}"
    return text


def scalar_span(value: Any) -> Span:
    """Coloured span for a JSON scalar; containers give an empty span."""
    if isinstance(value, str):
        return Span(f'"{value}"', Color.GREEN)
    if isinstance(value, bool):
        return Span("true" if value else "false", Color.MAGENTA)
    if isinstance(value, (int, float)):
        return Span(_format_number(value), Color.CYAN)
    if value is None:
        return Span("null", Color.DARK_GRAY)
    return Span("")


def highlight_json(value: Any, indent: int = 0) -> list[Line]:
    """Pretty-print a parsed JSON value as coloured lines, keys sorted."""
    inner_pad = "  " * (indent + 1)
    close_pad = "  " * indent

    if isinstance(value, dict):
        if not value:
            return [Line.raw("{}")]
        lines = [Line.raw("{")]
        items = sorted(value.items())
        for position, (key, member) in enumerate(items):
            comma = "," if position < len(items) - 1 else ""
            key_span = Span(f'{inner_pad}"{key}"', Color.YELLOW)
            colon = Span(": ")
            if isinstance(member, (dict, list)):
                sub = highlight_json(member, indent + 1)
                sub[0].spans[0:0] = [key_span, colon]
                sub[-1].spans.append(Span(comma))
                lines.extend(sub)
            else:
                lines.append(Line([key_span, colon, scalar_span(member), Span(comma)]))
        lines.append(Line.raw(f"{close_pad}}}"))
        return lines

    if isinstance(value, list):
        if not value:
            return [Line.raw("[]")]
        lines = [Line.raw("[")]
        for position, item in enumerate(value):
            comma = "," if position < len(value) - 1 else ""
            if isinstance(item, (dict, list)):
                sub = highlight_json(item, indent + 1)
                sub[0].spans.insert(0, Span(inner_pad))
                sub[-1].spans.append(Span(comma))
                lines.extend(sub)
            else:
                lines.append(Line([Span(inner_pad), scalar_span(item), Span(comma)]))
        lines.append(Line.raw(f"{close_pad}]"))
        return lines

    return [Line([scalar_span(value)])]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"unsupported JSON constant {name}")


def format_payload(payload: str) -> list[Line]:
    """Highlighted JSON if the payload parses, otherwise the raw text."""
    try:
        value = json.loads(payload, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return [Line.raw(payload)]
    return highlight_json(value, 0)


def status_text(app: App) -> Span:
    """The status bar text, green when connected and red otherwise."""
    status = "Connected" if app.connected else "Disconnected"
    color = Color.GREEN if app.connected else Color.RED
    return Span(f" Status: {status}  |  Messages: {app.message_count}", color)


def topic_lines(app: App) -> list[str]:
    """One text row for every visible topic."""
    rows = []
    for node in app.topic_tree.flatten(0):
        if not node.has_children:
            indicator = "·"
        elif node.expanded:
            indicator = "▼"
        else:
            indicator = "▶"
        indent = " " * node.depth
        rows.append(
            f" {indent}{indicator} {node.label} | "
            f"({node.message_count} msgs, {node.sub_topic_count} topics)"
        )
    return rows


def message_lines(app: App) -> list[Line]:
    """The latest message of the selected topic: its time, then its payload."""
    node = app.selected_node()
    if node is None or not node.messages:
        return []
    message = node.messages[-1]
    lines = [Line([Span(f" {message.ts:%H:%M:%S}", Color.DARK_GRAY)]), Line()]
    lines.extend(format_payload(message.payload))
    return lines


class _Palette:
    """Curses attributes for the colours in use."""

    _FOREGROUNDS = {
        Color.GREEN: curses.COLOR_GREEN,
        Color.RED: curses.COLOR_RED,
        Color.BLUE: curses.COLOR_BLUE,
        Color.CYAN: curses.COLOR_CYAN,
        Color.MAGENTA: curses.COLOR_MAGENTA,
        Color.YELLOW: curses.COLOR_YELLOW,
    }

    def __init__(self) -> None:
        self._attrs: dict[Color, int] = {}
        self.highlight = curses.A_REVERSE
        if not curses.has_colors():
            return
        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        foregrounds = dict(self._FOREGROUNDS)
        gray_extra = 0
        if curses.COLORS > 8:
            foregrounds[Color.DARK_GRAY] = 8
        else:
            foregrounds[Color.DARK_GRAY] = curses.COLOR_BLACK
            gray_extra = curses.A_BOLD
        for number, (color, foreground) in enumerate(foregrounds.items(), start=1):
            curses.init_pair(number, foreground, background)
            self._attrs[color] = curses.color_pair(number)
        self._attrs[Color.DARK_GRAY] |= gray_extra
        highlight_pair = len(foregrounds) + 1
        curses.init_pair(highlight_pair, curses.COLOR_WHITE, curses.COLOR_BLUE)
        self.highlight = curses.color_pair(highlight_pair)

    def attr(self, color: Color | None) -> int:
        return self._attrs.get(color, 0) if color is not None else 0


@lru_cache(maxsize=1)
def _palette() -> _Palette:
    return _Palette()


def _put(window: Any, y: int, x: int, text: str, attr: int = 0) -> None:
    _, width = window.getmaxyx()
    room = width - x
    if room <= 0 or not text:
        return
    try:
        window.addstr(y, x, text[:room], attr)
    except curses.error:
        pass


def _box(screen: Any, top: int, left: int, height: int, width: int, title: str) -> Any:
    if height < 2 or width < 2:
        return None
    try:
        window = screen.derwin(height, width, top, left)
        window.box()
    except curses.error:
        return None
    _put(window, 0, 1, title)
    return window


def _wrap(line: Line, width: int) -> Iterator[list[tuple[str, Color | None]]]:
    row: list[tuple[str, Color | None]] = []
    used = 0
    for span in line.spans:
        text = span.text
        while text:
            room = width - used
            if room <= 0:
                yield row
                row, used = [], 0
                continue
            piece, text = text[:room], text[room:]
            row.append((piece, span.color))
            used += len(piece)
    yield row


def _draw_topics(window: Any, app: App, palette: _Palette) -> None:
    height, width = window.getmaxyx()
    inner_height, inner_width = height - 2, width - 2
    if inner_height <= 0 or inner_width <= 0:
        return
    rows = topic_lines(app)
    selected = app.list_selected
    offset = 0
    if selected is not None and selected >= inner_height:
        offset = selected - inner_height + 1
    for screen_row, (index, text) in enumerate(
        list(enumerate(rows))[offset : offset + inner_height]
    ):
        if index == selected:
            _put(window, 1 + screen_row, 1, text.ljust(inner_width), palette.highlight)
        else:
            _put(window, 1 + screen_row, 1, text)


def _draw_message(window: Any, app: App, palette: _Palette) -> None:
    height, width = window.getmaxyx()
    inner_height, inner_width = height - 2, width - 2
    if inner_height <= 0 or inner_width <= 0:
        return
    screen_row = 0
    for line in message_lines(app):
        for row in _wrap(line, inner_width):
            if screen_row >= inner_height:
                return
            column = 1
            for text, color in row:
                _put(window, 1 + screen_row, column, text, palette.attr(color))
                column += len(text)
            screen_row += 1


def draw(screen: Any, app: App) -> None:
    """Render the status bar, the topic list and the selected message."""
    palette = _palette()
    screen.erase()
    rows, cols = screen.getmaxyx()

    status_height = min(3, rows)
    status = status_text(app)
    status_window = _box(screen, 0, 0, status_height, cols, "rmqtty")
    if status_window is not None and status_height >= 3:
        _put(status_window, 1, 1, status.text[: max(cols - 2, 0)], palette.attr(status.color))

    body_height = rows - status_height
    left_width = cols * 35 // 100
    right_width = cols - left_width

    topics_window = _box(screen, status_height, 0, body_height, left_width, "Topics")
    if topics_window is not None:
        _draw_topics(topics_window, app, palette)

    message_window = _box(screen, status_height, left_width, body_height, right_width, "Message")
    if message_window is not None:
        _draw_message(message_window, app, palette)

    screen.refresh()
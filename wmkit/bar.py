"""Geometry and click handling for the bar's tag, title and indicator parts."""

from __future__ import annotations

import enum
from typing import Callable, NamedTuple, Sequence

from wmkit.layout import NUMTAGS, Client, Monitor

TAGSPX = 5
TAGSROWS = 3

DEFAULT_TAG_ICONS = ("1", "2", "3", "4", "5", "6", "7", "8", "9")
ALTERNATIVE_TAG_ICONS = ("A", "B", "C", "D", "E", "F", "G", "H", "I")
DECORATED_TAG_ICONS = ("<1>", "<2>", "<3>", "<4>", "<5>", "<6>", "<7>", "<8>", "<9>")


class Indicator(enum.IntEnum):
    NONE = 0
    TOP_LEFT_SQUARE = 1
    TOP_LEFT_LARGER_SQUARE = 2
    TOP_BAR = 3
    TOP_BAR_SLIM = 4
    BOTTOM_BAR = 5
    BOTTOM_BAR_SLIM = 6
    BOX = 7
    BOX_WIDER = 8
    BOX_FULL = 9
    CLIENT_DOTS = 10
    RIGHT_TAGS = 11
    PLUS = 12
    PLUS_AND_SQUARE = 13
    PLUS_AND_LARGER_SQUARE = 14


class Scheme(enum.IntEnum):
    NORM = 0
    SEL = 1
    TITLE_NORM = 2
    TITLE_SEL = 3
    TAGS_NORM = 4
    TAGS_SEL = 5
    HID_NORM = 6
    HID_SEL = 7
    URG = 8


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int
    filled: bool


def tag_icon(monitor_num: int, tag: int, icons: Sequence[str] = DEFAULT_TAG_ICONS) -> str:
    """Icon of a tag; the index runs on across monitors and wraps around."""
    index = tag + NUMTAGS * monitor_num
    if index >= len(icons):
        index %= len(icons)
    return icons[index]


def tags_width(
    monitor_num: int,
    icons: Sequence[str],
    text_width: Callable[[str], int],
) -> int:
    """Total width of all tag buttons."""
    return sum(text_width(tag_icon(monitor_num, i, icons)) for i in range(NUMTAGS))


def click_tags(
    x: int,
    monitor_num: int,
    icons: Sequence[str],
    text_width: Callable[[str], int],
) -> int | None:
    """Tag mask of the button under ``x``, or None past the last button."""
    right = 0
    for i in range(NUMTAGS):
        right += text_width(tag_icon(monitor_num, i, icons))
        if x < right:
            return 1 << i
    return None


def tag_scheme(monitor: Monitor, tag: int) -> Scheme:
    """Colour scheme of a tag button: selected, urgent or normal."""
    bit = 1 << tag
    if monitor.tagset[monitor.seltags] & bit:
        return Scheme.TAGS_SEL
    urgent = 0
    for c in monitor.clients:
        if c.isurgent:
            urgent |= c.tags
    return Scheme.URG if urgent & bit else Scheme.TAGS_NORM


def awesomebar_tabs(count: int, x: int, width: int) -> list[tuple[int, int]]:
    """Split ``width`` into ``count`` tabs; the first ones take the leftover pixels."""
    if count <= 0:
        return []
    tabw = abs(width) // count * (1 if width >= 0 else -1)
    remainder = width - tabw * count
    tabs = []
    for i in range(count):
        w = tabw + (1 if i < remainder else 0)
        tabs.append((x, w))
        x += w
    return tabs


def click_awesomebar(monitor: Monitor, x: int, width: int) -> Client | None:
    """Client whose title tab lies under ``x``, or None."""
    n = sum(1 for c in monitor.clients if monitor.is_visible(c))
    right = 0
    for c in monitor.clients:
        if monitor.is_visible(c):
            right = int(right + (1.0 / n) * width)
        if x <= right:
            return c
    return None


def indicator_rects(
    kind: Indicator | int,
    x: int,
    y: int,
    w: int,
    h: int,
    font_height: int,
    filled: bool,
) -> list[Rect]:
    """Rectangles that draw an indicator of the given kind in a cell."""
    kind = Indicator(kind)
    if kind is Indicator.NONE:
        return []
    if kind in (Indicator.CLIENT_DOTS, Indicator.RIGHT_TAGS):
        raise ValueError(f"{kind.name} indicator depends on client state")

    filled = bool(filled)
    boxs = font_height // 9
    boxw = font_height // 6 + 2
    bar_w = w - (2 * boxw + 1)

    if kind is Indicator.TOP_LEFT_SQUARE:
        return [Rect(x + boxs, y + boxs, boxw, boxw, filled)]
    if kind is Indicator.TOP_LEFT_LARGER_SQUARE:
        return [Rect(x + boxs + 2, y + boxs + 1, boxw + 1, boxw + 1, filled)]
    if kind is Indicator.TOP_BAR:
        return [Rect(x + boxw, y, bar_w, boxw // 2, filled)]
    if kind is Indicator.TOP_BAR_SLIM:
        return [Rect(x + boxw, y, bar_w, 1, False)]
    if kind is Indicator.BOTTOM_BAR:
        return [Rect(x + boxw, y + h - boxw // 2, bar_w, boxw // 2, filled)]
    if kind is Indicator.BOTTOM_BAR_SLIM:
        return [Rect(x + boxw, y + h - 1, bar_w, 1, False)]
    if kind is Indicator.BOX:
        return [Rect(x + boxw, y, w - 2 * boxw, h, False)]
    if kind is Indicator.BOX_WIDER:
        return [Rect(x + boxw // 2, y, w - boxw, h, False)]
    if kind is Indicator.BOX_FULL:
        return [Rect(x, y, w - 2, h, False)]

    rects: list[Rect] = []
    if kind is Indicator.PLUS_AND_LARGER_SQUARE:
        boxs += 2
        boxw += 2
    if kind in (Indicator.PLUS_AND_SQUARE, Indicator.PLUS_AND_LARGER_SQUARE):
        side = boxw if boxw % 2 else boxw + 1
        rects.append(Rect(x + boxs, y + boxs, side, side, filled))
    if not boxw % 2:
        boxw += 1
    rects.append(Rect(x + boxs + boxw // 2, y + boxs, 1, boxw, filled))
    rects.append(Rect(x + boxs, y + boxs + boxw // 2, boxw + 1, 1, filled))
    return rects


def _client_dots_rects(
    monitor: Monitor, x: int, h: int, tag: int
) -> list[Rect]:
    """One dot per client on ``tag``, wrapping into new columns; the focused one is long."""
    rects = []
    row = 0
    for c in monitor.clients:
        if c.tags & (1 << tag):
            rects.append(Rect(x, 1 + row * 2, 6 if monitor.sel is c else 1, 1, True))
            row += 1
        if h <= 1 + row * 2:
            row = 0
            x += 2
    return rects


def _right_tags_rects(x: int, y: int, w: int, tags: int) -> list[Rect]:
    """A small grid at the right edge with one box per tag, filled where set."""
    cols = NUMTAGS // TAGSROWS
    rects = []
    for i in range(NUMTAGS):
        col, row = i % cols, i // cols
        rects.append(
            Rect(
                x + w - 2 - cols * TAGSPX - col + col * TAGSPX,
                y + 2 + row * TAGSPX - row,
                TAGSPX,
                TAGSPX,
                bool((tags >> i) & 1),
            )
        )
    return rects
"""Monitor and client model with the tiling, monocle, gap and per-tag logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

NUMTAGS = 9
ALL_TAGS = 0xFFFFFFFF
TAGMASK = (1 << NUMTAGS) - 1

DEFAULT_GAPS = (20, 20, 20, 20)  # outer h, outer v, inner h, inner v
DEFAULT_MFACT = 0.5
DEFAULT_NMASTER = 1
SMARTGAPS_FACT = 0


def pack_gaps(oh: int, ov: int, ih: int, iv: int) -> int:
    """Pack four gap sizes into one 32-bit value, one byte each."""
    return (oh & 0xFF) | ((ov & 0xFF) << 8) | ((ih & 0xFF) << 16) | ((iv & 0xFF) << 24)


def unpack_gaps(value: int) -> tuple[int, int, int, int]:
    """Inverse of :func:`pack_gaps`."""
    return (
        value & 0xFF,
        (value >> 8) & 0xFF,
        (value >> 16) & 0xFF,
        (value >> 24) & 0xFF,
    )


def _per_tag(value: Any) -> list:
    return [value] * (NUMTAGS + 1)


@dataclass(eq=False)
class Client:
    """A managed window: its tags, state flags and geometry."""

    name: str = ""
    tags: int = 0
    isfloating: bool = False
    hidden: bool = False
    isurgent: bool = False
    isfixed: bool = False
    bw: int = 0
    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0
    idx: int = 0


@dataclass(eq=False)
class Pertag:
    """Layout settings remembered for each tag; slot 0 is the all-tags view."""

    curtag: int = 1
    nmasters: list[int] = field(default_factory=lambda: _per_tag(DEFAULT_NMASTER))
    ltidxs: list[list[Any]] = field(
        default_factory=lambda: [[None, None] for _ in range(NUMTAGS + 1)]
    )
    mfacts: list[float] = field(default_factory=lambda: _per_tag(DEFAULT_MFACT))
    sellts: list[int] = field(default_factory=lambda: _per_tag(0))
    showbars: list[bool] = field(default_factory=lambda: _per_tag(True))
    enablegaps: list[bool] = field(default_factory=lambda: _per_tag(True))
    gaps: list[int] = field(default_factory=lambda: _per_tag(pack_gaps(*DEFAULT_GAPS)))


@dataclass(eq=False)
class Monitor:
    """A screen area holding clients, a tag selection and layout settings."""

    num: int = 0
    wx: int = 0
    wy: int = 0
    ww: int = 0
    wh: int = 0
    tagset: list[int] = field(default_factory=lambda: [1, 1])
    seltags: int = 0
    nmaster: int = DEFAULT_NMASTER
    mfact: float = DEFAULT_MFACT
    sellt: int = 0
    lt: list[Any] = field(default_factory=lambda: [None, None])
    ltsymbol: str = ""
    gappoh: int = DEFAULT_GAPS[0]
    gappov: int = DEFAULT_GAPS[1]
    gappih: int = DEFAULT_GAPS[2]
    gappiv: int = DEFAULT_GAPS[3]
    showbar: bool = True
    clients: list[Client] = field(default_factory=list)
    sel: Client | None = None
    pertag: Pertag = field(default_factory=Pertag)

    def is_visible(self, client: Client) -> bool:
        """True if the client carries a tag that is currently viewed."""
        return bool(client.tags & self.tagset[self.seltags])

    def tiled_clients(self) -> list[Client]:
        """Visible, shown, non-floating clients in stacking order."""
        return [
            c
            for c in self.clients
            if not c.isfloating and not c.hidden and self.is_visible(c)
        ]


def _resize(client: Client, x: float, y: float, w: float, h: float) -> None:
    client.x, client.y, client.w, client.h = int(x), int(y), int(w), int(h)


def _height(client: Client) -> int:
    return client.h + 2 * client.bw


def get_gaps(
    monitor: Monitor, smartgaps_fact: int = SMARTGAPS_FACT
) -> tuple[int, int, int, int, int]:
    """Return the effective outer h/v, inner h/v gaps and the tiled client count."""
    enabled = 1 if monitor.pertag.enablegaps[monitor.pertag.curtag] else 0
    outer = inner = enabled
    n = len(monitor.tiled_clients())
    if n == 1:
        outer *= smartgaps_fact
    return (
        monitor.gappoh * outer,
        monitor.gappov * outer,
        monitor.gappih * inner,
        monitor.gappiv * inner,
        n,
    )


def get_facts(monitor: Monitor, msize: int, ssize: int) -> tuple[float, float, int, int]:
    """Return master/stack factors and the pixels left over after an even split."""
    n = len(monitor.tiled_clients())
    mfacts = float(min(n, monitor.nmaster))
    sfacts = float(n - monitor.nmaster)
    mtotal = stotal = 0
    for i in range(n):
        if i < monitor.nmaster:
            mtotal = int(mtotal + msize / mfacts)
        else:
            stotal = int(stotal + ssize / sfacts)
    return mfacts, sfacts, msize - mtotal, ssize - stotal


def tile(monitor: Monitor, smartgaps_fact: int = SMARTGAPS_FACT) -> None:
    """Arrange tiled clients in a master column and a stack column."""
    oh, ov, ih, iv, n = get_gaps(monitor, smartgaps_fact)
    if n == 0:
        return

    nmaster = monitor.nmaster
    sx = mx = monitor.wx + ov
    sy = my = monitor.wy + oh
    mh = monitor.wh - 2 * oh - ih * (min(n, nmaster) - 1)
    sh = monitor.wh - 2 * oh - ih * (n - nmaster - 1)
    sw = mw = monitor.ww - 2 * ov

    if nmaster and n > nmaster:
        sw = int((mw - iv) * (1 - monitor.mfact))
        mw = int((mw - iv) * monitor.mfact)
        sx = mx + mw + iv

    mfacts, sfacts, mrest, srest = get_facts(monitor, mh, sh)

    for i, c in enumerate(monitor.tiled_clients()):
        if i < nmaster:
            extra = 1 if i < mrest else 0
            _resize(c, mx, my, mw - 2 * c.bw, mh / mfacts + extra - 2 * c.bw)
            my += _height(c) + ih
        else:
            extra = 1 if (i - nmaster) < srest else 0
            _resize(c, sx, sy, sw - 2 * c.bw, sh / sfacts + extra - 2 * c.bw)
            sy += _height(c) + ih


def monocle(monitor: Monitor) -> None:
    """Give every tiled client the whole window area; show the count in the symbol."""
    n = sum(1 for c in monitor.clients if monitor.is_visible(c))
    if n > 0:
        monitor.ltsymbol = f"[{n}]"
    for c in monitor.tiled_clients():
        _resize(
            c,
            monitor.wx,
            monitor.wy,
            monitor.ww - 2 * c.bw,
            monitor.wh - 2 * c.bw,
        )


def attachx(monitor: Monitor, client: Client) -> None:
    """Insert a client at its remembered position, or at the head of the list."""
    clients = monitor.clients
    if client.idx > 0:
        for pos, at in enumerate(clients):
            if client.idx < at.idx:
                clients.insert(0, client)
                return
            following = clients[pos + 1] if pos + 1 < len(clients) else None
            if following is None or client.idx <= following.idx:
                clients.insert(pos + 1, client)
                return
    clients.insert(0, client)


def set_gaps(monitor: Monitor, oh: int, ov: int, ih: int, iv: int) -> None:
    """Set the monitor's gaps, clamped at zero, and remember them for the tag."""
    oh, ov, ih, iv = (max(v, 0) for v in (oh, ov, ih, iv))
    monitor.gappoh, monitor.gappov = oh, ov
    monitor.gappih, monitor.gappiv = ih, iv
    monitor.pertag.gaps[monitor.pertag.curtag] = pack_gaps(oh, ov, ih, iv)


def adjust_gaps(
    monitor: Monitor,
    outer_h: int = 0,
    outer_v: int = 0,
    inner_h: int = 0,
    inner_v: int = 0,
) -> None:
    """Change each gap by the given amount."""
    set_gaps(
        monitor,
        monitor.gappoh + outer_h,
        monitor.gappov + outer_v,
        monitor.gappih + inner_h,
        monitor.gappiv + inner_v,
    )


def toggle_gaps(monitor: Monitor) -> None:
    """Switch gaps on or off for the current tag."""
    pertag = monitor.pertag
    pertag.enablegaps[pertag.curtag] = not pertag.enablegaps[pertag.curtag]


def pertag_view(monitor: Monitor, mask: int) -> bool:
    """Load the settings of the viewed tag; return True if bar visibility changed."""
    pertag = monitor.pertag
    if mask & ALL_TAGS == ALL_TAGS:
        pertag.curtag = 0
    else:
        current = monitor.tagset[monitor.seltags]
        if not current:
            raise ValueError("no tag is selected")
        pertag.curtag = (current & -current).bit_length()

    cur = pertag.curtag
    monitor.nmaster = pertag.nmasters[cur]
    monitor.mfact = pertag.mfacts[cur]
    monitor.sellt = pertag.sellts[cur]
    monitor.lt[monitor.sellt] = pertag.ltidxs[cur][monitor.sellt]
    monitor.lt[monitor.sellt ^ 1] = pertag.ltidxs[cur][monitor.sellt ^ 1]
    (
        monitor.gappoh,
        monitor.gappov,
        monitor.gappih,
        monitor.gappiv,
    ) = unpack_gaps(pertag.gaps[cur])

    changed = monitor.showbar != pertag.showbars[cur]
    monitor.showbar = pertag.showbars[cur]
    return changed
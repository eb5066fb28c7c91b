"""Bit-packed monitor and client state kept across a window manager restart."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from wmkit.layout import TAGMASK, Client

_UINT32 = 0xFFFFFFFF


@dataclass(frozen=True)
class ClientFields:
    """Per-client state: monitor number, position in the client list, floating flag."""

    monitor: int = 0
    idx: int = 0
    isfloating: bool = False


@dataclass(frozen=True)
class MonitorFields:
    """Per-tag monitor state: master count, layout index and bar visibility."""

    nmaster: int = 0
    layout: int = 0
    showbar: bool = False


def encode_client_fields(fields: ClientFields) -> int:
    """Pack client state into 32 bits: monitor (3), index (8), floating (1)."""
    value = (
        (fields.monitor & 0x7)
        | (fields.idx & 0xFF) << 3
        | (int(fields.isfloating) & 0x1) << 11
    )
    return value & _UINT32


def decode_client_fields(value: int) -> ClientFields:
    """Inverse of :func:`encode_client_fields`."""
    return ClientFields(
        monitor=value & 0x7,
        idx=(value >> 3) & 0xFF,
        isfloating=bool((value >> 11) & 0x1),
    )


def encode_monitor_fields(fields: MonitorFields) -> int:
    """Pack per-tag state: nmaster (3 bits), layout at bit 6 (4), showbar at bit 31."""
    value = (
        (fields.nmaster & 0x7)
        | (fields.layout & 0xF) << 6
        | (int(fields.showbar) & 0x1) << 31
    )
    return value & _UINT32


def decode_monitor_fields(value: int) -> MonitorFields:
    """Inverse of :func:`encode_monitor_fields`."""
    return MonitorFields(
        nmaster=value & 0x7,
        layout=(value >> 6) & 0xF,
        showbar=bool((value >> 31) & 0x1),
    )


def layout_index(layouts: Sequence[object], layout: object) -> int:
    """Position of ``layout`` in ``layouts`` by identity; 0 when it is absent."""
    return next((i for i, item in enumerate(layouts) if item is layout), 0)


def number_clients(clients: Iterable[Client]) -> int:
    """Give each client its 1-based position as ``idx``; return how many there were."""
    count = 0
    for count, client in enumerate(clients, start=1):
        client.idx = count
    return count


def restore_tags(value: int, tagmask: int = TAGMASK) -> int:
    """Tags read back from a stored value, limited to the existing tags."""
    return value & tagmask
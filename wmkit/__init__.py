"""Tiling window manager helpers: status line runner, IPC client, layout and bar geometry, restart state packing and a lock prompt."""

__version__ = "0.1.0"
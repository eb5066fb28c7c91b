"""Status line assembled from the output of periodic shell commands."""

from __future__ import annotations

import shutil
import signal
import subprocess
import sys
import threading
import time as _time
from dataclasses import dataclass
from typing import Callable, Sequence

CMD_LENGTH = 50
MAX_DELIM_LENGTH = 7


@dataclass(frozen=True)
class Block:
    """One segment of the status line: an icon and the command filling it."""

    icon: str
    command: str
    interval: int = 0
    signal: int = 0


DEFAULT_BLOCKS = (
    Block(" ", "pamixer --get-volume-human", 5, 1),
    Block(" ", "sensors | grep 'Package' | awk '{print $4}'", 10, 2),
    Block(" ", "date '+%a %d %b %H:%M'", 10, 5),
)
DEFAULT_DELIM = "  "


def run_block(block: Block, delim: str) -> str:
    """Run the block's command and return icon, first output line and delimiter."""
    limit = CMD_LENGTH - len(block.icon) - (len(delim) + 1) - 1
    try:
        with subprocess.Popen(
            block.command,
            shell=True,
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as proc:
            line = proc.stdout.readline(max(limit, 0)) if proc.stdout else ""
    except OSError:
        return block.icon
    text = block.icon + line
    if not text:
        return ""
    if text.endswith("\n"):
        text = text[:-1]
    return text + delim


class StatusBar:
    """Keeps the latest output of every block and renders the status line."""

    def __init__(self, blocks: Sequence[Block], delim: str = DEFAULT_DELIM) -> None:
        self.blocks = tuple(blocks)
        self.delim = delim
        self.outputs = [""] * len(self.blocks)
        self._last = ""

    def refresh(self, time: int) -> None:
        """Rerun blocks due at tick ``time``; a tick of -1 reruns them all."""
        for index, block in enumerate(self.blocks):
            due = block.interval != 0 and time % block.interval == 0
            if due or time == -1:
                self.outputs[index] = run_block(block, self.delim)

    def refresh_signal(self, signal: int) -> None:
        """Rerun every block bound to ``signal``."""
        for index, block in enumerate(self.blocks):
            if block.signal == signal:
                self.outputs[index] = run_block(block, self.delim)

    def render(self) -> str:
        """Join the block outputs, dropping the final delimiter."""
        text = "".join(self.outputs)
        return text[: max(len(text) - len(self.delim), 0)]

    def poll(self) -> str | None:
        """Return the status line if it changed since the last poll, else None."""
        status = self.render()
        if status == self._last:
            return None
        self._last = status
        return status


def parse_args(argv: Sequence[str]) -> tuple[str, bool]:
    """Return the delimiter and whether to print to standard output."""
    delim = DEFAULT_DELIM
    to_stdout = False
    args = iter(argv)
    for arg in args:
        if arg == "-d":
            value = next(args, None)
            if value is None:
                raise ValueError("option -d requires an argument")
            delim = value[:MAX_DELIM_LENGTH]
        elif arg == "-p":
            to_stdout = True
    return delim[:MAX_DELIM_LENGTH], to_stdout


def _write_stdout(text: str) -> None:
    print(text, flush=True)


def _write_root(text: str) -> None:
    try:
        subprocess.run(["xsetroot", "-name", text], check=False)
    except OSError:
        pass


def _signal_bases() -> tuple[int, int]:
    rtmin = getattr(signal, "SIGRTMIN", None)
    if rtmin is not None:
        return int(rtmin), int(rtmin)
    usr1 = int(signal.SIGUSR1)
    return usr1 + 1, usr1 - 1


def main(argv: Sequence[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        delim, to_stdout = parse_args(args)
    except ValueError as exc:
        print(f"dwmblocks: {exc}", file=sys.stderr)
        return 1

    write: Callable[[str], None]
    if to_stdout:
        write = _write_stdout
    elif shutil.which("xsetroot") is None:
        print("dwmblocks: Failed to open display", file=sys.stderr)
        return 1
    else:
        write = _write_root

    bar = StatusBar(DEFAULT_BLOCKS, delim)
    stop = threading.Event()
    plus, minus = _signal_bases()

    def emit() -> None:
        status = bar.poll()
        if status is not None:
            write(status)

    def on_block_signal(signum, _frame) -> None:
        bar.refresh_signal(signum - plus)
        emit()

    def on_term(_signum, _frame) -> None:
        stop.set()

    rtmin = getattr(signal, "SIGRTMIN", None)
    rtmax = getattr(signal, "SIGRTMAX", None)
    if rtmin is not None and rtmax is not None:
        for number in range(int(rtmin), int(rtmax) + 1):
            try:
                signal.signal(number, lambda *_: None)
            except (OSError, ValueError):
                pass
    for block in bar.blocks:
        if block.signal > 0:
            signal.signal(minus + block.signal, on_block_signal)
    signal.signal(signal.SIGTERM, on_term)
    signal.signal(signal.SIGINT, on_term)

    bar.refresh(-1)
    tick = 0
    while True:
        bar.refresh(tick)
        tick += 1
        emit()
        if stop.is_set():
            break
        _time.sleep(1)
    return 0
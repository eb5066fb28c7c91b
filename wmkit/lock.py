"""Screen-lock password entry, option parsing and OOM protection."""

from __future__ import annotations

import enum
import errno
from typing import Callable, Sequence

VERSION = "1.5"
USER = "nobody"
GROUP = "nobody"
FAIL_ON_CLEAR = True
MAX_PASSWORD = 256
OOM_SCORE_ADJ_MIN = -1000
OOM_FILE = "/proc/self/oom_score_adj"
USAGE = "usage: slock [-v] [cmd [arg ...]]"


class LockColor(enum.IntEnum):
    INIT = 0
    INPUT = 1
    FAILED = 2


COLOR_NAMES = {
    LockColor.INIT: "#282828",
    LockColor.INPUT: "#458588",
    LockColor.FAILED: "#FB4934",
}


class KeyAction(enum.Enum):
    """What a key press means to the password prompt."""

    TEXT = "text"
    SUBMIT = "submit"
    CLEAR = "clear"
    BACKSPACE = "backspace"
    IGNORED = "ignored"


class UsageError(Exception):
    """Raised for an unknown command-line option."""


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or code == 0x7F


class PasswordPrompt:
    """Collects typed input and checks it with ``verify`` on submit."""

    def __init__(
        self, verify: Callable[[str], bool], fail_on_clear: bool = FAIL_ON_CLEAR
    ) -> None:
        self._verify = verify
        self.fail_on_clear = fail_on_clear
        self._buffer = bytearray()
        self._failure = False
        self._shown = LockColor.INIT
        self.unlocked = False

    def feed(self, action: KeyAction, text: str = "") -> bool:
        """Handle one key press; return True once the password was accepted."""
        if self.unlocked:
            return True
        if action is KeyAction.IGNORED:
            return False
        if action is KeyAction.SUBMIT:
            entered = self._buffer.decode("utf-8", errors="surrogateescape")
            self.unlocked = bool(self._verify(entered))
            if not self.unlocked:
                self._failure = True
            self._buffer.clear()
        elif action is KeyAction.CLEAR:
            self._buffer.clear()
        elif action is KeyAction.BACKSPACE:
            if self._buffer:
                del self._buffer[-1]
        elif text and not _is_control(text[0]):
            data = text.encode("utf-8", errors="surrogateescape")
            if len(self._buffer) + len(data) < MAX_PASSWORD:
                self._buffer += data

        if not self.unlocked:
            if self._buffer:
                self._shown = LockColor.INPUT
            elif self._failure or self.fail_on_clear:
                self._shown = LockColor.FAILED
            else:
                self._shown = LockColor.INIT
        return self.unlocked

    def color(self) -> LockColor:
        """Colour the lock windows currently show."""
        return self._shown


def parse_args(argv: Sequence[str]) -> tuple[bool, list[str]]:
    """Return whether to show the version and the post-lock command."""
    args = list(argv)
    while args and args[0].startswith("-") and len(args[0]) > 1:
        arg = args.pop(0)
        if arg == "--":
            break
        for flag in arg[1:]:
            if flag == "v":
                return True, []
            raise UsageError(USAGE)
    return False, args


def disable_oom_killer(path: str = OOM_FILE) -> bool:
    """Exempt this process from the OOM killer; False if the file does not exist."""
    try:
        handle = open(path, "w", encoding="ascii")
    except FileNotFoundError:
        return False
    try:
        with handle:
            handle.write(str(OOM_SCORE_ADJ_MIN))
    except OSError as exc:
        if exc.errno == errno.EACCES:
            raise PermissionError(
                "unable to disable OOM killer. Make sure to suid or sgid slock."
            ) from exc
        raise
    return True
"""Client for the window manager's IPC socket."""

from __future__ import annotations

import enum
import json
import math
import os
import socket
import string
import struct
import sys
from typing import Sequence

DEFAULT_SOCKET_PATH = "/tmp/dwm.sock"
IPC_MAGIC = b"DWM-IPC"
_HEADER = struct.Struct("=7sIB")
HEADER_SIZE = _HEADER.size

EVENT_TAG_CHANGE = "tag_change_event"
EVENT_CLIENT_FOCUS_CHANGE = "client_focus_change_event"
EVENT_LAYOUT_CHANGE = "layout_change_event"
EVENT_MONITOR_FOCUS_CHANGE = "monitor_focus_change_event"
EVENT_FOCUSED_TITLE_CHANGE = "focused_title_change_event"
EVENT_FOCUSED_STATE_CHANGE = "focused_state_change_event"

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)
_DIGITS = frozenset(string.digits)


class MessageType(enum.IntEnum):
    RUN_COMMAND = 0
    GET_MONITORS = 1
    GET_TAGS = 2
    GET_LAYOUTS = 3
    GET_DWM_CLIENT = 4
    SUBSCRIBE = 5
    EVENT = 6


class IPCError(Exception):
    """Raised when talking to the IPC socket fails."""


def pack_message(msg_type: int, payload: bytes) -> bytes:
    """Frame ``payload`` with the IPC header."""
    return _HEADER.pack(IPC_MAGIC, len(payload), int(msg_type)) + payload


def unpack_header(data: bytes) -> tuple[MessageType | int, int]:
    """Return the message type and payload size from a header."""
    if len(data) < HEADER_SIZE:
        raise IPCError(
            f"Header too short: got {len(data)} bytes, expected {HEADER_SIZE}"
        )
    magic, size, raw_type = _HEADER.unpack_from(data)
    if magic != IPC_MAGIC:
        raise IPCError(
            f"Invalid magic string. Got '{magic.decode('latin-1')}', "
            f"expected '{IPC_MAGIC.decode()}'"
        )
    try:
        msg_type: MessageType | int = MessageType(raw_type)
    except ValueError:
        msg_type = raw_type
    return msg_type, size


def is_float(s: str) -> bool:
    """Digits with at most one inner dot and an optional leading minus."""
    dot_used = minus_used = False
    last = len(s) - 1
    for index, char in enumerate(s):
        if char in _DIGITS:
            continue
        if not dot_used and char == "." and index not in (0, last):
            dot_used = True
        elif not minus_used and char == "-" and index == 0:
            minus_used = True
        else:
            return False
    return True


def is_unsigned_int(s: str) -> bool:
    return all(char in _DIGITS for char in s)


def is_signed_int(s: str) -> bool:
    return all(
        char in _DIGITS or (index == 0 and char == "-")
        for index, char in enumerate(s)
    )


def _to_int(s: str) -> int:
    if s in ("", "-"):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(s)))


def _to_single(s: str) -> float:
    value = float(s)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _encode(obj: object) -> bytes:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def command_payload(name: str, args: Sequence[str]) -> bytes:
    """JSON body of a run_command request; numeric arguments become numbers."""
    values: list[object] = []
    for arg in args:
        if is_signed_int(arg):
            values.append(_to_int(arg))
        elif is_float(arg):
            values.append(_to_single(arg))
        else:
            values.append(arg)
    return _encode({"command": name, "args": values})


def client_payload(window: int) -> bytes:
    return _encode({"client_window_id": window})


def subscribe_payload(event: str) -> bytes:
    return _encode({"event": event, "action": "subscribe"})


class IPCConnection:
    """A stream connection to the IPC socket."""

    def __init__(self, path: str | None = None) -> None:
        self.path = DEFAULT_SOCKET_PATH if path is None else path
        self._sock: socket.socket | None = None

    def connect(self) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(self.path)
        except OSError as exc:
            sock.close()
            raise IPCError("Failed to connect to socket") from exc
        self._sock = sock

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise IPCError("Not connected")
        return self._sock

    def send(self, msg_type: int, payload: bytes) -> None:
        try:
            self._socket().sendall(pack_message(msg_type, payload))
        except OSError as exc:
            raise IPCError(f"Failed to write to socket: {exc}") from exc

    def _read_exact(self, count: int, what: str, expected: str) -> bytes:
        sock = self._socket()
        data = bytearray()
        while len(data) < count:
            try:
                chunk = sock.recv(count - len(data))
            except OSError as exc:
                raise IPCError(f"Failed to read from socket: {exc}") from exc
            if not chunk:
                raise IPCError(
                    f"Unexpectedly reached EOF while reading {what}. "
                    f"Read {len(data)} bytes, expected {count} {expected}."
                )
            data += chunk
        return bytes(data)

    def receive(self) -> tuple[MessageType | int, bytes]:
        """Read one message and return its type and payload."""
        header = self._read_exact(HEADER_SIZE, "header", "total bytes")
        msg_type, size = unpack_header(header)
        payload = self._read_exact(size, "payload", "bytes")
        return msg_type, payload

    def __enter__(self) -> "IPCConnection":
        if self._sock is None:
            self.connect()
        return self

    def __exit__(self, *args) -> None:
        self.close()


def usage_text(prog_name: str) -> str:
    lines = [
        f"usage: {prog_name} [options] <command> [...]",
        "",
        "Commands:",
        "  run_command <name> [args...]    Run an IPC command",
        "",
        "  get_monitors                    Get monitor properties",
        "",
        "  get_tags                        Get list of tags",
        "",
        "  get_layouts                     Get list of layouts",
        "",
        "  get_dwm_client <window_id>      Get dwm client proprties",
        "",
        "  subscribe [events...]           Subscribe to specified events",
        f"                                  Options: {EVENT_TAG_CHANGE},",
        f"                                  {EVENT_LAYOUT_CHANGE},",
        f"                                  {EVENT_CLIENT_FOCUS_CHANGE},",
        f"                                  {EVENT_MONITOR_FOCUS_CHANGE},",
        f"                                  {EVENT_FOCUSED_TITLE_CHANGE},",
        f"                                  {EVENT_FOCUSED_STATE_CHANGE}",
        "",
        "  help                            Display this message",
        "",
        "Options:",
        "  --ignore-reply                  Don't print reply messages from",
        "                                  run_command and subscribe.",
        "",
    ]
    return "\n".join(lines) + "\n"


def _usage_error(prog_name: str, message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    print(f"usage: {prog_name} <command> [...]", file=sys.stderr)
    print(f"Try '{prog_name} help'", file=sys.stderr)
    return 1


def _print_reply(payload: bytes) -> None:
    sys.stdout.write(payload.decode("utf-8", errors="replace") + "\n")
    sys.stdout.flush()


_QUERIES = {
    "get_monitors": MessageType.GET_MONITORS,
    "get_tags": MessageType.GET_TAGS,
    "get_layouts": MessageType.GET_LAYOUTS,
}


def main(argv: Sequence[str] | None = None) -> int:
    prog_name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "dwm-msg"
    args = sys.argv[1:] if argv is None else list(argv)

    ignore_reply = bool(args) and args[0] == "--ignore-reply"
    if ignore_reply:
        args = args[1:]
    if not args:
        return _usage_error(prog_name, "Expected an argument, got none")

    command, rest = args[0], args[1:]
    requests: list[tuple[MessageType, bytes, bool]] = []
    listen = False

    if command == "help":
        sys.stdout.write(usage_text(prog_name))
        return 0
    if command == "run_command":
        if not rest:
            return _usage_error(prog_name, "No command specified")
        requests.append(
            (MessageType.RUN_COMMAND, command_payload(rest[0], rest[1:]), not ignore_reply)
        )
    elif command in _QUERIES:
        requests.append((_QUERIES[command], b"\0", True))
    elif command == "get_dwm_client":
        if not rest:
            return _usage_error(prog_name, "Expected the window id")
        if not is_unsigned_int(rest[0]):
            return _usage_error(prog_name, "Expected unsigned integer argument")
        window = min(int(rest[0]), _INT64_MAX) if rest[0] else 0
        requests.append((MessageType.GET_DWM_CLIENT, client_payload(window), True))
    elif command == "subscribe":
        if not rest:
            return _usage_error(prog_name, "Expected event name")
        requests.extend(
            (MessageType.SUBSCRIBE, subscribe_payload(event), not ignore_reply)
            for event in rest
        )
        listen = True
    else:
        return _usage_error(prog_name, f"Invalid argument '{command}'")

    connection = IPCConnection()
    try:
        connection.connect()
    except IPCError:
        print("Failed to connect to socket", file=sys.stderr)
        return 1

    with connection:
        try:
            for msg_type, payload, show in requests:
                connection.send(msg_type, payload)
                _, reply = connection.receive()
                if show:
                    _print_reply(reply)
            while listen:
                _, reply = connection.receive()
                _print_reply(reply)
        except IPCError as exc:
            print(str(exc), file=sys.stderr)
            print(
                "Error receiving response from socket. "
                "The connection might have been lost.",
                file=sys.stderr,
            )
            return 2
    return 0
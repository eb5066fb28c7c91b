import json
import os
import shutil
import socket
import struct
import tempfile
import threading

import pytest

from wmkit import ipc
from wmkit.ipc import (
    HEADER_SIZE,
    IPCConnection,
    IPCError,
    MessageType,
    client_payload,
    command_payload,
    is_float,
    is_signed_int,
    is_unsigned_int,
    main,
    pack_message,
    subscribe_payload,
    unpack_header,
    usage_text,
)


def _read_exact(conn, count):
    data = b""
    while len(data) < count:
        chunk = conn.recv(count - len(data))
        if not chunk:
            raise ConnectionError("closed")
        data += chunk
    return data


@pytest.fixture
def sock_path():
    directory = tempfile.mkdtemp()
    yield os.path.join(directory, "s.sock")
    shutil.rmtree(directory, ignore_errors=True)


def _start_server(path, replies, extra=()):
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    listener.bind(path)
    listener.listen(1)
    received = []

    def run():
        conn, _ = listener.accept()
        with conn:
            for reply in replies:
                msg_type, size = unpack_header(_read_exact(conn, HEADER_SIZE))
                received.append((msg_type, _read_exact(conn, size)))
                conn.sendall(pack_message(msg_type, reply))
            for event in extra:
                conn.sendall(pack_message(MessageType.EVENT, event))
        listener.close()

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread, received


def test_pack_message_layout():
    data = pack_message(MessageType.GET_TAGS, b"\0")
    assert data[:7] == b"DWM-IPC"
    assert len(data) == HEADER_SIZE + 1
    assert data[-2] == MessageType.GET_TAGS


def test_header_round_trip():
    payload = b'{"a":1}'
    data = pack_message(MessageType.RUN_COMMAND, payload)
    assert unpack_header(data) == (MessageType.RUN_COMMAND, len(payload))
    assert data[HEADER_SIZE:] == payload


def test_unpack_header_unknown_type_kept_as_int():
    data = b"DWM-IPC" + struct.pack("=IB", 0, 42)
    assert unpack_header(data) == (42, 0)


def test_unpack_header_bad_magic():
    with pytest.raises(IPCError):
        unpack_header(b"XXX-IPC" + struct.pack("=IB", 0, 1))


def test_unpack_header_short():
    with pytest.raises(IPCError):
        unpack_header(b"DWM")


@pytest.mark.parametrize(
    "text,expected",
    [("1.5", True), ("-2.25", True), ("7", True), (".5", False), ("5.", False),
     ("1.2.3", False), ("1-2", False), ("abc", False)],
)
def test_is_float(text, expected):
    assert is_float(text) is expected


@pytest.mark.parametrize(
    "text,expected",
    [("-12", True), ("12", True), ("1-2", False), ("1.0", False), ("x", False)],
)
def test_is_signed_int(text, expected):
    assert is_signed_int(text) is expected


@pytest.mark.parametrize("text,expected", [("123", True), ("-1", False), ("1a", False)])
def test_is_unsigned_int(text, expected):
    assert is_unsigned_int(text) is expected


def test_command_payload_types():
    body = json.loads(command_payload("view", ["1", "-2", "abc", "0.5"]))
    assert body == {"command": "view", "args": [1, -2, "abc", 0.5]}


def test_command_payload_is_compact():
    assert command_payload("x", []) == b'{"command":"x","args":[]}'


def test_command_payload_float_is_single_precision():
    value = json.loads(command_payload("setmfact", ["0.1"]))["args"][0]
    assert struct.unpack("f", struct.pack("f", value))[0] == value
    assert abs(value - 0.1) < 1e-7


def test_command_payload_clamps_large_ints():
    body = json.loads(command_payload("x", ["99999999999999999999"]))
    assert body["args"] == [2**63 - 1]


def test_client_and_subscribe_payloads():
    assert json.loads(client_payload(42)) == {"client_window_id": 42}
    assert json.loads(subscribe_payload("tag_change_event")) == {
        "event": "tag_change_event",
        "action": "subscribe",
    }


def test_connection_round_trip(sock_path):
    thread, received = _start_server(sock_path, [b'{"ok":1}'])
    with IPCConnection(sock_path) as conn:
        conn.send(MessageType.GET_TAGS, b"\0")
        reply = conn.receive()
    thread.join(5)
    assert reply == (MessageType.GET_TAGS, b'{"ok":1}')
    assert received == [(MessageType.GET_TAGS, b"\0")]


def test_connection_eof(sock_path):
    thread, _ = _start_server(sock_path, [])
    with IPCConnection(sock_path) as conn:
        thread.join(5)
        with pytest.raises(IPCError):
            conn.receive()


def test_connect_missing_socket(sock_path):
    with pytest.raises(IPCError):
        IPCConnection(sock_path).connect()


def test_main_get_tags(sock_path, monkeypatch, capsys):
    monkeypatch.setattr(ipc, "DEFAULT_SOCKET_PATH", sock_path)
    thread, received = _start_server(sock_path, [b"[1,2]"])
    assert main(["get_tags"]) == 0
    thread.join(5)
    assert capsys.readouterr().out == "[1,2]\n"
    assert received == [(MessageType.GET_TAGS, b"\0")]


def test_main_ignore_reply(sock_path, monkeypatch, capsys):
    monkeypatch.setattr(ipc, "DEFAULT_SOCKET_PATH", sock_path)
    thread, received = _start_server(sock_path, [b"{}"])
    assert main(["--ignore-reply", "run_command", "view", "4"]) == 0
    thread.join(5)
    assert capsys.readouterr().out == ""
    assert json.loads(received[0][1]) == {"command": "view", "args": [4]}


def test_main_subscribe_until_connection_lost(sock_path, monkeypatch, capsys):
    monkeypatch.setattr(ipc, "DEFAULT_SOCKET_PATH", sock_path)
    thread, received = _start_server(sock_path, [b"sub"], extra=[b"evt"])
    assert main(["subscribe", "tag_change_event"]) == 2
    thread.join(5)
    assert capsys.readouterr().out == "sub\nevt\n"
    assert received[0][0] == MessageType.SUBSCRIBE


def test_main_connect_failure(sock_path, monkeypatch):
    monkeypatch.setattr(ipc, "DEFAULT_SOCKET_PATH", sock_path)
    assert main(["get_monitors"]) == 1


@pytest.mark.parametrize(
    "argv,message",
    [
        ([], "Expected an argument, got none"),
        (["bogus"], "Invalid argument 'bogus'"),
        (["run_command"], "No command specified"),
        (["get_dwm_client"], "Expected the window id"),
        (["get_dwm_client", "abc"], "Expected unsigned integer argument"),
        (["subscribe"], "Expected event name"),
    ],
)
def test_main_usage_errors(argv, message, capsys):
    assert main(argv) == 1
    assert message in capsys.readouterr().err


def test_main_help(capsys):
    assert main(["help"]) == 0
    out = capsys.readouterr().out
    assert "run_command <name> [args...]" in out
    assert "focused_state_change_event" in out


def test_usage_text_names_program():
    assert usage_text("prog").startswith("usage: prog [options] <command> [...]\n")
# wmkit

Tools and building blocks for a tiling window manager setup.

## Status line: `wmkit-blocks`

`wmkit-blocks` runs a fixed set of shell commands and joins the first line
of each command's output, behind an icon, into one status line. The
built-in blocks show the volume (`pamixer`), the CPU package temperature
(`sensors`) and the date. Each block is rerun when its interval in seconds
comes round, and the line is written out only when it has changed.

```
wmkit-blocks             # set the root window name with xsetroot
wmkit-blocks -p          # print the status line to stdout instead
wmkit-blocks -d " | "    # use another delimiter (at most 7 characters)
```

Without `-p` the `xsetroot` program must be on the `PATH`. SIGTERM or
SIGINT stops the loop after the current tick. On systems with real-time
signals, sending `SIGRTMIN+n` reruns the blocks bound to signal `n`
(1 volume, 2 temperature, 5 date).

From Python, describe blocks with `Block` and drive a `StatusBar`:

```python
from wmkit.statusbar import Block, StatusBar

bar = StatusBar([Block(" ", "date '+%H:%M'", 10, 5)], "  ")
bar.refresh(-1)
print(bar.render())
```

- `run_block(block, delim)` runs one command and returns its icon, first
  output line (without the newline) and the delimiter.
- `StatusBar.refresh(time)` reruns the blocks whose interval divides
  `time`, or all of them for `-1`.
- `StatusBar.refresh_signal(signal)` reruns the blocks bound to `signal`.
- `StatusBar.render()` joins the outputs and drops the final delimiter.
- `StatusBar.poll()` returns the line only when it differs from the last
  poll, otherwise `None`.
- `parse_args(argv)` returns the delimiter and whether `-p` was given.

## IPC client: `wmkit-msg`

`wmkit-msg` sends requests to the window manager's IPC socket at
`/tmp/dwm.sock` and prints the JSON replies:

```
wmkit-msg get_monitors
wmkit-msg get_tags
wmkit-msg get_layouts
wmkit-msg get_dwm_client 12345
wmkit-msg run_command view 4
wmkit-msg --ignore-reply subscribe tag_change_event
wmkit-msg help
```

`run_command` sends integer-looking arguments as integers and
decimal-looking ones as floats; everything else stays a string.
`subscribe` keeps printing events until the connection closes.
`--ignore-reply` suppresses the replies to `run_command` and `subscribe`.
Usage errors exit with status 1, a lost connection with status 2.

In Python, `pack_message(msg_type, payload)` and `unpack_header(data)`
handle the framing (the `DWM-IPC` magic, a 32-bit size and a type byte);
`MessageType` lists the message types; `command_payload`,
`client_payload` and `subscribe_payload` build the JSON bodies; and
`IPCConnection(path)` is a context manager with `send` and `receive`.
Failures raise `IPCError`.

## Library modules

- `wmkit.layout`: `Client`, `Monitor` and `Pertag` models; the `tile` and
  `monocle` arrangements, which set client geometry; `get_gaps` and
  `get_facts`; gap handling with `set_gaps`, `adjust_gaps`, `toggle_gaps`,
  `pack_gaps` and `unpack_gaps`; `pertag_view`, which loads the settings
  remembered for the viewed tag; and `attachx`, which inserts a client at
  its remembered position.
- `wmkit.bar`: tag icons and clicks (`tag_icon`, `tags_width`,
  `click_tags`, `tag_scheme`), tab geometry for the window list
  (`awesomebar_tabs`, `click_awesomebar`) and indicator rectangles
  (`indicator_rects` with `Indicator` and `Scheme`). `indicator_rects`
  raises `ValueError` for the `CLIENT_DOTS` and `RIGHT_TAGS` kinds.
- `wmkit.persist`: 32-bit packing of client and monitor state
  (`ClientFields`, `MonitorFields`, `encode_client_fields`,
  `decode_client_fields`, `encode_monitor_fields`,
  `decode_monitor_fields`), plus `layout_index`, `number_clients` and
  `restore_tags`.
- `wmkit.lock`: the password prompt state machine of a screen locker
  (`PasswordPrompt` fed with `KeyAction`s, showing a `LockColor`), its
  option parsing (`parse_args`, raising `UsageError`) and
  `disable_oom_killer`.

## What it does not do

wmkit is not a window manager and not a screen locker. Nothing in it
connects to an X server: the layout and bar modules compute geometry and
state on plain Python objects, `wmkit.persist` only packs and unpacks the
values, and `wmkit.lock` provides the prompt logic without creating lock
windows, grabbing input or reading password hashes. There is no command
for locking the screen.

## Tests

```
pip install -e .[test]
pytest
```
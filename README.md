# loraigate

Building blocks for a LoRa APRS iGate, in pure Python with no third-party
dependencies.

## What is inside

- `loraigate.aprs_is`: `AprsIsClient` logs in to an APRS-IS server over TCP,
  with or without a filter, and reports the outcome as a `ConnectionStatus`
  (`SUCCESS`, `ERROR_CONNECTION`, `ERROR_PASSCODE`). `send_message` and
  `send_aprs_message` send lines; `get_message` and `next_packet` read them,
  `next_packet` skipping server comments that start with `#`. The client can
  be used as a context manager and closes its socket on exit.
- `loraigate.position`: `create_lat_aprs` and `create_long_aprs` turn decimal
  degrees into APRS position fields. `beacon_position_data` builds a position
  beacon body, and `beacon_countdown` formats the seconds left until the next
  beacon as `beacon MM:SS`.
- `loraigate.ntp`: `NTPClient` queries an NTP server over UDP at most once per
  update interval and extrapolates the time in between (`epoch_time`,
  `hours`, `minutes`, `seconds`, `day`, `formatted_time`).
  `build_ntp_request` and `parse_ntp_response` work on raw 48-byte packets.
- `loraigate.timelib`: `break_time`, `make_time` and helpers such as `hour`,
  `weekday`, `year` and `time_string` work on seconds since 1970; `month_str`,
  `day_str` and their short forms give names. `Clock` is a software clock
  driven by a millisecond source that can resynchronise from a time provider
  and reports its `TimeStatus`.
- `loraigate.timer`: a one-shot millisecond `Timer`.
- `loraigate.taskqueue`: a FIFO `TaskQueue` for passing packets between tasks;
  it is truthy while it holds elements and `get` raises `IndexError` when empty.
- `loraigate.taskmanager`: the `Task` base class, a `TaskManager` that loops
  always-run tasks every time and the other tasks in turn, a `StatusFrame`
  that lists the state of each task, the `TaskName` identifiers and the shared
  `System` state.
- `loraigate.bitmap`: `Bitmap` draws pixels, lines, rectangles, circles,
  progress bars and text into a one-bit page-ordered buffer. Text needs a
  `Font` supplied by the caller.
- `loraigate.oled`: `OLEDDisplay` holds the controller commands (contrast,
  brightness, orientation, on/off) and `SSD1306` sends them, and the pixel
  data, to any bus object with a `write(address, data)` method.
- `loraigate.display`: `Display` shows queued `TextFrame`s (or other
  `DisplayFrame`s) for 15 seconds each, otherwise the status frame, and can
  switch the panel off after a timeout in save mode.
- `loraigate.board`: `Board` and `get_board_name` for the supported boards.

All time-driven classes (`Clock`, `Timer`, `NTPClient`, `Display`) accept a
`millis` callable, so they can be driven by a fake clock in tests.

## Examples

Formatting a beacon position:

```python
from loraigate.position import beacon_position_data, create_lat_aprs

create_lat_aprs(48.2)            # '4812.00N'
beacon_position_data(48.2, 14.3, "LoRa iGate")
# '=4812.00NL01418.00E&LoRa iGate'
```

Passing packets between tasks:

```python
from loraigate.taskqueue import TaskQueue

queue = TaskQueue()
queue.put("packet")
if queue:
    print(queue.get())
```

Breaking a Unix time down into its fields:

```python
from loraigate.timelib import break_time, time_string

break_time(0)          # TimeElements for 1970-01-01 00:00:00, a Thursday
time_string(3661)      # '01:01:01'
```

Running tasks:

```python
from loraigate.taskmanager import System, Task

class Counter(Task):
    def setup(self, system):
        self.count = 0
        return True

    def loop(self, system):
        self.count += 1
        return True

system = System()
counter = Counter("CounterTask", 0)
system.task_manager.add_task(counter)
system.task_manager.setup(system)
system.task_manager.loop(system)   # True, counter.count == 1
```

Drawing onto an SSD1306 through your own bus object:

```python
from loraigate.bitmap import Bitmap
from loraigate.oled import SSD1306

class RecordingBus:
    def __init__(self):
        self.writes = []

    def write(self, address, data):
        self.writes.append((address, bytes(data)))

oled = SSD1306(RecordingBus(), 0x3C)
bitmap = Bitmap.for_display(oled)
bitmap.draw_rect(0, 0, 128, 64)
oled.display(bitmap)
```

## What it does not do

- There is no command-line program and no main loop; you assemble the pieces
  yourself.
- There is no LoRa radio driver, no packet router or digipeater, and no WiFi,
  Ethernet, MQTT, FTP or over-the-air update handling.
- Packets are plain text lines; there is no APRS packet parser or encoder
  beyond the position beacon helpers.
- No configuration file is read or written.
- No font ships with the package: pass a `Font` to `Bitmap` or `Display` to
  draw text.
- `SSD1306` does not open a hardware bus; it writes to the object you give it.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```
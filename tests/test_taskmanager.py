import logging

import pytest

from loraigate.bitmap import Bitmap, Font
from loraigate.taskmanager import (
    StatusFrame,
    System,
    Task,
    TaskDisplayState,
    TaskManager,
    TaskName,
)

FONT = Font(width_in_pixel=5, height_in_pixel=8, first_char=32, last_char=126,
            data=bytes([1] * 95) + bytes([0xFF] * 95))


class RecordingTask(Task):
    def __init__(self, name, log, result=True):
        super().__init__(name, 0)
        self.log = log
        self.result = result
        self.loops = 0

    def setup(self, system):
        self.log.append(("setup", self.name))
        return True

    def loop(self, system):
        self.loops += 1
        self.log.append(("loop", self.name))
        return self.result


def test_task_defaults():
    manager = TaskManager()
    manager.add_task(RecordingTask("RouterTask", []))
    task = manager.tasks()[0]
    assert task.state is TaskDisplayState.OKAY
    assert task.state_info == "Booting"
    assert task.name == "RouterTask"


def test_abstract_task_cannot_be_created():
    with pytest.raises(TypeError):
        Task("X", 1)


def test_task_names():
    assert TaskName(1) is TaskName.APRS_IS
    assert TaskName(1).task_name == "AprsIsTask"
    assert TaskName["BEACON"].task_name == "BeaconTask"
    assert TaskName["NTP"].task_name == "NTPTask"


def test_tasks_lists_always_run_first():
    manager = TaskManager()
    a, b, c = (RecordingTask(n, []) for n in ("ATask", "BTask", "CTask"))
    manager.add_task(a)
    manager.add_task(b)
    manager.add_always_run_task(c)
    assert manager.tasks() == [c, a, b]


def test_setup_calls_every_task_in_order():
    log = []
    manager = TaskManager()
    manager.add_task(RecordingTask("ATask", log))
    manager.add_always_run_task(RecordingTask("CTask", log))
    system = System(logger=logging.getLogger("test"))
    assert manager.setup(system) is True
    assert log == [("setup", "CTask"), ("setup", "ATask")]


def test_loop_round_robin():
    log = []
    manager = TaskManager()
    a = RecordingTask("ATask", log, result=True)
    b = RecordingTask("BTask", log, result=False)
    c = RecordingTask("CTask", log)
    manager.add_task(a)
    manager.add_task(b)
    manager.add_always_run_task(c)
    system = System()
    manager.setup(system)
    results = [manager.loop(system) for _ in range(3)]
    assert results == [True, False, True]
    assert c.loops == 3
    assert a.loops == 2
    assert b.loops == 1
    assert log[-2:] == [("loop", "CTask"), ("loop", "ATask")]


def test_loop_without_tasks_raises():
    manager = TaskManager()
    manager.add_always_run_task(RecordingTask("CTask", []))
    with pytest.raises(RuntimeError):
        manager.loop(System())


def _expected(*lines, line_height=8):
    bitmap = Bitmap(128, 64, FONT)
    for row, text in enumerate(lines):
        bitmap.draw_string(0, row * line_height, text)
    return bitmap.buffer


def test_status_frame_shows_state_info():
    task = RecordingTask("RouterTask", [])
    task.state_info = "Router done"
    bitmap = Bitmap(128, 64, FONT)
    StatusFrame([task]).draw_status_page(bitmap)
    assert bitmap.buffer == _expected("Router: Router done")


def test_status_frame_name_without_task_suffix_kept_whole():
    task = RecordingTask("Display", [])
    task.state_info = "on"
    bitmap = Bitmap(128, 64, FONT)
    StatusFrame([task]).draw_status_page(bitmap)
    assert bitmap.buffer == _expected("Display: on")


def test_status_frame_empty_info_uses_state():
    okay = RecordingTask("WifiTask", [])
    okay.state_info = ""
    error = RecordingTask("WifiTask", [])
    error.state_info = ""
    error.state = TaskDisplayState.ERROR

    okay_bitmap = Bitmap(128, 64, FONT)
    StatusFrame([okay]).draw_status_page(okay_bitmap)
    error_bitmap = Bitmap(128, 64, FONT)
    StatusFrame([error]).draw_status_page(error_bitmap)

    assert okay_bitmap.buffer == _expected("Wifi: Okay")
    assert error_bitmap.buffer == _expected("Wifi: Error")
    assert okay_bitmap.buffer != error_bitmap.buffer


def test_status_frame_line_height():
    first = RecordingTask("ATask", [])
    first.state_info = "x"
    second = RecordingTask("BTask", [])
    second.state_info = "y"
    bitmap = Bitmap(128, 64, FONT)
    StatusFrame([first, second], line_height=16).draw_status_page(bitmap)
    assert bitmap.buffer == _expected("A: x", "B: y", line_height=16)


def test_status_frame_without_font_or_line_height_raises():
    task = RecordingTask("ATask", [])
    with pytest.raises(ValueError):
        StatusFrame([task]).draw_status_page(Bitmap(128, 64))


def test_system_connectivity():
    system = System()
    assert not system.is_wifi_or_eth_connected()
    system.connected_via_wifi(True)
    assert system.is_wifi_or_eth_connected()
    system.connected_via_wifi(False)
    system.connected_via_eth(True)
    assert system.is_wifi_or_eth_connected()
    system.connected_via_eth(False)
    assert not system.is_wifi_or_eth_connected()


def test_system_holds_config_and_manager():
    config = {"callsign": "NOCALL-10"}
    system = System(user_config=config)
    assert system.user_config is config
    assert system.task_manager.tasks() == []
    assert system.display is None
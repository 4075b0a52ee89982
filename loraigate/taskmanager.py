"""Cooperative tasks, their scheduler, the status page and the shared system state."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, IntEnum
from typing import Any, Iterable, List, Optional

from .bitmap import Bitmap
from .display import Display, DisplayFrame


class TaskDisplayState(Enum):
    ERROR = 0
    WARNING = 1
    OKAY = 2


class TaskName(IntEnum):
    APRS_IS = 1
    ETH = 2
    FTP = 3
    MODEM = 4
    RADIOLIB = 5
    NTP = 6
    OTA = 7
    WIFI = 8
    ROUTER = 9
    MQTT = 10
    BEACON = 11

    @property
    def task_name(self) -> str:
        """The name tasks of this kind are registered with."""
        return _TASK_NAMES[self]


_TASK_NAMES = {
    TaskName.APRS_IS: "AprsIsTask",
    TaskName.ETH: "EthTask",
    TaskName.FTP: "FTPTask",
    TaskName.MODEM: "ModemTask",
    TaskName.RADIOLIB: "RadiolibTask",
    TaskName.NTP: "NTPTask",
    TaskName.OTA: "OTATask",
    TaskName.WIFI: "WifiTask",
    TaskName.ROUTER: "RouterTask",
    TaskName.MQTT: "MQTTTask",
    TaskName.BEACON: "BeaconTask",
}


class Task(ABC):
    """A unit of work set up once and then looped by the task manager."""

    def __init__(self, name: str, task_id: int) -> None:
        self.name = name
        self.task_id = int(task_id)
        self.state = TaskDisplayState.OKAY
        self.state_info = "Booting"

    @abstractmethod
    def setup(self, system: "System") -> bool:
        """Prepare the task; True on success."""

    @abstractmethod
    def loop(self, system: "System") -> bool:
        """Do one slice of work; True if work was done."""


class TaskManager:
    """Runs always-run tasks on every loop and the other tasks in turn."""

    def __init__(self) -> None:
        self._tasks: List[Task] = []
        self._always_run_tasks: List[Task] = []
        self._next_task = 0

    def add_task(self, task: Task) -> None:
        self._tasks.append(task)

    def add_always_run_task(self, task: Task) -> None:
        self._always_run_tasks.append(task)

    def tasks(self) -> List[Task]:
        """All tasks, always-run tasks first."""
        return [*self._always_run_tasks, *self._tasks]

    def setup(self, system: "System") -> bool:
        system.logger.info("will setup all tasks...")
        for task in self.tasks():
            system.logger.debug("call setup for %s", task.name)
            task.setup(system)
        self._next_task = 0
        return True

    def loop(self, system: "System") -> bool:
        """Loop every always-run task, then the next scheduled task; return its result."""
        for task in self._always_run_tasks:
            task.loop(system)
        if not self._tasks:
            raise RuntimeError("no tasks to schedule")
        if self._next_task >= len(self._tasks):
            self._next_task = 0
        result = self._tasks[self._next_task].loop(system)
        self._next_task += 1
        return result


class StatusFrame(DisplayFrame):
    """One line per task: its short name and its state."""

    def __init__(self, tasks: Iterable[Task], line_height: Optional[int] = None) -> None:
        self._tasks = list(tasks)
        self.line_height = line_height

    @staticmethod
    def _short_name(name: str) -> str:
        index = name.find("Task")
        return name if index < 0 else name[:index]

    def draw_status_page(self, bitmap: Bitmap) -> None:
        line_height = self.line_height
        if line_height is None:
            if bitmap.font is None:
                raise ValueError("bitmap has no font to take the line height from")
            line_height = bitmap.font.height_in_pixel
        y = 0
        for task in self._tasks:
            x = bitmap.draw_string(0, y, self._short_name(task.name))
            x = bitmap.draw_string(x, y, ": ")
            if task.state_info == "":
                if task.state is TaskDisplayState.ERROR:
                    bitmap.draw_string(x, y, "Error")
                elif task.state is TaskDisplayState.WARNING:
                    bitmap.draw_string(x, y, "Warning")
                bitmap.draw_string(x, y, "Okay")
            else:
                bitmap.draw_string(x, y, task.state_info)
            y += line_height


class System:
    """State shared by all tasks: configuration, scheduler, display, logger, links."""

    def __init__(self, user_config: Any = None, display: Optional[Display] = None,
                 logger: Optional[logging.Logger] = None) -> None:
        self.user_config = user_config
        self.display = display
        self.logger = logger or logging.getLogger("loraigate")
        self.task_manager = TaskManager()
        self._is_eth_connected = False
        self._is_wifi_connected = False

    def is_wifi_or_eth_connected(self) -> bool:
        return self._is_eth_connected or self._is_wifi_connected

    def connected_via_eth(self, status: bool) -> None:
        self._is_eth_connected = bool(status)

    def connected_via_wifi(self, status: bool) -> None:
        self._is_wifi_connected = bool(status)
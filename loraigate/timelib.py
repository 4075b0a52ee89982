"""Calendar arithmetic on Unix timestamps and a millisecond-driven system clock."""

from __future__ import annotations

import calendar
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

SECS_PER_MIN = 60
SECS_PER_HOUR = 3600
SECS_PER_DAY = SECS_PER_HOUR * 24
DAYS_PER_WEEK = 7
SECS_PER_WEEK = SECS_PER_DAY * DAYS_PER_WEEK
SECS_PER_YEAR = SECS_PER_DAY * 365
SECS_YR_2000 = 946684800

_UINT32 = 0xFFFFFFFF
_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

_MONTH_NAMES = ("Error", "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December")
_MONTH_SHORT_NAMES = ("Err", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
                      "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_DAY_NAMES = ("Err", "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday",
              "Friday", "Saturday")
_DAY_SHORT_NAMES = ("Err", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass
class TimeElements:
    """Broken-down time. ``year`` is an offset from 1970; ``wday`` 1 is Sunday."""

    second: int = 0
    minute: int = 0
    hour: int = 0
    wday: int = 0
    day: int = 1
    month: int = 1
    year: int = 0


class TimeStatus(Enum):
    NOT_SET = 0
    NEEDS_SYNC = 1
    SET = 2


def _is_leap(year_offset: int) -> bool:
    full_year = 1970 + year_offset
    return full_year > 0 and calendar.isleap(full_year)


def _month_length(month_index: int, year_offset: int) -> int:
    if month_index == 1 and _is_leap(year_offset):
        return 29
    return _MONTH_DAYS[month_index]


def break_time(t: int) -> TimeElements:
    """Split seconds since 1970 (taken as unsigned 32 bit) into its elements."""
    remaining = int(t) & _UINT32
    remaining, second = divmod(remaining, 60)
    remaining, minute = divmod(remaining, 60)
    days, hour = divmod(remaining, 24)
    wday = (days + 4) % 7 + 1

    year = 0
    while True:
        length = 366 if _is_leap(year) else 365
        if days < length:
            break
        days -= length
        year += 1

    month = 0
    while month < 12 and days >= _month_length(month, year):
        days -= _month_length(month, year)
        month += 1

    return TimeElements(second=second, minute=minute, hour=hour, wday=wday,
                        day=days + 1, month=month + 1, year=year)


def make_time(tm: TimeElements) -> int:
    """Assemble time elements back into seconds since 1970 (unsigned 32 bit)."""
    seconds = tm.year * SECS_PER_YEAR
    seconds += SECS_PER_DAY * sum(1 for y in range(tm.year) if _is_leap(y))
    seconds += SECS_PER_DAY * sum(_month_length(m - 1, tm.year) for m in range(1, tm.month))
    seconds += (tm.day - 1) * SECS_PER_DAY
    seconds += tm.hour * SECS_PER_HOUR
    seconds += tm.minute * SECS_PER_MIN
    seconds += tm.second
    return seconds & _UINT32


def hour(t: int) -> int:
    return break_time(t).hour


def hour_format_12(t: int) -> int:
    h = hour(t)
    if h == 0:
        return 12
    return h - 12 if h > 12 else h


def is_pm(t: int) -> bool:
    return hour(t) >= 12


def is_am(t: int) -> bool:
    return not is_pm(t)


def minute(t: int) -> int:
    return break_time(t).minute


def second(t: int) -> int:
    return break_time(t).second


def day(t: int) -> int:
    """Day of the month."""
    return break_time(t).day


def weekday(t: int) -> int:
    """Day of the week, Sunday is 1."""
    return break_time(t).wday


def month(t: int) -> int:
    return break_time(t).month


def year(t: int) -> int:
    """Full four digit year."""
    return break_time(t).year + 1970


def time_string(t: int) -> str:
    tm = break_time(t)
    return f"{tm.hour:02d}:{tm.minute:02d}:{tm.second:02d}"


def _lookup(names: tuple, index: int) -> str:
    if not 0 <= index < len(names):
        raise IndexError(f"index {index} out of range")
    return names[index]


def month_str(month: int) -> str:
    return _lookup(_MONTH_NAMES, month)


def month_short_str(month: int) -> str:
    return _lookup(_MONTH_SHORT_NAMES, month)


def day_str(day: int) -> str:
    return _lookup(_DAY_NAMES, day)


def day_short_str(day: int) -> str:
    return _lookup(_DAY_SHORT_NAMES, day)


def _default_millis() -> int:
    return int(time.monotonic() * 1000)


class Clock:
    """Seconds counter advanced by a millisecond source, optionally synced externally."""

    def __init__(self, millis: Optional[Callable[[], int]] = None) -> None:
        self._millis = millis or _default_millis
        self.sys_time = 0
        self._prev_millis = 0
        self._next_sync_time = 0
        self._sync_interval = 300
        self._status = TimeStatus.NOT_SET
        self._provider: Optional[Callable[[], int]] = None

    def now(self) -> int:
        """Current time in seconds since 1970."""
        while self._millis() - self._prev_millis >= 1000:
            self.sys_time += 1
            self._prev_millis += 1000
        if self._next_sync_time <= self.sys_time and self._provider is not None:
            t = self._provider()
            if t:
                self.set_time(t)
            else:
                self._next_sync_time = self.sys_time + self._sync_interval
                if self._status is not TimeStatus.NOT_SET:
                    self._status = TimeStatus.NEEDS_SYNC
        return self.sys_time

    def set_time(self, t: int) -> None:
        self.sys_time = int(t) & _UINT32
        self._next_sync_time = self.sys_time + self._sync_interval
        self._status = TimeStatus.SET
        self._prev_millis = self._millis()

    def set_time_fields(self, hr: int, minute: int, sec: int, day: int, month: int, yr: int) -> None:
        """Set the clock from fields; ``yr`` may be four digits or two (years after 2000)."""
        yr = yr - 1970 if yr > 99 else yr + 30
        self.set_time(make_time(TimeElements(second=sec, minute=minute, hour=hr,
                                             day=day, month=month, year=yr)))

    def adjust_time(self, adjustment: int) -> None:
        self.sys_time += adjustment

    def time_status(self) -> TimeStatus:
        self.now()
        return self._status

    def set_sync_provider(self, provider: Optional[Callable[[], int]]) -> None:
        self._provider = provider
        self._next_sync_time = self.sys_time
        self.now()

    def set_sync_interval(self, interval: int) -> None:
        self._sync_interval = int(interval)
        self._next_sync_time = self.sys_time + self._sync_interval

    def time_string(self) -> str:
        return time_string(self.now())
"""Frame queue and status screen handling on top of an OLED display."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Optional, Tuple

from .bitmap import Bitmap, Font
from .oled import OLEDDisplay
from .timer import Timer

FRAME_RATE_MS = 500
FRAME_TIMEOUT_MS = 15 * 1000
DEFAULT_SAVE_TIMEOUT_MS = 10 * 1000


class DisplayFrame(ABC):
    """Something that can paint a full page onto a bitmap."""

    @abstractmethod
    def draw_status_page(self, bitmap: Bitmap) -> None:
        """Paint this frame onto ``bitmap``."""


class TextFrame(DisplayFrame):
    """A header line followed by wrapped text."""

    def __init__(self, header: str, text: str) -> None:
        self.header = header
        self.text = text

    def draw_status_page(self, bitmap: Bitmap) -> None:
        bitmap.draw_string(0, 0, self.header)
        bitmap.draw_string_lf(0, 10, self.text)


class Display:
    """Shows queued frames for a while each, otherwise the status frame.

    With display save mode active the panel is switched off once the status
    frame has been shown for the save timeout.
    """

    def __init__(self, oled: OLEDDisplay, font: Optional[Font] = None,
                 millis: Optional[Callable[[], int]] = None) -> None:
        self._oled = oled
        self._font = font
        self._frame_rate = Timer(millis)
        self._frame_timeout = Timer(millis)
        self._save_mode_timer = Timer(millis)
        self._status_frame: Optional[DisplayFrame] = None
        self._frames: Deque[DisplayFrame] = deque()
        self._save_mode = False

    @property
    def oled(self) -> OLEDDisplay:
        return self._oled

    @property
    def frames(self) -> Tuple[DisplayFrame, ...]:
        """Frames still waiting to be shown, oldest first."""
        return tuple(self._frames)

    @property
    def status_frame(self) -> Optional[DisplayFrame]:
        return self._status_frame

    def _new_bitmap(self) -> Bitmap:
        return Bitmap.for_display(self._oled, self._font)

    def setup(self) -> None:
        """Blank the panel and arm the refresh timers."""
        self._oled.display(self._new_bitmap())
        self._frame_rate.set_timeout(FRAME_RATE_MS)
        self._frame_rate.start()
        self._frame_timeout.set_timeout(FRAME_TIMEOUT_MS)
        self._save_mode_timer.set_timeout(DEFAULT_SAVE_TIMEOUT_MS)

    def turn_180(self) -> None:
        self._oled.flip_screen_vertically()

    def activate_display_save_mode(self) -> None:
        self._save_mode = True

    def set_display_save_timeout(self, timeout: int) -> None:
        """Set the save mode timeout in seconds."""
        self._save_mode_timer.set_timeout(int(timeout) * 1000)

    def activate_display(self) -> None:
        self._oled.display_on()

    def update(self) -> None:
        """Refresh the panel if the frame rate timer has expired."""
        if not self._frame_rate.check():
            return

        if self._frames:
            bitmap = self._new_bitmap()
            self._frames[0].draw_status_page(bitmap)
            self._oled.display(bitmap)

            if not self._frame_timeout.is_active():
                self._frame_timeout.start()
                self._save_mode_timer.reset()
            elif self._frame_timeout.check():
                self._frames.popleft()
                self._frame_timeout.reset()
        elif self._oled.is_display_on():
            bitmap = self._new_bitmap()
            if self._status_frame is not None:
                self._status_frame.draw_status_page(bitmap)
            self._oled.display(bitmap)

            if self._save_mode:
                if self._save_mode_timer.is_active() and self._save_mode_timer.check():
                    self._oled.display_off()
                    self._save_mode_timer.reset()
                elif not self._save_mode_timer.is_active():
                    self._save_mode_timer.start()

        self._frame_rate.start()

    def add_frame(self, frame: DisplayFrame) -> None:
        self._frames.append(frame)

    def set_status_frame(self, frame: Optional[DisplayFrame]) -> None:
        self._status_frame = frame

    def show_splash_screen(self, firmware_title: str, version: str, boardname: str) -> None:
        bitmap = self._new_bitmap()
        bitmap.draw_string(0, 10, firmware_title)
        bitmap.draw_string(0, 20, version)
        bitmap.draw_string(0, 35, "by Peter Buchegger")
        bitmap.draw_string(30, 45, "OE5BPA")
        bitmap.draw_string(0, 55, "for board")
        bitmap.draw_string(0, 65, boardname)
        self._oled.display(bitmap)

    def show_status_screen(self, header: str, text: str) -> None:
        bitmap = self._new_bitmap()
        bitmap.draw_string(0, 0, header)
        bitmap.draw_string_lf(0, 10, text)
        self._oled.display(bitmap)
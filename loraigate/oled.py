"""Command layer for SSD1306-style OLED displays driven over an I2C-like bus."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Protocol

from .bitmap import Bitmap

_COMMAND_PREFIX = 0x80
_DATA_PREFIX = 0x40
_DATA_CHUNK = 16


class Geometry(IntEnum):
    GEOMETRY_128_64 = 0
    GEOMETRY_128_32 = 1
    GEOMETRY_64_48 = 2
    GEOMETRY_64_32 = 3

    @property
    def width(self) -> int:
        return _SIZES[self][0]

    @property
    def height(self) -> int:
        return _SIZES[self][1]


_SIZES = {
    Geometry.GEOMETRY_128_64: (128, 64),
    Geometry.GEOMETRY_128_32: (128, 32),
    Geometry.GEOMETRY_64_48: (64, 48),
    Geometry.GEOMETRY_64_32: (64, 32),
}


class Command(IntEnum):
    CHARGEPUMP = 0x8D
    COLUMNADDR = 0x21
    COMSCANDEC = 0xC8
    COMSCANINC = 0xC0
    DISPLAYALLON = 0xA5
    DISPLAYALLON_RESUME = 0xA4
    DISPLAYOFF = 0xAE
    DISPLAYON = 0xAF
    EXTERNALVCC = 0x01
    INVERTDISPLAY = 0xA7
    MEMORYMODE = 0x20
    NORMALDISPLAY = 0xA6
    PAGEADDR = 0x22
    SEGREMAP = 0xA0
    SETCOMPINS = 0xDA
    SETCONTRAST = 0x81
    SETDISPLAYCLOCKDIV = 0xD5
    SETDISPLAYOFFSET = 0xD3
    SETHIGHCOLUMN = 0x10
    SETLOWCOLUMN = 0x00
    SETMULTIPLEX = 0xA8
    SETPRECHARGE = 0xD9
    SETSEGMENTREMAP = 0xA1
    SETSTARTLINE = 0x40
    SETVCOMDETECT = 0xDB
    SWITCHCAPVCC = 0x02


class I2CBus(Protocol):
    """Anything that can write one transaction of bytes to a device address."""

    def write(self, address: int, data: bytes) -> None:
        ...


class OLEDDisplay(ABC):
    """Controller-independent display logic; subclasses talk to the hardware."""

    def __init__(self, geometry: Geometry = Geometry.GEOMETRY_128_64) -> None:
        self._geometry = Geometry(geometry)
        self._display_is_on = False

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    def display_on(self) -> None:
        self.send_command(Command.DISPLAYON)
        self._display_is_on = True

    def is_display_on(self) -> bool:
        return self._display_is_on

    def display_off(self) -> None:
        self.send_command(Command.DISPLAYOFF)
        self._display_is_on = False

    def invert_display(self) -> None:
        self.send_command(Command.INVERTDISPLAY)

    def normal_display(self) -> None:
        self.send_command(Command.NORMALDISPLAY)

    def set_contrast(self, contrast: int, precharge: int = 241, comdetect: int = 64) -> None:
        self.send_command(Command.SETPRECHARGE)
        self.send_command(precharge)
        self.send_command(Command.SETCONTRAST)
        self.send_command(contrast)
        self.send_command(Command.SETVCOMDETECT)
        self.send_command(comdetect)
        self.send_command(Command.DISPLAYALLON_RESUME)
        self.send_command(Command.NORMALDISPLAY)
        self.send_command(Command.DISPLAYON)

    def set_brightness(self, brightness: int) -> None:
        brightness &= 0xFF
        if brightness < 128:
            contrast = int(brightness * 1.171) & 0xFF
        else:
            contrast = int(brightness * 1.171 - 43) & 0xFF
        precharge = 0 if brightness == 0 else 241
        self.set_contrast(contrast, precharge, brightness // 8)

    def reset_orientation(self) -> None:
        self.send_command(Command.SEGREMAP)
        self.send_command(Command.COMSCANINC)

    def flip_screen_vertically(self) -> None:
        self.send_command(Command.SEGREMAP | 0x01)
        self.send_command(Command.COMSCANDEC)

    def mirror_screen(self) -> None:
        self.send_command(Command.SEGREMAP)
        self.send_command(Command.COMSCANDEC)

    def display(self, bitmap: Bitmap) -> None:
        """Show ``bitmap``, switching the display on first if needed."""
        if not self.is_display_on():
            self.display_on()
        self.intern_display(bitmap)

    def width(self) -> int:
        return self._geometry.width

    def height(self) -> int:
        return self._geometry.height

    def send_init_commands(self) -> None:
        small = self._geometry in (Geometry.GEOMETRY_128_64, Geometry.GEOMETRY_64_48,
                                   Geometry.GEOMETRY_64_32)
        self.send_command(Command.DISPLAYOFF)
        self.send_command(Command.SETDISPLAYCLOCKDIV)
        self.send_command(0xF0)
        self.send_command(Command.SETMULTIPLEX)
        self.send_command(self.height() - 1)
        self.send_command(Command.SETDISPLAYOFFSET)
        self.send_command(0x00)
        if self._geometry is Geometry.GEOMETRY_64_32:
            self.send_command(0x00)
        else:
            self.send_command(Command.SETSTARTLINE)
        self.send_command(Command.CHARGEPUMP)
        self.send_command(0x14)
        self.send_command(Command.MEMORYMODE)
        self.send_command(0x00)
        self.send_command(Command.SEGREMAP)
        self.send_command(Command.COMSCANINC)
        self.send_command(Command.SETCOMPINS)
        self.send_command(0x12 if small else 0x02)
        self.send_command(Command.SETCONTRAST)
        self.send_command(0xCF if small else 0x8F)
        self.send_command(Command.SETPRECHARGE)
        self.send_command(0xF1)
        self.send_command(Command.SETVCOMDETECT)
        self.send_command(0x40)
        self.send_command(Command.DISPLAYALLON_RESUME)
        self.send_command(Command.NORMALDISPLAY)
        self.send_command(0x2E)
        self.send_command(Command.DISPLAYON)

    @abstractmethod
    def send_command(self, command: int) -> None:
        """Send one command byte to the controller."""

    @abstractmethod
    def intern_display(self, bitmap: Bitmap) -> None:
        """Transfer the pixel data of ``bitmap`` to the controller."""


class SSD1306(OLEDDisplay):
    """SSD1306 controller on an I2C bus."""

    def __init__(self, bus: I2CBus, address: int,
                 geometry: Geometry = Geometry.GEOMETRY_128_64) -> None:
        super().__init__(geometry)
        self._bus = bus
        self._address = address
        self.send_init_commands()

    @property
    def address(self) -> int:
        return self._address

    def send_command(self, command: int) -> None:
        self._bus.write(self._address, bytes((_COMMAND_PREFIX, int(command) & 0xFF)))

    def intern_display(self, bitmap: Bitmap) -> None:
        self.send_command(Command.PAGEADDR)
        self.send_command(0x00)
        self.send_command(0xFF)
        self.send_command(Command.COLUMNADDR)
        self.send_command(0x00)
        self.send_command(self.width() - 1)

        pixels = bitmap.buffer
        size = self.width() * self.height() // 8
        for start in range(0, size, _DATA_CHUNK):
            chunk = pixels[start:start + _DATA_CHUNK]
            self._bus.write(self._address, bytes((_DATA_PREFIX,)) + chunk)
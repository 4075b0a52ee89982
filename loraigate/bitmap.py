"""Monochrome pixel buffer in the page layout used by SSD1306 displays."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

FONT_CHAR_SPACING = 2


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


@dataclass(frozen=True)
class Font:
    """Proportional bitmap font.

    ``data`` starts with one width byte per character from ``first_char`` to
    ``last_char``, followed by the glyph bits packed column by column, each
    column ``height_in_pixel`` bits high, least significant bit first.
    """

    width_in_pixel: int
    height_in_pixel: int
    first_char: int
    last_char: int
    data: bytes

    @property
    def glyph_count(self) -> int:
        return self.last_char - self.first_char + 1


class Bitmap:
    """Pixel buffer: each byte holds a vertical run of 8 pixels of one column."""

    def __init__(self, width: int, height: int, font: Optional[Font] = None) -> None:
        self._width = int(width)
        self._height = int(height)
        self.font = font
        self._buffer = bytearray(self._width * ((self._height + 7) // 8))

    @classmethod
    def for_display(cls, display, font: Optional[Font] = None) -> "Bitmap":
        """Create a bitmap matching the size of ``display``."""
        return cls(display.width(), display.height(), font)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def buffer(self) -> bytes:
        """Raw page-ordered pixel bytes."""
        return bytes(self._buffer)

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def set_pixel(self, x: int, y: int) -> None:
        if self._inside(x, y):
            self._buffer[x + (y // 8) * self._width] |= 1 << (y % 8)

    def clear_pixel(self, x: int, y: int) -> None:
        if self._inside(x, y):
            self._buffer[x + (y // 8) * self._width] &= ~(1 << (y % 8)) & 0xFF

    def get_pixel(self, x: int, y: int) -> bool:
        if self._inside(x, y):
            return bool(self._buffer[x + (y // 8) * self._width] & (1 << (y % 8)))
        return False

    def clear(self) -> None:
        self._buffer[:] = bytes(len(self._buffer))

    def draw_line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        dx = abs(x1 - x0)
        dy = abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = _cdiv(dx if dx > dy else -dy, 2)
        while True:
            self.set_pixel(x0, y0)
            if x0 == x1 and y0 == y1:
                break
            e2 = err
            if e2 > -dx:
                err -= dy
                x0 += sx
            if e2 < dy:
                err += dx
                y0 += sy

    def draw_horizontal_line(self, x: int, y: int, length: int) -> None:
        if y < 0 or y >= self._height:
            return
        for i in range(length):
            self.set_pixel(x + i, y)

    def draw_vertical_line(self, x: int, y: int, length: int) -> None:
        if x < 0 or x >= self._width:
            return
        for i in range(length):
            self.set_pixel(x, y + i)

    def draw_rect(self, x: int, y: int, width: int, height: int) -> None:
        self.draw_horizontal_line(x, y, width)
        self.draw_vertical_line(x, y, height)
        self.draw_vertical_line(x + width - 1, y, height)
        self.draw_horizontal_line(x, y + height - 1, width)

    def fill_rect(self, x: int, y: int, width: int, height: int) -> None:
        for i in range(width):
            self.draw_vertical_line(x + i, y, height)

    @staticmethod
    def _circle_steps(radius: int, at_least_once: bool):
        """Yield the midpoint circle (x, y) offsets for one octant."""
        x, y, dp = 0, radius, 1 - radius
        first = at_least_once
        while first or x < y:
            first = False
            if dp < 0:
                dp = dp + x * 2 + 3
                x += 1
            else:
                dp = dp + x * 2 - y * 2 + 5
                x += 1
                y -= 1
            yield x, y

    def draw_circle(self, x0: int, y0: int, radius: int) -> None:
        for x, y in self._circle_steps(radius, True):
            for px, py in ((x, y), (-x, y), (x, -y), (-x, -y),
                           (y, x), (-y, x), (y, -x), (-y, -x)):
                self.set_pixel(x0 + px, y0 + py)
        self.set_pixel(x0 + radius, y0)
        self.set_pixel(x0, y0 + radius)
        self.set_pixel(x0 - radius, y0)
        self.set_pixel(x0, y0 - radius)

    def fill_circle(self, x0: int, y0: int, radius: int) -> None:
        for x, y in self._circle_steps(radius, True):
            self.draw_horizontal_line(x0 - x, y0 - y, 2 * x)
            self.draw_horizontal_line(x0 - x, y0 + y, 2 * x)
            self.draw_horizontal_line(x0 - y, y0 - x, 2 * y)
            self.draw_horizontal_line(x0 - y, y0 + x, 2 * y)
        self.draw_horizontal_line(x0 - radius, y0, 2 * radius)

    def draw_circle_quads(self, x0: int, y0: int, radius: int, quads: int) -> None:
        """Draw the quarters of a circle selected by bits 0x1..0x8 of ``quads``."""
        for x, y in self._circle_steps(radius, False):
            if quads & 0x1:
                self.set_pixel(x0 + x, y0 - y)
                self.set_pixel(x0 + y, y0 - x)
            if quads & 0x2:
                self.set_pixel(x0 - y, y0 - x)
                self.set_pixel(x0 - x, y0 - y)
            if quads & 0x4:
                self.set_pixel(x0 - y, y0 + x)
                self.set_pixel(x0 - x, y0 + y)
            if quads & 0x8:
                self.set_pixel(x0 + x, y0 + y)
                self.set_pixel(x0 + y, y0 + x)
        if quads & 0x1 and quads & 0x8:
            self.set_pixel(x0 + radius, y0)
        if quads & 0x4 and quads & 0x8:
            self.set_pixel(x0, y0 + radius)
        if quads & 0x2 and quads & 0x4:
            self.set_pixel(x0 - radius, y0)
        if quads & 0x1 and quads & 0x2:
            self.set_pixel(x0, y0 - radius)

    def draw_progress_bar(self, x: int, y: int, width: int, height: int, progress: int) -> None:
        radius = _cdiv(height, 2)
        x_radius = x + radius
        y_radius = y + radius
        double_radius = 2 * radius
        inner_radius = radius - 2

        self.draw_circle_quads(x_radius, y_radius, radius, 0b00000110)
        self.draw_horizontal_line(x_radius, y, width - double_radius + 1)
        self.draw_horizontal_line(x_radius, y + height, width - double_radius + 1)
        self.draw_circle_quads(x + width - radius, y_radius, radius, 0b00001001)

        max_progress_width = _cdiv((width - double_radius + 1) * progress, 100) & 0xFFFF

        self.fill_circle(x_radius, y_radius, inner_radius)
        self.fill_rect(x_radius + 1, y + 2, max_progress_width, height - 3)
        self.fill_circle(x_radius + max_progress_width, y_radius, inner_radius)

    def _require_font(self) -> Font:
        if self.font is None:
            raise ValueError("bitmap has no font to draw text with")
        return self.font

    def draw_char(self, x: int, y: int, c: str) -> int:
        """Draw one character and return the x position for the next one."""
        font = self._require_font()
        if c == " ":
            return x + font.width_in_pixel * 4 // 10

        code = ord(c)
        if code < font.first_char or code > font.last_char:
            code = ord("?")
        index = code - font.first_char

        bit_pos = sum(font.data[:index]) * font.height_in_pixel
        glyph_data = font.data[font.glyph_count:]
        glyph_width = font.data[index]
        top = y
        for _ in range(glyph_width * font.height_in_pixel):
            byte_pos, bit = divmod(bit_pos, 8)
            if glyph_data[byte_pos] & (1 << bit):
                self.set_pixel(x, y)
            else:
                self.clear_pixel(x, y)
            bit_pos += 1
            y += 1
            if y == top + font.height_in_pixel:
                y = top
                x += 1
        return x + FONT_CHAR_SPACING

    def draw_string(self, x: int, y: int, text: str) -> int:
        next_x = x
        for c in text:
            next_x = self.draw_char(next_x, y, c)
        return next_x

    def draw_string_lf(self, x: int, y: int, text: str) -> int:
        """Draw text, wrapping to a new line at the right edge."""
        font = self._require_font()
        next_x = x
        for c in text:
            if next_x + font.width_in_pixel > self._width:
                next_x = 0
                y += font.height_in_pixel
            next_x = self.draw_char(next_x, y, c)
        return next_x
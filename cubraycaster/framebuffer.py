"""In-memory pixel images, visual colour conversion and basic drawing helpers."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def _channel_layout(mask: int) -> tuple[int, int]:
    """Return (shift, width) of the contiguous run of set bits in ``mask``."""
    if mask <= 0:
        raise ValueError(f"colour mask must be a positive bit mask, got {mask:#x}")
    shift = 0
    while not mask & 1:
        mask >>= 1
        shift += 1
    bits = 0
    while mask & 1:
        mask >>= 1
        bits += 1
    return shift, bits


@dataclass(frozen=True)
class Visual:
    """A TrueColor visual: pixel depth and the bit masks of each channel."""

    depth: int = 24
    red_mask: int = 0xFF0000
    green_mask: int = 0x00FF00
    blue_mask: int = 0x0000FF
    _layout: tuple[tuple[int, int], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        layout = tuple(
            _channel_layout(mask)
            for mask in (self.red_mask, self.green_mask, self.blue_mask)
        )
        object.__setattr__(self, "_layout", layout)

    def color_value(self, color: int) -> int:
        """Convert a 0xRRGGBB colour to this visual's pixel value."""
        if self.depth >= 24:
            return color
        red = (color >> 8) & 0xFF00
        green = color & 0xFF00
        blue = (color << 8) & 0xFF00
        pixel = 0
        for channel, (shift, bits) in zip((red, green, blue), self._layout):
            pixel += (channel >> (16 - bits)) << shift
        return _to_int32(pixel)


@dataclass
class Image:
    """A pixel buffer with rows padded to 32 bits.

    ``endian`` is 0 for least significant byte first and 1 for most
    significant byte first.
    """

    width: int
    height: int
    bpp: int = 32
    endian: int = 0
    size_line: int = field(init=False)
    data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"image size must be positive, got {self.width}x{self.height}"
            )
        if self.bpp <= 0 or self.bpp % 8:
            raise ValueError(f"bits per pixel must be a multiple of 8, got {self.bpp}")
        if self.endian not in (0, 1):
            raise ValueError(f"endian must be 0 or 1, got {self.endian}")
        self.size_line = (self.width * self.bpp + 31) // 32 * 4
        self.data = bytearray(self.size_line * self.height)

    @property
    def bytes_per_pixel(self) -> int:
        return self.bpp // 8

    def _offset(self, x: int, y: int) -> int:
        return y * self.size_line + x * self.bytes_per_pixel

    def _contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Store ``color`` at (x, y); points outside the image are ignored."""
        if not self._contains(x, y):
            return
        opp = self.bytes_per_pixel
        value = color & ((1 << (8 * opp)) - 1)
        order = "big" if self.endian else "little"
        start = self._offset(x, y)
        self.data[start:start + opp] = value.to_bytes(opp, order)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the unsigned pixel value stored at (x, y)."""
        if not self._contains(x, y):
            raise IndexError(f"pixel ({x}, {y}) is outside a {self.width}x{self.height} image")
        start = self._offset(x, y)
        order = "big" if self.endian else "little"
        return int.from_bytes(self.data[start:start + self.bytes_per_pixel], order)

    def pixels(self) -> Iterator[list[int]]:
        """Yield each row of the image, top to bottom, as a list of pixel values."""
        for y in range(self.height):
            yield [self.get_pixel(x, y) for x in range(self.width)]


def blend_colors(color1: int, color2: int, alpha: float) -> int:
    """Mix two 0xRRGGBB colours; ``alpha`` is the weight of ``color2``."""
    channels = []
    for shift in (16, 8, 0):
        first = (color1 >> shift) & 0xFF
        second = (color2 >> shift) & 0xFF
        channels.append(int(first * (1 - alpha) + second * alpha))
    red, green, blue = channels
    return (red << 16) | (green << 8) | blue


def darken_color(color: int, ratio: float) -> int:
    """Scale each channel of a 0xRRGGBB colour by ``ratio``."""
    red = int(((color >> 16) & 0xFF) * ratio)
    green = int(((color >> 8) & 0xFF) * ratio)
    blue = int((color & 0xFF) * ratio)
    return (red << 16) | (green << 8) | blue


def draw_line(
    image: Image, begin_x: int, begin_y: int, end_x: int, end_y: int, color: int
) -> None:
    """Draw a straight line, stopping one step short of the end point."""
    delta_x = float(end_x - begin_x)
    delta_y = float(end_y - begin_y)
    steps = int(math.sqrt(delta_x * delta_x + delta_y * delta_y))
    if steps == 0:
        return
    delta_x /= steps
    delta_y /= steps
    pixel_x = float(begin_x)
    pixel_y = float(begin_y)
    for _ in range(steps):
        image.put_pixel(int(pixel_x), int(pixel_y), color)
        pixel_x += delta_x
        pixel_y += delta_y
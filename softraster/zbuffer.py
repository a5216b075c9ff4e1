"""Frame buffer with a 16-bit depth buffer.

Pixels are stored as integers in a flat row-major list of ``xsize * ysize``
entries; depth values are 16-bit unsigned integers in a parallel list.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, MutableSequence, Optional


class PixelMode(enum.Enum):
    """Pixel layout of the colour buffer."""

    RGBA = 32
    R5G6B5 = 16

    @property
    def bytes_per_pixel(self) -> int:
        return self.value // 8


@dataclass
class ZBufferPoint:
    """A screen-space vertex: position, fixed-point depth, texture and colour."""

    x: int = 0
    y: int = 0
    z: int = 0
    s: int = 0
    t: int = 0
    r: int = 0
    g: int = 0
    b: int = 0
    sz: float = 0.0
    tz: float = 0.0


def rgb_to_pixel(r: int, g: int, b: int) -> int:
    """Pack 16-bit fixed-point colour channels into a 32-bit 0xRRGGBB pixel."""
    return ((r << 8) & 0xFF0000) | (g & 0xFF00) | (b >> 8)


def _rgb_to_pixel16(r: int, g: int, b: int) -> int:
    return (r & 0xF800) | ((g >> 5) & 0x07E0) | (b >> 11)


def reverse_pixel32(x: int) -> int:
    """Reverse the byte order of a 32-bit pixel."""
    return (
        ((x & 0xFF000000) >> 24)
        | ((x & 0x00FF0000) >> 8)
        | ((x & 0x0000FF00) << 8)
        | ((x & 0x000000FF) << 24)
    )


class ZBuffer:
    """Colour and depth buffers for one render target.

    The width is rounded down to a multiple of four.  When ``frame_buffer``
    is given it is used as the colour buffer in place and is not copied.
    """

    def __init__(
        self,
        xsize: int,
        ysize: int,
        mode: PixelMode = PixelMode.RGBA,
        frame_buffer: Optional[MutableSequence[int]] = None,
    ) -> None:
        try:
            self.mode = PixelMode(mode)
        except ValueError:
            raise ValueError(f"unsupported pixel mode {mode!r}") from None
        if xsize < 0 or ysize < 0:
            raise ValueError("buffer dimensions must not be negative")
        self.xsize = xsize & ~3
        self.ysize = ysize
        self.linesize = xsize * self.mode.bytes_per_pixel
        self.zbuf: list[int] = [0] * (self.xsize * self.ysize)
        self._attach(frame_buffer)
        self.current_texture = None
        self.depth_test = False
        self.depth_write = True
        self.enable_blend = False
        self.pointsize = 1.0

    def _attach(self, frame_buffer: Optional[MutableSequence[int]]) -> None:
        size = self.xsize * self.ysize
        if frame_buffer is None:
            self.pbuf: MutableSequence[int] = [0] * size
            self.frame_buffer_allocated = True
        else:
            if len(frame_buffer) < size:
                raise ValueError(
                    f"frame buffer holds {len(frame_buffer)} pixels, need {size}"
                )
            self.pbuf = frame_buffer
            self.frame_buffer_allocated = False

    def _pack(self, r: int, g: int, b: int) -> int:
        if self.mode is PixelMode.R5G6B5:
            return _rgb_to_pixel16(r, g, b)
        return rgb_to_pixel(r, g, b)

    def resize(
        self,
        xsize: int,
        ysize: int,
        frame_buffer: Optional[MutableSequence[int]] = None,
    ) -> None:
        """Reallocate the buffers for new dimensions; contents are discarded."""
        if xsize < 0 or ysize < 0:
            raise ValueError("buffer dimensions must not be negative")
        self.xsize = xsize & ~3
        self.ysize = ysize
        self.linesize = self.xsize * self.mode.bytes_per_pixel
        self.zbuf = [0] * (self.xsize * self.ysize)
        self._attach(frame_buffer)

    def clear(
        self,
        clear_z: bool,
        z: int,
        clear_color: bool,
        r: int,
        g: int,
        b: int,
    ) -> None:
        """Fill the depth buffer with ``z`` and/or the colour buffer with (r, g, b)."""
        size = self.xsize * self.ysize
        if clear_z:
            self.zbuf[:] = [z & 0xFFFF] * size
        if clear_color:
            color = self._pack(r, g, b)
            if self.mode is PixelMode.R5G6B5:
                color &= 0xFFFF
            self.pbuf[:size] = [color] * size

    def copy_frame_buffer(self) -> list[int]:
        """A copy of the visible pixels, row by row."""
        return list(self.pbuf[: self.xsize * self.ysize])

    def post_process(self, fn: Callable[[int, int, int, int], int]) -> None:
        """Replace every pixel with ``fn(x, y, pixel, depth)``."""
        for y in range(self.ysize):
            base = y * self.xsize
            for x in range(self.xsize):
                i = base + x
                self.pbuf[i] = fn(x, y, self.pbuf[i], self.zbuf[i])
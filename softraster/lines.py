"""Point and line rasterisation into a :class:`~softraster.zbuffer.ZBuffer`.

Points carry a fixed-point depth with ``Z_FRAC_BITS`` fractional bits.
Lines use a Bresenham walk. They either draw in one flat colour or step
the colour along the line, and either test and write depth or ignore it.
"""

from __future__ import annotations

from typing import Optional

from softraster.zbuffer import PixelMode, ZBuffer, ZBufferPoint, rgb_to_pixel

Z_FRAC_BITS = 14

_MASK32 = 0xFFFFFFFF


def _pack(zb: ZBuffer, r: int, g: int, b: int) -> int:
    if zb.mode is PixelMode.R5G6B5:
        return ((r & 0xF800) | ((g >> 5) & 0x07E0) | (b >> 11)) & 0xFFFF
    return rgb_to_pixel(r, g, b) & _MASK32


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating towards zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _put(zb: ZBuffer, index: int, zz: Optional[int], color: int) -> None:
    if not 0 <= index < zb.xsize * zb.ysize:
        return
    if zz is None:
        zb.pbuf[index] = color
        return
    if not zb.depth_test or zz >= zb.zbuf[index]:
        zb.pbuf[index] = color
        if zb.depth_write:
            zb.zbuf[index] = zz & 0xFFFF


def plot(zb: ZBuffer, p: ZBufferPoint) -> None:
    """Draw a point of ``zb.pointsize`` pixels across, with depth testing."""
    zz = p.z >> Z_FRAC_BITS
    color = _pack(zb, p.r, p.g, p.b)
    if zb.pointsize == 1:
        if 0 <= p.x < zb.xsize and 0 <= p.y < zb.ysize:
            _put(zb, p.y * zb.xsize + p.x, zz, color)
        return
    half = zb.pointsize / 2.0
    bx = max(int(p.x - half), 0)
    ex = min(int(p.x + half), zb.xsize)
    by = max(int(p.y - half), 0)
    ey = min(int(p.y + half), zb.ysize)
    for y in range(by, ey):
        for x in range(bx, ex):
            _put(zb, y * zb.xsize + x, zz, color)


def _line(
    zb: ZBuffer,
    p1: ZBufferPoint,
    p2: ZBufferPoint,
    use_z: bool,
    color: Optional[int],
) -> None:
    if p1.y > p2.y or (p1.y == p2.y and p1.x > p2.x):
        p1, p2 = p2, p1
    sx = zb.xsize
    index = p1.y * sx + p1.x
    z = p1.z
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    r, g, b = (p2.r << 8) & _MASK32, (p2.g << 8) & _MASK32, (p2.b << 8) & _MASK32

    def put() -> None:
        pix = color if color is not None else _pack(zb, r >> 8, g >> 8, b >> 8)
        _put(zb, index, (z >> Z_FRAC_BITS) if use_z else None, pix)

    if dx == 0 and dy == 0:
        put()
        return
    if dx > 0:
        if dx >= dy:
            n, d, inc1, inc2 = dx, dy, sx + 1, 1
        else:
            n, d, inc1, inc2 = dy, dx, sx + 1, sx
    else:
        dx = -dx
        if dx >= dy:
            n, d, inc1, inc2 = dx, dy, sx - 1, -1
        else:
            n, d, inc1, inc2 = dy, dx, sx - 1, sx

    zinc = _cdiv(p2.z - p1.z, n) if use_z else 0
    if color is None:
        rinc = _cdiv((p2.r - p1.r) << 8, n) & _MASK32
        ginc = _cdiv((p2.g - p1.g) << 8, n) & _MASK32
        binc = _cdiv((p2.b - p1.b) << 8, n) & _MASK32
    else:
        rinc = ginc = binc = 0

    a = 2 * d - n
    two_d = 2 * d
    dec = 2 * n - two_d
    for _ in range(n + 1):
        put()
        z += zinc
        r = (r + rinc) & _MASK32
        g = (g + ginc) & _MASK32
        b = (b + binc) & _MASK32
        if a > 0:
            index += inc1
            a -= dec
        else:
            index += inc2
            a += two_d


def draw_line(zb: ZBuffer, p1: ZBufferPoint, p2: ZBufferPoint) -> None:
    """Draw a line without depth testing."""
    c1 = _pack(zb, p1.r, p1.g, p1.b)
    c2 = _pack(zb, p2.r, p2.g, p2.b)
    _line(zb, p1, p2, False, c1 if c1 == c2 else None)


def draw_line_z(zb: ZBuffer, p1: ZBufferPoint, p2: ZBufferPoint) -> None:
    """Draw a line with depth testing and depth writes."""
    c1 = _pack(zb, p1.r, p1.g, p1.b)
    c2 = _pack(zb, p2.r, p2.g, p2.b)
    _line(zb, p1, p2, True, c1 if c1 == c2 else None)
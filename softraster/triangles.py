"""Filled triangle rasterisation into a :class:`~softraster.zbuffer.ZBuffer`.

Triangles come in three kinds. Flat ones use one colour. Smooth ones are
Gouraud shaded. Textured ones are perspective-correct and modulated by
the vertex colour. Scan conversion is done by
:func:`softraster.scanline.triangle_spans`. Depth values carry
``Z_FRAC_BITS`` fractional bits. Texture coordinates ``s`` and ``t`` carry
``ST_FRAC_BITS`` fractional bits per texel.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from softraster.scanline import Span, triangle_spans
from softraster.zbuffer import PixelMode, ZBuffer, ZBufferPoint, rgb_to_pixel

Z_FRAC_BITS = 14
ST_FRAC_BITS = 14
NB_INTERP = 8

_MASK32 = 0xFFFFFFFF


def _pack(zb: ZBuffer, r: int, g: int, b: int) -> int:
    if zb.mode is PixelMode.R5G6B5:
        return ((r & 0xF800) | ((g >> 5) & 0x07E0) | ((b & 0xFFFF) >> 11)) & 0xFFFF
    return rgb_to_pixel(r, g, b) & _MASK32


def _put(zb: ZBuffer, row: int, x: int, z: int, color: int) -> None:
    if not 0 <= x < zb.xsize:
        return
    index = row + x
    zz = (z & _MASK32) >> Z_FRAC_BITS
    if not zb.depth_test or zz >= zb.zbuf[index]:
        zb.pbuf[index] = color
        if zb.depth_write:
            zb.zbuf[index] = zz & 0xFFFF


def texture_sample(texture: Sequence[int], s: int, t: int) -> int:
    """Texel at fixed-point coordinates ``(s, t)``, wrapping at the edges.

    The texture must be a square of power-of-two side stored row by row.
    """
    size = len(texture)
    dim = math.isqrt(size)
    if dim == 0 or dim * dim != size or dim & (dim - 1):
        raise ValueError(
            f"texture must be a square power-of-two image, got {size} texels"
        )
    mask = dim - 1
    u = ((s & _MASK32) >> ST_FRAC_BITS) & mask
    v = ((t & _MASK32) >> ST_FRAC_BITS) & mask
    return texture[v * dim + u]


def _channel(value: int) -> int:
    return min(max(value >> 8, 0), 255)


def _mix(zb: ZBuffer, r: int, g: int, b: int, texel: int) -> int:
    """Modulate a texel by a 16-bit fixed-point colour (0xFF00 is white)."""
    cr, cg, cb = _channel(r), _channel(g), _channel(b)
    if zb.mode is PixelMode.R5G6B5:
        tr = (texel >> 11) & 0x1F
        tg = (texel >> 5) & 0x3F
        tb = texel & 0x1F
        return (
            ((tr * cr // 255) << 11) | ((tg * cg // 255) << 5) | (tb * cb // 255)
        ) & 0xFFFF
    tr = (texel >> 16) & 0xFF
    tg = (texel >> 8) & 0xFF
    tb = texel & 0xFF
    return (
        (texel & 0xFF000000)
        | ((tr * cr // 255) << 16)
        | ((tg * cg // 255) << 8)
        | (tb * cb // 255)
    )


def fill_triangle_flat(
    zb: ZBuffer, p0: ZBufferPoint, p1: ZBufferPoint, p2: ZBufferPoint
) -> None:
    """Fill a triangle in the colour of ``p2`` with depth testing."""
    color = _pack(zb, p2.r, p2.g, p2.b)
    for span in triangle_spans(zb, p0, p1, p2):
        row = span.y * zb.xsize
        z = span.z
        for x in span.xs():
            _put(zb, row, x, z, color)
            z += span.dzdx


def fill_triangle_smooth(
    zb: ZBuffer, p0: ZBufferPoint, p1: ZBufferPoint, p2: ZBufferPoint
) -> None:
    """Fill a triangle interpolating the vertex colours across it."""
    for span in triangle_spans(zb, p0, p1, p2):
        row = span.y * zb.xsize
        z, r, g, b = span.z, span.r, span.g, span.b
        for x in span.xs():
            _put(zb, row, x, z, _pack(zb, r, g, b))
            z += span.dzdx
            r += span.drdx
            g += span.dgdx
            b += span.dbdx


def _inverse(value: float) -> float:
    return 1.0 / value if value else 0.0


def _to_int(value: float) -> int:
    return int(value) if math.isfinite(value) else 0


def _texture_steps(span: Span, sz: float, tz: float, zinv: float, fdzdx: float):
    ss = sz * zinv
    tt = tz * zinv
    dsdx = _to_int((span.dszdx - ss * fdzdx) * zinv)
    dtdx = _to_int((span.dtzdx - tt * fdzdx) * zinv)
    return _to_int(ss), _to_int(tt), dsdx, dtdx


def _textured_span(zb: ZBuffer, texture: Sequence[int], span: Span) -> None:
    row = span.y * zb.xsize
    fdzdx = float(span.dzdx)
    fndzdx = NB_INTERP * fdzdx
    ndszdx = NB_INTERP * span.dszdx
    ndtzdx = NB_INTERP * span.dtzdx

    n = span.x_end - span.x_start
    x = span.x_start
    z, r, g, b = span.z, span.r, span.g, span.b
    fzl = float(span.z)
    zinv = _inverse(fzl)
    sz, tz = span.sz, span.tz

    def run(count: int, s: int, t: int, dsdx: int, dtdx: int) -> None:
        nonlocal x, z, r, g, b
        for _ in range(count):
            texel = texture_sample(texture, s, t)
            _put(zb, row, x, z, _mix(zb, r, g, b, texel))
            z += span.dzdx
            s += dsdx
            t += dtdx
            r += span.drdx
            g += span.dgdx
            b += span.dbdx
            x += 1

    while n >= NB_INTERP - 1:
        s, t, dsdx, dtdx = _texture_steps(span, sz, tz, zinv, fdzdx)
        fzl += fndzdx
        zinv = _inverse(fzl)
        run(NB_INTERP, s, t, dsdx, dtdx)
        n -= NB_INTERP
        sz += ndszdx
        tz += ndtzdx

    s, t, dsdx, dtdx = _texture_steps(span, sz, tz, zinv, fdzdx)
    if n >= 0:
        run(n + 1, s, t, dsdx, dtdx)


def fill_triangle_mapping_perspective(
    zb: ZBuffer, p0: ZBufferPoint, p1: ZBufferPoint, p2: ZBufferPoint
) -> None:
    """Fill a perspective-correct textured triangle using ``zb.current_texture``.

    The texture is modulated by the interpolated vertex colour. Raises
    ValueError when no texture is set.
    """
    texture: Optional[Sequence[int]] = zb.current_texture
    if texture is None:
        raise ValueError("no texture is set on the z-buffer")
    for span in triangle_spans(zb, p0, p1, p2):
        _textured_span(zb, texture, span)
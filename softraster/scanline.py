"""Scan conversion of screen-space triangles into horizontal spans.

The walk follows the fixed-point edge stepping of the rasteriser. Vertices
are sorted by increasing ``y``. The triangle is drawn in two parts, above
and below the middle vertex. The left edge is stepped with a 16-bit
fractional error term. The right edge keeps its x in 16.16 fixed point.
Every attribute is interpolated linearly across the triangle: depth,
colour, and the perspective texture products ``s*z`` and ``t*z``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from softraster.zbuffer import ZBuffer, ZBufferPoint

_ATTRIBUTES = ("z", "r", "g", "b", "sz", "tz")


@dataclass(frozen=True)
class Span:
    """One scan line of a triangle: pixels ``x_start`` to ``x_end`` inclusive.

    The attribute values hold at ``x_start``. The ``d*dx`` fields are the
    per-pixel increments, which are the same for the whole triangle.
    """

    y: int
    x_start: int
    x_end: int
    z: int
    r: int
    g: int
    b: int
    sz: float
    tz: float
    dzdx: int
    drdx: int
    dgdx: int
    dbdx: int
    dszdx: float
    dtzdx: float

    @property
    def width(self) -> int:
        """Number of pixels covered; zero when the span is empty."""
        return max(0, self.x_end - self.x_start + 1)

    def xs(self) -> range:
        """The x coordinates covered by the span."""
        return range(self.x_start, self.x_end + 1)


def _trunc_div(a: int, b: int) -> int:
    """Integer division truncating towards zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def triangle_spans(
    zb: ZBuffer, p0: ZBufferPoint, p1: ZBufferPoint, p2: ZBufferPoint
) -> Iterator[Span]:
    """Yield the spans of the triangle ``p0 p1 p2`` from top to bottom.

    Rows outside the buffer are stepped over but not yielded. The
    ``sz`` and ``tz`` fields of the three points are set to ``s*z`` and
    ``t*z``.
    """
    p0, p1, p2 = sorted((p0, p1, p2), key=lambda p: p.y)

    for p in (p0, p1, p2):
        p.sz = float(p.s) * float(p.z)
        p.tz = float(p.t) * float(p.z)

    fdx1 = float(p1.x - p0.x)
    fdy1 = float(p1.y - p0.y)
    fdx2 = float(p2.x - p0.x)
    fdy2 = float(p2.y - p0.y)

    fz = fdx1 * fdy2 - fdx2 * fdy1
    if fz != 0.0:
        fz = 1.0 / fz
    fdx1 *= fz
    fdy1 *= fz
    fdx2 *= fz
    fdy2 *= fz

    step_x: dict[str, float] = {}
    step_y: dict[str, float] = {}
    for name in _ATTRIBUTES:
        a0, a1, a2 = (getattr(p, name) for p in (p0, p1, p2))
        d1 = a1 - a0
        d2 = a2 - a0
        gx = fdy2 * d1 - fdy1 * d2
        gy = fdx1 * d2 - fdx2 * d1
        if name in ("sz", "tz"):
            step_x[name], step_y[name] = gx, gy
        else:
            step_x[name], step_y[name] = int(gx), int(gy)

    left: dict[str, float] = {}
    step_min: dict[str, float] = {}
    step_max: dict[str, float] = {}
    x1 = error = derror = dxdy_min = dxdy_max = 0
    x2 = dx2dy2 = 0
    y = p0.y

    for part in (0, 1):
        if part == 0:
            update_left = update_right = True
            if fz > 0:
                l1, l2, r1, r2 = p0, p2, p0, p1
            else:
                l1, l2, r1, r2 = p0, p1, p0, p2
            nb_lines = p1.y - p0.y
        else:
            if fz > 0:
                update_left, update_right = False, True
                r1, r2 = p1, p2
            else:
                update_left, update_right = True, False
                l1, l2 = p1, p2
            nb_lines = p2.y - p1.y + 1

        if update_left:
            dy1 = l2.y - l1.y
            dx1 = l2.x - l1.x
            tmp = _trunc_div(dx1 << 16, dy1) if dy1 > 0 else 0
            x1 = l1.x
            error = 0
            derror = tmp & 0xFFFF
            dxdy_min = tmp >> 16
            dxdy_max = dxdy_min + 1
            left = {name: getattr(l1, name) for name in _ATTRIBUTES}
            step_min = {
                name: step_y[name] + step_x[name] * dxdy_min for name in _ATTRIBUTES
            }
            step_max = {name: step_min[name] + step_x[name] for name in _ATTRIBUTES}

        if update_right:
            dx2 = r2.x - r1.x
            dy2 = r2.y - r1.y
            dx2dy2 = _trunc_div(dx2 << 16, dy2) if dy2 > 0 else 0
            x2 = r1.x << 16

        for _ in range(max(nb_lines, 0)):
            if 0 <= y < zb.ysize:
                yield Span(
                    y=y,
                    x_start=x1,
                    x_end=x2 >> 16,
                    z=int(left["z"]),
                    r=int(left["r"]),
                    g=int(left["g"]),
                    b=int(left["b"]),
                    sz=float(left["sz"]),
                    tz=float(left["tz"]),
                    dzdx=int(step_x["z"]),
                    drdx=int(step_x["r"]),
                    dgdx=int(step_x["g"]),
                    dbdx=int(step_x["b"]),
                    dszdx=float(step_x["sz"]),
                    dtzdx=float(step_x["tz"]),
                )
            error += derror
            if error > 0:
                error -= 0x10000
                x1 += dxdy_max
                step = step_max
            else:
                x1 += dxdy_min
                step = step_min
            left = {name: left[name] + step[name] for name in _ATTRIBUTES}
            x2 += dx2dy2
            y += 1
import pytest

from softraster.lines import Z_FRAC_BITS, draw_line, draw_line_z, plot
from softraster.zbuffer import ZBuffer, ZBufferPoint, rgb_to_pixel


def _zb(w=8, h=8):
    return ZBuffer(w, h)


def _pt(x, y, z=0, r=0xFF00, g=0x8000, b=0x4000):
    return ZBufferPoint(x=x, y=y, z=z, r=r, g=g, b=b)


def _written(zb):
    return {(i % zb.xsize, i // zb.xsize) for i, v in enumerate(zb.pbuf) if v}


def test_plot_single_pixel_sets_colour_and_depth():
    zb = _zb()
    p = _pt(3, 2, z=7 << Z_FRAC_BITS)
    plot(zb, p)
    idx = 2 * zb.xsize + 3
    assert zb.pbuf[idx] == rgb_to_pixel(p.r, p.g, p.b)
    assert zb.zbuf[idx] == 7
    assert _written(zb) == {(3, 2)}


def test_plot_respects_depth_test():
    zb = _zb()
    zb.depth_test = True
    zb.clear(True, 100, False, 0, 0, 0)
    plot(zb, _pt(1, 1, z=5 << Z_FRAC_BITS))
    assert _written(zb) == set()
    assert zb.zbuf[1 * zb.xsize + 1] == 100


def test_plot_without_depth_write_keeps_depth():
    zb = _zb()
    zb.depth_write = False
    plot(zb, _pt(1, 1, z=5 << Z_FRAC_BITS))
    assert zb.zbuf[1 * zb.xsize + 1] == 0
    assert (1, 1) in _written(zb)


def test_plot_large_point_covers_square():
    zb = _zb()
    zb.pointsize = 3.0
    plot(zb, _pt(4, 4))
    pixels = _written(zb)
    assert len(pixels) == 9
    xs = {x for x, _ in pixels}
    ys = {y for _, y in pixels}
    assert len(xs) == 3 and len(ys) == 3


def test_plot_large_point_is_clipped_at_border():
    zb = _zb()
    zb.pointsize = 4.0
    plot(zb, _pt(0, 0))
    assert all(0 <= x < zb.xsize and 0 <= y < zb.ysize for x, y in _written(zb))
    assert (0, 0) in _written(zb)


def test_horizontal_flat_line():
    zb = _zb()
    p1, p2 = _pt(1, 2), _pt(5, 2)
    draw_line(zb, p1, p2)
    assert _written(zb) == {(x, 2) for x in range(1, 6)}
    colour = rgb_to_pixel(p1.r, p1.g, p1.b)
    assert all(zb.pbuf[2 * zb.xsize + x] == colour for x in range(1, 6))


def test_vertical_flat_line():
    zb = _zb()
    draw_line(zb, _pt(3, 1), _pt(3, 6))
    assert _written(zb) == {(3, y) for y in range(1, 7)}


def test_diagonal_line():
    zb = _zb()
    draw_line(zb, _pt(0, 0), _pt(5, 5))
    assert _written(zb) == {(i, i) for i in range(6)}


def test_anti_diagonal_line():
    zb = _zb()
    draw_line(zb, _pt(5, 0), _pt(0, 5))
    assert _written(zb) == {(5 - i, i) for i in range(6)}


@pytest.mark.parametrize(
    "a,b", [((0, 0), (7, 3)), ((6, 1), (1, 7)), ((2, 7), (4, 0)), ((0, 5), (7, 5))]
)
def test_line_is_symmetric_and_hits_endpoints(a, b):
    zb1, zb2 = _zb(), _zb()
    draw_line(zb1, _pt(*a), _pt(*b))
    draw_line(zb2, _pt(*b), _pt(*a))
    assert zb1.pbuf == zb2.pbuf
    pixels = _written(zb1)
    assert a in pixels and b in pixels
    assert len(pixels) == max(abs(a[0] - b[0]), abs(a[1] - b[1])) + 1


def test_degenerate_line_is_one_pixel():
    zb = _zb()
    draw_line(zb, _pt(4, 4), _pt(4, 4))
    assert _written(zb) == {(4, 4)}


def test_interpolated_line_starts_with_second_point_colour():
    zb = _zb()
    p1 = _pt(0, 3, r=0, g=0, b=0)
    p2 = _pt(6, 3, r=0xFF00, g=0xFF00, b=0xFF00)
    draw_line(zb, p1, p2)
    assert zb.pbuf[3 * zb.xsize] == rgb_to_pixel(p2.r, p2.g, p2.b)
    assert {y for _, y in _written(zb)} == {3}


def test_line_z_writes_interpolated_depth():
    zb = _zb()
    draw_line_z(zb, _pt(0, 0, z=2 << Z_FRAC_BITS), _pt(4, 0, z=10 << Z_FRAC_BITS))
    depths = zb.zbuf[0:5]
    assert depths[0] == 2
    assert depths == sorted(depths)
    assert _written(zb) == {(x, 0) for x in range(5)}


def test_line_z_hidden_behind_depth():
    zb = _zb()
    zb.depth_test = True
    zb.clear(True, 50, False, 0, 0, 0)
    draw_line_z(zb, _pt(0, 1, z=3 << Z_FRAC_BITS), _pt(7, 1, z=3 << Z_FRAC_BITS))
    assert _written(zb) == set()
    assert all(v == 50 for v in zb.zbuf)


def test_plain_line_ignores_depth_buffer():
    zb = _zb()
    zb.depth_test = True
    zb.clear(True, 50, False, 0, 0, 0)
    draw_line(zb, _pt(0, 1), _pt(7, 1))
    assert _written(zb) == {(x, 1) for x in range(8)}
    assert all(v == 50 for v in zb.zbuf)
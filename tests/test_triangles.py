import pytest

from softraster.triangles import (
    fill_triangle_flat,
    fill_triangle_mapping_perspective,
    fill_triangle_smooth,
    texture_sample,
)
from softraster.zbuffer import PixelMode, ZBuffer, ZBufferPoint, rgb_to_pixel

WHITE = 0xFF00
DEPTH = 100


def _points(colors=((WHITE, 0, 0), (0, WHITE, 0), (0, 0, WHITE)), z=DEPTH << 14):
    coords = ((2, 0), (6, 4), (0, 6))
    return [
        ZBufferPoint(x=x, y=y, z=z, s=0, t=0, r=c[0], g=c[1], b=c[2])
        for (x, y), c in zip(coords, colors)
    ]


def _written(zb, background=0):
    return [i for i, p in enumerate(zb.pbuf) if p != background]


def test_flat_uses_colour_of_third_vertex():
    zb = ZBuffer(8, 8)
    p0, p1, p2 = _points()
    fill_triangle_flat(zb, p0, p1, p2)
    expected = rgb_to_pixel(0, 0, WHITE)
    drawn = _written(zb)
    assert drawn
    assert all(zb.pbuf[i] == expected for i in drawn)


def test_flat_covers_top_vertex_and_not_last_row():
    zb = ZBuffer(8, 8)
    fill_triangle_flat(zb, *_points())
    assert zb.pbuf[2] != 0
    assert all(p == 0 for p in zb.pbuf[7 * 8:])


def test_flat_writes_depth():
    zb = ZBuffer(8, 8)
    fill_triangle_flat(zb, *_points())
    for i in _written(zb):
        assert zb.zbuf[i] == DEPTH


def test_depth_test_rejects_farther_pixels():
    zb = ZBuffer(8, 8)
    zb.depth_test = True
    zb.clear(True, 0xFFFF, False, 0, 0, 0)
    fill_triangle_flat(zb, *_points())
    assert _written(zb) == []
    assert all(z == 0xFFFF for z in zb.zbuf)


def test_depth_write_disabled_keeps_depth_buffer():
    zb = ZBuffer(8, 8)
    zb.depth_write = False
    fill_triangle_flat(zb, *_points())
    assert _written(zb)
    assert all(z == 0 for z in zb.zbuf)


def test_flat_in_565_mode():
    zb = ZBuffer(8, 8, PixelMode.R5G6B5)
    fill_triangle_flat(zb, *_points(colors=((0, 0, 0),) * 2 + ((WHITE, 0, 0),)))
    drawn = _written(zb)
    assert drawn
    assert all(zb.pbuf[i] == 0xF800 for i in drawn)


def test_smooth_with_uniform_colour_matches_flat():
    colors = ((WHITE, WHITE, 0),) * 3
    flat = ZBuffer(8, 8)
    smooth = ZBuffer(8, 8)
    fill_triangle_flat(flat, *_points(colors))
    fill_triangle_smooth(smooth, *_points(colors))
    assert smooth.pbuf == flat.pbuf
    assert smooth.zbuf == flat.zbuf


def test_smooth_interpolates_between_vertex_colours():
    zb = ZBuffer(8, 8)
    fill_triangle_smooth(zb, *_points())
    drawn = _written(zb)
    assert len({zb.pbuf[i] for i in drawn}) > 1
    assert all(zb.pbuf[i] <= 0xFFFFFF for i in drawn)


def test_texture_sample_indexes_row_major():
    texture = list(range(16))
    assert texture_sample(texture, 3 << 14, 2 << 14) == texture[2 * 4 + 3]


def test_texture_sample_wraps():
    texture = list(range(16))
    assert texture_sample(texture, 5 << 14, 6 << 14) == texture_sample(
        texture, 1 << 14, 2 << 14
    )


def test_texture_sample_rejects_non_square():
    with pytest.raises(ValueError):
        texture_sample(list(range(12)), 0, 0)


def test_mapping_uniform_texture_white_light():
    zb = ZBuffer(8, 8)
    texel = 0x123456
    zb.current_texture = [texel] * 16
    fill_triangle_mapping_perspective(zb, *_points(colors=((WHITE,) * 3,) * 3))
    drawn = _written(zb)
    assert drawn
    assert all(zb.pbuf[i] == texel for i in drawn)


def test_mapping_black_light_gives_black():
    zb = ZBuffer(8, 8)
    zb.clear(False, 0, True, WHITE, WHITE, WHITE)
    background = zb.pbuf[0]
    zb.current_texture = [0x123456] * 16
    fill_triangle_mapping_perspective(zb, *_points(colors=((0, 0, 0),) * 3))
    covered = [i for i, p in enumerate(zb.pbuf) if p != background]
    assert covered
    assert all(zb.pbuf[i] == 0 for i in covered)


def test_mapping_covers_same_pixels_as_flat():
    flat = ZBuffer(8, 8)
    textured = ZBuffer(8, 8)
    textured.current_texture = [0x010101] * 16
    fill_triangle_flat(flat, *_points(colors=((WHITE,) * 3,) * 3))
    fill_triangle_mapping_perspective(textured, *_points(colors=((WHITE,) * 3,) * 3))
    assert _written(flat) == _written(textured)


def test_mapping_without_texture_raises():
    zb = ZBuffer(8, 8)
    with pytest.raises(ValueError):
        fill_triangle_mapping_perspective(zb, *_points())
# softraster

softraster is a small software rasterizer written in pure Python. It needs
nothing outside the standard library. It works in screen space. You give it
vertices that already have pixel positions, fixed-point depth and colours,
and it draws them into a colour buffer with a 16-bit depth buffer.

## Modules

### `softraster.zbuffer`

- `ZBuffer(xsize, ysize, mode=PixelMode.RGBA, frame_buffer=None)` holds the
  colour buffer `pbuf` and the depth buffer `zbuf`. Both are flat, row-major
  lists of integers.
  - The width is rounded down to a multiple of four.
  - If you pass `frame_buffer`, that sequence is used in place as the colour
    buffer. It must hold at least `xsize * ysize` entries.
  - The attributes `depth_test`, `depth_write`, `pointsize` and
    `current_texture` control drawing.
  - `resize(xsize, ysize, frame_buffer=None)` reallocates both buffers.
  - `clear(clear_z, z, clear_color, r, g, b)` fills the depth buffer, the
    colour buffer, or both.
  - `copy_frame_buffer()` returns a copy of the visible pixels.
  - `post_process(fn)` replaces each pixel with `fn(x, y, pixel, depth)`.
- `PixelMode` selects the pixel layout: `RGBA` (32-bit) or `R5G6B5` (16-bit).
- `ZBufferPoint` is a screen-space vertex. Its fields are `x`, `y`, `z`, the
  texture coordinates `s` and `t`, and the colour channels `r`, `g` and `b`.
  Colour channels are 16-bit fixed point, so `0xFF00` is full intensity.
- `rgb_to_pixel(r, g, b)` packs such channels into a `0xRRGGBB` pixel.
- `reverse_pixel32(x)` reverses the byte order of a 32-bit pixel.

### `softraster.lines`

Depth values carry `Z_FRAC_BITS` (14) fractional bits.

- `plot(zb, p)` draws a point `zb.pointsize` pixels wide.
- `draw_line(zb, p1, p2)` draws a Bresenham line without touching depth.
- `draw_line_z(zb, p1, p2)` draws a line that tests depth when
  `zb.depth_test` is set and writes depth when `zb.depth_write` is set.

A line is drawn in one flat colour when both end colours pack to the same
pixel. Otherwise the colour is stepped along the line.

### `softraster.scanline`

`triangle_spans(zb, p0, p1, p2)` yields one `Span` for each scan line of a
triangle that lies inside the buffer, from top to bottom.

Each span gives:

- the row `y` and the inclusive pixel range from `x_start` to `x_end`;
- the depth, colour and `s*z`/`t*z` values at its left end;
- the per-pixel increments of those values.

`Span.width` and `Span.xs()` describe the pixels the span covers.

### `softraster.triangles`

- `fill_triangle_flat(zb, p0, p1, p2)` fills the triangle in the colour of
  `p2`.
- `fill_triangle_smooth(zb, p0, p1, p2)` interpolates the three vertex
  colours across the triangle (Gouraud shading).
- `fill_triangle_mapping_perspective(zb, p0, p1, p2)` maps
  `zb.current_texture` onto the triangle with perspective correction and
  modulates it by the interpolated vertex colour. The texture is a flat list
  of pixels forming a square whose side is a power of two. Texture
  coordinates carry `ST_FRAC_BITS` (14) fractional bits per texel. A
  `ValueError` is raised when no texture is set.
- `texture_sample(texture, s, t)` returns the texel at fixed-point
  coordinates `(s, t)`, wrapping at the edges.

### `softraster.textures`

`TextureManager(texture_dim=256, max_levels=11)` keeps texture objects by
handle:

- `gen_textures(n)` returns `n` fresh handles above the largest one in use.
- `bind(handle)` makes a texture current, creating it if needed.
- `delete_textures(handles)` deletes textures. Deleting the bound texture
  rebinds texture 0.
- `is_texture(handle)` tells whether a handle is in use.
- `are_resident(handles)` returns a pair: whether every handle is resident,
  and the residency of each one.
- `pixmap(handle, level)` returns the `TextureImage` at that level.
- `copy_tex_image_2d(zb, level, x, y, width, height)` copies a
  `texture_dim` x `texture_dim` square of a `ZBuffer` into the bound
  texture, wrapping at the buffer's edges.

Invalid calls raise `TextureError`. Its `code` attribute holds the error
name, such as `"GL_INVALID_OPERATION"`.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Example

```python
from softraster.zbuffer import ZBuffer, ZBufferPoint, PixelMode
from softraster.lines import draw_line
from softraster.triangles import fill_triangle_flat, fill_triangle_smooth

zb = ZBuffer(64, 48, PixelMode.RGBA)
zb.clear(True, 0, True, 0, 0, 0)

a = ZBufferPoint(x=2, y=2, z=0, r=0xFF00, g=0, b=0)
b = ZBufferPoint(x=40, y=30, z=0, r=0xFF00, g=0, b=0)
draw_line(zb, a, b)

p0 = ZBufferPoint(x=5, y=5, z=1 << 20, r=0, g=0xFF00, b=0)
p1 = ZBufferPoint(x=50, y=10, z=1 << 20, r=0, g=0xFF00, b=0)
p2 = ZBufferPoint(x=20, y=40, z=1 << 20, r=0, g=0xFF00, b=0)
fill_triangle_flat(zb, p0, p1, p2)

zb.depth_test = True
q0 = ZBufferPoint(x=30, y=20, z=2 << 20, r=0xFF00, g=0, b=0)
q1 = ZBufferPoint(x=60, y=25, z=2 << 20, r=0, g=0xFF00, b=0)
q2 = ZBufferPoint(x=40, y=45, z=2 << 20, r=0, g=0, b=0xFF00)
fill_triangle_smooth(zb, q0, q1, q2)

pixels = zb.copy_frame_buffer()
```

## What this package does not do

softraster only draws primitives that are already in screen space. It does
not provide:

- vector or matrix math;
- vertex transformation, projection, clipping or lighting;
- loading of model files;
- an immediate-mode drawing API;
- a window or display;
- writing images to disk.

To show or save a picture, take the pixel list from `copy_frame_buffer()`
and pass it to whatever output you use.

## Running the tests

```
pytest
```
"""A small pure-Python software rasterizer: a z-buffer, lines, triangle scan conversion and textures."""

__version__ = "0.1.0"
__all__ = ["zbuffer", "lines", "textures", "scanline", "triangles"]
"""Texture objects: handle allocation, binding and frame-buffer copies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from softraster.zbuffer import ZBuffer

DEFAULT_TEXTURE_DIM = 256
DEFAULT_MAX_LEVELS = 11


class TextureError(Exception):
    """A texture call was made with arguments it cannot handle."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code


@dataclass
class TextureImage:
    """One mipmap level of a texture."""

    xsize: int = 0
    ysize: int = 0
    pixmap: list[int] = field(default_factory=list)


@dataclass
class Texture:
    """A texture object and its image levels."""

    handle: int
    images: list[TextureImage] = field(default_factory=list)


class TextureManager:
    """Registry of texture objects keyed by handle, with a current binding."""

    def __init__(
        self,
        texture_dim: int = DEFAULT_TEXTURE_DIM,
        max_levels: int = DEFAULT_MAX_LEVELS,
    ) -> None:
        self.texture_dim = texture_dim
        self.max_levels = max_levels
        self._textures: dict[int, Texture] = {}
        self.texture_2d_enabled = False
        self.current_texture: Optional[Texture] = self._textures.get(0)

    def _alloc(self, handle: int) -> Texture:
        texture = Texture(handle, [TextureImage() for _ in range(self.max_levels)])
        self._textures[handle] = texture
        return texture

    def _check_level(self, level: int) -> None:
        if not 0 <= level < self.max_levels:
            raise TextureError("GL_INVALID_ENUM", f"texture level {level} out of range")

    def gen_textures(self, n: int) -> list[int]:
        """Return ``n`` handles above the largest one in use."""
        if n < 0:
            raise TextureError("GL_INVALID_VALUE", "negative texture count")
        top = max(self._textures, default=0)
        top = max(top, 0)
        return [top + i + 1 for i in range(n)]

    def delete_textures(self, handles: Iterable[int]) -> None:
        """Delete textures; deleting the bound one rebinds texture 0."""
        for handle in handles:
            texture = self._textures.get(handle)
            if texture is None:
                continue
            if texture is self.current_texture:
                self.bind(0)
            if self._textures.get(handle) is texture:
                del self._textures[handle]

    def bind(self, handle: int) -> Texture:
        """Make ``handle`` current, creating the texture if needed."""
        texture = self._textures.get(handle)
        if texture is None:
            texture = self._alloc(handle)
        self.current_texture = texture
        return texture

    def is_texture(self, handle: int) -> bool:
        return handle in self._textures

    def are_resident(self, handles: Iterable[int]) -> tuple[bool, list[bool]]:
        """Residency of each handle, and whether all of them are resident."""
        residences = [self.is_texture(h) for h in handles]
        return all(residences), residences

    def pixmap(self, handle: int, level: int) -> TextureImage:
        """The image at ``level`` of texture ``handle``."""
        if handle < 0:
            raise TextureError("GL_INVALID_ENUM", f"bad texture handle {handle}")
        self._check_level(level)
        texture = self._textures.get(handle)
        if texture is None:
            raise TextureError("GL_INVALID_ENUM", f"no texture with handle {handle}")
        return texture.images[level]

    def copy_tex_image_2d(
        self,
        zb: ZBuffer,
        level: int,
        x: int,
        y: int,
        width: int,
        height: int,
    ) -> TextureImage:
        """Copy a square of the frame buffer, wrapping at its edges, into
        the bound texture.  ``y`` names the top edge of the square."""
        self._check_level(level)
        dim = self.texture_dim
        if self.current_texture is None or width != dim or height != dim:
            raise TextureError(
                "GL_INVALID_OPERATION",
                f"copy needs a bound texture and a {dim}x{dim} region",
            )
        y -= height
        xs, ys = zb.xsize, zb.ysize
        data = [
            zb.pbuf[((i + x) % xs) + ((j + y) % ys) * xs]
            for j in range(height)
            for i in range(width)
        ]
        image = self.current_texture.images[level]
        image.xsize = dim
        image.ysize = dim
        image.pixmap = data
        return image
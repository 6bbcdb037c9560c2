"""Image textures and texture sampling.

Textures are decoded from image files with Pillow into 8-bit RGB NumPy
arrays. For use inside kernels they are uploaded into a fixed-size texture
registry (one slot per texture, preallocated to MAX_TEXTURE_SIZE squared) and
addressed by integer handle.

Sampling policy, shared by the NumPy and Taichi paths:
    - u and v are wrapped into [0, 1) by taking their fractional part
    - v is flipped, since image row 0 is the top of the texture
    - the texel is selected by truncation (nearest, no filtering)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.voxelray.materials.texture import Texture, add_texture
    >>> grass = Texture.from_file("assets/grass.png")
    >>> texture_id = add_texture(grass)
    >>> # Use sample_texture(texture_id, u, v) within a Taichi kernel
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from src.voxelray.core.ray import wrap_unit

logger = logging.getLogger(__name__)

vec3 = tm.vec3


@dataclass(frozen=True, eq=False)
class Texture:
    """A decoded RGB image.

    Instances are compared by identity so one texture shared by several
    materials is uploaded to the registry only once.

    Attributes:
        pixels: Image data of shape (height, width, 3), dtype uint8.
            Row 0 is the top of the image.
        path: The file the texture was loaded from, if any.
    """

    pixels: npt.NDArray[np.uint8]
    path: str | None = None

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(
                f"Texture pixels must have shape (height, width, 3), got {self.pixels.shape}"
            )
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise ValueError("Texture must be at least 1x1 pixels")

    @classmethod
    def from_file(cls, path: str | Path) -> "Texture":
        """Load and decode an image file as an RGB texture.

        Args:
            path: Path to any image format Pillow can read.

        Returns:
            The decoded texture.

        Raises:
            FileNotFoundError: If the file does not exist.
            PIL.UnidentifiedImageError: If the file is not a readable image.
        """
        try:
            with PILImage.open(path) as image:
                pixels = np.asarray(image.convert("RGB"), dtype=np.uint8)
        except (FileNotFoundError, UnidentifiedImageError):
            logger.error("Failed to load texture from %s", path)
            raise
        logger.debug("Loaded texture %s (%dx%d)", path, pixels.shape[1], pixels.shape[0])
        return cls(pixels=pixels, path=str(path))

    @property
    def width(self) -> int:
        """Get the texture width in pixels."""
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        """Get the texture height in pixels."""
        return int(self.pixels.shape[0])

    def get_color(self, u: float, v: float) -> tuple[int, int, int]:
        """Sample the texture at a UV coordinate.

        Args:
            u: Horizontal coordinate; wrapped into [0, 1).
            v: Vertical coordinate, 0 at the bottom; wrapped into [0, 1).

        Returns:
            The (r, g, b) texel as 8-bit integers.
        """
        fu = u - math.floor(u)
        fv = v - math.floor(v)
        x = int(fu * self.width) % self.width
        y = int((1.0 - fv) * self.height) % self.height
        r, g, b = self.pixels[y, x]
        return (int(r), int(g), int(b))


# =============================================================================
# Texture Field Storage (for kernel-side sampling)
# =============================================================================

# Maximum number of textures and per-texture resolution
MAX_TEXTURES = 8
MAX_TEXTURE_SIZE = 256

# Texel storage indexed [texture_id, row, column], channels on the 0-255 scale
texture_texels = ti.Vector.field(
    3, dtype=ti.f32, shape=(MAX_TEXTURES, MAX_TEXTURE_SIZE, MAX_TEXTURE_SIZE)
)
texture_widths = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_heights = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
num_textures = ti.field(dtype=ti.i32, shape=())


def clear_textures() -> None:
    """Clear all textures from the registry.

    Resets the texture count to zero. Existing texel data will be overwritten
    when new textures are added.
    """
    num_textures[None] = 0


def add_texture(texture: Texture) -> int:
    """Upload a texture into the texture registry.

    Args:
        texture: The decoded texture.

    Returns:
        The texture handle used by materials.

    Raises:
        ValueError: If the texture is larger than MAX_TEXTURE_SIZE in either
            dimension.
        RuntimeError: If the maximum number of textures is exceeded.
    """
    if texture.width > MAX_TEXTURE_SIZE or texture.height > MAX_TEXTURE_SIZE:
        raise ValueError(
            f"Texture dimensions ({texture.width}x{texture.height}) exceed maximum "
            f"supported ({MAX_TEXTURE_SIZE}x{MAX_TEXTURE_SIZE})"
        )

    idx = num_textures[None]
    if idx >= MAX_TEXTURES:
        raise RuntimeError(f"Maximum number of textures ({MAX_TEXTURES}) exceeded")

    texels = texture_texels.to_numpy()
    texels[idx, : texture.height, : texture.width, :] = texture.pixels.astype(np.float32)
    texture_texels.from_numpy(texels)

    texture_widths[idx] = texture.width
    texture_heights[idx] = texture.height
    num_textures[None] = idx + 1
    return idx


def get_texture_count() -> int:
    """Get the number of textures in the registry."""
    return int(num_textures[None])


@ti.func
def sample_texture(texture_id: ti.i32, u: ti.f32, v: ti.f32) -> vec3:
    """Sample a registered texture at a UV coordinate.

    Mirrors Texture.get_color: both coordinates wrap, v is flipped so that
    v = 0 addresses the bottom row, and the texel is chosen by truncation.

    Args:
        texture_id: Handle returned by add_texture.
        u: Horizontal coordinate.
        v: Vertical coordinate, 0 at the bottom.

    Returns:
        The texel color on the 0-255 scale.
    """
    width = texture_widths[texture_id]
    height = texture_heights[texture_id]
    x = ti.cast(wrap_unit(u) * width, ti.i32) % width
    y = ti.cast((1.0 - wrap_unit(v)) * height, ti.i32) % height
    return texture_texels[texture_id, y, x]

"""Image export utilities for rendered frames.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.voxelray.preview.export import save_png
    >>> from src.voxelray.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer(320, 240)
    >>> renderer.render(camera, light_position=(0.0, 10.0, 0.0))
    >>> save_png(renderer, "island.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.voxelray.core.renderer import FrameRenderer

logger = logging.getLogger(__name__)


def save_png(renderer: FrameRenderer, filepath: str | Path) -> None:
    """Save the latest frame as a PNG file.

    Args:
        renderer: The FrameRenderer whose latest frame is saved.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_image_numpy(), filepath)


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with dtype uint8, row 0 at
            the top.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (H, W, 3), got {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Image must have dtype uint8, got {image.dtype}")

    pil_image = PILImage.fromarray(image)
    pil_image.save(filepath)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)

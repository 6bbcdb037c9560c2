"""Color arithmetic on the 0-255 scale.

Colors are stored as vec3 floats holding 8-bit channel values so that
shading terms can be scaled and summed before being clamped back into
range. Every shading term and the final pixel sum go through clamp_color.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

# Channel range
COLOR_MIN = 0.0
COLOR_MAX = 255.0

# White, used for specular highlights
WHITE = (255.0, 255.0, 255.0)


@ti.func
def clamp_color(color: vec3) -> vec3:
    """Clamp each channel of a color into [0, 255].

    NaN channels are left as produced by the shading math; callers only pass
    finite sums.

    Args:
        color: RGB color on the 0-255 scale, possibly out of range.

    Returns:
        The color with every channel clamped to [COLOR_MIN, COLOR_MAX].
    """
    return tm.clamp(color, COLOR_MIN, COLOR_MAX)


def color_to_float(color: tuple[int, int, int] | tuple[float, float, float]) -> tuple[float, float, float]:
    """Convert an RGB triple to floats, validating the 0-255 range.

    Args:
        color: RGB channels on the 0-255 scale.

    Returns:
        The same channels as floats.

    Raises:
        ValueError: If the triple does not have three channels or any channel
            is outside [0, 255].
    """
    if len(color) != 3:
        raise ValueError(f"Color must have 3 channels, got {len(color)}")
    for i, channel in enumerate(color):
        if channel < COLOR_MIN or channel > COLOR_MAX:
            raise ValueError(f"Color channel {i} = {channel} is outside [0, 255]")
    return (float(color[0]), float(color[1]), float(color[2]))

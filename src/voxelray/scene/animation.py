"""Light/sky body animation.

The sun travels on a circle in the xy-plane around the world origin, so its
height alternates between day (y > 0) and night (y <= 0). The renderer reads
the position from here each frame and passes it to the shading pipeline.
"""

import math
from dataclasses import dataclass

# Default orbit of the sun
SUN_ORBIT_RADIUS = 15.0
SUN_ORBIT_SPEED = 0.05


@dataclass
class SunOrbit:
    """Circular orbit of the light/sky body.

    Attributes:
        radius: Distance of the sun from the origin.
        speed: Angle advanced per frame, in radians.
        angle: Current angle, in radians. 0 puts the sun on the +x horizon,
            pi/2 straight overhead.
    """

    radius: float = SUN_ORBIT_RADIUS
    speed: float = SUN_ORBIT_SPEED
    angle: float = 0.0

    def position(self, angle: float | None = None) -> tuple[float, float, float]:
        """Get the sun position at an angle.

        Args:
            angle: Angle in radians; defaults to the current angle.

        Returns:
            (radius * cos(angle), radius * sin(angle), 0).
        """
        a = self.angle if angle is None else angle
        return (self.radius * math.cos(a), self.radius * math.sin(a), 0.0)

    def advance(self, frames: int = 1) -> tuple[float, float, float]:
        """Advance the orbit by a number of frames.

        Args:
            frames: Number of frames to advance.

        Returns:
            The new sun position.
        """
        self.angle = (self.angle + self.speed * frames) % (2.0 * math.pi)
        return self.position()

    def is_day(self) -> bool:
        """Check whether the sun is currently above the horizon."""
        return self.position()[1] > 0.0

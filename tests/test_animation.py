"""Unit tests for the sun orbit."""

import math

import pytest


class TestSunOrbit:
    """Tests for SunOrbit."""

    def test_defaults(self):
        from src.voxelray.scene.animation import SUN_ORBIT_RADIUS, SUN_ORBIT_SPEED, SunOrbit

        orbit = SunOrbit()
        assert orbit.radius == SUN_ORBIT_RADIUS == 15.0
        assert orbit.speed == SUN_ORBIT_SPEED == 0.05
        assert orbit.angle == 0.0

    def test_position_on_horizon(self):
        from src.voxelray.scene.animation import SunOrbit

        assert SunOrbit().position() == pytest.approx((15.0, 0.0, 0.0))

    def test_position_overhead(self):
        from src.voxelray.scene.animation import SunOrbit

        orbit = SunOrbit()
        assert orbit.position(math.pi / 2.0) == pytest.approx((0.0, 15.0, 0.0), abs=1e-12)
        # Explicit angles do not change the orbit state
        assert orbit.angle == 0.0

    def test_advance(self):
        from src.voxelray.scene.animation import SunOrbit

        orbit = SunOrbit(radius=10.0, speed=0.1)
        position = orbit.advance()
        assert orbit.angle == pytest.approx(0.1)
        assert position == pytest.approx((10.0 * math.cos(0.1), 10.0 * math.sin(0.1), 0.0))

        orbit.advance(frames=4)
        assert orbit.angle == pytest.approx(0.5)

    def test_advance_wraps_full_turn(self):
        from src.voxelray.scene.animation import SunOrbit

        orbit = SunOrbit(speed=math.pi / 2.0)
        orbit.advance(frames=5)
        assert orbit.angle == pytest.approx(math.pi / 2.0)
        assert 0.0 <= orbit.angle < 2.0 * math.pi

    @pytest.mark.parametrize(
        "angle,expected",
        [
            (0.0, False),
            (math.pi / 4.0, True),
            (math.pi / 2.0, True),
            (math.pi * 1.5, False),
        ],
    )
    def test_is_day(self, angle, expected):
        """Test the horizon itself counts as night."""
        from src.voxelray.scene.animation import SunOrbit

        assert SunOrbit(angle=angle).is_day() is expected

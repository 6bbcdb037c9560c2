"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, normalize, length, reflect)
- Fractional wrapping used for texture coordinates
"""

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from src.voxelray.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_reaches_cube_face(self):
        """Test ray_at lands on the front face of a unit cube at the origin."""
        from src.voxelray.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 4.5)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - 0.5) < 1e-6


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_length_and_normalize(self):
        """Test length of (3, 4, 0) and its normalized form."""
        from src.voxelray.core.ray import length, normalize, vec3

        len_result = ti.field(dtype=ti.f32, shape=())
        norm_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            len_result[None] = length(v)
            norm_result[None] = normalize(v)

        test_kernel()
        assert abs(len_result[None] - 5.0) < 1e-6
        n = norm_result[None]
        assert abs(n[0] - 0.6) < 1e-6
        assert abs(n[1] - 0.8) < 1e-6
        assert abs(n[2]) < 1e-6

    def test_dot(self):
        from src.voxelray.core.ray import dot, vec3

        dot_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            dot_result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, 5.0, 6.0))

        test_kernel()
        assert abs(dot_result[None] - 32.0) < 1e-6

    def test_reflect(self):
        """Test reflecting a 45 degree vector about +y."""
        from src.voxelray.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6


class TestWrapUnit:
    """Tests for the fractional-part wrap."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.0, 0.0),
            (0.25, 0.25),
            (1.5, 0.5),
            (3.0, 0.0),
            (-0.25, 0.75),
            (-1.75, 0.25),
        ],
    )
    def test_wrap_values(self, value, expected):
        """Test wrap_unit takes x - floor(x)."""
        from src.voxelray.core.ray import wrap_unit

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(x: ti.f32):
            result[None] = wrap_unit(x)

        test_kernel(value)
        assert abs(result[None] - expected) < 1e-6

    def test_tiny_negative_never_reaches_one(self):
        """Test a tiny negative input does not round up to 1.0."""
        from src.voxelray.core.ray import wrap_unit

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(x: ti.f32):
            result[None] = wrap_unit(x)

        test_kernel(-1e-9)
        assert 0.0 <= result[None] < 1.0

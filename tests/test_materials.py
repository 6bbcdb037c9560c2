"""Unit tests for materials and colors.

Tests cover:
- Material parameter validation
- Material registry storage and lookups inside kernels
- Color validation and clamping
"""

import numpy as np
import pytest
import taichi as ti


class TestMaterialValidation:
    """Tests for Material.validate."""

    def test_defaults(self):
        """Test default specular and albedo weights."""
        from src.voxelray.materials.material import Material

        material = Material(diffuse=(34, 139, 34))
        assert material.specular == 1.0
        assert material.albedo == (0.9, 0.1, 0.0, 0.0)
        assert material.refractive_index == 1.0
        assert material.texture is None
        material.validate()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"diffuse": (256, 0, 0)},
            {"diffuse": (-1, 0, 0)},
            {"diffuse": (0, 0)},
            {"diffuse": (0, 0, 0), "albedo": (0.5, 0.5, 0.0)},
            {"diffuse": (0, 0, 0), "albedo": (1.5, 0.0, 0.0, 0.0)},
            {"diffuse": (0, 0, 0), "specular": -1.0},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        """Test out-of-range parameters raise ValueError."""
        from src.voxelray.materials.material import Material

        with pytest.raises(ValueError):
            Material(**kwargs).validate()

    def test_materials_are_immutable(self):
        """Test materials cannot be modified after creation."""
        import dataclasses

        from src.voxelray.materials.material import Material

        material = Material(diffuse=(0, 0, 255))
        with pytest.raises(dataclasses.FrozenInstanceError):
            material.specular = 2.0


class TestMaterialRegistry:
    """Tests for the kernel-side material registry."""

    def test_add_material_and_lookup(self):
        """Test stored parameters can be read back inside a kernel."""
        from src.voxelray.materials.material import (
            Material,
            add_material,
            get_material_albedo,
            get_material_count,
            get_material_diffuse,
            get_material_specular,
            get_material_texture_id,
        )

        add_material(Material(diffuse=(34, 139, 34)))
        mat_id = add_material(Material(diffuse=(139, 69, 19), specular=10.0, albedo=(0.6, 0.3, 0.1, 0.0)))
        assert mat_id == 1
        assert get_material_count() == 2

        diffuse = ti.field(dtype=ti.math.vec3, shape=())
        specular = ti.field(dtype=ti.f32, shape=())
        albedo = ti.field(dtype=ti.math.vec4, shape=())
        texture_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(mid: ti.i32):
            diffuse[None] = get_material_diffuse(mid)
            specular[None] = get_material_specular(mid)
            albedo[None] = get_material_albedo(mid)
            texture_id[None] = get_material_texture_id(mid)

        test_kernel(mat_id)
        d = diffuse[None]
        assert (d[0], d[1], d[2]) == pytest.approx((139.0, 69.0, 19.0))
        assert abs(specular[None] - 10.0) < 1e-6
        a = albedo[None]
        assert (a[0], a[1], a[2], a[3]) == pytest.approx((0.6, 0.3, 0.1, 0.0))
        assert texture_id[None] == -1

    def test_textured_material_requires_texture_id(self):
        """Test a textured material cannot be registered without a handle."""
        from src.voxelray.materials.material import Material, add_material
        from src.voxelray.materials.texture import Texture

        texture = Texture(pixels=np.zeros((2, 2, 3), dtype=np.uint8))
        with pytest.raises(ValueError):
            add_material(Material(diffuse=(0, 0, 0), texture=texture))

    def test_overflow_raises(self):
        """Test exceeding MAX_MATERIALS raises RuntimeError."""
        from src.voxelray.materials.material import MAX_MATERIALS, Material, add_material

        material = Material(diffuse=(10, 10, 10))
        for _ in range(MAX_MATERIALS):
            add_material(material)
        with pytest.raises(RuntimeError, match="Maximum number of materials"):
            add_material(material)


class TestColor:
    """Tests for color helpers."""

    def test_color_to_float(self):
        """Test integer channels convert to floats."""
        from src.voxelray.core.color import color_to_float

        assert color_to_float((255, 255, 0)) == (255.0, 255.0, 0.0)

    def test_color_to_float_rejects_out_of_range(self):
        """Test channels outside [0, 255] raise ValueError."""
        from src.voxelray.core.color import color_to_float

        with pytest.raises(ValueError):
            color_to_float((0, 300, 0))

    def test_clamp_color(self):
        """Test each channel is clamped into [0, 255]."""
        from src.voxelray.core.color import clamp_color
        from src.voxelray.core.ray import vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = clamp_color(vec3(-20.0, 128.0, 400.0))

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == pytest.approx((0.0, 128.0, 255.0))

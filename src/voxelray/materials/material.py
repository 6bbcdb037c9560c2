"""Surface materials for voxel shading.

A material carries the parameters consumed by the shading pipeline:

    - diffuse: base color on the 0-255 scale
    - specular: Phong exponent applied to the view/reflection cosine
    - albedo: four weights (diffuse, specular, reflect, refract); only the
      first two take part in shading, the others are stored for completeness
    - refractive_index: stored, not used by the shading model
    - texture: optional Texture replacing the diffuse color

Materials are immutable and are registered into Taichi fields (an arena
indexed by material handle) so that hundreds of cubes can share one entry.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.voxelray.materials.material import Material, add_material
    >>> grass = Material(diffuse=(34, 139, 34), specular=1.0, albedo=(0.9, 0.1, 0.0, 0.0))
    >>> material_id = add_material(grass)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.voxelray.core.color import color_to_float
from src.voxelray.materials.texture import Texture

vec3 = tm.vec3
vec4 = tm.vec4


@dataclass(frozen=True)
class Material:
    """Immutable shading parameters for a surface.

    Attributes:
        diffuse: Base RGB color, each channel in [0, 255].
        specular: Specular exponent (non-negative).
        albedo: Weights (diffuse, specular, reflect, refract), each in [0, 1].
        refractive_index: Reserved; not used by the shading model.
        texture: Optional texture sampled in place of the diffuse color.
    """

    diffuse: tuple[float, float, float]
    specular: float = 1.0
    albedo: tuple[float, float, float, float] = (0.9, 0.1, 0.0, 0.0)
    refractive_index: float = 1.0
    texture: Texture | None = None

    def validate(self) -> None:
        """Check parameter ranges.

        Raises:
            ValueError: If a color channel is outside [0, 255], the albedo
                does not have four weights in [0, 1], or the specular exponent
                is negative.
        """
        color_to_float(self.diffuse)
        if len(self.albedo) != 4:
            raise ValueError(f"Albedo must have 4 weights, got {len(self.albedo)}")
        for i, weight in enumerate(self.albedo):
            if weight < 0.0 or weight > 1.0:
                raise ValueError(f"Albedo weight {i} = {weight} is outside [0, 1]")
        if self.specular < 0.0:
            raise ValueError(f"Specular exponent must be non-negative, got {self.specular}")


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Storage for material properties, Structure of Arrays layout
material_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_albedo = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
material_refractive_index = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
# -1 when the material has no texture
material_texture_ids = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material, texture_id: int = -1) -> int:
    """Add a material to the material registry.

    Args:
        material: The material parameters.
        texture_id: Handle of the registered texture for material.texture,
            or -1 for an untextured material.

    Returns:
        The index of the added material.

    Raises:
        ValueError: If the material parameters are out of range, or a
            texture is set on the material without a texture handle.
        RuntimeError: If the maximum number of materials is exceeded.
    """
    material.validate()
    if material.texture is not None and texture_id < 0:
        raise ValueError("Textured material requires a registered texture_id")

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    r, g, b = color_to_float(material.diffuse)
    material_diffuse[idx] = vec3(r, g, b)
    material_specular[idx] = material.specular
    material_albedo[idx] = vec4(*material.albedo)
    material_refractive_index[idx] = material.refractive_index
    material_texture_ids[idx] = texture_id
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material_diffuse(material_id: ti.i32) -> vec3:
    """Get the base color (0-255) for a material by index."""
    return material_diffuse[material_id]


@ti.func
def get_material_specular(material_id: ti.i32) -> ti.f32:
    """Get the specular exponent for a material by index."""
    return material_specular[material_id]


@ti.func
def get_material_albedo(material_id: ti.i32) -> vec4:
    """Get the four albedo weights for a material by index."""
    return material_albedo[material_id]


@ti.func
def get_material_texture_id(material_id: ti.i32) -> ti.i32:
    """Get the texture handle for a material, or -1 if untextured."""
    return material_texture_ids[material_id]

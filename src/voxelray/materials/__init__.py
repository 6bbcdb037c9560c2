"""Materials module for surface appearance.

Components:
    material: Immutable shading parameters and the material registry
    texture: Pillow-decoded image textures and the texture registry
"""

from .material import (
    MAX_MATERIALS,
    Material,
    add_material,
    clear_materials,
    get_material_albedo,
    get_material_count,
    get_material_diffuse,
    get_material_specular,
    get_material_texture_id,
)
from .texture import (
    MAX_TEXTURE_SIZE,
    MAX_TEXTURES,
    Texture,
    add_texture,
    clear_textures,
    get_texture_count,
    sample_texture,
)

__all__ = [
    # Materials
    "Material",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material_count",
    "get_material_diffuse",
    "get_material_specular",
    "get_material_albedo",
    "get_material_texture_id",
    # Textures
    "Texture",
    "MAX_TEXTURES",
    "MAX_TEXTURE_SIZE",
    "add_texture",
    "clear_textures",
    "get_texture_count",
    "sample_texture",
]

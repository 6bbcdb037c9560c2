"""Shading pipeline: nearest hit, shadows, lighting and the day/night sky.

This module turns a ray into a color. For a primary ray it:

1. Finds the nearest cube hit (strict distance comparison over a linear scan).
2. Returns the sky color on a miss. The sky has two levels only: day when the
   light body is above the horizon (y > 0), night otherwise.
3. On a hit, computes the light, view and mirrored light directions, casts a
   shadow ray toward the light and evaluates diffuse, specular and ambient
   terms, each clamped to the 0-255 range, and returns their clamped sum.

Lighting model (one policy for textured and untextured surfaces):

    intensity = SUN_INTENSITY * (light.y / SUN_HEIGHT_SCALE) + 1   if light.y > 0
              = 0                                                otherwise
    diffuse   = surface * albedo[0] * max(|n . l|, DIFFUSE_FLOOR) * intensity * (1 - shadow)
    specular  = white * albedo[1] * max(v . r, 0) ^ specular * intensity * (1 - shadow)
    ambient   = surface * (DAY_AMBIENT | NIGHT_AMBIENT)

The diffuse floor keeps back-lit voxel faces visible. The light position is
an explicit argument of every function here; nothing reads it from scene
state.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.voxelray.core.shading import cast_ray
    >>> # Within a Taichi kernel:
    >>> # color = cast_ray(eye, direction, light_position, 0)
"""

import taichi as ti
import taichi.math as tm

from src.voxelray.core.color import WHITE, clamp_color
from src.voxelray.core.ray import dot, length, make_ray, normalize, reflect
from src.voxelray.materials.material import (
    get_material_albedo,
    get_material_diffuse,
    get_material_specular,
    get_material_texture_id,
)
from src.voxelray.materials.texture import sample_texture
from src.voxelray.scene.intersection import (
    Intersect,
    cube_is_light,
    intersect_cube_at,
    intersect_scene,
    num_cubes,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Shading Constants
# =============================================================================

# Calls with a depth above this return the sky color
MAX_DEPTH = 3

# Offset along the normal for secondary ray origins
ORIGIN_BIAS = 1e-4

# Sky colors (0-255)
DAY_SKY_COLOR = (68.0, 142.0, 228.0)
NIGHT_SKY_COLOR = (10.0, 10.0, 30.0)

# Light intensity as a function of the light body's height
SUN_INTENSITY = 1.5
SUN_HEIGHT_SCALE = 15.0

# Minimum diffuse factor
DIFFUSE_FLOOR = 0.5

# Ambient factors applied to the surface color
DAY_AMBIENT = 0.2
NIGHT_AMBIENT = 0.3


# =============================================================================
# Sky and Light Model
# =============================================================================


@ti.func
def is_day(light_position: vec3) -> ti.i32:
    """Return 1 when the light body is above the horizon (y > 0)."""
    return light_position.y > 0.0


@ti.func
def sky_color(light_position: vec3) -> vec3:
    """Get the sky color for the current light position.

    Args:
        light_position: Current position of the light/sky body.

    Returns:
        DAY_SKY_COLOR if light_position.y > 0, NIGHT_SKY_COLOR otherwise.
    """
    color = vec3(NIGHT_SKY_COLOR[0], NIGHT_SKY_COLOR[1], NIGHT_SKY_COLOR[2])
    if is_day(light_position):
        color = vec3(DAY_SKY_COLOR[0], DAY_SKY_COLOR[1], DAY_SKY_COLOR[2])
    return color


@ti.func
def light_intensity(light_position: vec3) -> ti.f32:
    """Get the light intensity for the current light height.

    Args:
        light_position: Current position of the light/sky body.

    Returns:
        SUN_INTENSITY * (y / SUN_HEIGHT_SCALE) + 1 above the horizon, 0 below.
    """
    intensity = 0.0
    if is_day(light_position):
        intensity = SUN_INTENSITY * (light_position.y / SUN_HEIGHT_SCALE) + 1.0
    return intensity


@ti.func
def ambient_factor(light_position: vec3) -> ti.f32:
    """Get the ambient factor: DAY_AMBIENT by day, NIGHT_AMBIENT by night."""
    factor = NIGHT_AMBIENT
    if is_day(light_position):
        factor = DAY_AMBIENT
    return factor


# =============================================================================
# Shadow Rays
# =============================================================================


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a ray origin off the surface to avoid self-intersection.

    The point moves against the normal when the new ray heads into the
    surface (dot(direction, normal) < 0) and along it otherwise.

    Args:
        point: The hit point.
        normal: The face normal at the hit point.
        direction: Direction of the ray that will start at the point.

    Returns:
        The offset origin.
    """
    result = point + normal * ORIGIN_BIAS
    if dot(direction, normal) < 0.0:
        result = point - normal * ORIGIN_BIAS
    return result


@ti.func
def cast_shadow(hit: Intersect, light_position: vec3) -> ti.f32:
    """Compute how strongly the light is blocked at a hit point.

    A shadow ray is cast from the bias-offset hit point toward the light.
    Cubes are scanned in scene order and the first one hit closer than the
    light decides the result; later occluders are not considered.

    The light body itself is never an occluder: the cube drawn at the light
    position does not shadow the surfaces it lights.

    Args:
        hit: The surface hit to shade.
        light_position: Current position of the light/sky body.

    Returns:
        1 - min(1, (occluder_distance / light_distance)^2) for the first
        occluder, or 0 when the light is unobstructed.
    """
    to_light = light_position - hit.point
    light_distance = length(to_light)
    light_dir = normalize(to_light)
    shadow_ray = make_ray(offset_origin(hit.point, hit.normal, light_dir), light_dir)

    shadow = 0.0
    found = 0
    n_cubes = num_cubes[None]
    for i in range(n_cubes):
        if found == 0 and cube_is_light[i] == 0:
            rec = intersect_cube_at(i, shadow_ray, light_position)
            if rec.is_intersecting == 1 and rec.distance < light_distance:
                ratio = rec.distance / light_distance
                shadow = 1.0 - ti.min(1.0, ratio * ratio)
                found = 1

    return shadow


# =============================================================================
# Surface Shading
# =============================================================================


@ti.func
def surface_color(hit: Intersect) -> vec3:
    """Resolve the base color at a hit.

    Textured materials are sampled at the hit's UV; otherwise the material's
    diffuse color is used.

    Args:
        hit: The surface hit.

    Returns:
        The surface color on the 0-255 scale.
    """
    color = get_material_diffuse(hit.material_id)
    texture_id = get_material_texture_id(hit.material_id)
    if texture_id >= 0 and hit.has_uv == 1:
        color = sample_texture(texture_id, hit.uv.x, hit.uv.y)
    return color


@ti.func
def shade_hit(hit: Intersect, view_origin: vec3, light_position: vec3) -> vec3:
    """Evaluate the lighting model at a surface hit.

    Args:
        hit: The surface hit to shade.
        view_origin: Origin of the ray that produced the hit.
        light_position: Current position of the light/sky body.

    Returns:
        The clamped sum of the diffuse, specular and ambient terms.
    """
    light_dir = normalize(light_position - hit.point)
    view_dir = normalize(view_origin - hit.point)
    reflect_dir = reflect(-light_dir, hit.normal)

    shadow = cast_shadow(hit, light_position)
    intensity = light_intensity(light_position)
    unshadowed = intensity * (1.0 - shadow)

    albedo = get_material_albedo(hit.material_id)
    base = surface_color(hit)

    diffuse_factor = ti.max(ti.abs(dot(hit.normal, light_dir)), DIFFUSE_FLOOR)
    diffuse = clamp_color(base * albedo[0] * diffuse_factor * unshadowed)

    spec_angle = ti.max(dot(view_dir, reflect_dir), 0.0)
    specular_factor = spec_angle ** get_material_specular(hit.material_id)
    white = vec3(WHITE[0], WHITE[1], WHITE[2])
    specular = clamp_color(white * albedo[1] * specular_factor * unshadowed)

    ambient = clamp_color(base * ambient_factor(light_position))

    return clamp_color(diffuse + specular + ambient)


@ti.func
def cast_ray(origin: vec3, direction: vec3, light_position: vec3, depth: ti.i32) -> vec3:
    """Trace a ray and return its color.

    Args:
        origin: The ray origin (the camera eye for primary rays).
        direction: The normalized ray direction.
        light_position: Current position of the light/sky body.
        depth: Bounce depth of this ray; primary rays use 0.

    Returns:
        The color on the 0-255 scale. Rays deeper than MAX_DEPTH, and rays
        that hit nothing, return the sky color.
    """
    color = sky_color(light_position)
    if depth <= MAX_DEPTH:
        hit = intersect_scene(origin, direction, light_position)
        if hit.is_intersecting == 1:
            color = shade_hit(hit, origin, light_position)
    return color

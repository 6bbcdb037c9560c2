"""Taichi-based voxel cube ray tracer.

This package renders scenes made of axis-aligned cubes in real time, with:
- Slab-method cube intersection with face normals and UVs
- Phong-style shading with a single moving light/sky body and hard-ish shadows
- Day/night sky driven by the light body's height
- Optional image textures per material

Subpackages:
    core: Vector utilities, shading, frame kernel and renderer
    geometry: Cube primitive and intersection
    materials: Materials and textures
    scene: Cube storage, scene manager, sun animation and the demo island
    camera: Look-at camera with movement and orbit controls
    preview: PNG export, Matplotlib preview and the interactive window
"""

__version__ = "0.1.0"

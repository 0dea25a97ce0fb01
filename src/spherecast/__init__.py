"""Taichi-based ray caster for small animated sphere scenes.

This package renders a handful of spheres by casting one ray per pixel, with
direct lighting, a single-bounce reflection probe and a shadow probe. The
frame is re-rendered every animation tick while the scene moves.

Subpackages:
    core: Vector math, rays, the shading pipeline, animation and frame driver
    geometry: Sphere primitive and ray-sphere intersection
    scene: Scene storage fields, the scene container and the default scene
    preview: Output sinks, input sources, window preview and image export

Taichi must be initialized with ti.init() before importing modules that
declare fields (spherecast.scene, spherecast.core.shading,
spherecast.core.driver).
"""

__version__ = "0.1.0"

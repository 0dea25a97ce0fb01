"""Core rendering module.

Components:
    vector: Vector and color utilities (dot, normalize, clamp_color)
    ray: Ray data structure and primary ray construction
    shading: Direct lighting, reflection and shadow passes, frame kernel
    animation: Deterministic scene motion and input handling
    driver: Frame loop tying the renderer, output sink and input source

Only vector and ray are re-exported here; they are imported by the geometry
module. Import the others from their modules. shading and driver declare
Taichi fields and must be imported after ti.init():
    from spherecast.core.animation import AnimationConfig, FrameInput
    from spherecast.core.shading import ShadingConfig, configure_shading
    from spherecast.core.driver import FrameDriver
"""

from .ray import Ray, make_ray, primary_ray, ray_at
from .vector import (
    COLOR_MAX,
    COLOR_MIN,
    clamp_color,
    dot,
    length,
    normalize,
    vec3,
    vec_equal,
)

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "primary_ray",
    "vec3",
    "dot",
    "length",
    "normalize",
    "vec_equal",
    "clamp_color",
    "COLOR_MIN",
    "COLOR_MAX",
]

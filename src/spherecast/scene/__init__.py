"""Scene module for scene storage and management.

Components:
    storage: Sphere and light data in Taichi fields read by the kernels
    manager: Scene container owned by the frame driver
    default: The default animated sphere scene

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for sphere centers, radii, colors, kinds
    - A single light stored as 0-d fields
    - Insertion order is evaluation order

Importing this package declares Taichi fields; call ti.init() first.
"""

from .default import (
    BACKGROUND_DEPTH,
    BACKGROUND_RADIUS,
    SceneParams,
    create_default_scene,
)
from .manager import WHITE, Scene, SceneLight, SceneSphere
from .storage import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_light_center,
    get_sphere_center,
    get_sphere_count,
    set_light,
    set_light_center,
    set_sphere_center,
)

__all__ = [
    # Storage module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "get_sphere_center",
    "set_sphere_center",
    "set_light",
    "set_light_center",
    "get_light_center",
    "MAX_SPHERES",
    # Manager module
    "Scene",
    "SceneSphere",
    "SceneLight",
    "WHITE",
    # Default scene module
    "SceneParams",
    "create_default_scene",
    "BACKGROUND_DEPTH",
    "BACKGROUND_RADIUS",
]

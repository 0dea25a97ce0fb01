"""Scene storage in Taichi fields.

The ordered primitive list and the light live in Structure-of-Arrays Taichi
fields so the shading kernels can read them directly. Storage is written
only between frames (scene setup and the animation step); the shading
pipeline only reads it.

Insertion order is evaluation order: index 0 is tested first, and with the
default hit mode a later primitive overwrites an earlier one on the same ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.scene.storage import add_sphere, clear_scene, set_light
    >>> clear_scene()
    >>> add_sphere((125.0, 125.0, 0.0), 15.0, (255.0, 0.0, 110.0))
    >>> set_light((125.0, 125.0, -20.0), 40.0, (255.0, 255.0, 255.0))
"""

import taichi as ti

from spherecast.core.vector import vec3
from spherecast.geometry.sphere import Sphere, SphereKind

# Maximum number of spheres in a scene (brute-force iteration, small scenes)
MAX_SPHERES = 64

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_kinds = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Light: position + color source, never part of the primitive list
light_center = ti.Vector.field(3, dtype=ti.f32, shape=())
light_radius = ti.field(dtype=ti.f32, shape=())
light_color = ti.Vector.field(3, dtype=ti.f32, shape=())

# Bumped by clear_scene() so a Scene can tell whether it still owns the fields
_scene_generation = 0


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero and starts a new scene generation. Field
    data is overwritten when new spheres are added.
    """
    global _scene_generation
    num_spheres[None] = 0
    _scene_generation += 1


def get_scene_generation() -> int:
    """Get the generation counter, incremented by every clear_scene()."""
    return _scene_generation


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float],
    kind: SphereKind = SphereKind.STANDARD,
) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        color: Base RGB color, channels in [0, 255].
        kind: Shading treatment tag.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = list(center)
    sphere_radii[idx] = radius
    sphere_colors[idx] = list(color)
    sphere_kinds[idx] = int(kind)
    num_spheres[None] = idx + 1
    return idx


def set_sphere_center(index: int, center: tuple[float, float, float]) -> None:
    """Move an existing sphere.

    Raises:
        IndexError: If no sphere exists at the index.
    """
    if not 0 <= index < num_spheres[None]:
        raise IndexError(f"No sphere at index {index}")
    sphere_centers[index] = list(center)


def get_sphere_center(index: int) -> tuple[float, float, float]:
    """Read back a sphere center."""
    c = sphere_centers[index]
    return (float(c[0]), float(c[1]), float(c[2]))


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def set_light(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float],
) -> None:
    """Configure the light source.

    The light radius only scales the light normal used by the stylized
    shadow probe; the light never occludes.

    Raises:
        ValueError: If the radius is not positive.
    """
    if radius <= 0.0:
        raise ValueError(f"Light radius must be positive, got {radius}")
    light_center[None] = list(center)
    light_radius[None] = radius
    light_color[None] = list(color)


def set_light_center(center: tuple[float, float, float]) -> None:
    """Move the light."""
    light_center[None] = list(center)


def get_light_center() -> tuple[float, float, float]:
    """Read back the light center."""
    c = light_center[None]
    return (float(c[0]), float(c[1]), float(c[2]))


@ti.func
def load_sphere(index: ti.i32) -> Sphere:
    """Assemble the Sphere at an index from the storage fields."""
    return Sphere(
        center=sphere_centers[index],
        radius=sphere_radii[index],
        color=sphere_colors[index],
        kind=sphere_kinds[index],
    )


@ti.func
def light_normal(point: vec3) -> vec3:
    """Normal of the light sphere toward a point, scaled by its radius.

    Mirrors sphere_normal for the light: (point - light.center) / radius.
    """
    return (point - light_center[None]) / light_radius[None]

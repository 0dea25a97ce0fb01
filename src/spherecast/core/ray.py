"""Ray data structure.

A ray is the query value for intersection tests: an origin point and a
direction vector. Rays are constructed per query inside Taichi kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(10.0, 20.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti

from spherecast.core.vector import vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; intersection solves against the raw direction.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Negative values lie behind the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def primary_ray(x: ti.f32, y: ti.f32, camera_z: ti.f32) -> Ray:
    """Create the primary ray for pixel (x, y).

    Primary rays are orthographic: they start at (x, y, camera_z) and travel
    along +z.

    Args:
        x: Pixel column.
        y: Pixel row (0 is the top row).
        camera_z: Depth of the image plane.

    Returns:
        The primary ray for the pixel.
    """
    return Ray(origin=vec3(x, y, camera_z), direction=vec3(0.0, 0.0, 1.0))

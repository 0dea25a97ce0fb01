"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere dataclass, the SphereKind tag that selects
per-primitive shading treatment, and the intersection and normal functions
used by the shading pipeline.

The ray-sphere intersection solves:
    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + b*t + c = 0 with:
    a = dot(direction, direction)
    b = 2 * dot(oc, direction)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Grazing rays whose discriminant falls below a small epsilon are treated as
misses. The returned t is the smaller root and is not required to be
positive: spheres behind the ray origin still count as hits.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 0), radius=10.0)
    >>> # Use intersect_sphere within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from spherecast.core.vector import vec3

# Discriminants below this value are grazing hits and count as misses
INTERSECT_EPSILON = 1e-4


class SphereKind(IntEnum):
    """Shading treatment tag carried by each sphere.

    STANDARD spheres receive reflection and shadow. BACKGROUND is the large
    "world" sphere: it receives shadow but no reflection, and reflections of
    it are tinted down. EMITTER is the visible light bulb: it is skipped by
    the reflection and shadow probes and never shadowed itself.
    """

    STANDARD = 0
    BACKGROUND = 1
    EMITTER = 2


@ti.dataclass
class Sphere:
    """A sphere defined by center, radius, base color and kind.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        color: Base RGB color with channels in [0, 255] (vec3).
        kind: The SphereKind value as an integer.
    """

    center: vec3
    radius: ti.f32
    color: vec3
    kind: ti.i32


@ti.func
def intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    epsilon: ti.f32,
):
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be unit
            length).
        sphere: The sphere to test intersection against.
        epsilon: Discriminant threshold below which a hit is rejected.

    Returns:
        A tuple (hit, t) where hit is 1 on intersection and t is the smaller
        root. t is only meaningful when hit == 1 and may be negative.
    """
    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    did_hit = 0
    hit_t = 0.0

    if discriminant >= epsilon and a > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)
        did_hit = 1
        hit_t = tm.min(t0, t1)

    return did_hit, hit_t


@ti.func
def sphere_normal(center: vec3, radius: ti.f32, point: vec3) -> vec3:
    """Outward surface normal at a point.

    Unit length when the point lies on the surface.

    Args:
        center: The sphere center.
        radius: The sphere radius.
        point: A point on the sphere surface.

    Returns:
        (point - center) / radius.
    """
    return (point - center) / radius


@ti.func
def make_sphere(center: vec3, radius: ti.f32, color: vec3, kind: ti.i32) -> Sphere:
    """Create a sphere within a Taichi kernel."""
    return Sphere(center=center, radius=radius, color=color, kind=kind)

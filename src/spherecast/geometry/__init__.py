"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere dataclass, SphereKind tag, ray-sphere intersection and
        surface normals

Intersection routines are Taichi functions (@ti.func) called from the
shading kernels:
    hit, t = intersect_sphere(ray_origin, ray_direction, sphere, epsilon)
"""

from .sphere import (
    INTERSECT_EPSILON,
    Sphere,
    SphereKind,
    intersect_sphere,
    make_sphere,
    sphere_normal,
)

__all__ = [
    "Sphere",
    "SphereKind",
    "intersect_sphere",
    "sphere_normal",
    "make_sphere",
    "INTERSECT_EPSILON",
]

"""Vector utilities for the shading pipeline.

Vectors are Taichi ``vec3`` values. Addition, subtraction and scalar or
component-wise multiplication and division come from Taichi's operator
overloads; this module adds the operations the shading code names explicitly.

Colors reuse ``vec3`` as RGB with channels in [0, 255].

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.core.vector import normalize, vec3
    >>> # Use normalize(vec3(3.0, 0.0, 4.0)) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Channel bounds for 8-bit RGB colors
COLOR_MIN = 0.0
COLOR_MAX = 255.0


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The dot product a . b.
    """
    return tm.dot(a, b)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.sqrt(tm.dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    A zero-length vector has no direction. Instead of dividing by zero and
    propagating NaN through the pixel color, the zero vector is returned.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the direction of v, or the zero vector when v has
        zero magnitude.
    """
    magnitude = length(v)
    result = vec3(0.0, 0.0, 0.0)
    if magnitude > 0.0:
        result = v / magnitude
    return result


@ti.func
def vec_equal(a: vec3, b: vec3) -> ti.i32:
    """Exact component-wise equality.

    Returns:
        1 if every component matches, 0 otherwise.
    """
    return ti.cast((a == b).all(), ti.i32)


@ti.func
def clamp_color(color: vec3) -> vec3:
    """Clamp each RGB channel into [0, 255].

    Idempotent: clamping an already clamped color returns it unchanged.
    """
    return tm.clamp(color, COLOR_MIN, COLOR_MAX)

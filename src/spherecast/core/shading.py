"""Shading pipeline: direct lighting, reflection probe and shadow probe.

For each primary ray the pipeline walks the scene's spheres in insertion
order. On every hit it computes a Lambertian-style direct term, adds a
reflection contribution sampled by a probe ray cast along the surface
normal, subtracts a shadow term sampled by a short probe toward the light,
and finally clamps the color to [0, 255].

Pixel color for a hit on a sphere with base color C:
    cos   = dot(normalize(light.center - point), normalize(normal))
    pixel = (C + light.color * cos) * diffuse_intensity

The cosine is not clamped: surfaces facing away from the light receive a
negative contribution that darkens the base color.

Hit resolution is a switch. With HitMode.LAST_WRITER (default) every hit
overwrites the pixel, so the last intersecting sphere in evaluation order
wins regardless of depth. HitMode.NEAREST keeps the hit with the smallest t.

All tunables live in ShadingConfig and are uploaded into 0-d Taichi fields
by configure_shading().

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.core.shading import (
    ...     ShadingConfig, configure_shading, get_frame_rgb, render_frame,
    ...     setup_frame_buffer,
    ... )
    >>> from spherecast.scene.default import create_default_scene
    >>> scene = create_default_scene(250, 250)
    >>> configure_shading(ShadingConfig())
    >>> setup_frame_buffer(250, 250)
    >>> render_frame()
    >>> image = get_frame_rgb()
"""

import copy
from dataclasses import dataclass
from enum import IntEnum

import numpy as np
import numpy.typing as npt
import taichi as ti

from spherecast.core.ray import Ray, primary_ray, ray_at
from spherecast.core.vector import clamp_color, dot, normalize, vec3
from spherecast.geometry.sphere import (
    INTERSECT_EPSILON,
    Sphere,
    SphereKind,
    intersect_sphere,
    sphere_normal,
)
from spherecast.scene.storage import (
    light_center,
    light_color,
    light_normal,
    load_sphere,
    num_spheres,
)

# =============================================================================
# Shading Configuration
# =============================================================================


class HitMode(IntEnum):
    """How overlapping hits along one ray are resolved."""

    LAST_WRITER = 0
    NEAREST = 1


class ShadowProbe(IntEnum):
    """Direction of the shadow probe ray.

    LIGHT_NORMAL uses the light sphere's normal toward the hit sphere's
    center, negated and scaled: a stylized feeler that does not point exactly
    from the hit point to the light. POINT_TO_LIGHT aims straight at the
    light from the hit point.
    """

    LIGHT_NORMAL = 0
    POINT_TO_LIGHT = 1


@dataclass
class ShadingConfig:
    """Tunable constants of the shading pipeline.

    Attributes:
        diffuse_intensity: Exposure scale applied to the direct term.
        reflection_intensity: Scale of each reflection probe contribution.
        shadow_intensity: Scale of each shadow probe attenuation.
        reflection_probe_length: Length of the probe cast along the normal.
        shadow_probe_length: Length of the probe cast toward the light.
        intersect_epsilon: Discriminant threshold for grazing misses.
        background_tint: Subtracted from reflections of BACKGROUND spheres.
        background_color: Color of rays that hit nothing.
        camera_z: Depth of the image plane primary rays start from.
        hit_mode: Overlapping hit resolution (HitMode or its name).
        shadow_probe: Shadow probe direction (ShadowProbe or its name).
        reflection_enabled: Run the reflection pass.
        shadow_enabled: Run the shadow pass.
    """

    diffuse_intensity: float = 0.5
    reflection_intensity: float = 2.0
    shadow_intensity: float = 2.3
    reflection_probe_length: float = 40.0
    shadow_probe_length: float = 3.0
    intersect_epsilon: float = INTERSECT_EPSILON
    background_tint: tuple[float, float, float] = (60.0, 60.0, 60.0)
    background_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    camera_z: float = 0.0
    hit_mode: HitMode | str = HitMode.LAST_WRITER
    shadow_probe: ShadowProbe | str = ShadowProbe.LIGHT_NORMAL
    reflection_enabled: bool = True
    shadow_enabled: bool = True

    def __post_init__(self) -> None:
        self.hit_mode = _parse_enum(HitMode, self.hit_mode, "hit mode")
        self.shadow_probe = _parse_enum(ShadowProbe, self.shadow_probe, "shadow probe")
        if self.intersect_epsilon < 0.0:
            raise ValueError(f"intersect_epsilon must be non-negative, got {self.intersect_epsilon}")


def _parse_enum(enum_cls, value, label: str):
    """Accept an enum member or its case-insensitive name."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper().replace("-", "_")]
        except KeyError:
            pass
    choices = ", ".join(m.name.lower() for m in enum_cls)
    raise ValueError(f"Unknown {label}: {value!r} (expected one of {choices})")


_diffuse_intensity = ti.field(dtype=ti.f32, shape=())
_reflection_intensity = ti.field(dtype=ti.f32, shape=())
_shadow_intensity = ti.field(dtype=ti.f32, shape=())
_reflection_probe_length = ti.field(dtype=ti.f32, shape=())
_shadow_probe_length = ti.field(dtype=ti.f32, shape=())
_intersect_epsilon = ti.field(dtype=ti.f32, shape=())
_background_tint = ti.Vector.field(3, dtype=ti.f32, shape=())
_background_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_z = ti.field(dtype=ti.f32, shape=())
_hit_mode = ti.field(dtype=ti.i32, shape=())
_shadow_probe_mode = ti.field(dtype=ti.i32, shape=())
_reflection_enabled = ti.field(dtype=ti.i32, shape=())
_shadow_enabled = ti.field(dtype=ti.i32, shape=())

_active_config: ShadingConfig | None = None


def configure_shading(config: ShadingConfig) -> None:
    """Upload a ShadingConfig into the shading fields.

    Args:
        config: The constants to use for subsequent renders.
    """
    global _active_config

    _diffuse_intensity[None] = config.diffuse_intensity
    _reflection_intensity[None] = config.reflection_intensity
    _shadow_intensity[None] = config.shadow_intensity
    _reflection_probe_length[None] = config.reflection_probe_length
    _shadow_probe_length[None] = config.shadow_probe_length
    _intersect_epsilon[None] = config.intersect_epsilon
    _background_tint[None] = list(config.background_tint)
    _background_color[None] = list(config.background_color)
    _camera_z[None] = config.camera_z
    _hit_mode[None] = int(config.hit_mode)
    _shadow_probe_mode[None] = int(config.shadow_probe)
    _reflection_enabled[None] = int(config.reflection_enabled)
    _shadow_enabled[None] = int(config.shadow_enabled)

    _active_config = copy.deepcopy(config)


def get_shading_config() -> ShadingConfig:
    """Return a copy of the active configuration.

    Falls back to the defaults if configure_shading() was never called, and
    uploads them so the fields match.
    """
    if _active_config is None:
        config = ShadingConfig()
        configure_shading(config)
        return copy.deepcopy(config)
    return copy.deepcopy(_active_config)


# =============================================================================
# Lighting Terms
# =============================================================================


@ti.func
def light_cosine(point: vec3, normal: vec3) -> ti.f32:
    """Cosine between the direction to the light and the surface normal.

    Not clamped: back-facing points yield negative values.
    """
    return dot(normalize(light_center[None] - point), normalize(normal))


@ti.func
def direct_lighting(point: vec3, normal: vec3, base_color: vec3) -> vec3:
    """Direct term: (base_color + light.color * cos) * diffuse_intensity.

    Args:
        point: The intersection point.
        normal: The surface normal at the point.
        base_color: The sphere's base color.

    Returns:
        The unclamped direct color.
    """
    cos_theta = light_cosine(point, normal)
    return (base_color + light_color[None] * cos_theta) * _diffuse_intensity[None]


# =============================================================================
# Secondary Passes
# =============================================================================


@ti.func
def reflection_pass(point: vec3, normal: vec3, self_index: ti.i32, color: vec3) -> vec3:
    """Add the colors of spheres met by a probe cast along the normal.

    The probe starts at the hit point with direction
    normal * reflection_probe_length. Every other sphere it intersects
    contributes other.color * cos * reflection_intensity, clamped and
    added; reflections of BACKGROUND spheres are reduced by the tint first.
    Emitters and the hit sphere itself are skipped. All hits accumulate.

    Args:
        point: The primary hit point.
        normal: The surface normal at the hit point.
        self_index: Index of the sphere that was hit.
        color: The pixel color so far.

    Returns:
        The color with reflection contributions added.
    """
    direction = normal * _reflection_probe_length[None]
    result = color

    for i in range(num_spheres[None]):
        other = load_sphere(i)
        if i != self_index and other.kind != int(SphereKind.EMITTER):
            hit, t = intersect_sphere(point, direction, other, _intersect_epsilon[None])
            if hit == 1:
                probe_point = point + direction * t
                probe_normal = sphere_normal(other.center, other.radius, probe_point)
                cos_probe = light_cosine(probe_point, probe_normal)
                contribution = other.color * cos_probe * _reflection_intensity[None]
                if other.kind == int(SphereKind.BACKGROUND):
                    contribution -= _background_tint[None]
                result += clamp_color(contribution)

    return result


@ti.func
def shadow_probe_direction(point: vec3, self_center: vec3) -> vec3:
    """Direction of the shadow probe for a hit point.

    Args:
        point: The primary hit point.
        self_center: Center of the sphere that was hit.

    Returns:
        light_normal(self_center) * -shadow_probe_length in LIGHT_NORMAL
        mode, normalize(light.center - point) * shadow_probe_length in
        POINT_TO_LIGHT mode.
    """
    direction = vec3(0.0, 0.0, 0.0)
    if _shadow_probe_mode[None] == int(ShadowProbe.POINT_TO_LIGHT):
        direction = normalize(light_center[None] - point) * _shadow_probe_length[None]
    else:
        direction = light_normal(self_center) * -_shadow_probe_length[None]
    return direction


@ti.func
def shadow_pass(point: vec3, self_index: ti.i32, self_center: vec3, color: vec3) -> vec3:
    """Attenuate the pixel for spheres met by a probe toward the light.

    For every other non-emitter sphere the probe intersects, the running
    color loses clamp(color * cos * shadow_intensity). Channels may go
    negative here; trace() clamps afterwards.

    Args:
        point: The primary hit point.
        self_index: Index of the sphere that was hit.
        self_center: Center of the sphere that was hit.
        color: The pixel color so far.

    Returns:
        The attenuated color.
    """
    direction = shadow_probe_direction(point, self_center)
    result = color

    for i in range(num_spheres[None]):
        other = load_sphere(i)
        if i != self_index and other.kind != int(SphereKind.EMITTER):
            hit, t = intersect_sphere(point, direction, other, _intersect_epsilon[None])
            if hit == 1:
                probe_point = point + direction * t
                probe_normal = sphere_normal(other.center, other.radius, probe_point)
                cos_probe = light_cosine(probe_point, probe_normal)
                result -= clamp_color(result * cos_probe * _shadow_intensity[None])

    return result


# =============================================================================
# Trace
# =============================================================================


@ti.func
def shade_hit(ray: Ray, t: ti.f32, index: ti.i32, sphere: Sphere) -> vec3:
    """Color of a single hit before the final clamp.

    Reflection runs before shadow. BACKGROUND spheres skip reflection and
    EMITTER spheres skip shadow.
    """
    point = ray_at(ray, t)
    normal = sphere_normal(sphere.center, sphere.radius, point)
    pixel = direct_lighting(point, normal, sphere.color)

    if _reflection_enabled[None] == 1 and sphere.kind != int(SphereKind.BACKGROUND):
        pixel = reflection_pass(point, normal, index, pixel)

    if _shadow_enabled[None] == 1 and sphere.kind != int(SphereKind.EMITTER):
        pixel = shadow_pass(point, index, sphere.center, pixel)

    return pixel


@ti.func
def trace(ray: Ray) -> vec3:
    """Shade a primary ray against the scene.

    Args:
        ray: The primary ray.

    Returns:
        The pixel color, clamped to [0, 255]. background_color when nothing
        is hit.
    """
    color = _background_color[None]
    closest_t = 0.0
    found = 0

    for i in range(num_spheres[None]):
        sphere = load_sphere(i)
        hit, t = intersect_sphere(ray.origin, ray.direction, sphere, _intersect_epsilon[None])
        if hit == 1:
            accept = 1
            if _hit_mode[None] == int(HitMode.NEAREST) and found == 1 and t >= closest_t:
                accept = 0
            if accept == 1:
                found = 1
                closest_t = t
                color = shade_hit(ray, t, i, sphere)

    return clamp_color(color)


# =============================================================================
# Frame Buffer
# =============================================================================

# Maximum supported viewport (preallocated to avoid kernel recompilation)
MAX_FRAME_WIDTH = 1024
MAX_FRAME_HEIGHT = 1024

_frame_width = ti.field(dtype=ti.i32, shape=())
_frame_height = ti.field(dtype=ti.i32, shape=())
_frame_buffer_initialized = ti.field(dtype=ti.i32, shape=())

# Indexed [x, y] with y = 0 the top row
_frame_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_FRAME_WIDTH, MAX_FRAME_HEIGHT))


def setup_frame_buffer(width: int, height: int) -> None:
    """Set the active viewport size and clear the frame buffer.

    Args:
        width: Viewport width in pixels (1 to MAX_FRAME_WIDTH).
        height: Viewport height in pixels (1 to MAX_FRAME_HEIGHT).

    Raises:
        ValueError: If a dimension is out of range.
    """
    if not (0 < width <= MAX_FRAME_WIDTH and 0 < height <= MAX_FRAME_HEIGHT):
        raise ValueError(
            f"Viewport dimensions ({width}x{height}) must be positive and not exceed "
            f"maximum supported ({MAX_FRAME_WIDTH}x{MAX_FRAME_HEIGHT})"
        )

    _frame_width[None] = width
    _frame_height[None] = height
    _frame_buffer_initialized[None] = 1
    clear_frame_buffer()


def clear_frame_buffer() -> None:
    """Fill the frame buffer with black."""
    _frame_buffer.fill(0.0)


def reset_frame_buffer() -> None:
    """Forget the viewport; reads fail until setup_frame_buffer() again."""
    _frame_buffer_initialized[None] = 0
    clear_frame_buffer()


def get_frame_dimensions() -> tuple[int, int]:
    """Get the active viewport as (width, height)."""
    return int(_frame_width[None]), int(_frame_height[None])


def _check_frame_buffer_initialized() -> None:
    """Raise if the frame buffer has no active viewport."""
    if _frame_buffer_initialized[None] == 0:
        raise RuntimeError("Frame buffer not set up. Call setup_frame_buffer() first.")


@ti.kernel
def _render_frame_kernel(width: ti.i32, height: ti.i32):
    """Trace one primary ray per pixel into the frame buffer.

    Each pixel reads scene fields only and writes its own buffer slot.
    """
    for x, y in ti.ndrange(width, height):
        ray = primary_ray(ti.cast(x, ti.f32), ti.cast(y, ti.f32), _camera_z[None])
        _frame_buffer[x, y] = trace(ray)


# Result slot for single-ray queries
_trace_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _trace_ray_kernel(ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
    """Trace a single arbitrary ray into the result slot."""
    _trace_result[None] = trace(Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz)))


def render_frame() -> None:
    """Render every pixel of the active viewport.

    Raises:
        RuntimeError: If the frame buffer has not been set up.
    """
    _check_frame_buffer_initialized()
    width, height = get_frame_dimensions()
    _render_frame_kernel(width, height)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Shade one ray against the current scene.

    Python-callable entry point for testing and debugging.

    Returns:
        The clamped (R, G, B) color.
    """
    _trace_ray_kernel(origin[0], origin[1], origin[2], direction[0], direction[1], direction[2])
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_pixel(x: int, y: int) -> tuple[float, float, float]:
    """Shade the primary ray of pixel (x, y) without touching the buffer."""
    camera_z = float(_camera_z[None])
    return trace_ray((float(x), float(y), camera_z), (0.0, 0.0, 1.0))


def get_frame_numpy() -> npt.NDArray[np.float32]:
    """Get the frame as floats of shape (height, width, 3) in [0, 255].

    Row 0 is the top row of the viewport.

    Raises:
        RuntimeError: If the frame buffer has not been set up.
    """
    _check_frame_buffer_initialized()
    width, height = get_frame_dimensions()

    full = _frame_buffer.to_numpy()
    image = np.transpose(full[:width, :height, :], (1, 0, 2))
    return np.clip(image, 0.0, 255.0).astype(np.float32)


def get_frame_rgb() -> npt.NDArray[np.uint8]:
    """Get the frame as 8-bit RGB of shape (height, width, 3).

    Channels are truncated toward zero.
    """
    return get_frame_numpy().astype(np.uint8)

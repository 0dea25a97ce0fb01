"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- make_ray convenience function
- Orthographic primary rays
"""

import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from spherecast.core.ray import Ray, ray_at
        from spherecast.core.vector import vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, 1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_non_unit_direction(self):
        """Test ray_at scales by the raw direction length."""
        from spherecast.core.ray import Ray, ray_at
        from spherecast.core.vector import vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, 40.0))
            result[None] = ray_at(ray, 0.5)

        test_kernel()
        r = result[None]
        assert abs(r[2] - 20.0) < 1e-5

    def test_ray_at_negative_t(self):
        """Test ray_at handles negative t (behind origin)."""
        from spherecast.core.ray import Ray, ray_at
        from spherecast.core.vector import vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
            result[None] = ray_at(ray, -3.0)

        test_kernel()
        r = result[None]
        assert abs(r[1] - (-3.0)) < 1e-6

    def test_make_ray(self):
        """Test make_ray stores origin and direction."""
        from spherecast.core.ray import make_ray
        from spherecast.core.vector import vec3

        origin = ti.field(dtype=ti.math.vec3, shape=())
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 1.0, 1.0), vec3(0.0, -1.0, 0.0))
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        assert abs(origin[None][0] - 1.0) < 1e-6
        assert abs(direction[None][1] - (-1.0)) < 1e-6


class TestPrimaryRay:
    """Tests for primary ray construction."""

    def test_primary_ray_starts_at_pixel(self):
        """Test the primary ray starts at (x, y, camera_z) and looks along +z."""
        from spherecast.core.ray import primary_ray

        origin = ti.field(dtype=ti.math.vec3, shape=())
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = primary_ray(12.0, 34.0, -5.0)
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        o = origin[None]
        d = direction[None]
        assert (o[0], o[1], o[2]) == (12.0, 34.0, -5.0)
        assert (d[0], d[1], d[2]) == (0.0, 0.0, 1.0)

"""Unit tests for the vector utilities.

Tests cover:
- dot and length
- normalize, including the zero vector
- exact equality
- color clamping range and idempotence
"""

import math

import pytest
import taichi as ti


class TestDotAndLength:
    """Tests for dot and length."""

    def test_dot_product(self):
        """Test dot product of two vectors."""
        from spherecast.core.vector import dot, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))

        test_kernel()
        assert abs(result[None] - 12.0) < 1e-5

    def test_dot_perpendicular_is_zero(self):
        """Test dot product of perpendicular vectors is zero."""
        from spherecast.core.vector import dot, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = dot(vec3(1.0, 0.0, 0.0), vec3(0.0, 7.0, 0.0))

        test_kernel()
        assert abs(result[None]) < 1e-6

    def test_length(self):
        """Test Euclidean length of a 3-4-0 vector."""
        from spherecast.core.vector import length, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = length(vec3(3.0, 4.0, 0.0))

        test_kernel()
        assert abs(result[None] - 5.0) < 1e-5


class TestNormalize:
    """Tests for normalize."""

    def test_normalize_unit_length(self):
        """Test normalize produces a unit vector in the same direction."""
        from spherecast.core.vector import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(3.0, 0.0, 4.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.6) < 1e-5
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - 0.8) < 1e-5
        assert abs(math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2) - 1.0) < 1e-5

    def test_normalize_zero_vector_returns_zero(self):
        """Test normalizing the zero vector yields zero instead of NaN."""
        from spherecast.core.vector import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        r = result[None]
        for i in range(3):
            assert not math.isnan(r[i])
            assert r[i] == 0.0


class TestVecEqual:
    """Tests for exact vector equality."""

    @pytest.mark.parametrize(
        "b, expected",
        [
            ((1.0, 2.0, 3.0), 1),
            ((1.0, 2.0, 3.5), 0),
            ((0.0, 2.0, 3.0), 0),
        ],
    )
    def test_vec_equal(self, b, expected):
        """Test equality is component-wise and exact."""
        from spherecast.core.vector import vec3, vec_equal

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(bx: ti.f32, by: ti.f32, bz: ti.f32):
            result[None] = vec_equal(vec3(1.0, 2.0, 3.0), vec3(bx, by, bz))

        test_kernel(*b)
        assert result[None] == expected


class TestClampColor:
    """Tests for clamp_color."""

    def test_clamp_range(self):
        """Test out-of-range channels are clamped to [0, 255]."""
        from spherecast.core.vector import clamp_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = clamp_color(vec3(-40.0, 128.0, 900.0))

        test_kernel()
        r = result[None]
        assert r[0] == 0.0
        assert abs(r[1] - 128.0) < 1e-6
        assert r[2] == 255.0

    def test_clamp_idempotent(self):
        """Test clamping twice equals clamping once."""
        from spherecast.core.vector import clamp_color, vec3

        once = ti.Vector.field(3, dtype=ti.f32, shape=8)
        twice = ti.Vector.field(3, dtype=ti.f32, shape=8)
        inputs = ti.Vector.field(3, dtype=ti.f32, shape=8)

        values = [
            (-1.0, 0.0, 1.0),
            (254.9, 255.0, 255.1),
            (-1000.0, 1000.0, 12.5),
            (0.0, 0.0, 0.0),
            (255.0, 255.0, 255.0),
            (300.0, -300.0, 77.0),
            (1e6, -1e6, 128.0),
            (64.0, 128.0, 192.0),
        ]
        for i, v in enumerate(values):
            inputs[i] = list(v)

        @ti.kernel
        def test_kernel():
            for i in range(8):
                c = clamp_color(inputs[i])
                once[i] = c
                twice[i] = clamp_color(c)

        test_kernel()
        for i in range(8):
            for ch in range(3):
                assert 0.0 <= once[i][ch] <= 255.0
                assert once[i][ch] == twice[i][ch]

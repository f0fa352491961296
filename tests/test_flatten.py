import dataclasses
import math

import numpy as np
import pytest

from bezmesh.patch import BezierRectangle
from bezmesh.triangle import Triangle

COLORS = [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0), (1.0, 1.0, 1.0)]


def _grid_patch(height=lambda i, j: 0.0, n=3, m=3):
    pts = [(float(i), float(j), height(i, j)) for j in range(m + 1) for i in range(n + 1)]
    return BezierRectangle(n, m, pts, COLORS)


def _trough():
    # parabolic trough along v, lowest at u = 0.5
    return _grid_patch(lambda i, j: (i - 1.5) ** 2)


def test_flat_patch_normals():
    for normal in _grid_patch().corner_normals():
        np.testing.assert_allclose(normal, (0.0, 0.0, 1.0))


def test_flat_patch_triangles():
    tris = _grid_patch().to_triangles()
    assert len(tris) == 2
    first, second = tris
    assert first.points == ((0.0, 0.0, 0.0), (3.0, 0.0, 0.0), (0.0, 3.0, 0.0))
    assert second.points == ((3.0, 0.0, 0.0), (3.0, 3.0, 0.0), (0.0, 3.0, 0.0))
    assert first.colors == (COLORS[0], COLORS[1], COLORS[2])
    assert second.colors == (COLORS[1], COLORS[3], COLORS[2])
    for tri in tris:
        assert tri.normals == ((0.0, 0.0, 1.0),) * 3


def test_triangle_winding_matches_normals():
    for tri in _trough().to_triangles():
        face = tri.face_normal()
        assert face is not None
        for normal in tri.normals:
            assert np.dot(face, normal) > 0


def test_curved_patch_normals_are_unit_and_ordered():
    n00, n0m, nn0, nnm = _trough().corner_normals()
    for normal in (n00, n0m, nn0, nnm):
        assert math.isclose(float(np.linalg.norm(normal)), 1.0)
        assert normal[2] > 0
    # the u = 0 edge slopes down, the u = 1 edge slopes up
    assert n00[0] > 0 and n0m[0] > 0
    assert nn0[0] < 0 and nnm[0] < 0
    np.testing.assert_allclose(n00, np.array([2.0, 0.0, 1.0]) / math.sqrt(5))
    np.testing.assert_allclose(nn0, np.array([-2.0, 0.0, 1.0]) / math.sqrt(5))


def test_triangle_vertices_get_their_corner_normal():
    first, second = _trough().to_triangles()
    # vertex order (u0v0, unv0, u0vm) then (unv0, unvm, u0vm)
    assert first.normals[0][0] > 0
    assert first.normals[1][0] < 0
    assert first.normals[2][0] > 0
    assert second.normals[0][0] < 0
    assert second.normals[1][0] < 0
    assert second.normals[2][0] > 0


def test_collapsed_patch_has_zero_normals():
    surf = BezierRectangle(2, 2, [(1.0, 1.0, 1.0)] * 9, COLORS)
    for normal in surf.corner_normals():
        np.testing.assert_array_equal(normal, (0.0, 0.0, 0.0))
    for tri in surf.to_triangles():
        assert tri.normals == ((0.0, 0.0, 0.0),) * 3


def test_degree_zero_direction_has_zero_normals():
    surf = BezierRectangle(0, 2, [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 2.0, 1.0)], COLORS)
    for normal in surf.corner_normals():
        np.testing.assert_array_equal(normal, (0.0, 0.0, 0.0))


def test_scalar_patch_cannot_be_flattened():
    surf = BezierRectangle(1, 1, [0.0, 1.0, 2.0, 3.0], COLORS)
    with pytest.raises(ValueError):
        surf.corner_normals()
    with pytest.raises(ValueError):
        surf.to_triangles()


def test_triangle_create_validates_counts():
    with pytest.raises(ValueError):
        Triangle.create([(0, 0, 0), (1, 0, 0)], COLORS[:3], COLORS[:3])
    tri = Triangle.create([(0, 0, 0), (1, 0, 0), (0, 1, 0)], COLORS[:3], [(0, 0, 1)] * 3)
    assert tri.face_normal() == (0.0, 0.0, 1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        tri.points = ()

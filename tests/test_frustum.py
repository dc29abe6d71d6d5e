"""Tests for Frustum class"""

import math

import pytest
import numpy as np
from pyrr import Matrix44, Vector3

from collisionlib.config import settings
from collisionlib.core.bounds import BoundingBox, BoundingSphere, BoundingVolume
from collisionlib.core.frustum import ClipDepth, Frustum, FrustumPlane
from collisionlib.core.plane import Plane
from collisionlib.core.projection import perspective_projection_zero_to_one


@pytest.fixture
def view():
    """Camera at the origin looking down negative Z"""
    return Matrix44.look_at(
        Vector3([0.0, 0.0, 0.0]),
        Vector3([0.0, 0.0, -1.0]),
        Vector3([0.0, 1.0, 0.0]),
    )


@pytest.fixture
def frustum(view):
    """90 degree frustum, near 1, far 100, clip depth 0..1"""
    proj = perspective_projection_zero_to_one(90.0, 1.0, 1.0, 100.0)
    return Frustum.from_matrices(view, proj)


@pytest.fixture
def unit_cube_frustum():
    """Axis-aligned planes bounding the cube [-1, 1]^3"""
    return Frustum([
        Plane.from_coefficients(1.0, 0.0, 0.0, 1.0),   # left
        Plane.from_coefficients(-1.0, 0.0, 0.0, 1.0),  # right
        Plane.from_coefficients(0.0, 1.0, 0.0, 1.0),   # bottom
        Plane.from_coefficients(0.0, -1.0, 0.0, 1.0),  # top
        Plane.from_coefficients(0.0, 0.0, 1.0, 1.0),   # near
        Plane.from_coefficients(0.0, 0.0, -1.0, 1.0),  # far
    ])


def test_frustum_requires_six_planes():
    """Test a frustum cannot be built from the wrong number of planes"""
    with pytest.raises(ValueError):
        Frustum([Plane() for _ in range(5)])


def test_frustum_copies_given_planes(view):
    """Test re-extracting planes leaves the caller's planes untouched"""
    planes = [Plane.from_coefficients(0.0, 0.0, 1.0, 1.0) for _ in range(6)]
    frustum = Frustum(planes)

    frustum.extract_planes(view, perspective_projection_zero_to_one(90.0, 1.0, 1.0, 100.0))

    for plane in planes:
        assert plane == Plane.from_coefficients(0.0, 0.0, 1.0, 1.0)
    assert frustum[FrustumPlane.NEAR] != planes[FrustumPlane.NEAR]


def test_extracted_planes_are_normalized(frustum):
    """Test every extracted plane has a unit normal"""
    assert len(frustum.planes) == 6
    for plane in frustum.planes:
        assert np.isclose(np.linalg.norm(plane.normal), 1.0)


def test_plane_slots(frustum):
    """Test named slots index the plane list"""
    assert frustum[FrustumPlane.NEAR] is frustum.planes[4]
    assert frustum[FrustumPlane.LEFT] is frustum.planes[0]

    # Looking down -Z: near faces -Z, far faces +Z
    assert np.allclose(np.asarray(frustum[FrustumPlane.NEAR].normal), [0.0, 0.0, -1.0])
    assert np.allclose(np.asarray(frustum[FrustumPlane.FAR].normal), [0.0, 0.0, 1.0])
    assert frustum[FrustumPlane.NEAR].signed_distance([0.0, 0.0, -1.0]) == pytest.approx(0.0, abs=1e-9)
    assert frustum[FrustumPlane.FAR].signed_distance([0.0, 0.0, -100.0]) == pytest.approx(0.0, abs=1e-9)

    s = math.sqrt(0.5)
    assert np.allclose(np.asarray(frustum[FrustumPlane.LEFT].normal), [s, 0.0, -s])
    assert np.allclose(np.asarray(frustum[FrustumPlane.RIGHT].normal), [-s, 0.0, -s])
    assert np.allclose(np.asarray(frustum[FrustumPlane.BOTTOM].normal), [0.0, s, -s])
    assert np.allclose(np.asarray(frustum[FrustumPlane.TOP].normal), [0.0, -s, -s])


def test_planes_point_inward(frustum):
    """Test a point in front of the camera is on the positive side of every plane"""
    point = Vector3([0.0, 0.0, -50.0])
    for plane in frustum.planes:
        assert plane.signed_distance(point) > 0.0
    assert frustum.point_in_frustum(point)


@pytest.mark.parametrize("point, inside", [
    ((0.0, 0.0, -50.0), True),
    ((0.0, 0.0, -1.5), True),
    ((10.0, -10.0, -20.0), True),
    ((0.0, 0.0, 50.0), False),     # behind the camera
    ((0.0, 0.0, -0.5), False),     # nearer than near
    ((0.0, 0.0, -150.0), False),   # beyond far
    ((200.0, 0.0, -50.0), False),  # right of the frustum
    ((0.0, -80.0, -50.0), False),  # below the frustum
])
def test_point_in_frustum(frustum, point, inside):
    """Test point classification"""
    assert frustum.point_in_frustum(Vector3(point)) is inside


def test_point_on_plane_is_outside(unit_cube_frustum):
    """Test a point exactly on a bounding plane is outside"""
    assert unit_cube_frustum.point_in_frustum([0.0, 0.0, 0.0])
    assert not unit_cube_frustum.point_in_frustum([1.0, 0.0, 0.0])
    assert not unit_cube_frustum.point_in_frustum([0.0, -1.0, 0.0])


def test_sphere_touching_from_outside_is_outside(unit_cube_frustum):
    """Test a sphere that only touches a plane from outside is culled"""
    assert not unit_cube_frustum.sphere_in_frustum(BoundingSphere([3.0, 0.0, 0.0], 2.0))
    assert unit_cube_frustum.sphere_in_frustum(BoundingSphere([3.0, 0.0, 0.0], 2.5))


def test_sphere_in_frustum(frustum):
    """Test sphere visibility"""
    assert frustum.sphere_in_frustum(BoundingSphere([0.0, 0.0, -50.0], 1.0))
    assert frustum.sphere_in_frustum(BoundingSphere([0.0, 0.0, -0.5], 1.0))  # straddles the near plane
    assert not frustum.sphere_in_frustum(BoundingSphere([0.0, 0.0, 20.0], 1.0))


def test_sphere_in_frustum_monotonic_in_radius(frustum):
    """Test growing an outside sphere can only bring it inside"""
    center = Vector3([200.0, 0.0, -50.0])
    radii = [1.0, 50.0, 100.0, 107.0, 500.0]
    results = [frustum.sphere_in_frustum(BoundingSphere(center, r)) for r in radii]

    assert results[0] is False
    assert results[-1] is True
    assert results == sorted(results)


def test_shrinking_inside_sphere_stays_inside(frustum):
    """Test shrinking an inside sphere never moves it outside"""
    center = Vector3([5.0, 5.0, -30.0])
    for radius in [20.0, 10.0, 1.0, 0.1, 0.0]:
        assert frustum.sphere_in_frustum(BoundingSphere(center, radius))


def test_box_in_frustum(frustum):
    """Test box visibility"""
    assert frustum.box_in_frustum(BoundingBox([-1.0, -1.0, -51.0], [1.0, 1.0, -49.0]))
    assert frustum.box_in_frustum(BoundingBox([-500.0, -500.0, -60.0], [500.0, 500.0, -40.0]))
    assert not frustum.box_in_frustum(BoundingBox([-1.0, -1.0, 10.0], [1.0, 1.0, 20.0]))
    assert not frustum.box_in_frustum(BoundingBox([300.0, -1.0, -60.0], [310.0, 1.0, -40.0]))


def test_box_in_frustum_exact_for_axis_aligned_planes(unit_cube_frustum):
    """Test a box touching a plane from outside is culled"""
    assert not unit_cube_frustum.box_in_frustum(BoundingBox([1.0, -1.0, -1.0], [2.0, 1.0, 1.0]))
    assert unit_cube_frustum.box_in_frustum(BoundingBox([0.5, -1.0, -1.0], [2.0, 1.0, 1.0]))


def test_box_in_frustum_corner_false_positive(frustum):
    """
    Test the known corner-sampling approximation.

    The box sits past both the left and the far plane near their shared
    edge. Every plane has a corner on its inside, so the box is reported
    visible although no point of it is inside the frustum.
    """
    box = BoundingBox([-110.0, -1.0, -105.0], [-101.0, 1.0, -95.0])

    for corner in box.corners():
        assert not frustum.point_in_frustum(corner)
    assert frustum.box_in_frustum(box)


def test_volume_in_frustum(frustum):
    """Test volume visibility needs both sphere and box"""
    box = BoundingBox([-1.0, -1.0, -51.0], [1.0, 1.0, -49.0])
    outside_box = BoundingBox([-1.0, -1.0, 10.0], [1.0, 1.0, 20.0])
    sphere = BoundingSphere([0.0, 0.0, -50.0], 2.0)
    outside_sphere = BoundingSphere([0.0, 0.0, 15.0], 2.0)

    assert frustum.volume_in_frustum(BoundingVolume(box, sphere))
    assert not frustum.volume_in_frustum(BoundingVolume(outside_box, sphere))
    assert not frustum.volume_in_frustum(BoundingVolume(box, outside_sphere))


def test_volume_in_frustum_sphere_short_circuits(frustum, monkeypatch):
    """Test the box test is skipped when the sphere is culled"""
    calls = []

    def box_in_frustum(box):
        calls.append(box)
        return True

    monkeypatch.setattr(frustum, "box_in_frustum", box_in_frustum)

    volume = BoundingVolume(BoundingBox([-1.0, -1.0, -51.0], [1.0, 1.0, -49.0]), BoundingSphere([0.0, 0.0, 15.0], 2.0))
    assert not frustum.volume_in_frustum(volume)
    assert calls == []

    volume.sphere = BoundingSphere([0.0, 0.0, -50.0], 2.0)
    assert frustum.volume_in_frustum(volume)
    assert len(calls) == 1


def test_clip_depth_conventions(view):
    """Test the near plane follows the clip depth convention"""
    gl_proj = Matrix44.perspective_projection(90.0, 1.0, 1.0, 100.0)
    point = Vector3([0.0, 0.0, -1.5])

    gl_frustum = Frustum.from_matrices(view, gl_proj, ClipDepth.NEGATIVE_ONE_TO_ONE)
    assert gl_frustum.point_in_frustum(point)
    assert np.allclose(np.asarray(gl_frustum[FrustumPlane.NEAR].normal), [0.0, 0.0, -1.0])

    # Treating a -1..1 projection as 0..1 moves the near plane halfway out
    mismatched = Frustum.from_matrices(view, gl_proj, ClipDepth.ZERO_TO_ONE)
    assert not mismatched.point_in_frustum(point)
    assert mismatched.point_in_frustum(Vector3([0.0, 0.0, -50.0]))


def test_clip_depth_from_settings(view, monkeypatch):
    """Test the default clip depth comes from settings"""
    monkeypatch.setattr(settings, "DEFAULT_CLIP_DEPTH", "negative_one_to_one")
    gl_proj = Matrix44.perspective_projection(90.0, 1.0, 1.0, 100.0)

    frustum = Frustum.from_matrices(view, gl_proj)

    assert frustum.point_in_frustum(Vector3([0.0, 0.0, -1.5]))


def test_from_view_projection_matches_from_matrices(view):
    """Test a pre-combined matrix gives the same planes"""
    proj = perspective_projection_zero_to_one(60.0, 16 / 9, 0.1, 500.0)

    a = Frustum.from_matrices(view, proj)
    b = Frustum.from_view_projection(np.dot(np.asarray(view), np.asarray(proj)))

    for pa, pb in zip(a.planes, b.planes):
        assert pa == pb


def test_extract_planes_recomputes(frustum):
    """Test re-extraction replaces every plane"""
    moved_view = Matrix44.look_at(
        Vector3([0.0, 5.0, 10.0]),
        Vector3([0.0, 0.0, 0.0]),
        Vector3([0.0, 1.0, 0.0]),
    )
    frustum.extract_planes(moved_view, perspective_projection_zero_to_one(60.0, 16 / 9, 0.1, 100.0))

    eye = np.array([0.0, 5.0, 10.0])
    forward = -eye / np.linalg.norm(eye)

    assert frustum.point_in_frustum(eye + forward * 0.5)
    assert frustum.point_in_frustum(eye + forward * 50.0)
    assert not frustum.point_in_frustum(eye - forward * 1.0)
    assert not frustum.point_in_frustum(eye + forward * 150.0)


def test_rejects_bad_matrix(view):
    """Test non 4x4 matrices are refused"""
    with pytest.raises(ValueError):
        Frustum.from_matrices(view, np.eye(3))

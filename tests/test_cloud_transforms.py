import math

import numpy as np
import pytest

from pclmsg.cloud_transforms import (
    transform_point_cloud,
    transform_point_cloud_full,
    transform_point_cloud_to_frame,
    transform_point_cloud_with_normals,
    transform_point_cloud_with_normals_full,
    transform_point_cloud_with_normals_to_frame,
)
from pclmsg.conversions import stamp_to_pcl
from pclmsg.messages import Header, Time
from pclmsg.pcl_types import PCLHeader, PointCloud
from pclmsg.transforms import (
    ExtrapolationError,
    Transform,
    TransformLookup,
    TransformLookupError,
    TransformStamped,
)

XYZ = np.dtype([("x", np.float32), ("y", np.float32), ("z", np.float32), ("i", np.float32)])
NORMAL = np.dtype(
    [
        ("x", np.float32),
        ("y", np.float32),
        ("z", np.float32),
        ("normal_x", np.float32),
        ("normal_y", np.float32),
        ("normal_z", np.float32),
    ]
)

QUARTER_TURN_Z = (0.0, 0.0, math.sin(math.pi / 4), math.cos(math.pi / 4))


def xyz_cloud(frame="laser", stamp=0, is_dense=True):
    points = np.array(
        [(1.0, 0.0, 0.0, 5.0), (0.5, -2.0, 3.0, 6.0), (-1.5, 4.0, 0.25, 7.0)], dtype=XYZ
    )
    return PointCloud(points=points, header=PCLHeader(stamp=stamp, frame_id=frame), is_dense=is_dense)


def normal_cloud(frame="laser", stamp=0):
    points = np.array(
        [(1.0, 2.0, 3.0, 1.0, 0.0, 0.0), (-1.0, 0.5, 2.0, 0.0, 0.6, 0.8)], dtype=NORMAL
    )
    return PointCloud(points=points, header=PCLHeader(stamp=stamp, frame_id=frame))


def coords(cloud, names=("x", "y", "z")):
    return np.stack([cloud.points[n].astype(np.float64) for n in names], axis=1)


def static_tree(translation=(1.0, 2.0, 3.0), rotation=(0.0, 0.0, 0.0, 1.0)):
    return TransformLookup(
        [TransformStamped(Header(Time(), "map"), "laser", Transform(translation, rotation))]
    )


def test_identity_keeps_points_and_other_fields():
    cloud = xyz_cloud()
    out = transform_point_cloud(cloud, Transform.identity())
    np.testing.assert_allclose(coords(out), coords(cloud))
    np.testing.assert_array_equal(out.points["i"], cloud.points["i"])
    assert out.header == cloud.header
    assert out.points is not cloud.points


def test_translation_adds_offset():
    cloud = xyz_cloud()
    offset = (1.0, -2.0, 0.5)
    out = transform_point_cloud(cloud, Transform(translation=offset))
    np.testing.assert_allclose(coords(out), coords(cloud) + np.array(offset), rtol=1e-6)
    assert (out.width, out.height) == (cloud.width, cloud.height)


def test_quarter_turn_about_z_moves_x_axis_to_y_axis():
    out = transform_point_cloud(xyz_cloud(), Transform(rotation=QUARTER_TURN_Z))
    np.testing.assert_allclose(coords(out)[0], [0.0, 1.0, 0.0], atol=1e-6)


def test_rotation_preserves_lengths():
    cloud = xyz_cloud()
    out = transform_point_cloud(cloud, Transform(rotation=(0.1, 0.3, -0.2, 0.9)))
    np.testing.assert_allclose(
        np.linalg.norm(coords(out), axis=1), np.linalg.norm(coords(cloud), axis=1), rtol=1e-5
    )


def test_inverse_round_trip():
    cloud = xyz_cloud()
    transform = Transform((0.5, -1.0, 2.0), (0.2, -0.1, 0.4, 0.8))
    there = transform_point_cloud(cloud, transform)
    back = transform_point_cloud(there, transform.inverse())
    np.testing.assert_allclose(coords(back), coords(cloud), atol=1e-5)


def test_accepts_stamped_transform():
    cloud = xyz_cloud()
    transform = Transform((3.0, 0.0, 0.0))
    stamped = TransformStamped(Header(Time(), "map"), "laser", transform)
    np.testing.assert_allclose(
        coords(transform_point_cloud(cloud, stamped)),
        coords(transform_point_cloud(cloud, transform)),
    )


def test_non_dense_cloud_skips_non_finite_points():
    points = np.array([(math.inf, 1.0, 1.0, 0.0), (0.0, 1.0, 1.0, 0.0)], dtype=XYZ)
    cloud = PointCloud(points=points, is_dense=False)
    out = transform_point_cloud(cloud, Transform(translation=(0.0, 2.0, 0.0)))
    assert out.points["y"][0] == cloud.points["y"][0]
    assert out.points["y"][1] == pytest.approx(cloud.points["y"][1] + 2.0)


def test_dense_cloud_transforms_every_point():
    points = np.array([(math.inf, 1.0, 1.0, 0.0)], dtype=XYZ)
    cloud = PointCloud(points=points, is_dense=True)
    out = transform_point_cloud(cloud, Transform(translation=(0.0, 2.0, 0.0)))
    assert out.points["y"][0] == pytest.approx(cloud.points["y"][0] + 2.0)


def test_missing_xyz_raises():
    cloud = PointCloud(points=np.zeros(2, dtype=[("a", np.float32)]))
    with pytest.raises(ValueError):
        transform_point_cloud(cloud, Transform.identity())


def test_normals_are_rotated_not_translated():
    cloud = normal_cloud()
    out = transform_point_cloud_with_normals(cloud, Transform(translation=(5.0, 5.0, 5.0)))
    normals = ("normal_x", "normal_y", "normal_z")
    np.testing.assert_allclose(coords(out, normals), coords(cloud, normals))
    np.testing.assert_allclose(coords(out), coords(cloud) + 5.0, rtol=1e-6)


def test_normals_follow_rotation():
    cloud = normal_cloud()
    transform = Transform(rotation=QUARTER_TURN_Z)
    out = transform_point_cloud_with_normals(cloud, transform)
    normals = ("normal_x", "normal_y", "normal_z")
    expected = coords(cloud, normals) @ transform.rotation_matrix().T
    np.testing.assert_allclose(coords(out, normals), expected, atol=1e-6)


def test_plain_transform_leaves_normals_alone():
    cloud = normal_cloud()
    out = transform_point_cloud(cloud, Transform(rotation=QUARTER_TURN_Z))
    np.testing.assert_array_equal(out.points["normal_x"], cloud.points["normal_x"])


def test_normals_required():
    with pytest.raises(ValueError):
        transform_point_cloud_with_normals(xyz_cloud(), Transform.identity())


def test_to_frame_same_frame_is_copy():
    cloud = xyz_cloud(frame="map")
    out = transform_point_cloud_to_frame("map", cloud, static_tree())
    np.testing.assert_array_equal(out.points, cloud.points)
    assert out.header == cloud.header
    assert out is not cloud


def test_to_frame_applies_lookup():
    cloud = xyz_cloud()
    out = transform_point_cloud_to_frame("map", cloud, static_tree())
    np.testing.assert_allclose(coords(out), coords(cloud) + np.array([1.0, 2.0, 3.0]), rtol=1e-6)
    assert out.header.frame_id == "map"
    assert out.header.stamp == cloud.header.stamp


def test_to_frame_with_normals():
    cloud = normal_cloud()
    tree = static_tree(translation=(0.0, 0.0, 0.0), rotation=QUARTER_TURN_Z)
    out = transform_point_cloud_with_normals_to_frame("map", cloud, tree)
    normals = ("normal_x", "normal_y", "normal_z")
    np.testing.assert_allclose(
        np.linalg.norm(coords(out, normals), axis=1),
        np.linalg.norm(coords(cloud, normals), axis=1),
        rtol=1e-6,
    )
    assert out.header.frame_id == "map"


def test_to_frame_unknown_frame():
    with pytest.raises(TransformLookupError):
        transform_point_cloud_to_frame("odom", xyz_cloud(), static_tree())


def test_to_frame_extrapolation():
    tree = TransformLookup(
        [TransformStamped(Header(Time(5, 0), "map"), "laser", Transform((1.0, 0.0, 0.0)))]
    )
    cloud = xyz_cloud(stamp=stamp_to_pcl(Time(1, 0)))
    with pytest.raises(ExtrapolationError):
        transform_point_cloud_to_frame("map", cloud, tree)


def test_full_uses_target_time_and_clears_frame():
    cloud = xyz_cloud()
    target_time = Time(2, 0)
    out = transform_point_cloud_full("map", target_time, cloud, "map", static_tree())
    np.testing.assert_allclose(coords(out), coords(cloud) + np.array([1.0, 2.0, 3.0]), rtol=1e-6)
    assert out.header.stamp == stamp_to_pcl(target_time)
    assert out.header.frame_id == ""


def test_full_with_normals_matches_direct():
    cloud = normal_cloud()
    tree = static_tree(rotation=QUARTER_TURN_Z)
    full = transform_point_cloud_with_normals_full("map", Time(1, 0), cloud, "map", tree)
    direct = transform_point_cloud_with_normals_to_frame("map", cloud, tree)
    np.testing.assert_allclose(coords(full), coords(direct), atol=1e-6)


def test_full_unknown_fixed_frame():
    with pytest.raises(TransformLookupError):
        transform_point_cloud_full("map", Time(), xyz_cloud(), "world", static_tree())
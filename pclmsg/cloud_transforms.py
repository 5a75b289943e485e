"""Rigid transforms of typed point clouds, optionally looked up in a frame tree."""

from __future__ import annotations

import copy

import numpy as np

from .conversions import header_to_pcl, stamp_from_pcl
from .messages import Header, Time
from .pcl_types import PointCloud
from .transforms import Transform, TransformLookup, TransformStamped

_XYZ = ("x", "y", "z")
_NORMALS = ("normal_x", "normal_y", "normal_z")


def _rigid(transform: Transform | TransformStamped) -> tuple[np.ndarray, np.ndarray]:
    if isinstance(transform, TransformStamped):
        transform = transform.transform
    return transform.rotation_matrix(), np.asarray(transform.translation, dtype=np.float64)


def _require(cloud: PointCloud, names: tuple[str, ...], what: str) -> None:
    present = cloud.points.dtype.names or ()
    missing = [name for name in names if name not in present]
    if missing:
        raise ValueError(f"point cloud has no {what} fields: {', '.join(missing)}")


def _stack(points: np.ndarray, names: tuple[str, ...]) -> np.ndarray:
    return np.stack([points[name].astype(np.float64) for name in names], axis=1)


def _store(points: np.ndarray, names: tuple[str, ...], mask: np.ndarray, values: np.ndarray) -> None:
    for column, name in enumerate(names):
        points[name][mask] = values[:, column]


def _apply(
    cloud: PointCloud, transform: Transform | TransformStamped, with_normals: bool
) -> PointCloud:
    _require(cloud, _XYZ, "X-Y-Z")
    if with_normals:
        _require(cloud, _NORMALS, "normal")
    rotation, translation = _rigid(transform)
    points = cloud.points.copy()

    xyz = _stack(points, _XYZ)
    if cloud.is_dense:
        mask = np.ones(len(points), dtype=bool)
    else:
        mask = np.isfinite(xyz).all(axis=1)

    _store(points, _XYZ, mask, xyz[mask] @ rotation.T + translation)
    if with_normals:
        normals = _stack(points, _NORMALS)
        _store(points, _NORMALS, mask, normals[mask] @ rotation.T)

    return PointCloud(
        points=points,
        width=cloud.width,
        height=cloud.height,
        header=copy.deepcopy(cloud.header),
        is_dense=cloud.is_dense,
    )


def transform_point_cloud(
    cloud: PointCloud, transform: Transform | TransformStamped
) -> PointCloud:
    """Apply a rigid transform to the x/y/z coordinates of every point.

    In a cloud that is not dense, points with non-finite coordinates are left
    untouched. All other fields and the header are copied unchanged.
    """
    return _apply(cloud, transform, with_normals=False)


def transform_point_cloud_with_normals(
    cloud: PointCloud, transform: Transform | TransformStamped
) -> PointCloud:
    """Apply a rigid transform to the coordinates and rotate the normals of every point."""
    return _apply(cloud, transform, with_normals=True)


def _to_frame(
    target_frame: str, cloud: PointCloud, buffer: TransformLookup, with_normals: bool
) -> PointCloud:
    if cloud.header.frame_id == target_frame:
        return copy.deepcopy(cloud)
    stamped = buffer.lookup_transform(
        target_frame, cloud.header.frame_id, stamp_from_pcl(cloud.header.stamp)
    )
    out = _apply(cloud, stamped, with_normals)
    out.header.frame_id = target_frame
    return out


def transform_point_cloud_to_frame(
    target_frame: str, cloud: PointCloud, buffer: TransformLookup
) -> PointCloud:
    """Transform a cloud into target_frame with the transform at the cloud's stamp.

    Raises TransformLookupError or ExtrapolationError when no transform is found.
    """
    return _to_frame(target_frame, cloud, buffer, with_normals=False)


def transform_point_cloud_with_normals_to_frame(
    target_frame: str, cloud: PointCloud, buffer: TransformLookup
) -> PointCloud:
    """Transform a cloud with normals into target_frame at the cloud's stamp."""
    return _to_frame(target_frame, cloud, buffer, with_normals=True)


def _full(
    target_frame: str,
    target_time: Time,
    cloud: PointCloud,
    fixed_frame: str,
    buffer: TransformLookup,
    with_normals: bool,
) -> PointCloud:
    stamped = buffer.lookup_transform_full(
        target_frame,
        target_time,
        cloud.header.frame_id,
        stamp_from_pcl(cloud.header.stamp),
        fixed_frame,
    )
    out = _apply(cloud, stamped, with_normals)
    # The header is replaced wholesale by one holding only the target time.
    out.header = header_to_pcl(Header(stamp=target_time))
    return out


def transform_point_cloud_full(
    target_frame: str,
    target_time: Time,
    cloud: PointCloud,
    fixed_frame: str,
    buffer: TransformLookup,
) -> PointCloud:
    """Transform a cloud into target_frame at target_time through a fixed frame.

    The result's header carries target_time as its stamp and an empty frame id.
    """
    return _full(target_frame, target_time, cloud, fixed_frame, buffer, with_normals=False)


def transform_point_cloud_with_normals_full(
    target_frame: str,
    target_time: Time,
    cloud: PointCloud,
    fixed_frame: str,
    buffer: TransformLookup,
) -> PointCloud:
    """Like transform_point_cloud_full, also rotating the normals."""
    return _full(target_frame, target_time, cloud, fixed_frame, buffer, with_normals=True)
"""Rigid transforms, a frame tree to look them up in, and transforming point cloud messages."""

from __future__ import annotations

import bisect
import copy
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from .cloud_ops import get_field_index
from .messages import Header, PointCloud2, PointFieldType, Time


class TransformError(Exception):
    """Base class for failures to obtain a transform."""


class TransformLookupError(TransformError):
    """A frame is unknown or two frames are not connected."""


class ExtrapolationError(TransformError):
    """A transform was requested at a time the recorded data does not cover."""


def _quaternion_multiply(a, b) -> tuple[float, float, float, float]:
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    )


@dataclass(frozen=True)
class Transform:
    """A rigid transform: a translation and a rotation quaternion (x, y, z, w)."""

    translation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)

    def __post_init__(self) -> None:
        translation = tuple(float(v) for v in self.translation)
        rotation = tuple(float(v) for v in self.rotation)
        if len(translation) != 3:
            raise ValueError("translation needs three components")
        if len(rotation) != 4:
            raise ValueError("rotation needs four components")
        object.__setattr__(self, "translation", translation)
        object.__setattr__(self, "rotation", rotation)

    @classmethod
    def identity(cls) -> Transform:
        """The transform that changes nothing."""
        return cls()

    def rotation_matrix(self) -> np.ndarray:
        """The 3x3 rotation matrix of the quaternion, normalising it on the way."""
        x, y, z, w = self.rotation
        d = x * x + y * y + z * z + w * w
        if d == 0.0:
            raise ValueError("rotation quaternion has zero length")
        s = 2.0 / d
        xs, ys, zs = x * s, y * s, z * s
        wx, wy, wz = w * xs, w * ys, w * zs
        xx, xy, xz = x * xs, x * ys, x * zs
        yy, yz, zz = y * ys, y * zs, z * zs
        return np.array(
            [
                [1.0 - (yy + zz), xy - wz, xz + wy],
                [xy + wz, 1.0 - (xx + zz), yz - wx],
                [xz - wy, yz + wx, 1.0 - (xx + yy)],
            ]
        )

    def as_matrix(self) -> np.ndarray:
        """The homogeneous 4x4 matrix of the transform."""
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation_matrix()
        matrix[:3, 3] = self.translation
        return matrix

    def inverse(self) -> Transform:
        """The transform that undoes this one."""
        x, y, z, w = self.rotation
        back = self.rotation_matrix().T @ np.asarray(self.translation)
        return Transform(tuple(-back), (-x, -y, -z, w))

    def __matmul__(self, other: Transform) -> Transform:
        if not isinstance(other, Transform):
            return NotImplemented
        moved = self.rotation_matrix() @ np.asarray(other.translation)
        translation = tuple(np.asarray(self.translation) + moved)
        return Transform(translation, _quaternion_multiply(self.rotation, other.rotation))


@dataclass
class TransformStamped:
    """A transform from the child frame into the header's frame, at the header's stamp."""

    header: Header = field(default_factory=Header)
    child_frame_id: str = ""
    transform: Transform = field(default_factory=Transform)


@dataclass(frozen=True)
class _Sample:
    nanoseconds: int
    parent: str
    transform: Transform


class TransformLookup:
    """A tree of coordinate frames built from stamped transforms.

    Each transform links its child frame to the parent frame of its header.
    A frame's link is taken from the latest sample at or before the requested
    time; a zero time asks for the latest sample. Links whose samples are all
    stamped at time zero are static and hold at any time.
    """

    def __init__(self, transforms: Iterable[TransformStamped] = ()) -> None:
        self._samples: dict[str, list[_Sample]] = {}
        self._parents: set[str] = set()
        for stamped in transforms:
            if not stamped.child_frame_id or not stamped.header.frame_id:
                raise ValueError("a transform needs both a parent and a child frame")
            if stamped.child_frame_id == stamped.header.frame_id:
                raise ValueError(f"frame {stamped.child_frame_id!r} cannot be its own parent")
            sample = _Sample(
                stamped.header.stamp.nanoseconds(), stamped.header.frame_id, stamped.transform
            )
            samples = self._samples.setdefault(stamped.child_frame_id, [])
            position = bisect.bisect_right([s.nanoseconds for s in samples], sample.nanoseconds)
            samples.insert(position, sample)
            self._parents.add(stamped.header.frame_id)

    def _known(self, frame: str) -> bool:
        return frame in self._samples or frame in self._parents

    def _sample(self, frame: str, nanoseconds: int) -> _Sample:
        samples = self._samples[frame]
        latest = samples[-1]
        if nanoseconds == 0 or latest.nanoseconds == 0:
            return latest
        times = [s.nanoseconds for s in samples]
        position = bisect.bisect_right(times, nanoseconds) - 1
        if position < 0:
            raise ExtrapolationError(
                f"lookup of frame {frame!r} at {nanoseconds} ns is before the earliest "
                f"data at {times[0]} ns"
            )
        if nanoseconds > latest.nanoseconds:
            raise ExtrapolationError(
                f"lookup of frame {frame!r} at {nanoseconds} ns is after the latest "
                f"data at {latest.nanoseconds} ns"
            )
        return samples[position]

    def _chain(self, frame: str, time: Time) -> dict[str, Transform]:
        """Each ancestor of frame, in order, with the transform from frame into it."""
        chain = {frame: Transform.identity()}
        current, accumulated = frame, Transform.identity()
        while current in self._samples:
            sample = self._sample(current, time.nanoseconds())
            accumulated = sample.transform @ accumulated
            current = sample.parent
            if current in chain:
                raise TransformLookupError(f"frame tree has a loop through {current!r}")
            chain[current] = accumulated
        return chain

    def _relative(
        self, target_frame: str, target_time: Time, source_frame: str, source_time: Time
    ) -> Transform:
        for frame in (target_frame, source_frame):
            if not self._known(frame):
                raise TransformLookupError(f"frame {frame!r} does not exist")
        source_chain = self._chain(source_frame, source_time)
        target_chain = self._chain(target_frame, target_time)
        common = next((f for f in source_chain if f in target_chain), None)
        if common is None:
            raise TransformLookupError(
                f"frames {target_frame!r} and {source_frame!r} are not connected"
            )
        return target_chain[common].inverse() @ source_chain[common]

    def lookup_transform(self, target_frame: str, source_frame: str, time: Time) -> TransformStamped:
        """The transform taking data in source_frame into target_frame at the given time."""
        transform = self._relative(target_frame, time, source_frame, time)
        return TransformStamped(Header(time, target_frame), source_frame, transform)

    def lookup_transform_full(
        self,
        target_frame: str,
        target_time: Time,
        source_frame: str,
        source_time: Time,
        fixed_frame: str,
    ) -> TransformStamped:
        """Transform data in source_frame at source_time into target_frame at target_time.

        The fixed frame is assumed not to move between the two times.
        """
        if not self._known(fixed_frame):
            raise TransformLookupError(f"frame {fixed_frame!r} does not exist")
        source_to_fixed = self._relative(fixed_frame, source_time, source_frame, source_time)
        target_to_fixed = self._relative(fixed_frame, target_time, target_frame, target_time)
        transform = target_to_fixed.inverse() @ source_to_fixed
        return TransformStamped(Header(target_time, target_frame), source_frame, transform)


def transform_as_matrix(transform: Transform | TransformStamped) -> np.ndarray:
    """The transform as a single-precision homogeneous 4x4 matrix."""
    if isinstance(transform, TransformStamped):
        transform = transform.transform
    return transform.as_matrix().astype(np.float32)


def _float_view(cloud: PointCloud2, offset: int, count: int, dtype: np.dtype) -> np.ndarray:
    needed = (count - 1) * cloud.point_step + offset + 4
    if needed > len(cloud.data):
        raise ValueError(f"point data holds {len(cloud.data)} bytes, {needed} needed")
    return np.ndarray(
        shape=(count,), dtype=dtype, buffer=cloud.data, offset=offset, strides=(cloud.point_step,)
    )


def transform_point_cloud2(matrix, cloud: PointCloud2) -> PointCloud2:
    """Apply a 4x4 matrix to the x/y/z coordinates and viewpoint of a cloud.

    Points with non-finite coordinates are left as they are, unless a finite
    "distance" field marks them as max-range points: then the distance stands
    in for x, is transformed, and the transformed x is stored back in distance
    while x becomes NaN. A cloud copy is returned.
    """
    matrix = np.asarray(matrix, dtype=np.float32)
    if matrix.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
    indices = [get_field_index(cloud, name) for name in ("x", "y", "z")]
    if any(index is None for index in indices):
        raise ValueError("input dataset has no X-Y-Z coordinates")
    xyz_fields = [cloud.fields[index] for index in indices]
    if any(f.datatype != PointFieldType.FLOAT32 for f in xyz_fields):
        raise ValueError("X-Y-Z coordinates not floats; only floats are supported")

    out = copy.deepcopy(cloud)
    count = cloud.width * cloud.height
    if count == 0:
        return out
    dtype = np.dtype(">f4" if cloud.is_bigendian else "<f4")

    x, y, z = (_float_view(out, f.offset, count, dtype) for f in xyz_fields)
    points = np.vstack([x, y, z, np.ones(count)]).astype(np.float32)
    finite = np.isfinite(points[:3]).all(axis=0)
    moved = finite.copy()

    distance = None
    max_range = np.zeros(count, dtype=bool)
    distance_index = get_field_index(cloud, "distance")
    if distance_index is not None:
        distance = _float_view(out, cloud.fields[distance_index].offset, count, dtype)
        max_range = ~finite & np.isfinite(distance)
        points[0, max_range] = distance[max_range]
        moved |= max_range

    result = np.where(moved, matrix @ points, points)
    if distance is not None and max_range.any():
        distance[max_range] = result[0, max_range]
        result[0, max_range] = math.nan
    x[:], y[:], z[:] = result[0], result[1], result[2]

    viewpoint_index = get_field_index(cloud, "vp_x")
    if viewpoint_index is not None:
        base = cloud.fields[viewpoint_index].offset
        views = [_float_view(out, base + 4 * k, count, dtype) for k in range(3)]
        viewpoints = np.vstack([*views, np.ones(count)]).astype(np.float32)
        moved_viewpoints = matrix @ viewpoints
        for k, view in enumerate(views):
            view[:] = moved_viewpoints[k]
    return out


def transform_point_cloud2_with(
    target_frame: str, transform: Transform | TransformStamped, cloud: PointCloud2
) -> PointCloud2:
    """Transform a cloud with a known transform and label it with target_frame."""
    if cloud.header.frame_id == target_frame:
        return copy.deepcopy(cloud)
    out = transform_point_cloud2(transform_as_matrix(transform), cloud)
    out.header.frame_id = target_frame
    return out


def transform_point_cloud2_to_frame(
    target_frame: str, cloud: PointCloud2, buffer: TransformLookup
) -> PointCloud2:
    """Transform a cloud into target_frame using the transform at the cloud's stamp.

    Raises TransformLookupError or ExtrapolationError when no transform is found.
    """
    if cloud.header.frame_id == target_frame:
        return copy.deepcopy(cloud)
    stamped = buffer.lookup_transform(target_frame, cloud.header.frame_id, cloud.header.stamp)
    out = transform_point_cloud2(transform_as_matrix(stamped), cloud)
    out.header.frame_id = target_frame
    return out
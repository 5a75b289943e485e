"""Library-side counterparts of the message types, and a typed point cloud."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

POINT_XYZ_DTYPE = np.dtype([("x", np.float32), ("y", np.float32), ("z", np.float32)])


def _as_bytearray(data) -> bytearray:
    return data if isinstance(data, bytearray) else bytearray(data)


@dataclass
class PCLHeader:
    """Header with a microsecond stamp and a sequence number."""

    seq: int = 0
    stamp: int = 0
    frame_id: str = ""


@dataclass
class PCLPointField:
    """Description of one field within a point record."""

    name: str = ""
    offset: int = 0
    datatype: int = 0
    count: int = 0


@dataclass
class PCLPointCloud2:
    """A point cloud as a flat binary blob described by its fields."""

    header: PCLHeader = field(default_factory=PCLHeader)
    height: int = 0
    width: int = 0
    fields: list[PCLPointField] = field(default_factory=list)
    is_bigendian: bool = False
    point_step: int = 0
    row_step: int = 0
    data: bytearray = field(default_factory=bytearray)
    is_dense: bool = False

    def __post_init__(self) -> None:
        self.data = _as_bytearray(self.data)


@dataclass
class PCLImage:
    """A raster image."""

    header: PCLHeader = field(default_factory=PCLHeader)
    height: int = 0
    width: int = 0
    encoding: str = ""
    is_bigendian: bool = False
    step: int = 0
    data: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.data = _as_bytearray(self.data)


@dataclass
class PCLPointIndices:
    """A subset of a point cloud given by point indices."""

    header: PCLHeader = field(default_factory=PCLHeader)
    indices: list[int] = field(default_factory=list)


@dataclass
class PCLModelCoefficients:
    """Coefficients of a fitted model."""

    header: PCLHeader = field(default_factory=PCLHeader)
    values: list[float] = field(default_factory=list)


@dataclass
class PCLVertices:
    """Indices of the vertices of one polygon."""

    vertices: list[int] = field(default_factory=list)


@dataclass
class PCLPolygonMesh:
    """A cloud of vertices together with the polygons over them."""

    header: PCLHeader = field(default_factory=PCLHeader)
    cloud: PCLPointCloud2 = field(default_factory=PCLPointCloud2)
    polygons: list[PCLVertices] = field(default_factory=list)


@dataclass
class PointCloud:
    """A typed point cloud backed by a structured numpy array.

    The points are stored row by row in a one-dimensional array. A
    two-dimensional array is taken as (height, width). Without explicit
    dimensions an unorganized cloud of height 1 is assumed (0 x 0 if empty).
    """

    points: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=POINT_XYZ_DTYPE))
    width: int | None = None
    height: int | None = None
    header: PCLHeader = field(default_factory=PCLHeader)
    is_dense: bool = True

    def __post_init__(self) -> None:
        points = np.asarray(self.points)
        if points.dtype.names is None:
            raise ValueError("points must be a structured array with named fields")
        if (self.width is None) != (self.height is None):
            raise ValueError("width and height must be given together")
        if points.ndim == 2 and self.width is None:
            self.height, self.width = points.shape
        elif points.ndim > 2:
            raise ValueError("points must be one- or two-dimensional")
        self.points = np.ascontiguousarray(points).reshape(-1)
        if self.width is None:
            count = len(self.points)
            self.width = count
            self.height = 1 if count else 0

    def is_organized(self) -> bool:
        """True if the cloud has an image-like layout (more than one row)."""
        return self.height > 1

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, key):
        if isinstance(key, tuple):
            column, row = key
            if not (0 <= column < self.width and 0 <= row < self.height):
                raise IndexError(f"point ({column}, {row}) outside {self.width}x{self.height}")
            return self.points[row * self.width + column]
        return self.points[key]
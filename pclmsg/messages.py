"""Message types for point clouds, images, indices, model coefficients and meshes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

NANOSECONDS_PER_SECOND = 1_000_000_000


class PointFieldType(IntEnum):
    """Datatype tag of a point field."""

    INT8 = 1
    UINT8 = 2
    INT16 = 3
    UINT16 = 4
    INT32 = 5
    UINT32 = 6
    FLOAT32 = 7
    FLOAT64 = 8

    def size(self) -> int:
        """Size in bytes of one element of this type."""
        return _FIELD_SIZES[self]


_FIELD_SIZES = {
    PointFieldType.INT8: 1,
    PointFieldType.UINT8: 1,
    PointFieldType.INT16: 2,
    PointFieldType.UINT16: 2,
    PointFieldType.INT32: 4,
    PointFieldType.UINT32: 4,
    PointFieldType.FLOAT32: 4,
    PointFieldType.FLOAT64: 8,
}


def _as_bytearray(data) -> bytearray:
    return data if isinstance(data, bytearray) else bytearray(data)


@dataclass(frozen=True, order=True)
class Time:
    """A non-negative point in time as whole seconds and nanoseconds."""

    sec: int = 0
    nanosec: int = 0

    def __post_init__(self) -> None:
        if self.sec < 0:
            raise ValueError("time cannot be negative")
        if not 0 <= self.nanosec < NANOSECONDS_PER_SECOND:
            raise ValueError(f"nanosec out of range: {self.nanosec}")

    @classmethod
    def from_nanoseconds(cls, nanoseconds: int) -> Time:
        """Build a time from a total count of nanoseconds."""
        if nanoseconds < 0:
            raise ValueError("time cannot be negative")
        sec, nanosec = divmod(int(nanoseconds), NANOSECONDS_PER_SECOND)
        return cls(sec, nanosec)

    def nanoseconds(self) -> int:
        """Total count of nanoseconds."""
        return self.sec * NANOSECONDS_PER_SECOND + self.nanosec


@dataclass
class Header:
    """Stamp and coordinate frame of a message."""

    stamp: Time = field(default_factory=Time)
    frame_id: str = ""


@dataclass
class PointField:
    """Description of one field within a point record."""

    name: str = ""
    offset: int = 0
    datatype: int = 0
    count: int = 0


@dataclass
class PointCloud2:
    """A point cloud as a flat binary blob described by its fields."""

    header: Header = field(default_factory=Header)
    height: int = 0
    width: int = 0
    fields: list[PointField] = field(default_factory=list)
    is_bigendian: bool = False
    point_step: int = 0
    row_step: int = 0
    data: bytearray = field(default_factory=bytearray)
    is_dense: bool = False

    def __post_init__(self) -> None:
        self.data = _as_bytearray(self.data)


@dataclass
class Image:
    """A raster image."""

    header: Header = field(default_factory=Header)
    height: int = 0
    width: int = 0
    encoding: str = ""
    is_bigendian: bool = False
    step: int = 0
    data: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.data = _as_bytearray(self.data)


@dataclass
class PointIndices:
    """A subset of a point cloud given by point indices."""

    header: Header = field(default_factory=Header)
    indices: list[int] = field(default_factory=list)


@dataclass
class ModelCoefficients:
    """Coefficients of a fitted model."""

    header: Header = field(default_factory=Header)
    values: list[float] = field(default_factory=list)


@dataclass
class Vertices:
    """Indices of the vertices of one polygon."""

    vertices: list[int] = field(default_factory=list)


@dataclass
class PolygonMesh:
    """A cloud of vertices together with the polygons over them."""

    header: Header = field(default_factory=Header)
    cloud: PointCloud2 = field(default_factory=PointCloud2)
    polygons: list[Vertices] = field(default_factory=list)
"""Planar polygons from the points of a 2D convex hull."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .conversions import header_from_pcl
from .messages import Header
from .pcl_types import PointCloud

_XYZ = ("x", "y", "z")


@dataclass
class Point32:
    """A point with single-precision coordinates."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class PolygonStamped:
    """A polygon given by its corner points, with a header."""

    header: Header = field(default_factory=Header)
    points: list[Point32] = field(default_factory=list)


def hull_polygon(hull: PointCloud) -> PolygonStamped | None:
    """Build a polygon from the points of a convex hull.

    Returns None when the hull has fewer than three points. The winding is
    judged from the first three points: if the normal of the plane they span,
    dotted with the second point, is below pi/2, the points are emitted in
    reverse order.
    """
    present = hull.points.dtype.names or ()
    missing = [name for name in _XYZ if name not in present]
    if missing:
        raise ValueError(f"hull has no X-Y-Z fields: {', '.join(missing)}")
    if len(hull.points) < 3:
        return None

    coords = np.stack([hull.points[name].astype(np.float32) for name in _XYZ], axis=1)
    origin, b, a = coords[1], coords[0], coords[2]
    normal = np.cross(a - origin, b - origin)
    theta = float(np.dot(normal, origin))
    ordered = coords[::-1] if theta < math.pi / 2.0 else coords

    return PolygonStamped(
        header=header_from_pcl(hull.header),
        points=[Point32(float(x), float(y), float(z)) for x, y, z in ordered],
    )
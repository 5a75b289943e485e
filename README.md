# pclmsg

Point cloud message types, conversions between message and PCL-style
representations, and rigid-body transforms for point clouds. It is written in
plain Python and uses NumPy.

## Installation

```
pip install .
```

To install the test requirements and run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `pclmsg.messages`: message types. `Time` holds seconds and nanoseconds and
  has `Time.from_nanoseconds` and `Time.nanoseconds()`. The other types are
  `Header`, `PointField`, `PointCloud2`, `Image`, `PointIndices`,
  `ModelCoefficients`, `Vertices` and `PolygonMesh`. `PointFieldType` lists
  the field datatypes, and its `size()` gives the byte size of each one.
- `pclmsg.pcl_types`: the PCL-side types `PCLHeader`, `PCLPointField`,
  `PCLPointCloud2`, `PCLImage`, `PCLPointIndices`, `PCLModelCoefficients`,
  `PCLVertices` and `PCLPolygonMesh`. It also has a typed `PointCloud`,
  which is backed by a structured NumPy array and has `is_organized()` and
  `(column, row)` indexing.
- `pclmsg.conversions`: conversions in both directions, such as
  `stamp_to_pcl` / `stamp_from_pcl`, `header_to_pcl` / `header_from_pcl`,
  `cloud_to_pcl` / `cloud_from_pcl` and `mesh_to_pcl` / `mesh_from_pcl`.
  - PCL stamps are in microseconds. Converting to them drops anything finer
    than a microsecond.
  - Converting a header to PCL always sets the sequence number to 0.
  - `fields_from_pcl` returns the fields sorted by offset.
- `pclmsg.cloud_ops`:
  - `get_field_index` returns a field's position, or `None` if the field is
    missing.
  - `get_fields_list` returns the field names joined by spaces.
  - `concatenate_point_cloud` appends one cloud to another and returns a new
    cloud of height 1. It strips `_` padding fields and treats `rgb` and
    `rgba` as the same field. It raises `ValueError` when the fields do not
    match.
- `pclmsg.transforms`:
  - `Transform` is a translation plus an (x, y, z, w) quaternion. It
    provides `as_matrix()`, `rotation_matrix()` and `inverse()`, and `a @ b`
    composes two transforms.
  - `TransformStamped` holds a transform with its header and child frame.
  - `TransformLookup` is a frame tree built from stamped transforms. Its
    `lookup_transform` and `lookup_transform_full` raise
    `TransformLookupError` or `ExtrapolationError`, which both derive from
    `TransformError`.
  - `transform_as_matrix` returns the 4×4 matrix of a transform as float32.
  - `transform_point_cloud2`, `transform_point_cloud2_with` and
    `transform_point_cloud2_to_frame` apply a transform to the float32
    `x`/`y`/`z` fields of a `PointCloud2` and return a copy. Max-range
    points stored in a `distance` field are transformed too, and so are the
    viewpoint fields starting at `vp_x`.
- `pclmsg.cloud_transforms`: functions that transform a typed `PointCloud`.
  - `transform_point_cloud` and `transform_point_cloud_with_normals` take a
    given transform.
  - `transform_point_cloud_to_frame` and
    `transform_point_cloud_with_normals_to_frame` look the transform up at
    the cloud's stamp.
  - `transform_point_cloud_full` and `transform_point_cloud_with_normals_full`
    work between two times through a fixed frame.
- `pclmsg.validation`:
  - `NodeParameters` holds the default node settings: queue size 3, with no
    indices and no approximate sync.
  - `is_valid_cloud2` and `is_valid_cloud` check that a cloud's sizes are
    consistent, and log a warning when they are not.
  - `is_valid_indices` and `is_valid_model` accept every input.
- `pclmsg.convex_hull`: `hull_polygon` turns the points of a hull into a
  `PolygonStamped` of `Point32`. It reverses the point order when the
  winding test on the first three points asks for it. It returns `None` for
  fewer than three points.
- `pclmsg.mls`: `MLSConfig` and `MovingLeastSquaresSettings`. The
  `apply_config` method takes over the parameters that changed and returns
  their names.

## Example

```python
import struct

from pclmsg.conversions import stamp_from_pcl, stamp_to_pcl
from pclmsg.messages import Header, PointCloud2, PointField, PointFieldType, Time
from pclmsg.transforms import (
    Transform,
    TransformLookup,
    TransformStamped,
    transform_point_cloud2_to_frame,
)

stamp = Time.from_nanoseconds(1_423_680_574_746_000_000)
assert stamp_from_pcl(stamp_to_pcl(stamp)) == stamp

# A static link (stamped at time zero) from "laser" into "base_link".
buffer = TransformLookup([
    TransformStamped(Header(Time(0), "base_link"), "laser",
                     Transform(translation=(1.0, 0.0, 0.0))),
])

fields = [PointField(name, 4 * i, PointFieldType.FLOAT32, 1)
          for i, name in enumerate("xyz")]
cloud = PointCloud2(header=Header(Time(5), "laser"), height=1, width=1,
                    fields=fields, point_step=12, row_step=12,
                    data=struct.pack("<3f", 1.0, 2.0, 3.0), is_dense=True)

moved = transform_point_cloud2_to_frame("base_link", cloud, buffer)
print(moved.header.frame_id, struct.unpack("<3f", moved.data))
# base_link (2.0, 2.0, 3.0)
```

## What it does not do

This is a library only: it has no commands, and the package does not:

- send or receive messages over a network;
- read or write PCD files, or read recorded logs;
- compute convex hulls: `hull_polygon` only orders the points of a hull you
  already have;
- perform moving least squares smoothing: `pclmsg.mls` only keeps track of
  its parameters.
"""Field lookup and concatenation for point cloud messages."""

from __future__ import annotations

import copy

from .messages import PointCloud2, PointFieldType

_PADDING = "_"


def get_field_index(cloud: PointCloud2, field_name: str) -> int | None:
    """Position of the named field in the cloud's fields, or None if absent."""
    return next(
        (index for index, field in enumerate(cloud.fields) if field.name == field_name), None
    )


def get_fields_list(cloud: PointCloud2) -> str:
    """Names of the cloud's fields separated by single spaces."""
    return " ".join(field.name for field in cloud.fields)


def _field_size(datatype: int) -> int:
    try:
        return PointFieldType(datatype).size()
    except ValueError:
        return 0


def _names_compatible(name1: str, name2: str) -> bool:
    return name1 == name2 or {name1, name2} == {"rgb", "rgba"}


def concatenate_point_cloud(cloud1: PointCloud2, cloud2: PointCloud2) -> PointCloud2:
    """Append the points of cloud2 to those of cloud1 as a new unorganized cloud.

    Padding fields named "_" are stripped when copying the second cloud. The
    fields "rgb" and "rgba" count as matching. Raises ValueError when the
    fields of the two clouds do not match.
    """
    count1 = cloud1.width * cloud1.height
    count2 = cloud2.width * cloud2.height
    if count1 == 0 and count2 > 0:
        return copy.deepcopy(cloud2)
    if count1 > 0 and count2 == 0:
        return copy.deepcopy(cloud1)

    strip = any(f.name == _PADDING for f in cloud1.fields) or any(
        f.name == _PADDING for f in cloud2.fields
    )

    if not strip and len(cloud1.fields) != len(cloud2.fields):
        raise ValueError(
            f"number of fields in cloud1 ({len(cloud1.fields)}) != "
            f"number of fields in cloud2 ({len(cloud2.fields)})"
        )

    if not strip:
        for index, (field1, field2) in enumerate(zip(cloud1.fields, cloud2.fields)):
            if not _names_compatible(field1.name, field2.name):
                raise ValueError(
                    f"name of field {index} in cloud1, {field1.name}, "
                    f"does not match name in cloud2, {field2.name}"
                )

    out = copy.deepcopy(cloud1)
    base = len(out.data)
    out.width = count1 + count2
    out.height = 1
    out.row_step = out.width * out.point_step
    out.is_dense = cloud1.is_dense and cloud2.is_dense

    if not strip:
        out.data.extend(cloud2.data)
        return out

    fields2 = [f for f in cloud2.fields if f.name != _PADDING]
    sizes2 = [f.count * _field_size(f.datatype) for f in fields2]
    out.data.extend(bytes(count2 * cloud1.point_step))

    for point in range(count2):
        src_base = point * cloud2.point_step
        dst_base = base + point * cloud1.point_step
        i = 0
        for field2, size in zip(fields2, sizes2):
            if i >= len(cloud1.fields):
                break
            field1 = cloud1.fields[i]
            if field1.name == _PADDING:
                i += 1
                continue
            if _names_compatible(field1.name, field2.name):
                src = src_base + field2.offset
                dst = dst_base + field1.offset
                out.data[dst:dst + size] = cloud2.data[src:src + size]
                i += 1
    return out
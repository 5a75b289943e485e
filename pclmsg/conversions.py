"""Conversions between message types and their library-side counterparts."""

from __future__ import annotations

from .messages import (
    Header,
    Image,
    ModelCoefficients,
    PointCloud2,
    PointField,
    PointIndices,
    PolygonMesh,
    Time,
    Vertices,
)
from .pcl_types import (
    PCLHeader,
    PCLImage,
    PCLModelCoefficients,
    PCLPointCloud2,
    PCLPointField,
    PCLPointIndices,
    PCLPolygonMesh,
    PCLVertices,
)

_NS_PER_US = 1000


def stamp_to_pcl(stamp: Time) -> int:
    """Convert a time to a stamp in microseconds, dropping sub-microsecond parts."""
    return stamp.nanoseconds() // _NS_PER_US


def stamp_from_pcl(pcl_stamp: int) -> Time:
    """Convert a stamp in microseconds to a time."""
    return Time.from_nanoseconds(pcl_stamp * _NS_PER_US)


def header_to_pcl(header: Header) -> PCLHeader:
    """Convert a message header; the sequence number is always 0."""
    return PCLHeader(seq=0, stamp=stamp_to_pcl(header.stamp), frame_id=header.frame_id)


def header_from_pcl(pcl_header: PCLHeader) -> Header:
    """Convert a library header to a message header."""
    return Header(stamp=stamp_from_pcl(pcl_header.stamp), frame_id=pcl_header.frame_id)


def image_to_pcl(image: Image) -> PCLImage:
    """Convert an image message."""
    return PCLImage(
        header=header_to_pcl(image.header),
        height=image.height,
        width=image.width,
        encoding=image.encoding,
        is_bigendian=image.is_bigendian,
        step=image.step,
        data=bytearray(image.data),
    )


def image_from_pcl(pcl_image: PCLImage) -> Image:
    """Convert a library image to an image message."""
    return Image(
        header=header_from_pcl(pcl_image.header),
        height=pcl_image.height,
        width=pcl_image.width,
        encoding=pcl_image.encoding,
        is_bigendian=pcl_image.is_bigendian,
        step=pcl_image.step,
        data=bytearray(pcl_image.data),
    )


def field_to_pcl(field: PointField) -> PCLPointField:
    """Convert one point field description."""
    return PCLPointField(
        name=field.name, offset=field.offset, datatype=field.datatype, count=field.count
    )


def field_from_pcl(pcl_field: PCLPointField) -> PointField:
    """Convert one library point field description."""
    return PointField(
        name=pcl_field.name,
        offset=pcl_field.offset,
        datatype=pcl_field.datatype,
        count=pcl_field.count,
    )


def fields_to_pcl(fields) -> list[PCLPointField]:
    """Convert a sequence of point fields, keeping their order."""
    return [field_to_pcl(field) for field in fields]


def fields_from_pcl(pcl_fields) -> list[PointField]:
    """Convert a sequence of library point fields, sorted by offset."""
    return sorted((field_from_pcl(field) for field in pcl_fields), key=lambda f: f.offset)


def cloud_to_pcl(cloud: PointCloud2) -> PCLPointCloud2:
    """Convert a point cloud message."""
    return PCLPointCloud2(
        header=header_to_pcl(cloud.header),
        height=cloud.height,
        width=cloud.width,
        fields=fields_to_pcl(cloud.fields),
        is_bigendian=cloud.is_bigendian,
        point_step=cloud.point_step,
        row_step=cloud.row_step,
        data=bytearray(cloud.data),
        is_dense=cloud.is_dense,
    )


def cloud_from_pcl(pcl_cloud: PCLPointCloud2) -> PointCloud2:
    """Convert a library point cloud to a point cloud message."""
    return PointCloud2(
        header=header_from_pcl(pcl_cloud.header),
        height=pcl_cloud.height,
        width=pcl_cloud.width,
        fields=fields_from_pcl(pcl_cloud.fields),
        is_bigendian=pcl_cloud.is_bigendian,
        point_step=pcl_cloud.point_step,
        row_step=pcl_cloud.row_step,
        data=bytearray(pcl_cloud.data),
        is_dense=pcl_cloud.is_dense,
    )


def indices_to_pcl(indices: PointIndices) -> PCLPointIndices:
    """Convert a point indices message."""
    return PCLPointIndices(header=header_to_pcl(indices.header), indices=list(indices.indices))


def indices_from_pcl(pcl_indices: PCLPointIndices) -> PointIndices:
    """Convert library point indices to a message."""
    return PointIndices(
        header=header_from_pcl(pcl_indices.header), indices=list(pcl_indices.indices)
    )


def coefficients_to_pcl(coefficients: ModelCoefficients) -> PCLModelCoefficients:
    """Convert a model coefficients message."""
    return PCLModelCoefficients(
        header=header_to_pcl(coefficients.header), values=list(coefficients.values)
    )


def coefficients_from_pcl(pcl_coefficients: PCLModelCoefficients) -> ModelCoefficients:
    """Convert library model coefficients to a message."""
    return ModelCoefficients(
        header=header_from_pcl(pcl_coefficients.header), values=list(pcl_coefficients.values)
    )


def vertices_to_pcl(vertices: Vertices) -> PCLVertices:
    """Convert one polygon's vertex indices."""
    return PCLVertices(vertices=[int(v) for v in vertices.vertices])


def vertices_from_pcl(pcl_vertices: PCLVertices) -> Vertices:
    """Convert one library polygon's vertex indices."""
    return Vertices(vertices=[int(v) for v in pcl_vertices.vertices])


def mesh_to_pcl(mesh: PolygonMesh) -> PCLPolygonMesh:
    """Convert a polygon mesh message."""
    return PCLPolygonMesh(
        header=header_to_pcl(mesh.header),
        cloud=cloud_to_pcl(mesh.cloud),
        polygons=[vertices_to_pcl(polygon) for polygon in mesh.polygons],
    )


def mesh_from_pcl(pcl_mesh: PCLPolygonMesh) -> PolygonMesh:
    """Convert a library polygon mesh to a message."""
    return PolygonMesh(
        header=header_from_pcl(pcl_mesh.header),
        cloud=cloud_from_pcl(pcl_mesh.cloud),
        polygons=[vertices_from_pcl(polygon) for polygon in pcl_mesh.polygons],
    )
"""Node parameters and sanity checks for incoming messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .conversions import stamp_from_pcl
from .messages import ModelCoefficients, PointCloud2, PointIndices
from .pcl_types import PointCloud

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeParameters:
    """Settings shared by point cloud processing nodes."""

    max_queue_size: int = 3
    use_indices: bool = False
    transient_local_indices: bool = False
    approximate_sync: bool = False


def is_valid_cloud2(cloud: PointCloud2, topic_name: str = "input") -> bool:
    """True if the data size matches width * height * point_step; warns otherwise."""
    if cloud.width * cloud.height * cloud.point_step != len(cloud.data):
        logger.warning(
            "Invalid PointCloud (data = %d, width = %d, height = %d, step = %d) "
            "with stamp %d.%09d, and frame %s on topic %s received!",
            len(cloud.data),
            cloud.width,
            cloud.height,
            cloud.point_step,
            cloud.header.stamp.sec,
            cloud.header.stamp.nanosec,
            cloud.header.frame_id,
            topic_name,
        )
        return False
    return True


def is_valid_cloud(cloud: PointCloud, topic_name: str = "input") -> bool:
    """True if the number of points matches width * height; warns otherwise."""
    if cloud.width * cloud.height != len(cloud.points):
        stamp = stamp_from_pcl(cloud.header.stamp)
        logger.warning(
            "Invalid PointCloud (points = %d, width = %d, height = %d) "
            "with stamp %d.%09d, and frame %s on topic %s received!",
            len(cloud.points),
            cloud.width,
            cloud.height,
            stamp.sec,
            stamp.nanosec,
            cloud.header.frame_id,
            topic_name,
        )
        return False
    return True


def is_valid_indices(indices: PointIndices, topic_name: str = "indices") -> bool:
    """Point indices are always accepted, empty ones included."""
    return True


def is_valid_model(model: ModelCoefficients, topic_name: str = "model") -> bool:
    """Model coefficients are always accepted, empty ones included."""
    return True
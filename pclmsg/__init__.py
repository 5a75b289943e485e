"""Point cloud messages, PCL-style conversions and rigid transforms."""

__version__ = "0.1.0"
__all__ = [
    "cloud_ops",
    "cloud_transforms",
    "conversions",
    "convex_hull",
    "messages",
    "mls",
    "pcl_types",
    "transforms",
    "validation",
]
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pclmsg"
version = "0.1.0"
description = "Point cloud messages, PCL-style conversions and rigid transforms for point cloud data"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["point cloud", "pointcloud2", "pcl", "transforms", "robotics", "lidar"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pclmsg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "planesweep"
version = "0.1.0"
description = "Plane-sweep multi-view depth estimation with graph-cut refinement"
requires-python = ">=3.10"
keywords = ["depth estimation", "plane sweep", "stereo", "graph cut", "max-flow", "multi-view"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
planesweep = "planesweep.depth:main"

[tool.hatch.build.targets.wheel]
packages = ["planesweep"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

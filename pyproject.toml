[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vectiles"
version = "0.1.0"
description = "Building blocks for vector map tiles: fixed-point geometry, vector tile geometry encoding, shapefile reading and a compact node coordinate index"
requires-python = ">=3.10"
dependencies = []
keywords = ["gis", "vector-tiles", "mvt", "openstreetmap", "shapefile", "web-mercator"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vectiles"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

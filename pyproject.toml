[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tintiles"
version = "0.1.0"
description = "Quantized-mesh terrain tile encoding, zoom-level estimation and benchmark statistics"
requires-python = ">=3.10"
dependencies = []
keywords = ["terrain", "tin", "quantized-mesh", "zoom", "gis"]
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
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tintiles"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

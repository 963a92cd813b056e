[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imgproclib"
version = "0.1.0"
description = "Processing tasks for 2D detector frames: flip, rotation, flatfield correction, peak finding, region spectra and region statistics."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["image", "detector", "roi", "flatfield", "peak", "spectrum", "processing"]
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

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["imgproclib"]

[tool.pytest.ini_options]
addopts = "-ra"

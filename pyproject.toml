[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rendertoy"
version = "0.1.0"
description = "Building blocks for a physically based path tracer: sampling, phase functions, media, microfacets, textures and geometry"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["rendering", "path tracing", "ray tracing", "microfacet", "sampling", "sdf"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rendertoy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yart"
version = "0.1.0"
description = "A small path tracer with spheres, planes, boxes, instancing, area lights and PNG output."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["ray tracing", "path tracing", "rendering", "graphics", "cornell box"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
yart-examples = "yart.examples:main"

[tool.hatch.build.targets.wheel]
packages = ["yart"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hybridheat"
version = "0.1.0"
description = "Two-dimensional heat equation solver with strip decomposition, plus small parallel-computing demos"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "heat equation",
    "diffusion",
    "finite difference",
    "stencil",
    "domain decomposition",
    "halo exchange",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Education",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hybridheat = "hybridheat.solver:main"
hybridheat-fileview = "hybridheat.fileview:main"
hybridheat-affinity = "hybridheat.affinity:main"
hybridheat-hello = "hybridheat.hello:main"

[tool.hatch.build.targets.wheel]
packages = ["hybridheat"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "foxengine"
version = "0.1.0"
description = "Game engine core pieces: actor scheduling, script delays, GCL disassembly, stage file loading and the rank screen."
requires-python = ">=3.10"
dependencies = []
keywords = ["game engine", "actors", "gcl", "disassembler", "stage loader", "dar archive"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["foxengine"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

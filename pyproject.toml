[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inkrt"
version = "0.1.0"
description = "Building blocks for ink story runtimes: tagged values, restorable stacks, string tables, string operations and binary snapshots"
requires-python = ">=3.10"
dependencies = []
keywords = ["ink", "interactive fiction", "narrative", "runtime", "snapshot"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["inkrt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hipolite"
version = "0.1.0"
description = "Pure-Python HIPO-style schema dictionaries, typed banks, composite nodes, event buffers, file headers and event indexes"
requires-python = ">=3.10"
dependencies = []
keywords = ["hipo", "physics", "event", "bank", "schema", "binary format"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hipolite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

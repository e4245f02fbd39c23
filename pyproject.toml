[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metiskit"
version = "0.1.0"
description = "Graph and mesh file I/O, symbolic factorization, separator refinement and command-line option parsing for graph partitioning workflows"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "graph partitioning",
    "nested dissection",
    "fill-reducing ordering",
    "symbolic factorization",
    "sparse matrices",
    "vertex separator",
    "mesh",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cmpfillin = "metiskit.cmpfillin:main"

[tool.hatch.build.targets.wheel]
packages = ["metiskit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kmeanslab"
version = "0.1.0"
description = "K-means clustering experiments on tabular datasets, plus small threading demos"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "k-means",
    "clustering",
    "experiments",
    "benchmark",
    "threads",
    "producer-consumer",
    "logging",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kmeanslab = "kmeanslab.cli:main"
kmeanslab-producer-consumer = "kmeanslab.producer_consumer:main"
kmeanslab-token-ring = "kmeanslab.token_ring:main"
kmeanslab-hello = "kmeanslab.hello:main"

[tool.hatch.build.targets.wheel]
packages = ["kmeanslab"]

[tool.hatch.build.targets.sdist]
include = ["kmeanslab", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
